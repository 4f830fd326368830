"""spuria -- HTTP-triggered shell command gateway.

Maps URL paths to pre-registered shell command templates. A GET request
to a registered path runs its command and reports success or failure,
which turns webhook-style HTTP calls into local process invocations.
"""

__version__ = "0.1.0"
