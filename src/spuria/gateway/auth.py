"""Source-address authorization."""

from __future__ import annotations

from typing import Iterable


class AuthorizationFilter:
    """Accepts or rejects a request by its source address.

    Matching is an exact string comparison against the allow-set; there is
    no CIDR or hostname matching. An empty allow-set disables the check.
    """

    def __init__(self, allowed: Iterable[str] = ()) -> None:
        self._allowed = frozenset(allowed)

    def is_allowed(self, source_address: str) -> bool:
        if not self._allowed:
            return True
        return source_address in self._allowed
