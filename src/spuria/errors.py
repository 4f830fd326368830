"""Exception types raised by the gateway.

Recoverable errors carry the HTTP status and body they map to, so the
dispatcher can turn any of them into a response at the request boundary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spuria.domain.models import ExecutionResult


class ConfigurationError(Exception):
    """Raised at startup when settings or the route source are unusable."""


class GatewayError(Exception):
    """Base class for errors that end a single request."""

    status_code: int = 500
    body: str = "ERR"

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        if body is not None:
            self.body = body


class AuthorizationDenied(GatewayError):
    status_code = 403
    body = "NOACCESS"


class RateLimited(GatewayError):
    status_code = 429
    body = ""


class RouteNotFound(GatewayError):
    status_code = 404

    def __init__(self, path: str) -> None:
        super().__init__(
            f"no route for {path}",
            body=f"URL not found or configured! ({quote_path(path)})",
        )
        self.path = path


class SubstitutionError(GatewayError):
    """A query parameter could not be substituted into the command.

    ``reason`` is one of ``"arity"``, ``"prefix"`` or ``"pattern"``.
    """

    def __init__(self, message: str, reason: str, name: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.name = name


class ExecutionError(GatewayError):
    """The command exited nonzero or could not be started."""

    def __init__(self, result: ExecutionResult) -> None:
        super().__init__(result.error or "execution failed")
        self.result = result


_SHORT_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def quote_path(path: str) -> str:
    """Double-quote a path, escaping backslashes, quotes and control characters."""
    out = ['"']
    for ch in path:
        if ch in ('"', "\\"):
            out.append("\\" + ch)
        elif ch in _SHORT_ESCAPES:
            out.append(_SHORT_ESCAPES[ch])
        elif not ch.isprintable():
            code = ord(ch)
            if code < 0x80:
                out.append(f"\\x{code:02x}")
            elif code < 0x10000:
                out.append(f"\\u{code:04x}")
            else:
                out.append(f"\\U{code:08x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)
