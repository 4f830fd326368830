"""Core domain models for the spuria gateway.

These models represent the data flowing through one request: the
framework-independent request snapshot handed to the dispatcher, the
outcome of running a command, and the response the dispatcher decides on.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class RequestInfo(BaseModel):
    """The parts of an inbound HTTP request the dispatcher needs.

    ``client_host`` is ``None`` when the transport did not report a peer
    address; such requests are abandoned before dispatch.
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="GET")
    path: str
    query: tuple[tuple[str, str], ...] = Field(
        default=(), description="Query parameters in request order, repeated keys kept"
    )
    client_host: str | None = Field(default=None)
    client_port: int | None = Field(default=None)
    proto: str = Field(default="HTTP/1.1")
    host: str = Field(default="")
    referer: str = Field(default="")
    user_agent: str = Field(default="")

    @property
    def source(self) -> str:
        """Peer address as ``host:port``, the form used in request logs."""
        if self.client_host is None:
            return ""
        if self.client_port is None:
            return self.client_host
        host = f"[{self.client_host}]" if ":" in self.client_host else self.client_host
        return f"{host}:{self.client_port}"

    def query_params(self) -> dict[str, list[str]]:
        """Group query items by name, keeping first-seen order."""
        params: dict[str, list[str]] = {}
        for name, value in self.query:
            params.setdefault(name, []).append(value)
        return params


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


class ExecutionResult(BaseModel):
    """Outcome of one command run.

    ``error`` is set when the command exited nonzero or could not be
    started; the captured streams are kept either way.
    """

    model_config = ConfigDict(frozen=True)

    command: str
    error: str | None = Field(default=None)
    returncode: int | None = Field(default=None, description="None if the process never started")
    stdout: str = Field(default="")
    stderr: str = Field(default="")
    duration: float = Field(default=0.0, ge=0, description="Wall-clock seconds")

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class DispatchResult(BaseModel):
    """Status and body the HTTP layer should send back."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str = Field(default="")
    error: str | None = Field(default=None)
    content_type: str = Field(default="text/plain; charset=utf-8")
