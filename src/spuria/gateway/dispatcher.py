"""Request dispatcher: the gateway's per-request pipeline.

Runs authorization, rate limiting, route lookup, parameter substitution
and command execution in order, and maps each outcome to an HTTP status
and body. The dispatcher also owns all shared state of the server (route
table, limiter, configuration), so one instance is built at startup and
handed to the HTTP layer.
"""

from __future__ import annotations

import logging

from spuria.config.settings import Settings
from spuria.domain.models import DispatchResult, RequestInfo
from spuria.errors import (
    AuthorizationDenied,
    ExecutionError,
    GatewayError,
    RateLimited,
    RouteNotFound,
    SubstitutionError,
)
from spuria.gateway.auth import AuthorizationFilter
from spuria.gateway.executor import CommandExecutor
from spuria.gateway.ratelimit import RateLimiter
from spuria.gateway.substitution import ParameterSubstitutor
from spuria.routes import RouteTable
from spuria.utils.logging import log_event

logger = logging.getLogger(__name__)

ROOT_PATH = "/"
METRICS_PATH = "/metrics"
METRICS_BODY = "# TYPE isupdummy counter\nisupdummy 1\n"


class Dispatcher:
    """Turns a :class:`RequestInfo` into a :class:`DispatchResult`.

    Usage::

        dispatcher = Dispatcher.from_settings(settings, routes)
        result = await dispatcher.dispatch(request_info)
    """

    def __init__(
        self,
        routes: RouteTable,
        auth: AuthorizationFilter,
        limiter: RateLimiter,
        executor: CommandExecutor,
        substitutor: ParameterSubstitutor | None = None,
        return_result: bool = False,
    ) -> None:
        self.routes = routes
        self.auth = auth
        self.limiter = limiter
        self.executor = executor
        self.substitutor = substitutor
        self.return_result = return_result

    @classmethod
    def from_settings(cls, settings: Settings, routes: RouteTable) -> Dispatcher:
        dispatch = settings.dispatch
        substitutor = None
        if dispatch.replace_params:
            substitutor = ParameterSubstitutor(
                dispatch.replace_regex, continue_on_error=dispatch.continue_on_error
            )
        return cls(
            routes=routes,
            auth=AuthorizationFilter(settings.access.allowed_ips),
            limiter=RateLimiter(dispatch.rate_limit),
            executor=CommandExecutor(shell=dispatch.shell),
            substitutor=substitutor,
            return_result=dispatch.return_result,
        )

    async def dispatch(self, request: RequestInfo) -> DispatchResult | None:
        """Handle one request.

        Returns None when the request has to be abandoned because the
        transport reported no source address.
        """
        if request.path == METRICS_PATH:
            return DispatchResult(status_code=200, body=METRICS_BODY)

        if request.path == ROOT_PATH:
            result = DispatchResult(status_code=200)
            self._log_request(request, result)
            return result

        if request.client_host is None:
            logger.error("Could not determine source address for %s, dropping request", request.path)
            return None

        try:
            result = await self._run(request)
        except GatewayError as e:
            result = self._error_result(e)
        except Exception as e:
            logger.exception("Unexpected error while dispatching %s", request.path)
            result = DispatchResult(status_code=500, body="ERR", error=repr(e))

        self._log_request(request, result)
        return result

    async def _run(self, request: RequestInfo) -> DispatchResult:
        path = request.path

        if not self.auth.is_allowed(request.client_host or ""):
            raise AuthorizationDenied(f"{request.client_host} is not whitelisted")

        if not self.limiter.try_acquire(path):
            raise RateLimited(f"rate limit of {self.limiter.limit}/min exceeded for {path}")

        template = self.routes.lookup(path)
        if template is None:
            raise RouteNotFound(path)

        command = template
        params = request.query_params()
        if self.substitutor is not None and params:
            logger.info("replacing params (path=%s params=%s)", path, params)
            command = self.substitutor.substitute(template, params, path=path)

        execution = await self.executor.execute(command, path=path)
        if not execution.ok:
            raise ExecutionError(execution)

        body = execution.stdout if self.return_result else "OK"
        return DispatchResult(status_code=200, body=body)

    def _error_result(self, error: GatewayError) -> DispatchResult:
        body = error.body
        if isinstance(error, ExecutionError) and self.return_result:
            body = error.result.stderr
        elif isinstance(error, SubstitutionError) and self.return_result:
            # No command ran, so there is no stderr to echo.
            body = ""
        logged: str | None = str(error)
        if isinstance(error, (AuthorizationDenied, RateLimited, RouteNotFound)):
            logged = None
        return DispatchResult(status_code=error.status_code, body=body, error=logged)

    def _log_request(self, request: RequestInfo, result: DispatchResult) -> None:
        log_event(
            logger,
            logging.INFO,
            "request",
            method=request.method,
            url=request.path,
            status=result.status_code,
            source=request.source,
            proto=request.proto,
            host=request.host,
            referer=request.referer,
            useragent=request.user_agent,
            err=result.error,
        )
