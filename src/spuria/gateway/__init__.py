"""Request-dispatch pipeline for spuria.

Public API:
    Dispatcher -- per-request orchestration and result mapping
    AuthorizationFilter -- source-address allow-list
    RateLimiter -- per-path fixed-window limiter
    ParameterSubstitutor -- query-parameter injection into templates
    CommandExecutor -- shell subprocess runner
"""

from spuria.gateway.auth import AuthorizationFilter
from spuria.gateway.dispatcher import Dispatcher
from spuria.gateway.executor import CommandExecutor
from spuria.gateway.ratelimit import RateLimiter
from spuria.gateway.substitution import ParameterSubstitutor

__all__ = [
    "AuthorizationFilter",
    "CommandExecutor",
    "Dispatcher",
    "ParameterSubstitutor",
    "RateLimiter",
]
