"""Domain models for spuria.

All models use Pydantic v2 for validation and are immutable once built.
"""

from spuria.domain.models import DispatchResult, ExecutionResult, RequestInfo

__all__ = [
    "DispatchResult",
    "ExecutionResult",
    "RequestInfo",
]
