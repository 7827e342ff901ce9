# =============================================================================
# Outcome - Result of One Dispatch Attempt
# =============================================================================
# Every invocation settles into exactly one of:
# - Success(value)
# - StructuredFailure(error)   handler raised a LambdaReqError
# - UnhandledFault(error)      any other exception
# - UnmatchedRoute(route)      no handler registered
# =============================================================================

from dataclasses import dataclass
from typing import Any, Optional, Union

from lambdareq.errors import LambdaReqError


@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class StructuredFailure:
    error: LambdaReqError

    @property
    def status(self) -> int:
        return self.error.status

    @property
    def payload(self) -> Any:
        return self.error.message


@dataclass(frozen=True)
class UnhandledFault:
    error: BaseException


@dataclass(frozen=True)
class UnmatchedRoute:
    route: Optional[str]


Outcome = Union[Success, StructuredFailure, UnhandledFault, UnmatchedRoute]


def outcome_from_error(error: BaseException) -> Outcome:
    """Wrap an exception raised by a handler."""
    if isinstance(error, LambdaReqError):
        return StructuredFailure(error)
    return UnhandledFault(error)
