# =============================================================================
# Errors
# =============================================================================
# Error kinds raised by the dispatcher and by handler authors.
#
# - ConfigurationError: malformed event/callback at construction time
# - LambdaReqError: structured, caller-visible failure raised by handlers
# - UnmatchedRouteError: no handler registered for the current route
# - DispatchStateError: dispatcher used outside its lifecycle
# - TaskInvocationError: task client failures
# =============================================================================

from typing import Any, Optional


class LambdaReqBaseError(Exception):
    """Base class for all lambdareq errors."""


class ConfigurationError(LambdaReqBaseError):
    """Raised when a dispatcher is constructed with a malformed event or callback."""


class DispatchStateError(LambdaReqBaseError):
    """Raised when a dispatcher is invoked twice or mutated after invoke()."""


class LambdaReqError(LambdaReqBaseError):
    """
    Structured failure raised by handlers.

    The message is any JSON-serializable payload and is returned to
    gateway callers as the response body, with status as the status code.

    Usage:
        raise LambdaReqError(
            message={"error": "Invalid data", "code": "invalidUserData"},
            status=401,
        )
    """

    def __init__(self, message: Any = None, status: int = 500):
        super().__init__(message)
        self.message = message
        self.status = status

    def to_dict(self) -> dict:
        return {"message": self.message, "status": self.status}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status={self.status})"


class UnmatchedRouteError(LambdaReqError):
    """No handler is registered for the route of the current event."""

    def __init__(self, route: Optional[str]):
        super().__init__(message={"error": f"Unhandled route: {route}"}, status=404)
        self.route = route


class TaskInvocationError(LambdaReqBaseError):
    """A task invocation through TaskClient failed."""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload
