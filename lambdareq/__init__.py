# =============================================================================
# lambdareq - Lambda Request Dispatcher
# =============================================================================
# Routes API Gateway requests and task invocations arriving at one Lambda
# function to registered handlers, and maps results back to the response
# shape each trigger expects.
# =============================================================================

from lambdareq.dispatcher import DispatchState, LambdaReq
from lambdareq.errors import (
    ConfigurationError,
    DispatchStateError,
    LambdaReqBaseError,
    LambdaReqError,
    TaskInvocationError,
    UnmatchedRouteError,
)
from lambdareq.event import EventKind, classify_event, is_gateway, is_task, route_id_for
from lambdareq.handler import make_lambda_handler
from lambdareq.params import NormalizedRequest
from lambdareq.tasks import TaskClient, build_task_event

__all__ = [
    "LambdaReq",
    "DispatchState",
    "LambdaReqError",
    "LambdaReqBaseError",
    "ConfigurationError",
    "DispatchStateError",
    "UnmatchedRouteError",
    "TaskInvocationError",
    "EventKind",
    "classify_event",
    "is_gateway",
    "is_task",
    "route_id_for",
    "NormalizedRequest",
    "make_lambda_handler",
    "TaskClient",
    "build_task_event",
]
