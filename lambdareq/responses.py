# =============================================================================
# Response Mapper
# =============================================================================
# Two independent policies turn an Outcome into completion callback arguments:
#
# Gateway: always callback(None, {"statusCode": ..., "body": ...}).
#          Unhandled faults become an opaque 500 with body "{}".
# Task:    callback(None, json) on success, callback(error) on any failure.
#          The original exception object is passed through untouched.
# =============================================================================

import json
import logging
from typing import Any, Dict, Tuple

from lambdareq.errors import UnmatchedRouteError
from lambdareq.event import EventKind
from lambdareq.outcome import (
    Outcome,
    StructuredFailure,
    Success,
    UnhandledFault,
    UnmatchedRoute,
)

logger = logging.getLogger(__name__)

CallbackArgs = Tuple[Any, ...]

EMPTY_BODY = "{}"


def jdump(x: Any) -> str:
    """
    Compact JSON dump with str() fallback for non-serializable types.

    Raises ValueError for NaN and infinite floats, which have no JSON form.
    """
    return json.dumps(x, ensure_ascii=False, separators=(",", ":"), default=str, allow_nan=False)


def gateway_response(status_code: int, body: str) -> Dict[str, Any]:
    return {"statusCode": status_code, "body": body}


class GatewayPolicy:
    """Maps outcomes to API Gateway proxy responses."""

    kind = EventKind.GATEWAY

    def response(self, outcome: Outcome) -> Dict[str, Any]:
        if isinstance(outcome, Success):
            return gateway_response(200, jdump(outcome.value))

        if isinstance(outcome, StructuredFailure):
            return gateway_response(outcome.status, jdump(outcome.payload))

        if isinstance(outcome, UnhandledFault):
            return gateway_response(500, EMPTY_BODY)

        if isinstance(outcome, UnmatchedRoute):
            return gateway_response(404, jdump({"error": f"Unhandled route: {outcome.route}"}))

        raise TypeError(f"Unknown outcome: {outcome!r}")

    def arguments(self, outcome: Outcome) -> CallbackArgs:
        return (None, self.response(outcome))


class TaskPolicy:
    """Maps outcomes to (error, result) callback arguments for task callers."""

    kind = EventKind.TASK

    def arguments(self, outcome: Outcome) -> CallbackArgs:
        if isinstance(outcome, Success):
            return (None, jdump(outcome.value))

        if isinstance(outcome, (StructuredFailure, UnhandledFault)):
            return (outcome.error,)

        if isinstance(outcome, UnmatchedRoute):
            return (UnmatchedRouteError(outcome.route),)

        raise TypeError(f"Unknown outcome: {outcome!r}")


_GATEWAY_POLICY = GatewayPolicy()
_TASK_POLICY = TaskPolicy()


def policy_for(kind: EventKind):
    """
    Get the response policy for an event kind.

    Unrecognized events have no HTTP semantics and use the task policy.
    """
    if kind == EventKind.GATEWAY:
        return _GATEWAY_POLICY
    return _TASK_POLICY
