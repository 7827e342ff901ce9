# =============================================================================
# Event Classifier - Detect Lambda Trigger Shape
# =============================================================================
# Decides whether a raw Lambda event is an API Gateway request, an internal
# task invocation, or neither, and derives the route ID used for lookup.
# =============================================================================

from enum import Enum
from typing import Any, Mapping, Optional

# Rendered in place of a missing gateway path
MISSING_PATH = "undefined"

TASK_PREFIX = "TASK"


class EventKind(str, Enum):
    """Trigger shapes the dispatcher understands."""
    GATEWAY = "gateway"            # API Gateway proxy request
    TASK = "task"                  # direct invoke with {task, params}
    UNRECOGNIZED = "unrecognized"


def is_gateway(event: Mapping[str, Any]) -> bool:
    """True if the event carries a non-empty httpMethod."""
    return bool(event.get("httpMethod"))


def is_task(event: Mapping[str, Any]) -> bool:
    """True if the event carries a non-empty task name."""
    return bool(event.get("task"))


def classify_event(event: Mapping[str, Any]) -> EventKind:
    """
    Classify a raw event once.

    An event carrying both discriminating fields is treated as a gateway
    request.
    """
    if is_gateway(event):
        return EventKind.GATEWAY
    if is_task(event):
        return EventKind.TASK
    return EventKind.UNRECOGNIZED


def route_key(verb: str, path: Any) -> str:
    """Build a route ID from a verb and a path or task name."""
    if path is None:
        path = MISSING_PATH
    return f"{verb.upper()}_{path}"


def route_id_for(event: Mapping[str, Any], kind: EventKind = None) -> Optional[str]:
    """
    Derive the route ID of an event.

    Returns:
        "{METHOD}_{resource}" for gateway events, "TASK_{task}" for task
        events, None for unrecognized events.
    """
    if kind is None:
        kind = classify_event(event)

    if kind == EventKind.GATEWAY:
        return route_key(str(event["httpMethod"]), event.get("resource"))
    if kind == EventKind.TASK:
        return route_key(TASK_PREFIX, event["task"])
    return None
