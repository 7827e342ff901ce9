# =============================================================================
# Parameter Resolver
# =============================================================================
# Builds the NormalizedRequest handed to every handler:
# - Gateway: query string < path parameters < JSON body (body wins ties)
# - Task: the event's own params mapping
# Headers are only present for gateway events.
# =============================================================================

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from lambdareq.event import EventKind


@dataclass(frozen=True)
class NormalizedRequest:
    """
    Request contract shared by gateway and task handlers.

    Attributes:
        params: Flat parameter mapping (fresh copy per invocation)
        headers: Gateway request headers, None for task events
    """
    params: Dict[str, Any] = field(default_factory=dict)
    headers: Optional[Dict[str, str]] = None

    def get(self, key: str, default: Any = None) -> Any:
        """Get a parameter value."""
        return self.params.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return {"params": self.params, "headers": self.headers}


def decode_body(body: Any) -> Dict[str, Any]:
    """
    Decode a gateway body into a mapping.

    Raises json.JSONDecodeError for malformed JSON text. Empty bodies and
    bodies that decode to something other than an object contribute no
    parameters.
    """
    if not body:
        return {}
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    decoded = json.loads(body) if isinstance(body, str) else body
    if isinstance(decoded, Mapping):
        return dict(decoded)
    return {}


def resolve_params(event: Mapping[str, Any], kind: EventKind) -> Dict[str, Any]:
    """Resolve the flat parameter mapping for an event of the given kind."""
    if kind == EventKind.GATEWAY:
        params: Dict[str, Any] = {}
        params.update(event.get("queryStringParameters") or {})
        params.update(event.get("pathParameters") or {})
        params.update(decode_body(event.get("body")))
        return params

    if kind == EventKind.TASK:
        return dict(event.get("params") or {})

    return {}


def resolve_headers(event: Mapping[str, Any], kind: EventKind) -> Optional[Dict[str, str]]:
    """Gateway headers verbatim; None for every other kind."""
    if kind == EventKind.GATEWAY:
        return event.get("headers")
    return None


def build_request(event: Mapping[str, Any], kind: EventKind) -> NormalizedRequest:
    """Build a fresh NormalizedRequest from a raw event."""
    headers = resolve_headers(event, kind)
    return NormalizedRequest(
        params=resolve_params(event, kind),
        headers=dict(headers) if headers is not None else None,
    )
