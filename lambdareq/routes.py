# =============================================================================
# Route Table
# =============================================================================
# Maps route IDs ("GET_/v1/users", "TASK_sync") to handler functions.
# One table per dispatcher; last registration for a key wins.
# =============================================================================

import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from lambdareq.errors import DispatchStateError
from lambdareq.event import TASK_PREFIX, route_key

logger = logging.getLogger(__name__)

# Type definitions
HandlerFunc = Callable[..., Union[Any, Awaitable[Any]]]


class RouteTable:
    """
    Route ID to handler mapping.

    Populated by binders before dispatch, then frozen for the rest of the
    invocation.
    """

    def __init__(self):
        self._routes: Dict[str, HandlerFunc] = {}
        self._frozen = False

    def add(self, route_id: str, handler: HandlerFunc) -> HandlerFunc:
        """Register a handler under a route ID, replacing any earlier one."""
        if self._frozen:
            raise DispatchStateError(f"Cannot register {route_id} after invoke()")
        if route_id in self._routes:
            logger.debug(f"Replacing handler for route {route_id}")
        self._routes[route_id] = handler
        return handler

    def bind(self, verb: str, path: Any, handler: HandlerFunc) -> HandlerFunc:
        """Register a handler for a verb (HTTP method or TASK) and path."""
        return self.add(route_key(verb, path), handler)

    def bind_task(self, task_name: str, handler: HandlerFunc) -> HandlerFunc:
        return self.bind(TASK_PREFIX, task_name, handler)

    def lookup(self, route_id: Optional[str]) -> Optional[HandlerFunc]:
        """Get the handler for a route ID, or None."""
        if route_id is None:
            return None
        return self._routes.get(route_id)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> Mapping[str, HandlerFunc]:
        """Read-only view of registered routes."""
        return MappingProxyType(self._routes)

    def __contains__(self, route_id: str) -> bool:
        return route_id in self._routes

    def __len__(self) -> int:
        return len(self._routes)
