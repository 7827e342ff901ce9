# =============================================================================
# LambdaReq - Per-Invocation Dispatcher
# =============================================================================
# One instance per Lambda invocation:
#
#     req = LambdaReq(event, context, callback)
#     req.get("/v1/users/{id}", get_user)
#     req.task("rebuild_index", rebuild_index)
#     req.invoke()
#
# invoke() classifies the event, looks up the handler, calls it with
# (NormalizedRequest, event), maps the outcome with the gateway or task
# policy and calls callback exactly once.
# =============================================================================

import asyncio
import inspect
import logging
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Set

from lambdareq.errors import ConfigurationError, DispatchStateError
from lambdareq.event import (
    EventKind,
    classify_event,
    is_gateway,
    is_task,
    route_id_for,
)
from lambdareq.outcome import (
    Outcome,
    Success,
    UnhandledFault,
    UnmatchedRoute,
    outcome_from_error,
)
from lambdareq.params import build_request, resolve_headers, resolve_params
from lambdareq.responses import policy_for
from lambdareq.routes import HandlerFunc, RouteTable

logger = logging.getLogger(__name__)

Callback = Callable[..., Any]

# Strong references to scheduled settlements; the event loop only keeps weak ones
_PENDING: Set[asyncio.Future] = set()


class DispatchState(str, Enum):
    """Lifecycle of a single invocation."""
    CLASSIFYING = "classifying"
    ROUTING = "routing"
    INVOKING = "invoking"
    SETTLING = "settling"
    DELIVERED = "delivered"


class LambdaReq:
    """
    Dispatcher for API Gateway requests and task invocations.

    Args:
        event: Raw Lambda event (gateway or task shape)
        context: Lambda context, passed through untouched
        callback: Completion sink called as callback(error, result)

    Raises:
        ConfigurationError: event is missing or callback is not callable
    """

    def __init__(self, event: Mapping[str, Any], context: Any, callback: Callback):
        if not isinstance(event, Mapping):
            raise ConfigurationError("Malformed Lambda event object")
        if not callable(callback):
            raise ConfigurationError("Malformed Lambda callback")

        self._event = event
        self._context = context
        self._callback = callback
        self._kind = classify_event(event)
        self._routes = RouteTable()
        self._state = DispatchState.CLASSIFYING

    # ==========================================================================
    # Route binders
    # ==========================================================================

    def _bind(self, verb: str, path: Any, handler: Optional[HandlerFunc] = None):
        if handler is None:
            return partial(self._routes.bind, verb, path)
        return self._routes.bind(verb, path, handler)

    def get(self, path: str, handler: HandlerFunc = None):
        return self._bind("get", path, handler)

    def post(self, path: str, handler: HandlerFunc = None):
        return self._bind("post", path, handler)

    def put(self, path: str, handler: HandlerFunc = None):
        return self._bind("put", path, handler)

    def delete(self, path: str, handler: HandlerFunc = None):
        return self._bind("delete", path, handler)

    def options(self, path: str, handler: HandlerFunc = None):
        return self._bind("options", path, handler)

    def task(self, task_name: str, handler: HandlerFunc = None):
        """Bind a handler for a task invocation ({"task": task_name, ...})."""
        if handler is None:
            return partial(self._routes.bind_task, task_name)
        return self._routes.bind_task(task_name, handler)

    # ==========================================================================
    # Introspection
    # ==========================================================================

    @property
    def event(self) -> Mapping[str, Any]:
        return self._event

    @property
    def context(self) -> Any:
        return self._context

    @property
    def kind(self) -> EventKind:
        return self._kind

    @property
    def is_gateway(self) -> bool:
        return is_gateway(self._event)

    @property
    def is_task(self) -> bool:
        return is_task(self._event)

    @property
    def current_route(self) -> Optional[str]:
        """Route ID of the event, None for unrecognized events."""
        return route_id_for(self._event, self._kind)

    @property
    def params(self) -> Dict[str, Any]:
        """Merged request parameters. Raises on a malformed JSON body."""
        return resolve_params(self._event, self._kind)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return resolve_headers(self._event, self._kind)

    @property
    def routes(self) -> Mapping[str, HandlerFunc]:
        return self._routes.routes

    @property
    def state(self) -> DispatchState:
        return self._state

    # ==========================================================================
    # Dispatch
    # ==========================================================================

    def _transition(self, state: DispatchState) -> None:
        logger.debug(f"Dispatch state {self._state.value} -> {state.value}")
        self._state = state

    def invoke(self) -> Optional[Awaitable[None]]:
        """
        Run the dispatch pipeline once.

        Returns:
            None when the outcome was delivered synchronously. When the
            handler returned an awaitable, an awaitable that completes after
            the callback has been called: an already scheduled asyncio.Task
            if an event loop is running (delivery happens even if the task
            is never awaited), otherwise a coroutine for the caller to run.

        Raises:
            DispatchStateError: invoke() was already called on this instance
        """
        if self._state != DispatchState.CLASSIFYING:
            raise DispatchStateError("invoke() can only be called once per LambdaReq")

        self._routes.freeze()
        self._transition(DispatchState.ROUTING)

        route_id = self.current_route
        handler = self._routes.lookup(route_id)
        if handler is None:
            logger.warning(f"Unhandled route: {route_id} kind={self._kind.value}")
            self._settle(UnmatchedRoute(route_id))
            return None

        logger.info(f"Dispatching route={route_id} kind={self._kind.value}")
        self._transition(DispatchState.INVOKING)

        try:
            request = build_request(self._event, self._kind)
            result = handler(request, self._event)
        except Exception as e:
            self._settle(self._fault(route_id, e))
            return None

        if inspect.isawaitable(result):
            return self._schedule(self._settle_deferred(route_id, result))

        self._settle(Success(result))
        return None

    @staticmethod
    def _schedule(settlement):
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return settlement

        task = asyncio.ensure_future(settlement)
        _PENDING.add(task)
        task.add_done_callback(_PENDING.discard)
        return task

    async def _settle_deferred(self, route_id: str, result: Awaitable[Any]) -> None:
        try:
            value = await result
        except asyncio.CancelledError as e:
            # Deliver before letting the cancellation propagate
            self._settle(self._fault(route_id, e))
            raise
        except Exception as e:
            outcome = self._fault(route_id, e)
        else:
            outcome = Success(value)
        self._settle(outcome)

    def _fault(self, route_id: Optional[str], error: BaseException) -> Outcome:
        outcome = outcome_from_error(error)
        if isinstance(outcome, UnhandledFault):
            logger.exception(f"Handler error for route '{route_id}': {error}")
        else:
            logger.info(f"Structured failure for route '{route_id}': status={error.status}")
        return outcome

    def _settle(self, outcome: Outcome) -> None:
        self._transition(DispatchState.SETTLING)
        policy = policy_for(self._kind)
        try:
            args = policy.arguments(outcome)
        except Exception as e:
            logger.exception(f"Failed to map outcome {type(outcome).__name__}: {e}")
            args = policy.arguments(UnhandledFault(e))

        self._transition(DispatchState.DELIVERED)
        self._callback(*args)
