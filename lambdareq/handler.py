# =============================================================================
# Lambda Entry Point Adapter
# =============================================================================
# The Python Lambda runtime calls handler(event, context) and expects a
# return value or a raised exception instead of a completion callback.
# make_lambda_handler bridges the two:
#
#     def bind_routes(req):
#         req.get("/v1/users/{id}", get_user)
#         req.task("rebuild_index", rebuild_index)
#
#     lambda_handler = make_lambda_handler(bind_routes)
# =============================================================================

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional

from lambdareq import config
from lambdareq.dispatcher import LambdaReq
from lambdareq.errors import DispatchStateError

logger = logging.getLogger(__name__)


class CollectingCallback:
    """Completion callback that records the delivered (error, result) pair."""

    def __init__(self):
        self.calls = 0
        self.error: Optional[BaseException] = None
        self.result: Any = None

    def __call__(self, error: Optional[BaseException] = None, result: Any = None) -> None:
        self.calls += 1
        self.error = error
        self.result = result

    @property
    def delivered(self) -> bool:
        return self.calls > 0


def make_lambda_handler(bind_routes: Callable[[LambdaReq], Any]) -> Callable[[Dict[str, Any], Any], Any]:
    """
    Create a Lambda handler(event, context) from a route binder.

    Args:
        bind_routes: Called with each new LambdaReq to register handlers

    Returns:
        Function returning the gateway response dict or task JSON string,
        and raising the delivered error for failed tasks.
    """
    config.configure_logging()

    def lambda_handler(event: Dict[str, Any], context: Any) -> Any:
        if config.log_events():
            logger.info(f"Event: {json.dumps(event, default=str)[:500]}")

        callback = CollectingCallback()
        req = LambdaReq(event, context, callback)
        bind_routes(req)

        pending = req.invoke()
        if isinstance(pending, asyncio.Future):
            # Already scheduled on the running loop, which a sync handler cannot block on
            raise DispatchStateError(
                f"Route {req.current_route} returned an awaitable inside a running event loop; "
                "await LambdaReq.invoke() directly instead"
            )
        if pending is not None:
            asyncio.run(_await(pending))

        logger.info(
            f"Completed route={req.current_route} kind={req.kind.value} "
            f"error={type(callback.error).__name__ if callback.error else None}"
        )

        if callback.error is not None:
            raise callback.error
        return callback.result

    return lambda_handler


async def _await(pending) -> None:
    await pending
