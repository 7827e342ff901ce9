# =============================================================================
# Task Client
# =============================================================================
# Invokes another Lambda function with a task event ({task, params}).
# A task handler's success arrives as its JSON string result; its failure
# arrives as a Lambda FunctionError carrying the raised error.
# =============================================================================

import json
import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from lambdareq import config
from lambdareq.errors import TaskInvocationError

logger = logging.getLogger(__name__)


def build_task_event(task: str, params: Dict[str, Any] = None) -> Dict[str, Any]:
    """Build a task event understood by LambdaReq."""
    if not task:
        raise ValueError("Task name is required")
    return {"task": task, "params": params or {}}


def _decode_payload(raw: bytes) -> Any:
    if not raw:
        return None
    decoded = json.loads(raw)
    # Task handlers return their result already JSON-encoded
    if isinstance(decoded, str):
        try:
            return json.loads(decoded)
        except json.JSONDecodeError:
            return decoded
    return decoded


@dataclass
class TaskClient:
    """
    Lambda client for task invocations.

    The boto3 client is created on first use.

    Usage:
        client = TaskClient()
        result = client.invoke_task("reports-fn", "rebuild_index", {"id": "u-1"})
    """
    region: str = field(default_factory=config.aws_region)
    function_name: str = field(default_factory=config.default_task_function)

    @cached_property
    def lambda_client(self):
        """Lambda client."""
        return boto3.client("lambda", region_name=self.region)

    def invoke_task(
        self,
        function_name: Optional[str],
        task: str,
        params: Dict[str, Any] = None,
        asynchronous: bool = False,
    ) -> Any:
        """
        Invoke a task on a Lambda function.

        Args:
            function_name: Target function (defaults to LAMBDAREQ_TASK_FUNCTION)
            task: Task name
            params: Task parameters
            asynchronous: Use the Event invocation type and return None

        Returns:
            Decoded task result for synchronous invocations

        Raises:
            TaskInvocationError: the call failed or the task raised
        """
        target = function_name or self.function_name
        if not target:
            raise TaskInvocationError("No target function for task invocation")

        event = build_task_event(task, params)
        invocation_type = "Event" if asynchronous else "RequestResponse"
        logger.info(f"Invoking task={task} function={target} type={invocation_type}")

        try:
            response = self.lambda_client.invoke(
                FunctionName=target,
                InvocationType=invocation_type,
                Payload=json.dumps(event).encode("utf-8"),
            )
        except ClientError as e:
            logger.exception(f"Failed to invoke task {task}: {e}")
            raise TaskInvocationError(f"Failed to invoke task {task}: {e}") from e

        if asynchronous:
            return None

        raw = response["Payload"].read() if response.get("Payload") else b""
        payload = _decode_payload(raw)

        if response.get("FunctionError"):
            logger.warning(f"Task {task} failed: {response.get('FunctionError')}")
            raise TaskInvocationError(f"Task {task} failed", payload=payload)

        return payload
