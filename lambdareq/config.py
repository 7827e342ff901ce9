# =============================================================================
# Configuration
# =============================================================================
# Environment-backed settings, read at call time so tests and the Lambda
# runtime can override them through os.environ.
# =============================================================================

import logging
import os
from typing import Optional

PACKAGE_LOGGER = "lambdareq"


def _get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _get_env_bool(key: str, default: bool = False) -> bool:
    return _get_env(key, str(default)).lower() == "true"


def log_level() -> str:
    return _get_env("LAMBDAREQ_LOG_LEVEL", "INFO").upper()


def log_events() -> bool:
    """Whether the Lambda entry point logs raw events."""
    return _get_env_bool("LAMBDAREQ_LOG_EVENTS", False)


def aws_region() -> str:
    return _get_env("AWS_REGION", "us-east-1")


def default_task_function() -> str:
    """Function name TaskClient targets when none is given."""
    return _get_env("LAMBDAREQ_TASK_FUNCTION", "")


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Apply the configured level to the package logger.

    The Lambda runtime installs its own root handler, so only the level is
    set here.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    resolved = (level or log_level()).upper()
    logger.setLevel(getattr(logging, resolved, logging.INFO))
    return logger
