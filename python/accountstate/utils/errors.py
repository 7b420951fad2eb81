"""
Error helpers for log lines.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def sanitise_error(error: Any) -> Any:
    """
    Resolve an error-like value into an Exception suitable for logging.

    Exchange and storage clients raise a mix of exceptions, plain strings and
    response payloads ({"msg": ...}, {"message": ...}, {"body": ...}). This walks
    those shapes and returns an Exception wherever a message can be found.

    Args:
        error: Exception, string, mapping or any other value.

    Returns:
        Exception when a message could be resolved, otherwise the input.
    """
    if isinstance(error, BaseException):
        return error

    if isinstance(error, str):
        return Exception(error)

    if isinstance(error, dict):
        if isinstance(error.get("msg"), str):
            return sanitise_error(error["msg"])
        if isinstance(error.get("message"), str):
            return sanitise_error(error["message"])
        if "body" in error:
            return sanitise_error(error["body"])
        logger.warning(f"Unhandled sanitise mapping, returning JSON string: {error!r}")
        return sanitise_error(json.dumps(error, default=str))

    if error is not None and hasattr(error, "__dict__"):
        logger.warning(f"Unhandled sanitise object type {type(error).__name__}, using repr")
        return sanitise_error(repr(error))

    logger.error(f"Unhandled sanitise type: {error!r} ({type(error).__name__})")
    return error
