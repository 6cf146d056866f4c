"""
Boundary helper for remote collaborator calls.

Every component that talks to a collaborator awaits it through
call_remote(), which converts both reported failures (success=False) and
raised transport/parsing errors into RemoteFailure. Callers then decide
whether to degrade silently (engagement), keep state for retry (edits), or
fall back to an empty result (search).
"""

import logging
from collections.abc import Awaitable
from typing import Any

from record_protocols import ServiceResult

from record_core.exceptions import RemoteFailure

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Request failed"


async def call_remote(operation: str, call: Awaitable[ServiceResult]) -> Any:
    """
    Await a collaborator call and return its payload.

    Args:
        operation: Operation name used in logs and in RemoteFailure.
        call: Awaitable returning a ServiceResult.

    Returns:
        The result's data field on success.

    Raises:
        RemoteFailure: If the call raised or reported success=False.
    """
    try:
        result = await call
    except Exception as e:
        logger.warning(f"{operation} raised {type(e).__name__}: {e}")
        raise RemoteFailure(operation, DEFAULT_FAILURE_MESSAGE) from e

    if not result.success:
        message = result.error_message or DEFAULT_FAILURE_MESSAGE
        logger.warning(f"{operation} reported failure: {message}")
        raise RemoteFailure(operation, message)

    return result.data
