"""Retry policy for optimistic-lock conflicts.

A conflict means another writer got to the same cart or order first.
The operation is retried once from scratch, re-reading and
re-validating everything, and surfaces the conflict if it happens again.
Validation and not-found errors are never retried.
"""

from __future__ import annotations

import structlog
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt

from resale.domain.exceptions import ConcurrencyConflictError

logger = structlog.get_logger(__name__)


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "retrying_after_conflict",
        operation=getattr(retry_state.fn, "__qualname__", None),
        attempt=retry_state.attempt_number,
        error=str(exc),
    )


def conflict_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(2),
        retry=retry_if_exception_type(ConcurrencyConflictError),
        before_sleep=_log_retry,
    )
