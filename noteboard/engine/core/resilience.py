"""
Resilience Infrastructure.

Retry policy and retry callback used around calls to external
collaborators (currently the quote endpoint).

The composed stack is applied in this order (outside-in):
    Retry (tenacity) → Timeout (httpx) → Call

Usage:
    from noteboard.engine.core.resilience import create_retrying

    async for attempt in create_retrying(retry_on=(httpx.TransportError,)):
        with attempt:
            response = await client.get(url)
"""

from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from noteboard.engine.core.logging import get_logger

logger = get_logger(__name__)


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Filter them out of the log file with:

        jq 'select(.resilience_event != null)' logs/system.jsonl

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    fn_name = getattr(retry_state.fn, "__name__", "quote_request")

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "error": error,
        },
    )


def create_retrying(
    retry_on: tuple[type[BaseException], ...],
    max_attempts: int = 3,
    backoff_multiplier: float = 0.5,
    backoff_max: float = 4,
) -> AsyncRetrying:
    """Create a retry controller with exponential backoff and structured logging.

    The last error is re-raised unchanged once attempts run out.

    Args:
        retry_on: Exception types worth retrying (transient failures only)
        max_attempts: Total attempts including the first
        backoff_multiplier: Base of the exponential wait, in seconds
        backoff_max: Upper bound for a single wait, in seconds

    Returns:
        Configured AsyncRetrying instance
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=backoff_multiplier, max=backoff_max),
        retry=retry_if_exception_type(retry_on),
        before_sleep=log_retry,
        reraise=True,
    )
