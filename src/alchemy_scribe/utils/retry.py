# ABOUTME: Retry policy for the source document fetch using tenacity
# ABOUTME: Only transient transport failures are retried, with exponential backoff between attempts

from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from alchemy_scribe.extraction.base import FetchError
from alchemy_scribe.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def is_transient_fetch_error(exc: BaseException) -> bool:
    return isinstance(exc, FetchError) and exc.transient


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying source document fetch",
        attempt=retry_state.attempt_number,
        error=str(exc) if exc else None,
    )


async def fetch_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
    multiplier: float = 2.0,
) -> T:
    """Run ``operation`` until it succeeds or attempts run out.

    The last error is re-raised unchanged, so callers still see a FetchError.
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
        retry=retry_if_exception(is_transient_fetch_error),
        before_sleep=_log_retry,
        reraise=True,
    ):
        with attempt:
            return await operation()

    raise AssertionError("unreachable")  # pragma: no cover
