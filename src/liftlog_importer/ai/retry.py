"""Backoff retries for Anthropic calls made by the text parser."""
import logging
from typing import Any, Awaitable, Callable, TypeVar

import anthropic
import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 1
DEFAULT_MAX_WAIT_SECONDS = 10

# 529 is Anthropic's "overloaded"
TRANSIENT_STATUS_CODES = ("429", "500", "502", "503", "504", "529")
TRANSIENT_MESSAGE_MARKERS = (
    "timeout",
    "timed out",
    "connection",
    "temporary failure in name resolution",
)
TRANSIENT_TYPE_MARKERS = ("timeout", "connect")


def _is_transient_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def is_retryable_error(exception: BaseException) -> bool:
    """
    Decide whether a failed model call is worth another attempt.

    SDK and httpx exception types are classified directly. Anything else is
    judged by its message and class name: rate limits, 5xx codes, timeouts
    and dropped connections retry; everything unrecognised does not.
    """
    if isinstance(exception, anthropic.APIStatusError):
        return _is_transient_status(exception.status_code)
    if isinstance(exception, (anthropic.APITimeoutError, anthropic.APIConnectionError)):
        return True
    if isinstance(exception, (httpx.TimeoutException, httpx.NetworkError)):
        return True

    message = str(exception).lower()
    type_name = type(exception).__name__.lower()

    if "rate" in message and "limit" in message:
        return True
    if any(code in message for code in TRANSIENT_STATUS_CODES):
        return True
    if any(marker in message for marker in TRANSIENT_MESSAGE_MARKERS):
        return True
    return any(marker in type_name for marker in TRANSIENT_TYPE_MARKERS)


async def retry_async_call(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
    **kwargs: Any,
) -> T:
    """
    Await ``func(*args, **kwargs)``, backing off exponentially on transient errors.

    The first non-retryable error, or the error from the last allowed
    attempt, propagates unchanged.
    """
    async for attempt in AsyncRetrying(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait_seconds, min=min_wait_seconds, max=max_wait_seconds),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            return await func(*args, **kwargs)

    raise RuntimeError("retry loop exited without a result")
