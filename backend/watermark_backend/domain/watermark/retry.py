"""
Retry Wrapper

Runs a call up to ``max_retries`` times with exponential backoff
(1s, 2s, 4s, ...; no jitter). Errors are classified before retrying:
client errors reported by the remote service are terminal.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from ..errors import RemoteApiError, RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# 4xx codes that still indicate a transient condition
RETRYABLE_CLIENT_STATUSES = frozenset({408, 425, 429})

BASE_DELAY_SECONDS = 1.0


def backoff_delay(attempt: int, base_delay: float = BASE_DELAY_SECONDS) -> float:
    """
    Delay to wait after failed attempt number ``attempt`` (1-based).

    attempt 1 -> 1s, attempt 2 -> 2s, attempt 3 -> 4s, ...
    """
    return base_delay * (2 ** (attempt - 1))


def is_retryable_error(error: Exception) -> bool:
    """
    Classify an error as transient (retry) or terminal (raise now).

    A RemoteApiError with a 4xx status is terminal unless the status is one
    of RETRYABLE_CLIENT_STATUSES. Transport failures, 5xx responses and any
    other exception are retried.
    """
    if isinstance(error, RemoteApiError) and error.status_code is not None:
        status = error.status_code
        if 400 <= status < 500:
            return status in RETRYABLE_CLIENT_STATUSES
    return True


def retry_all_errors(error: Exception) -> bool:
    return True


def retry_request(
    request_fn: Callable[[], T],
    max_retries: int = 3,
    should_retry: Callable[[Exception], bool] = is_retryable_error,
    sleep: Callable[[float], None] = time.sleep,
    base_delay: float = BASE_DELAY_SECONDS,
) -> T:
    """
    Call ``request_fn`` until it succeeds or attempts run out.

    Args:
        request_fn: Zero-argument callable performing one attempt
        max_retries: Total number of attempts (>= 1)
        should_retry: Classifier; a False result re-raises the error at once
        sleep: Sleep function, injectable for tests
        base_delay: Delay after the first failure, in seconds

    Returns:
        The first successful result

    Raises:
        RetryExhaustedError: After max_retries failed attempts; the message
            includes the attempt count
        Exception: The original error, unchanged, when it is terminal
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    last_error: Optional[Exception] = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug("Attempt %d of %d", attempt, max_retries)
            result = request_fn()
            if attempt > 1:
                logger.info("Request succeeded on attempt %d", attempt)
            return result
        except Exception as e:
            last_error = e
            logger.warning("Attempt %d of %d failed: %s", attempt, max_retries, e)

            if not should_retry(e):
                logger.info("Error is not retryable, giving up after attempt %d", attempt)
                raise

            if attempt < max_retries:
                delay = backoff_delay(attempt, base_delay)
                logger.info("Retrying in %.0fms", delay * 1000)
                sleep(delay)

    raise RetryExhaustedError(max_retries, last_error)
