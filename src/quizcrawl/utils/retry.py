"""Backoff policy shared by the page and image downloads."""

from collections.abc import Callable

import logfire
import requests
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

# Network hiccups earn another attempt; error statuses and bad addresses do not
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (requests.ConnectionError, requests.Timeout)


def log_retry(retry_state: RetryCallState) -> None:
    """Report a failed download attempt before tenacity backs off.

    The first positional argument of the retried call is taken as the
    address being downloaded.
    """
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    url = retry_state.args[0] if retry_state.args else None
    logfire.warn(
        'Download attempt {attempt} failed, retrying',
        attempt=retry_state.attempt_number,
        url=url,
        error=str(exception) if exception else 'unknown error',
    )


def get_retryer(
    max_attempts: int = 2,
    wait_min: float = 0.5,
    wait_max: float = 5.0,
    wait_multiplier: float = 1.0,
    exceptions: tuple[type[Exception], ...] = TRANSIENT_ERRORS,
    log_callback: Callable[[RetryCallState], None] | None = log_retry,
) -> Retrying:
    """Build the retry policy for one download.

    Waits grow exponentially between ``wait_min`` and ``wait_max``. When the
    attempts run out the last exception is re-raised unchanged, so callers
    can translate the original requests error into their own.

    Args:
        max_attempts: Attempts per download, including the first. Defaults to 2.
        wait_min: Shortest pause between attempts in seconds.
        wait_max: Longest pause between attempts in seconds.
        wait_multiplier: Scale of the exponential backoff.
        exceptions: Exception types that earn another attempt. Defaults to
            connection errors and timeouts.
        log_callback: Called before each pause. Defaults to log_retry.

    Returns:
        A tenacity Retrying object; call it with the download function and its arguments.

    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=wait_multiplier, min=wait_min, max=wait_max),
        retry=retry_if_exception_type(exceptions),
        before_sleep=log_callback,
        reraise=True,
    )
