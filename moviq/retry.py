"""Exponential-backoff retry wrapper for outbound catalog requests.

The wrapper awaits a zero-argument coroutine factory. Failed attempts are
retried after a delay that doubles every time (1s, 2s, 4s with the defaults);
``Retry-After`` headers on rate limited (429) and unavailable (503) responses
take precedence over the computed delay. When the retry budget is exhausted,
or when the failure can never succeed on retry (client errors other than 408
and 429), the original exception is converted into :class:`ApiError`, the only
error shape callers need to branch on.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from moviq.settings import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_INITIAL_DELAY_SECONDS,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_CLIENT_STATUS_CODES = frozenset({408, 429})
RETRY_AFTER_STATUS_CODES = frozenset({429, 503})
DEFAULT_MAX_DELAY_SECONDS = 30.0


class ApiError(Exception):
    """Raised when a catalog request fails for good.

    ``status`` carries the HTTP status code when the server answered at all;
    transport failures (DNS, connection resets, timeouts) leave it as ``None``.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        *,
        retryable: bool = True,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.retryable = retryable
        self.retry_after = retry_after

    def __repr__(self) -> str:
        return f"ApiError(message={self.message!r}, status={self.status!r})"


def is_retryable(exc: BaseException) -> bool:
    """Return ``True`` when repeating the request could plausibly succeed."""

    if isinstance(exc, ApiError):
        return exc.retryable
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status >= 500 or status in RETRYABLE_CLIENT_STATUS_CODES
    return True


def retry_all(exc: BaseException) -> bool:
    """Retry predicate that treats every failure as transient."""

    return True


def _parse_retry_after(exc: BaseException, max_delay: float) -> float | None:
    if not isinstance(exc, httpx.HTTPStatusError):
        return None
    if exc.response.status_code not in RETRY_AFTER_STATUS_CODES:
        return None

    header = exc.response.headers.get("Retry-After")
    if header is None:
        return None
    try:
        seconds = float(header)
    except ValueError:
        # HTTP-date values are not worth parsing here; fall back to backoff.
        return None
    if seconds < 0:
        return None
    return min(seconds, max_delay)


def to_api_error(exc: BaseException, *, max_delay: float = DEFAULT_MAX_DELAY_SECONDS) -> ApiError:
    """Convert any failure raised by a request function into :class:`ApiError`."""

    if isinstance(exc, ApiError):
        return exc

    retryable = is_retryable(exc)
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        reason = response.reason_phrase or "HTTP error"
        return ApiError(
            f"Request to {exc.request.url.path} failed with status "
            f"{response.status_code} ({reason})",
            response.status_code,
            retryable=retryable,
            retry_after=_parse_retry_after(exc, max_delay),
        )
    if isinstance(exc, httpx.TimeoutException):
        return ApiError("The request timed out", retryable=retryable)
    if isinstance(exc, httpx.RequestError):
        return ApiError(
            str(exc) or "An error occurred while fetching data",
            retryable=retryable,
        )
    return ApiError("An unexpected error occurred", retryable=retryable)


async def query_with_retries(
    request_fn: Callable[[], Awaitable[T]],
    *,
    retries: int = DEFAULT_RETRY_ATTEMPTS,
    delay: float = DEFAULT_RETRY_INITIAL_DELAY_SECONDS,
    max_delay: float = DEFAULT_MAX_DELAY_SECONDS,
    retry_if: Callable[[BaseException], bool] = is_retryable,
) -> T:
    """Await ``request_fn`` and retry failures with exponential backoff.

    Args:
        request_fn: Zero-argument callable returning a fresh awaitable per attempt.
        retries: Number of retries after the initial attempt; ``request_fn`` is
            invoked at most ``retries + 1`` times.
        delay: Wait before the first retry, in seconds. Doubled after every retry.
        max_delay: Upper bound applied to server-provided ``Retry-After`` values.
        retry_if: Predicate deciding whether a failure is worth retrying.

    Returns:
        Whatever ``request_fn`` resolves to on the first successful attempt.

    Raises:
        ApiError: When the retry budget is exhausted or the failure is not
            retryable.
    """

    if retries < 0:
        raise ValueError("retries must be zero or positive")

    attempt = 0
    current_delay = delay
    while True:
        try:
            return await request_fn()
        except Exception as exc:
            if attempt >= retries or not retry_if(exc):
                error = to_api_error(exc, max_delay=max_delay)
                if attempt >= retries and retries > 0:
                    logger.error(
                        "Gave up after %d attempts: %s", attempt + 1, error.message
                    )
                raise error from (None if error is exc else exc)

            attempt += 1
            wait = _parse_retry_after(exc, max_delay)
            if wait is None:
                wait = current_delay
            logger.warning(
                "Request failed (%s); retrying in %.1fs (attempt %d/%d)",
                exc,
                wait,
                attempt,
                retries,
            )
            await asyncio.sleep(wait)
            current_delay *= 2


__all__ = [
    "ApiError",
    "DEFAULT_MAX_DELAY_SECONDS",
    "is_retryable",
    "query_with_retries",
    "retry_all",
    "to_api_error",
]
