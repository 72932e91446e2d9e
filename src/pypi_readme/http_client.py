# -*- coding: utf-8 -*-
"""
Shared async HTTP GET with retry and error mapping for upstream APIs.

- Timeouts and transport failures become NetworkError
- 429 and 5xx map onto RateLimitError / NetworkError and are retried
  with exponential backoff (tenacity)
- 404 is returned to the caller untouched
"""
import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import settings
from .errors import RETRYABLE_ERRORS, NetworkError, raise_for_status

logger = logging.getLogger(__name__)


async def get_with_retry(
        url: str,
        context: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """
    GET a URL, retrying transient failures.

    Args:
        url: Absolute URL to fetch
        context: Human-readable description used in logs and errors
        headers: Extra request headers (User-Agent is always set)
        timeout: Request timeout in seconds. Defaults to settings.HTTP_TIMEOUT.
        transport: Optional httpx transport

    Returns:
        The response, either successful or 404
    """
    request_headers = {"User-Agent": settings.USER_AGENT, **(headers or {})}
    attempt = 0

    @retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        stop=stop_after_attempt(settings.RETRY_MAX_ATTEMPTS),
        wait=wait_exponential(min=settings.RETRY_MIN_WAIT, max=settings.RETRY_MAX_WAIT),
        reraise=True,
    )
    async def _inner() -> httpx.Response:
        nonlocal attempt
        attempt += 1
        logger.debug(f"GET {context} (attempt {attempt}/{settings.RETRY_MAX_ATTEMPTS})")

        try:
            async with httpx.AsyncClient(
                timeout=timeout or settings.HTTP_TIMEOUT,
                transport=transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url, headers=request_headers)

            if response.status_code != 404:
                raise_for_status(response, context)
            return response

        except httpx.TimeoutException as e:
            logger.warning(f"Timeout from {context} (attempt {attempt})")
            raise NetworkError(f"Request timeout from {context}") from e
        except httpx.TransportError as e:
            logger.warning(f"Transport error from {context} (attempt {attempt}): {e}")
            raise NetworkError(f"{context}: {e}") from e
        except RETRYABLE_ERRORS as e:
            logger.warning(f"Retryable error from {context} (attempt {attempt}): {e}")
            raise

    response = await _inner()
    if attempt > 1:
        logger.info(f"{context} succeeded on attempt {attempt}")
    return response
