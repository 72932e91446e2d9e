# -*- coding: utf-8 -*-
"""
Exception hierarchy and upstream HTTP error mapping.
"""
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class PackageReadmeError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    status_code: int = 500

    def __init__(
            self,
            message: str,
            code: str = "INTERNAL_ERROR",
            status_code: int | None = None,
            details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class InvalidParameterError(PackageReadmeError):
    """Invalid caller input (package name, version, batch size...)."""

    status_code = 400


class PackageNotFoundError(PackageReadmeError):
    status_code = 404

    def __init__(self, package_name: str):
        super().__init__(f"Package '{package_name}' not found", "PACKAGE_NOT_FOUND")
        self.package_name = package_name


class VersionNotFoundError(PackageReadmeError):
    status_code = 404

    def __init__(self, package_name: str, version: str):
        super().__init__(
            f"Version '{version}' of package '{package_name}' not found",
            "VERSION_NOT_FOUND",
        )
        self.package_name = package_name
        self.version = version


class ReadmeNotFoundError(PackageReadmeError):
    status_code = 404

    def __init__(self, repository: str):
        super().__init__(
            f"README not found in repository {repository}", "README_NOT_FOUND"
        )


class RateLimitError(PackageReadmeError):
    """Upstream rate limit hit (HTTP 429)."""

    status_code = 429

    def __init__(self, service: str, retry_after: int | None = None):
        super().__init__(
            f"Rate limit exceeded for {service}",
            "RATE_LIMIT_EXCEEDED",
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after


class NetworkError(PackageReadmeError):
    """Timeout, transport failure or upstream server error."""

    status_code = 502

    def __init__(self, message: str, details: Any = None):
        super().__init__(f"Network error: {message}", "NETWORK_ERROR", details=details)


# Errors worth retrying with backoff; every other error fails fast
RETRYABLE_ERRORS = (NetworkError, RateLimitError)


def _retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("retry-after")
    try:
        return int(value) if value else None
    except ValueError:
        return None


def raise_for_status(response: httpx.Response, context: str) -> None:
    """
    Map an unsuccessful upstream response onto the error hierarchy.

    404 is left to callers, which know whether a package, a version or a
    README is missing.
    """
    if response.is_success:
        return

    status = response.status_code
    logger.error(
        f"HTTP error {status} from {context}",
        extra={"status": status, "url": str(response.request.url)},
    )

    if status == 429:
        raise RateLimitError(context, _retry_after(response))
    if status >= 500:
        raise NetworkError(f"Server error {status} from {context}")
    raise PackageReadmeError(
        f"HTTP error {status} from {context}", "HTTP_ERROR", status_code=status
    )
