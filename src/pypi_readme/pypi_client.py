# -*- coding: utf-8 -*-
"""
PyPI JSON API client.
"""
import logging
from typing import Any
from urllib.parse import quote

import httpx

from .config import settings
from .errors import PackageNotFoundError, VersionNotFoundError
from .http_client import get_with_retry

logger = logging.getLogger(__name__)


class PyPIClient:
    """
    Async client for the PyPI JSON API.

    Stateless apart from its connection parameters; a fresh httpx client is
    opened per request.
    """

    def __init__(
            self,
            base_url: str | None = None,
            timeout: float | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize PyPI client.

        Args:
            base_url: JSON API root. Defaults to settings.PYPI_BASE_URL.
            timeout: Request timeout in seconds. Defaults to settings.HTTP_TIMEOUT.
            transport: Optional httpx transport.
        """
        self.base_url = (base_url or settings.PYPI_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self._transport = transport

    async def _get_json(self, path: str, context: str) -> httpx.Response:
        return await get_with_retry(
            f"{self.base_url}/{path}",
            context=context,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def get_package_info(self, package_name: str) -> dict[str, Any]:
        """
        Fetch metadata for the latest release of a package.

        Raises:
            PackageNotFoundError: if PyPI does not know the package
        """
        logger.debug(f"Fetching package info: {package_name}")
        response = await self._get_json(
            f"{quote(package_name, safe='')}/json", f"PyPI for package {package_name}"
        )
        if response.status_code == 404:
            raise PackageNotFoundError(package_name)

        data = response.json()
        logger.debug(f"Fetched package info: {package_name}")
        return data

    async def get_version_info(self, package_name: str, version: str) -> dict[str, Any]:
        """
        Fetch metadata for a specific release ("latest" means newest).

        Raises:
            VersionNotFoundError: if the release does not exist
        """
        if version == "latest":
            return await self.get_package_info(package_name)

        logger.debug(f"Fetching version info: {package_name}@{version}")
        response = await self._get_json(
            f"{quote(package_name, safe='')}/{quote(version, safe='')}/json",
            f"PyPI for package {package_name}@{version}",
        )
        if response.status_code == 404:
            raise VersionNotFoundError(package_name, version)

        return response.json()


# Global client instance
pypi_client = PyPIClient()
