# -*- coding: utf-8 -*-
"""
libraries.io client backing package search (the PyPI search API is gone).
"""
import logging
from typing import Any

import httpx

from .config import settings
from .errors import PackageReadmeError
from .http_client import get_with_retry

logger = logging.getLogger(__name__)

# libraries.io caps page size
MAX_PER_PAGE = 100


class LibrariesIOClient:
    """Async client for the libraries.io search endpoint, restricted to PyPI."""

    def __init__(
            self,
            base_url: str | None = None,
            api_key: str | None = None,
            timeout: float | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.LIBRARIES_IO_API_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.LIBRARIES_IO_API_KEY
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self._transport = transport

    async def search(self, query: str, limit: int) -> list[dict[str, Any]]:
        """
        Raw libraries.io project records matching a query.

        Raises:
            PackageReadmeError: if the upstream payload is not a list
        """
        params = {
            "q": query,
            "platforms": "pypi",
            "per_page": min(limit, MAX_PER_PAGE),
        }
        if self.api_key:
            params["api_key"] = self.api_key

        logger.debug(f"Searching libraries.io: {query}")
        response = await get_with_retry(
            str(httpx.URL(f"{self.base_url}/search", params=params)),
            context=f"libraries.io search for '{query}'",
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            transport=self._transport,
        )
        if response.status_code == 404:
            return []

        data = response.json()
        if not isinstance(data, list):
            raise PackageReadmeError(
                "Invalid response format from libraries.io", "SEARCH_FAILED", status_code=502
            )
        return data


# Global client instance
search_client = LibrariesIOClient()
