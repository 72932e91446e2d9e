# -*- coding: utf-8 -*-
"""
GitHub REST client used as README fallback when PyPI has no usable
long description.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any

import httpx

from .config import settings
from .errors import ReadmeNotFoundError
from .http_client import get_with_retry

logger = logging.getLogger(__name__)

# Matched against the URL once protocol, "git+" prefix, ".git" and trailing
# slash have been removed
REPO_URL_PATTERNS = [
    re.compile(r"^git@github\.com:([^/]+)/([^/]+)$"),
    re.compile(r"(?:^|\.)github\.com/([^/]+)/([^/#?]+)"),
]


class GitHubClient:
    """Async client for the subset of the GitHub API needed for READMEs."""

    def __init__(
            self,
            base_url: str | None = None,
            token: str | None = None,
            timeout: float | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.GITHUB_API_URL).rstrip("/")
        self.token = token if token is not None else settings.GITHUB_TOKEN
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self._transport = transport

    def _headers(self, accept: str) -> dict[str, str]:
        headers = {"Accept": accept}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def extract_repo_info(repo_url: str) -> tuple[str, str] | None:
        """
        Extract (owner, repo) from a GitHub URL.

        Handles https, git+https, ssh (git@github.com:owner/repo) and
        .git-suffixed forms, with or without a trailing path.
        """
        if not repo_url:
            return None

        clean_url = repo_url.strip()
        clean_url = re.sub(r"^git\+", "", clean_url)
        clean_url = re.sub(r"^https?://", "", clean_url)
        clean_url = clean_url.rstrip("/")
        clean_url = re.sub(r"\.git$", "", clean_url)

        for pattern in REPO_URL_PATTERNS:
            match = pattern.search(clean_url)
            if match:
                owner, repo = match.group(1), match.group(2)
                return owner, re.sub(r"\.git$", "", repo)

        logger.debug(f"Not a GitHub repository URL: {repo_url}")
        return None

    async def get_readme(self, owner: str, repo: str) -> str:
        """
        Fetch the raw README of a repository's default branch.

        Raises:
            ReadmeNotFoundError: if the repository has no README
        """
        logger.debug(f"Fetching README from GitHub: {owner}/{repo}")
        response = await get_with_retry(
            f"{self.base_url}/repos/{owner}/{repo}/readme",
            context=f"GitHub API for {owner}/{repo}",
            headers=self._headers("application/vnd.github.raw+json"),
            timeout=self.timeout,
            transport=self._transport,
        )
        if response.status_code == 404:
            raise ReadmeNotFoundError(f"{owner}/{repo}")

        logger.debug(f"Fetched README from GitHub: {owner}/{repo}")
        return response.text

    async def get_readme_from_url(self, repo_url: str) -> str | None:
        """README text for a repository URL, or None on any failure."""
        repo_info = self.extract_repo_info(repo_url)
        if not repo_info:
            return None

        try:
            return await self.get_readme(*repo_info)
        except Exception as e:
            logger.warning(f"Failed to fetch README from {repo_url}: {e}")
            return None

    async def validate_token(self) -> bool:
        """Check that the configured token is accepted by GitHub."""
        if not self.token:
            logger.debug("No GitHub token configured")
            return False

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    f"{self.base_url}/user",
                    headers={
                        "User-Agent": settings.USER_AGENT,
                        **self._headers("application/vnd.github+json"),
                    },
                )
            if response.is_success:
                return True
            logger.warning(
                "GitHub token appears to be invalid",
                extra={"status": response.status_code},
            )
            return False
        except Exception as e:
            logger.error(f"Error validating GitHub token: {e}")
            return False

    async def get_rate_limit_info(self) -> dict[str, Any] | None:
        """Core rate limit counters, or None if they cannot be read."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    f"{self.base_url}/rate_limit",
                    headers={
                        "User-Agent": settings.USER_AGENT,
                        **self._headers("application/vnd.github+json"),
                    },
                )
            response.raise_for_status()
            rate = response.json()["rate"]
            return {
                "limit": rate["limit"],
                "remaining": rate["remaining"],
                "reset": datetime.fromtimestamp(rate["reset"], tz=timezone.utc),
            }
        except Exception as e:
            logger.error(f"Error fetching GitHub rate limit info: {e}")
            return None


# Global client instance
github_client = GitHubClient()
