# -*- coding: utf-8 -*-
"""
Tests for the GitHub README fallback client.
"""
import httpx
import pytest

from pypi_readme.errors import ReadmeNotFoundError
from pypi_readme.github_client import GitHubClient

BASE_URL = "https://api.github.test"


def make_client(handler, token=""):
    return GitHubClient(
        base_url=BASE_URL, token=token, transport=httpx.MockTransport(handler)
    )


class TestRepoInfo:
    """Tests for repository URL parsing."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/psf/requests",
            "https://github.com/psf/requests/",
            "https://github.com/psf/requests.git",
            "git+https://github.com/psf/requests.git",
            "git@github.com:psf/requests.git",
            "https://www.github.com/psf/requests/tree/main/docs",
            "http://github.com/psf/requests#readme",
        ],
    )
    def test_github_urls(self, url):
        assert GitHubClient.extract_repo_info(url) == ("psf", "requests")

    @pytest.mark.parametrize(
        "url", ["", "https://gitlab.com/psf/requests", "https://example.com"]
    )
    def test_other_urls(self, url):
        assert GitHubClient.extract_repo_info(url) is None


@pytest.mark.asyncio
class TestReadme:
    """Tests for README retrieval."""

    async def test_get_readme(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text="# requests\n")

        readme = await make_client(handler, token="secret").get_readme("psf", "requests")

        assert readme == "# requests\n"
        assert seen[0].url.path == "/repos/psf/requests/readme"
        assert seen[0].headers["Accept"] == "application/vnd.github.raw+json"
        assert seen[0].headers["Authorization"] == "Bearer secret"

    async def test_no_token_no_authorization(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text="readme")

        await make_client(handler).get_readme("psf", "requests")
        assert "Authorization" not in seen[0].headers

    async def test_readme_not_found(self):
        client = make_client(lambda request: httpx.Response(404))
        with pytest.raises(ReadmeNotFoundError):
            await client.get_readme("psf", "missing")

    async def test_readme_from_url(self):
        client = make_client(lambda request: httpx.Response(200, text="readme"))
        assert await client.get_readme_from_url("https://github.com/psf/requests") == "readme"

    async def test_readme_from_url_swallows_errors(self):
        client = make_client(lambda request: httpx.Response(404))
        assert await client.get_readme_from_url("https://github.com/psf/missing") is None

    async def test_readme_from_non_github_url(self):
        def handler(request):
            raise AssertionError("no request expected")

        client = make_client(handler)
        assert await client.get_readme_from_url("https://example.com/repo") is None


@pytest.mark.asyncio
class TestTokenAndRateLimit:
    """Tests for token validation and quota lookup."""

    async def test_validate_without_token(self):
        def handler(request):
            raise AssertionError("no request expected")

        assert await make_client(handler).validate_token() is False

    async def test_validate_valid_token(self):
        client = make_client(lambda request: httpx.Response(200, json={}), token="t")
        assert await client.validate_token() is True

    async def test_validate_rejected_token(self):
        client = make_client(lambda request: httpx.Response(401), token="t")
        assert await client.validate_token() is False

    async def test_rate_limit_info(self):
        body = {"rate": {"limit": 60, "remaining": 42, "reset": 1700000000}}
        client = make_client(lambda request: httpx.Response(200, json=body))

        info = await client.get_rate_limit_info()

        assert info["limit"] == 60
        assert info["remaining"] == 42
        assert info["reset"].timestamp() == 1700000000

    async def test_rate_limit_info_failure(self):
        client = make_client(lambda request: httpx.Response(500))
        assert await client.get_rate_limit_info() is None
