# -*- coding: utf-8 -*-
"""
Tests for the FastAPI API.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from pypi_readme.cache import ResponseCache
from pypi_readme.config import settings
from pypi_readme.errors import NetworkError, PackageNotFoundError
from pypi_readme.github_client import GitHubClient
from pypi_readme.pypi_client import PyPIClient
from pypi_readme.search_client import LibrariesIOClient
from pypi_readme.service import PackageReadmeService


@pytest.fixture
def mock_service(sample_payload):
    """Service over mocked upstream clients, patched into the API module."""
    pypi = AsyncMock(spec=PyPIClient)
    pypi.get_version_info.return_value = sample_payload
    pypi.get_package_info.return_value = sample_payload
    github = AsyncMock(spec=GitHubClient)
    github.get_readme_from_url.return_value = None
    libraries_io = AsyncMock(spec=LibrariesIOClient)
    libraries_io.search.return_value = [
        {"name": "httpx", "description": "HTTP client", "stars": 13000},
        {"name": "respx", "description": "Mock httpx", "stars": 500},
    ]

    service = PackageReadmeService(
        pypi=pypi, github=github, response_cache=ResponseCache(), libraries_io=libraries_io
    )
    with patch("pypi_readme.api.package_service", service):
        yield service


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_status(self, client):
        """Health endpoint should return status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "cache_ready" in data

    def test_request_id_generated(self, client):
        response = client.get("/health")
        assert response.headers[settings.REQUEST_ID_HEADER]

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={settings.REQUEST_ID_HEADER: "abc-123"})
        assert response.headers[settings.REQUEST_ID_HEADER] == "abc-123"


class TestReadmeEndpoint:
    """Tests for /packages/{name}/readme."""

    def test_readme(self, client, mock_service):
        response = client.get("/packages/requests/readme")

        assert response.status_code == 200
        data = response.json()
        assert data["exists"] is True
        assert data["readme_source"] == "pypi"
        assert data["usage_examples"][0]["language"] == "python"

    def test_readme_without_examples(self, client, mock_service):
        response = client.get("/packages/requests/readme", params={"include_examples": "false"})
        assert response.json()["usage_examples"] == []

    def test_readme_version_param(self, client, mock_service):
        client.get("/packages/requests/readme", params={"version": "2.31.0"})
        mock_service.pypi.get_version_info.assert_awaited_once_with("requests", "2.31.0")

    def test_unknown_package(self, client, mock_service):
        mock_service.pypi.get_version_info.side_effect = PackageNotFoundError("nope")

        response = client.get("/packages/nope/readme")

        assert response.status_code == 200
        assert response.json()["exists"] is False

    def test_invalid_name(self, client, mock_service):
        response = client.get("/packages/bad!name/readme")

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_PACKAGE_NAME"

    def test_invalid_version(self, client, mock_service):
        response = client.get("/packages/requests/readme", params={"version": "v1"})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_VERSION"

    def test_upstream_failure(self, client, mock_service):
        mock_service.pypi.get_version_info.side_effect = NetworkError("PyPI down")

        response = client.get("/packages/requests/readme")

        assert response.status_code == 502
        assert response.json()["error"] == "NETWORK_ERROR"


class TestInfoEndpoint:
    """Tests for /packages/{name}."""

    def test_info(self, client, mock_service):
        response = client.get("/packages/requests")

        assert response.status_code == 200
        data = response.json()
        assert data["latest_version"] == "2.32.3"
        assert data["dependencies"]
        assert data["dev_dependencies"] is None

    def test_info_flags(self, client, mock_service):
        response = client.get(
            "/packages/requests",
            params={"include_dependencies": "false", "include_dev_dependencies": "true"},
        )
        data = response.json()
        assert data["dependencies"] is None
        assert data["dev_dependencies"] == ["PySocks!=1.5.7,>=1.5.6"]

    def test_info_not_found(self, client, mock_service):
        mock_service.pypi.get_package_info.side_effect = PackageNotFoundError("nope")

        response = client.get("/packages/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "PACKAGE_NOT_FOUND"


class TestBatchEndpoint:
    """Tests for /packages/readme/batch."""

    def test_batch(self, client, mock_service, sample_payload):
        async def version_info(name, version):
            if name == "broken":
                raise NetworkError("PyPI down")
            return sample_payload

        mock_service.pypi.get_version_info.side_effect = version_info

        response = client.post(
            "/packages/readme/batch",
            json={"package_names": ["requests", "broken", "bad!name"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert [item["package_name"] for item in data] == ["requests", "broken", "bad!name"]
        assert [item["exists"] for item in data] == [True, False, False]
        assert data[1]["description"] == "Network error: PyPI down"

    def test_batch_without_examples(self, client, mock_service):
        response = client.post(
            "/packages/readme/batch",
            json={"package_names": ["requests"], "include_examples": False},
        )
        assert response.json()[0]["usage_examples"] == []

    def test_batch_requires_names(self, client):
        response = client.post("/packages/readme/batch", json={"package_names": []})
        assert response.status_code == 422

    def test_batch_size_limit(self, client, mock_service):
        names = [f"pkg{i}" for i in range(settings.MAX_BATCH_SIZE + 1)]
        response = client.post("/packages/readme/batch", json={"package_names": names})
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "INVALID_PARAMETER"
        assert data["details"] == {"max_batch_size": settings.MAX_BATCH_SIZE}


class TestSearchEndpoint:
    """Tests for /packages/search."""

    def test_search(self, client, mock_service):
        response = client.get("/packages/search", params={"q": "httpx", "limit": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "httpx"
        assert data["total"] == 2
        assert [p["name"] for p in data["packages"]] == ["httpx", "respx"]
        assert set(data["packages"][0]["score"]) == {"final", "quality", "popularity", "maintenance"}
        mock_service.libraries_io.search.assert_awaited_once_with("httpx", 5)

    def test_search_is_not_a_package_name(self, client, mock_service):
        client.get("/packages/search", params={"q": "httpx"})
        mock_service.pypi.get_package_info.assert_not_called()

    def test_search_requires_query(self, client, mock_service):
        response = client.get("/packages/search")
        assert response.status_code == 422

    def test_invalid_limit(self, client, mock_service):
        response = client.get("/packages/search", params={"q": "httpx", "limit": 0})
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_LIMIT"

    def test_invalid_score(self, client, mock_service):
        response = client.get("/packages/search", params={"q": "httpx", "quality": 3})
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_SCORE"

    def test_upstream_failure(self, client, mock_service):
        mock_service.libraries_io.search.side_effect = NetworkError("libraries.io down")
        response = client.get("/packages/search", params={"q": "httpx"})
        assert response.status_code == 502
        assert response.json()["error"] == "NETWORK_ERROR"


class TestExamplesEndpoint:
    """Tests for /readme/examples."""

    def test_extract_examples(self, client, sample_readme):
        response = client.post("/readme/examples", json={"text": sample_readme})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert data["usage_examples"][0]["title"] == "Usage"

    def test_requires_text(self, client):
        response = client.post("/readme/examples", json={})
        assert response.status_code == 422


class TestOperationalEndpoints:
    """Tests for cache stats and GitHub quota."""

    def test_cache_stats(self, client):
        response = client.get("/cache/stats")
        assert response.status_code == 200
        assert "entries" in response.json()

    @patch("pypi_readme.api.github_client")
    def test_rate_limit(self, mock_github, client):
        mock_github.get_rate_limit_info = AsyncMock(return_value={
            "limit": 60,
            "remaining": 59,
            "reset": datetime(2026, 1, 1, tzinfo=timezone.utc),
        })

        response = client.get("/github/rate-limit")

        assert response.status_code == 200
        assert response.json()["remaining"] == 59

    @patch("pypi_readme.api.github_client")
    def test_rate_limit_unavailable(self, mock_github, client):
        mock_github.get_rate_limit_info = AsyncMock(return_value=None)
        response = client.get("/github/rate-limit")
        assert response.status_code == 502
        assert response.json()["error"] == "NETWORK_ERROR"
