# -*- coding: utf-8 -*-
"""
Pytest configuration and fixtures.
"""
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from pypi_readme.api import app
from pypi_readme.cache import ResponseCache
from pypi_readme.config import settings


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app, raise_server_exceptions=False)


@pytest_asyncio.fixture
async def test_cache():
    """Temporary cache database."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        temp_path = Path(f.name)

    # Override config
    original_path = settings.CACHE_PATH
    original_enabled = settings.CACHE_ENABLED
    settings.CACHE_PATH = temp_path
    settings.CACHE_ENABLED = True

    response_cache = ResponseCache()
    await response_cache.initialize()

    yield response_cache

    # Cleanup
    await response_cache.close()
    settings.CACHE_PATH = original_path
    settings.CACHE_ENABLED = original_enabled
    for path in (temp_path, Path(f"{temp_path}-wal"), Path(f"{temp_path}-shm")):
        if path.exists():
            path.unlink()


@pytest.fixture
def fast_retries(monkeypatch):
    """Retry without waiting between attempts."""
    monkeypatch.setattr(settings, "RETRY_MIN_WAIT", 0)
    monkeypatch.setattr(settings, "RETRY_MAX_WAIT", 0)


@pytest.fixture
def sample_readme():
    """Markdown long description with the usual README sections."""
    return (
        "# requests\n"
        "\n"
        "<p align=\"center\"><img src=\"logo.png\"></p>\n"
        "\n"
        "HTTP for Humans.\n"
        "\n"
        "## Installation\n"
        "\n"
        "```bash\n"
        "pip install requests\n"
        "```\n"
        "\n"
        "## Usage\n"
        "\n"
        "Fetch a page and inspect it.\n"
        "\n"
        "```python\n"
        "import requests\n"
        "r = requests.get(\"https://example.com\")\n"
        "print(r.status_code)\n"
        "```\n"
        "\n"
        "Call `requests.post(url, data=payload)` to send a form.\n"
    )


@pytest.fixture
def sample_payload(sample_readme):
    """PyPI JSON API payload for a package."""
    return {
        "info": {
            "name": "requests",
            "version": "2.32.3",
            "summary": "Python HTTP for Humans.",
            "description": sample_readme,
            "description_content_type": "text/markdown",
            "author": "Kenneth Reitz",
            "author_email": "me@kennethreitz.org",
            "maintainer": None,
            "maintainer_email": None,
            "license": "Apache-2.0",
            "keywords": "http, client, web",
            "classifiers": [
                "Programming Language :: Python :: 3",
                "License :: OSI Approved :: Apache Software License",
            ],
            "requires_python": ">=3.8",
            "requires_dist": [
                "charset-normalizer<4,>=2",
                "idna<4,>=2.5",
                "urllib3<3,>=1.21.1",
                "PySocks!=1.5.7,>=1.5.6; extra == \"socks\"",
            ],
            "home_page": "https://requests.readthedocs.io",
            "package_url": "https://pypi.org/project/requests/",
            "project_urls": {
                "Documentation": "https://requests.readthedocs.io",
                "Source": "https://github.com/psf/requests",
            },
            "downloads": {"last_day": -1, "last_week": -1, "last_month": -1},
        },
        "releases": {},
    }
