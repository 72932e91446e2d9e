# -*- coding: utf-8 -*-
"""
Service configuration using Pydantic BaseSettings.
"""
from pathlib import Path
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .readme import ReadmeConfig


class Settings(BaseSettings):
    """
    Central service configuration loaded from environment variables.
    Pydantic's BaseSettings provides validation, type casting,
    and reading from .env files.
    """

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8002

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    SERVICE_NAME: str = "pypi-readme-service"

    # API Documentation (disable in production)
    DOCS_ENABLED: bool = True

    # ==========================================================================
    # Upstream APIs
    # ==========================================================================

    PYPI_BASE_URL: str = "https://pypi.org/pypi"
    GITHUB_API_URL: str = "https://api.github.com"
    # Optional token, raises the GitHub rate limit from 60 to 5000 requests/hour
    GITHUB_TOKEN: str = ""
    # Fetch the README from GitHub when PyPI has no markdown description
    GITHUB_FALLBACK_ENABLED: bool = True

    # Package search (libraries.io)
    LIBRARIES_IO_API_URL: str = "https://libraries.io/api"
    LIBRARIES_IO_API_KEY: str = ""

    # Request timeout (in seconds)
    HTTP_TIMEOUT: float = 30.0
    USER_AGENT: str = "pypi-readme-service/1.0.0"

    # Retry
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: int = 1
    RETRY_MAX_WAIT: int = 10

    # ==========================================================================
    # Response cache (SQLite)
    # ==========================================================================

    CACHE_ENABLED: bool = True
    CACHE_PATH: Path = Path("data/cache.db")
    CACHE_TTL_SECONDS: int = 3600
    CACHE_MAX_ENTRIES: int = 1000

    # ==========================================================================
    # README mining
    # ==========================================================================

    README_MIN_CODE_LENGTH: int = 10
    README_MAX_CODE_LENGTH: int = 5000
    README_IDEAL_EXAMPLE_LENGTH: int = 200
    README_MAX_EXAMPLES: int = 20

    # ==========================================================================
    # Metadata limits
    # ==========================================================================

    MAX_KEYWORDS: int = 10
    MAX_DEPENDENCIES: int = 20
    MAX_DEV_DEPENDENCIES: int = 10
    MAX_BATCH_SIZE: int = 20

    # Search
    SEARCH_DEFAULT_LIMIT: int = 20
    MAX_SEARCH_LIMIT: int = 250
    MAX_SEARCH_QUERY_LENGTH: int = 200
    SEARCH_CACHE_TTL_SECONDS: int = 300

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = False

    # Request tracking
    REQUEST_ID_HEADER: str = "X-Request-ID"

    # Compression
    GZIP_MIN_SIZE: int = 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def readme_config(self) -> ReadmeConfig:
        """Build the immutable README mining configuration."""
        return ReadmeConfig(
            min_code_length=self.README_MIN_CODE_LENGTH,
            max_code_length=self.README_MAX_CODE_LENGTH,
            ideal_example_length=self.README_IDEAL_EXAMPLE_LENGTH,
            max_examples=self.README_MAX_EXAMPLES,
        )


# Global configuration instance
settings = Settings()
