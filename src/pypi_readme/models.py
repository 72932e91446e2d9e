# -*- coding: utf-8 -*-
"""
Pydantic data models for the API.
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UsageExampleModel(BaseModel):
    """A usage example mined from package documentation."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    description: str | None = None
    code: str
    language: str = "python"


class InstallationInfo(BaseModel):
    """Installation commands."""

    pip: str
    conda: str | None = None
    pipx: str | None = None


class RepositoryInfo(BaseModel):
    """Source repository."""

    type: str = "git"
    url: str
    directory: str | None = None


class PackageBasicInfo(BaseModel):
    """Core package metadata."""

    name: str
    version: str
    description: str = ""
    summary: str | None = None
    homepage: str | None = None
    package_url: str | None = None
    project_urls: dict[str, str] | None = None
    license: str | None = None
    author: str = "Unknown"
    maintainer: str | None = None
    keywords: list[str] = Field(default_factory=list)
    classifiers: list[str] = Field(default_factory=list)
    requires_python: str | None = None


class DownloadStats(BaseModel):
    """Download counters reported by PyPI."""

    last_day: int = 0
    last_week: int = 0
    last_month: int = 0


class PackageReadmeResponse(BaseModel):
    """README and usage examples of a package."""

    package_name: str
    version: str
    description: str = ""
    readme_content: str = ""
    readme_source: Literal["pypi", "github", "summary", "none"] = "none"
    usage_examples: list[UsageExampleModel] = Field(default_factory=list)
    installation: InstallationInfo
    basic_info: PackageBasicInfo
    repository: RepositoryInfo | None = None
    exists: bool = True


class PackageInfoResponse(BaseModel):
    """Package metadata summary."""

    package_name: str
    latest_version: str
    description: str
    author: str
    maintainer: str | None = None
    license: str | None = None
    keywords: list[str] = Field(default_factory=list)
    classifiers: list[str] = Field(default_factory=list)
    requires_python: str | None = None
    dependencies: list[str] | None = None
    dev_dependencies: list[str] | None = None
    download_stats: DownloadStats = Field(default_factory=DownloadStats)
    repository: RepositoryInfo | None = None


class BatchReadmeRequest(BaseModel):
    """Batch README request schema."""

    package_names: list[str] = Field(..., min_length=1, description="Package names")
    include_examples: bool = Field(default=True, description="Mine usage examples")


class ExtractExamplesRequest(BaseModel):
    """Raw documentation text to mine."""

    text: str = Field(..., description="Markdown documentation text")


class ExtractExamplesResponse(BaseModel):
    """Cleaned text and its ranked usage examples."""

    readme_content: str
    usage_examples: list[UsageExampleModel] = Field(default_factory=list)
    count: int = 0


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    version: str
    cache_ready: bool = False


class SearchScore(BaseModel):
    """Heuristic quality, popularity and maintenance scores in [0, 1]."""

    final: float
    quality: float
    popularity: float
    maintenance: float


class PackageSearchResult(BaseModel):
    """A package matching a search query."""

    name: str
    version: str
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    homepage: str | None = None
    repository_url: str | None = None
    license: str | None = None
    stars: int = 0
    score: SearchScore
    search_score: float = 0.0


class SearchPackagesResponse(BaseModel):
    """Ranked search results."""

    query: str
    total: int
    packages: list[PackageSearchResult] = Field(default_factory=list)
