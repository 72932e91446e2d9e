# -*- coding: utf-8 -*-
"""
Package README service.

Fetches package metadata from PyPI (with GitHub as README fallback), runs
the README mining pipeline on the documentation text and caches the
resulting responses.
"""
import logging
from typing import Any

from .builders import (
    build_basic_info,
    build_installation_info,
    build_search_result,
    extract_download_stats,
    extract_repository,
    format_person,
    parse_dependencies,
    parse_keywords,
)
from .cache import (
    ResponseCache,
    cache,
    package_info_key,
    package_readme_key,
    search_key,
)
from .config import settings
from .errors import PackageNotFoundError, VersionNotFoundError
from .github_client import GitHubClient, github_client
from .models import (
    ExtractExamplesResponse,
    InstallationInfo,
    PackageBasicInfo,
    PackageInfoResponse,
    PackageReadmeResponse,
    RepositoryInfo,
    SearchPackagesResponse,
    UsageExampleModel,
)
from .pypi_client import PyPIClient, pypi_client
from .readme import ReadmePipeline, UsageExample
from .search_client import LibrariesIOClient, search_client
from .validators import (
    validate_limit,
    validate_package_name,
    validate_score,
    validate_search_query,
    validate_version,
)

logger = logging.getLogger(__name__)

NO_README_PLACEHOLDER = "No README available for this package."


def _example_models(examples: list[UsageExample]) -> list[UsageExampleModel]:
    return [UsageExampleModel.model_validate(ex, from_attributes=True) for ex in examples]


class PackageReadmeService:
    """Builds README and metadata responses for PyPI packages."""

    def __init__(
            self,
            pypi: PyPIClient | None = None,
            github: GitHubClient | None = None,
            response_cache: ResponseCache | None = None,
            pipeline: ReadmePipeline | None = None,
            libraries_io: LibrariesIOClient | None = None,
    ):
        self.pypi = pypi or pypi_client
        self.github = github or github_client
        self.cache = response_cache or cache
        self.pipeline = pipeline or ReadmePipeline(settings.readme_config())
        self.libraries_io = libraries_io or search_client

    async def get_package_readme(
            self,
            package_name: str,
            version: str = "latest",
            include_examples: bool = True,
    ) -> PackageReadmeResponse:
        """
        README content and ranked usage examples of a package.

        Missing packages or versions produce a response with exists=False;
        other upstream failures propagate.
        """
        package_name = validate_package_name(package_name)
        version = validate_version(version)

        logger.info(f"Fetching package README: {package_name}@{version}")

        cache_key = package_readme_key(package_name, version)
        cached = await self.cache.get(cache_key)
        if cached:
            logger.debug(f"Cache hit for package README: {package_name}@{version}")
            response = PackageReadmeResponse.model_validate(cached)
            if not include_examples:
                response.usage_examples = []
            return response

        try:
            payload = await self.pypi.get_version_info(package_name, version)
        except (PackageNotFoundError, VersionNotFoundError) as e:
            logger.info(f"Package README not found: {e.message}")
            return self._not_found_response(package_name, version)

        info = payload.get("info") or {}
        repository = extract_repository(info)

        raw_content, source = await self._resolve_readme(info, repository)
        readme_content = self.pipeline.clean(raw_content)

        examples = []
        if include_examples and readme_content:
            examples = self.pipeline.extract_examples(readme_content)

        response = PackageReadmeResponse(
            package_name=package_name,
            version=info.get("version") or version,
            description=info.get("summary") or "",
            readme_content=readme_content,
            readme_source=source,
            usage_examples=_example_models(examples),
            installation=build_installation_info(info),
            basic_info=build_basic_info(info, settings.MAX_KEYWORDS),
            repository=repository,
        )

        # Only fully mined responses are cached
        if include_examples:
            await self.cache.set(cache_key, response.model_dump(mode="json"))

        logger.info(
            f"Fetched README for {package_name}@{response.version}",
            extra={"source": source, "examples": len(examples)},
        )
        return response

    async def get_package_info(
            self,
            package_name: str,
            include_dependencies: bool = True,
            include_dev_dependencies: bool = False,
    ) -> PackageInfoResponse:
        """
        Metadata summary of the latest release.

        Raises:
            PackageNotFoundError: if PyPI does not know the package
        """
        package_name = validate_package_name(package_name)
        logger.info(f"Fetching package info: {package_name}")

        cache_key = package_info_key(package_name)
        cached = await self.cache.get(cache_key)
        if cached is None:
            payload = await self.pypi.get_package_info(package_name)
            cached = self._package_info_payload(package_name, payload)
            await self.cache.set(cache_key, cached)

        response = PackageInfoResponse.model_validate(cached)

        # Dependency lists are always cached and trimmed per request
        if not include_dependencies:
            response.dependencies = None
        if not include_dev_dependencies:
            response.dev_dependencies = None

        return response

    def extract_from_text(self, text: str) -> ExtractExamplesResponse:
        """Run the README pipeline on caller-supplied text (no I/O)."""
        readme_content = self.pipeline.clean(text)
        examples = self.pipeline.extract_examples(readme_content)
        return ExtractExamplesResponse(
            readme_content=readme_content,
            usage_examples=_example_models(examples),
            count=len(examples),
        )

    async def search_packages(
            self,
            query: str,
            limit: int | None = None,
            quality: float | None = None,
            popularity: float | None = None,
    ) -> SearchPackagesResponse:
        """
        Search PyPI packages through libraries.io.

        Results are filtered by the optional minimum quality and popularity
        scores, sorted by descending text relevance and cut to `limit`.
        Upstream failures propagate.
        """
        query = validate_search_query(query)
        limit = validate_limit(settings.SEARCH_DEFAULT_LIMIT if limit is None else limit)
        if quality is not None:
            quality = validate_score(quality, "Quality")
        if popularity is not None:
            popularity = validate_score(popularity, "Popularity")

        logger.info(f"Searching packages: {query} (limit: {limit})")

        cache_key = search_key(query, limit, quality, popularity)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for search: {query}")
            return SearchPackagesResponse.model_validate(cached)

        projects = await self.libraries_io.search(query, limit)
        results = [build_search_result(project, query) for project in projects]

        if quality is not None:
            results = [r for r in results if r.score.quality >= quality]
        if popularity is not None:
            results = [r for r in results if r.score.popularity >= popularity]

        results.sort(key=lambda r: r.search_score, reverse=True)
        results = results[:limit]

        response = SearchPackagesResponse(query=query, total=len(results), packages=results)
        await self.cache.set(
            cache_key, response.model_dump(mode="json"), ttl=settings.SEARCH_CACHE_TTL_SECONDS
        )

        logger.info(f"Search for {query} returned {len(results)} packages")
        return response

    async def _resolve_readme(
            self, info: dict[str, Any], repository: RepositoryInfo | None
    ) -> tuple[str, str]:
        """
        Pick the documentation text and report where it came from.

        Order: markdown long description, GitHub README, any long
        description, summary, placeholder.
        """
        description = info.get("description") or ""
        content_type = (info.get("description_content_type") or "").lower()

        if description.strip() and "markdown" in content_type:
            logger.debug("Using README from PyPI description")
            return description, "pypi"

        if settings.GITHUB_FALLBACK_ENABLED and repository:
            readme = await self.github.get_readme_from_url(repository.url)
            if readme:
                logger.debug(f"Using README from GitHub: {repository.url}")
                return readme, "github"

        if description.strip():
            return description, "pypi"
        if info.get("summary"):
            return info["summary"], "summary"
        return NO_README_PLACEHOLDER, "none"

    @staticmethod
    def _package_info_payload(package_name: str, payload: dict[str, Any]) -> dict[str, Any]:
        info = payload.get("info") or {}
        requires_dist = info.get("requires_dist")

        response = PackageInfoResponse(
            package_name=package_name,
            latest_version=info.get("version") or "",
            description=(
                info.get("summary") or info.get("description") or "No description available"
            ),
            author=format_person(info.get("author"), info.get("author_email")) or "Unknown",
            maintainer=format_person(info.get("maintainer"), info.get("maintainer_email")),
            license=info.get("license") or None,
            keywords=parse_keywords(info.get("keywords"), settings.MAX_KEYWORDS),
            classifiers=info.get("classifiers") or [],
            requires_python=info.get("requires_python") or None,
            dependencies=parse_dependencies(
                requires_dist, extras=False, limit=settings.MAX_DEPENDENCIES
            ),
            dev_dependencies=parse_dependencies(
                requires_dist, extras=True, limit=settings.MAX_DEV_DEPENDENCIES
            ),
            download_stats=extract_download_stats(payload),
            repository=extract_repository(info),
        )
        return response.model_dump(mode="json")

    def failed_response(self, package_name: str, reason: str) -> PackageReadmeResponse:
        """Placeholder entry for a package whose batch lookup failed."""
        return self._not_found_response(package_name, "latest", description=reason)

    @staticmethod
    def _not_found_response(
            package_name: str, version: str, description: str = "Package not found"
    ) -> PackageReadmeResponse:
        return PackageReadmeResponse(
            package_name=package_name,
            version=version,
            description=description,
            installation=InstallationInfo(
                pip=f"pip install {package_name}",
                conda=f"conda install -c conda-forge {package_name}",
                pipx=f"pipx install {package_name}",
            ),
            basic_info=PackageBasicInfo(
                name=package_name,
                version=version,
                description=description,
            ),
            exists=False,
        )


# Global service instance
package_service = PackageReadmeService()
