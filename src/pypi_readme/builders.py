# -*- coding: utf-8 -*-
"""
Shaping of raw PyPI and libraries.io metadata into response fragments.
"""
import math
import re
from datetime import datetime, timezone
from typing import Any

from .models import (
    InstallationInfo,
    PackageBasicInfo,
    PackageSearchResult,
    RepositoryInfo,
    SearchScore,
)

# project_urls keys checked, in order, for the source repository
REPOSITORY_URL_KEYS = [
    "Repository",
    "Source",
    "Source Code",
    "Code",
    "GitHub",
    "GitLab",
    "Bitbucket",
]

CODE_FORGES = ["github.com", "gitlab.com", "bitbucket.org"]

# Classifiers suggesting the package ships a command-line application
CLI_CLASSIFIERS = [
    "Environment :: Console",
    "Intended Audience :: End Users",
    "Topic :: System :: Systems Administration",
    "Topic :: Utilities",
]

CLI_NAME_KEYWORDS = ["cli", "command", "tool", "utility", "script"]


def format_person(name: str | None, email: str | None) -> str | None:
    """Format as `Name <email>`, falling back to whichever part exists."""
    if name and email:
        return f"{name} <{email}>"
    return name or email or None


def parse_keywords(value: Any, limit: int | None = None) -> list[str]:
    """Keywords from a list or a comma/space separated string."""
    if isinstance(value, list):
        keywords = [str(k).strip() for k in value if str(k).strip()]
    elif isinstance(value, str):
        keywords = [k for k in re.split(r"[,\s]+", value) if k]
    else:
        keywords = []
    return keywords[:limit] if limit else keywords


def parse_dependencies(
        requires_dist: list[str] | None,
        extras: bool = False,
        limit: int | None = None,
) -> list[str]:
    """
    Requirement strings from `requires_dist`, environment markers removed.

    Args:
        requires_dist: Raw PEP 508 requirement strings
        extras: Return only requirements guarded by an `extra ==` marker
            (development/optional dependencies) instead of the others
        limit: Maximum number of requirements returned
    """
    dependencies = []
    for requirement in requires_dist or []:
        if not isinstance(requirement, str):
            continue
        is_extra = bool(re.search(r"extra\s*==", requirement))
        if is_extra != extras:
            continue
        name = requirement.split(";")[0].strip()
        if name:
            dependencies.append(name)
    return dependencies[:limit] if limit else dependencies


def extract_download_stats(payload: dict[str, Any]) -> dict[str, int]:
    downloads = (payload.get("info") or {}).get("downloads") or {}
    return {
        "last_day": max(int(downloads.get("last_day") or 0), 0),
        "last_week": max(int(downloads.get("last_week") or 0), 0),
        "last_month": max(int(downloads.get("last_month") or 0), 0),
    }


def extract_repository(info: dict[str, Any]) -> RepositoryInfo | None:
    """Repository from project_urls, else a forge-hosted home page."""
    project_urls = info.get("project_urls") or {}
    for key in REPOSITORY_URL_KEYS:
        url = project_urls.get(key)
        if url:
            return RepositoryInfo(type="git", url=url)

    home_page = info.get("home_page") or ""
    if any(forge in home_page for forge in CODE_FORGES):
        return RepositoryInfo(type="git", url=home_page)

    return None


def is_cli_package(info: dict[str, Any]) -> bool:
    classifiers = info.get("classifiers") or []
    if any(marker in c for c in classifiers for marker in CLI_CLASSIFIERS):
        return True
    name = (info.get("name") or "").lower()
    return any(keyword in name for keyword in CLI_NAME_KEYWORDS)


def build_installation_info(info: dict[str, Any]) -> InstallationInfo:
    name = info.get("name") or ""
    return InstallationInfo(
        pip=f"pip install {name}",
        conda=f"conda install -c conda-forge {name}",
        pipx=(
            f"pipx install {name}"
            if is_cli_package(info)
            else "# pipx is for CLI applications only - use pip instead"
        ),
    )


def build_basic_info(info: dict[str, Any], max_keywords: int | None = None) -> PackageBasicInfo:
    return PackageBasicInfo(
        name=info.get("name") or "",
        version=info.get("version") or "",
        description=info.get("summary") or info.get("description") or "",
        summary=info.get("summary") or None,
        homepage=info.get("home_page") or None,
        package_url=info.get("package_url") or None,
        project_urls=info.get("project_urls") or None,
        license=info.get("license") or None,
        author=format_person(info.get("author"), info.get("author_email")) or "Unknown",
        maintainer=format_person(info.get("maintainer"), info.get("maintainer_email")),
        keywords=parse_keywords(info.get("keywords"), max_keywords),
        classifiers=info.get("classifiers") or [],
        requires_python=info.get("requires_python") or None,
    )


# (threshold, points) pairs, checked from the highest threshold down
STAR_TIERS = [(10000, 0.4), (1000, 0.3), (100, 0.2), (10, 0.1)]
FORK_TIERS = [(1000, 0.2), (100, 0.1), (10, 0.05)]


def _tier_points(value: int, tiers: list[tuple[int, float]]) -> float:
    for threshold, points in tiers:
        if value > threshold:
            return points
    return 0.0


def _months_since(published: Any, now: datetime) -> float | None:
    """Age in 30-day months of an ISO 8601 timestamp, None if unparseable."""
    if not isinstance(published, str) or not published:
        return None
    try:
        when = datetime.fromisoformat(published.replace("Z", "+00:00"))
    except ValueError:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return (now - when).total_seconds() / (86400 * 30)


def quality_score(project: dict[str, Any], now: datetime) -> float:
    score = 0.5
    if len(project.get("description") or "") > 10:
        score += 0.1
    months = _months_since(project.get("latest_release_published_at"), now)
    if months is not None:
        if months < 6:
            score += 0.2
        elif months < 12:
            score += 0.1
    if project.get("homepage") or project.get("repository_url"):
        score += 0.1
    if project.get("normalized_licenses"):
        score += 0.1
    return round(min(score, 1.0), 3)


def popularity_score(project: dict[str, Any]) -> float:
    score = 0.3
    score += _tier_points(int(project.get("stars") or 0), STAR_TIERS)
    score += _tier_points(int(project.get("forks") or 0), FORK_TIERS)
    return round(min(score, 1.0), 3)


def maintenance_score(project: dict[str, Any], now: datetime) -> float:
    score = 0.4
    months = _months_since(project.get("latest_release_published_at"), now)
    if months is not None:
        if months < 3:
            score += 0.3
        elif months < 6:
            score += 0.2
        elif months < 12:
            score += 0.1
    if len(project.get("versions") or []) > 1:
        score += 0.1
    return round(min(score, 1.0), 3)


def search_relevance(project: dict[str, Any], query: str) -> float:
    """
    Text relevance of a project to the query.

    Exact name 100 (else name contains query 50), description 20, each
    matching keyword 30, plus 5 * log10(stars + 1).
    """
    query = query.lower()
    name = (project.get("name") or "").lower()
    score = 0.0

    if name == query:
        score += 100
    elif query in name:
        score += 50
    if query in (project.get("description") or "").lower():
        score += 20
    for keyword in project.get("keywords") or []:
        if isinstance(keyword, str) and query in keyword.lower():
            score += 30

    stars = int(project.get("stars") or 0)
    if stars > 0:
        score += math.log10(stars + 1) * 5
    return round(score, 3)


def build_search_result(
        project: dict[str, Any], query: str, now: datetime | None = None
) -> PackageSearchResult:
    """Shape a libraries.io project record into a scored search result."""
    now = now or datetime.now(timezone.utc)
    quality = quality_score(project, now)
    popularity = popularity_score(project)
    maintenance = maintenance_score(project, now)
    licenses = project.get("normalized_licenses") or []

    return PackageSearchResult(
        name=project.get("name") or "unknown",
        version=(
            project.get("latest_stable_release_number")
            or project.get("latest_release_number")
            or "0.0.0"
        ),
        description=project.get("description") or "",
        keywords=[k for k in project.get("keywords") or [] if isinstance(k, str)],
        homepage=project.get("homepage") or None,
        repository_url=project.get("repository_url") or None,
        license=licenses[0] if licenses else None,
        stars=int(project.get("stars") or 0),
        score=SearchScore(
            final=round((quality + popularity + maintenance) / 3, 3),
            quality=quality,
            popularity=popularity,
            maintenance=maintenance,
        ),
        search_score=search_relevance(project, query),
    )
