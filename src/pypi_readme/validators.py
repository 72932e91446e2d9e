# -*- coding: utf-8 -*-
"""
Validation of package names and versions.
"""
import re

from .config import settings
from .errors import InvalidParameterError

MAX_PACKAGE_NAME_LENGTH = 214

PACKAGE_NAME_RE = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?$")
# Simplified PEP 440: epoch, release, pre, post and dev segments
VERSION_RE = re.compile(
    r"^([0-9]+!)?[0-9]+(\.[0-9]+)*((a|b|rc)[0-9]+)?(\.post[0-9]+)?(\.dev[0-9]+)?$"
)


def _invalid_name(message: str) -> InvalidParameterError:
    return InvalidParameterError(message, "INVALID_PACKAGE_NAME")


def validate_package_name(package_name: str) -> str:
    """
    Validate a PyPI package name (PEP 508 naming rules).

    Returns:
        The trimmed name

    Raises:
        InvalidParameterError: with a hint on how to fix the name
    """
    if not isinstance(package_name, str) or not package_name.strip():
        raise _invalid_name(
            'Package name is required. Provide a PyPI package name (e.g. "requests").'
        )

    name = package_name.strip()

    if len(name) > MAX_PACKAGE_NAME_LENGTH:
        raise _invalid_name(
            f'Package name "{name[:40]}..." is too long ({len(name)} characters, '
            f"max {MAX_PACKAGE_NAME_LENGTH})."
        )

    invalid_chars = sorted(set(re.findall(r"[^A-Za-z0-9._-]", name)))
    if invalid_chars:
        raise _invalid_name(
            f'Package name "{name}" contains invalid characters: '
            f"{', '.join(invalid_chars)}. Only letters, numbers, '-', '_' and '.' "
            "are allowed."
        )

    if not name[0].isalnum() or not name[-1].isalnum():
        raise _invalid_name(
            f'Package name "{name}" must start and end with a letter or number. '
            f'Try: "{name.strip("._-")}"'
        )

    for run, char in (("..", "."), ("--", "-"), ("__", "_")):
        if run in name:
            raise _invalid_name(
                f'Package name "{name}" cannot contain consecutive "{char}". '
                f'Try: "{re.sub(re.escape(char) + "+", char, name)}"'
            )

    if not PACKAGE_NAME_RE.match(name):
        raise _invalid_name(f'Package name "{name}" has an invalid format.')

    return name


def validate_version(version: str) -> str:
    """
    Validate a version specifier: "latest" or a PEP 440 release.

    Returns:
        The trimmed version
    """
    if not isinstance(version, str) or not version.strip():
        raise InvalidParameterError("Version cannot be empty", "INVALID_VERSION")

    version = version.strip()
    if version == "latest" or VERSION_RE.match(version):
        return version

    raise InvalidParameterError(
        f'Invalid version "{version}". Must follow the PEP 440 versioning scheme.',
        "INVALID_VERSION",
    )


def normalize_package_name(package_name: str) -> str:
    """PEP 503 normalization: lower-case, runs of -_. become a single -."""
    return re.sub(r"[-_.]+", "-", package_name).lower()


def validate_search_query(query: str) -> str:
    """Validate a search query; returns it trimmed."""
    if not isinstance(query, str) or not query.strip():
        raise InvalidParameterError("Search query cannot be empty", "INVALID_SEARCH_QUERY")

    query = query.strip()
    if len(query) > settings.MAX_SEARCH_QUERY_LENGTH:
        raise InvalidParameterError(
            f"Search query is too long (max {settings.MAX_SEARCH_QUERY_LENGTH} characters)",
            "INVALID_SEARCH_QUERY",
        )
    return query


def validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidParameterError("Limit must be an integer", "INVALID_LIMIT")
    if not 1 <= limit <= settings.MAX_SEARCH_LIMIT:
        raise InvalidParameterError(
            f"Limit must be between 1 and {settings.MAX_SEARCH_LIMIT}", "INVALID_LIMIT"
        )
    return limit


def validate_score(score: float, label: str) -> float:
    """Validate a minimum score filter in [0, 1]."""
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not 0 <= score <= 1:
        raise InvalidParameterError(
            f"{label} score must be a number between 0 and 1", "INVALID_SCORE"
        )
    return float(score)
