# -*- coding: utf-8 -*-
"""
Domain types and tunables for README mining.
"""
from dataclasses import dataclass, field

# Canonical language names keyed by the aliases found in fence info strings
LANGUAGE_ALIASES: dict[str, str] = {
    "py": "python",
    "python3": "python",
    "bash": "bash",
    "shell": "bash",
    "sh": "bash",
    "console": "bash",
    "terminal": "bash",
    "cmd": "bash",
    "yml": "yaml",
    "cfg": "ini",
    "conf": "ini",
}

USAGE_SECTIONS = (
    "usage",
    "example",
    "examples",
    "quickstart",
    "quick start",
    "getting started",
    "tutorial",
    "how to use",
    "basic usage",
    "demo",
    "sample code",
    "code example",
    "api usage",
    "installation and usage",
)

GOOD_TITLE_KEYWORDS = (
    "usage",
    "example",
    "quickstart",
    "basic",
    "simple",
    "getting started",
)

# Substrings whose presence marks a block as code rather than captured output
CODE_INDICATORS = (
    "import",
    "from",
    "def",
    "class",
    "if",
    "for",
    "while",
    "try",
    "with",
    "=",
)

INSTALL_MARKERS = ("pip install", "pipx install")


def normalize_language(tag: str) -> str:
    """Map a fence language tag onto its canonical name."""
    tag = (tag or "").strip().lower()
    return LANGUAGE_ALIASES.get(tag, tag)


@dataclass
class UsageExample:
    """A code snippet judged useful for showing how a package is used."""

    title: str
    code: str
    language: str = "python"
    description: str | None = None


@dataclass(frozen=True)
class ReadmeConfig:
    """Thresholds and vocabularies driving cleaning, classification and ranking."""

    min_code_length: int = 10
    max_code_length: int = 5000
    ideal_example_length: int = 200
    max_examples: int = 20
    # Inline spans carry no fence, so they get a tighter upper bound
    max_inline_length: int = 200

    default_language: str = "python"
    fallback_title: str = "Code Example"
    inline_title: str = "Quick Example"

    relevant_languages: frozenset[str] = field(
        default_factory=lambda: frozenset(
            {"python", "bash", "yaml", "json", "toml", "ini", ""}
        )
    )
    config_languages: frozenset[str] = field(
        default_factory=lambda: frozenset({"yaml", "json", "toml", "ini"})
    )
    usage_sections: tuple[str, ...] = USAGE_SECTIONS
    good_title_keywords: tuple[str, ...] = GOOD_TITLE_KEYWORDS
    code_indicators: tuple[str, ...] = CODE_INDICATORS
    install_markers: tuple[str, ...] = INSTALL_MARKERS


DEFAULT_CONFIG = ReadmeConfig()
