# -*- coding: utf-8 -*-
"""
Heuristics deciding whether a code snippet is a usage example.

The policy is two ordered rule tables: rejection rules are checked first and
the first match rejects; otherwise the snippet is accepted if any acceptance
rule matches. Snippets are never parsed, only matched against keywords.
"""
import logging
import re
from typing import Callable, NamedTuple

from .types import DEFAULT_CONFIG, ReadmeConfig

logger = logging.getLogger(__name__)

CALL_RE = re.compile(r"[A-Za-z_]\w*\(")
SIMPLE_CALL_RE = re.compile(r"^[A-Za-z_]\w*\.\w+\(")


class Snippet(NamedTuple):
    """Classifier input: stripped code, canonical language and section name."""

    code: str
    language: str
    section: str


class Rule(NamedTuple):
    name: str
    matches: Callable[[Snippet, ReadmeConfig], bool]


def is_usage_section(section: str, config: ReadmeConfig = DEFAULT_CONFIG) -> bool:
    """Check a lower-cased heading against the usage vocabulary, both ways round."""
    section = section.strip().lower()
    if not section:
        return False
    return any(
        keyword in section or section in keyword for keyword in config.usage_sections
    )


def has_assignment(code: str) -> bool:
    """True when the code assigns (`=` present) and never compares (`==`)."""
    return "=" in code and "==" not in code


def has_install_command(code: str, config: ReadmeConfig = DEFAULT_CONFIG) -> bool:
    return any(marker in code for marker in config.install_markers)


def looks_like_output(code: str, config: ReadmeConfig = DEFAULT_CONFIG) -> bool:
    """
    Detect captured program output.

    A block is output when it carries no code indicator keyword, no call
    expression and no install command.
    """
    if any(indicator in code for indicator in config.code_indicators):
        return False
    if CALL_RE.search(code):
        return False
    return not has_install_command(code, config)


def _length_out_of_bounds(snippet: Snippet, config: ReadmeConfig) -> bool:
    return not config.min_code_length <= len(snippet.code) <= config.max_code_length


def _irrelevant_language(snippet: Snippet, config: ReadmeConfig) -> bool:
    return snippet.language not in config.relevant_languages


def _output_only(snippet: Snippet, config: ReadmeConfig) -> bool:
    return looks_like_output(snippet.code, config)


def _python_code(snippet: Snippet, config: ReadmeConfig) -> bool:
    return (snippet.language or config.default_language) == "python"


def _install_command(snippet: Snippet, config: ReadmeConfig) -> bool:
    return snippet.language == "bash" and has_install_command(snippet.code, config)


def _configuration(snippet: Snippet, config: ReadmeConfig) -> bool:
    return snippet.language in config.config_languages


def _usage_section(snippet: Snippet, config: ReadmeConfig) -> bool:
    return is_usage_section(snippet.section, config)


REJECTION_RULES: tuple[Rule, ...] = (
    Rule("length", _length_out_of_bounds),
    Rule("language", _irrelevant_language),
    Rule("output", _output_only),
)

ACCEPTANCE_RULES: tuple[Rule, ...] = (
    Rule("python", _python_code),
    Rule("install", _install_command),
    Rule("configuration", _configuration),
    Rule("usage_section", _usage_section),
)


def rejection_reason(
        code: str,
        language: str,
        section: str,
        config: ReadmeConfig = DEFAULT_CONFIG,
) -> str | None:
    """
    Return the name of the rule rejecting a snippet, or None if it is accepted.

    `language` is the canonical tag; an empty string means the fence declared
    no language.
    """
    snippet = Snippet(code.strip(), language, section)

    for rule in REJECTION_RULES:
        if rule.matches(snippet, config):
            return rule.name

    if any(rule.matches(snippet, config) for rule in ACCEPTANCE_RULES):
        return None
    return "no_usage_signal"


def is_usage_example(
        code: str,
        language: str,
        section: str,
        config: ReadmeConfig = DEFAULT_CONFIG,
) -> bool:
    """Decide whether a fenced block is a genuine usage example."""
    reason = rejection_reason(code, language, section, config)
    if reason:
        logger.debug(f"Snippet rejected ({reason})", extra={"language": language})
        return False
    return True


def is_inline_usage(code: str, config: ReadmeConfig = DEFAULT_CONFIG) -> bool:
    """
    Lighter check for inline spans: bounded length plus an import, an
    assignment or a `module.function(` call.
    """
    code = code.strip()
    if not config.min_code_length <= len(code) <= min(
            config.max_inline_length, config.max_code_length
    ):
        return False
    return (
        "import " in code
        or has_assignment(code)
        or bool(SIMPLE_CALL_RE.match(code))
    )
