# -*- coding: utf-8 -*-
"""
README text normalization.

Turns a package long description into tidy markdown:
- Normalize line endings
- Remove HTML comments, then HTML tags (tag content is kept)
- Strip trailing whitespace and collapse runs of blank lines
- Canonicalize horizontal rules, table separators and empty links
"""
import logging
import re

logger = logging.getLogger(__name__)

HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
# Opening, closing and self-closing tags plus doctype-style declarations
HTML_TAG_RE = re.compile(r"</?[A-Za-z][^<>]*>|<![A-Za-z][^<>]*>")
TRAILING_WS_RE = re.compile(r"[ \t]+$", re.MULTILINE)
EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
HORIZONTAL_RULE_RE = re.compile(r"^[ \t]*(?:-{3,}|\*{3,}|_{3,})[ \t]*$", re.MULTILINE)
TABLE_SEPARATOR_RE = re.compile(r"\|[ \t\-:|]+\|")
EMPTY_LINK_RE = re.compile(r"(?<!!)\[([^\[\]]*)\]\(\s*\)")


def _normalize_line_endings(content: str) -> str:
    return content.replace("\r\n", "\n").replace("\r", "\n")


def _remove_html(content: str) -> str:
    content = HTML_COMMENT_RE.sub("", content)
    return HTML_TAG_RE.sub("", content)


def _collapse_whitespace(content: str) -> str:
    content = TRAILING_WS_RE.sub("", content)
    return EXCESS_NEWLINES_RE.sub("\n\n", content)


def _collapse_table_separator(match: re.Match) -> str:
    return re.sub(r"[ \t]+", " ", match.group(0))


def _repair_markdown(content: str) -> str:
    content = HORIZONTAL_RULE_RE.sub("---", content)
    content = TABLE_SEPARATOR_RE.sub(_collapse_table_separator, content)
    return EMPTY_LINK_RE.sub(r"\1", content)


CLEANING_STEPS = (
    _normalize_line_endings,
    _remove_html,
    _collapse_whitespace,
    _repair_markdown,
    str.strip,
)


def _apply_steps(content: str) -> str:
    for step in CLEANING_STEPS:
        content = step(content)
    return content


def clean_content(text: str) -> str:
    """
    Normalize README text. Never raises.

    Removing a tag or an empty link can expose a new match for an earlier
    step, so the chain is re-run until the text stops changing. A pass that
    changes the text either shortens it or canonicalizes a rule, so the
    number of passes is bounded by the input length.

    Args:
        text: Raw documentation text. Non-string input is treated as empty.

    Returns:
        Cleaned text, or the original text if cleaning failed.
    """
    if not isinstance(text, str) or not text:
        return ""

    try:
        cleaned = text
        for _ in range(len(text) + 2):
            previous = cleaned
            cleaned = _apply_steps(cleaned)
            if cleaned == previous:
                break

        logger.debug(f"README cleaned: {len(text)} -> {len(cleaned)} chars")
        return cleaned

    except Exception as e:
        logger.error(f"README cleaning failed: {e}")
        return text
