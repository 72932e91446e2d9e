# -*- coding: utf-8 -*-
"""
Candidate snippet extraction from markdown text.

A single pass over the lines tracks the current section heading and the
fenced-block state. Fenced blocks are filtered through the classifier as soon
as they close; inline code spans from the running text are collected as
secondary candidates.
"""
import logging
import re

from .classifier import is_inline_usage, is_usage_example, is_usage_section
from .types import DEFAULT_CONFIG, ReadmeConfig, UsageExample, normalize_language

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^#+\s")
FENCE_LANGUAGE_RE = re.compile(r"^`{3,}\s*([\w+#.-]+)")
# Single-backtick spans on one line, not part of a longer backtick run
INLINE_CODE_RE = re.compile(r"(?<!`)`([^`\n]+)`(?!`)")


def format_title(section: str) -> str:
    """Capitalize the first letter of every whitespace-separated word."""
    return " ".join(word[:1].upper() + word[1:] for word in section.split())


def fence_language(fence_line: str) -> str:
    """Canonical language of an opening fence, or "" when none is declared."""
    match = FENCE_LANGUAGE_RE.match(fence_line.strip())
    return normalize_language(match.group(1)) if match else ""


def section_name(heading_line: str) -> str:
    return re.sub(r"^#+\s*", "", heading_line.strip()).strip().lower()


class SnippetExtractor:
    """
    Locates fenced and inline code snippets.

    Holds only its immutable configuration; all scan state is local to a call.
    """

    def __init__(self, config: ReadmeConfig = DEFAULT_CONFIG):
        self.config = config

    def extract(self, text: str) -> list[UsageExample]:
        """
        Extract accepted candidates in document order.

        Fenced blocks come first, followed by inline spans.
        """
        blocks, running_text = self._scan_lines(text)
        inline = self._inline_examples(running_text)
        logger.debug(
            f"Extracted {len(blocks)} fenced and {len(inline)} inline candidates"
        )
        return blocks + inline

    def _scan_lines(self, text: str) -> tuple[list[UsageExample], list[str]]:
        """Walk the document once; return fenced examples and non-fence lines."""
        examples: list[UsageExample] = []
        running_text: list[str] = []

        section = ""
        description: list[str] = []
        in_fence = False
        language = ""
        body: list[str] = []

        for line in text.split("\n"):
            stripped = line.strip()

            if stripped.startswith("```"):
                if not in_fence:
                    in_fence = True
                    language = fence_language(stripped)
                    body = []
                else:
                    in_fence = False
                    example = self._block_example(
                        "\n".join(body), language, section, description
                    )
                    if example:
                        examples.append(example)
                    description = []
                continue

            if in_fence:
                body.append(line)
                continue

            running_text.append(line)

            if HEADING_RE.match(stripped):
                section = section_name(stripped)
                description = []
            elif stripped and is_usage_section(section, self.config):
                description.append(stripped)

        if in_fence:
            logger.debug("Unterminated code fence ignored", extra={"section": section})

        return examples, running_text

    def _block_example(
            self,
            body: str,
            language: str,
            section: str,
            description: list[str],
    ) -> UsageExample | None:
        code = body.strip()
        if not is_usage_example(code, language, section, self.config):
            return None

        return UsageExample(
            title=format_title(section) or self.config.fallback_title,
            code=code,
            language=language or self.config.default_language,
            description=" ".join(description) or None,
        )

    def _inline_examples(self, lines: list[str]) -> list[UsageExample]:
        """
        Inline code spans found in the non-fence lines of the document.

        Fence bodies are excluded: backticks inside a code block are shell
        substitutions or string content, not inline markdown code.
        """
        examples = []
        for match in INLINE_CODE_RE.finditer("\n".join(lines)):
            code = match.group(1).strip()
            if is_inline_usage(code, self.config):
                examples.append(
                    UsageExample(
                        title=self.config.inline_title,
                        code=code,
                        language=self.config.default_language,
                    )
                )
        return examples
