# -*- coding: utf-8 -*-
"""
README mining pipeline.

raw text -> clean -> extract (classifier applied in-line) -> dedupe/rank.

Both entry points are fail-open.
"""
import logging

from .cleaner import clean_content
from .extractor import SnippetExtractor
from .ranker import dedupe_and_rank
from .types import DEFAULT_CONFIG, ReadmeConfig, UsageExample

logger = logging.getLogger(__name__)


class ReadmePipeline:
    """Stateless facade over the cleaning and example-mining steps."""

    def __init__(self, config: ReadmeConfig = DEFAULT_CONFIG):
        self.config = config
        self._extractor = SnippetExtractor(config)

    def clean(self, text: str) -> str:
        """Normalize documentation text; returns the input unchanged on failure."""
        return clean_content(text)

    def extract_examples(self, text: str) -> list[UsageExample]:
        """
        Extract ranked, de-duplicated usage examples.

        Returns an empty list for empty or whitespace-only input, for input
        without qualifying snippets and on any internal failure.
        """
        if not isinstance(text, str) or not text.strip():
            return []

        try:
            cleaned = clean_content(text)
            candidates = self._extractor.extract(cleaned)
            examples = dedupe_and_rank(candidates, self.config)

            logger.debug(
                f"Extracted {len(examples)} usage examples "
                f"from {len(candidates)} candidates"
            )
            return examples

        except Exception as e:
            logger.error(f"Usage example extraction failed: {e}")
            return []


# Global pipeline instance
readme_pipeline = ReadmePipeline()


def extract_examples(text: str, config: ReadmeConfig | None = None) -> list[UsageExample]:
    """Module-level shortcut for ReadmePipeline.extract_examples."""
    pipeline = readme_pipeline if config is None else ReadmePipeline(config)
    return pipeline.extract_examples(text)
