# -*- coding: utf-8 -*-
"""
Duplicate removal and relevance ranking of usage examples.
"""
import logging
import re
from typing import Callable, NamedTuple

from .classifier import has_assignment
from .types import DEFAULT_CONFIG, ReadmeConfig, UsageExample

logger = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"\s+")
METHOD_CALL_RE = re.compile(r"\w+\.\w+\(")


class Weight(NamedTuple):
    name: str
    points: int
    matches: Callable[[UsageExample, ReadmeConfig], bool]


def _good_title(example: UsageExample, config: ReadmeConfig) -> bool:
    title = (example.title or "").lower()
    return any(keyword in title for keyword in config.good_title_keywords)


def _moderate_length(example: UsageExample, config: ReadmeConfig) -> bool:
    return 50 <= len(example.code) <= config.ideal_example_length


SCORE_WEIGHTS: tuple[Weight, ...] = (
    Weight("import", 50, lambda ex, _: "import " in ex.code),
    Weight("from", 45, lambda ex, _: "from " in ex.code),
    Weight("assignment", 30, lambda ex, _: has_assignment(ex.code)),
    Weight("method_call", 25, lambda ex, _: bool(METHOD_CALL_RE.search(ex.code))),
    Weight("good_title", 20, _good_title),
    Weight("description", 15, lambda ex, _: bool(ex.description)),
    Weight("moderate_length", 10, _moderate_length),
)


def dedupe_key(code: str) -> str:
    """Lower-cased code with whitespace collapsed and quote style unified."""
    key = code.lower()
    key = WHITESPACE_RE.sub(" ", key)
    key = key.replace("'", '"')
    return key.strip()


def relevance_score(example: UsageExample, config: ReadmeConfig = DEFAULT_CONFIG) -> int:
    """
    Additive relevance score.

    Examples longer than the ideal length lose one point per full hundred
    characters over it; scores may go negative.
    """
    score = sum(w.points for w in SCORE_WEIGHTS if w.matches(example, config))

    overflow = len(example.code) - config.ideal_example_length
    if overflow > 0:
        score -= overflow // 100

    return score


def deduplicate(examples: list[UsageExample]) -> list[UsageExample]:
    """Keep the first example for every distinct normalized code."""
    seen: set[str] = set()
    unique: list[UsageExample] = []

    for example in examples:
        key = dedupe_key(example.code)
        if key not in seen:
            seen.add(key)
            unique.append(example)

    logger.debug(f"Deduplicated examples: {len(examples)} -> {len(unique)}")
    return unique


def dedupe_and_rank(
        examples: list[UsageExample],
        config: ReadmeConfig = DEFAULT_CONFIG,
) -> list[UsageExample]:
    """
    Remove duplicates, then order by descending relevance.

    The sort is stable, so equal scores keep extraction order. The result is
    capped at `config.max_examples`.
    """
    unique = deduplicate(examples)
    ranked = sorted(unique, key=lambda ex: relevance_score(ex, config), reverse=True)
    return ranked[: config.max_examples]
