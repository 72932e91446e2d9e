# -*- coding: utf-8 -*-
"""
README mining: cleaning package documentation and extracting usage examples.
"""
from .cleaner import clean_content
from .pipeline import ReadmePipeline, extract_examples, readme_pipeline
from .types import DEFAULT_CONFIG, ReadmeConfig, UsageExample

__all__ = [
    "DEFAULT_CONFIG",
    "ReadmeConfig",
    "ReadmePipeline",
    "UsageExample",
    "clean_content",
    "extract_examples",
    "readme_pipeline",
]
