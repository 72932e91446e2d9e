# -*- coding: utf-8 -*-
"""
PyPI README Service - package metadata and usage examples mined from
package documentation.
"""
__version__ = "1.0.0"

from .readme import UsageExample, clean_content, extract_examples  # noqa: E402

__all__ = ["UsageExample", "clean_content", "extract_examples", "__version__"]
