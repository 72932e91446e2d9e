# -*- coding: utf-8 -*-
"""
Tests for candidate snippet extraction.
"""
from pypi_readme.readme.extractor import (
    SnippetExtractor,
    fence_language,
    format_title,
    section_name,
)


class TestHelpers:
    """Tests for line-level helpers."""

    def test_format_title(self):
        assert format_title("basic usage") == "Basic Usage"

    def test_format_title_keeps_inner_case(self):
        assert format_title("using the API") == "Using The API"

    def test_fence_language_aliases(self):
        assert fence_language("```py") == "python"
        assert fence_language("```Shell") == "bash"
        assert fence_language("```yml") == "yaml"

    def test_fence_language_missing(self):
        assert fence_language("```") == ""

    def test_fence_language_ignores_attributes(self):
        assert fence_language("``` python title=example.py") == "python"

    def test_section_name(self):
        assert section_name("###  Quick Start  ") == "quick start"


class TestFencedBlocks:
    """Tests for fenced block extraction."""

    def test_title_from_section(self):
        text = "## basic usage\n\n```python\nimport foo\nfoo.run()\n```"
        examples = SnippetExtractor().extract(text)
        assert len(examples) == 1
        assert examples[0].title == "Basic Usage"

    def test_fallback_title_without_heading(self):
        text = "```python\nimport foo\nfoo.run()\n```"
        examples = SnippetExtractor().extract(text)
        assert examples[0].title == "Code Example"

    def test_description_from_usage_section(self):
        text = "## Usage\n\nRun the client.\nIt is fast.\n\n```python\nimport foo\nfoo.run()\n```"
        examples = SnippetExtractor().extract(text)
        assert examples[0].description == "Run the client. It is fast."

    def test_no_description_outside_usage_section(self):
        text = "## Internals\n\nSome notes.\n\n```python\nimport foo\nfoo.run()\n```"
        examples = SnippetExtractor().extract(text)
        assert examples[0].description is None

    def test_description_resets_after_block(self):
        text = (
            "## Usage\n\nFirst.\n\n```python\nimport foo\nfoo.run()\n```\n\n"
            "```python\nimport bar\nbar.run()\n```"
        )
        examples = SnippetExtractor().extract(text)
        assert examples[0].description == "First."
        assert examples[1].description is None

    def test_headings_inside_fence_do_not_change_section(self):
        text = "## Usage\n\n```python\n# Configure\nimport foo\nfoo.run()\n```"
        examples = SnippetExtractor().extract(text)
        assert examples[0].title == "Usage"
        assert examples[0].code.startswith("# Configure")

    def test_unterminated_fence_is_discarded(self):
        text = "## Usage\n\n```python\nimport foo\nfoo.run()"
        assert SnippetExtractor().extract(text) == []

    def test_rejected_block_is_skipped(self):
        text = "```javascript\nconsole.log('hello');\n```"
        assert SnippetExtractor().extract(text) == []

    def test_language_normalized(self):
        text = "```sh\npip install foo\n```"
        examples = SnippetExtractor().extract(text)
        assert examples[0].language == "bash"

    def test_document_order(self):
        text = (
            "```python\nimport first\nfirst.go()\n```\n"
            "```python\nimport second\nsecond.go()\n```"
        )
        codes = [ex.code for ex in SnippetExtractor().extract(text)]
        assert codes == ["import first\nfirst.go()", "import second\nsecond.go()"]


class TestInlineSpans:
    """Tests for inline code span extraction."""

    def test_inline_examples_after_blocks(self):
        text = (
            "Use `client = Client()` first.\n\n"
            "```python\nimport foo\nfoo.run()\n```"
        )
        examples = SnippetExtractor().extract(text)
        assert [ex.title for ex in examples] == ["Code Example", "Quick Example"]
        assert examples[1].code == "client = Client()"
        assert examples[1].language == "python"

    def test_spans_inside_fences_are_ignored(self):
        text = "```python\nvalue = `requests.get(url)`\n```"
        examples = SnippetExtractor().extract(text)
        assert len(examples) == 1
        assert examples[0].title == "Code Example"

    def test_non_code_spans_are_ignored(self):
        text = "Set the `verbose` flag or pass `--debug`."
        assert SnippetExtractor().extract(text) == []
