"""Unit tests for per-turn blocks and suggestion tidying."""

import pytest

from chat_md.sections import (
    normalize_body,
    normalize_suggestions,
    quote_lines,
    render_prompt_block,
    render_response_block,
    render_role_block,
    role_label,
)


class TestRoleLabel:

    @pytest.mark.parametrize("role,label", [
        ("user", "Prompt"),
        ("prompt", "Prompt"),
        ("assistant", "Response"),
        ("response", "Response"),
        ("system", "System"),
        ("tool", "Tool"),
        ("function", "Tool"),
    ])
    def test_labels(self, role, label):
        assert role_label(role) == label


class TestSuggestions:
    """Tests for the suggestions tail normalizer."""

    def test_rule_heading_and_bullets(self):
        out = normalize_suggestions("Answer\n\n---\n\n**Suggestions:**\n• one\n→ two")
        assert "#### Suggestions\n- one\n- two" in out
        assert "---" not in out

    def test_bare_heading_line(self):
        assert normalize_suggestions("Text\nsuggestions\nmore") == (
            "Text\n\n#### Suggestions\nmore"
        )

    def test_sentence_mentioning_suggestions_untouched(self):
        md = "Intro\nSuggestions are welcome\nend"
        assert normalize_suggestions(md) == md

    def test_glyph_bullets_indented(self):
        assert normalize_suggestions("a\n  ◦ nested") == "a\n- nested"


class TestPromptBlock:
    """Tests for prompt rendering."""

    def test_anchor_label_and_quote(self):
        block = render_prompt_block("Hello\r\nworld\r\n\r\nbye\n\n", "p-1")
        assert block == '<a id="p-1"></a>\n**Prompt**\n\n> Hello\n> world\n>\n> bye'

    def test_markdown_in_prompt_kept_verbatim(self):
        block = render_prompt_block("use `x` and *y*", "p-2")
        assert block.endswith("> use `x` and *y*")

    def test_quote_lines(self):
        assert quote_lines("a\n\nb") == "> a\n>\n> b"


class TestResponseBlock:
    """Tests for response and other-role blocks."""

    def test_repair_applied(self):
        block = render_response_block("js\n\n`f()`")
        assert block == "**Response**\n\n```\n``js\nf()\n``\n```"

    def test_repair_skipped(self):
        block = render_response_block("js\n\n`f()`\n", repair=False)
        assert block == "**Response**\n\njs\n\n`f()`"

    def test_role_block(self):
        assert render_role_block("System", "be brief\r\n") == "**System**\n\nbe brief"

    def test_normalize_body(self):
        assert normalize_body("a\r\nb  \n\n") == "a\nb"
        assert normalize_body(None) == ""
