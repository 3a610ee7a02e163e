"""Tests for reading exported documents back into notes."""

import pytest

from chat_md.exporter import build_markdown_export
from chat_md.importer import (
    parse_export,
    read_export_metadata,
    split_turn_sections,
    strip_navigation,
    to_tag_list,
)
from chat_md.models import ExportMetadata, Turn


META = ExportMetadata(
    note_id="n1",
    source="chatgpt",
    chat_id="c1",
    chat_title="Test Chat",
    page_url="https://example.com/c/c1",
    exported_at="2024-05-01T10:00:00Z",
    subject="Math",
    topic="Algebra",
    summary="Two questions",
    tags=("school", "algebra"),
)

TURNS = [
    Turn("user", "First question"),
    Turn("assistant", "Answer one"),
    Turn("user", "Second"),
    Turn("assistant", "## Details\nAnswer two"),
]


@pytest.fixture
def exported():
    return build_markdown_export(META, TURNS)


class TestReadMetadata:

    def test_round_trip(self, exported):
        assert read_export_metadata(exported) == META

    def test_front_matter_only(self):
        md = "---\nnoteId: a\nchatTitle: Only FM\n---\n# Only FM\n"
        meta = read_export_metadata(md)
        assert meta.note_id == "a"
        assert meta.chat_title == "Only FM"

    def test_comment_wins_over_front_matter(self):
        md = ('---\nnoteId: a\nchatTitle: Old\n---\n'
              '<!-- chatalog-meta {"schemaVersion":1,"noteId":"a","chatTitle":"New"} -->\n')
        assert read_export_metadata(md).chat_title == "New"

    def test_nothing_to_read(self):
        assert read_export_metadata("plain text") == ExportMetadata(note_id="")


class TestSplitSections:

    def test_one_section_per_anchor(self, exported):
        sections = split_turn_sections(exported)
        assert [s.index for s in sections] == [0, 1]
        assert '<a id="p-1"></a>' in sections[0].markdown
        assert "Answer one" in sections[0].markdown
        assert "Second" not in sections[0].markdown
        assert sections[1].markdown.rstrip().endswith("Answer two")

    def test_no_anchors(self):
        assert split_turn_sections("# Title\n\nbody") == []


class TestParseExport:
    """Tests for turning a document into notes."""

    def test_notes_per_turn(self, exported):
        notes = parse_export(exported, "chat.md")
        assert len(notes) == 2
        first, second = notes
        assert first.markdown == "**Prompt**\n\n> First question\n\n**Response**\n\nAnswer one"
        assert first.title == "Turn 1"
        assert second.title == "Details"
        assert [n.turn_index for n in notes] == [1, 2]
        assert all(n.total_turns == 2 for n in notes)

    def test_notes_carry_metadata(self, exported):
        note = parse_export(exported, "chat.md")[0]
        assert note.tags == ["school", "algebra"]
        assert note.summary == "Two questions"
        assert note.provenance_url == "https://example.com/c/c1"
        assert note.subject == "Math"
        assert note.topic == "Algebra"
        assert note.note_id == "n1"
        assert note.chat_id == "c1"
        assert note.chat_title == "Test Chat"
        assert note.file_name == "chat.md"

    def test_navigation_not_in_notes(self, exported):
        for note in parse_export(exported):
            assert "Table of Contents" not in note.markdown
            assert "<a id=" not in note.markdown
            assert "chatalog-meta" not in note.markdown
            assert "Source:" not in note.markdown

    def test_without_anchors_uses_front_matter_title(self):
        notes = parse_export("---\ntitle: Solo\n---\n# Solo\n\nJust text\n")
        assert len(notes) == 1
        assert notes[0].title == "Solo"
        assert notes[0].markdown == "Just text"
        assert notes[0].turn_index == notes[0].total_turns == 1

    def test_without_anchors_uses_h1(self):
        notes = parse_export("# Heading\n\nbody")
        assert notes[0].title == "Heading"

    def test_file_stem_fallback(self):
        notes = parse_export("Plain words only", "notes/chat.md")
        assert notes[0].title == "chat"
        assert notes[0].markdown == "Plain words only"
        assert notes[0].file_name == "notes/chat.md"


class TestStripNavigation:

    def test_toc_removed(self):
        md = "## Table of Contents\n\n1. [A](#p-1)\n2. [B](#p-2)\n\nBody"
        assert strip_navigation(md) == "Body"

    def test_rows_removed(self):
        out = strip_navigation("Source: https://x.test\nExported: now\n\nText")
        assert out.strip() == "Text"

    def test_composite_h1_removed(self):
        assert strip_navigation("# Math – Algebra\n\nContent", "Math", "Algebra") == "Content"

    def test_chat_title_h1_removed(self):
        assert strip_navigation("# Test Chat\n\nContent", chat_title="Test Chat") == "Content"

    def test_other_h1_kept(self):
        md = "# Something else\n\nContent"
        assert strip_navigation(md, chat_title="Test Chat") == md

    def test_blank_runs_collapsed(self):
        assert strip_navigation("a\n\n\n\nb\n\n") == "a\n\nb"


class TestTags:

    @pytest.mark.parametrize("value,expected", [
        (None, []),
        ("", []),
        ("a, b ,,c", ["a", "b", "c"]),
        (["x", " y ", ""], ["x", "y"]),
        (("t",), ["t"]),
        (42, []),
    ])
    def test_to_tag_list(self, value, expected):
        assert to_tag_list(value) == expected
