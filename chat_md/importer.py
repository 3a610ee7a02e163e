"""
importer.py – read an exported chat document back into notes.

The reader is the inverse of the exporter's structural contract: front
matter and the hidden metadata comment give the metadata, ``<a id="p-N">``
anchors split the body into one section per prompt, and the navigation the
exporter adds (table of contents, anchors, Source/Exported rows, duplicate
H1) is stripped from each section.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Optional

from .front_matter import META_COMMENT_RE, parse_front_matter, parse_meta_comment
from .models import ExportMetadata

LOGGER = logging.getLogger(__name__)

ANCHOR_LINE_RE = re.compile(r'(^|\r?\n)\s*<a id="p-(\d+)"></a>\s*\r?\n', re.I)
TOC_BLOCK_RE = re.compile(
    r"^\s*##\s*Table of Contents\s*\r?\n(?:\r?\n)?(?:^\d+\.\s+\[.*?\]\(#p-\d+\)\s*\r?\n)+",
    re.M | re.I,
)
ANCHOR_ONLY_RE = re.compile(r'^\s*<a id="p-\d+"></a>\s*$(?:\r?\n)?', re.M | re.I)
SOURCE_ROW_RE = re.compile(r"^Source:\s.*$\r?\n?", re.M | re.I)
EXPORTED_ROW_RE = re.compile(r"^Exported:\s.*$\r?\n?", re.M | re.I)
H1_RE = re.compile(r"^#\s+(.+?)\s*$", re.M)
SECTION_HEADING_RE = re.compile(r"^\s*#{2,6}\s+(.+?)\s*$", re.M)


@dataclass
class TurnSection:
    index: int          # 0-based
    markdown: str


@dataclass
class ImportedNote:
    title: str
    markdown: str
    tags: list = field(default_factory=list)
    summary: Optional[str] = None
    provenance_url: Optional[str] = None
    subject: Optional[str] = None
    topic: Optional[str] = None
    note_id: Optional[str] = None
    chat_id: Optional[str] = None
    chat_title: Optional[str] = None
    file_name: Optional[str] = None
    turn_index: int = 1         # 1-based
    total_turns: int = 1


def _str_or_none(value) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def to_tag_list(value) -> list:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(t).strip() for t in value if str(t).strip()]
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return []


def split_turn_sections(body: str) -> list[TurnSection]:
    """One section per prompt anchor; [] when the body has no anchors."""
    matches = list(ANCHOR_LINE_RE.finditer(body))
    sections = []
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(body)
        sections.append(TurnSection(index=i, markdown=body[m.start():end]))
    return sections


def strip_navigation(md: str, subject: Optional[str] = None, topic: Optional[str] = None,
                     chat_title: Optional[str] = None, fm_title: Optional[str] = None) -> str:
    """Remove exporter navigation and a duplicate leading H1."""
    out = TOC_BLOCK_RE.sub("", md)
    out = ANCHOR_ONLY_RE.sub("", out)
    out = SOURCE_ROW_RE.sub("", out)
    out = EXPORTED_ROW_RE.sub("", out)
    out = META_COMMENT_RE.sub("", out)

    if subject and topic:
        composite = re.compile(
            r"^\ufeff?\s*#\s*" + re.escape(subject.strip()) + r"\s*[–—\-:]\s*"
            + re.escape(topic.strip()) + r"\s*\r?\n+", re.I)
        out = composite.sub("", out, count=1)

    candidates = []
    if subject and topic:
        candidates.append(f"{subject.strip()} - {topic.strip()}")
    candidates += [t for t in (chat_title, fm_title) if t]
    for title in candidates:
        dup = re.compile(r"^\ufeff?\s*#\s*" + re.escape(title.strip()) + r"\s*\r?\n+", re.I)
        stripped = dup.sub("", out, count=1)
        if stripped != out:
            out = stripped
            break

    out = out.replace("\r\n", "\n")
    return re.sub(r"\n{3,}", "\n\n", out).rstrip()


def read_export_metadata(markdown: str) -> ExportMetadata:
    """Metadata from the hidden comment, filled in from front matter."""
    fm, _ = parse_front_matter(markdown)
    data = dict(fm)
    data.update({k: v for k, v in (parse_meta_comment(markdown) or {}).items()
                 if v not in (None, "")})
    return ExportMetadata.from_dict(data)


def parse_export(markdown: str, file_name: str = "") -> list[ImportedNote]:
    """Split one exported document into notes, one per prompt turn."""
    fm, body = parse_front_matter(markdown)

    subject = _str_or_none(fm.get("subject"))
    topic = _str_or_none(fm.get("topic"))
    fm_title = _str_or_none(fm.get("title"))
    chat_title = _str_or_none(fm.get("chatTitle"))
    h1 = H1_RE.search(body)

    common = dict(
        tags=to_tag_list(fm.get("tags")),
        summary=_str_or_none(fm.get("summary")),
        provenance_url=_str_or_none(fm.get("pageUrl")),
        subject=subject,
        topic=topic,
        note_id=_str_or_none(fm.get("noteId")),
        chat_id=_str_or_none(fm.get("chatId")),
        chat_title=chat_title,
        file_name=file_name or None,
    )

    def whole_document() -> list[ImportedNote]:
        base_title = (fm_title or chat_title or (h1.group(1).strip() if h1 else None)
                      or re.sub(r"\.(md|markdown)$", "", PurePath(file_name).name, flags=re.I))
        md = strip_navigation(body, subject, topic, chat_title, fm_title).strip()
        return [ImportedNote(title=base_title, markdown=md, turn_index=1, total_turns=1, **common)]

    sections = split_turn_sections(body)
    if not sections:
        return whole_document()

    notes = []
    for section in sections:
        cleaned = strip_navigation(section.markdown, subject, topic, chat_title, fm_title).strip()
        if not cleaned:
            continue
        heading = SECTION_HEADING_RE.search(cleaned)
        turn_number = section.index + 1
        notes.append(ImportedNote(
            title=heading.group(1).strip() if heading else f"Turn {turn_number}",
            markdown=cleaned,
            turn_index=turn_number,
            **common,
        ))

    if not notes:
        LOGGER.debug("%s: every turn section was empty, importing as one note", file_name)
        return whole_document()

    for note in notes:
        note.total_turns = len(notes)
    return notes
