"""
front_matter.py – the two metadata blocks at the top of an export.

    ---
    noteId: n1
    chatTitle: Test Chat
    tags: ["a","b"]
    ---

    <!-- chatalog-meta {"schemaVersion":1,"noteId":"n1",...} -->

The front matter is for people and Markdown tools; the single-line comment
carries the same fields as versioned JSON for exact round-trips.
"""

import json
import logging
import re
from typing import Optional

from . import config
from .models import ExportMetadata

LOGGER = logging.getLogger(__name__)

META_COMMENT_RE = re.compile(
    r"<!--\s*" + re.escape(config.META_COMMENT_TAG) + r"\s+(\{.*?\})\s*-->")


def _compact_json(value) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _present(value) -> bool:
    return value is not None and value != "" and value != () and value != []


def render_front_matter(meta: ExportMetadata) -> str:
    lines = ["---"]
    for key, attr in config.FRONT_MATTER_KEYS:
        value = getattr(meta, attr)
        if not _present(value):
            continue
        if isinstance(value, (list, tuple)):
            value = _compact_json(list(value))
        lines.append(f"{key}: {value}")
    lines += ["---", ""]
    return "\n".join(lines)


def render_meta_comment(meta: ExportMetadata) -> str:
    payload = {"schemaVersion": config.META_SCHEMA_VERSION}
    for key, attr in config.META_COMMENT_KEYS:
        value = getattr(meta, attr)
        if _present(value):
            payload[key] = list(value) if isinstance(value, tuple) else value
    return f"<!-- {config.META_COMMENT_TAG} {_compact_json(payload)} -->"


# ------- reading back ----------------------------------------------------
def parse_front_matter(markdown: str) -> tuple[dict, str]:
    """Split a leading ``---`` block into ({key: value}, body).

    Values that look like JSON arrays are decoded; everything else stays a
    string. Text without front matter comes back unchanged with ``{}``.
    """
    text = (markdown or "").replace("\r\n", "\n")
    if text.startswith("\ufeff"):
        text = text[1:]
    if not text.startswith("---\n"):
        return {}, text

    end = text.find("\n---", 3)
    if end == -1:
        return {}, text
    block = text[4:end]
    rest = text[end + 4:]
    body = rest[1:] if rest.startswith("\n") else rest

    fm: dict = {}
    for line in block.split("\n"):
        if ":" not in line or line.startswith(" "):
            continue
        key, _, value = line.partition(":")
        value = value.strip()
        if value.startswith("[") and value.endswith("]"):
            try:
                value = json.loads(value)
            except ValueError:
                pass
        fm[key.strip()] = value
    return fm, body


def parse_meta_comment(markdown: str) -> Optional[dict]:
    m = META_COMMENT_RE.search(markdown or "")
    if not m:
        return None
    try:
        data = json.loads(m.group(1))
    except ValueError as e:
        LOGGER.warning("ignoring malformed %s comment: %s", config.META_COMMENT_TAG, e)
        return None
    return data if isinstance(data, dict) else None
