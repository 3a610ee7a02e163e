"""
config.py – constants shared by the export pipeline, the reader and the CLI.
"""

import os
from pathlib import Path

# ── 0.  Titles & anchors ────────────────────────────────────────────────
TITLE_MAX_CHARS   = 220              # longest derived prompt title
TITLE_TRUNCATE_AT = 217              # keep this many chars, then ELLIPSIS
ELLIPSIS          = "…"
DEFAULT_TITLE     = "Chat Export"    # H1 when the chat has no title
ANCHOR_PREFIX     = "p-"

# ── 1.  HTML → Markdown ─────────────────────────────────────────────────
HTML_PARSER   = os.getenv("CHAT_MD_HTML_PARSER", "lxml").strip() or "lxml"
CHROME_SELECTOR = 'button, svg, nav, [data-testid="toolbar"]'

# ── 2.  Metadata blocks ─────────────────────────────────────────────────
META_COMMENT_TAG     = "chatalog-meta"
META_SCHEMA_VERSION  = 1

FRONT_MATTER_KEYS = (                # (wire key, ExportMetadata attribute)
    ("noteId",     "note_id"),
    ("source",     "source"),
    ("chatId",     "chat_id"),
    ("chatTitle",  "chat_title"),
    ("pageUrl",    "page_url"),
    ("exportedAt", "exported_at"),
    ("model",      "model"),
    ("subject",    "subject"),
    ("topic",      "topic"),
    ("summary",    "summary"),
    ("tags",       "tags"),
)

META_COMMENT_KEYS = (
    ("noteId",      "note_id"),
    ("chatId",      "chat_id"),
    ("chatTitle",   "chat_title"),
    ("pageUrl",     "page_url"),
    ("exportedAt",  "exported_at"),
    ("source",      "source"),
    ("model",       "model"),
    ("subjectHint", "subject"),
    ("topicHint",   "topic"),
    ("summary",     "summary"),
    ("tags",        "tags"),
)

# ── 3.  CLI ─────────────────────────────────────────────────────────────
ROOT = Path("dump")                  # where export bundles live
GLOB = "**/*.json"
