"""
exporter.py – assemble one chat into a single Markdown document.

Layout, top to bottom:

    front matter / hidden metadata comment
    # <title>
    Source: / Exported: rows
    ## Table of Contents
    <a id="p-1"></a> **Prompt** blockquote, **Response** body, ...
    ## Notes

Two modes, picked once per call. *Rich* mode runs response, system and tool
turns through HTML→Markdown, fence repair and suggestion tidying; *plain*
mode uses each turn's text as-is. Prompts, anchors, the table of contents
and the metadata blocks come out the same either way.
"""

import dataclasses
import logging
import re
from typing import Optional, Sequence

from . import config
from .front_matter import render_front_matter, render_meta_comment
from .html_to_md import html_to_markdown
from .models import PROMPT_ROLES, RESPONSE_ROLES, ExportMetadata, ExportOptions, Turn
from .sections import (
    render_prompt_block,
    render_response_block,
    render_role_block,
    role_label,
)
from .toc import build_toc, collect_prompt_infos

LOGGER = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"


def tidy_document(md: str) -> str:
    """Collapse blank-line runs and end with exactly one newline."""
    md = re.sub(r"\n{3,}", "\n\n", md)
    return md.rstrip("\n") + "\n"


def resolve_html_bodies(turns: Sequence[Turn],
                        html_bodies: Optional[Sequence[str]]) -> Optional[list]:
    """Per-turn HTML for rich mode, or None for plain mode."""
    if html_bodies is None:
        if turns and all(t.html is not None for t in turns):
            return [t.html for t in turns]
        return None
    if not html_bodies or len(html_bodies) != len(turns):
        LOGGER.debug("plain mode: %d HTML bodies for %d turns",
                     len(html_bodies), len(turns))
        return None
    return list(html_bodies)


def _render_turn(turn: Turn, anchor: Optional[str], html: Optional[str],
                 rich: bool) -> str:
    if turn.role in PROMPT_ROLES:
        # prompts are user-authored plain text; never reflowed from HTML
        return render_prompt_block(turn.text, anchor)

    body = html_to_markdown(html) if rich and (html or "").strip() else turn.text
    if turn.role in RESPONSE_ROLES:
        return render_response_block(body, repair=rich)
    return render_role_block(role_label(turn.role), body)


def build_markdown_export(meta: ExportMetadata, turns: Sequence[Turn],
                          options: Optional[ExportOptions] = None) -> str:
    options = options or ExportOptions()
    if options.title:
        meta = dataclasses.replace(meta, chat_title=options.title)
    turns = list(turns)
    html_bodies = resolve_html_bodies(turns, options.html_bodies)
    rich = html_bodies is not None
    LOGGER.debug("exporting %d turns in %s mode", len(turns),
                 "rich" if rich else "plain")

    out: list[str] = []
    if options.include_front_matter:
        out.append(render_front_matter(meta))
        if options.include_meta_comment:
            out += [render_meta_comment(meta), ""]

    out += [f"# {meta.chat_title or config.DEFAULT_TITLE}", ""]

    if options.include_meta_row:
        if meta.page_url:
            out.append(f"Source: {meta.page_url}")
        if meta.exported_at:
            out.append(f"Exported: {meta.exported_at}")
        out.append("")

    prompts = collect_prompt_infos(turns)
    if options.include_toc:
        out += build_toc(prompts)

    anchors = {p.turn_index: p.anchor for p in prompts}
    blocks = [
        _render_turn(turn, anchors.get(i),
                     html_bodies[i] if rich else None, rich)
        for i, turn in enumerate(turns)
    ]
    out.append(BLOCK_SEPARATOR.join(blocks))

    notes = (options.freeform_notes or "").strip()
    if notes:
        out += ["", "## Notes", "", notes, ""]

    return tidy_document("\n".join(out))
