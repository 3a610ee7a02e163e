"""Prompt titles, anchors and the table of contents."""

import re
from typing import Iterable, Optional

from . import config
from .models import PromptInfo, Turn


def first_line_title(text: Optional[str], fallback: str) -> str:
    """First non-blank line, trimmed and capped at TITLE_MAX_CHARS."""
    line = next((l.strip() for l in (text or "").split("\n") if l.strip()), fallback)
    if len(line) > config.TITLE_MAX_CHARS:
        return line[:config.TITLE_TRUNCATE_AT] + config.ELLIPSIS
    return line


def anchor_id(index: int) -> str:
    return f"{config.ANCHOR_PREFIX}{index}"


def collect_prompt_infos(turns: Iterable[Turn]) -> list[PromptInfo]:
    infos: list[PromptInfo] = []
    for i, turn in enumerate(turns):
        if not turn.is_prompt:
            continue
        n = len(infos) + 1
        text = (turn.text or "").replace("\r\n", "\n")
        infos.append(PromptInfo(
            index=n,
            title=first_line_title(text, f"Prompt {n}"),
            anchor=anchor_id(n),
            turn_index=i,
        ))
    return infos


def build_toc(prompts: list[PromptInfo]) -> list[str]:
    if not prompts:
        return []
    out = ["## Table of Contents", ""]
    for p in prompts:
        safe_title = re.sub(r"\n+", " ", p.title).strip()
        out.append(f"{p.index}. [{safe_title}](#{p.anchor})")
    out.append("")
    return out
