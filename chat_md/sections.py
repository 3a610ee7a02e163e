"""Per-turn presentation blocks: Prompt, Response, System and Tool."""

import re

from .fences import fix_double_fences
from .models import PROMPT_ROLES, RESPONSE_ROLES, SYSTEM_ROLES

_DECORATIVE_RULE_RE = re.compile(r"\n-{3,}\n+")
_SUGGESTIONS_LINE_RE = re.compile(r"\n(?:\*\*)?\s*suggestions\s*:?(?:\*\*)?\s*\n", re.I)
_GLYPH_BULLET_RE = re.compile(r"^[ \t]*[•◦→]\s+", re.M)


def role_label(role: str) -> str:
    if role in PROMPT_ROLES:
        return "Prompt"
    if role in RESPONSE_ROLES:
        return "Response"
    if role in SYSTEM_ROLES:
        return "System"
    return "Tool"


def normalize_body(text: str) -> str:
    """CRLF → LF and drop trailing whitespace."""
    return (text or "").replace("\r\n", "\n").rstrip()


def normalize_suggestions(md: str) -> str:
    """Tidy the "Suggestions" tail that assistants append to answers."""
    out = _DECORATIVE_RULE_RE.sub("\n\n", md)
    out = _SUGGESTIONS_LINE_RE.sub("\n\n#### Suggestions\n", out)
    return _GLYPH_BULLET_RE.sub("- ", out)


def quote_lines(text: str) -> str:
    return "\n".join(f"> {line}" if line else ">" for line in text.split("\n"))


def render_prompt_block(text: str, anchor: str) -> str:
    """Anchor marker, bold label, then the prompt verbatim as a blockquote."""
    body = normalize_body(text)
    return f'<a id="{anchor}"></a>\n**Prompt**\n\n{quote_lines(body)}'


def render_response_block(md: str, repair: bool = True) -> str:
    body = normalize_body(md)
    if repair:
        body = normalize_suggestions(fix_double_fences(body))
    return f"**Response**\n\n{body}"


def render_role_block(label: str, md: str) -> str:
    return f"**{label}**\n\n{normalize_body(md)}"
