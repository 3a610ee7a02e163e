"""
fences.py – repair code fences in converted Markdown.

Generic HTML→Markdown conversion sometimes emits a bare language line
followed by a single inline-code span instead of a fenced block:

    js

    `console.log(1)`

and indents fence markers that sit inside list items. Chat note viewers
render code reliably only in the "double-fence" layout, every marker at
column 0:

    ```
    ``js
    console.log(1)
    ``
    ```
"""

import re

# marker-only lines: ```   ``lang   ``
_INDENTED_MARKERS = (
    re.compile(r"^[ \t]+(```)[ \t]*$", re.M),
    re.compile(r"^[ \t]+(``[A-Za-z][A-Za-z0-9_+-]{0,30})[ \t]*$", re.M),
    re.compile(r"^[ \t]+(``)[ \t]*$", re.M),
)

FENCE_RE = re.compile(r"```.*?```", re.S)

LANG_THEN_INLINE_CODE_RE = re.compile(
    r"(^|\n)[ \t]*([A-Za-z][A-Za-z0-9_+-]{0,30})[ \t]*\n"   # bare language line
    r"(?:[ \t]*\n)+"                                        # blank line(s)
    r"[ \t]*`(.*?)`[ \t]*(?=\n|\Z)",                        # `code` on its own
    re.S,
)


def unindent_fence_markers(md: str) -> str:
    for pattern in _INDENTED_MARKERS:
        md = pattern.sub(r"\1", md)
    return md


def _double_fence(match: re.Match) -> str:
    prefix, lang, code = match.groups()
    body = code.strip("\n")
    return f"{prefix}```\n``{lang}\n{body}\n``\n```"


def convert_lang_inline_code(text: str) -> str:
    """Rewrite every lang + inline-code pattern in ``text`` (no fence check)."""
    return LANG_THEN_INLINE_CODE_RE.sub(_double_fence, text)


def fix_double_fences(md: str) -> str:
    out = unindent_fence_markers(md)

    # existing ```...``` spans are copied through untouched
    parts: list[str] = []
    last = 0
    for m in FENCE_RE.finditer(out):
        parts.append(convert_lang_inline_code(out[last:m.start()]))
        parts.append(m.group(0))
        last = m.end()
    parts.append(convert_lang_inline_code(out[last:]))
    out = "".join(parts)

    # the rewrite can carry list indentation onto new marker lines
    return unindent_fence_markers(out)
