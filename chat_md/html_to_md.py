"""
html_to_md.py – convert one chat-turn HTML fragment to clean Markdown.

Conversion is markdownify with an ordered rule table in front of the
per-tag defaults. The first rule whose filter accepts a node renders it;
nodes no rule accepts fall through to markdownify.

    from chat_md.html_to_md import html_to_markdown
    md = html_to_markdown('<pre><code class="language-py">x = 1</code></pre>')
"""

import logging
import re
from collections import namedtuple

from bs4 import BeautifulSoup, Tag
from markdownify import ATX, ASTERISK, MarkdownConverter

from . import config

LOGGER = logging.getLogger(__name__)

Rule = namedtuple("Rule", "name filter replacement")

LANGUAGE_RE = re.compile(r"language-([\w+#-]+)", re.I)
TEX_ANNOTATION = 'annotation[encoding="application/x-tex"]'


# ------- tree helpers ----------------------------------------------------
def _classes(node: Tag) -> list:
    cls = node.get("class") or []
    return cls.split() if isinstance(cls, str) else list(cls)


def _first_element_child(node: Tag):
    for child in node.children:
        if isinstance(child, Tag):
            return child
    return None


# ------- rule table ------------------------------------------------------
def _is_br(node):
    return node.name == "br"


def _render_br(conv, node, text):
    return "\n"


def _is_pre_with_code(node):
    if node.name != "pre":
        return False
    child = _first_element_child(node)
    return child is not None and child.name == "code"


def _render_fenced_code(conv, node, text):
    code = node.find("code")
    match = LANGUAGE_RE.search(" ".join(_classes(code)))
    lang = match.group(1) if match else ""
    return f"\n```{lang}\n{code.get_text()}\n```\n"


def _is_inline_code(node):
    return node.name == "code" and (node.parent is None or node.parent.name != "pre")


def _render_inline_code(conv, node, text):
    return "`" + text + "`"


def _is_katex(node):
    cls = _classes(node)
    return "katex" in cls or "katex-display" in cls


def _render_katex(conv, node, text):
    ann = node.select_one(TEX_ANNOTATION)
    tex = ann.get_text() if ann is not None else ""
    if "katex-display" in _classes(node):
        return f"\n$$\n{tex}\n$$\n"
    return f"${tex}$"


def _is_img(node):
    return node.name == "img"


def _render_img(conv, node, text):
    alt = (node.get("alt") or "").strip() or "image"
    src = node.get("src") or ""
    if not src:
        return f"![{alt}]"
    return f"![{alt}]({src})"


def _is_blockquote(node):
    return node.name == "blockquote"


def _render_blockquote(conv, node, text):
    body = (text or "").strip(" \t\r\n")
    quoted = "\n".join("> " + line if line else ">" for line in body.split("\n"))
    # blank line on both sides keeps adjacent quotes from merging
    return "\n\n" + quoted + "\n\n"


RULES = (
    Rule("preserve_breaks",       _is_br,            _render_br),
    Rule("fenced_code_with_lang", _is_pre_with_code, _render_fenced_code),
    Rule("inline_code",           _is_inline_code,   _render_inline_code),
    Rule("katex_math",            _is_katex,         _render_katex),
    Rule("images",                _is_img,           _render_img),
    Rule("blockquote_tight",      _is_blockquote,    _render_blockquote),
)


# ------- converter -------------------------------------------------------
class ChatMarkdownConverter(MarkdownConverter):
    """markdownify converter that consults ``rules`` before its own per-tag
    conversion functions. The rule tuple is fixed at construction."""

    class Options(MarkdownConverter.DefaultOptions):
        heading_style = ATX
        bullets = "-"
        strong_em_symbol = ASTERISK

    def __init__(self, rules=RULES, **options):
        super().__init__(**options)
        self.rules = tuple(rules)

    def match_rule(self, node):
        for rule in self.rules:
            if rule.filter(node):
                return rule
        return None

    def get_conv_fn(self, tag_name):
        fallback = super().get_conv_fn(tag_name)

        def convert(el, text, parent_tags):
            rule = self.match_rule(el)
            if rule is not None:
                return rule.replacement(self, el, text)
            if fallback is None:
                return text
            return fallback(el, text, parent_tags=parent_tags)

        return convert


class HtmlParser:
    """Builds a queryable tree from an HTML fragment."""

    def __init__(self, features: str = config.HTML_PARSER):
        self.features = features

    def parse(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html or "", self.features)


DEFAULT_PARSER = HtmlParser()
DEFAULT_CONVERTER = ChatMarkdownConverter()


def strip_chrome(soup: BeautifulSoup) -> None:
    """Drop buttons, icons, nav bars and toolbars in place."""
    for node in soup.select(config.CHROME_SELECTOR):
        if not node.decomposed:       # may sit inside an already dropped node
            node.decompose()


def tidy_markdown(md: str) -> str:
    md = re.sub(r"\n{3,}", "\n\n", md)
    return re.sub(r"[ \t]+$", "", md, flags=re.M)


def html_to_markdown(html: str, parser: HtmlParser = None,
                     converter: ChatMarkdownConverter = None) -> str:
    parser = parser or DEFAULT_PARSER
    converter = converter or DEFAULT_CONVERTER

    soup = parser.parse(html)
    try:
        strip_chrome(soup)
        try:
            md_txt = converter.convert_soup(soup)
        except RecursionError:
            # markdownify walks the tree recursively; very deep nesting
            # exhausts the stack, so keep the text and drop the structure
            LOGGER.warning("HTML nested too deeply to convert, keeping plain text")
            md_txt = soup.get_text("\n").strip()
    finally:
        soup.decompose()

    LOGGER.debug("converted %d chars of HTML to %d chars of Markdown",
                 len(html or ""), len(md_txt))
    return tidy_markdown(md_txt)
