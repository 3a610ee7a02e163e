"""
Chat Markdown Export

Converts chat transcripts (prompt, response, system and tool turns) into a
single Markdown document with front matter, anchors and a table of contents,
and reads such documents back.
"""

from .models import (
    ExportMetadata,
    Turn,
    PromptInfo,
    ExportOptions,
)

from .exceptions import ChatExportError, BundleError

from .html_to_md import (
    ChatMarkdownConverter,
    HtmlParser,
    Rule,
    RULES,
    html_to_markdown,
    strip_chrome,
    tidy_markdown,
)

from .fences import fix_double_fences, unindent_fence_markers

from .sections import (
    normalize_suggestions,
    render_prompt_block,
    render_response_block,
    render_role_block,
    role_label,
)

from .toc import anchor_id, build_toc, collect_prompt_infos, first_line_title

from .front_matter import (
    render_front_matter,
    render_meta_comment,
    parse_front_matter,
    parse_meta_comment,
)

from .exporter import build_markdown_export, tidy_document

from .importer import (
    ImportedNote,
    TurnSection,
    parse_export,
    read_export_metadata,
    split_turn_sections,
    strip_navigation,
)

from .fingerprints import (
    LogicalTurn,
    extract_prompt_response_turns,
    hash_prompt_response_pair,
    normalize_text,
)

__all__ = [
    # Data model
    'ExportMetadata',
    'Turn',
    'PromptInfo',
    'ExportOptions',
    'ChatExportError',
    'BundleError',
    # HTML -> Markdown
    'ChatMarkdownConverter',
    'HtmlParser',
    'Rule',
    'RULES',
    'html_to_markdown',
    'strip_chrome',
    'tidy_markdown',
    # Post-processing
    'fix_double_fences',
    'unindent_fence_markers',
    'normalize_suggestions',
    # Blocks & navigation
    'render_prompt_block',
    'render_response_block',
    'render_role_block',
    'role_label',
    'anchor_id',
    'build_toc',
    'collect_prompt_infos',
    'first_line_title',
    'render_front_matter',
    'render_meta_comment',
    'parse_front_matter',
    'parse_meta_comment',
    # Assembly
    'build_markdown_export',
    'tidy_document',
    # Reading back
    'ImportedNote',
    'TurnSection',
    'parse_export',
    'read_export_metadata',
    'split_turn_sections',
    'strip_navigation',
    'LogicalTurn',
    'extract_prompt_response_turns',
    'hash_prompt_response_pair',
    'normalize_text',
]
