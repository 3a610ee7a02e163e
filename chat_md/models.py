"""Data classes for export metadata, turns and options."""

from dataclasses import dataclass, fields
from typing import Any, Optional

# role aliases accepted on input
PROMPT_ROLES   = {"user", "prompt"}
RESPONSE_ROLES = {"assistant", "response"}
SYSTEM_ROLES   = {"system"}

_META_WIRE_NAMES = {
    "noteId":     "note_id",
    "chatId":     "chat_id",
    "chatTitle":  "chat_title",
    "pageUrl":    "page_url",
    "exportedAt": "exported_at",
    "subjectHint": "subject",
    "topicHint":   "topic",
}

_OPTION_WIRE_NAMES = {
    "includeFrontMatter": "include_front_matter",
    "includeMetaComment": "include_meta_comment",
    "includeMetaRow":     "include_meta_row",
    "htmlBodies":         "html_bodies",
    "includeToc":         "include_toc",
    "freeformNotes":      "freeform_notes",
}


def _to_tags(value: Any) -> tuple:
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(t.strip() for t in value.split(",") if t.strip())
    if not isinstance(value, (list, tuple)):
        return (str(value),)
    return tuple(str(t).strip() for t in value if str(t).strip())


def _snake_keys(data: dict, wire_names: dict, allowed: set) -> dict:
    out = {}
    for key, value in data.items():
        name = wire_names.get(key, key)
        if name in allowed:
            out[name] = value
    return out


@dataclass(frozen=True)
class ExportMetadata:
    """Identifies one exported document. Read-only for the pipeline."""
    note_id: str
    source: Optional[str] = None
    chat_id: Optional[str] = None
    chat_title: Optional[str] = None
    page_url: Optional[str] = None
    exported_at: Optional[str] = None
    model: Optional[str] = None
    subject: Optional[str] = None   # classification hints
    topic: Optional[str] = None
    summary: Optional[str] = None
    tags: tuple = ()

    @classmethod
    def from_dict(cls, data: dict) -> "ExportMetadata":
        """Build metadata from camelCase wire keys or snake_case names."""
        allowed = {f.name for f in fields(cls)}
        kwargs = _snake_keys(data, _META_WIRE_NAMES, allowed)
        kwargs["tags"] = _to_tags(kwargs.get("tags"))
        kwargs.setdefault("note_id", "")
        return cls(**kwargs)


@dataclass(frozen=True)
class Turn:
    """One role-tagged utterance."""
    role: str
    text: str = ""
    html: Optional[str] = None

    @property
    def is_prompt(self) -> bool:
        return self.role in PROMPT_ROLES

    @classmethod
    def from_dict(cls, data: dict) -> "Turn":
        return cls(
            role=str(data.get("role") or ""),
            text=data.get("text") or "",
            html=data.get("html"),
        )


@dataclass(frozen=True)
class PromptInfo:
    """Derived per-prompt navigation data; never persisted."""
    index: int          # 1-based among prompts only
    title: str
    anchor: str
    turn_index: int     # position in the full turn list


@dataclass
class ExportOptions:
    """Caller-controlled switches for one export call."""
    title: Optional[str] = None
    include_front_matter: bool = True
    include_meta_comment: bool = True
    include_meta_row: bool = True
    html_bodies: Optional[list] = None
    include_toc: bool = True
    freeform_notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ExportOptions":
        if not data:
            return cls()
        allowed = {f.name for f in fields(cls)}
        return cls(**_snake_keys(data, _OPTION_WIRE_NAMES, allowed))
