"""Changelog entry model, JSON codec and Markdown line rendering."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, cast

from .errors import EntryParseError, MissingFieldError, SerializationError

BREAKING_CHANGE_PREFIX = "**BREAKING CHANGE** "
JSON_INDENT = 4


class EntryType(Enum):
    """Category of a change. Declaration order is the release section order."""

    ADDED = "Added"
    CHANGED = "Changed"
    FIXED = "Fixed"
    REMOVED = "Removed"
    DEPRECATED = "Deprecated"
    SECURITY = "Security"
    TECHNICAL = "Technical"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def ordinal(self) -> int:
        return ENTRY_TYPES.index(self)

    @classmethod
    def parse(cls, token: str) -> "EntryType":
        """Return the type for an upper-case token such as ``ADDED``.

        Raises:
            EntryParseError: If the token does not name a known type.
        """
        if token.isupper() and token in cls.__members__:
            return cls.__members__[token]
        raise EntryParseError(
            f"Unknown entry type '{token}'. Expected one of: {', '.join(ENTRY_TYPE_TOKENS)}"
        )

    def __str__(self) -> str:
        return self.value


ENTRY_TYPES: tuple[EntryType, ...] = tuple(EntryType)
ENTRY_TYPE_TOKENS: tuple[str, ...] = tuple(member.name for member in EntryType)
DEFAULT_ENTRY_TYPE = EntryType.CHANGED


@dataclass(frozen=True)
class Entry:
    """A single change waiting to be released."""

    author: str
    title: str
    category: EntryType
    issue: str
    description: Optional[str] = None
    is_breaking_change: bool = False

    def to_markdown(self) -> str:
        """Render the entry as a Markdown list item ending in a newline."""
        prefix = BREAKING_CHANGE_PREFIX if self.is_breaking_change else ""
        line = f"- [{prefix}{self.title}]({self.issue})"
        if self.description is not None:
            line += f"\n  {self.description}"
        return line + "\n"

    def to_json(self) -> str:
        return entry_to_json(self)

    @classmethod
    def from_json(cls, payload: str, *, source: Optional[str] = None) -> "Entry":
        return entry_from_json(payload, source=source)


def entry_sort_key(entry: Entry) -> tuple[bool, str]:
    """Return the render order key: breaking changes first, then by title."""
    return (not entry.is_breaking_change, entry.title)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass
class EntryFields:
    """Collected entry fields, validated once by `build`.

    Every field is optional here so callers can fill them from different
    sources (flags, prompts, git) before building.
    """

    author: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: EntryType = DEFAULT_ENTRY_TYPE
    is_breaking_change: Optional[bool] = None
    issue: Optional[str] = None

    def build(self, *, default_author: Optional[str] = None) -> Entry:
        """Return the finished entry.

        Raises:
            MissingFieldError: If title, author or issue is missing or empty.
        """
        author = self.author if not _is_blank(self.author) else default_author
        if _is_blank(self.title):
            raise MissingFieldError("title")
        if _is_blank(author):
            raise MissingFieldError("author")
        if _is_blank(self.issue):
            raise MissingFieldError("issue")
        return Entry(
            author=cast(str, author),
            title=cast(str, self.title),
            category=self.category,
            issue=cast(str, self.issue),
            description=self.description,
            is_breaking_change=bool(self.is_breaking_change),
        )


def build_entry(
    *,
    author: Optional[str],
    title: Optional[str],
    issue: Optional[str],
    category: EntryType = DEFAULT_ENTRY_TYPE,
    description: Optional[str] = None,
    is_breaking_change: Optional[bool] = None,
) -> Entry:
    """Build an entry from keyword fields in one call."""
    return EntryFields(
        author=author,
        title=title,
        description=description,
        category=category,
        is_breaking_change=is_breaking_change,
        issue=issue,
    ).build()


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    """Return the serialized mapping in its stable key order."""
    return {
        "author": entry.author,
        "title": entry.title,
        "description": entry.description,
        "type": entry.category.value,
        "isBreakingChange": entry.is_breaking_change,
        "issue": entry.issue,
    }


def entry_to_json(entry: Entry) -> str:
    """Serialize an entry to pretty-printed JSON with 4-space indentation."""
    try:
        return json.dumps(entry_to_dict(entry), indent=JSON_INDENT, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to serialize entry '{entry.title}': {exc}") from exc


def _required_string(data: dict[str, Any], key: str, source: Optional[str]) -> str:
    value = data.get(key)
    if value is None:
        raise EntryParseError(f"missing field '{key}'", source)
    if not isinstance(value, str):
        raise EntryParseError(f"field '{key}' must be a string", source)
    if not value.strip():
        raise EntryParseError(f"field '{key}' must not be empty", source)
    return value


def _category_from_value(value: Any, source: Optional[str]) -> EntryType:
    if value is None:
        raise EntryParseError("missing field 'type'", source)
    for member in EntryType:
        if member.value == value:
            return member
    raise EntryParseError(
        f"unknown type {value!r}; expected one of: "
        + ", ".join(member.value for member in EntryType),
        source,
    )


def entry_from_json(payload: str, *, source: Optional[str] = None) -> Entry:
    """Decode an entry produced by `entry_to_json`.

    Raises:
        EntryParseError: On invalid JSON, a missing field or an unknown type.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise EntryParseError(f"invalid JSON: {exc}", source) from exc
    if not isinstance(data, dict):
        raise EntryParseError("entry must be a JSON object", source)

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise EntryParseError("field 'description' must be a string or null", source)
    breaking = data.get("isBreakingChange", False)
    if not isinstance(breaking, bool):
        raise EntryParseError("field 'isBreakingChange' must be a boolean", source)

    return Entry(
        author=_required_string(data, "author", source),
        title=_required_string(data, "title", source),
        category=_category_from_value(data.get("type"), source),
        issue=_required_string(data, "issue", source),
        description=description,
        is_breaking_change=breaking,
    )
