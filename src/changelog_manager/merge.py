"""Aggregate pending entries into a dated release section."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Literal, Optional

from packaging.version import InvalidVersion, Version

from .document import (
    DEFAULT_CHANGELOG_PATH,
    insert_release,
    release_header,
)
from .entries import Entry, EntryType, entry_from_json, entry_sort_key
from .errors import ChangelogError, StoreIOError
from .store import EntryStore
from .utils import log_debug, log_info, log_success, log_warning

MergeMode = Literal["standard", "atomic"]
MERGE_MODE_STANDARD: MergeMode = "standard"
MERGE_MODE_ATOMIC: MergeMode = "atomic"
MERGE_MODE_CHOICES: tuple[MergeMode, ...] = (MERGE_MODE_STANDARD, MERGE_MODE_ATOMIC)

DATE_FORMAT = "%Y-%m-%d"


@dataclass
class MergeResult:
    """Outcome of a merge run."""

    version: str
    release_date: date
    entries: list[Entry] = field(default_factory=list)
    section: str = ""
    document: Optional[Path] = None

    @property
    def merged(self) -> bool:
        return self.document is not None


def is_valid_version(version: str) -> bool:
    """Return True for PEP 440 / semver-like labels, with an optional ``v`` prefix."""
    value = version[1:] if version.startswith(("v", "V")) else version
    try:
        Version(value)
    except InvalidVersion:
        return False
    return True


def load_pending_entries(store: EntryStore) -> list[Entry]:
    """Decode every stored entry; one malformed file fails the whole load."""
    entries = []
    for path, payload in store.items():
        entries.append(entry_from_json(payload, source=path.name))
        log_debug(f"loaded entry {path.name}")
    return entries


def group_entries(entries: Iterable[Entry]) -> list[tuple[EntryType, list[Entry]]]:
    """Group entries by category in declaration order, each group sorted for rendering."""
    buckets: dict[EntryType, list[Entry]] = {}
    for entry in entries:
        buckets.setdefault(entry.category, []).append(entry)
    return [
        (category, sorted(buckets[category], key=entry_sort_key))
        for category in sorted(buckets, key=lambda category: category.ordinal)
    ]


def render_release(
    entries: Iterable[Entry],
    version: str,
    release_date: Optional[date] = None,
) -> str:
    """Render the Markdown release section, or an empty string for no entries."""
    groups = group_entries(entries)
    if not groups:
        return ""
    resolved_date = release_date or date.today()
    parts = [release_header(version, resolved_date.strftime(DATE_FORMAT)) + "\n"]
    for category, group in groups:
        parts.append(f"\n### {category.display_name}\n\n")
        parts.extend(entry.to_markdown() for entry in group)
    return "".join(parts)


def _document_digest(path: Path) -> Optional[str]:
    try:
        content = path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise StoreIOError(f"Failed to read {path}: {exc}") from exc
    return hashlib.sha256(content).hexdigest()


def build_journal_marker(version: str, section: str, document_path: Path) -> dict[str, Any]:
    """Describe an atomic merge so an interrupted run can be resolved later.

    The marker keeps the rendered section and a digest of the document as it
    was before the write.
    """
    return {
        "version": version,
        "section": section,
        "document": str(document_path),
        "digest": _document_digest(document_path),
    }


def _release_written(marker: dict[str, Any], document_path: Path) -> bool:
    section = marker.get("section")
    if not isinstance(section, str) or not section:
        return False
    try:
        content = document_path.read_bytes()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise StoreIOError(f"Failed to read {document_path}: {exc}") from exc
    if hashlib.sha256(content).hexdigest() == marker.get("digest"):
        return False
    return section.encode("utf-8") in content


def recover_journal(store: EntryStore, document_path: Path) -> None:
    """Resolve a journal left behind by an interrupted atomic merge.

    The journal is dropped only if the document changed since the merge
    started and now holds the journaled section. In every other case its
    entries go back to the pending set.
    """
    if not store.has_journal():
        return
    marker = store.journal_marker() or {}
    recorded_path = marker.get("document")
    target = Path(recorded_path) if isinstance(recorded_path, str) else document_path
    if _release_written(marker, target):
        store.discard_journal()
        log_warning(
            f"found an interrupted merge of '{marker.get('version')}' that completed; "
            "journal removed."
        )
        return
    restored = store.restore_journal()
    log_warning(f"found an interrupted merge; restored {restored} pending entries.")


def _merge_atomically(
    store: EntryStore, document_path: Path, section: str, version: str
) -> None:
    store.begin_journal(build_journal_marker(version, section, document_path))
    try:
        insert_release(document_path, section, atomic=True)
    except BaseException:
        store.restore_journal()
        raise
    store.discard_journal()


def merge_entries(
    version: str,
    release_date: Optional[date] = None,
    document_path: Optional[Path] = None,
    *,
    store: EntryStore,
    mode: MergeMode = MERGE_MODE_STANDARD,
) -> MergeResult:
    """Fold all pending entries into the release document, then clear them.

    With no pending entries the document is left untouched. Any failure
    before the document is written leaves the pending entries in place.
    """
    version = version.strip()
    if not version:
        raise ChangelogError("Release version cannot be empty.")
    if mode not in MERGE_MODE_CHOICES:
        raise ChangelogError(
            f"Unknown merge mode '{mode}'. Expected one of: {', '.join(MERGE_MODE_CHOICES)}"
        )
    if not is_valid_version(version):
        log_warning(f"'{version}' is not a semantic version; using it as written.")

    resolved_path = document_path or DEFAULT_CHANGELOG_PATH
    resolved_date = release_date or date.today()
    recover_journal(store, resolved_path)

    entries = load_pending_entries(store)
    result = MergeResult(version=version, release_date=resolved_date, entries=entries)
    if not entries:
        log_info("no pending entries found; nothing to merge.")
        return result

    result.section = render_release(entries, version, resolved_date)
    if mode == MERGE_MODE_ATOMIC:
        _merge_atomically(store, resolved_path, result.section, version)
    else:
        insert_release(resolved_path, result.section)
        store.clear_all()

    result.document = resolved_path
    log_success(f"merged {len(entries)} entries into {resolved_path} as {version}.")
    return result
