"""Directory-backed storage for pending changelog entries."""

from __future__ import annotations

import json
import os
import shutil
from pathlib import Path
from typing import Any, Optional

from .errors import ChangelogError, EntryExistsError, EntryParseError, StoreIOError
from .utils import log_debug, slugify

DEFAULT_ENTRIES_DIRECTORY = Path("unreleased_changelogs")
ENTRY_SUFFIX = ".json"
JOURNAL_DIRECTORY_NAME = ".merging"
JOURNAL_MARKER_NAME = ".release"


def entry_name_for_branch(branch: str) -> str:
    """Return the storage key for entries recorded on a branch."""
    name = slugify(branch)
    if not name:
        raise ChangelogError(f"Cannot derive an entry file name from branch '{branch}'.")
    return name


class EntryStore:
    """A flat directory holding one JSON file per pending entry.

    The store assumes a single writer. Creating an entry under an existing
    name fails instead of overwriting it.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def __repr__(self) -> str:
        return f"EntryStore({str(self.directory)!r})"

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}{ENTRY_SUFFIX}"

    def exists(self) -> bool:
        return self.directory.is_dir()

    def create(self, name: str, payload: str) -> Path:
        """Write a new entry file and return its path."""
        path = self.path_for(name)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIOError(f"Failed to create entry directory {self.directory}: {exc}") from exc
        try:
            with path.open("x", encoding="utf-8") as handle:
                handle.write(payload)
        except FileExistsError as exc:
            raise EntryExistsError(path) from exc
        except OSError as exc:
            raise StoreIOError(f"Failed to write entry {path}: {exc}") from exc
        log_debug(f"wrote entry {path}")
        return path

    def paths(self) -> list[Path]:
        """Return the entry files currently in the store."""
        try:
            candidates = sorted(self.directory.iterdir())
        except OSError as exc:
            raise StoreIOError(f"Failed to read entry directory {self.directory}: {exc}") from exc
        return [path for path in candidates if path.suffix == ENTRY_SUFFIX and path.is_file()]

    def items(self) -> list[tuple[Path, str]]:
        """Return ``(path, payload)`` pairs for every stored entry."""
        result: list[tuple[Path, str]] = []
        for path in self.paths():
            try:
                payload = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as exc:
                raise EntryParseError(f"entry is not valid UTF-8: {exc}", path.name) from exc
            except OSError as exc:
                raise StoreIOError(f"Failed to read entry {path}: {exc}") from exc
            result.append((path, payload))
        return result

    def list_all(self) -> list[str]:
        """Return the serialized payload of every stored entry."""
        return [payload for _, payload in self.items()]

    def clear_all(self) -> int:
        """Remove every entry file and return how many were removed.

        Files removed before a failure stay removed.
        """
        removed = 0
        for path in self.paths():
            try:
                path.unlink()
            except OSError as exc:
                raise StoreIOError(
                    f"Failed to remove entry {path} after removing {removed} other(s): {exc}"
                ) from exc
            removed += 1
        log_debug(f"cleared {removed} entries from {self.directory}")
        return removed

    # Journal used by atomic merges: pending files are parked here while the
    # release document is rewritten.

    @property
    def journal_directory(self) -> Path:
        return self.directory / JOURNAL_DIRECTORY_NAME

    def has_journal(self) -> bool:
        return self.journal_directory.is_dir()

    def begin_journal(self, marker: dict[str, Any]) -> list[Path]:
        """Move all pending files into the journal and record the marker."""
        journal = self.journal_directory
        if journal.exists():
            raise StoreIOError(f"A merge journal already exists at {journal}.")
        moved: list[Path] = []
        try:
            journal.mkdir()
            (journal / JOURNAL_MARKER_NAME).write_text(json.dumps(marker), encoding="utf-8")
            for path in self.paths():
                target = journal / path.name
                os.replace(path, target)
                moved.append(target)
        except OSError as exc:
            for target in moved:
                os.replace(target, self.directory / target.name)
            shutil.rmtree(journal, ignore_errors=True)
            raise StoreIOError(f"Failed to journal pending entries: {exc}") from exc
        log_debug(f"journaled {len(moved)} entries into {journal}")
        return moved

    def journal_marker(self) -> Optional[dict[str, Any]]:
        marker_path = self.journal_directory / JOURNAL_MARKER_NAME
        try:
            data = json.loads(marker_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            raise StoreIOError(f"Failed to read merge journal marker {marker_path}: {exc}") from exc
        return data if isinstance(data, dict) else None

    def restore_journal(self) -> int:
        """Move journaled files back into the store and drop the journal."""
        journal = self.journal_directory
        restored = 0
        try:
            for path in sorted(journal.glob(f"*{ENTRY_SUFFIX}")):
                target = self.directory / path.name
                if target.exists():
                    raise EntryExistsError(target)
                os.replace(path, target)
                restored += 1
        except OSError as exc:
            raise StoreIOError(f"Failed to restore journaled entries: {exc}") from exc
        self.discard_journal()
        log_debug(f"restored {restored} journaled entries")
        return restored

    def discard_journal(self) -> None:
        try:
            shutil.rmtree(self.journal_directory)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StoreIOError(
                f"Failed to remove merge journal {self.journal_directory}: {exc}"
            ) from exc
