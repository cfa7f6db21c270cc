"""Exception types raised by the changelog core."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ChangelogError(Exception):
    """Base class for all changelog-manager failures."""


class MissingFieldError(ChangelogError, ValueError):
    """A required entry field was absent or empty at build time."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required entry field '{field}'.")
        self.field = field


class EntryExistsError(ChangelogError):
    """An entry file already exists under the derived name."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"An entry already exists at {path}. "
            "Merge or remove it before recording another entry for this branch."
        )
        self.path = path


class EntryParseError(ChangelogError, ValueError):
    """A serialized entry could not be decoded."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
        self.source = source


class SerializationError(ChangelogError):
    """An entry could not be encoded to JSON."""


class StoreIOError(ChangelogError):
    """A filesystem operation on the entry store or release document failed."""


class AnchorNotFoundError(ChangelogError, ValueError):
    """The release document has no `## [Unreleased]` anchor line."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} has no '## [Unreleased]' line to insert the release after.")
        self.path = path
