"""Release document (CHANGELOG.md) handling."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .errors import AnchorNotFoundError, StoreIOError
from .utils import log_debug, log_info

DEFAULT_CHANGELOG_PATH = Path("CHANGELOG.md")
UNRELEASED_ANCHOR = "## [Unreleased]"
CHANGELOG_TEMPLATE = """\
# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.1.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).

## [Unreleased]
"""


def release_header(version: str, release_date: str) -> str:
    return f"## [{version}] - {release_date}"


def splice_release(content: str, section: str) -> str:
    """Insert a rendered release section right after the anchor line.

    Exactly one blank line separates the section from the anchor and from
    whatever followed the anchor before. Only the first anchor is used.
    """
    lines = content.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if line.rstrip("\r\n") == UNRELEASED_ANCHOR:
            break
    else:
        raise ValueError("release document has no unreleased anchor")

    head = "".join(lines[: index + 1])
    if not head.endswith("\n"):
        head += "\n"
    tail = "".join(lines[index + 1 :]).lstrip("\r\n")
    block = section if section.endswith("\n") else section + "\n"
    return f"{head}\n{block}\n{tail}"


def ensure_document(path: Path) -> bool:
    """Create the document from the template if missing. Returns True if created."""
    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(CHANGELOG_TEMPLATE, encoding="utf-8")
    except OSError as exc:
        raise StoreIOError(f"Failed to create {path}: {exc}") from exc
    log_info(f"created {path} from the default template.")
    return True


def read_document(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise StoreIOError(f"{path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise StoreIOError(f"Failed to read {path}: {exc}") from exc


def _write_in_place(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise StoreIOError(f"Failed to write {path}: {exc}") from exc


def _write_atomically(path: Path, content: str) -> None:
    """Write to a sibling temporary file, then rename it over ``path``."""
    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_name = handle.name
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            os.chmod(temp_name, path.stat().st_mode)
        os.replace(temp_name, path)
    except OSError as exc:
        if temp_name is not None:
            Path(temp_name).unlink(missing_ok=True)
        raise StoreIOError(f"Failed to write {path}: {exc}") from exc


def insert_release(path: Path, section: str, *, atomic: bool = False) -> None:
    """Create the document if needed and splice ``section`` after its anchor."""
    ensure_document(path)
    content = read_document(path)
    try:
        updated = splice_release(content, section)
    except ValueError as exc:
        raise AnchorNotFoundError(path) from exc
    if atomic:
        _write_atomically(path, updated)
    else:
        _write_in_place(path, updated)
    log_debug(f"wrote release section to {path}")
