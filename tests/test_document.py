"""Tests for release document creation and splicing."""

from __future__ import annotations

from pathlib import Path

import pytest

from changelog_manager.document import (
    CHANGELOG_TEMPLATE,
    ensure_document,
    insert_release,
    read_document,
    splice_release,
)
from changelog_manager.errors import AnchorNotFoundError, StoreIOError

EXISTING = """# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.1.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).

## [Unreleased]

## [1.2.3] - 2024-10-14

### Added

- Some new feature

"""

SECTION = "## [1.3.0] - 2024-11-01\n\n### Fixed\n\n- [Crash on start](7)\n"


def test_ensure_document_creates_template_in_nested_directory(tmp_path: Path) -> None:
    path = tmp_path / "subfolder" / "CHANGELOG.md"

    assert ensure_document(path) is True
    assert path.read_text(encoding="utf-8") == CHANGELOG_TEMPLATE
    assert ensure_document(path) is False


def test_splice_into_template() -> None:
    assert splice_release(CHANGELOG_TEMPLATE, SECTION) == CHANGELOG_TEMPLATE + "\n" + SECTION + "\n"


def test_splice_keeps_one_blank_line_before_previous_release() -> None:
    result = splice_release(EXISTING, SECTION)

    assert "## [Unreleased]\n\n## [1.3.0] - 2024-11-01\n" in result
    assert "- [Crash on start](7)\n\n## [1.2.3] - 2024-10-14\n" in result
    assert result.endswith("- Some new feature\n\n")
    assert result.startswith("# Changelog\n\nAll notable changes")


def test_splice_handles_anchor_without_trailing_newline() -> None:
    assert splice_release("# Log\n\n## [Unreleased]", SECTION) == (
        "# Log\n\n## [Unreleased]\n\n" + SECTION + "\n"
    )


def test_splice_uses_only_first_anchor() -> None:
    content = "## [Unreleased]\n\n## [Unreleased]\n"

    result = splice_release(content, SECTION)

    assert result.count("## [1.3.0]") == 1
    assert result.index("## [1.3.0]") < result.rindex("## [Unreleased]")


def test_splice_requires_anchor() -> None:
    with pytest.raises(ValueError):
        splice_release("# Changelog\n\n## [unreleased]\n", SECTION)


@pytest.mark.parametrize("atomic", [False, True])
def test_insert_release_updates_existing_document(tmp_path: Path, atomic: bool) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text(EXISTING, encoding="utf-8")

    insert_release(path, SECTION, atomic=atomic)

    assert path.read_text(encoding="utf-8") == splice_release(EXISTING, SECTION)
    assert sorted(item.name for item in tmp_path.iterdir()) == ["CHANGELOG.md"]


def test_insert_release_without_anchor_leaves_document_untouched(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text("# Changelog\n\nNo anchor here.\n", encoding="utf-8")

    with pytest.raises(AnchorNotFoundError):
        insert_release(path, SECTION)
    assert path.read_text(encoding="utf-8") == "# Changelog\n\nNo anchor here.\n"


def test_read_document_rejects_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_bytes(b"# Changelog\n\n## [Unreleased]\n\xff\n")

    with pytest.raises(StoreIOError, match="not valid UTF-8"):
        read_document(path)


def test_insert_release_into_invalid_utf8_document_fails_cleanly(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    original = b"## [Unreleased]\n\xfe\n"
    path.write_bytes(original)

    with pytest.raises(StoreIOError):
        insert_release(path, SECTION, atomic=True)
    assert path.read_bytes() == original
