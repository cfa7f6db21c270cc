from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from changelog_manager import Changelog
from changelog_manager.config import Config, default_config_path, save_config
from changelog_manager.entries import EntryType
from changelog_manager.errors import EntryExistsError, EntryParseError


def _bootstrap_project(tmp_path: Path, config: Config | None = None) -> Path:
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    if config is not None:
        save_config(config, default_config_path(project_dir))
    return project_dir


def test_python_api_create_and_merge(tmp_path: Path) -> None:
    project_dir = _bootstrap_project(tmp_path)
    client = Changelog(root=project_dir)

    path = client.create(
        title="API entry",
        issue="42",
        entry_type="ADDED",
        author="codex",
        description="Body",
        branch="feature/api",
    )

    assert path == project_dir / "unreleased_changelogs" / "feature-api.json"
    assert [entry.title for entry in client.pending()] == ["API entry"]
    preview = client.render("1.1.0", release_date=date(2024, 5, 1))
    assert preview == "## [1.1.0] - 2024-05-01\n\n### Added\n\n- [API entry](42)\n  Body\n"

    result = client.merge("1.1.0", release_date=date(2024, 5, 1))

    assert result.merged
    changelog = (project_dir / "CHANGELOG.md").read_text(encoding="utf-8")
    assert "## [Unreleased]\n\n" + preview + "\n" in changelog
    assert client.pending() == []


def test_python_api_surfaces_core_errors(tmp_path: Path) -> None:
    project_dir = _bootstrap_project(tmp_path)
    client = Changelog(root=project_dir)
    client.create(title="First", issue="1", author="a", branch="main")

    with pytest.raises(EntryExistsError):
        client.create(title="Second", issue="2", author="a", branch="main")
    with pytest.raises(EntryParseError):
        client.create(title="Third", issue="3", author="a", branch="other", entry_type="bogus")


def test_python_api_honors_config(tmp_path: Path) -> None:
    project_dir = _bootstrap_project(
        tmp_path,
        Config(
            entries_directory=Path("changes"),
            changelog=Path("docs/CHANGES.md"),
            merge_mode="atomic",
            default_author="Release Bot",
        ),
    )
    client = Changelog(root=project_dir)

    path = client.create(
        title="Configured", issue="9", entry_type=EntryType.SECURITY, branch="sec"
    )
    client.merge("2.0.0", release_date=date(2024, 6, 1))

    assert path.parent == project_dir / "changes"
    document = (project_dir / "docs" / "CHANGES.md").read_text(encoding="utf-8")
    assert "### Security\n\n- [Configured](9)\n" in document
    assert not (project_dir / "changes" / ".merging").exists()


def test_python_api_merge_with_explicit_changelog(tmp_path: Path) -> None:
    project_dir = _bootstrap_project(tmp_path)
    client = Changelog(root=project_dir)
    client.create(title="Entry", issue="1", author="a", branch="main")
    target = tmp_path / "elsewhere" / "CHANGELOG.md"

    result = client.merge("1.0.0", release_date=date(2024, 1, 1), changelog=target)

    assert result.document == target
    assert target.exists()
    assert not (project_dir / "CHANGELOG.md").exists()
