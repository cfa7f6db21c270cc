"""Unit tests for configuration helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from changelog_manager.config import (
    Config,
    default_config_path,
    dump_config,
    load_config,
    load_project_config,
    save_config,
)


def write_yaml(path: Path, content: dict[str, object]) -> None:
    path.write_text(yaml.safe_dump(content, sort_keys=False), encoding="utf-8")


def test_load_config_reads_all_fields(tmp_path: Path) -> None:
    config_path = tmp_path / ".changelog-manager.yaml"
    write_yaml(
        config_path,
        {
            "entries_directory": "changes/pending",
            "changelog": "docs/CHANGELOG.md",
            "merge_mode": "Atomic",
            "default_author": " Release Bot ",
        },
    )

    config = load_config(config_path)

    assert config.entries_directory == Path("changes/pending")
    assert config.changelog == Path("docs/CHANGELOG.md")
    assert config.merge_mode == "atomic"
    assert config.default_author == "Release Bot"


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / ".changelog-manager.yaml"
    config_path.write_text("", encoding="utf-8")

    assert load_config(config_path) == Config()


def test_load_config_rejects_unknown_merge_mode(tmp_path: Path) -> None:
    config_path = tmp_path / ".changelog-manager.yaml"
    write_yaml(config_path, {"merge_mode": "journal"})

    with pytest.raises(ValueError, match="'merge_mode' must be one of: standard, atomic"):
        load_config(config_path)


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    config_path = tmp_path / ".changelog-manager.yaml"
    config_path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must be a mapping"):
        load_config(config_path)


def test_load_config_rejects_empty_paths(tmp_path: Path) -> None:
    config_path = tmp_path / ".changelog-manager.yaml"
    write_yaml(config_path, {"changelog": ""})

    with pytest.raises(ValueError, match="'changelog' must be a non-empty string"):
        load_config(config_path)


def test_dump_config_omits_defaults() -> None:
    assert dump_config(Config()) == {}
    assert dump_config(Config(merge_mode="atomic", default_author="Bot")) == {
        "merge_mode": "atomic",
        "default_author": "Bot",
    }


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    config = Config(
        entries_directory=Path("pending"),
        changelog=Path("docs/CHANGES.md"),
        merge_mode="atomic",
    )
    path = default_config_path(tmp_path)

    save_config(config, path)

    assert load_project_config(tmp_path) == config


def test_load_project_config_without_file_returns_defaults(tmp_path: Path) -> None:
    assert load_project_config(tmp_path) == Config()


def test_load_project_config_explicit_missing_path(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_project_config(tmp_path, tmp_path / "missing.yaml")
