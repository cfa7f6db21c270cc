"""Configuration helpers for changelog-manager."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, MutableMapping, Optional, cast

import yaml

from .document import DEFAULT_CHANGELOG_PATH
from .merge import MERGE_MODE_CHOICES, MERGE_MODE_STANDARD, MergeMode
from .store import DEFAULT_ENTRIES_DIRECTORY

CONFIG_RELATIVE_PATH = Path(".changelog-manager.yaml")


def default_config_path(project_root: Path) -> Path:
    """Return the default config path for a project root."""
    return project_root / CONFIG_RELATIVE_PATH


@dataclass
class Config:
    """Structured representation of the project config."""

    entries_directory: Path = DEFAULT_ENTRIES_DIRECTORY
    changelog: Path = DEFAULT_CHANGELOG_PATH
    merge_mode: MergeMode = MERGE_MODE_STANDARD
    default_author: Optional[str] = None


def _optional_path(raw: MutableMapping[str, Any], key: str, default: Path) -> Path:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config option '{key}' must be a non-empty string.")
    return Path(value.strip())


def load_config(path: Path) -> Config:
    """Load the configuration from disk."""
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, MutableMapping):
        raise ValueError("Config root must be a mapping")

    merge_mode_raw = raw.get("merge_mode")
    merge_mode: MergeMode = MERGE_MODE_STANDARD
    if merge_mode_raw is not None:
        if not isinstance(merge_mode_raw, str):
            raise ValueError("Config option 'merge_mode' must be a string.")
        normalized_mode = merge_mode_raw.strip().lower()
        if normalized_mode not in MERGE_MODE_CHOICES:
            allowed = ", ".join(MERGE_MODE_CHOICES)
            raise ValueError(f"Config option 'merge_mode' must be one of: {allowed}")
        merge_mode = cast(MergeMode, normalized_mode)

    default_author_raw = raw.get("default_author")
    if default_author_raw is not None and not isinstance(default_author_raw, str):
        raise ValueError("Config option 'default_author' must be a string.")

    return Config(
        entries_directory=_optional_path(raw, "entries_directory", DEFAULT_ENTRIES_DIRECTORY),
        changelog=_optional_path(raw, "changelog", DEFAULT_CHANGELOG_PATH),
        merge_mode=merge_mode,
        default_author=(default_author_raw or "").strip() or None,
    )


def load_project_config(project_root: Path, path: Optional[Path] = None) -> Config:
    """Load the project config, falling back to defaults when no file exists."""
    config_path = path or default_config_path(project_root)
    if not config_path.exists():
        if path is not None:
            raise FileNotFoundError(f"No config found at {config_path}.")
        return Config()
    return load_config(config_path)


def dump_config(config: Config) -> dict[str, Any]:
    """Convert a Config into a plain dictionary suitable for YAML output."""
    data: dict[str, Any] = {}
    if config.entries_directory != DEFAULT_ENTRIES_DIRECTORY:
        data["entries_directory"] = config.entries_directory.as_posix()
    if config.changelog != DEFAULT_CHANGELOG_PATH:
        data["changelog"] = config.changelog.as_posix()
    if config.merge_mode != MERGE_MODE_STANDARD:
        data["merge_mode"] = config.merge_mode
    if config.default_author:
        data["default_author"] = config.default_author
    return data


def save_config(config: Config, path: Path) -> None:
    """Write the configuration to disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(dump_config(config), handle, sort_keys=False)
