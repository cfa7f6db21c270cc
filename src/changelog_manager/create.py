"""Recording new entries in the store."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import Config
from .entries import EntryFields, entry_to_json
from .errors import ChangelogError
from .store import EntryStore, entry_name_for_branch
from .utils import log_debug
from .vcs import current_branch, current_user


def create_entry(
    store: EntryStore,
    fields: EntryFields,
    branch: str,
    *,
    default_author: Optional[str] = None,
) -> Path:
    """Build an entry and store it under the slug of ``branch``."""
    entry = fields.build(default_author=default_author)
    name = entry_name_for_branch(branch)
    return store.create(name, entry_to_json(entry))


def resolve_default_author(project_root: Path, config: Config) -> Optional[str]:
    """Return the configured default author, else the git user name."""
    if config.default_author:
        return config.default_author
    author = current_user(project_root)
    if author:
        log_debug(f"using git user '{author}' as the default author")
    return author


def record_entry(
    project_root: Path,
    config: Config,
    fields: EntryFields,
    *,
    branch: Optional[str] = None,
) -> Path:
    """Create an entry for the current branch of the project at ``project_root``."""
    resolved_branch = (branch or "").strip() or current_branch(project_root)
    if not resolved_branch:
        raise ChangelogError(
            "Cannot determine the current git branch. Check out a branch or pass --branch."
        )
    default_author = None
    if not (fields.author or "").strip():
        default_author = resolve_default_author(project_root, config)
    store = EntryStore(project_root / config.entries_directory)
    return create_entry(store, fields, resolved_branch, default_author=default_author)
