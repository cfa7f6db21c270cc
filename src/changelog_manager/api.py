"""Python-friendly facade for invoking changelog-manager functionality."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional

from .cli import CLIContext, create_cli_context
from .create import record_entry
from .entries import DEFAULT_ENTRY_TYPE, Entry, EntryFields, EntryType
from .merge import MergeMode, MergeResult, load_pending_entries, merge_entries, render_release


class Changelog:
    """High-level helper that mirrors the CLI commands for Python callers.

    Unlike the CLI, failures surface as the core exception types from
    :mod:`changelog_manager.errors`.
    """

    def __init__(
        self,
        *,
        root: Path | str | None = None,
        config: Path | str | None = None,
        debug: bool = False,
    ) -> None:
        resolved_root = Path(root) if root is not None else None
        resolved_config = Path(config) if config is not None else None
        self._ctx = create_cli_context(
            root=resolved_root,
            config=resolved_config,
            debug=debug,
        )

    @property
    def context(self) -> CLIContext:
        """Expose the underlying CLIContext for advanced scenarios."""

        return self._ctx

    def create(
        self,
        *,
        title: Optional[str],
        issue: Optional[str],
        entry_type: EntryType | str | None = None,
        author: Optional[str] = None,
        description: Optional[str] = None,
        is_breaking_change: Optional[bool] = None,
        branch: Optional[str] = None,
    ) -> Path:
        """Record an entry for the current (or given) branch and return its path.

        ``entry_type`` accepts an EntryType or its upper-case token (``"FIXED"``).
        """

        if entry_type is None:
            category = DEFAULT_ENTRY_TYPE
        elif isinstance(entry_type, EntryType):
            category = entry_type
        else:
            category = EntryType.parse(entry_type)
        fields = EntryFields(
            author=author,
            title=title,
            description=description,
            category=category,
            is_breaking_change=is_breaking_change,
            issue=issue,
        )
        return record_entry(
            self._ctx.project_root, self._ctx.ensure_config(), fields, branch=branch
        )

    def pending(self) -> list[Entry]:
        """Return the decoded pending entries in storage order."""

        return load_pending_entries(self._ctx.store)

    def render(self, version: str, *, release_date: Optional[date] = None) -> str:
        """Render the release section the next merge would write."""

        return render_release(self.pending(), version, release_date)

    def merge(
        self,
        version: str,
        *,
        release_date: Optional[date] = None,
        changelog: Path | str | None = None,
        mode: Optional[MergeMode] = None,
    ) -> MergeResult:
        """Merge pending entries into the release document and clear them."""

        config = self._ctx.ensure_config()
        override = Path(changelog) if changelog is not None else None
        return merge_entries(
            version,
            release_date,
            self._ctx.changelog_path(override),
            store=self._ctx.store,
            mode=mode or config.merge_mode,
        )
