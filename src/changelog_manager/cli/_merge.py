"""Merge command for folding pending entries into the release document."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional, cast

import click

from ..merge import (
    MERGE_MODE_CHOICES,
    MergeMode,
    MergeResult,
    load_pending_entries,
    merge_entries,
    render_release,
)
from ..utils import coerce_date, emit_output, log_info
from ._core import CLIContext, translate_errors

__all__ = [
    "run_merge",
    "render_pending_release",
    "merge",
    "_parse_release_date",
]


def _parse_release_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    parsed = coerce_date(value)
    if parsed is None:
        raise click.ClickException(
            f"Invalid release date '{value}'. Use YYYY-MM-DD or an ISO 8601 timestamp."
        )
    return parsed


def render_pending_release(
    ctx: CLIContext, *, version: str, release_date: Optional[date] = None
) -> str:
    """Render the pending entries as a release section without writing anything."""
    with translate_errors():
        entries = load_pending_entries(ctx.store)
    return render_release(entries, version, release_date)


def run_merge(
    ctx: CLIContext,
    *,
    version: str,
    release_date: Optional[date] = None,
    changelog: Optional[Path] = None,
    mode: Optional[MergeMode] = None,
) -> MergeResult:
    """Merge pending entries using the same resolution rules as the CLI."""
    config = ctx.ensure_config()
    with translate_errors():
        return merge_entries(
            version,
            release_date,
            ctx.changelog_path(changelog),
            store=ctx.store,
            mode=mode or config.merge_mode,
        )


@click.command("merge")
@click.argument("version")
@click.option(
    "--date",
    "release_date",
    help="Release date (YYYY-MM-DD or ISO 8601 timestamp). Defaults to today.",
)
@click.option(
    "--changelog",
    "-c",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Release document to update (default: CHANGELOG.md in the project root).",
)
@click.option(
    "--mode",
    type=click.Choice(MERGE_MODE_CHOICES, case_sensitive=False),
    help="Write strategy. 'atomic' journals entries until the document is replaced.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the release section instead of writing it.",
)
@click.pass_obj
def merge(
    ctx: CLIContext,
    version: str,
    release_date: Optional[str],
    changelog: Optional[Path],
    mode: Optional[str],
    dry_run: bool,
) -> None:
    """Merge all pending entries into the CHANGELOG as release VERSION."""
    parsed_date = _parse_release_date(release_date)
    if dry_run:
        section = render_pending_release(ctx, version=version, release_date=parsed_date)
        if not section:
            log_info("no pending entries found; nothing to merge.")
            return
        emit_output(section, newline=False)
        return
    run_merge(
        ctx,
        version=version,
        release_date=parsed_date,
        changelog=changelog,
        mode=cast(Optional[MergeMode], mode.lower() if mode else None),
    )
