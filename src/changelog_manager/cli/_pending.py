"""Pending command for listing entries that await the next merge."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table
from rich.text import Text

from ..entries import Entry, EntryType, entry_from_json, entry_sort_key
from ..utils import console, log_info
from ._core import CLIContext, translate_errors

__all__ = [
    "ENTRY_TYPE_STYLES",
    "collect_pending",
    "pending",
]

ENTRY_TYPE_STYLES: dict[EntryType, str] = {
    EntryType.ADDED: "green",
    EntryType.CHANGED: "blue",
    EntryType.FIXED: "red",
    EntryType.REMOVED: "bold red",
    EntryType.DEPRECATED: "yellow",
    EntryType.SECURITY: "magenta",
    EntryType.TECHNICAL: "cyan",
}


def collect_pending(ctx: CLIContext) -> list[tuple[Path, Entry]]:
    """Return pending entries with their files, in release order."""
    store = ctx.store
    if not store.exists():
        return []
    with translate_errors():
        loaded = [
            (path, entry_from_json(payload, source=path.name)) for path, payload in store.items()
        ]
    return sorted(loaded, key=lambda item: (item[1].category.ordinal, entry_sort_key(item[1])))


def _build_pending_table(rows: list[tuple[Path, Entry]]) -> Table:
    table = Table(show_lines=False, expand=False, pad_edge=False)
    table.add_column("File", style="dim", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Issue", style="cyan")
    table.add_column("Author", style="yellow")
    for path, entry in rows:
        title = Text(entry.title)
        if entry.is_breaking_change:
            title = Text.assemble(("BREAKING ", "bold red"), title)
        table.add_row(
            path.name,
            Text(entry.category.display_name, style=ENTRY_TYPE_STYLES[entry.category]),
            title,
            entry.issue,
            entry.author,
        )
    return table


@click.command("pending")
@click.pass_obj
def pending(ctx: CLIContext) -> None:
    """List entries waiting for the next merge."""
    rows = collect_pending(ctx)
    if not rows:
        log_info("no pending entries.")
        return
    console.print(_build_pending_table(rows))
