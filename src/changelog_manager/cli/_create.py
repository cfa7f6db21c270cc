"""Create command for recording changelog entries."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import click

from ..create import record_entry
from ..entries import DEFAULT_ENTRY_TYPE, ENTRY_TYPE_TOKENS, EntryFields, EntryType
from ..utils import abort_on_user_interrupt, log_success
from ._core import CLIContext, translate_errors

__all__ = [
    "create_entry",
    "create",
    "_read_description_file",
    "_resolve_description_input",
    "_prompt_text",
    "_prompt_optional",
]


def _read_description_file(path: Path) -> str:
    """Return the description stored in ``path``; ``-`` reads piped stdin."""
    if path.as_posix() == "-":
        if sys.stdin.isatty():
            raise click.ClickException("--description-file - expects the description on stdin.")
        text = sys.stdin.read()
    else:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise click.ClickException(f"Description file not found: {path}") from exc
        except OSError as exc:
            raise click.ClickException(f"Failed to read description file {path}: {exc}") from exc
    return text.rstrip("\n")


def _resolve_description_input(
    description: Optional[str],
    description_file: Optional[Path],
) -> Optional[str]:
    if description_file is None:
        return description
    if description is not None:
        raise click.ClickException("Use only one of --description or --description-file.")
    return _read_description_file(description_file)


def _prompt_text(label: str, **kwargs: Any) -> str:
    try:
        value = click.prompt(click.style(label, bold=True), prompt_suffix=": ", **kwargs)
    except (click.exceptions.Abort, KeyboardInterrupt) as exc:
        abort_on_user_interrupt(exc)
    return str(value)


def _prompt_optional(label: str) -> Optional[str]:
    return _prompt_text(label, default="", show_default=False).strip() or None


def _prompt_breaking_change() -> bool:
    try:
        return click.confirm(click.style("Breaking change", bold=True), default=False)
    except (click.exceptions.Abort, KeyboardInterrupt) as exc:
        abort_on_user_interrupt(exc)


def _parse_entry_type(value: str) -> EntryType:
    with translate_errors():
        return EntryType.parse(value.strip().upper())


def create_entry(
    ctx: CLIContext,
    *,
    title: Optional[str] = None,
    entry_type: Optional[str] = None,
    issue: Optional[str] = None,
    author: Optional[str] = None,
    description: Optional[str] = None,
    is_breaking_change: Optional[bool] = None,
    branch: Optional[str] = None,
    interactive: bool = False,
) -> Path:
    """Record an entry for the current branch, prompting for gaps when interactive."""

    config = ctx.ensure_config()

    if interactive:
        if not (title or "").strip():
            title = _prompt_text("Title")
        if not entry_type:
            entry_type = _prompt_text(
                "Type",
                type=click.Choice(ENTRY_TYPE_TOKENS, case_sensitive=False),
                default=DEFAULT_ENTRY_TYPE.name,
            )
        if not (issue or "").strip():
            issue = _prompt_text("Issue")
        if description is None:
            description = _prompt_optional("Description (optional)")
        if is_breaking_change is None:
            is_breaking_change = _prompt_breaking_change()

    fields = EntryFields(
        author=author,
        title=title,
        description=description,
        category=_parse_entry_type(entry_type) if entry_type else DEFAULT_ENTRY_TYPE,
        is_breaking_change=is_breaking_change,
        issue=issue,
    )
    with translate_errors():
        path = record_entry(ctx.project_root, config, fields, branch=branch)
    try:
        display_path = path.relative_to(Path.cwd())
    except ValueError:
        display_path = path
    log_success(f"entry created: {display_path}")
    return path


@click.command("create")
@click.option("--title", "-t", help="Title of the change.")
@click.option(
    "--type",
    "-e",
    "entry_type",
    type=click.Choice(ENTRY_TYPE_TOKENS, case_sensitive=False),
    help=f"Type of change (default: {DEFAULT_ENTRY_TYPE.name}).",
)
@click.option("--issue", "-n", help="Issue number or URL the entry links to.")
@click.option("--author", "-a", help="Author of the change (default: current git user).")
@click.option(
    "--description",
    help="Description rendered below the entry title.",
)
@click.option(
    "--description-file",
    type=click.Path(path_type=Path, dir_okay=False, exists=False),
    help="File containing the description. Use '-' to read from stdin.",
)
@click.option(
    "--breaking-change/--no-breaking-change",
    "-b",
    "is_breaking_change",
    default=None,
    help="Mark the entry as a breaking change (default: no).",
)
@click.option("--branch", help="Branch name used to derive the entry file name.")
@click.option(
    "--interactive",
    "-i",
    is_flag=True,
    help="Prompt for any field not given on the command line.",
)
@click.pass_obj
def create(
    ctx: CLIContext,
    title: Optional[str],
    entry_type: Optional[str],
    issue: Optional[str],
    author: Optional[str],
    description: Optional[str],
    description_file: Optional[Path],
    is_breaking_change: Optional[bool],
    branch: Optional[str],
    interactive: bool,
) -> None:
    """Create a new changelog entry for the current branch."""
    resolved_description = _resolve_description_input(description, description_file)
    create_entry(
        ctx,
        title=title,
        entry_type=entry_type,
        issue=issue,
        author=author,
        description=resolved_description,
        is_breaking_change=is_breaking_change,
        branch=branch,
        interactive=interactive,
    )
