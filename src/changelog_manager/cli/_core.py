"""Core CLI infrastructure: context, error translation and the entry point."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as metadata_version
from pathlib import Path
from typing import Iterator, Optional

import click
import yaml

from .. import __version__ as package_version
from ..config import Config, load_project_config
from ..errors import ChangelogError
from ..store import EntryStore
from ..utils import abort_on_user_interrupt, configure_logging, log_debug

__all__ = [
    "CLIContext",
    "VERSION_FLAGS",
    "create_cli_context",
    "translate_errors",
    "_create_cli_group",
    "main",
]

VERSION_FLAGS = {"--version", "-V"}


def _resolve_cli_version() -> str:
    try:
        return metadata_version("changelog-manager")
    except PackageNotFoundError:
        return package_version


@contextmanager
def translate_errors() -> Iterator[None]:
    """Re-raise core failures as Click errors with the original message."""
    try:
        yield
    except ChangelogError as exc:
        raise click.ClickException(str(exc)) from exc


@dataclass
class CLIContext:
    """Shared command context."""

    project_root: Path
    config_path: Optional[Path] = None
    _config: Optional[Config] = None

    def ensure_config(self) -> Config:
        if self._config is None:
            try:
                self._config = load_project_config(self.project_root, self.config_path)
            except (FileNotFoundError, ValueError, yaml.YAMLError) as error:
                raise click.ClickException(str(error)) from error
        return self._config

    @property
    def store(self) -> EntryStore:
        return EntryStore(self.project_root / self.ensure_config().entries_directory)

    def changelog_path(self, override: Optional[Path] = None) -> Path:
        """Return the release document path, honoring an explicit override."""
        if override is not None:
            return override if override.is_absolute() else Path.cwd() / override
        return self.project_root / self.ensure_config().changelog


def create_cli_context(
    *,
    root: Path | None = None,
    config: Optional[Path] = None,
    debug: bool = False,
) -> CLIContext:
    """Return a CLIContext using the same resolution logic as the CLI entry point."""

    configure_logging(debug)
    resolved_root = (root or Path(".")).resolve()
    config_path = config.resolve() if config else None
    log_debug(f"resolved project root: {resolved_root}")
    if config_path is not None:
        log_debug(f"using config path: {config_path}")
    return CLIContext(project_root=resolved_root, config_path=config_path)


def _create_cli_group() -> click.Group:
    """Create the main CLI group. Commands are registered by the package."""

    @click.group(context_settings={"help_option_names": ["-h", "--help"]})
    @click.option(
        "--root",
        type=click.Path(path_type=Path, exists=True, file_okay=False),
        help="Project root holding the entry directory and CHANGELOG.md.",
    )
    @click.option(
        "--config",
        type=click.Path(path_type=Path, dir_okay=False),
        help="Path to an explicit config YAML file.",
    )
    @click.option(
        "--debug",
        "-d",
        is_flag=True,
        help="Enable debug logging.",
    )
    @click.pass_context
    def _cli(
        ctx: click.Context,
        root: Path | None,
        config: Optional[Path],
        debug: bool,
    ) -> None:
        """Record changelog entries per branch and merge them into releases."""

        ctx.obj = create_cli_context(root=root, config=config, debug=debug)

    return click.version_option(version=_resolve_cli_version())(_cli)


def _exit_code(value: object, default: int) -> int:
    return value if isinstance(value, int) else default


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit status instead of exiting."""
    from . import cli

    args = list(sys.argv[1:] if argv is None else argv)
    if VERSION_FLAGS.intersection(args):
        click.echo(_resolve_cli_version())
        return 0

    try:
        cli.main(args=args, prog_name="changelog-manager", standalone_mode=False)
    except click.ClickException as exc:
        exc.show(file=sys.stderr)
        return _exit_code(exc.exit_code, 1)
    except click.exceptions.Exit as exc:
        return _exit_code(exc.exit_code, 0)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except KeyboardInterrupt as exc:
        try:
            abort_on_user_interrupt(exc)
        except click.exceptions.Exit as interrupted:
            return _exit_code(interrupted.exit_code, 130)
    except SystemExit as exc:
        return _exit_code(exc.code, 0)
    return 0
