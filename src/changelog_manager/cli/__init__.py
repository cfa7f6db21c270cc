"""CLI package for changelog-manager.

This package contains the modular CLI implementation:
- _core.py: CLIContext, error translation, main entry point
- _create.py: create command for recording entries
- _merge.py: merge command for folding entries into the release document
- _pending.py: pending command listing entries awaiting a merge
"""

from __future__ import annotations

from ._core import (
    CLIContext,
    VERSION_FLAGS,
    create_cli_context,
    translate_errors,
    _create_cli_group,
    main,
)
from ._create import create, create_entry
from ._merge import merge, render_pending_release, run_merge
from ._pending import collect_pending, pending

# Create the main CLI group
cli = _create_cli_group()

# Register all commands with the cli group
cli.add_command(create)
cli.add_command(merge)
cli.add_command(pending)


__all__ = [
    "cli",
    "main",
    "CLIContext",
    "VERSION_FLAGS",
    "create_cli_context",
    "translate_errors",
    "create",
    "create_entry",
    "merge",
    "run_merge",
    "render_pending_release",
    "pending",
    "collect_pending",
]
