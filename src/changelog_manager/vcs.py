"""Git lookups for the active branch and the current user."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .utils import log_debug


def _git_output(project_root: Path, args: Sequence[str]) -> Optional[str]:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(project_root),
            check=True,
            capture_output=True,
            text=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as exc:
        log_debug(f"git {' '.join(args)} failed: {exc}")
        return None
    return result.stdout.strip() or None


def current_branch(project_root: Path) -> Optional[str]:
    """Return the current branch name if HEAD is not detached."""
    branch = _git_output(project_root, ["rev-parse", "--abbrev-ref", "HEAD"])
    if branch == "HEAD":
        return None
    return branch


def current_user(project_root: Path) -> Optional[str]:
    """Return the configured git user name."""
    return _git_output(project_root, ["config", "--get", "user.name"])
