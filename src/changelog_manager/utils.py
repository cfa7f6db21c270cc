"""Shared utilities for logging, output and string handling."""

from __future__ import annotations

import logging
import re
import sys
import unicodedata
from datetime import date, datetime
from typing import NoReturn, Optional

import click
from rich.console import Console

# Message prefixes keyed by the level they are logged at. Success messages
# share INFO and are told apart by their own prefix.
SUCCESS_PREFIX = "\033[92;1m✔\033[0m "
LEVEL_PREFIXES = {
    logging.DEBUG: "\033[95m◆\033[0m ",
    logging.INFO: "\033[94;1mi\033[0m ",
    logging.WARNING: "○ ",
    logging.ERROR: "\033[31m✘\033[0m ",
}

LOGGER_NAME = "changelog_manager"
logger = logging.getLogger(LOGGER_NAME)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
# Latin letters that NFKD does not decompose into an ASCII base letter.
_TRANSLITERATIONS = str.maketrans(
    {
        "ß": "ss",
        "æ": "ae",
        "œ": "oe",
        "ø": "o",
        "đ": "d",
        "ð": "d",
        "þ": "th",
        "ł": "l",
        "ı": "i",
        "ŋ": "ng",
    }
)

# Rich output goes to stderr so stdout stays clean for command output.
console = Console(stderr=True)


def configure_logging(debug: bool = False) -> logging.Logger:
    """Route the package logger to stderr, replacing earlier handlers."""
    level = logging.DEBUG if debug else logging.INFO
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter("%(message)s"))
    stream_handler.setLevel(level)
    logger.addHandler(stream_handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def _log(level: int, message: str, prefix: Optional[str] = None) -> None:
    marker = prefix if prefix is not None else LEVEL_PREFIXES[level]
    for line in message.splitlines() or [""]:
        logger.log(level, f"{marker}{line}" if line else marker.rstrip())


def log_debug(message: str) -> None:
    _log(logging.DEBUG, message)


def log_info(message: str) -> None:
    """Log an informational message."""
    _log(logging.INFO, message)


def log_success(message: str) -> None:
    """Log a completed action at INFO level with a check mark."""
    _log(logging.INFO, message, SUCCESS_PREFIX)


def log_warning(message: str) -> None:
    _log(logging.WARNING, message)


def log_error(message: str) -> None:
    _log(logging.ERROR, message)


def abort_on_user_interrupt(exc: BaseException | None = None) -> NoReturn:
    """Report a user cancellation and exit with status 130."""
    log_error("operation cancelled by user (Ctrl+C).")
    raise click.exceptions.Exit(130) from exc


def emit_output(content: str, *, newline: bool = True) -> None:
    """Write command output to stdout, apart from the log stream."""
    click.echo(content, nl=newline)


def coerce_date(value: object) -> Optional[date]:
    """Return the calendar date of ISO-like inputs, preserving None.

    Accepts date and datetime objects, ``YYYY-MM-DD`` strings and ISO 8601
    timestamps including a trailing ``Z``. Timestamps keep the date as
    written; no timezone conversion takes place.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def slugify(value: str) -> str:
    """Return a lower-kebab-case ASCII slug, or an empty string.

    Latin letters are reduced to their closest ASCII form, every run of other
    characters becomes a single hyphen. Letters of other scripts are dropped.
    """
    normalized = unicodedata.normalize("NFKD", value.lower().translate(_TRANSLITERATIONS))
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    return _NON_ALNUM.sub("-", ascii_text).strip("-")
