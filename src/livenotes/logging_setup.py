"""Logging configuration for livenotes.

Logs to both:
- the ``log_file`` from config, ~/.config/livenotes/livenotes.log by default
  (persistent, for debugging; 5 MB cap, 2 backups)
- stderr (only warnings and above, to not interfere with the editor TUI)

``log_level`` in config sets the level of the ``livenotes`` logger; ``--debug``
overrides it and also lets debug output through to stderr.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE = Path.home() / ".config" / "livenotes" / "livenotes.log"

_LOG_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_LOG_BACKUP_COUNT = 2


def resolve_level(name: str | None, debug: bool = False) -> int:
    """Map a config level name to a logging level; unknown names fall back to INFO."""
    if debug:
        return logging.DEBUG
    level = logging.getLevelName(str(name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    debug: bool = False,
    log_file: str | Path | None = None,
    level: str | None = None,
) -> Path:
    """Configure the ``livenotes`` logger and return the log file path.

    Calling it again replaces the handlers from the previous call.
    """
    path = Path(log_file).expanduser() if log_file else LOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger("livenotes")
    root.setLevel(resolve_level(level, debug))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    # File handler stays at DEBUG; the logger level does the filtering.
    fh = RotatingFileHandler(
        str(path),
        maxBytes=_LOG_MAX_BYTES,
        backupCount=_LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(fh)

    sh = logging.StreamHandler()
    sh.setLevel(logging.DEBUG if debug else logging.WARNING)
    sh.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(sh)
    return path
