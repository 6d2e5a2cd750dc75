"""Auto-backup of the working project to a JSON file.

Protects unsaved notes against crashes: the editor rewrites the backup a
few seconds after the last change and clears it after an explicit save.
A corrupt or unreadable backup is logged and treated as missing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from livenotes.codec import ProjectData
from livenotes.config import load_config
from livenotes.timefmt import now_ms

logger = logging.getLogger(__name__)


@dataclass
class Backup:
    project: ProjectData
    saved_at: int
    title: str = ""
    is_saved: bool = False


def backup_path(path: str | Path | None = None) -> Path:
    if path is None:
        path = load_config().get("backup_path", "~/.config/livenotes/backup.json")
    return Path(path).expanduser()


def save_backup(
    project: ProjectData,
    title: str = "",
    is_saved: bool = False,
    path: str | Path | None = None,
) -> bool:
    """Write *project* to the backup file. Returns False (logged) on I/O errors."""
    target = backup_path(path)
    data = {"timestamp": now_ms(), "title": title, "isSaved": is_saved}
    data.update(project.to_dict())
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.error("Could not write backup %s: %s", target, exc)
        return False
    logger.debug("Backup saved to %s", target)
    return True


def load_backup(path: str | Path | None = None) -> Backup | None:
    target = backup_path(path)
    if not target.exists():
        return None
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
        return Backup(
            project=ProjectData.from_dict(data),
            saved_at=int(data.get("timestamp") or 0),
            title=str(data.get("title") or ""),
            is_saved=bool(data.get("isSaved", False)),
        )
    except (json.JSONDecodeError, OSError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Could not read backup at %s: %s", target, exc)
        return None


def clear_backup(path: str | Path | None = None) -> None:
    target = backup_path(path)
    try:
        target.unlink(missing_ok=True)
        logger.info("Backup cleared: %s", target)
    except OSError as exc:
        logger.error("Could not remove backup %s: %s", target, exc)


def has_backup(path: str | Path | None = None) -> bool:
    return backup_path(path).exists()


def backup_age_minutes(path: str | Path | None = None, now: int | None = None) -> int | None:
    """Whole minutes since the backup was written, or None when there is none."""
    backup = load_backup(path)
    if backup is None:
        return None
    now = now_ms() if now is None else now
    return max(0, now - backup.saved_at) // 60000
