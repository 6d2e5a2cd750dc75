"""Load, save, and validate the JSON config at ~/.config/livenotes/config.json."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "livenotes"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULTS: dict[str, dict[str, Any]] = {
    "auto_stamp_delay_ms": {
        "value": 2000,
        "description": "Subtracted from 'now' when the first character typed into an empty block stamps it (time to hear and type).",
    },
    "split_gap_ms": {
        "value": 3000,
        "description": "Gap added to a block's timestamp for the new block when splitting with no later stamped block.",
    },
    "history_limit": {
        "value": 50,
        "description": "Maximum number of undo snapshots kept.",
    },
    "history_debounce_ms": {
        "value": 1000,
        "description": "Typing pause before an undo checkpoint is taken.",
    },
    "backup_debounce_ms": {
        "value": 3000,
        "description": "Pause after the last change before the auto-backup is written.",
    },
    "backup_path": {
        "value": "~/.config/livenotes/backup.json",
        "description": "Auto-backup file used to recover unsaved notes.",
    },
    "export_folder": {
        "value": "~/notes",
        "description": "Folder where exported Markdown notes are written.",
    },
    "log_file": {
        "value": "~/.config/livenotes/livenotes.log",
        "description": "Rotating debug log (5 MB, 2 backups).",
    },
    "log_level": {
        "value": "INFO",
        "description": "Level for the log file: DEBUG, INFO, WARNING or ERROR. --debug forces DEBUG.",
    },
}


def _ensure_dir() -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def load_config() -> dict[str, Any]:
    """Return a flat dict of {key: value} from the config file, merged with defaults."""
    values: dict[str, Any] = {k: v["value"] for k, v in DEFAULTS.items()}

    if CONFIG_PATH.exists():
        try:
            raw = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
            for key, entry in raw.items():
                if key.startswith("_"):
                    continue
                if isinstance(entry, dict) and "value" in entry:
                    values[key] = entry["value"]
                else:
                    values[key] = entry
        except (json.JSONDecodeError, OSError, AttributeError) as exc:
            logger.warning("Could not read config at %s: %s", CONFIG_PATH, exc)

    return values


def save_config(values: dict[str, Any]) -> None:
    """Write current values back to the config file, preserving descriptions."""
    _ensure_dir()
    data: dict[str, Any] = {
        "_description": "livenotes configuration. Edit values below; descriptions are for reference."
    }
    for key, meta in DEFAULTS.items():
        data[key] = {
            "value": values.get(key, meta["value"]),
            "description": meta["description"],
        }
    CONFIG_PATH.write_text(
        json.dumps(data, indent=4, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info("Config saved to %s", CONFIG_PATH)


def get(key: str) -> Any:
    """Convenience: load config and return one value."""
    return load_config()[key]


def init_config_if_missing() -> bool:
    """Create default config file if it doesn't exist. Return True if created."""
    if CONFIG_PATH.exists():
        return False
    defaults = {k: v["value"] for k, v in DEFAULTS.items()}
    save_config(defaults)
    return True
