"""Time helpers: epoch-millisecond clock, display formats and strict parsing."""

from __future__ import annotations

import re
import time
from datetime import datetime

from livenotes.errors import ValidationError

ABSOLUTE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ABSOLUTE_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")


def now_ms() -> int:
    return int(time.time() * 1000)


def format_absolute(ms: int) -> str:
    """Local wall-clock rendering, e.g. ``2024-05-01 09:30:12``."""
    return datetime.fromtimestamp(ms / 1000).strftime(ABSOLUTE_FORMAT)


def format_relative(ms: int) -> str:
    """Duration rendering ``HH:MM:SS``; negative durations clamp to zero."""
    total = max(0, int(ms)) // 1000
    hrs, rem = divmod(total, 3600)
    mins, secs = divmod(rem, 60)
    return f"{hrs:02d}:{mins:02d}:{secs:02d}"


def format_duration_ms(ms: int) -> str:
    """Duration with milliseconds as ``HH:MM:SS.mmm0000`` (metadata format)."""
    ms = max(0, int(ms))
    return f"{format_relative(ms)}.{ms % 1000:03d}0000"


def parse_absolute(text: str) -> int:
    """Parse a strict ``YYYY-MM-DD HH:MM:SS`` local time into epoch ms.

    Raises ValidationError when the pattern does not match or the fields
    are out of range (``2024-13-40 99:99:99`` matches the pattern but is
    still rejected).
    """
    text = text.strip()
    if not _ABSOLUTE_RE.match(text):
        raise ValidationError(f"Expected YYYY-MM-DD HH:MM:SS, got {text!r}")
    try:
        parsed = datetime.strptime(text, ABSOLUTE_FORMAT)
    except ValueError as exc:
        raise ValidationError(f"Invalid date/time {text!r}: {exc}") from exc
    return int(parsed.timestamp() * 1000)
