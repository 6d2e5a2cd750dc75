"""Timeline metadata — stamped blocks as ordered start/end entries.

Each non-empty stamped block becomes one entry whose end is the next
entry's start (or start + 3 s for the last one), expressed relative to
the recording anchor so players and exporters can align notes with
audio.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from livenotes.timefmt import format_duration_ms

DEFAULT_ENTRY_MS = 3000


@dataclass
class TimelineEntry:
    index: int
    speaker: str
    text: str
    datetime: str  # ISO-8601, UTC
    start: str
    end: str
    block: int  # physical block index

    def to_dict(self) -> dict:
        return asdict(self)


def build_timeline(
    blocks: Sequence[str],
    timestamps: Mapping[int, int],
    speakers: Mapping[int, str] | None = None,
    anchor_ms: int = 0,
    duration_ms: int | None = None,
) -> list[TimelineEntry]:
    """Build timeline entries sorted by timestamp; empty blocks are skipped."""
    speakers = speakers or {}
    stamped = sorted(
        ((i, ms) for i, ms in timestamps.items() if 0 <= i < len(blocks)),
        key=lambda e: (e[1], e[0]),
    )

    entries: list[TimelineEntry] = []
    for n, (block, ms) in enumerate(stamped):
        text = blocks[block].strip()
        if not text:
            continue

        next_ms = stamped[n + 1][1] if n + 1 < len(stamped) else ms + DEFAULT_ENTRY_MS
        if anchor_ms > 0:
            start_ms = max(0, ms - anchor_ms)
            end_ms = next_ms - anchor_ms
            if duration_ms is not None:
                end_ms = min(end_ms, duration_ms)
        else:
            start_ms = 0
            end_ms = start_ms + DEFAULT_ENTRY_MS

        entries.append(TimelineEntry(
            index=len(entries),
            speaker=speakers.get(block, ""),
            text=text,
            datetime=datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat(),
            start=format_duration_ms(start_ms),
            end=format_duration_ms(end_ms),
            block=block,
        ))
    return entries
