"""Insertion planner — where a note requested at an absolute time belongs."""

from __future__ import annotations

from collections.abc import Mapping


def plan_insertion(timestamps: Mapping[int, int], block_count: int, at_ms: int) -> int:
    """Return the physical index at which a note for *at_ms* should be inserted.

    Annotated blocks are ordered by timestamp (ties by index); the note
    goes right after the last one stamped strictly before *at_ms*. A note
    later than every stamp goes last, as does one with no annotations at
    all; with none earlier it goes first. Timestamps are not assumed to be
    monotonic in block order.
    """
    entries = sorted(
        ((i, ms) for i, ms in timestamps.items() if 0 <= i < block_count),
        key=lambda e: (e[1], e[0]),
    )
    if not entries or entries[-1][1] < at_ms:
        return block_count

    for index, ms in reversed(entries):
        if ms < at_ms:
            return min(index + 1, block_count)
    return 0
