"""Position codec — block/index addressing <-> flat character offsets.

Persistence stores notes as one string with blocks joined by
``BLOCK_SEPARATOR`` and timestamps keyed by the character offset at
which their block starts. Everything here is a pure function of its
inputs; the offset view is rebuilt from scratch on every call rather
than patched incrementally.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from livenotes.errors import CodecMismatch

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "§§§"


def serialize(blocks: Sequence[str]) -> str:
    return BLOCK_SEPARATOR.join(blocks)


def block_offsets(blocks: Sequence[str]) -> list[int]:
    """Start offset of every block in the serialized text."""
    offsets = []
    pos = 0
    for i, text in enumerate(blocks):
        if i > 0:
            pos += len(BLOCK_SEPARATOR)
        offsets.append(pos)
        pos += len(text)
    return offsets


def encode(blocks: Sequence[str], timestamps: Mapping[int, int]) -> dict[int, int]:
    """Return ``{offset: epoch_ms}`` for every annotated block."""
    offsets = block_offsets(blocks)
    return {offsets[i]: ms for i, ms in sorted(timestamps.items()) if 0 <= i < len(offsets)}


def unmatched_offsets(text: str, positions: Mapping[int, int]) -> list[int]:
    """External offsets with no exact block start in *text*."""
    starts = set(block_offsets(text.split(BLOCK_SEPARATOR)))
    return sorted(pos for pos in positions if pos not in starts)


def decode(
    text: str,
    positions: Mapping[int, int],
    strict: bool = False,
) -> tuple[list[str], dict[int, int]]:
    """Split *text* into blocks and map offsets back to block indices.

    Only exact block-start matches count. Unmatched offsets lose their
    annotation (logged), or raise :class:`CodecMismatch` when *strict*.
    """
    blocks = text.split(BLOCK_SEPARATOR)
    index_at = {offset: i for i, offset in enumerate(block_offsets(blocks))}

    timestamps: dict[int, int] = {}
    missing: list[int] = []
    for pos, ms in sorted(positions.items()):
        i = index_at.get(pos)
        if i is None:
            missing.append(pos)
            continue
        timestamps[i] = ms

    if missing:
        if strict:
            raise CodecMismatch(missing)
        logger.warning("Dropped %d timestamp(s) with no matching block start: %s", len(missing), missing)
    return blocks, timestamps


@dataclass(frozen=True)
class ProjectData:
    """The tuple exchanged with persistence and backup."""

    text: str = ""
    positions: list[tuple[int, int]] = field(default_factory=list)
    speakers: list[tuple[int, str]] = field(default_factory=list)
    anchor_ms: int = 0

    @classmethod
    def from_state(
        cls,
        blocks: Sequence[str],
        timestamps: Mapping[int, int],
        speakers: Mapping[int, str],
        anchor_ms: int,
    ) -> ProjectData:
        return cls(
            text=serialize(blocks),
            positions=sorted(encode(blocks, timestamps).items()),
            speakers=sorted(speakers.items()),
            anchor_ms=anchor_ms,
        )

    def decode(self, strict: bool = False) -> tuple[list[str], dict[int, int], dict[int, str]]:
        blocks, timestamps = decode(self.text, dict(self.positions), strict=strict)
        speakers = {i: s for i, s in self.speakers if 0 <= i < len(blocks)}
        return blocks, timestamps, speakers

    def to_dict(self) -> dict[str, Any]:
        return {
            "notes": self.text,
            "timestampMap": [[pos, ms] for pos, ms in self.positions],
            "speakersMap": [[i, s] for i, s in self.speakers],
            "recordingStartTime": self.anchor_ms,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProjectData:
        return cls(
            text=str(data.get("notes", "")),
            positions=[(int(pos), int(ms)) for pos, ms in data.get("timestampMap") or []],
            speakers=[(int(i), str(s)) for i, s in data.get("speakersMap") or []],
            anchor_ms=int(data.get("recordingStartTime") or 0),
        )
