"""Annotation index — sparse per-block timestamps and speaker labels.

Keys are block indices, so both maps must be re-keyed on every
structural change to the block store (see :meth:`AnnotationIndex.apply_remap`
and :meth:`AnnotationIndex.shift_from`).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_SPLIT_GAP_MS = 3000


def _shift_keys(mapping: dict, index: int, delta: int) -> dict:
    if delta >= 0:
        return {(k + delta if k >= index else k): v for k, v in mapping.items()}
    removed_end = index - delta
    shifted = {}
    for k, v in mapping.items():
        if k < index:
            shifted[k] = v
        elif k >= removed_end:
            shifted[k + delta] = v
    return shifted


class AnnotationIndex:
    """Two sparse maps: block index -> epoch ms, block index -> speaker."""

    def __init__(
        self,
        timestamps: Mapping[int, int] | None = None,
        speakers: Mapping[int, str] | None = None,
    ) -> None:
        self.timestamps: dict[int, int] = dict(timestamps or {})
        self.speakers: dict[int, str] = dict(speakers or {})

    def __len__(self) -> int:
        return len(self.timestamps)

    def timestamp(self, index: int) -> int | None:
        return self.timestamps.get(index)

    def speaker(self, index: int) -> str | None:
        return self.speakers.get(index)

    # -- re-keying ----------------------------------------------------------

    def shift_from(self, index: int, delta: int) -> None:
        """Shift every key >= *index* by *delta*.

        A negative delta removes ``-delta`` blocks starting at *index*:
        keys inside ``[index, index - delta)`` are dropped and keys above
        move down.
        """
        self.timestamps = _shift_keys(self.timestamps, index, delta)
        self.speakers = _shift_keys(self.speakers, index, delta)

    def apply_remap(self, remap: Mapping[int, int]) -> None:
        """Re-key both maps through an old -> new index table; unmapped keys are dropped."""
        self.timestamps = {remap[k]: v for k, v in self.timestamps.items() if k in remap}
        self.speakers = {remap[k]: v for k, v in self.speakers.items() if k in remap}

    def prune(self, block_count: int) -> None:
        """Drop keys that are not valid indices for *block_count* blocks."""
        self.timestamps = {k: v for k, v in self.timestamps.items() if 0 <= k < block_count}
        self.speakers = {k: v for k, v in self.speakers.items() if 0 <= k < block_count}

    # -- writes -------------------------------------------------------------

    def set_if_absent(self, index: int, value: int) -> bool:
        """Stamp *index* unless it already has a timestamp. Returns True if written."""
        if index in self.timestamps:
            return False
        self.timestamps[index] = value
        return True

    def set_timestamp(self, index: int, value: int) -> None:
        self.timestamps[index] = value

    def set_speaker(self, index: int, label: str | None) -> None:
        if label:
            self.speakers[index] = label
        else:
            self.speakers.pop(index, None)

    def interpolate_split(
        self,
        index: int,
        trailing_text: str,
        now: int,
        gap_ms: int = DEFAULT_SPLIT_GAP_MS,
    ) -> int | None:
        """Stamp the trailing block ``index + 1`` created by splitting *index*.

        Must run after keys were shifted for the split. A stamped original
        yields the midpoint to the next annotated block below it, or
        original + *gap_ms* when there is none. An unstamped original
        yields *now*, but only for a non-empty trailing block.
        """
        trailing = index + 1
        original = self.timestamps.get(index)
        speaker = self.speakers.get(index)
        if speaker:
            self.speakers[trailing] = speaker

        if original is None:
            if not trailing_text:
                return None
            value = now
        else:
            later = [k for k in self.timestamps if k > trailing]
            if later:
                value = (original + self.timestamps[min(later)]) // 2
            else:
                value = original + gap_ms

        self.timestamps[trailing] = value
        logger.debug("Split stamp for block %d: %d", trailing, value)
        return value

    def copy(self) -> AnnotationIndex:
        return AnnotationIndex(self.timestamps, self.speakers)
