"""Editor controller — the single writer of the outline editor's state.

Input events (keystrokes, clicks, "insert note at time", project
restore) arrive here. The controller consults the planner and the
selection model, applies block edits and annotation re-keying together,
checkpoints history, and publishes:

- ``on_change(ProjectData)``: the freshly recomputed persistence view
- ``on_focus(FocusIntent)``: which block/offset the presentation should focus
- ``seek(relative_ms)``: audio-player seek requests
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from livenotes.annotations import DEFAULT_SPLIT_GAP_MS, AnnotationIndex
from livenotes.blocks import BlockEdit, BlockStore
from livenotes.codec import ProjectData, encode, serialize
from livenotes.errors import StructuralNoOp, ValidationError
from livenotes.history import DEFAULT_DEBOUNCE_MS, DEFAULT_LIMIT, HistoryStack, Scheduler, Snapshot
from livenotes.planner import plan_insertion
from livenotes.selection import SelectionModel
from livenotes.timefmt import format_absolute, format_relative, now_ms, parse_absolute

logger = logging.getLogger(__name__)

DEFAULT_AUTO_STAMP_DELAY_MS = 2000


class Mode(str, Enum):
    LIVE = "live"
    LOADED = "loaded"


@dataclass(frozen=True)
class FocusIntent:
    index: int
    offset: int = 0


class EditorController:
    """Owns blocks, annotations, selection and history for one project."""

    def __init__(
        self,
        mode: Mode = Mode.LIVE,
        anchor_ms: int = 0,
        *,
        clock: Callable[[], int] = now_ms,
        scheduler: Scheduler | None = None,
        on_change: Callable[[ProjectData], None] | None = None,
        on_focus: Callable[[FocusIntent], None] | None = None,
        seek: Callable[[int], None] | None = None,
        clipboard: Callable[[str], Any] | None = None,
        auto_stamp_delay_ms: int = DEFAULT_AUTO_STAMP_DELAY_MS,
        split_gap_ms: int = DEFAULT_SPLIT_GAP_MS,
        history_limit: int = DEFAULT_LIMIT,
        history_debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self._mode = Mode(mode)
        self._anchor_ms = anchor_ms
        self.clock = clock
        self.on_change = on_change
        self.on_focus = on_focus
        self.seek = seek
        if clipboard is None:
            from livenotes.output import copy_to_clipboard
            clipboard = copy_to_clipboard
        self.clipboard = clipboard
        self.auto_stamp_delay_ms = auto_stamp_delay_ms
        self.split_gap_ms = split_gap_ms

        self._blocks = BlockStore()
        self._annotations = AnnotationIndex()
        self.selection = SelectionModel()
        self.history = HistoryStack(
            limit=history_limit,
            scheduler=scheduler,
            debounce_ms=history_debounce_ms,
        )
        self.history.reset(self._snapshot())

    @classmethod
    def from_config(cls, cfg: dict[str, Any], mode: Mode = Mode.LIVE, anchor_ms: int = 0, **kwargs) -> EditorController:
        """Build a controller with tuning values taken from a loaded config dict."""
        return cls(
            mode,
            anchor_ms,
            auto_stamp_delay_ms=int(cfg.get("auto_stamp_delay_ms", DEFAULT_AUTO_STAMP_DELAY_MS)),
            split_gap_ms=int(cfg.get("split_gap_ms", DEFAULT_SPLIT_GAP_MS)),
            history_limit=int(cfg.get("history_limit", DEFAULT_LIMIT)),
            history_debounce_ms=int(cfg.get("history_debounce_ms", DEFAULT_DEBOUNCE_MS)),
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Read-only projections
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def anchor_ms(self) -> int:
        return self._anchor_ms

    @property
    def blocks(self) -> tuple[str, ...]:
        return self._blocks.blocks

    @property
    def timestamps(self) -> dict[int, int]:
        return dict(self._annotations.timestamps)

    @property
    def speakers(self) -> dict[int, str]:
        return dict(self._annotations.speakers)

    def __len__(self) -> int:
        return len(self._blocks)

    def position_map(self) -> dict[int, int]:
        return encode(self._blocks.blocks, self._annotations.timestamps)

    def serialized_text(self) -> str:
        return serialize(self._blocks.blocks)

    def project_data(self) -> ProjectData:
        return ProjectData.from_state(
            self._blocks.blocks,
            self._annotations.timestamps,
            self._annotations.speakers,
            self._anchor_ms,
        )

    def display_timestamp(self, index: int) -> str | None:
        """Absolute date-time in Live mode, offset from the anchor in Loaded mode."""
        ts = self._annotations.timestamp(index)
        if ts is None:
            return None
        if self._mode is Mode.LIVE:
            return format_absolute(ts)
        return format_relative(ts - self._anchor_ms)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _snapshot(self) -> Snapshot:
        return Snapshot.capture(
            self._blocks.blocks,
            self._annotations.timestamps,
            self._annotations.speakers,
        )

    def _restore(self, snapshot: Snapshot) -> None:
        self._blocks.replace_all(snapshot.blocks)
        self._annotations = AnnotationIndex(snapshot.timestamp_map(), snapshot.speaker_map())
        self.selection.prune(len(self._blocks))
        self._changed()

    def _checkpoint(self) -> None:
        self.history.cancel_pending()
        self.history.push(self._snapshot())

    def _apply(self, edit: BlockEdit) -> None:
        """Checkpoint, then commit *edit* and re-key annotations from its remap."""
        self._checkpoint()
        self._blocks.commit(edit)
        self._annotations.apply_remap(edit.remap)
        self.selection.prune(len(self._blocks))

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.project_data())

    def _focus(self, index: int, offset: int = 0) -> None:
        if self.on_focus is not None:
            index = max(0, min(index, len(self._blocks) - 1))
            self.on_focus(FocusIntent(index, offset))

    def _rebuild(self, blocks: list[str], timestamps: dict[int, int], speakers: dict[int, str]) -> None:
        self._blocks = BlockStore(blocks)
        self._annotations = AnnotationIndex(timestamps, speakers)
        self._annotations.prune(len(self._blocks))
        self.selection.clear()
        self.history.reset(self._snapshot())

    # ------------------------------------------------------------------
    # Mode transitions
    # ------------------------------------------------------------------

    def start_recording(self, anchor_ms: int) -> None:
        """Enter Live mode with a blank document; prior state and history are discarded."""
        self._mode = Mode.LIVE
        self._anchor_ms = anchor_ms
        self._rebuild([""], {}, {})
        logger.info("Live session started, anchor=%d", anchor_ms)
        self._changed()
        self._focus(0)

    def load_project(self, project: ProjectData) -> None:
        """Enter Loaded mode from a persisted project or backup."""
        blocks, timestamps, speakers = project.decode()
        self._mode = Mode.LOADED
        self._anchor_ms = project.anchor_ms
        self._rebuild(blocks, timestamps, speakers)
        logger.info(
            "Project loaded: %d block(s), %d timestamp(s)",
            len(self._blocks), len(self._annotations),
        )
        self._changed()
        self._focus(0)

    # ------------------------------------------------------------------
    # Typing and keys
    # ------------------------------------------------------------------

    def type_text(self, index: int, text: str) -> bool:
        """Replace block *index* with the text the user typed.

        In Live mode the first character typed into an empty block stamps
        it with ``now - auto_stamp_delay_ms``. History is checkpointed via
        the typing debounce.
        """
        old = self._blocks[index]
        if old == text:
            return False
        if self._mode is Mode.LIVE and not old and text:
            if self._annotations.set_if_absent(index, self.clock() - self.auto_stamp_delay_ms):
                logger.debug("Auto-stamped block %d", index)
        self._blocks.set_text(index, text)
        self.history.push_later(self._snapshot)
        self._changed()
        return True

    def insert_newline(self, index: int, offset: int) -> None:
        """Literal newline inside block *index* (no split)."""
        text = self._blocks[index]
        offset = max(0, min(offset, len(text)))
        self.type_text(index, text[:offset] + "\n" + text[offset:])
        self._focus(index, offset + 1)

    def press_enter(self, index: int, offset: int, shift: bool = False) -> bool:
        """Enter key. Splits in Live mode; a newline otherwise or with shift.

        Returns True when the block was split.
        """
        if shift or self._mode is Mode.LOADED:
            self.insert_newline(index, offset)
            return False

        edit = self._blocks.split(index, offset)
        self._apply(edit)
        self._annotations.interpolate_split(
            index, self._blocks[index + 1], self.clock(), self.split_gap_ms,
        )
        self._changed()
        self._focus(index + 1, 0)
        return True

    def backspace(self, index: int, offset: int, has_selection: bool = False) -> bool:
        """Backspace at the start of a block: delete it if empty, else merge it upward.

        Returns False when the key should be handled as ordinary text
        editing (cursor not at the start, or text selected) or when the
        structure is already minimal.
        """
        if offset != 0 or has_selection:
            return False
        try:
            if not self._blocks[index]:
                edit = self._blocks.delete(index)
                focus = (index - 1, len(self._blocks[index - 1])) if index > 0 else (0, 0)
            else:
                edit = self._blocks.merge(index)
                focus = (index - 1, len(self._blocks[index - 1]))
        except StructuralNoOp as exc:
            logger.debug("Backspace ignored on block %d: %s", index, exc)
            return False
        self._apply(edit)
        self._changed()
        self._focus(*focus)
        return True

    def delete_key(self, index: int) -> bool:
        """Delete key on an empty block removes it (never the last block)."""
        if self._blocks[index]:
            return False
        try:
            edit = self._blocks.delete(index)
        except StructuralNoOp as exc:
            logger.debug("Delete ignored on block %d: %s", index, exc)
            return False
        self._apply(edit)
        self._changed()
        self._focus(index, 0)
        return True

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def double_click(self, index: int) -> int | None:
        """Ask the audio player to seek to block *index*'s time. Returns the relative ms."""
        ts = self._annotations.timestamp(index)
        if ts is None:
            return None
        relative = ts - self._anchor_ms
        if self.seek is not None:
            self.seek(relative)
        return relative

    def edit_timestamp(self, index: int, text: str) -> bool:
        """Manual timestamp edit; malformed text is discarded and the old value kept."""
        if not 0 <= index < len(self._blocks):
            raise IndexError(f"Block index {index} out of range")
        try:
            value = parse_absolute(text)
        except ValidationError as exc:
            logger.info("Timestamp edit on block %d rejected: %s", index, exc)
            return False
        self._annotations.set_timestamp(index, value)
        self._changed()
        return True

    def set_speaker(self, index: int, label: str | None) -> None:
        if not 0 <= index < len(self._blocks):
            raise IndexError(f"Block index {index} out of range")
        self._annotations.set_speaker(index, (label or "").strip() or None)
        self._changed()

    def insert_note_at_time(self, at_ms: int) -> int:
        """Insert an empty block stamped *at_ms* where the planner puts it; returns its index."""
        index = plan_insertion(self._annotations.timestamps, len(self._blocks), at_ms)
        self._apply(self._blocks.insert_empty(index))
        self._annotations.set_timestamp(index, at_ms)
        logger.debug("Inserted note at index %d for t=%d", index, at_ms)
        self._changed()
        self._focus(index, 0)
        return index

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def click(self, index: int, extend: bool = False, toggle: bool = False) -> None:
        self.selection.click(index, extend=extend, toggle=toggle)

    def begin_drag(self, index: int, in_text_field: bool = False) -> bool:
        return self.selection.begin_drag(index, in_text_field=in_text_field)

    def drag_over(self, index: int) -> None:
        self.selection.drag_over(index)

    def end_drag(self) -> None:
        self.selection.end_drag()

    def clear_selection(self) -> None:
        self.selection.clear()

    def copy_selected(self) -> str:
        """Hand the selected blocks' text, newline-joined, to the clipboard."""
        if not len(self.selection):
            return ""
        text = self.selection.joined_text(self._blocks.blocks)
        self.clipboard(text)
        return text

    def delete_selected(self) -> bool:
        indices = self.selection.indices
        if not indices:
            return False
        try:
            edit = self._blocks.delete_indices(indices)
        except StructuralNoOp as exc:
            logger.debug("Selection delete ignored: %s", exc)
            return False
        self._apply(edit)
        self.selection.clear()
        self._changed()
        self._focus(indices[0], 0)
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        snapshot = self.history.undo(self._snapshot())
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        # A pending checkpoint holds edits made after the last undo; storing
        # it discards the redo entries.
        self.history.flush()
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo() or self.history.current != self._snapshot()

    def can_redo(self) -> bool:
        return not self.history.pending and self.history.can_redo()
