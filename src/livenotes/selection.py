"""Block selection for multi-block copy/delete (click, shift, toggle, drag)."""

from __future__ import annotations

from collections.abc import Sequence


class SelectionModel:
    """Selected block indices plus the anchor of the last explicit click."""

    def __init__(self) -> None:
        self._selected: set[int] = set()
        self.anchor: int | None = None
        self._dragging = False

    @property
    def indices(self) -> list[int]:
        return sorted(self._selected)

    @property
    def dragging(self) -> bool:
        return self._dragging

    def __contains__(self, index: int) -> bool:
        return index in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def click(self, index: int, extend: bool = False, toggle: bool = False) -> None:
        """Apply a click on *index*.

        ``extend`` (shift) selects the inclusive range from the anchor and
        leaves the anchor alone; ``toggle`` (ctrl/cmd) flips membership and
        moves the anchor; a plain click selects only *index*.
        """
        if extend and self.anchor is not None:
            lo, hi = sorted((self.anchor, index))
            self._selected = set(range(lo, hi + 1))
            return
        if toggle:
            self._selected ^= {index}
        else:
            self._selected = {index}
        self.anchor = index

    def begin_drag(self, index: int, in_text_field: bool = False) -> bool:
        """Start a drag selection; ignored when the press lands in an active text field."""
        if in_text_field:
            return False
        self._dragging = True
        self._selected = {index}
        self.anchor = index
        return True

    def drag_over(self, index: int) -> None:
        if self._dragging:
            self._selected.add(index)

    def end_drag(self) -> None:
        self._dragging = False

    def clear(self) -> None:
        self._selected.clear()
        self.anchor = None
        self._dragging = False

    def prune(self, block_count: int) -> None:
        self._selected = {i for i in self._selected if 0 <= i < block_count}
        if self.anchor is not None and self.anchor >= block_count:
            self.anchor = None

    def joined_text(self, blocks: Sequence[str]) -> str:
        """Selected block texts in index order, newline-joined."""
        return "\n".join(blocks[i] for i in self.indices if 0 <= i < len(blocks))
