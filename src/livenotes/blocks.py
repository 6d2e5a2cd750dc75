"""Block store — the ordered sequence of note blocks.

Blocks have no stable identity: a block *is* its position. Every
structural primitive returns a :class:`BlockEdit` (the new sequence plus
a remap table from old to new indices) instead of mutating in place, so
the caller can re-key annotations from the same table and commit both
together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from livenotes.errors import StructuralNoOp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockEdit:
    """Proposed block sequence and old-index -> new-index table.

    Old indices missing from ``remap`` were removed by the edit.
    """

    blocks: tuple[str, ...]
    remap: dict[int, int] = field(default_factory=dict)


class BlockStore:
    """Owns the block sequence. Always holds at least one block."""

    def __init__(self, blocks: Iterable[str] | None = None) -> None:
        self._blocks: list[str] = list(blocks) if blocks is not None else []
        if not self._blocks:
            self._blocks = [""]

    def __len__(self) -> int:
        return len(self._blocks)

    def __getitem__(self, index: int) -> str:
        return self._blocks[index]

    def __iter__(self):
        return iter(self._blocks)

    @property
    def blocks(self) -> tuple[str, ...]:
        return tuple(self._blocks)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._blocks):
            raise IndexError(f"Block index {index} out of range (0..{len(self._blocks) - 1})")

    # -- primitives ---------------------------------------------------------

    def split(self, index: int, offset: int) -> BlockEdit:
        """Divide block *index* at character *offset* into two blocks."""
        self._check(index)
        text = self._blocks[index]
        offset = max(0, min(offset, len(text)))
        new = self._blocks[:index] + [text[:offset], text[offset:]] + self._blocks[index + 1:]
        remap = {i: (i if i <= index else i + 1) for i in range(len(self._blocks))}
        return BlockEdit(tuple(new), remap)

    def merge(self, index: int) -> BlockEdit:
        """Append block *index* to block ``index - 1`` and remove it."""
        self._check(index)
        if index == 0:
            raise StructuralNoOp("Cannot merge the first block into a predecessor")
        new = list(self._blocks)
        new[index - 1] = new[index - 1] + new[index]
        del new[index]
        remap = {i: (i if i < index else i - 1) for i in range(len(self._blocks)) if i != index}
        return BlockEdit(tuple(new), remap)

    def insert_empty(self, index: int) -> BlockEdit:
        """Insert an empty block so that it ends up at *index*."""
        if not 0 <= index <= len(self._blocks):
            raise IndexError(f"Insert index {index} out of range (0..{len(self._blocks)})")
        new = self._blocks[:index] + [""] + self._blocks[index:]
        remap = {i: (i if i < index else i + 1) for i in range(len(self._blocks))}
        return BlockEdit(tuple(new), remap)

    def delete_indices(self, indices: Iterable[int]) -> BlockEdit:
        """Remove several blocks in one logical operation.

        Removal runs in descending index order so earlier removals never
        invalidate later ones. Emptying the sequence is refused.
        """
        targets = sorted(set(indices), reverse=True)
        if not targets:
            raise StructuralNoOp("Nothing to delete")
        for i in targets:
            self._check(i)
        if len(targets) >= len(self._blocks):
            raise StructuralNoOp("Refusing to delete every block")

        new = list(self._blocks)
        for i in targets:
            del new[i]

        removed = set(targets)
        remap: dict[int, int] = {}
        shift = 0
        for i in range(len(self._blocks)):
            if i in removed:
                shift += 1
                continue
            remap[i] = i - shift
        return BlockEdit(tuple(new), remap)

    def delete(self, index: int) -> BlockEdit:
        return self.delete_indices([index])

    # -- commit -------------------------------------------------------------

    def commit(self, edit: BlockEdit) -> None:
        if not edit.blocks:
            raise StructuralNoOp("A block sequence can never be empty")
        self._blocks = list(edit.blocks)
        logger.debug("Blocks committed: %d block(s)", len(self._blocks))

    def set_text(self, index: int, text: str) -> None:
        self._check(index)
        self._blocks[index] = text

    def replace_all(self, blocks: Iterable[str]) -> None:
        self._blocks = list(blocks) or [""]
