"""Editor error taxonomy. None of these are fatal; the controller absorbs them."""

from __future__ import annotations


class EditorError(Exception):
    """Base class for recoverable editor failures."""


class ValidationError(EditorError, ValueError):
    """Malformed user input, e.g. a manually edited timestamp."""


class StructuralNoOp(EditorError):
    """A structural edit requested against an already-minimal structure."""


class CodecMismatch(EditorError):
    """External offsets that do not land exactly on a block start."""

    def __init__(self, offsets: list[int]) -> None:
        self.offsets = list(offsets)
        super().__init__(f"No block starts at offset(s): {', '.join(map(str, self.offsets))}")
