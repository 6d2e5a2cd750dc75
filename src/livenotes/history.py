"""Undo/redo history built from whole-state snapshots.

Structural edits checkpoint synchronously; free typing checkpoints via
a debounce that is cancelled and restarted on every keystroke, so at
most one checkpoint is ever pending.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_DEBOUNCE_MS = 1000


@dataclass(frozen=True)
class Snapshot:
    blocks: tuple[str, ...]
    timestamps: tuple[tuple[int, int], ...] = ()
    speakers: tuple[tuple[int, str], ...] = ()

    @classmethod
    def capture(
        cls,
        blocks: Sequence[str],
        timestamps: Mapping[int, int],
        speakers: Mapping[int, str],
    ) -> Snapshot:
        return cls(tuple(blocks), tuple(sorted(timestamps.items())), tuple(sorted(speakers.items())))

    def timestamp_map(self) -> dict[int, int]:
        return dict(self.timestamps)

    def speaker_map(self) -> dict[int, str]:
        return dict(self.speakers)


class Cancellable(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    """Host event-loop hook: run *callback* once after *delay* seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class Debouncer:
    """One cancellable pending call; every ``trigger`` restarts the wait."""

    def __init__(self, scheduler: Scheduler | None, delay_ms: int, callback: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.delay_ms = delay_ms
        self.callback = callback
        self._handle: Cancellable | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        if self.scheduler is None:
            self.callback()
            return
        self.cancel()
        self._handle = self.scheduler.call_later(self.delay_ms / 1000, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self.callback()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run the pending call now, if any."""
        if self._handle is not None:
            self.cancel()
            self.callback()


class HistoryStack:
    """Linear undo model over snapshots, capped at *limit* entries."""

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        scheduler: Scheduler | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self.limit = max(1, limit)
        self._entries: list[Snapshot] = []
        self._cursor = -1
        self._factory: Callable[[], Snapshot] | None = None
        self._debounce = Debouncer(scheduler, debounce_ms, self._push_from_factory)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Snapshot | None:
        return self._entries[self._cursor] if self._entries else None

    @property
    def pending(self) -> bool:
        return self._debounce.pending

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def reset(self, snapshot: Snapshot | None = None) -> None:
        self._debounce.cancel()
        self._entries = [snapshot] if snapshot is not None else []
        self._cursor = len(self._entries) - 1

    def _append(self, snapshot: Snapshot) -> None:
        self._entries.append(snapshot)
        if len(self._entries) > self.limit:
            del self._entries[0 : len(self._entries) - self.limit]
        self._cursor = len(self._entries) - 1

    def push(self, snapshot: Snapshot) -> bool:
        """Store *snapshot* as the newest entry.

        Redo entries ahead of the cursor are discarded first. A snapshot
        whose blocks equal the newest stored entry is rejected.
        """
        del self._entries[self._cursor + 1 :]
        if self._entries and self._entries[-1].blocks == snapshot.blocks:
            return False
        self._append(snapshot)
        logger.debug("History push: %d entr%s", len(self._entries), "y" if len(self._entries) == 1 else "ies")
        return True

    def push_later(self, factory: Callable[[], Snapshot]) -> None:
        """Debounced push; *factory* is evaluated when the timer fires."""
        self._factory = factory
        self._debounce.trigger()

    def _push_from_factory(self) -> None:
        if self._factory is not None:
            self.push(self._factory())

    def flush(self) -> None:
        self._debounce.flush()

    def cancel_pending(self) -> None:
        self._debounce.cancel()

    def undo(self, current: Snapshot | None = None) -> Snapshot | None:
        """Step back one entry and return it, or None at the oldest entry.

        *current* is the live state; when it differs from the entry at the
        cursor it is stored first so that ``redo`` can return to it.
        """
        self._debounce.cancel()
        if current is not None and self.current != current:
            del self._entries[self._cursor + 1 :]
            self._append(current)
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Snapshot | None:
        self._debounce.cancel()
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._entries[self._cursor]
