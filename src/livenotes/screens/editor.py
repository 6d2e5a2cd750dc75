"""Editor screen — one row per block: selection marker, time, speaker, text.

The screen is a thin presentation layer over :class:`EditorController`:
widget events become controller calls, and the controller's change and
focus notifications are rendered back. Textual timers stand in for the
controller's scheduler (history debounce) and drive the auto-backup.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from textual import events
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Static, TextArea

from livenotes.backup import clear_backup, save_backup
from livenotes.codec import ProjectData
from livenotes.config import load_config
from livenotes.controller import EditorController, FocusIntent, Mode
from livenotes.history import Debouncer
from livenotes.output import copy_to_clipboard, save_notes
from livenotes.screens.base import EDITOR_BINDINGS
from livenotes.screens.modals import PromptScreen
from livenotes.timefmt import format_absolute, format_relative, now_ms

logger = logging.getLogger(__name__)

_BLANK_STAMP = " " * 19


def location_to_offset(text: str, row: int, col: int) -> int:
    """Convert a TextArea (row, column) cursor into a character offset."""
    lines = text.split("\n")
    row = max(0, min(row, len(lines) - 1))
    return sum(len(line) + 1 for line in lines[:row]) + min(col, len(lines[row]))


def offset_to_location(text: str, offset: int) -> tuple[int, int]:
    before = text[: max(0, offset)].split("\n")
    return len(before) - 1, len(before[-1])


def render_label(stamp: str | None, speaker: str | None, selected: bool) -> str:
    marker = "▌" if selected else " "
    label = f"{marker} {(stamp or '').ljust(len(_BLANK_STAMP))}"
    if speaker:
        label += f"  {speaker}"
    return label


class _TimerHandle:
    def __init__(self, timer) -> None:
        self.timer = timer

    def cancel(self) -> None:
        self.timer.stop()


class TimerScheduler:
    """Adapts a Textual widget's ``set_timer`` to the controller's scheduler hook."""

    def __init__(self, host) -> None:
        self.host = host

    def call_later(self, delay: float, callback: Callable[[], None]) -> _TimerHandle:
        return _TimerHandle(self.host.set_timer(delay, callback))


class BlockLabel(Static):
    """Time/speaker gutter; clicks here select blocks, double-click seeks."""

    def __init__(self, block_index: int, text: str) -> None:
        super().__init__(text, markup=False, classes="block-label")
        self.block_index = block_index

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self.screen.select_block(self.block_index, extend=event.shift, toggle=event.ctrl or event.meta)

    def on_enter(self, event: events.Enter) -> None:
        self.screen.drag_over(self.block_index)

    def on_click(self, event: events.Click) -> None:
        if event.chain == 2:
            self.screen.seek_block(self.block_index)


class BlockEditor(TextArea):
    def __init__(self, block_index: int, text: str, generation: int = 0) -> None:
        super().__init__(text, soft_wrap=True, classes="block-text")
        self.block_index = block_index
        self.generation = generation

    @property
    def cursor_offset(self) -> int:
        row, col = self.cursor_location
        return location_to_offset(self.text, row, col)


class BlockRow(Horizontal):
    def __init__(self, block_index: int, label: str, text: str, generation: int = 0) -> None:
        super().__init__(classes="block-row")
        self.block_index = block_index
        self.label_text = label
        self.block_text = text
        self.generation = generation

    def compose(self):
        yield BlockLabel(self.block_index, self.label_text)
        yield BlockEditor(self.block_index, self.block_text, self.generation)


class EditorScreen(Screen[None]):
    """Outline editor for one live session or loaded project."""

    BINDINGS = EDITOR_BINDINGS

    def __init__(
        self,
        project: ProjectData | None = None,
        live: bool = True,
        title: str = "",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.project = project
        self.live = live or project is None
        self.title_text = title
        self.cfg = load_config()
        self.controller = EditorController.from_config(
            self.cfg,
            Mode.LIVE if self.live else Mode.LOADED,
            scheduler=TimerScheduler(self),
            on_change=self._on_change,
            on_focus=self._on_focus,
            seek=self._on_seek,
            clipboard=copy_to_clipboard,
        )
        self._backup = Debouncer(
            TimerScheduler(self),
            int(self.cfg.get("backup_debounce_ms", 3000)),
            self._write_backup,
        )
        self._pending_focus: FocusIntent | None = None
        self._focus_attempts = 0
        self._generation = 0
        self._ready = False

    def compose(self):
        with Vertical(classes="screen-frame"):
            yield Static("", id="status-text", markup=False)
            yield VerticalScroll(id="blocks")
        yield Footer()

    def on_mount(self) -> None:
        if self.live:
            self.controller.start_recording(now_ms())
        else:
            self.controller.load_project(self.project)
        self._render_rows(rebuild=True)
        self._ready = True
        last = len(self.controller) - 1
        self._on_focus(FocusIntent(last, len(self.controller.blocks[last])))

    # -- controller notifications ---------------------------------------------

    def _on_change(self, project: ProjectData) -> None:
        if not self._ready:
            return
        self._render_rows()
        self._backup.trigger()

    def _on_focus(self, intent: FocusIntent) -> None:
        self._pending_focus = intent
        self._focus_attempts = 0
        self.call_after_refresh(self._apply_focus)

    def _on_seek(self, relative_ms: int) -> None:
        logger.info("Seek requested: %d ms", relative_ms)
        self.notify(f"Seek to {format_relative(relative_ms)}")

    def _write_backup(self) -> None:
        save_backup(self.controller.project_data(), title=self.title_text)

    # -- rendering ------------------------------------------------------------

    def _label_for(self, index: int) -> str:
        return render_label(
            self.controller.display_timestamp(index),
            self.controller.speakers.get(index),
            index in self.controller.selection,
        )

    def _render_status(self) -> None:
        c = self.controller
        mode = "LIVE" if c.mode is Mode.LIVE else "LOADED"
        anchor = format_absolute(c.anchor_ms) if c.anchor_ms else "—"
        selected = f"  |  {len(c.selection)} selected" if len(c.selection) else ""
        self.query_one("#status-text", Static).update(
            f"  livenotes  ●  {mode}  since {anchor}  |  {len(c)} block(s){selected}"
        )

    def _render_rows(self, rebuild: bool = False) -> None:
        container = self.query_one("#blocks", VerticalScroll)
        rows = list(container.query(BlockRow))
        blocks = self.controller.blocks
        if rebuild or len(rows) != len(blocks):
            # Editors from the previous generation may still post Changed events.
            self._generation += 1
            container.remove_children()
            container.mount(
                *[BlockRow(i, self._label_for(i), text, self._generation) for i, text in enumerate(blocks)]
            )
        else:
            for row in rows:
                i = row.block_index
                row.query_one(BlockLabel).update(self._label_for(i))
                editor = row.query_one(BlockEditor)
                if editor.text != blocks[i]:
                    editor.load_text(blocks[i])
        self._render_status()

    def _refresh_labels(self) -> None:
        for label in self.query(BlockLabel):
            label.update(self._label_for(label.block_index))
        self._render_status()

    def _apply_focus(self) -> None:
        intent = self._pending_focus
        if intent is None:
            return
        for editor in self.query(BlockEditor):
            if editor.generation == self._generation and editor.block_index == intent.index:
                editor.focus()
                editor.cursor_location = offset_to_location(editor.text, intent.offset)
                editor.scroll_visible()
                self._pending_focus = None
                return
        # New rows are not mounted until the next refresh.
        self._focus_attempts += 1
        if self._focus_attempts < 5:
            self.call_after_refresh(self._apply_focus)

    def _current_editor(self) -> BlockEditor | None:
        return self.focused if isinstance(self.focused, BlockEditor) else None

    # -- widget events --------------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        editor = event.text_area
        if (
            isinstance(editor, BlockEditor)
            and editor.generation == self._generation
            and editor.block_index < len(self.controller)
        ):
            self.controller.type_text(editor.block_index, editor.text)

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self.controller.end_drag()

    def select_block(self, index: int, extend: bool = False, toggle: bool = False) -> None:
        if extend or toggle:
            self.controller.click(index, extend=extend, toggle=toggle)
        else:
            self.controller.begin_drag(index)
        self._refresh_labels()

    def drag_over(self, index: int) -> None:
        if self.controller.selection.dragging:
            self.controller.drag_over(index)
            self._refresh_labels()

    def seek_block(self, index: int) -> None:
        if self.controller.double_click(index) is None:
            self.notify("No timestamp on this line", severity="warning")

    # -- actions --------------------------------------------------------------

    def action_enter(self) -> None:
        editor = self._current_editor()
        if editor is not None:
            self.controller.press_enter(editor.block_index, editor.cursor_offset)

    def action_newline(self) -> None:
        editor = self._current_editor()
        if editor is not None:
            self.controller.press_enter(editor.block_index, editor.cursor_offset, shift=True)

    def action_backspace(self) -> None:
        editor = self._current_editor()
        if editor is None:
            return
        has_selection = not editor.selection.is_empty
        if not self.controller.backspace(editor.block_index, editor.cursor_offset, has_selection=has_selection):
            editor.action_delete_left()

    def action_delete(self) -> None:
        editor = self._current_editor()
        if editor is None:
            return
        if not self.controller.delete_key(editor.block_index):
            editor.action_delete_right()

    def action_undo(self) -> None:
        if not self.controller.undo():
            self.notify("Nothing to undo")

    def action_redo(self) -> None:
        if not self.controller.redo():
            self.notify("Nothing to redo")

    def action_insert_now(self) -> None:
        self.controller.insert_note_at_time(now_ms())

    def action_copy_selection(self) -> None:
        if self.controller.copy_selected():
            self.notify("Copied to clipboard")
        else:
            self.notify("Nothing selected", severity="warning")

    def action_delete_selection(self) -> None:
        if not self.controller.delete_selected():
            self.notify("Nothing deleted", severity="warning")

    def action_clear_selection(self) -> None:
        self.controller.clear_selection()
        self._refresh_labels()

    def action_edit_time(self) -> None:
        editor = self._current_editor()
        if editor is None:
            return
        index = editor.block_index
        ts = self.controller.timestamps.get(index)

        def _done(value: str | None) -> None:
            if value is None:
                return
            if not self.controller.edit_timestamp(index, value):
                self.notify("Use YYYY-MM-DD HH:MM:SS", severity="error")

        self.app.push_screen(
            PromptScreen("Timestamp (YYYY-MM-DD HH:MM:SS)", format_absolute(ts) if ts else ""),
            _done,
        )

    def action_edit_speaker(self) -> None:
        editor = self._current_editor()
        if editor is None:
            return
        index = editor.block_index

        def _done(value: str | None) -> None:
            if value is not None:
                self.controller.set_speaker(index, value)

        self.app.push_screen(
            PromptScreen("Speaker", self.controller.speakers.get(index, ""), "empty clears"),
            _done,
        )

    def action_save(self) -> None:
        folder = self.cfg.get("export_folder", "~/notes")
        stem = self.title_text or f"notes_{format_absolute(now_ms()).replace(' ', '_').replace(':', '-')}"
        try:
            path = save_notes(self.controller.project_data(), f"{folder}/{stem}.md", title=self.title_text or None)
        except OSError as exc:
            logger.error("Could not save notes: %s", exc)
            self.notify(f"Could not save: {exc}", severity="error")
            return
        self._backup.cancel()
        clear_backup()
        self.notify(f"Saved {path}")

    def action_quit(self) -> None:
        self._backup.flush()
        self.app.exit()
