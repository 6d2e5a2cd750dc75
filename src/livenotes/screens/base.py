"""Shared key bindings for the livenotes TUI."""

from __future__ import annotations

from textual.binding import Binding

# Priority bindings win over the focused TextArea, which binds several of
# these keys itself.
EDITOR_BINDINGS = [
    Binding("enter", "enter", "Split", priority=True, show=False),
    Binding("shift+enter", "newline", "Newline", priority=True, show=False),
    Binding("backspace", "backspace", "Backspace", priority=True, show=False),
    Binding("delete", "delete", "Delete", priority=True, show=False),
    Binding("ctrl+z", "undo", "Undo", key_display="^z", priority=True),
    Binding("ctrl+y", "redo", "Redo", key_display="^y", priority=True),
    Binding("ctrl+t", "insert_now", "Note at now", key_display="^t"),
    Binding("ctrl+e", "copy_selection", "Copy selection", key_display="^e", priority=True),
    Binding("ctrl+d", "delete_selection", "Delete selection", key_display="^d", priority=True),
    Binding("f2", "edit_time", "Edit time"),
    Binding("f3", "edit_speaker", "Speaker"),
    Binding("escape", "clear_selection", "Clear selection", show=False),
    Binding("ctrl+s", "save", "Save", key_display="^s"),
    Binding("ctrl+q", "quit", "Quit", key_display="^q", priority=True),
]

PROMPT_BINDINGS = [
    Binding("escape", "cancel", "Cancel"),
    Binding("ctrl+c", "cancel", "Cancel", priority=True),
]
