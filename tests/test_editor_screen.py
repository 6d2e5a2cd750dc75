"""Tests for the editor screen's helpers, bindings and controller wiring."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

pytest.importorskip("textual")

from livenotes.controller import Mode
from livenotes.screens.base import EDITOR_BINDINGS, PROMPT_BINDINGS
from livenotes.screens.editor import (
    EditorScreen,
    TimerScheduler,
    location_to_offset,
    offset_to_location,
    render_label,
)


def _binding_exists(bindings, key: str, action: str, *, priority: bool | None = None) -> bool:
    for binding in bindings:
        if binding.key == key and binding.action == action:
            if priority is None or bool(binding.priority) == priority:
                return True
    return False


def test_structural_keys_take_priority() -> None:
    assert _binding_exists(EDITOR_BINDINGS, "enter", "enter", priority=True)
    assert _binding_exists(EDITOR_BINDINGS, "shift+enter", "newline", priority=True)
    assert _binding_exists(EDITOR_BINDINGS, "backspace", "backspace", priority=True)
    assert _binding_exists(EDITOR_BINDINGS, "delete", "delete", priority=True)


def test_history_bindings() -> None:
    assert _binding_exists(EDITOR_BINDINGS, "ctrl+z", "undo")
    assert _binding_exists(EDITOR_BINDINGS, "ctrl+y", "redo")


def test_prompt_escape_cancels() -> None:
    assert _binding_exists(PROMPT_BINDINGS, "escape", "cancel")


def test_location_offset_round_trip() -> None:
    text = "ab\ncde\n"
    assert location_to_offset(text, 1, 2) == 5
    assert offset_to_location(text, 5) == (1, 2)
    assert location_to_offset(text, 2, 0) == 7
    assert location_to_offset(text, 9, 9) == 7


def test_render_label() -> None:
    assert render_label("00:01:02", "Ann", True).startswith("▌ 00:01:02")
    assert render_label(None, None, False).strip() == ""


def test_timer_scheduler_cancel_stops_timer() -> None:
    timer = Mock()
    host = Mock()
    host.set_timer.return_value = timer
    callback = Mock()
    handle = TimerScheduler(host).call_later(1.0, callback)
    host.set_timer.assert_called_once_with(1.0, callback)
    handle.cancel()
    timer.stop.assert_called_once_with()


def test_screen_builds_controller_for_mode(monkeypatch) -> None:
    monkeypatch.setattr("livenotes.screens.editor.load_config", lambda: {"history_limit": 7})
    screen = EditorScreen(live=False, project=None)
    assert screen.live is True
    assert screen.controller.history.limit == 7
    assert screen.controller.mode is Mode.LIVE


def test_seek_notifies(monkeypatch) -> None:
    monkeypatch.setattr("livenotes.screens.editor.load_config", lambda: {})
    screen = EditorScreen(live=True)
    screen.notify = Mock()
    screen._on_seek(61_000)
    screen.notify.assert_called_once_with("Seek to 00:01:01")
