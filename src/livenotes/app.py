"""Textual TUI app hosting the notes editor.

Layout:
┌─────────────────────────────────────────────┐
│  livenotes  ●  LIVE  since 2024-05-01 09:30 │
├─────────────────────────────────────────────┤
│▌ 2024-05-01 09:30:12  Alice  Budget review  │
│  2024-05-01 09:31:40         Follow up Q3   │
│                              _              │
├─────────────────────────────────────────────┤
│  ^z undo  ^y redo  ^t note  ^s save  ^q quit│
└─────────────────────────────────────────────┘
"""

from __future__ import annotations

from textual.app import App

from livenotes.codec import ProjectData
from livenotes.screens.editor import EditorScreen


class NotesApp(App[None]):
    """Runs a single EditorScreen for a live session or a loaded project."""

    CSS = """
    #status-text {
        dock: top;
        height: 1;
        background: $accent;
        color: $text;
        padding: 0 1;
    }

    #blocks {
        height: 1fr;
        padding: 0 1;
    }

    .block-row {
        height: auto;
    }

    .block-label {
        width: 34;
        color: $text-muted;
    }

    .block-text {
        height: auto;
        width: 1fr;
        border: none;
        padding: 0;
    }

    #prompt-container {
        align: center middle;
        width: 60;
        height: auto;
        background: $surface;
        border: tall $accent;
        padding: 1 2;
    }

    #prompt-title {
        margin-bottom: 1;
    }
    """

    def __init__(self, project: ProjectData | None = None, live: bool = True, title: str = "") -> None:
        super().__init__()
        self.project = project
        self.live = live
        self.title_text = title

    def on_mount(self) -> None:
        self.push_screen(EditorScreen(project=self.project, live=self.live, title=self.title_text))
