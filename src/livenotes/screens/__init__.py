"""TUI screens — the notes editor and its prompts."""

from livenotes.screens.editor import EditorScreen
from livenotes.screens.modals import PromptScreen

__all__ = [
    "EditorScreen",
    "PromptScreen",
]
