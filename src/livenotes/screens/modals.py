"""Modal prompt used by the editor (timestamp and speaker edits)."""

from __future__ import annotations

from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label

from livenotes.screens.base import PROMPT_BINDINGS


class PromptScreen(ModalScreen[str | None]):
    """Ask for one line of text. Dismisses with the text, or None if cancelled."""

    BINDINGS = PROMPT_BINDINGS

    def __init__(self, title: str, value: str = "", placeholder: str = "") -> None:
        super().__init__()
        self.title_text = title
        self.value = value
        self.placeholder = placeholder

    def compose(self):
        yield Vertical(
            Label(self.title_text, id="prompt-title"),
            Input(value=self.value, placeholder=self.placeholder, id="prompt-input"),
            id="prompt-container",
        )

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)
