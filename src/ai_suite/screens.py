"""Modal dialogs for file paths and model suggestions."""

from __future__ import annotations

from collections.abc import Sequence

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, OptionList


class DialogScreen(ModalScreen[str | None]):
    """Centered box with a title and a hint line; Escape dismisses with ``None``."""

    DEFAULT_CSS = """
    DialogScreen {
        align: center middle;
    }
    DialogScreen > Vertical {
        width: 70;
        height: auto;
        max-height: 24;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }
    DialogScreen .dialog-title {
        text-style: bold;
        margin-bottom: 1;
    }
    DialogScreen .dialog-hint {
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    hint = ""

    def __init__(self, title: str) -> None:
        super().__init__()
        self.dialog_title = title

    def body(self) -> ComposeResult:
        """Widgets between the title and the hint; none by default."""
        yield from ()

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self.dialog_title, classes="dialog-title")
            yield from self.body()
            yield Label(self.hint, classes="dialog-hint")

    def action_cancel(self) -> None:
        self.dismiss(None)


class SimplePickerScreen(DialogScreen):
    """Pick one string from a list."""

    hint = "Enter to select, Esc to cancel"

    def __init__(self, title: str, options: Sequence[str]) -> None:
        super().__init__(title)
        self.options = list(options)

    def body(self) -> ComposeResult:
        yield OptionList(*self.options)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if 0 <= event.option_index < len(self.options):
            self.dismiss(self.options[event.option_index])


class TextPromptScreen(DialogScreen):
    """Ask for one line of text, such as a file path."""

    hint = "Enter to confirm, Esc to cancel"

    def __init__(self, title: str, placeholder: str = "", value: str = "") -> None:
        super().__init__(title)
        self.placeholder = placeholder
        self.initial_value = value

    def body(self) -> ComposeResult:
        yield Input(value=self.initial_value, placeholder=self.placeholder)

    def on_mount(self) -> None:
        self.query_one(Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value.strip())
