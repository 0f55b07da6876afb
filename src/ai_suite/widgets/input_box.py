"""Input row containing the message field and action buttons."""

from __future__ import annotations

from textual.containers import Horizontal
from textual.widgets import Button, Input


class InputBox(Horizontal):
    """Input region with message field, attach button and send button."""

    DEFAULT_CSS = """
    InputBox {
        height: auto;
        dock: bottom;
    }
    InputBox > #message_input {
        width: 1fr;
    }
    """

    def compose(self):  # type: ignore[override]
        yield Input(
            placeholder="Type your message... (/key <api key> to set the key)",
            id="message_input",
        )
        yield Button("Attach", id="file_button", variant="default")
        yield Button("Send", id="send_button", variant="success")
