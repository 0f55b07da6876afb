"""Message bubble widget for conversation rendering."""

from __future__ import annotations

from typing import Any

from rich.console import Group, RenderableType
from rich.markdown import Markdown
from rich.text import Text
from textual.widgets import Static

from ..models import Message, Role

_ROLE_LABELS = {
    Role.USER: "You",
    Role.ASSISTANT: "Assistant",
    Role.SYSTEM: "System",
    Role.ERROR: "Error",
}


class MessageBubble(Static):
    """Render a single chat message with its role and attachment names."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        border-left: solid $panel;
    }
    MessageBubble.role-user {
        border-left: solid $accent;
    }
    MessageBubble.role-error {
        border-left: solid $error;
        color: $error;
    }
    """

    def __init__(self, message: Message, **kwargs: Any) -> None:
        super().__init__(self.build_renderable(message), **kwargs)
        self.message = message
        self.add_class(f"role-{message.role.value}")

    @staticmethod
    def build_renderable(message: Message) -> RenderableType:
        header = Text(_ROLE_LABELS[message.role], style="bold")
        parts: list[RenderableType] = [header]
        if message.role is Role.ASSISTANT:
            parts.append(Markdown(message.content))
        else:
            parts.append(Text(message.content))
        for ref in message.attachments:
            kind = "uploaded" if ref.is_uploaded else "inlined"
            parts.append(Text(f"[{kind}] {ref.name}", style="dim"))
        return Group(*parts)
