"""Scrollable conversation view widget."""

from __future__ import annotations

from collections.abc import Iterable

from textual.containers import VerticalScroll

from ..models import Message
from .message import MessageBubble


class ConversationView(VerticalScroll):
    """A scrollable container that hosts message bubbles."""

    async def show_messages(self, messages: Iterable[Message]) -> None:
        """Replace every bubble with one per message, in log order."""
        await self.remove_children()
        bubbles = [MessageBubble(message) for message in messages]
        if bubbles:
            await self.mount(*bubbles)
        self.scroll_end(animate=False)
