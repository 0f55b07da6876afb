"""Unit tests for individual widget classes."""

from __future__ import annotations

import unittest

from ai_suite.models import AttachmentRef, Message, Role

try:
    from rich.console import Console

    from ai_suite.widgets.message import MessageBubble
except ModuleNotFoundError:
    Console = None  # type: ignore[assignment,misc]
    MessageBubble = None  # type: ignore[assignment,misc]


def _render(renderable) -> str:  # noqa: ANN001
    console = Console(width=80, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


@unittest.skipIf(MessageBubble is None, "textual is not installed")
class MessageBubbleTests(unittest.TestCase):
    """Validate MessageBubble classes and rendering."""

    def test_role_class_applied(self) -> None:
        bubble = MessageBubble(Message(Role.ERROR, "Missing API key."))  # type: ignore[misc]
        self.assertIn("role-error", bubble.classes)

    def test_renderable_shows_role_and_content(self) -> None:
        text = _render(MessageBubble.build_renderable(Message(Role.USER, "hello")))  # type: ignore[union-attr]
        self.assertIn("You", text)
        self.assertIn("hello", text)

    def test_renderable_lists_attachment_kinds(self) -> None:
        message = Message(
            Role.USER,
            "files",
            (
                AttachmentRef.uploaded("a.pdf", "file_1"),
                AttachmentRef.inlined("b.docx", "body"),
            ),
        )
        text = _render(MessageBubble.build_renderable(message))  # type: ignore[union-attr]
        self.assertIn("[uploaded] a.pdf", text)
        self.assertIn("[inlined] b.docx", text)
        self.assertNotIn("body", text)


if __name__ == "__main__":
    unittest.main()
