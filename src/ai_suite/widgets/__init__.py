"""Widgets for the interactive chat shell."""

from .conversation import ConversationView
from .input_box import InputBox
from .message import MessageBubble

__all__ = ["ConversationView", "InputBox", "MessageBubble"]
