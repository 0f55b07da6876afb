"""Provider-agnostic conversation model shared by the store and the adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Provider(str, Enum):
    """Closed set of supported backends."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"

    @property
    def label(self) -> str:
        return {"openai": "OpenAI", "anthropic": "Anthropic"}[self.value]


class Role(str, Enum):
    """Message roles; SYSTEM and ERROR never leave the process as error turns."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    ERROR = "error"


@dataclass(frozen=True)
class AttachmentRef:
    """Pointer to file content: an uploaded remote id or locally extracted text."""

    name: str
    remote_id: str | None = None
    text: str | None = None

    def __post_init__(self) -> None:
        if (self.remote_id is None) == (self.text is None):
            raise ValueError("AttachmentRef needs exactly one of remote_id or text.")

    @classmethod
    def uploaded(cls, name: str, remote_id: str) -> AttachmentRef:
        return cls(name=name, remote_id=remote_id)

    @classmethod
    def inlined(cls, name: str, text: str) -> AttachmentRef:
        return cls(name=name, text=text)

    @property
    def is_uploaded(self) -> bool:
        return self.remote_id is not None

    def to_dict(self) -> dict[str, str]:
        if self.remote_id is not None:
            return {"name": self.name, "remote_id": self.remote_id}
        return {"name": self.name, "text": self.text or ""}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttachmentRef:
        name = str(data.get("name", ""))
        remote_id = data.get("remote_id")
        if isinstance(remote_id, str) and remote_id:
            return cls.uploaded(name, remote_id)
        return cls.inlined(name, str(data.get("text", "")))


@dataclass(frozen=True)
class Message:
    """A single immutable conversation turn."""

    role: Role
    content: str
    attachments: tuple[AttachmentRef, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept plain strings and lists from callers; store canonical types.
        object.__setattr__(self, "role", Role(self.role))
        object.__setattr__(self, "attachments", tuple(self.attachments))

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "attachments": [ref.to_dict() for ref in self.attachments],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        raw_attachments = data.get("attachments") or []
        return cls(
            role=Role(str(data.get("role", "")).strip().lower()),
            content=str(data.get("content", "")),
            attachments=tuple(AttachmentRef.from_dict(item) for item in raw_attachments),
        )


@dataclass
class ConversationProfile:
    """Per-provider bundle of model, system prompt, credential and conversation state.

    ``messages`` is append-only; callers go through ``ConversationStore`` rather
    than mutating the lists directly.
    """

    model: str = ""
    system_prompt: str = ""
    credential: str = ""
    messages: list[Message] = field(default_factory=list)
    pending_uploads: list[AttachmentRef] = field(default_factory=list)
    pending_inlines: list[AttachmentRef] = field(default_factory=list)

    @property
    def pending(self) -> list[AttachmentRef]:
        """Return every pending attachment, uploads first."""
        return list(self.pending_uploads) + list(self.pending_inlines)

    def to_dict(self) -> dict[str, Any]:
        """Serialize every field except the credential."""
        return {
            "model": self.model,
            "system_prompt": self.system_prompt,
            "messages": [message.to_dict() for message in self.messages],
            "pending_uploads": [ref.to_dict() for ref in self.pending_uploads],
            "pending_inlines": [ref.to_dict() for ref in self.pending_inlines],
        }
