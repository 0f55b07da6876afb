"""Messages-style adapter speaking the Anthropic Messages API wire shape."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..exceptions import ProviderError
from ..models import ConversationProfile, Message, Provider
from .base import ProviderAdapter, inline_text

ANTHROPIC_VERSION = "2023-06-01"
FILES_BETA = "files-api-2025-04-14"


class _ContentBlock(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    text: str | None = None


class MessagesEnvelope(BaseModel):
    """Subset of a Messages API reply needed to recover the assistant text."""

    model_config = ConfigDict(extra="ignore")

    content: list[_ContentBlock] = []

    def text(self) -> str | None:
        if self.content and self.content[0].text:
            return self.content[0].text
        for block in self.content:
            if block.type == "text" and block.text:
                return block.text
        return None


class _Delta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    text: str | None = None


class MessagesStreamEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    delta: _Delta | None = None


class MessagesAdapter(ProviderAdapter):
    """Adapter for the messages-style provider."""

    provider = Provider.ANTHROPIC
    default_base_url = "https://api.anthropic.com/v1"
    default_model = "claude-3-5-sonnet-20241022"
    model_suggestions = (
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
        "claude-3-opus-20240229",
    )
    request_path = "/messages"

    def headers(self, credential: str) -> dict[str, str]:
        return {
            "x-api-key": credential,
            "anthropic-version": ANTHROPIC_VERSION,
            "anthropic-beta": FILES_BETA,
        }

    @staticmethod
    def _content_blocks(message: Message) -> list[dict[str, Any]]:
        blocks: list[dict[str, Any]] = [{"type": "text", "text": message.content}]
        for ref in message.attachments:
            if ref.remote_id is not None:
                blocks.append(
                    {
                        "type": "document",
                        "source": {"type": "file", "file_id": ref.remote_id},
                    }
                )
            else:
                blocks.append({"type": "text", "text": inline_text(ref)})
        return blocks

    def build_request(
        self, profile: ConversationProfile, *, stream: bool = False
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": profile.model.strip(),
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": message.role.value, "content": self._content_blocks(message)}
                for message in self.conversational(profile.messages, skip_system=True)
            ],
        }
        system_prompt = profile.system_prompt.strip()
        if system_prompt:
            body["system"] = system_prompt
        if stream:
            body["stream"] = True
        return body

    def _reply_text(self, data: Any) -> str | None:
        envelope = self._envelope(MessagesEnvelope, data)
        return envelope.text() if envelope is not None else None

    def parse_stream_event(self, event: dict[str, Any]) -> str | None:
        parsed = self._envelope(MessagesStreamEvent, event)
        if parsed is None:
            return None
        if parsed.type == "error":
            raise ProviderError(200, json.dumps(event))
        if parsed.type != "content_block_delta" or parsed.delta is None:
            return None
        return parsed.delta.text or None
