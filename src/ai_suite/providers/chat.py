"""Chat-style adapter speaking the OpenAI Responses API wire shape."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..exceptions import ProviderError
from ..models import ConversationProfile, Message, Provider, Role
from .base import ProviderAdapter, inline_text


class _OutputPart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    text: str | None = None


class _OutputItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    content: list[_OutputPart] = []


class ResponsesEnvelope(BaseModel):
    """Subset of a Responses API reply needed to recover the assistant text."""

    model_config = ConfigDict(extra="ignore")

    output_text: str | None = None
    output: list[_OutputItem] = []

    def text(self) -> str | None:
        if self.output_text:
            return self.output_text
        if self.output and self.output[0].content and self.output[0].content[0].text:
            return self.output[0].content[0].text
        # Reasoning models put a non-message item first.
        for item in self.output:
            for part in item.content:
                if part.text:
                    return part.text
        return None


class ResponsesStreamEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    delta: str | None = None


class ChatAdapter(ProviderAdapter):
    """Adapter for the chat-style provider."""

    provider = Provider.OPENAI
    default_base_url = "https://api.openai.com/v1"
    default_model = "gpt-4o-mini"
    model_suggestions = (
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
        "gpt-4o",
        "gpt-4o-mini",
    )
    request_path = "/responses"

    def headers(self, credential: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {credential}"}

    def upload_fields(self) -> dict[str, str]:
        return {"purpose": "user_data"}

    @staticmethod
    def _content_blocks(message: Message) -> list[dict[str, str]]:
        text_type = "output_text" if message.role is Role.ASSISTANT else "input_text"
        blocks: list[dict[str, str]] = [{"type": text_type, "text": message.content}]
        for ref in message.attachments:
            if ref.remote_id is not None:
                blocks.append({"type": "input_file", "file_id": ref.remote_id})
            else:
                blocks.append({"type": text_type, "text": inline_text(ref)})
        return blocks

    def build_request(
        self, profile: ConversationProfile, *, stream: bool = False
    ) -> dict[str, Any]:
        items: list[dict[str, Any]] = []
        system_prompt = profile.system_prompt.strip()
        if system_prompt:
            items.append(
                {
                    "role": "system",
                    "content": [{"type": "input_text", "text": system_prompt}],
                }
            )
        for message in self.conversational(profile.messages, skip_system=False):
            items.append(
                {"role": message.role.value, "content": self._content_blocks(message)}
            )

        body: dict[str, Any] = {"model": profile.model.strip(), "input": items}
        if stream:
            body["stream"] = True
        return body

    def _reply_text(self, data: Any) -> str | None:
        envelope = self._envelope(ResponsesEnvelope, data)
        return envelope.text() if envelope is not None else None

    def parse_stream_event(self, event: dict[str, Any]) -> str | None:
        parsed = self._envelope(ResponsesStreamEvent, event)
        if parsed is None:
            return None
        if parsed.type in {"error", "response.failed"}:
            raise ProviderError(200, json.dumps(event))
        if parsed.type == "response.output_text.delta" and parsed.delta:
            return parsed.delta
        return None
