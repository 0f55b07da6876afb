"""Shared adapter contract between the internal conversation model and a provider."""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import EmptyReplyError, ProviderError, UploadError
from ..models import AttachmentRef, ConversationProfile, Message, Provider, Role

LOGGER = logging.getLogger(__name__)

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)


class UploadReply(BaseModel):
    """Body returned by both providers' file endpoints."""

    id: str


def inline_text(ref: AttachmentRef) -> str:
    """Render extracted attachment text as a labeled block."""
    return f"File: {ref.name}\n\n{ref.text or ''}"


def is_success(status: int) -> bool:
    return 200 <= status < 300


class ProviderAdapter(ABC):
    """Translate profiles into request bodies and provider replies into text.

    Every provider-specific detail (system prompt placement, file reference
    blocks, reply envelope, stream event shape) lives behind this interface so
    the store and orchestrator stay provider-agnostic.
    """

    provider: Provider
    default_base_url: str
    default_model: str
    model_suggestions: tuple[str, ...] = ()
    request_path: str
    upload_path = "/files"

    def __init__(
        self,
        base_url: str | None = None,
        max_tokens: int = 1024,
        timeout: float = 120.0,
    ) -> None:
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.max_tokens = max_tokens
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{self.request_path}"

    @property
    def upload_endpoint(self) -> str:
        return f"{self.base_url}{self.upload_path}"

    @abstractmethod
    def headers(self, credential: str) -> dict[str, str]:
        """Return authentication and version headers for JSON requests."""

    def upload_fields(self) -> dict[str, str]:
        """Extra multipart form fields sent alongside the ``file`` part."""
        return {}

    @abstractmethod
    def build_request(
        self, profile: ConversationProfile, *, stream: bool = False
    ) -> dict[str, Any]:
        """Project the profile's log, system prompt and model into a request body."""

    @abstractmethod
    def _reply_text(self, data: Any) -> str | None:
        """Return the assistant text from a decoded success body, if any."""

    @abstractmethod
    def parse_stream_event(self, event: dict[str, Any]) -> str | None:
        """Return the text token carried by one stream event, or ``None``."""

    @staticmethod
    def conversational(messages: list[Message], *, skip_system: bool) -> list[Message]:
        """Drop local-only turns that must never reach the provider."""
        skipped = {Role.ERROR, Role.SYSTEM} if skip_system else {Role.ERROR}
        return [message for message in messages if message.role not in skipped]

    def parse_response(self, status: int, body: str) -> str:
        """Return the reply text or raise a typed error for the failure."""
        if not is_success(status):
            raise ProviderError(status, body)
        try:
            data = json.loads(body)
        except json.JSONDecodeError as exc:
            raise ProviderError(status, body) from exc

        text = self._reply_text(data)
        if not text:
            LOGGER.warning(
                "provider.reply.empty",
                extra={"event": "provider.reply.empty", "provider": self.provider.value},
            )
            raise EmptyReplyError(f"{self.provider.label} returned no message.")
        return text

    def parse_upload(self, status: int, body: str) -> str:
        """Return the remote file id from an upload reply."""
        if not is_success(status):
            raise UploadError(status, body)
        try:
            reply = UploadReply.model_validate_json(body)
        except ValidationError as exc:
            raise UploadError(status, body) from exc
        if not reply.id.strip():
            raise UploadError(status, body)
        return reply.id

    @staticmethod
    def _envelope(model: type[EnvelopeT], data: Any) -> EnvelopeT | None:
        """Validate ``data`` against a typed envelope; wrong shapes yield ``None``."""
        try:
            return model.model_validate(data)
        except ValidationError:
            return None
