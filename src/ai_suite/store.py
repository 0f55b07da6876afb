"""Per-provider conversation state: the single source of truth for every component."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from .exceptions import ImportParseError
from .models import AttachmentRef, ConversationProfile, Message, Provider, Role
from .persistence import StatePersistence

LOGGER = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class _AttachmentSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    remote_id: str | None = None
    text: str | None = None

    @model_validator(mode="after")
    def _exactly_one_payload(self) -> _AttachmentSnapshot:
        if (self.remote_id is None) == (self.text is None):
            raise ValueError("attachment needs exactly one of remote_id or text")
        return self

    def to_ref(self) -> AttachmentRef:
        return AttachmentRef(name=self.name, remote_id=self.remote_id, text=self.text)


class _MessageSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: Role
    content: str
    attachments: list[_AttachmentSnapshot] = []

    def to_message(self) -> Message:
        return Message(
            role=self.role,
            content=self.content,
            attachments=tuple(item.to_ref() for item in self.attachments),
        )


class ProfileSnapshot(BaseModel):
    """One provider's persisted fields; the credential is never part of it."""

    model_config = ConfigDict(extra="ignore")

    model: str = ""
    system_prompt: str = ""
    messages: list[_MessageSnapshot] = []
    pending_uploads: list[_AttachmentSnapshot] = []
    pending_inlines: list[_AttachmentSnapshot] = []


class StoreSnapshot(BaseModel):
    """Whole-store snapshot used for the state file and for export/import."""

    model_config = ConfigDict(extra="ignore")

    version: int = SNAPSHOT_VERSION
    provider: Provider = Provider.OPENAI
    profiles: dict[Provider, ProfileSnapshot] = {}


class ConversationStore:
    """Hold one ``ConversationProfile`` per provider and the active selection.

    Every mutation except ``set_credential`` persists the credential-free
    snapshot through the optional ``StatePersistence``.
    """

    def __init__(
        self,
        persistence: StatePersistence | None = None,
        active: Provider = Provider.OPENAI,
    ) -> None:
        self.persistence = persistence
        self._active = Provider(active)
        self._profiles: dict[Provider, ConversationProfile] = {
            provider: ConversationProfile() for provider in Provider
        }

    @property
    def active(self) -> Provider:
        return self._active

    def set_active(self, provider: Provider | str) -> None:
        """Switch providers; the inactive profile keeps all of its state."""
        self._active = Provider(provider)
        self._persist()

    def profile(self, provider: Provider | None = None) -> ConversationProfile:
        return self._profiles[provider or self._active]

    def messages(self, provider: Provider | None = None) -> tuple[Message, ...]:
        """Return an immutable view of a provider's message log."""
        return tuple(self.profile(provider).messages)

    def set_model(self, provider: Provider, model: str) -> None:
        self._profiles[provider].model = model.strip()
        self._persist()

    def set_system_prompt(self, provider: Provider, prompt: str) -> None:
        self._profiles[provider].system_prompt = prompt
        self._persist()

    def set_credential(self, provider: Provider, credential: str) -> None:
        """Update the in-memory credential only; never written to disk."""
        self._profiles[provider].credential = credential.strip()

    def append_message(self, provider: Provider, message: Message) -> None:
        self._profiles[provider].messages.append(message)
        self._persist()

    def append_error(self, provider: Provider, text: str) -> Message:
        message = Message(Role.ERROR, text or "Request failed")
        self.append_message(provider, message)
        return message

    def enqueue_attachment(self, provider: Provider, ref: AttachmentRef) -> None:
        profile = self._profiles[provider]
        if ref.is_uploaded:
            profile.pending_uploads.append(ref)
        else:
            profile.pending_inlines.append(ref)
        self._persist()

    def commit_user_turn(self, provider: Provider, text: str) -> Message:
        """Move the whole pending queue onto a new user message in one step.

        Contains no suspension point, so no other coroutine can observe the
        queue cleared without the message appended.
        """
        profile = self._profiles[provider]
        snapshot = tuple(profile.pending)
        message = Message(Role.USER, text, snapshot)
        profile.pending_uploads = []
        profile.pending_inlines = []
        profile.messages.append(message)
        self._persist()
        return message

    def clear_messages(self, provider: Provider) -> None:
        """Start a fresh conversation for one provider, keeping its settings."""
        profile = self._profiles[provider]
        profile.messages = []
        profile.pending_uploads = []
        profile.pending_inlines = []
        self._persist()

    def clear_all(self) -> None:
        """Reset every field of every profile, credentials included."""
        self._profiles = {provider: ConversationProfile() for provider in Provider}
        self._persist()

    def export_snapshot(self) -> dict[str, Any]:
        """Return a JSON-ready snapshot of every provider, without credentials."""
        return {
            "version": SNAPSHOT_VERSION,
            "provider": self._active.value,
            "profiles": {
                provider.value: profile.to_dict()
                for provider, profile in self._profiles.items()
            },
        }

    def import_snapshot(self, data: Any) -> None:
        """Merge a snapshot over current state.

        The snapshot is validated in full before anything changes. For each
        provider present, only the profile fields present in the snapshot are
        replaced; absent providers and fields are left untouched. Credentials
        are never read from a snapshot.
        """
        if not isinstance(data, dict):
            raise ImportParseError("Import failed: snapshot must be a JSON object")
        try:
            snapshot = StoreSnapshot.model_validate(data)
        except ValidationError as exc:
            raise ImportParseError(f"Import failed: {exc.error_count()} invalid field(s)") from exc

        for provider, incoming in snapshot.profiles.items():
            profile = self._profiles[provider]
            present = incoming.model_fields_set
            if "model" in present:
                profile.model = incoming.model.strip()
            if "system_prompt" in present:
                profile.system_prompt = incoming.system_prompt
            if "messages" in present:
                profile.messages = [item.to_message() for item in incoming.messages]
            if "pending_uploads" in present:
                profile.pending_uploads = [item.to_ref() for item in incoming.pending_uploads]
            if "pending_inlines" in present:
                profile.pending_inlines = [item.to_ref() for item in incoming.pending_inlines]
        if "provider" in snapshot.model_fields_set:
            self._active = snapshot.provider
        LOGGER.info(
            "store.imported",
            extra={
                "event": "store.imported",
                "providers": sorted(p.value for p in snapshot.profiles),
            },
        )
        self._persist()

    def load(self) -> bool:
        """Restore from persistence at startup; malformed state is ignored."""
        if self.persistence is None:
            return False
        payload = self.persistence.load()
        if payload is None:
            return False
        try:
            self.import_snapshot(payload)
        except ImportParseError:
            LOGGER.debug(
                "store.load.ignored",
                extra={"event": "store.load.ignored"},
            )
            return False
        return True

    def _persist(self) -> None:
        if self.persistence is not None:
            self.persistence.save(self.export_snapshot())
