"""Drive one interactive send cycle against the active provider."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum
import logging
from pathlib import Path

from .attachments import AttachmentResolver
from .client import ProviderClient
from .commands import parse_credential_directive
from .exceptions import AiSuiteError, ImportParseError
from .models import AttachmentRef, Message, Provider, Role
from .persistence import StatePersistence
from .providers.base import ProviderAdapter
from .state import ConversationState, StateManager
from .store import ConversationStore

LOGGER = logging.getLogger(__name__)


class SendOutcome(str, Enum):
    """What a call to ``SendOrchestrator.submit`` did."""

    EMPTY = "empty"
    BUSY = "busy"
    CREDENTIAL_UPDATED = "credential_updated"
    INVALID = "invalid"
    REPLIED = "replied"
    FAILED = "failed"


class SendOrchestrator:
    """Validate, dispatch and record send cycles; failures become error messages.

    Nothing raised by the adapters or the transport escapes ``submit``,
    ``attach`` or ``import_file``; each provider always returns to IDLE.
    """

    def __init__(
        self,
        store: ConversationStore,
        client: ProviderClient,
        adapters: Mapping[Provider, ProviderAdapter],
        resolver: AttachmentResolver | None = None,
        persistence: StatePersistence | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.adapters = adapters
        self.resolver = resolver or AttachmentResolver(client, adapters)
        self.persistence = persistence or StatePersistence(
            enabled=False, state_path="~/.local/state/ai-suite/state.json"
        )
        self.state = StateManager()

    def adapter(self, provider: Provider | None = None) -> ProviderAdapter:
        return self.adapters[provider or self.store.active]

    def is_sending(self, provider: Provider | None = None) -> bool:
        return not self.state.can_send_message(provider or self.store.active)

    def apply_default_model(self, provider: Provider | None = None) -> str:
        """Set the adapter's suggested default model on a profile."""
        target = provider or self.store.active
        model = self.adapters[target].default_model
        self.store.set_model(target, model)
        return model

    def is_busy(self) -> bool:
        """Return True while any provider has a send in flight."""
        return any(not self.state.can_send_message(provider) for provider in Provider)

    def _reject_busy(self, action: str, provider: Provider | None = None) -> None:
        LOGGER.info(
            "app.action.rejected_busy",
            extra={
                "event": "app.action.rejected_busy",
                "action": action,
                "provider": provider.value if provider else "all",
            },
        )

    async def submit(
        self,
        text: str,
        on_committed: Callable[[Message], None] | None = None,
    ) -> SendOutcome:
        """Run one send cycle for the active provider.

        ``on_committed`` is called with the user turn once it is in the log,
        before the request goes out.
        """
        provider = self.store.active
        user_text = text.strip()
        if not user_text:
            return SendOutcome.EMPTY

        if self.state.can_send_message(provider):
            directive = parse_credential_directive(user_text)
            if directive is not None:
                self.store.set_credential(provider, directive.credential)
                return SendOutcome.CREDENTIAL_UPDATED

        if not self.state.transition_if(
            provider, ConversationState.IDLE, ConversationState.SENDING
        ):
            LOGGER.info(
                "app.send.rejected_busy",
                extra={"event": "app.send.rejected_busy", "provider": provider.value},
            )
            return SendOutcome.BUSY

        try:
            profile = self.store.profile(provider)
            if not profile.credential:
                self.store.append_error(provider, "Missing API key.")
                return SendOutcome.INVALID
            if not profile.model.strip():
                self.store.append_error(provider, "Missing model name.")
                return SendOutcome.INVALID

            user_turn = self.store.commit_user_turn(provider, user_text)
            if on_committed is not None:
                on_committed(user_turn)
            adapter = self.adapters[provider]
            try:
                body = adapter.build_request(profile)
                reply = await self.client.complete(adapter, body, profile.credential)
            except AiSuiteError as exc:
                self._record_failure(provider, exc)
                return SendOutcome.FAILED
            except Exception as exc:  # noqa: BLE001 - nothing may escape a send cycle.
                LOGGER.exception(
                    "app.send.unexpected",
                    extra={"event": "app.send.unexpected", "provider": provider.value},
                )
                self._record_failure(provider, exc)
                return SendOutcome.FAILED

            self.store.append_message(provider, Message(Role.ASSISTANT, reply))
            return SendOutcome.REPLIED
        finally:
            self.state.transition_if(
                provider, ConversationState.SENDING, ConversationState.IDLE
            )

    def _record_failure(self, provider: Provider, exc: Exception) -> None:
        LOGGER.warning(
            "app.send.failed",
            extra={
                "event": "app.send.failed",
                "provider": provider.value,
                "error_type": type(exc).__name__,
            },
        )
        self.store.append_error(provider, str(exc) or "Request failed")

    async def attach(self, paths: Iterable[str | Path]) -> int:
        """Resolve and enqueue files for the active provider, in order.

        Returns how many files were enqueued; a failure stops the batch and is
        reported as an error message.
        """
        provider = self.store.active
        credential = self.store.profile(provider).credential
        enqueued = 0

        def _enqueue(ref: AttachmentRef) -> None:
            nonlocal enqueued
            self.store.enqueue_attachment(provider, ref)
            enqueued += 1

        try:
            await self.resolver.resolve_many(paths, provider, credential, _enqueue)
        except AiSuiteError as exc:
            self._record_failure(provider, exc)
        return enqueued

    def export_file(self, path: str | Path) -> Path:
        return self.persistence.write_export(path, self.store.export_snapshot())

    def clear_chat(self, provider: Provider | None = None) -> bool:
        """Clear one provider's log and pending queue unless it is sending."""
        target = provider or self.store.active
        if self.is_sending(target):
            self._reject_busy("clear_chat", target)
            return False
        self.store.clear_messages(target)
        return True

    def clear_all(self) -> bool:
        """Reset every profile; refused while any send is in flight."""
        if self.is_busy():
            self._reject_busy("clear_all")
            return False
        self.store.clear_all()
        return True

    def import_file(self, path: str | Path) -> bool:
        """Import a snapshot file; malformed input becomes an error message.

        Refused while any send is in flight, since an import replaces logs.
        """
        if self.is_busy():
            self._reject_busy("import")
            return False
        try:
            self.store.import_snapshot(self.persistence.read_import(path))
        except ImportParseError as exc:
            self.store.append_error(self.store.active, str(exc))
            return False
        return True

    def export_markdown(self, path: str | Path, provider: Provider | None = None) -> Path:
        target = provider or self.store.active
        profile = self.store.profile(target)
        return self.persistence.export_markdown(
            [message.to_dict() for message in profile.messages], profile.model, path
        )
