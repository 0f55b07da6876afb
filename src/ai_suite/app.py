"""Textual shell around the send orchestrator."""

from __future__ import annotations

import logging
import shlex
import sys
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header, Input, Static, Tab, Tabs

from .attachments import AttachmentResolver
from .client import ProviderClient
from .config import load_config
from .logging_utils import configure_logging
from .models import Message, Provider
from .orchestrator import SendOrchestrator, SendOutcome
from .persistence import StatePersistence
from .providers import build_adapters
from .screens import SimplePickerScreen, TextPromptScreen
from .store import ConversationStore
from .widgets import ConversationView, InputBox

LOGGER = logging.getLogger(__name__)

_OUTCOME_STATUS: dict[SendOutcome, str] = {
    SendOutcome.EMPTY: "Cannot send an empty message.",
    SendOutcome.BUSY: "Busy. Wait for current request to finish.",
    SendOutcome.CREDENTIAL_UPDATED: "API key updated.",
    SendOutcome.INVALID: "Check API key and model.",
    SendOutcome.REPLIED: "Ready",
    SendOutcome.FAILED: "Request failed.",
}


def split_paths(raw: str) -> list[str]:
    """Split a typed selection into paths; quotes keep spaces together."""
    try:
        return [part for part in shlex.split(raw) if part]
    except ValueError:
        return [raw.strip()] if raw.strip() else []


def build_orchestrator(config: dict[str, Any]) -> SendOrchestrator:
    """Wire store, persistence, transport and adapters from config."""
    persistence = StatePersistence(
        enabled=bool(config["persistence"]["enabled"]),
        state_path=str(config["persistence"]["state_path"]),
    )
    store = ConversationStore(persistence=persistence)
    store.load()
    adapters = build_adapters(config)
    client = ProviderClient()
    resolver = AttachmentResolver(
        client,
        adapters,
        max_upload_bytes=int(config["attachments"]["max_upload_bytes"]),
    )
    return SendOrchestrator(store, client, adapters, resolver, persistence)


class AiSuiteApp(App[None]):
    """Two-provider chat with per-provider model, system prompt and key."""

    CSS = """
    #settings_row, #actions_row {
        height: auto;
    }
    #model_input {
        width: 2fr;
    }
    #system_input {
        width: 3fr;
    }
    #key_input {
        width: 2fr;
    }
    #pending_label {
        height: auto;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+n", "clear_chat", "Clear chat"),
        Binding("ctrl+e", "export_snapshot", "Export"),
        Binding("ctrl+o", "import_snapshot", "Import"),
        Binding("ctrl+t", "pick_model", "Model"),
        Binding("ctrl+a", "attach_files", "Attach"),
    ]

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        orchestrator: SendOrchestrator | None = None,
    ) -> None:
        super().__init__()
        self.config = config or load_config()
        configure_logging(self.config["logging"])
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )
        self.title = str(self.config["app"]["title"])
        self.orchestrator = orchestrator or build_orchestrator(self.config)
        self.store = self.orchestrator.store

    def compose(self) -> ComposeResult:
        yield Header()
        yield Tabs(
            *(Tab(provider.label, id=provider.value) for provider in Provider),
            active=self.store.active.value,
            id="provider_tabs",
        )
        with Horizontal(id="settings_row"):
            yield Input(placeholder="Model", id="model_input")
            yield Button("Default", id="default_model_button")
            yield Input(placeholder="System prompt", id="system_input")
            yield Input(placeholder="API key", password=True, id="key_input")
            yield Button("Save key", id="save_key_button")
            yield Button("Clear key", id="clear_key_button")
        with Horizontal(id="actions_row"):
            yield Button("Clear chat", id="clear_chat_button")
            yield Button("Export", id="export_button")
            yield Button("Import", id="import_button")
            yield Button("Markdown", id="markdown_button")
            yield Button("Clear all", id="clear_all_button", variant="error")
        yield ConversationView(id="conversation")
        yield Static("", id="pending_label")
        yield InputBox()
        yield Footer()

    async def on_mount(self) -> None:
        await self._refresh_view()
        self.query_one("#message_input", Input).focus()

    async def on_unmount(self) -> None:
        await self.orchestrator.client.aclose()

    async def _refresh_view(self) -> None:
        """Mirror the active profile into the fields and the conversation."""
        profile = self.store.profile()
        with self.prevent(Input.Changed):
            self.query_one("#model_input", Input).value = profile.model
            self.query_one("#system_input", Input).value = profile.system_prompt
            self.query_one("#key_input", Input).value = profile.credential
        await self.query_one("#conversation", ConversationView).show_messages(
            self.store.messages()
        )
        self._update_pending_label()

    def _update_pending_label(self) -> None:
        pending = self.store.profile().pending
        label = (
            "Pending: " + ", ".join(ref.name for ref in pending) if pending else ""
        )
        self.query_one("#pending_label", Static).update(label)

    async def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if event.tab.id is None:
            return
        self.store.set_active(Provider(event.tab.id))
        await self._refresh_view()

    def on_input_changed(self, event: Input.Changed) -> None:
        provider = self.store.active
        if event.input.id == "model_input":
            self.store.set_model(provider, event.value)
        elif event.input.id == "system_input":
            self.store.set_system_prompt(provider, event.value)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message_input":
            await self.action_send_message()
        elif event.input.id == "key_input":
            self.store.set_credential(self.store.active, event.value)
            self.sub_title = "API key saved for this session."

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        provider = self.store.active
        if button_id == "send_button":
            await self.action_send_message()
        elif button_id == "file_button":
            await self.action_attach_files()
        elif button_id == "default_model_button":
            self.orchestrator.apply_default_model(provider)
            await self._refresh_view()
        elif button_id == "save_key_button":
            self.store.set_credential(
                provider, self.query_one("#key_input", Input).value
            )
            self.sub_title = "API key saved for this session."
        elif button_id == "clear_key_button":
            self.store.set_credential(provider, "")
            await self._refresh_view()
        elif button_id == "clear_chat_button":
            await self.action_clear_chat()
        elif button_id == "export_button":
            await self.action_export_snapshot()
        elif button_id == "import_button":
            await self.action_import_snapshot()
        elif button_id == "markdown_button":
            self._prompt_path("Export transcript to", "ai-suite.md", self._export_markdown)
        elif button_id == "clear_all_button":
            if not self.orchestrator.clear_all():
                self.sub_title = _OUTCOME_STATUS[SendOutcome.BUSY]
                return
            await self._refresh_view()

    async def action_send_message(self) -> None:
        input_widget = self.query_one("#message_input", Input)
        text = input_widget.value
        if self.orchestrator.is_sending():
            self.sub_title = _OUTCOME_STATUS[SendOutcome.BUSY]
            return
        input_widget.value = ""
        self.run_worker(self._send(text), group="send")

    async def _send(self, text: str) -> None:
        provider = self.store.active
        send_button = self.query_one("#send_button", Button)
        send_button.disabled = True
        self.sub_title = "Sending message..."

        def _committed(_message: Message) -> None:
            if self.store.active is provider:
                self.call_later(self._refresh_view)

        try:
            outcome = await self.orchestrator.submit(text, on_committed=_committed)
        finally:
            send_button.disabled = False
        self.sub_title = _OUTCOME_STATUS[outcome]
        if self.store.active is provider:
            await self._refresh_view()

    async def action_clear_chat(self) -> None:
        if not self.orchestrator.clear_chat():
            self.sub_title = _OUTCOME_STATUS[SendOutcome.BUSY]
            return
        await self._refresh_view()

    async def action_attach_files(self) -> None:
        self._prompt_path("Attach file(s)", "path/to/file.pdf other.docx", self._attach)

    async def _attach(self, raw: str) -> None:
        paths = split_paths(raw)
        if not paths:
            return
        self.sub_title = "Attaching..."
        count = await self.orchestrator.attach(paths)
        self.sub_title = f"Attached {count} of {len(paths)} file(s)."
        await self._refresh_view()

    async def action_export_snapshot(self) -> None:
        self._prompt_path("Export conversations to", "ai-suite.json", self._export)

    async def _export(self, raw: str) -> None:
        try:
            target = self.orchestrator.export_file(raw)
        except OSError as exc:
            self.sub_title = f"Export failed: {exc}"
            return
        self.sub_title = f"Exported to {target}"

    async def _export_markdown(self, raw: str) -> None:
        try:
            target = self.orchestrator.export_markdown(raw)
        except OSError as exc:
            self.sub_title = f"Export failed: {exc}"
            return
        self.sub_title = f"Transcript written to {target}"

    async def action_import_snapshot(self) -> None:
        self._prompt_path("Import conversations from", "ai-suite.json", self._import)

    async def _import(self, raw: str) -> None:
        if self.orchestrator.is_busy():
            self.sub_title = _OUTCOME_STATUS[SendOutcome.BUSY]
            return
        imported = self.orchestrator.import_file(raw)
        self.sub_title = "Imported." if imported else "Import failed."
        self.query_one("#provider_tabs", Tabs).active = self.store.active.value
        await self._refresh_view()

    async def action_pick_model(self) -> None:
        adapter = self.orchestrator.adapter()
        options = list(adapter.model_suggestions)

        async def _apply(selected: str | None) -> None:
            if selected:
                self.store.set_model(self.store.active, selected)
                await self._refresh_view()

        self.push_screen(SimplePickerScreen("Suggested models", options), _apply)

    def _prompt_path(self, title: str, placeholder: str, handler: Any) -> None:  # noqa: ANN401
        async def _dismissed(value: str | None) -> None:
            if value:
                await handler(value)

        self.push_screen(TextPromptScreen(title, placeholder=placeholder), _dismissed)
