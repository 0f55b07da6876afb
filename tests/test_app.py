"""Tests for the Textual shell driving a fake transport."""

from __future__ import annotations

from copy import deepcopy
import logging
import unittest

from ai_suite.config import DEFAULT_CONFIG
from ai_suite.models import Provider, Role
from ai_suite.orchestrator import SendOrchestrator
from ai_suite.providers import ChatAdapter, MessagesAdapter
from ai_suite.store import ConversationStore

try:
    from textual.widgets import Input

    from ai_suite.app import AiSuiteApp, split_paths
    from ai_suite.widgets import ConversationView
except ModuleNotFoundError:
    AiSuiteApp = None  # type: ignore[assignment,misc]


class FakeClient:
    def __init__(self) -> None:
        self.calls = 0

    async def complete(self, adapter, body: dict, credential: str) -> str:  # noqa: ANN001
        self.calls += 1
        return "pong"

    async def upload(self, adapter, name: str, data: bytes, credential: str) -> str:  # noqa: ANN001
        return "file_1"

    async def aclose(self) -> None:
        return None


@unittest.skipIf(AiSuiteApp is None, "textual is not installed")
class SplitPathsTests(unittest.TestCase):
    def test_quotes_keep_spaces(self) -> None:
        self.assertEqual(
            split_paths('a.pdf "my notes.docx"'), ["a.pdf", "my notes.docx"]
        )

    def test_unbalanced_quote_falls_back_to_whole_string(self) -> None:
        self.assertEqual(split_paths('"broken.pdf'), ['"broken.pdf'])
        self.assertEqual(split_paths("   "), [])


@unittest.skipIf(AiSuiteApp is None, "textual is not installed")
class AppFlowTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)

    def _app(self) -> tuple[AiSuiteApp, FakeClient]:  # type: ignore[valid-type]
        config = deepcopy(DEFAULT_CONFIG)
        config["persistence"]["enabled"] = False
        client = FakeClient()
        adapters = {Provider.OPENAI: ChatAdapter(), Provider.ANTHROPIC: MessagesAdapter()}
        orchestrator = SendOrchestrator(ConversationStore(), client, adapters)  # type: ignore[arg-type]
        return AiSuiteApp(config=config, orchestrator=orchestrator), client  # type: ignore[misc]

    async def test_send_renders_user_and_assistant_turns(self) -> None:
        app, client = self._app()
        app.store.set_model(Provider.OPENAI, "gpt-4o-mini")
        app.store.set_credential(Provider.OPENAI, "sk")
        async with app.run_test() as pilot:
            app.query_one("#message_input", Input).value = "ping"
            await app.action_send_message()
            await app.workers.wait_for_complete()
            await pilot.pause()

            roles = [message.role for message in app.store.messages()]
            self.assertEqual(roles, [Role.USER, Role.ASSISTANT])
            self.assertEqual(client.calls, 1)
            view = app.query_one("#conversation", ConversationView)
            self.assertEqual(len(view.children), 2)
            self.assertEqual(app.query_one("#message_input", Input).value, "")

    async def test_missing_key_shows_error_without_call(self) -> None:
        app, client = self._app()
        app.store.set_model(Provider.OPENAI, "gpt-4o-mini")
        async with app.run_test() as pilot:
            app.query_one("#message_input", Input).value = "ping"
            await app.action_send_message()
            await app.workers.wait_for_complete()
            await pilot.pause()

            self.assertEqual(client.calls, 0)
            self.assertEqual(app.store.messages()[-1].content, "Missing API key.")

    async def test_clear_chat_action(self) -> None:
        app, _ = self._app()
        app.store.commit_user_turn(Provider.OPENAI, "old")
        async with app.run_test() as pilot:
            await app.action_clear_chat()
            await pilot.pause()
            self.assertEqual(app.store.messages(), ())


if __name__ == "__main__":
    unittest.main()
