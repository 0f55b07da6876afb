"""Tests for the modal dialog base."""

from __future__ import annotations

import unittest

try:
    from ai_suite.screens import DialogScreen
except ModuleNotFoundError:
    DialogScreen = None  # type: ignore[assignment,misc]


@unittest.skipIf(DialogScreen is None, "textual is not installed")
class DialogScreenTests(unittest.TestCase):
    def test_base_body_is_empty(self) -> None:
        screen = DialogScreen("Title only")
        self.assertEqual(list(screen.body()), [])
        self.assertEqual(screen.dialog_title, "Title only")

    def test_subclass_without_body_only_sets_hint(self) -> None:
        class NoticeScreen(DialogScreen):
            hint = "Esc to close"

        screen = NoticeScreen("Notice")
        self.assertEqual(list(screen.body()), [])
        self.assertEqual(screen.hint, "Esc to close")


if __name__ == "__main__":
    unittest.main()
