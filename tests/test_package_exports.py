"""Tests for top-level package lazy exports."""

from __future__ import annotations

import unittest

import ai_suite


class PackageExportTests(unittest.TestCase):
    """Ensure __getattr__ and exported symbols behave as expected."""

    def test_lazy_exports_resolve_known_symbols(self) -> None:
        self.assertTrue(callable(ai_suite.load_config))
        self.assertTrue(callable(ai_suite.ensure_config_dir))
        self.assertIsNotNone(ai_suite.AiSuiteError)
        self.assertIsNotNone(ai_suite.ProviderError)
        self.assertIsNotNone(ai_suite.UploadError)
        self.assertIsNotNone(ai_suite.ConfigValidationError)
        self.assertIsNotNone(ai_suite.StateManager)
        self.assertIsNotNone(ai_suite.ConversationState)
        self.assertIsNotNone(ai_suite.ConversationStore)
        self.assertIsNotNone(ai_suite.StatePersistence)
        self.assertIsNotNone(ai_suite.ProviderClient)
        self.assertIsNotNone(ai_suite.SendOrchestrator)

    def test_unknown_symbol_raises_attribute_error(self) -> None:
        with self.assertRaises(AttributeError):
            getattr(ai_suite, "THIS_DOES_NOT_EXIST")


if __name__ == "__main__":
    unittest.main()
