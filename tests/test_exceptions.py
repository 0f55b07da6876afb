"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from ai_suite.exceptions import (
    AiSuiteError,
    ConfigValidationError,
    DisallowedModelError,
    EmptyReplyError,
    ExtractionError,
    FileTooLargeError,
    ImportParseError,
    MissingCredentialError,
    MissingModelError,
    NoPromptError,
    ProviderConnectionError,
    ProviderError,
    UploadError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        for error_type in (
            ConfigValidationError,
            DisallowedModelError,
            EmptyReplyError,
            ExtractionError,
            FileTooLargeError,
            ImportParseError,
            MissingCredentialError,
            MissingModelError,
            NoPromptError,
            ProviderConnectionError,
            ProviderError,
            UploadError,
        ):
            self.assertTrue(issubclass(error_type, AiSuiteError), error_type)

    def test_provider_error_message_carries_status_and_body(self) -> None:
        error = ProviderError(401, '{"error":"bad key"}')
        self.assertEqual(error.status, 401)
        self.assertEqual(error.body, '{"error":"bad key"}')
        self.assertEqual(str(error), 'Provider error: 401 {"error":"bad key"}')

    def test_upload_error_message_uses_upload_label(self) -> None:
        self.assertEqual(str(UploadError(413, "too big")), "Upload error: 413 too big")


if __name__ == "__main__":
    unittest.main()
