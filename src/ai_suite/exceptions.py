"""Domain exception hierarchy for the AI suite."""

from __future__ import annotations


class AiSuiteError(RuntimeError):
    """Base class for all domain-level errors."""


class MissingCredentialError(AiSuiteError):
    """Raised when a provider call needs an API key that was not supplied."""


class MissingModelError(AiSuiteError):
    """Raised when no model name is configured for the active provider."""


class DisallowedModelError(AiSuiteError):
    """Raised when a provider or model is outside the one-shot allowlist."""


class ExtractionError(AiSuiteError):
    """Raised when a locally extractable document cannot be parsed."""


class FileTooLargeError(AiSuiteError):
    """Raised when a file exceeds the configured size cap."""


class NoPromptError(AiSuiteError):
    """Raised when neither an argument nor stdin supplied a prompt."""


class ImportParseError(AiSuiteError):
    """Raised when an imported snapshot is not valid JSON or has the wrong shape."""


class ConfigValidationError(AiSuiteError):
    """Raised when configuration cannot be validated safely."""


class ProviderConnectionError(AiSuiteError):
    """Raised when the provider host cannot be reached."""


class EmptyReplyError(AiSuiteError):
    """Raised when a successful response carries no text content."""


class _StatusBodyError(AiSuiteError):
    """Error carrying an HTTP status and the raw response body."""

    label = "Request"

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"{self.label} error: {status} {body}".rstrip())


class ProviderError(_StatusBodyError):
    """Raised when the provider answers with a non-success status."""

    label = "Provider"


class UploadError(_StatusBodyError):
    """Raised when a file upload fails or returns an unusable body."""

    label = "Upload"
