"""Top-level package for ai-suite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import AiSuiteApp
    from .client import ProviderClient
    from .config import ensure_config_dir, load_config
    from .exceptions import (
        AiSuiteError,
        ConfigValidationError,
        ProviderError,
        UploadError,
    )
    from .orchestrator import SendOrchestrator
    from .persistence import StatePersistence
    from .state import ConversationState, StateManager
    from .store import ConversationStore

__all__ = [
    "AiSuiteApp",
    "AiSuiteError",
    "ConfigValidationError",
    "ConversationState",
    "ConversationStore",
    "ProviderClient",
    "ProviderError",
    "SendOrchestrator",
    "StateManager",
    "StatePersistence",
    "UploadError",
    "ensure_config_dir",
    "load_config",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep the Textual UI optional at import time."""
    if name in {"ensure_config_dir", "load_config"}:
        from .config import ensure_config_dir, load_config

        return {"ensure_config_dir": ensure_config_dir, "load_config": load_config}[name]
    if name in {"AiSuiteError", "ConfigValidationError", "ProviderError", "UploadError"}:
        from . import exceptions

        return getattr(exceptions, name)
    if name in {"ConversationState", "StateManager"}:
        from .state import ConversationState, StateManager

        return {"ConversationState": ConversationState, "StateManager": StateManager}[name]
    if name == "ConversationStore":
        from .store import ConversationStore

        return ConversationStore
    if name == "StatePersistence":
        from .persistence import StatePersistence

        return StatePersistence
    if name == "ProviderClient":
        from .client import ProviderClient

        return ProviderClient
    if name == "SendOrchestrator":
        from .orchestrator import SendOrchestrator

        return SendOrchestrator
    if name == "AiSuiteApp":
        from .app import AiSuiteApp

        return AiSuiteApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
