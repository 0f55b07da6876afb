"""Provider adapters keyed by provider identity."""

from __future__ import annotations

from typing import Any

from ..models import Provider
from .base import ProviderAdapter, inline_text
from .chat import ChatAdapter
from .messages import MessagesAdapter

ADAPTERS: dict[Provider, type[ProviderAdapter]] = {
    Provider.OPENAI: ChatAdapter,
    Provider.ANTHROPIC: MessagesAdapter,
}

__all__ = [
    "ADAPTERS",
    "ChatAdapter",
    "MessagesAdapter",
    "ProviderAdapter",
    "build_adapters",
    "get_adapter",
    "inline_text",
]


def get_adapter(provider: Provider | str, **kwargs: Any) -> ProviderAdapter:
    """Instantiate the adapter for ``provider``."""
    return ADAPTERS[Provider(provider)](**kwargs)


def build_adapters(config: dict[str, Any]) -> dict[Provider, ProviderAdapter]:
    """Build one adapter per provider from the validated config mapping."""
    adapters: dict[Provider, ProviderAdapter] = {}
    for provider in Provider:
        section = config.get(provider.value, {})
        adapters[provider] = get_adapter(
            provider,
            base_url=section.get("base_url") or None,
            max_tokens=int(section.get("max_tokens", 1024)),
            timeout=float(section.get("timeout", 120)),
        )
        if section.get("default_model"):
            adapters[provider].default_model = section["default_model"]
    return adapters
