"""Per-provider send state machine."""

from __future__ import annotations

from enum import Enum
import logging

from .models import Provider

LOGGER = logging.getLogger(__name__)


class ConversationState(str, Enum):
    """Lifecycle of one provider's send cycle."""

    IDLE = "IDLE"
    SENDING = "SENDING"


class StateManager:
    """Track IDLE/SENDING per provider.

    Transitions are plain synchronous check-and-set; on a single event loop no
    other coroutine can run between the check and the set.
    """

    def __init__(self) -> None:
        self._states: dict[Provider, ConversationState] = {
            provider: ConversationState.IDLE for provider in Provider
        }

    def get_state(self, provider: Provider) -> ConversationState:
        return self._states[provider]

    def transition_if(
        self,
        provider: Provider,
        expected_state: ConversationState,
        new_state: ConversationState,
    ) -> bool:
        """Transition only when the current state matches ``expected_state``."""
        if self._states[provider] != expected_state:
            return False
        self._states[provider] = new_state
        LOGGER.info(
            "app.state.transition",
            extra={
                "event": "app.state.transition",
                "provider": provider.value,
                "from_state": expected_state.value,
                "to_state": new_state.value,
            },
        )
        return True

    def can_send_message(self, provider: Provider) -> bool:
        return self._states[provider] == ConversationState.IDLE
