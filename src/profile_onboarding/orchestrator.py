"""ConversationOrchestrator: the single entry point callers use.

Usage::

    orchestrator = ConversationOrchestrator(extractor=my_extractor)
    response = orchestrator.process_turn("https://acmebakery.com")
    # persist response.state, show response.message
    response = orchestrator.process_turn("yes", response.state)

The orchestrator keeps no per-conversation data.  Each call reads one
immutable ``ChatbotState`` and returns a ``ChatbotResponse`` whose ``state``
is the successor, so any number of conversations can share one instance as
long as each state is owned by one caller at a time.
"""

from __future__ import annotations

import logging
from typing import Any

from profile_onboarding.domain.events import DomainEvent, TurnProcessed
from profile_onboarding.domain.values import ChatbotResponse, ChatbotState
from profile_onboarding.graph.graph import build_onboarding_graph
from profile_onboarding.graph.nodes import Extractor, Summarizer
from profile_onboarding.graph.prompts import GREETING
from profile_onboarding.infrastructure.config import ConversationConfig
from profile_onboarding.infrastructure.event_bus import EventBus

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Sorry, something went wrong on my side. Please try again."


class ConversationOrchestrator:
    """Drive the onboarding conversation one utterance at a time.

    Parameters
    ----------
    extractor:
        Extraction collaborator (``BaseExtractor`` or any
        ``url -> ExtractionResult`` callable).
    config:
        Conversation settings; defaults to ``ConversationConfig()``.
    event_bus:
        Optional bus on which the events of every turn are published.
    summarizer:
        Optional replacement for ``generate_extraction_summary``.
    """

    def __init__(
        self,
        extractor: Extractor,
        config: ConversationConfig | None = None,
        event_bus: EventBus | None = None,
        summarizer: Summarizer | None = None,
    ) -> None:
        self.config = config or ConversationConfig()
        self.event_bus = event_bus
        self._graph = build_onboarding_graph(extractor, self.config, summarizer)

    @property
    def graph(self) -> Any:
        """The compiled per-turn ``StateGraph``."""
        return self._graph

    def greet(self) -> ChatbotResponse:
        """Opening message and a fresh state for a new conversation."""
        return ChatbotResponse(success=True, message=GREETING, state=ChatbotState.initial())

    def process_turn(
        self,
        utterance: str,
        state: ChatbotState | None = None,
        conversation_id: str = "",
    ) -> ChatbotResponse:
        """Process one user utterance.

        Never raises: unexpected failures are logged and reported as
        ``success=False`` together with the unchanged input state, so the
        caller can always resume.

        Parameters
        ----------
        utterance:
            Raw user text.
        state:
            Snapshot returned by the previous turn; ``None`` starts a new
            conversation.
        conversation_id:
            Stamped as ``source_id`` on the events of this turn.
        """
        current = state if state is not None else ChatbotState.initial()
        events: list[DomainEvent] = []
        try:
            result = self._graph.invoke(
                {
                    "chatbot_state": current,
                    "utterance": utterance or "",
                    "source_id": conversation_id,
                    "events": [],
                }
            )
            response: ChatbotResponse = result["response"]
            events.extend(result.get("events", ()))
        except Exception as exc:
            logger.exception(
                "process_turn failed in state %s", current.conversation_state.value
            )
            response = ChatbotResponse(
                success=False,
                message=INTERNAL_ERROR_MESSAGE,
                state=current,
                error=str(exc) or type(exc).__name__,
            )

        next_state = response.state if response.state is not None else current
        logger.info(
            "Turn processed: %s -> %s (success=%s)",
            current.conversation_state.value,
            next_state.conversation_state.value,
            response.success,
        )
        events.append(
            TurnProcessed(
                source_id=conversation_id,
                previous_state=current.conversation_state,
                next_state=next_state.conversation_state,
                success=response.success,
            )
        )
        if self.event_bus is not None:
            self.event_bus.publish_many(events)
        return response
