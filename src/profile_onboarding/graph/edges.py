"""Conditional edge functions for the onboarding LangGraph.

Dispatch is a function of the incoming ``conversation_state`` only, except
that a URL found in the utterance diverts the initial state and the
interview into the URL-handling nodes.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from profile_onboarding.domain.enums import ConversationState

logger = logging.getLogger(__name__)

HandlerNode = Literal[
    "awaiting_url_or_name",
    "extracting_from_url",
    "confirming_extracted_profile",
    "interviewing_user",
    "enriching_with_url",
    "ready_to_generate",
]

_STATE_HANDLERS: dict[ConversationState, HandlerNode] = {
    ConversationState.AWAITING_URL_OR_NAME: "awaiting_url_or_name",
    ConversationState.EXTRACTING_FROM_URL: "extracting_from_url",
    ConversationState.CONFIRMING_EXTRACTED_PROFILE: "confirming_extracted_profile",
    ConversationState.INTERVIEWING_USER: "interviewing_user",
    ConversationState.ENRICHING_WITH_URL: "enriching_with_url",
    ConversationState.READY_TO_GENERATE: "ready_to_generate",
}


def route_turn(state: dict[str, Any]) -> HandlerNode:
    """Pick the handler node for this turn.

    A detected URL sends ``AWAITING_URL_OR_NAME`` to the initial extraction
    and ``INTERVIEWING_USER`` to enrichment; every other state goes to its
    own handler regardless of the utterance.
    """
    conversation_state = state["chatbot_state"].conversation_state
    has_url = bool(state.get("detected_url"))

    if has_url and conversation_state is ConversationState.AWAITING_URL_OR_NAME:
        target: HandlerNode = "extracting_from_url"
    elif has_url and conversation_state is ConversationState.INTERVIEWING_USER:
        target = "enriching_with_url"
    else:
        target = _STATE_HANDLERS[conversation_state]

    logger.debug("route_turn: %s -> %s", conversation_state.value, target)
    return target
