"""LangGraph state for one conversation turn.

``TurnState`` is the ``TypedDict`` flowing through the onboarding
``StateGraph``.  It wraps the caller's immutable ``ChatbotState`` together
with the utterance being processed; nodes never touch ``chatbot_state``
in place, they write a ``ChatbotResponse`` carrying the successor state.

Note: We intentionally do NOT use ``from __future__ import annotations`` because
LangGraph needs to resolve type hints at runtime via ``get_type_hints()``.
"""

import operator
from typing import Annotated, Any, TypedDict

from profile_onboarding.domain.values import ChatbotResponse, ChatbotState


class TurnState(TypedDict, total=False):
    """State dict for a single ``process_turn`` graph run.

    Input channels
    --------------
    chatbot_state:
        Snapshot the caller passed in.
    utterance:
        Raw user text.
    source_id:
        Conversation identifier stamped on emitted events.

    Derived channels
    ----------------
    text:
        Utterance with surrounding whitespace removed (used for stored values).
    normalized:
        ``text`` case-folded (used for every token comparison).
    detected_url:
        First URL found in the utterance, or ``None``.

    Output channels
    ---------------
    response:
        The ``ChatbotResponse`` produced by the state handler.
    events:
        Domain events emitted during the turn (append-only).
    """

    chatbot_state: ChatbotState
    utterance: str
    source_id: str

    text: str
    normalized: str
    detected_url: str | None

    response: ChatbotResponse
    events: Annotated[list[Any], operator.add]
