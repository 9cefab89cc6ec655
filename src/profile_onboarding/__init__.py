"""Profile Onboarding.

Conversational state machine that turns a business URL or a short interview
into a merged, confidence-scored business profile ready for site generation.
"""

__version__ = "0.1.0"

from profile_onboarding.domain import ChatbotResponse, ChatbotState, ConversationState
from profile_onboarding.graph import build_onboarding_graph
from profile_onboarding.orchestrator import ConversationOrchestrator

__all__ = [
    "ConversationOrchestrator",
    "build_onboarding_graph",
    "ChatbotState",
    "ChatbotResponse",
    "ConversationState",
]
