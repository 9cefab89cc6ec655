"""Infrastructure: configuration, event dispatch and state persistence."""

from profile_onboarding.infrastructure.config import (
    ConversationConfig,
    ExtractionConfig,
    load_config_from_json,
)
from profile_onboarding.infrastructure.event_bus import EventBus, EventStore
from profile_onboarding.infrastructure.serialization import (
    chatbot_state_from_dict,
    chatbot_state_to_dict,
    from_json,
    to_json,
    working_profile_from_dict,
    working_profile_to_dict,
)

__all__ = [
    "ConversationConfig",
    "ExtractionConfig",
    "load_config_from_json",
    "EventBus",
    "EventStore",
    "chatbot_state_to_dict",
    "chatbot_state_from_dict",
    "working_profile_to_dict",
    "working_profile_from_dict",
    "to_json",
    "from_json",
]
