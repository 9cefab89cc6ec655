"""Shared fixtures for the profile-onboarding test suite."""

from __future__ import annotations

import pytest

from profile_onboarding.domain.enums import (
    ConfidenceLevel,
    ConversationState,
    DataSource,
    InterviewStep,
    ProfileField,
)
from profile_onboarding.domain.values import ChatbotState, ExtractedProfile, WorkingProfile
from profile_onboarding.infrastructure.event_bus import EventBus, EventStore
from profile_onboarding.orchestrator import ConversationOrchestrator
from profile_onboarding.testing import FailingExtractor, StaticExtractor

# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


@pytest.fixture
def acme_profile() -> ExtractedProfile:
    """A complete, high-confidence extraction for a bakery."""
    return ExtractedProfile(
        name="Acme Bakery",
        business_type="bakery",
        description="Family bakery baking sourdough since 1952.",
        phone="555-0100",
        city="Springfield",
        services=("Bread", "Cakes"),
        source_url="https://acmebakery.com",
        confidence=ConfidenceLevel.HIGH,
    )


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def static_extractor(acme_profile: ExtractedProfile) -> StaticExtractor:
    return StaticExtractor(acme_profile)


@pytest.fixture
def failing_extractor() -> FailingExtractor:
    return FailingExtractor("unreachable")


@pytest.fixture
def event_store() -> EventStore:
    return EventStore()


@pytest.fixture
def event_bus(event_store: EventStore) -> EventBus:
    bus = EventBus()
    bus.subscribe_all(event_store.append)
    return bus


@pytest.fixture
def orchestrator(static_extractor: StaticExtractor, event_bus: EventBus) -> ConversationOrchestrator:
    return ConversationOrchestrator(static_extractor, event_bus=event_bus)


@pytest.fixture
def failing_orchestrator(failing_extractor: FailingExtractor) -> ConversationOrchestrator:
    return ConversationOrchestrator(failing_extractor)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


@pytest.fixture
def confirming_state(acme_profile: ExtractedProfile) -> ChatbotState:
    """Freshly extracted profile waiting for name and business type."""
    return ChatbotState(
        conversation_state=ConversationState.CONFIRMING_EXTRACTED_PROFILE,
        extracted_profile=acme_profile,
        pending_confirmations=(ProfileField.NAME, ProfileField.BUSINESS_TYPE),
        current_question=ProfileField.NAME,
        url_detected="https://acmebakery.com",
        url_validated=True,
    )


@pytest.fixture
def interview_state() -> ChatbotState:
    """Interview in progress: name known, business type asked."""
    return ChatbotState(
        conversation_state=ConversationState.INTERVIEWING_USER,
        profile=WorkingProfile().with_field(
            ProfileField.NAME, "Joe's Garage", ConfidenceLevel.HIGH, DataSource.USER_PROVIDED
        ),
        current_question=InterviewStep.BUSINESS_TYPE,
    )
