#!/usr/bin/env python3
"""Example 01: A complete onboarding conversation without network access.

Demonstrates:
- Wiring ConversationOrchestrator with a fake extractor
- Subscribing to domain events on an EventBus
- Confirming one extracted field and correcting another
- Persisting the state as JSON between turns

Run:
    PYTHONPATH=src python examples/01_scripted_conversation.py
"""

from __future__ import annotations

from profile_onboarding.domain.enums import ConfidenceLevel
from profile_onboarding.domain.events import DomainEvent
from profile_onboarding.domain.values import ExtractedProfile
from profile_onboarding.infrastructure.event_bus import EventBus
from profile_onboarding.infrastructure.serialization import from_json, to_json
from profile_onboarding.orchestrator import ConversationOrchestrator
from profile_onboarding.testing import StaticExtractor


def main() -> None:
    # -- Collaborators --------------------------------------------------------
    extractor = StaticExtractor(
        ExtractedProfile(
            name="Acme Bakery",
            business_type="bakery",
            description="Family bakery baking sourdough since 1952.",
            city="Springfield",
            phone="555-0100",
            services=("Bread", "Cakes", "Catering"),
            confidence=ConfidenceLevel.HIGH,
        )
    )

    bus = EventBus()

    def log_event(event: DomainEvent) -> None:
        print(f"    event: {type(event).__name__}")

    bus.subscribe_all(log_event)

    orchestrator = ConversationOrchestrator(extractor, event_bus=bus)

    # -- Conversation ---------------------------------------------------------
    greeting = orchestrator.greet()
    print(f"bot> {greeting.message}\n")

    stored = to_json(greeting.state)
    for utterance in ("Here's our site: acmebakery.com", "yes", "Artisan bakery"):
        print(f"you> {utterance}")
        response = orchestrator.process_turn(utterance, from_json(stored), conversation_id="demo")
        print(f"bot> {response.message}\n")
        stored = to_json(response.state)

    # -- Result ---------------------------------------------------------------
    state = from_json(stored)
    profile = state.profile
    print("=" * 60)
    print(f"State:       {state.conversation_state.value}")
    print(f"Method:      {profile.extraction_method.value if profile.extraction_method else '-'}")
    print(f"Overall:     {profile.overall_confidence.value}")
    for profile_field in profile.present_fields():
        source = profile.source_for(profile_field)
        print(
            f"  {profile_field.value:<14} {profile.get(profile_field)!s:<45} "
            f"{profile.confidence_for(profile_field).value:<7} "
            f"{source.value if source else '-'}"
        )
    print(f"Corrections: {len(state.confirmation_patches)}")


if __name__ == "__main__":
    main()
