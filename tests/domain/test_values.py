"""Tests for profile value objects."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from profile_onboarding.domain.enums import (
    ConfidenceLevel,
    ConversationState,
    DataSource,
    ProfileField,
)
from profile_onboarding.domain.values import (
    FIELD_ATTRIBUTES,
    ChatbotResponse,
    ChatbotState,
    ExtractedProfile,
    ExtractionResult,
    WorkingProfile,
)


class TestFieldAttributes:

    def test_every_field_has_an_attribute(self) -> None:
        assert set(FIELD_ATTRIBUTES) == set(ProfileField)

    def test_every_attribute_exists_on_profiles(self) -> None:
        profile = WorkingProfile()
        for attribute in FIELD_ATTRIBUTES.values():
            assert hasattr(profile, attribute)


class TestProfileContent:

    def test_get_by_field(self, acme_profile: ExtractedProfile) -> None:
        assert acme_profile.get(ProfileField.NAME) == "Acme Bakery"
        assert acme_profile.get(ProfileField.BUSINESS_TYPE) == "bakery"
        assert acme_profile.get(ProfileField.EMAIL) is None

    def test_present_fields_follow_declaration_order(
        self, acme_profile: ExtractedProfile
    ) -> None:
        assert acme_profile.present_fields() == (
            ProfileField.NAME,
            ProfileField.BUSINESS_TYPE,
            ProfileField.DESCRIPTION,
            ProfileField.PHONE,
            ProfileField.CITY,
            ProfileField.SERVICES,
            ProfileField.SOURCE_URL,
        )

    def test_empty_sequence_counts_as_present(self) -> None:
        profile = ExtractedProfile(services=())
        assert profile.has(ProfileField.SERVICES)

    def test_profiles_are_frozen(self, acme_profile: ExtractedProfile) -> None:
        with pytest.raises(FrozenInstanceError):
            acme_profile.name = "Other"  # type: ignore[misc]


class TestWorkingProfile:

    def test_with_field_returns_new_profile(self) -> None:
        original = WorkingProfile()
        updated = original.with_field(
            ProfileField.NAME, "Joe's Garage", ConfidenceLevel.HIGH, DataSource.USER_PROVIDED
        )
        assert original.name is None
        assert original.confidence == {}
        assert updated.name == "Joe's Garage"
        assert updated.confidence_for(ProfileField.NAME) is ConfidenceLevel.HIGH
        assert updated.source_for(ProfileField.NAME) is DataSource.USER_PROVIDED

    def test_with_field_keeps_other_entries(self) -> None:
        profile = (
            WorkingProfile()
            .with_field(ProfileField.NAME, "A", ConfidenceLevel.HIGH, DataSource.USER_PROVIDED)
            .with_field(
                ProfileField.CITY, "Paris", ConfidenceLevel.MEDIUM, DataSource.STRUCTURED_DATA
            )
        )
        assert profile.confidence_for(ProfileField.NAME) is ConfidenceLevel.HIGH
        assert profile.confidence_for(ProfileField.CITY) is ConfidenceLevel.MEDIUM
        assert profile.source_for(ProfileField.CITY) is DataSource.STRUCTURED_DATA

    def test_unset_field_defaults(self) -> None:
        profile = WorkingProfile()
        assert profile.confidence_for(ProfileField.PHONE) is ConfidenceLevel.NONE
        assert profile.source_for(ProfileField.PHONE) is None
        assert profile.overall_confidence is ConfidenceLevel.NONE


class TestChatbotState:

    def test_initial_state(self) -> None:
        state = ChatbotState.initial()
        assert state.conversation_state is ConversationState.AWAITING_URL_OR_NAME
        assert state.profile == WorkingProfile()
        assert state.pending_confirmations == ()
        assert state.current_question is None
        assert not state.is_ready

    def test_ready_flag(self) -> None:
        state = ChatbotState(conversation_state=ConversationState.READY_TO_GENERATE)
        assert state.is_ready
        assert ChatbotResponse(success=True, state=state).done

    def test_response_without_state_is_not_done(self) -> None:
        assert not ChatbotResponse(success=False).done


class TestExtractionResult:

    def test_ok_with_name_is_usable(self, acme_profile: ExtractedProfile) -> None:
        assert ExtractionResult.ok(acme_profile).is_usable

    def test_nameless_profile_is_not_usable(self) -> None:
        result = ExtractionResult.ok(ExtractedProfile(city="Paris"))
        assert result.success
        assert not result.is_usable

    def test_failed(self) -> None:
        result = ExtractionResult.failed("timeout")
        assert not result.success
        assert result.error == "timeout"
        assert result.profile is None
        assert not result.is_usable
