"""Tests for the merge engine."""

from __future__ import annotations

from profile_onboarding.domain.enums import (
    ConfidenceLevel,
    DataSource,
    ExtractionMethod,
    ProfileField,
)
from profile_onboarding.domain.values import (
    ConfirmationPatch,
    ExtractedProfile,
    WorkingProfile,
)
from profile_onboarding.services.merge import compute_overall_confidence, merge_profiles


def _user(**values: str) -> WorkingProfile:
    """Working profile whose fields carry no recorded bookkeeping."""
    return WorkingProfile(**values)


class TestComputeOverallConfidence:

    def test_all_high(self) -> None:
        levels = {ProfileField.NAME: ConfidenceLevel.HIGH, ProfileField.CITY: ConfidenceLevel.HIGH}
        assert compute_overall_confidence(levels) is ConfidenceLevel.HIGH

    def test_two_thirds_is_medium(self) -> None:
        levels = {
            ProfileField.NAME: ConfidenceLevel.HIGH,
            ProfileField.CITY: ConfidenceLevel.HIGH,
            ProfileField.PHONE: ConfidenceLevel.MEDIUM,
        }
        assert compute_overall_confidence(levels) is ConfidenceLevel.MEDIUM

    def test_exactly_seventy_percent_is_medium(self) -> None:
        fields = list(ProfileField)[:10]
        levels = {
            f: ConfidenceLevel.HIGH if i < 7 else ConfidenceLevel.LOW for i, f in enumerate(fields)
        }
        assert compute_overall_confidence(levels) is ConfidenceLevel.MEDIUM

    def test_one_third_is_low(self) -> None:
        levels = {
            ProfileField.NAME: ConfidenceLevel.HIGH,
            ProfileField.CITY: ConfidenceLevel.LOW,
            ProfileField.PHONE: ConfidenceLevel.LOW,
        }
        assert compute_overall_confidence(levels) is ConfidenceLevel.LOW

    def test_none_entries_are_ignored(self) -> None:
        levels = {ProfileField.NAME: ConfidenceLevel.HIGH, ProfileField.CITY: ConfidenceLevel.NONE}
        assert compute_overall_confidence(levels) is ConfidenceLevel.HIGH

    def test_fallback_when_nothing_rated(self) -> None:
        assert compute_overall_confidence({}) is ConfidenceLevel.NONE
        assert (
            compute_overall_confidence({}, fallback=ConfidenceLevel.MEDIUM)
            is ConfidenceLevel.MEDIUM
        )


class TestMergeProfiles:

    def test_empty_merge(self) -> None:
        merged = merge_profiles()
        assert merged == WorkingProfile()
        assert merged.overall_confidence is ConfidenceLevel.NONE

    def test_extracted_fields_seeded_as_structured_data(
        self, acme_profile: ExtractedProfile
    ) -> None:
        merged = merge_profiles(acme_profile)
        for profile_field in acme_profile.present_fields():
            assert merged.get(profile_field) == acme_profile.get(profile_field)
            assert merged.confidence_for(profile_field) is ConfidenceLevel.HIGH
            assert merged.source_for(profile_field) is DataSource.STRUCTURED_DATA
        assert merged.overall_confidence is ConfidenceLevel.HIGH

    def test_extraction_without_confidence_defaults_to_medium(self) -> None:
        merged = merge_profiles(ExtractedProfile(name="Acme", city="Paris"))
        assert merged.confidence_for(ProfileField.NAME) is ConfidenceLevel.MEDIUM
        assert merged.overall_confidence is ConfidenceLevel.LOW

    def test_user_value_beats_extraction(self) -> None:
        extracted = ExtractedProfile(
            name="Acme", city="Paris", confidence=ConfidenceLevel.HIGH
        )
        merged = merge_profiles(extracted, _user(name="Acme Artisan Bakery"))
        assert merged.name == "Acme Artisan Bakery"
        assert merged.confidence_for(ProfileField.NAME) is ConfidenceLevel.HIGH
        assert merged.source_for(ProfileField.NAME) is DataSource.USER_PROVIDED
        assert merged.city == "Paris"
        assert merged.source_for(ProfileField.CITY) is DataSource.STRUCTURED_DATA

    def test_recorded_provenance_is_carried(self, acme_profile: ExtractedProfile) -> None:
        confirmed = WorkingProfile().with_field(
            ProfileField.NAME, "Acme Bakery", ConfidenceLevel.HIGH, DataSource.STRUCTURED_DATA
        )
        merged = merge_profiles(acme_profile, confirmed)
        assert merged.source_for(ProfileField.NAME) is DataSource.STRUCTURED_DATA
        assert merged.confidence_for(ProfileField.NAME) is ConfidenceLevel.HIGH

    def test_confirmed_patch_applies(self, acme_profile: ExtractedProfile) -> None:
        patch = ConfirmationPatch(ProfileField.NAME, "Acme Bakery", "Acme Artisan Bakery")
        merged = merge_profiles(acme_profile, None, [patch])
        assert merged.name == "Acme Artisan Bakery"
        assert merged.source_for(ProfileField.NAME) is DataSource.USER_PROVIDED
        assert merged.confidence_for(ProfileField.NAME) is ConfidenceLevel.HIGH

    def test_later_patch_supersedes_earlier(self, acme_profile: ExtractedProfile) -> None:
        patches = [
            ConfirmationPatch(ProfileField.NAME, "Acme Bakery", "First"),
            ConfirmationPatch(ProfileField.NAME, "First", "Second"),
        ]
        assert merge_profiles(acme_profile, None, patches).name == "Second"

    def test_patch_beats_working_profile(self) -> None:
        patch = ConfirmationPatch(ProfileField.CITY, None, "Lyon")
        merged = merge_profiles(None, _user(city="Paris"), [patch])
        assert merged.city == "Lyon"

    def test_unconfirmed_patch_ignored(self, acme_profile: ExtractedProfile) -> None:
        patch = ConfirmationPatch(ProfileField.NAME, "Acme Bakery", "Nope", confirmed=False)
        merged = merge_profiles(acme_profile, None, [patch])
        assert merged.name == "Acme Bakery"

    def test_merge_is_deterministic(self, acme_profile: ExtractedProfile) -> None:
        user = _user(name="Acme Artisan Bakery", tone="warm")
        patches = [ConfirmationPatch(ProfileField.CITY, "Springfield", "Shelbyville")]
        first = merge_profiles(acme_profile, user, patches, ExtractionMethod.URL)
        second = merge_profiles(acme_profile, user, patches, ExtractionMethod.URL)
        assert first == second
        assert list(first.confidence) == list(second.confidence)

    def test_inputs_are_not_modified(self, acme_profile: ExtractedProfile) -> None:
        user = _user(name="Joe")
        merge_profiles(acme_profile, user)
        assert user.confidence == {}
        assert user.data_source == {}

    def test_every_present_field_has_confidence(self, acme_profile: ExtractedProfile) -> None:
        merged = merge_profiles(acme_profile, _user(tone="warm"))
        assert set(merged.present_fields()) == set(merged.confidence)

    def test_extraction_method(self, acme_profile: ExtractedProfile) -> None:
        merged = merge_profiles(acme_profile, extraction_method=ExtractionMethod.MIXED)
        assert merged.extraction_method is ExtractionMethod.MIXED

    def test_extraction_method_inherited(self) -> None:
        user = WorkingProfile(name="Joe", extraction_method=ExtractionMethod.INTERVIEW)
        assert merge_profiles(None, user).extraction_method is ExtractionMethod.INTERVIEW

    def test_overall_falls_back_to_previous_value(self) -> None:
        user = WorkingProfile(overall_confidence=ConfidenceLevel.MEDIUM)
        assert merge_profiles(None, user).overall_confidence is ConfidenceLevel.MEDIUM
