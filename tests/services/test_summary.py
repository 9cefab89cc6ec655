"""Tests for the extraction summary and display labels."""

from __future__ import annotations

from profile_onboarding.domain.enums import ProfileField
from profile_onboarding.domain.values import ExtractedProfile
from profile_onboarding.infrastructure.config import ConversationConfig
from profile_onboarding.services.summary import (
    format_business_type,
    format_field_name,
    generate_extraction_summary,
)


class TestFormatting:

    def test_known_business_type(self) -> None:
        assert format_business_type("beauty") == "Beauty & Salon"
        assert format_business_type("ecommerce") == "E-commerce Store"

    def test_unknown_business_type_is_capitalized(self) -> None:
        assert format_business_type("bakery") == "Bakery"

    def test_missing_business_type(self) -> None:
        assert format_business_type(None) == "Business"

    def test_field_names(self) -> None:
        assert format_field_name(ProfileField.NAME) == "business name"
        assert format_field_name(ProfileField.BUSINESS_TYPE) == "business type"
        assert format_field_name(ProfileField.PHONE) == "phone number"
        assert format_field_name(ProfileField.SERVICES) == "services"


class TestGenerateExtractionSummary:

    def test_full_profile(self) -> None:
        profile = ExtractedProfile(
            name="Acme Bakery",
            business_type="restaurant",
            address="1 Main St",
            city="Springfield",
            phone="555-0100",
            email="hi@acme.com",
            services=("Bread", "Cakes", "Pies", "Coffee", "Catering", "Classes"),
            description="x" * 200,
        )
        expected = "\n".join(
            [
                "**What I found:**\n",
                "🏢 **Acme Bakery** - Restaurant",
                "📍 1 Main St, Springfield",
                "📞 555-0100 • hi@acme.com",
                "🎯 Services: Bread, Cakes, Pies, Coffee, Catering...",
                "\n" + "x" * 150 + "...",
                "\n*Please confirm if these details are correct.*",
            ]
        )
        assert generate_extraction_summary(profile) == expected

    def test_sparse_profile_skips_missing_lines(self) -> None:
        summary = generate_extraction_summary(ExtractedProfile(name="Acme", email="a@b.com"))
        assert "🏢 **Acme** - Business" in summary
        assert "📞 a@b.com" in summary
        assert "📍" not in summary
        assert "🎯" not in summary

    def test_short_description_not_truncated(self) -> None:
        summary = generate_extraction_summary(ExtractedProfile(name="A", description="Cozy."))
        assert "Cozy." in summary
        assert "Cozy...." not in summary

    def test_limits_come_from_config(self) -> None:
        config = ConversationConfig(summary_max_services=2, summary_description_chars=5)
        profile = ExtractedProfile(
            name="A", services=("a", "b", "c"), description="abcdefgh"
        )
        summary = generate_extraction_summary(profile, config)
        assert "🎯 Services: a, b..." in summary
        assert "abcde..." in summary

    def test_deterministic(self, acme_profile: ExtractedProfile) -> None:
        assert generate_extraction_summary(acme_profile) == generate_extraction_summary(
            acme_profile
        )
