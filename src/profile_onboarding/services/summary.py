"""Human-readable text for extracted profiles and field names.

The summary is used verbatim in the first confirmation prompt, so it must be
deterministic for a given profile and configuration.
"""

from __future__ import annotations

from profile_onboarding.domain.enums import ProfileField
from profile_onboarding.domain.values import ExtractedProfile
from profile_onboarding.infrastructure.config import ConversationConfig

_BUSINESS_TYPE_LABELS: dict[str, str] = {
    "restaurant": "Restaurant",
    "beauty": "Beauty & Salon",
    "fitness": "Fitness Center",
    "healthcare": "Healthcare",
    "ecommerce": "E-commerce Store",
    "startup": "Startup/SaaS",
    "education": "Education",
    "realestate": "Real Estate",
    "agency": "Agency",
    "portfolio": "Portfolio",
    "service": "Service Business",
    "other": "Business",
}

_FIELD_LABELS: dict[ProfileField, str] = {
    ProfileField.NAME: "business name",
    ProfileField.BUSINESS_TYPE: "business type",
    ProfileField.DESCRIPTION: "description",
    ProfileField.PHONE: "phone number",
    ProfileField.EMAIL: "email",
    ProfileField.ADDRESS: "address",
    ProfileField.CITY: "city",
    ProfileField.PRIMARY_COLOR: "primary color",
    ProfileField.SECONDARY_COLOR: "secondary color",
    ProfileField.TARGET_AUDIENCE: "target audience",
}


def format_business_type(business_type: str | None) -> str:
    """Display label for a business category."""
    if not business_type:
        return "Business"
    label = _BUSINESS_TYPE_LABELS.get(business_type)
    if label is not None:
        return label
    return business_type[:1].upper() + business_type[1:]


def format_field_name(profile_field: ProfileField) -> str:
    """Lower-case label used in questions ("Is X the correct business name?")."""
    return _FIELD_LABELS.get(profile_field, profile_field.value)


def _truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text


def generate_extraction_summary(
    profile: ExtractedProfile,
    config: ConversationConfig | None = None,
) -> str:
    """Markdown digest of what was found at a URL."""
    config = config or ConversationConfig()
    parts: list[str] = ["**What I found:**\n"]

    if profile.name:
        parts.append(f"🏢 **{profile.name}** - {format_business_type(profile.business_type)}")

    location = ", ".join(p for p in (profile.address, profile.city) if p)
    if location:
        parts.append(f"📍 {location}")

    contact = " • ".join(p for p in (profile.phone, profile.email) if p)
    if contact:
        parts.append(f"📞 {contact}")

    if profile.services:
        shown = ", ".join(profile.services[: config.summary_max_services])
        more = "..." if len(profile.services) > config.summary_max_services else ""
        parts.append(f"🎯 Services: {shown}{more}")

    if profile.description:
        parts.append(f"\n{_truncate(profile.description, config.summary_description_chars)}")

    parts.append("\n*Please confirm if these details are correct.*")
    return "\n".join(parts)
