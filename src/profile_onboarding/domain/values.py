"""Value objects for the profile-onboarding conversation.

All types here are frozen dataclasses -- immutable, compared by value.
A conversation turn never mutates one of these; it builds a successor with
``dataclasses.replace`` or a fresh constructor call, so a ``ChatbotState``
can be stored, diffed and resumed by the caller as a plain value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .enums import (
    ConfidenceLevel,
    ConversationState,
    DataSource,
    ExtractionMethod,
    ImageType,
    InterviewStep,
    ProfileField,
)

# ---------------------------------------------------------------------------
# Structured sub-values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProductItem:
    """A product or offering listed on the business page."""

    name: str
    description: str | None = None
    price: float | None = None
    image: str | None = None


@dataclass(frozen=True)
class Testimonial:
    """A customer quote."""

    name: str
    text: str
    rating: float | None = None


@dataclass(frozen=True)
class SocialLinks:
    """Links to the business's social profiles."""

    instagram: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    youtube: str | None = None
    tiktok: str | None = None
    website: str | None = None


@dataclass(frozen=True)
class ImageAsset:
    """An image found while scraping, tagged with its role on the page."""

    url: str
    type: ImageType = ImageType.OTHER
    alt: str | None = None
    source_page: str | None = None


# ---------------------------------------------------------------------------
# Profile content
# ---------------------------------------------------------------------------

# The one place where a ProfileField is turned into an attribute name.
FIELD_ATTRIBUTES: Mapping[ProfileField, str] = {
    ProfileField.NAME: "name",
    ProfileField.BUSINESS_TYPE: "business_type",
    ProfileField.DESCRIPTION: "description",
    ProfileField.PHONE: "phone",
    ProfileField.EMAIL: "email",
    ProfileField.ADDRESS: "address",
    ProfileField.CITY: "city",
    ProfileField.SERVICES: "services",
    ProfileField.PRODUCTS: "products",
    ProfileField.FEATURES: "features",
    ProfileField.TESTIMONIALS: "testimonials",
    ProfileField.SOCIAL_LINKS: "social_links",
    ProfileField.SOURCE_URL: "source_url",
    ProfileField.LOGO: "logo",
    ProfileField.HERO_IMAGE: "hero_image",
    ProfileField.GALLERY_IMAGES: "gallery_images",
    ProfileField.PRIMARY_COLOR: "primary_color",
    ProfileField.SECONDARY_COLOR: "secondary_color",
    ProfileField.RAW_TEXT: "raw_text",
    ProfileField.ABOUT_CONTENT: "about_content",
    ProfileField.SCRAPED_IMAGES: "scraped_images",
    ProfileField.TARGET_AUDIENCE: "target_audience",
    ProfileField.TONE: "tone",
    ProfileField.PREFERRED_SECTIONS: "preferred_sections",
}

# Fields holding a single free-text string; only these can take a typed reply.
TEXT_FIELDS: frozenset[ProfileField] = frozenset({
    ProfileField.NAME,
    ProfileField.BUSINESS_TYPE,
    ProfileField.DESCRIPTION,
    ProfileField.PHONE,
    ProfileField.EMAIL,
    ProfileField.ADDRESS,
    ProfileField.CITY,
    ProfileField.SOURCE_URL,
    ProfileField.LOGO,
    ProfileField.HERO_IMAGE,
    ProfileField.PRIMARY_COLOR,
    ProfileField.SECONDARY_COLOR,
    ProfileField.RAW_TEXT,
    ProfileField.ABOUT_CONTENT,
    ProfileField.TARGET_AUDIENCE,
    ProfileField.TONE,
})


@dataclass(frozen=True)
class ProfileContent:
    """Field set shared by extracted candidates and working profiles.

    A field is *present* when its value is not ``None``; empty tuples count
    as present.
    """

    name: str | None = None
    business_type: str | None = None
    description: str | None = None

    phone: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None

    services: tuple[str, ...] | None = None
    products: tuple[ProductItem, ...] | None = None
    features: tuple[str, ...] | None = None
    testimonials: tuple[Testimonial, ...] | None = None

    social_links: SocialLinks | None = None
    source_url: str | None = None

    logo: str | None = None
    hero_image: str | None = None
    gallery_images: tuple[str, ...] | None = None
    primary_color: str | None = None
    secondary_color: str | None = None

    raw_text: str | None = None
    about_content: str | None = None
    scraped_images: tuple[ImageAsset, ...] | None = None

    target_audience: str | None = None
    tone: str | None = None
    preferred_sections: tuple[str, ...] | None = None

    def get(self, profile_field: ProfileField) -> Any:
        """Return the value stored for *profile_field* (``None`` if unset)."""
        return getattr(self, FIELD_ATTRIBUTES[profile_field])

    def has(self, profile_field: ProfileField) -> bool:
        return self.get(profile_field) is not None

    def present_fields(self) -> tuple[ProfileField, ...]:
        """Fields with a value, in ``ProfileField`` declaration order."""
        return tuple(f for f in ProfileField if self.has(f))


@dataclass(frozen=True)
class ExtractedProfile(ProfileContent):
    """Raw, unconfirmed candidate returned by the extraction collaborator.

    ``confidence`` is a single aggregate tag for the whole extraction, not a
    per-field map.
    """

    confidence: ConfidenceLevel | None = None


@dataclass(frozen=True)
class WorkingProfile(ProfileContent):
    """The profile under construction, with per-field confidence and provenance.

    Every present field has an entry in ``confidence``; ``data_source`` only
    holds entries for fields that have been set at least once.
    """

    confidence: Mapping[ProfileField, ConfidenceLevel] = field(default_factory=dict)
    overall_confidence: ConfidenceLevel = ConfidenceLevel.NONE
    data_source: Mapping[ProfileField, DataSource] = field(default_factory=dict)
    extraction_method: ExtractionMethod | None = None

    def confidence_for(self, profile_field: ProfileField) -> ConfidenceLevel:
        return self.confidence.get(profile_field, ConfidenceLevel.NONE)

    def source_for(self, profile_field: ProfileField) -> DataSource | None:
        return self.data_source.get(profile_field)

    def with_field(
        self,
        profile_field: ProfileField,
        value: Any,
        confidence: ConfidenceLevel,
        source: DataSource,
    ) -> WorkingProfile:
        """Return a copy with *profile_field* set and its bookkeeping updated."""
        return replace(
            self,
            **{FIELD_ATTRIBUTES[profile_field]: value},
            confidence={**self.confidence, profile_field: confidence},
            data_source={**self.data_source, profile_field: source},
        )


# ---------------------------------------------------------------------------
# Corrections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConfirmationPatch:
    """One user correction to an extracted value.

    Patches are ordered; a later patch for the same field supersedes an
    earlier one when merging.
    """

    field: ProfileField
    old_value: Any
    new_value: Any
    confirmed: bool = True


# ---------------------------------------------------------------------------
# Conversation snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChatbotState:
    """Full resumable snapshot of one onboarding conversation.

    ``current_question`` holds a ``ProfileField`` while confirming an
    extracted profile and an ``InterviewStep`` while interviewing.
    """

    conversation_state: ConversationState = ConversationState.AWAITING_URL_OR_NAME
    profile: WorkingProfile = field(default_factory=WorkingProfile)
    extracted_profile: ExtractedProfile | None = None
    pending_confirmations: tuple[ProfileField, ...] = ()
    confirmation_patches: tuple[ConfirmationPatch, ...] = ()
    current_question: ProfileField | InterviewStep | None = None
    url_detected: str | None = None
    url_validated: bool | None = None
    extraction_error: str | None = None

    @classmethod
    def initial(cls) -> ChatbotState:
        """Fresh state for a new conversation."""
        return cls()

    @property
    def is_ready(self) -> bool:
        """True once the profile can be handed to the site generator."""
        return self.conversation_state is ConversationState.READY_TO_GENERATE


# ---------------------------------------------------------------------------
# Turn result and collaborator result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChatbotResponse:
    """What one processed turn hands back to the caller."""

    success: bool
    message: str = ""
    state: ChatbotState | None = None
    suggested_actions: tuple[str, ...] = ()
    needs_confirmation: bool = False
    confirmation_field: ProfileField | None = None
    error: str | None = None

    @property
    def done(self) -> bool:
        """True when the returned state is terminal."""
        return self.state is not None and self.state.is_ready


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of asking the extraction collaborator about one URL."""

    success: bool
    profile: ExtractedProfile | None = None
    error: str | None = None

    @classmethod
    def ok(cls, profile: ExtractedProfile) -> ExtractionResult:
        return cls(success=True, profile=profile)

    @classmethod
    def failed(cls, error: str) -> ExtractionResult:
        return cls(success=False, error=error)

    @property
    def is_usable(self) -> bool:
        """A successful result whose profile carries a business name."""
        return bool(self.success and self.profile is not None and self.profile.name)
