"""Domain enumerations for the profile-onboarding conversation.

These enums capture the fixed vocabularies used across the domain layer:
conversation states, interview steps, confidence levels, data provenance,
extraction methods, and the closed set of tracked profile fields.
"""

from enum import Enum


class ConversationState(Enum):
    """Finite-state-machine states for the onboarding conversation."""

    AWAITING_URL_OR_NAME = "awaiting_url_or_name"
    EXTRACTING_FROM_URL = "extracting_from_url"
    CONFIRMING_EXTRACTED_PROFILE = "confirming_extracted_profile"
    INTERVIEWING_USER = "interviewing_user"
    ENRICHING_WITH_URL = "enriching_with_url"
    READY_TO_GENERATE = "ready_to_generate_website"


class ConfidenceLevel(Enum):
    """Coarse trust label attached to a field or to the whole profile."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class DataSource(Enum):
    """Where a profile field's current value came from."""

    USER_PROVIDED = "user-provided"
    STRUCTURED_DATA = "structured-data"
    INFERRED = "inferred"


class ExtractionMethod(Enum):
    """How the final profile was assembled."""

    URL = "url"
    INTERVIEW = "interview"
    MIXED = "mixed"


class InterviewStep(Enum):
    """Steps of the manual interview, in the order they are asked."""

    NAME = "name"  # only after a failed initial extraction
    BUSINESS_TYPE = "businessType"
    DESCRIPTION = "description"
    OPTIONAL_URL = "optionalUrl"


class ImageType(Enum):
    """Role of a scraped image asset."""

    LOGO = "logo"
    HERO = "hero"
    GALLERY = "gallery"
    ICON = "icon"
    PRODUCT = "product"
    TEAM = "team"
    OTHER = "other"


class ProfileField(Enum):
    """Closed set of profile fields tracked for confidence and provenance.

    Values are the wire names used in persisted state and in
    ``currentQuestion``.
    """

    # -- basic info
    NAME = "name"
    BUSINESS_TYPE = "businessType"
    DESCRIPTION = "description"

    # -- contact
    PHONE = "phone"
    EMAIL = "email"
    ADDRESS = "address"
    CITY = "city"

    # -- content
    SERVICES = "services"
    PRODUCTS = "products"
    FEATURES = "features"
    TESTIMONIALS = "testimonials"

    # -- links
    SOCIAL_LINKS = "socialLinks"
    SOURCE_URL = "sourceUrl"

    # -- visual
    LOGO = "logo"
    HERO_IMAGE = "heroImage"
    GALLERY_IMAGES = "galleryImages"
    PRIMARY_COLOR = "primaryColor"
    SECONDARY_COLOR = "secondaryColor"

    # -- raw material
    RAW_TEXT = "rawText"
    ABOUT_CONTENT = "aboutContent"
    SCRAPED_IMAGES = "scrapedImages"

    # -- generator hints (interview / manual only)
    TARGET_AUDIENCE = "targetAudience"
    TONE = "tone"
    PREFERRED_SECTIONS = "preferredSections"
