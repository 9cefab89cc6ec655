"""Domain layer for the profile-onboarding package.

Re-exports all public domain types so that consumers can write::

    from profile_onboarding.domain import ChatbotState, ProfileField
"""

# -- Enumerations -------------------------------------------------------------
from .enums import (
    ConfidenceLevel,
    ConversationState,
    DataSource,
    ExtractionMethod,
    ImageType,
    InterviewStep,
    ProfileField,
)

# -- Value Objects ------------------------------------------------------------
from .values import (
    ChatbotResponse,
    ChatbotState,
    ConfirmationPatch,
    ExtractedProfile,
    ExtractionResult,
    ImageAsset,
    ProductItem,
    ProfileContent,
    TEXT_FIELDS,
    SocialLinks,
    Testimonial,
    WorkingProfile,
)

# -- Domain Events ------------------------------------------------------------
from .events import (
    DomainEvent,
    ExtractionCompleted,
    FieldConfirmed,
    FieldCorrected,
    ProfileReady,
    TurnProcessed,
    UrlDetected,
)

# -- Exceptions ---------------------------------------------------------------
from .exceptions import (
    ExtractionError,
    InvalidUrlError,
    ProfileOnboardingError,
    StateSerializationError,
    UnknownInterviewStepError,
)

__all__ = [
    # enums
    "ConfidenceLevel",
    "ConversationState",
    "DataSource",
    "ExtractionMethod",
    "ImageType",
    "InterviewStep",
    "ProfileField",
    # values
    "ChatbotResponse",
    "ChatbotState",
    "ConfirmationPatch",
    "ExtractedProfile",
    "ExtractionResult",
    "ImageAsset",
    "ProductItem",
    "ProfileContent",
    "SocialLinks",
    "Testimonial",
    "WorkingProfile",
    "TEXT_FIELDS",
    # events
    "DomainEvent",
    "ExtractionCompleted",
    "FieldConfirmed",
    "FieldCorrected",
    "ProfileReady",
    "TurnProcessed",
    "UrlDetected",
    # exceptions
    "ExtractionError",
    "InvalidUrlError",
    "ProfileOnboardingError",
    "StateSerializationError",
    "UnknownInterviewStepError",
]
