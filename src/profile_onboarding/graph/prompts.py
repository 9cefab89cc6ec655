"""Bot-side wording for the onboarding conversation."""

from __future__ import annotations

from typing import Any

from profile_onboarding.domain.enums import InterviewStep, ProfileField
from profile_onboarding.domain.values import WorkingProfile
from profile_onboarding.infrastructure.config import ConversationConfig
from profile_onboarding.services.summary import format_field_name

AFFIRMATIVE_TOKENS = frozenset({"yes", "y", "correct", "confirm"})
NEGATIVE_TOKENS = frozenset({"no", "n", "incorrect", "wrong"})
SKIP_TOKENS = frozenset({"skip", "no", "none"})

CONFIRM_ACTIONS = ("Yes", "No")
SKIP_ACTIONS = ("Skip",)
GENERATE_ACTIONS = ("Generate Website",)

GREETING = (
    "👋 Hi! I'll help you build your website.\n\n"
    "You can either:\n"
    "1. Share your existing website URL (I'll extract the info)\n"
    "2. Tell me your business name (I'll guide you through)"
)
INVALID_INITIAL_URL = (
    "That doesn't look like a valid URL. "
    "Please provide a valid website URL (e.g., www.example.com)"
)
INVALID_ENRICHMENT_URL = "That doesn't look like a valid URL. Let's continue without it."
ENRICHMENT_FAILED = "I couldn't extract info from that URL. Let's continue with what we have."
MISSING_URL = "No URL detected"
UNKNOWN_STEP = "Unknown interview question"
ASK_NAME = "**What's your business name?**"
ASK_URL_OR_SKIP = "Please provide a URL or type 'skip' to continue without one."
READY_REMINDER = "Ready to generate! Please click the 'Generate Website' button to continue."
READY_AFTER_INTERVIEW = "No problem! I have enough to get started. Let's generate your website! 🎉"
READY_AFTER_CONFIRMATION = (
    "Perfect! I have all the information I need. Let's generate your website! 🎉"
)


def extraction_failed(error: str | None) -> str:
    return (
        f"I couldn't extract info from that URL ({error or 'unknown error'}). "
        f"Let's gather the details manually instead.\n\n{ASK_NAME}"
    )


def enriched(url: str) -> str:
    return f"Great! I've enriched your profile with info from {url}. Let's generate your website! 🎉"


def confirmation_question(profile_field: ProfileField, value: Any) -> str:
    return f'**Is "{value}" the correct {format_field_name(profile_field)}?**'


def correction_request(profile_field: ProfileField) -> str:
    return f"Got it. What should the {format_field_name(profile_field)} be?"


def interview_question(
    step: InterviewStep,
    profile: WorkingProfile,
    config: ConversationConfig,
    first_time: bool = True,
) -> tuple[str, tuple[str, ...]]:
    """Question text and quick replies for an interview step.

    ``first_time=False`` drops the cheerful lead-in when a question is
    repeated after a failed detour.
    """
    if step is InterviewStep.NAME:
        return ASK_NAME, ()

    if step is InterviewStep.BUSINESS_TYPE:
        examples = ", ".join(config.business_type_suggestions)
        text = f"What type of business is it? (e.g., {examples}, etc.)"
        if first_time and profile.name:
            text = f"Great! Let's build a website for **{profile.name}**.\n\n{text}"
        return text, config.business_type_suggestions

    if step is InterviewStep.DESCRIPTION:
        text = (
            f"Tell me a bit about your {profile.business_type or 'business'}. "
            "What makes it special?"
        )
        return (f"Great! {text}" if first_time else text), ()

    text = (
        "Do you have an existing website or social media page I can extract "
        "more info from? (optional - you can say 'skip' or 'no')"
    )
    return (f"Perfect! {text}" if first_time else text), SKIP_ACTIONS
