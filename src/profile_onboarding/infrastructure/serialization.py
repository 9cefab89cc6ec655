"""Serialization of conversation state to plain dicts and JSON.

Callers persist ``ChatbotState`` between turns (session store, request body,
file), so every ``*_to_dict`` output is JSON-serializable and uses the
camelCase wire names of ``ProfileField``::

    {
      "conversationState": "confirming_extracted_profile",
      "profile": {"name": "Acme Bakery",
                  "confidence": {"name": "high", "overall": "high"},
                  "dataSource": {"name": "structured-data"}},
      "pendingConfirmations": ["businessType"],
      "currentQuestion": "businessType",
      ...
    }

``*_from_dict`` reconstructors raise ``StateSerializationError`` for data
that cannot be decoded.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any

from profile_onboarding.domain.enums import (
    ConfidenceLevel,
    ConversationState,
    DataSource,
    ExtractionMethod,
    ImageType,
    InterviewStep,
    ProfileField,
)
from profile_onboarding.domain.exceptions import StateSerializationError
from profile_onboarding.domain.values import (
    FIELD_ATTRIBUTES,
    ChatbotState,
    ConfirmationPatch,
    ExtractedProfile,
    ImageAsset,
    ProductItem,
    ProfileContent,
    SocialLinks,
    Testimonial,
    WorkingProfile,
)

logger = logging.getLogger(__name__)

OVERALL_KEY = "overall"


# =========================================================================== #
#  Field values                                                                #
# =========================================================================== #

def _value_to_wire(profile_field: ProfileField, value: Any) -> Any:
    if value is None:
        return None
    if profile_field is ProfileField.SOCIAL_LINKS:
        return {k: v for k, v in asdict(value).items() if v is not None}
    if profile_field is ProfileField.PRODUCTS:
        return [asdict(p) for p in value]
    if profile_field is ProfileField.TESTIMONIALS:
        return [asdict(t) for t in value]
    if profile_field is ProfileField.SCRAPED_IMAGES:
        return [
            {"url": img.url, "type": img.type.value, "alt": img.alt, "sourcePage": img.source_page}
            for img in value
        ]
    if isinstance(value, tuple):
        return list(value)
    return value


def _value_from_wire(profile_field: ProfileField, raw: Any) -> Any:
    if raw is None:
        return None
    if profile_field is ProfileField.SOCIAL_LINKS:
        return SocialLinks(**raw)
    if profile_field is ProfileField.PRODUCTS:
        return tuple(ProductItem(**p) for p in raw)
    if profile_field is ProfileField.TESTIMONIALS:
        return tuple(Testimonial(**t) for t in raw)
    if profile_field is ProfileField.SCRAPED_IMAGES:
        return tuple(
            ImageAsset(
                url=img["url"],
                type=ImageType(img.get("type", ImageType.OTHER.value)),
                alt=img.get("alt"),
                source_page=img.get("sourcePage"),
            )
            for img in raw
        )
    if isinstance(raw, list):
        return tuple(raw)
    return raw


def _content_to_dict(profile: ProfileContent) -> dict[str, Any]:
    return {
        f.value: _value_to_wire(f, profile.get(f)) for f in profile.present_fields()
    }


def _content_kwargs(data: dict[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for profile_field in ProfileField:
        if profile_field.value in data:
            kwargs[FIELD_ATTRIBUTES[profile_field]] = _value_from_wire(
                profile_field, data[profile_field.value]
            )
    return kwargs


# =========================================================================== #
#  Profiles                                                                    #
# =========================================================================== #

def extracted_profile_to_dict(profile: ExtractedProfile) -> dict[str, Any]:
    data = _content_to_dict(profile)
    if profile.confidence is not None:
        data["confidence"] = profile.confidence.value
    return data


def extracted_profile_from_dict(data: dict[str, Any]) -> ExtractedProfile:
    try:
        confidence = data.get("confidence")
        return ExtractedProfile(
            **_content_kwargs(data),
            confidence=ConfidenceLevel(confidence) if confidence is not None else None,
        )
    except (TypeError, ValueError, KeyError) as exc:
        raise StateSerializationError(
            f"Invalid extracted profile: {exc}", key="extractedProfile"
        ) from exc


def working_profile_to_dict(profile: WorkingProfile) -> dict[str, Any]:
    data = _content_to_dict(profile)
    confidence = {f.value: level.value for f, level in profile.confidence.items()}
    confidence[OVERALL_KEY] = profile.overall_confidence.value
    data["confidence"] = confidence
    data["dataSource"] = {f.value: source.value for f, source in profile.data_source.items()}
    if profile.extraction_method is not None:
        data["extractionMethod"] = profile.extraction_method.value
    return data


def working_profile_from_dict(data: dict[str, Any]) -> WorkingProfile:
    try:
        raw_confidence = dict(data.get("confidence") or {})
        overall = ConfidenceLevel(raw_confidence.pop(OVERALL_KEY, ConfidenceLevel.NONE.value))
        method = data.get("extractionMethod")
        return WorkingProfile(
            **_content_kwargs(data),
            confidence={
                ProfileField(k): ConfidenceLevel(v) for k, v in raw_confidence.items()
            },
            overall_confidence=overall,
            data_source={
                ProfileField(k): DataSource(v)
                for k, v in (data.get("dataSource") or {}).items()
            },
            extraction_method=ExtractionMethod(method) if method is not None else None,
        )
    except (TypeError, ValueError, KeyError) as exc:
        raise StateSerializationError(f"Invalid profile: {exc}", key="profile") from exc


# =========================================================================== #
#  Chatbot state                                                               #
# =========================================================================== #

def _patch_to_dict(patch: ConfirmationPatch) -> dict[str, Any]:
    return {
        "field": patch.field.value,
        "oldValue": _value_to_wire(patch.field, patch.old_value),
        "newValue": _value_to_wire(patch.field, patch.new_value),
        "confirmed": patch.confirmed,
    }


def _patch_from_dict(data: dict[str, Any]) -> ConfirmationPatch:
    profile_field = ProfileField(data["field"])
    return ConfirmationPatch(
        field=profile_field,
        old_value=_value_from_wire(profile_field, data.get("oldValue")),
        new_value=_value_from_wire(profile_field, data.get("newValue")),
        confirmed=bool(data.get("confirmed", True)),
    )


def _question_from_wire(
    raw: str | None, conversation_state: ConversationState
) -> ProfileField | InterviewStep | None:
    if raw is None:
        return None
    if conversation_state is ConversationState.CONFIRMING_EXTRACTED_PROFILE:
        return ProfileField(raw)
    try:
        return InterviewStep(raw)
    except ValueError:
        return ProfileField(raw)


def chatbot_state_to_dict(state: ChatbotState) -> dict[str, Any]:
    return {
        "conversationState": state.conversation_state.value,
        "profile": working_profile_to_dict(state.profile),
        "extractedProfile": (
            extracted_profile_to_dict(state.extracted_profile)
            if state.extracted_profile is not None
            else None
        ),
        "pendingConfirmations": [f.value for f in state.pending_confirmations],
        "confirmationPatches": [_patch_to_dict(p) for p in state.confirmation_patches],
        "currentQuestion": (
            state.current_question.value if state.current_question is not None else None
        ),
        "urlDetected": state.url_detected,
        "urlValidated": state.url_validated,
        "extractionError": state.extraction_error,
    }


def chatbot_state_from_dict(data: dict[str, Any]) -> ChatbotState:
    """Rebuild a ``ChatbotState``; missing keys take their initial values."""
    if not isinstance(data, dict):
        raise StateSerializationError(
            f"Expected an object, got {type(data).__name__}", key=""
        )
    try:
        conversation_state = ConversationState(
            data.get("conversationState", ConversationState.AWAITING_URL_OR_NAME.value)
        )
    except ValueError as exc:
        raise StateSerializationError(
            f"Unknown conversation state {data.get('conversationState')!r}",
            key="conversationState",
        ) from exc

    extracted = data.get("extractedProfile")
    try:
        return ChatbotState(
            conversation_state=conversation_state,
            profile=working_profile_from_dict(data.get("profile") or {}),
            extracted_profile=(
                extracted_profile_from_dict(extracted) if extracted is not None else None
            ),
            pending_confirmations=tuple(
                ProfileField(f) for f in data.get("pendingConfirmations") or ()
            ),
            confirmation_patches=tuple(
                _patch_from_dict(p) for p in data.get("confirmationPatches") or ()
            ),
            current_question=_question_from_wire(
                data.get("currentQuestion"), conversation_state
            ),
            url_detected=data.get("urlDetected"),
            url_validated=data.get("urlValidated"),
            extraction_error=data.get("extractionError"),
        )
    except StateSerializationError:
        raise
    except (TypeError, ValueError, KeyError) as exc:
        raise StateSerializationError(f"Invalid conversation state: {exc}") from exc


def to_json(state: ChatbotState, indent: int | None = 2) -> str:
    try:
        return json.dumps(chatbot_state_to_dict(state), indent=indent, ensure_ascii=False)
    except (TypeError, ValueError, AttributeError) as exc:
        raise StateSerializationError(f"State is not serializable: {exc}") from exc


def from_json(json_str: str) -> ChatbotState:
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise StateSerializationError(f"Invalid JSON: {exc}") from exc
    state = chatbot_state_from_dict(data)
    logger.debug("from_json: restored state %s", state.conversation_state.value)
    return state
