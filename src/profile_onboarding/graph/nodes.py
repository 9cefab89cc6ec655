"""LangGraph node functions for the onboarding conversation.

Each node takes a ``TurnState`` and returns a partial update dict holding the
turn's ``ChatbotResponse`` (and any domain events).  The incoming
``ChatbotState`` is never modified; successors are built with
``dataclasses.replace`` so the caller can keep, diff or persist both.

Nodes that need collaborators are produced by ``make_*_node`` factories that
capture them in a closure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from functools import partial
from typing import Any

from profile_onboarding.domain.enums import (
    ConfidenceLevel,
    ConversationState,
    DataSource,
    ExtractionMethod,
    InterviewStep,
    ProfileField,
)
from profile_onboarding.domain.events import (
    DomainEvent,
    ExtractionCompleted,
    FieldConfirmed,
    FieldCorrected,
    ProfileReady,
    UrlDetected,
)
from profile_onboarding.domain.exceptions import UnknownInterviewStepError
from profile_onboarding.domain.values import (
    ChatbotResponse,
    ChatbotState,
    ConfirmationPatch,
    ExtractedProfile,
    ExtractionResult,
)
from profile_onboarding.graph import prompts
from profile_onboarding.infrastructure.config import ConversationConfig
from profile_onboarding.services.extraction import NAMELESS_PROFILE_ERROR
from profile_onboarding.services.merge import merge_profiles
from profile_onboarding.services.summary import generate_extraction_summary
from profile_onboarding.services.url_matcher import (
    detect_url,
    is_valid_url_format,
    normalize_url,
)

logger = logging.getLogger(__name__)

Extractor = Callable[[str], ExtractionResult]
Summarizer = Callable[[ExtractedProfile], str]

# step -> (field it fills, step asked next)
_INTERVIEW_FLOW: dict[InterviewStep, tuple[ProfileField, InterviewStep]] = {
    InterviewStep.NAME: (ProfileField.NAME, InterviewStep.BUSINESS_TYPE),
    InterviewStep.BUSINESS_TYPE: (ProfileField.BUSINESS_TYPE, InterviewStep.DESCRIPTION),
    InterviewStep.DESCRIPTION: (ProfileField.DESCRIPTION, InterviewStep.OPTIONAL_URL),
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _reply(
    chatbot_state: ChatbotState,
    message: str,
    success: bool = True,
    events: Sequence[DomainEvent] = (),
    **extra: Any,
) -> dict[str, Any]:
    response = ChatbotResponse(success=success, message=message, state=chatbot_state, **extra)
    return {"response": response, "events": list(events)}


def _checked_url(raw: str) -> str | None:
    """Normalized *raw* if it is a structurally valid URL, else ``None``."""
    url = normalize_url(raw)
    return url if is_valid_url_format(url) else None


def safe_extract(extractor: Extractor, url: str) -> ExtractionResult:
    """Call *extractor* and turn every failure into an unsuccessful result.

    A successful result without a business name is also reported as a
    failure; it cannot seed the confirmation queue.
    """
    try:
        result = extractor(url)
    except Exception as exc:
        logger.warning("Extractor raised for %s: %s", url, exc, exc_info=True)
        return ExtractionResult.failed(str(exc) or type(exc).__name__)

    if result.is_usable:
        return result
    if result.success:
        return ExtractionResult.failed(NAMELESS_PROFILE_ERROR)
    return result


def require_interview_step(question: Any) -> InterviewStep:
    if isinstance(question, InterviewStep):
        return question
    raise UnknownInterviewStepError(step=None if question is None else str(question))


def _finish(
    chatbot_state: ChatbotState,
    extracted: ExtractedProfile | None,
    method: ExtractionMethod,
    message: str,
    source_id: str,
    events: Sequence[DomainEvent] = (),
) -> dict[str, Any]:
    """Merge everything gathered so far and enter the terminal state."""
    merged = merge_profiles(
        extracted,
        chatbot_state.profile,
        chatbot_state.confirmation_patches,
        extraction_method=method,
    )
    successor = replace(
        chatbot_state,
        conversation_state=ConversationState.READY_TO_GENERATE,
        profile=merged,
        pending_confirmations=(),
        current_question=None,
    )
    logger.info(
        "Profile ready: method=%s overall=%s",
        method.value,
        merged.overall_confidence.value,
    )
    ready = ProfileReady(
        source_id=source_id,
        extraction_method=method,
        overall_confidence=merged.overall_confidence,
    )
    return _reply(
        successor,
        message,
        events=[*events, ready],
        suggested_actions=prompts.GENERATE_ACTIONS,
    )


def _interview_setback(
    chatbot_state: ChatbotState,
    error: str,
    config: ConversationConfig,
    events: Sequence[DomainEvent] = (),
) -> dict[str, Any]:
    """Report *error* and repeat the pending interview question."""
    message = error
    actions: tuple[str, ...] = ()
    if isinstance(chatbot_state.current_question, InterviewStep):
        question, actions = prompts.interview_question(
            chatbot_state.current_question, chatbot_state.profile, config, first_time=False
        )
        message = f"{error}\n\n{question}"
    return _reply(
        chatbot_state, message, success=False, events=events,
        suggested_actions=actions, error=error,
    )


def _ask_confirmation(
    chatbot_state: ChatbotState,
    profile_field: ProfileField,
    lead_in: str = "",
    events: Sequence[DomainEvent] = (),
) -> dict[str, Any]:
    extracted = chatbot_state.extracted_profile
    value = extracted.get(profile_field) if extracted is not None else None
    question = prompts.confirmation_question(profile_field, value)
    return _reply(
        chatbot_state,
        f"{lead_in}\n\n{question}" if lead_in else question,
        events=events,
        suggested_actions=prompts.CONFIRM_ACTIONS,
        needs_confirmation=True,
        confirmation_field=profile_field,
    )


# ---------------------------------------------------------------------------
# Node: read_utterance
# ---------------------------------------------------------------------------

def read_utterance_node(state: dict[str, Any]) -> dict[str, Any]:
    """Normalize the utterance once and look for a URL in it.

    Writes ``text`` (trimmed), ``normalized`` (trimmed and case-folded) and
    ``detected_url``.
    """
    text = (state.get("utterance") or "").strip()
    return {
        "text": text,
        "normalized": text.casefold(),
        "detected_url": detect_url(text),
    }


# ---------------------------------------------------------------------------
# Node: awaiting_url_or_name
# ---------------------------------------------------------------------------

def make_awaiting_node(config: ConversationConfig) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Create the handler for the initial state (no URL in the utterance)."""

    def awaiting_url_or_name_node(state: dict[str, Any]) -> dict[str, Any]:
        chatbot_state: ChatbotState = state["chatbot_state"]
        name = state.get("text", "")
        if not name:
            return _reply(chatbot_state, prompts.GREETING)

        profile = chatbot_state.profile.with_field(
            ProfileField.NAME, name, ConfidenceLevel.HIGH, DataSource.USER_PROVIDED
        )
        successor = replace(
            chatbot_state,
            conversation_state=ConversationState.INTERVIEWING_USER,
            profile=profile,
            current_question=InterviewStep.BUSINESS_TYPE,
        )
        logger.info("Interview started for %r", name)
        message, actions = prompts.interview_question(InterviewStep.BUSINESS_TYPE, profile, config)
        return _reply(successor, message, suggested_actions=actions)

    return awaiting_url_or_name_node


# ---------------------------------------------------------------------------
# Node: extracting_from_url
# ---------------------------------------------------------------------------

def make_extracting_node(
    extractor: Extractor,
    config: ConversationConfig,
    summarizer: Summarizer | None = None,
) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Create the initial-URL handler.

    On success the configured confirmation fields that the extraction
    actually filled are queued for yes/no confirmation.  On failure the
    conversation falls back to a manual interview starting with the name.
    """
    summarize = summarizer or partial(generate_extraction_summary, config=config)

    def extracting_from_url_node(state: dict[str, Any]) -> dict[str, Any]:
        chatbot_state: ChatbotState = state["chatbot_state"]
        source_id = state.get("source_id", "")

        raw = state.get("detected_url") or chatbot_state.url_detected
        if not raw:
            successor = replace(
                chatbot_state, conversation_state=ConversationState.AWAITING_URL_OR_NAME
            )
            return _reply(
                successor, prompts.GREETING, success=False, error=prompts.MISSING_URL
            )

        url = _checked_url(raw)
        if url is None:
            logger.info("Rejected malformed URL %r", raw)
            successor = replace(
                chatbot_state,
                conversation_state=ConversationState.AWAITING_URL_OR_NAME,
                url_validated=False,
            )
            return _reply(
                successor,
                prompts.INVALID_INITIAL_URL,
                success=False,
                error=prompts.INVALID_INITIAL_URL,
            )

        extracting = replace(
            chatbot_state,
            conversation_state=ConversationState.EXTRACTING_FROM_URL,
            url_detected=url,
        )
        result = safe_extract(extractor, url)
        events: list[DomainEvent] = [
            UrlDetected(source_id=source_id, url=url),
            ExtractionCompleted(
                source_id=source_id, url=url, success=result.success, error=result.error
            ),
        ]

        if not result.success:
            logger.warning("Extraction from %s failed: %s", url, result.error)
            successor = replace(
                extracting,
                conversation_state=ConversationState.INTERVIEWING_USER,
                current_question=InterviewStep.NAME,
                url_validated=False,
                extraction_error=result.error,
            )
            return _reply(
                successor,
                prompts.extraction_failed(result.error),
                success=False,
                events=events,
                error=result.error,
            )

        profile = result.profile
        pending = tuple(f for f in config.confirmation_fields if profile.has(f))
        successor = replace(
            extracting,
            conversation_state=ConversationState.CONFIRMING_EXTRACTED_PROFILE,
            extracted_profile=profile,
            url_validated=True,
            extraction_error=None,
            pending_confirmations=pending,
            current_question=pending[0] if pending else None,
        )
        summary = summarize(profile)
        logger.info("Extracted %r from %s; confirming %d field(s)", profile.name, url, len(pending))

        if not pending:
            return _finish(
                successor,
                profile,
                ExtractionMethod.URL,
                f"{summary}\n\n{prompts.READY_AFTER_CONFIRMATION}",
                source_id,
                events,
            )
        return _ask_confirmation(successor, pending[0], lead_in=summary, events=events)

    return extracting_from_url_node


# ---------------------------------------------------------------------------
# Node: confirming_extracted_profile
# ---------------------------------------------------------------------------

def confirming_extracted_profile_node(state: dict[str, Any]) -> dict[str, Any]:
    """Work through the confirmation queue one field per turn.

    Affirmative -> accept the extracted value.  Negative -> ask for the right
    value and keep the queue as is.  Anything else -> the text is the
    corrected value.
    """
    chatbot_state: ChatbotState = state["chatbot_state"]
    source_id = state.get("source_id", "")
    pending = chatbot_state.pending_confirmations
    extracted = chatbot_state.extracted_profile

    if not pending:
        return _finish(
            chatbot_state, extracted, ExtractionMethod.URL,
            prompts.READY_AFTER_CONFIRMATION, source_id,
        )

    profile_field = pending[0]
    text = state.get("text", "")
    normalized = state.get("normalized", "")
    extracted_value = extracted.get(profile_field) if extracted is not None else None

    if normalized in prompts.NEGATIVE_TOKENS:
        return _reply(
            chatbot_state,
            prompts.correction_request(profile_field),
            confirmation_field=profile_field,
        )
    if not text:
        return _ask_confirmation(chatbot_state, profile_field)

    if normalized in prompts.AFFIRMATIVE_TOKENS:
        profile = chatbot_state.profile
        if extracted_value is not None:
            profile = profile.with_field(
                profile_field, extracted_value, ConfidenceLevel.HIGH, DataSource.STRUCTURED_DATA
            )
        successor = replace(chatbot_state, profile=profile, pending_confirmations=pending[1:])
        event: DomainEvent = FieldConfirmed(source_id=source_id, profile_field=profile_field)
    else:
        patch = ConfirmationPatch(field=profile_field, old_value=extracted_value, new_value=text)
        successor = replace(
            chatbot_state,
            profile=chatbot_state.profile.with_field(
                profile_field, text, ConfidenceLevel.HIGH, DataSource.USER_PROVIDED
            ),
            pending_confirmations=pending[1:],
            confirmation_patches=(*chatbot_state.confirmation_patches, patch),
        )
        event = FieldCorrected(source_id=source_id, patch=patch)

    if successor.pending_confirmations:
        following = successor.pending_confirmations[0]
        successor = replace(successor, current_question=following)
        return _ask_confirmation(successor, following, events=[event])
    return _finish(
        successor, extracted, ExtractionMethod.URL,
        prompts.READY_AFTER_CONFIRMATION, source_id, [event],
    )


# ---------------------------------------------------------------------------
# Node: interviewing_user
# ---------------------------------------------------------------------------

def make_interviewing_node(
    config: ConversationConfig,
) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Create the handler for the linear interview (no URL in the utterance)."""

    def interviewing_user_node(state: dict[str, Any]) -> dict[str, Any]:
        chatbot_state: ChatbotState = state["chatbot_state"]
        text = state.get("text", "")

        try:
            step = require_interview_step(chatbot_state.current_question)
        except UnknownInterviewStepError as exc:
            logger.error("%s: current_question=%r", exc, exc.step)
            return _reply(
                chatbot_state, prompts.UNKNOWN_STEP, success=False, error=prompts.UNKNOWN_STEP
            )

        if step is InterviewStep.OPTIONAL_URL:
            if state.get("normalized", "") in prompts.SKIP_TOKENS:
                return _finish(
                    chatbot_state, None, ExtractionMethod.INTERVIEW,
                    prompts.READY_AFTER_INTERVIEW, state.get("source_id", ""),
                )
            return _reply(
                chatbot_state, prompts.ASK_URL_OR_SKIP, suggested_actions=prompts.SKIP_ACTIONS
            )

        if not text:
            message, actions = prompts.interview_question(
                step, chatbot_state.profile, config, first_time=False
            )
            return _reply(chatbot_state, message, suggested_actions=actions)

        profile_field, next_step = _INTERVIEW_FLOW[step]
        value = text.lower() if step is InterviewStep.BUSINESS_TYPE else text
        profile = chatbot_state.profile.with_field(
            profile_field, value, ConfidenceLevel.HIGH, DataSource.USER_PROVIDED
        )
        successor = replace(chatbot_state, profile=profile, current_question=next_step)
        logger.debug("Interview: %s answered, next %s", step.value, next_step.value)
        message, actions = prompts.interview_question(next_step, profile, config)
        return _reply(successor, message, suggested_actions=actions)

    return interviewing_user_node


# ---------------------------------------------------------------------------
# Node: enriching_with_url
# ---------------------------------------------------------------------------

def make_enriching_node(
    extractor: Extractor,
    config: ConversationConfig,
) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Create the mid-interview URL handler.

    A successful extraction is merged under the interview answers and the
    conversation goes straight to ``READY_TO_GENERATE`` without a
    confirmation queue.  Any failure returns to the interview question that
    was pending.
    """

    def enriching_with_url_node(state: dict[str, Any]) -> dict[str, Any]:
        chatbot_state: ChatbotState = state["chatbot_state"]
        source_id = state.get("source_id", "")
        interviewing = replace(
            chatbot_state, conversation_state=ConversationState.INTERVIEWING_USER
        )

        raw = state.get("detected_url") or chatbot_state.url_detected
        if not raw:
            return _interview_setback(interviewing, prompts.MISSING_URL, config)

        url = _checked_url(raw)
        if url is None:
            logger.info("Rejected malformed enrichment URL %r", raw)
            return _interview_setback(
                replace(interviewing, url_validated=False),
                prompts.INVALID_ENRICHMENT_URL,
                config,
            )

        result = safe_extract(extractor, url)
        events: list[DomainEvent] = [
            UrlDetected(source_id=source_id, url=url, enrichment=True),
            ExtractionCompleted(
                source_id=source_id,
                url=url,
                success=result.success,
                error=result.error,
                enrichment=True,
            ),
        ]

        if not result.success:
            logger.warning("Enrichment from %s failed: %s", url, result.error)
            failed = replace(
                interviewing,
                url_detected=url,
                url_validated=False,
                extraction_error=result.error,
            )
            return _interview_setback(failed, prompts.ENRICHMENT_FAILED, config, events)

        successor = replace(
            chatbot_state,
            extracted_profile=result.profile,
            url_detected=url,
            url_validated=True,
            extraction_error=None,
        )
        return _finish(
            successor, result.profile, ExtractionMethod.MIXED,
            prompts.enriched(url), source_id, events,
        )

    return enriching_with_url_node


# ---------------------------------------------------------------------------
# Node: ready_to_generate
# ---------------------------------------------------------------------------

def ready_to_generate_node(state: dict[str, Any]) -> dict[str, Any]:
    """Terminal state: point the user at the generate button."""
    return _reply(
        state["chatbot_state"],
        prompts.READY_REMINDER,
        suggested_actions=prompts.GENERATE_ACTIONS,
    )
