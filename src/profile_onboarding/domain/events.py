"""Domain events for the profile-onboarding conversation.

Every event is a frozen dataclass inheriting from ``DomainEvent``.  Graph
nodes emit events while processing a turn; the orchestrator publishes them on
an optional ``EventBus`` so that listeners (analytics, audit logs, UIs) can
react without the state machine knowing about them.

All events carry a ``timestamp`` and a ``source_id`` identifying the
conversation that produced them.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .enums import ConfidenceLevel, ConversationState, ExtractionMethod, ProfileField
from .values import ConfirmationPatch

# ---------------------------------------------------------------------------
# Base event
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    timestamp: float = field(default_factory=time.time)
    source_id: str = ""


# ---------------------------------------------------------------------------
# Turn lifecycle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TurnProcessed(DomainEvent):
    """One user utterance was processed."""

    previous_state: ConversationState | None = None
    next_state: ConversationState | None = None
    success: bool = True


# ---------------------------------------------------------------------------
# URL extraction
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UrlDetected(DomainEvent):
    """A URL was found in an utterance and passed format validation."""

    url: str = ""
    enrichment: bool = False


@dataclass(frozen=True)
class ExtractionCompleted(DomainEvent):
    """The extraction collaborator returned (successfully or not)."""

    url: str = ""
    success: bool = False
    error: str | None = None
    enrichment: bool = False


# ---------------------------------------------------------------------------
# Confirmation queue
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldConfirmed(DomainEvent):
    """The user accepted an extracted value."""

    profile_field: ProfileField | None = None


@dataclass(frozen=True)
class FieldCorrected(DomainEvent):
    """The user replaced an extracted value."""

    patch: ConfirmationPatch | None = None


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProfileReady(DomainEvent):
    """The conversation reached its terminal state."""

    extraction_method: ExtractionMethod | None = None
    overall_confidence: ConfidenceLevel = ConfidenceLevel.NONE
