"""Domain exceptions for the profile-onboarding package.

All package-specific exceptions inherit from ``ProfileOnboardingError`` so
callers can catch the full family with a single ``except`` clause when needed.
The conversation entry point never lets these escape; it converts them into
an unsuccessful ``ChatbotResponse`` carrying a resumable state.
"""

from __future__ import annotations

from typing import Any


class ProfileOnboardingError(Exception):
    """Base exception for all profile-onboarding errors."""

    def __init__(self, message: str = "", details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class InvalidUrlError(ProfileOnboardingError):
    """Raised when a URL fails structural validation."""

    def __init__(
        self,
        message: str = "Invalid URL",
        url: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url


class ExtractionError(ProfileOnboardingError):
    """Raised inside extraction adapters when a page cannot be turned into a profile.

    Adapters catch it at their boundary and report it through a failed
    ``ExtractionResult``.
    """

    def __init__(
        self,
        message: str = "Extraction failed",
        url: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url


class UnknownInterviewStepError(ProfileOnboardingError):
    """Raised when the interview is asked to handle an unrecognized step.

    This indicates a state-machine bug, not a user error.
    """

    def __init__(
        self,
        message: str = "Unknown interview question",
        step: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.step = step


class StateSerializationError(ProfileOnboardingError):
    """Raised when persisted conversation state cannot be decoded."""

    def __init__(
        self,
        message: str = "Cannot decode conversation state",
        key: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.key = key
