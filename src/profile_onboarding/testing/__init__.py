"""Test doubles for the extraction collaborator and the chat model."""

from profile_onboarding.testing.fakes import FailingExtractor, RaisingExtractor, StaticExtractor
from profile_onboarding.testing.mock_llm import MockStructuredChatModel

__all__ = [
    "StaticExtractor",
    "FailingExtractor",
    "RaisingExtractor",
    "MockStructuredChatModel",
]
