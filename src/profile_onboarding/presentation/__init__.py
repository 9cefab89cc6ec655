"""Terminal presentation helpers."""

from profile_onboarding.presentation.console import ChatConsole

__all__ = ["ChatConsole"]
