"""Rich-based rendering for the terminal chat front-end."""

from __future__ import annotations

from typing import IO, Any

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from profile_onboarding.domain.enums import ProfileField
from profile_onboarding.domain.values import ChatbotResponse, WorkingProfile
from profile_onboarding.services.summary import format_field_name

_LONG_FIELDS = frozenset({ProfileField.RAW_TEXT, ProfileField.SCRAPED_IMAGES})


def _cell(value: Any, limit: int = 80) -> str:
    if isinstance(value, tuple):
        text = ", ".join(str(getattr(item, "name", item)) for item in value)
    else:
        text = str(value)
    return text if len(text) <= limit else f"{text[:limit]}..."


class ChatConsole:
    """Prints bot turns and the final profile.

    Parameters
    ----------
    file:
        Output stream; defaults to stdout.
    """

    def __init__(self, file: IO[str] | None = None) -> None:
        self.console = Console(file=file)

    def ask(self, prompt: str = "[bold cyan]you[/] > ") -> str:
        return self.console.input(prompt)

    def show_response(self, response: ChatbotResponse) -> None:
        style = "green" if response.success else "yellow"
        body = response.message or response.error or ""
        self.console.print(Panel(Markdown(body), title="bot", title_align="left", border_style=style))
        if response.suggested_actions:
            actions = "  ".join(f"[{a}]" for a in response.suggested_actions)
            self.console.print(Text(actions, style="dim"))

    def show_profile(self, profile: WorkingProfile) -> None:
        table = Table(title="Business profile")
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_column("Confidence")
        table.add_column("Source")
        for profile_field in profile.present_fields():
            if profile_field in _LONG_FIELDS:
                continue
            source = profile.source_for(profile_field)
            table.add_row(
                format_field_name(profile_field),
                _cell(profile.get(profile_field)),
                profile.confidence_for(profile_field).value,
                source.value if source is not None else "-",
            )
        self.console.print(table)
        method = profile.extraction_method.value if profile.extraction_method else "-"
        self.console.print(
            f"overall confidence: [bold]{profile.overall_confidence.value}[/]  method: {method}"
        )

    def error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/]")
