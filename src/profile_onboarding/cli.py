"""Command-line interface for profile-onboarding.

Subcommands import their heavier dependencies lazily so that
``profile-onboarding detect-url`` and ``info`` stay fast.

Entry point
-----------
The ``main()`` function is registered as a console script in
``pyproject.toml``::

    [project.scripts]
    profile-onboarding = "profile_onboarding.cli:main"

Usage examples::

    profile-onboarding chat --offline
    profile-onboarding chat --provider anthropic --state-file session.json
    profile-onboarding detect-url "we are at acmebakery.com"
    profile-onboarding info
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from profile_onboarding.services.extraction import BaseExtractor

_PROVIDERS: dict[str, tuple[str, str, str]] = {
    # name -> (module, class, default model)
    "anthropic": ("langchain_anthropic", "ChatAnthropic", "claude-sonnet-4-5-20250929"),
    "openai": ("langchain_openai", "ChatOpenAI", "gpt-4o-mini"),
}


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="profile-onboarding",
        description=(
            "Conversational business-profile onboarding -- chat in the terminal, "
            "detect URLs, inspect the installation."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        default=False,
        help="Show package version and exit.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available subcommands")

    # -- chat --------------------------------------------------------------
    chat_parser = subparsers.add_parser(
        "chat",
        help="Run an interactive onboarding conversation.",
        description="Chat with the onboarding bot until the profile is ready.",
    )
    chat_parser.add_argument(
        "--offline",
        action="store_true",
        default=False,
        help="Do not fetch URLs; every URL falls back to the manual interview.",
    )
    chat_parser.add_argument(
        "--provider",
        type=str,
        default="anthropic",
        choices=sorted(_PROVIDERS),
        help="LangChain chat model provider used for URL extraction.",
    )
    chat_parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model name for the provider (default depends on provider).",
    )
    chat_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with 'conversation' and/or 'extraction' sections.",
    )
    chat_parser.add_argument(
        "--state-file",
        type=str,
        default=None,
        help="Load the conversation state from this JSON file and save it after every turn.",
    )

    # -- detect-url --------------------------------------------------------
    detect_parser = subparsers.add_parser(
        "detect-url",
        help="Print the URL found in a piece of text.",
    )
    detect_parser.add_argument("text", type=str, help="Free-form text.")

    # -- info --------------------------------------------------------------
    subparsers.add_parser(
        "info",
        help="Show version and dependency status.",
    )

    return parser


# =========================================================================
# Subcommand handlers
# =========================================================================

def _load_configs(path: str | None) -> dict[str, Any]:
    if path is None:
        return {}
    from profile_onboarding.infrastructure.config import load_config_from_json

    return load_config_from_json(Path(path).read_text(encoding="utf-8"))


def _build_extractor(args: argparse.Namespace, configs: dict[str, Any]) -> BaseExtractor:
    import importlib

    from profile_onboarding.services.extraction import LLMProfileExtractor, OfflineExtractor

    if args.offline:
        return OfflineExtractor()

    module_name, class_name, default_model = _PROVIDERS[args.provider]
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RuntimeError(
            f"Provider {args.provider!r} needs the {module_name.replace('_', '-')} "
            "package; install it or use --offline"
        ) from exc
    model = getattr(module, class_name)(model=args.model or default_model)
    return LLMProfileExtractor(model, config=configs.get("extraction"))


def _cmd_chat(args: argparse.Namespace) -> int:
    """Handle the ``chat`` subcommand."""
    from profile_onboarding.orchestrator import ConversationOrchestrator
    from profile_onboarding.presentation.console import ChatConsole

    console = ChatConsole()
    configs = _load_configs(args.config)
    extractor = _build_extractor(args, configs)
    try:
        orchestrator = ConversationOrchestrator(extractor, config=configs.get("conversation"))
        state = _chat_loop(console, orchestrator, args.state_file)
    finally:
        extractor.close()

    if state is not None and state.is_ready:
        console.show_profile(state.profile)
    return 0


def _chat_loop(console: Any, orchestrator: Any, state_path: str | None) -> Any:
    """Run turns until the profile is ready or the user leaves; return the last state."""
    from profile_onboarding.infrastructure.serialization import from_json, to_json

    state_file = Path(state_path) if state_path else None
    if state_file is not None and state_file.exists():
        state = from_json(state_file.read_text(encoding="utf-8"))
        console.console.print(f"[dim]Resumed from {state_file}[/]")
    else:
        greeting = orchestrator.greet()
        state = greeting.state
        console.show_response(greeting)

    while state is not None and not state.is_ready:
        try:
            utterance = console.ask()
        except EOFError:
            break
        if utterance.strip().lower() in ("quit", "exit"):
            break
        response = orchestrator.process_turn(utterance, state)
        console.show_response(response)
        state = response.state
        if state_file is not None and state is not None:
            state_file.write_text(to_json(state), encoding="utf-8")
    return state


def _cmd_detect_url(args: argparse.Namespace) -> int:
    """Handle the ``detect-url`` subcommand."""
    from profile_onboarding.services.url_matcher import detect_url

    url = detect_url(args.text)
    if url is None:
        print("No URL found.", file=sys.stderr)
        return 1
    print(url)
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    """Handle the ``info`` subcommand."""
    from profile_onboarding import __version__

    print(f"profile-onboarding v{__version__}")
    print()

    deps = {
        "langgraph": "Conversation state graph (required)",
        "langchain_core": "Chat model interface and prompts (required)",
        "pydantic": "Structured extraction schema (required)",
        "httpx": "Page download and reachability check (required)",
        "bs4": "HTML to text reduction (required)",
        "rich": "Terminal chat rendering (required)",
        "langchain_anthropic": "Anthropic chat model for URL extraction",
        "langchain_openai": "OpenAI chat model for URL extraction",
    }

    print("Dependencies:")
    for pkg, desc in deps.items():
        try:
            mod = __import__(pkg)
            version = getattr(mod, "__version__", "unknown")
            print(f"  [installed] {pkg} {version} -- {desc}")
        except ImportError:
            print(f"  [missing]   {pkg} -- {desc}")

    print()
    print("Conversation states:")
    from profile_onboarding.domain.enums import ConversationState

    for conversation_state in ConversationState:
        print(f"  - {conversation_state.value}")
    return 0


# =========================================================================
# Main entry point
# =========================================================================

def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.version:
        from profile_onboarding import __version__
        print(f"profile-onboarding {__version__}")
        sys.exit(0)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    handlers: dict[str, Any] = {
        "chat": _cmd_chat,
        "detect-url": _cmd_detect_url,
        "info": _cmd_info,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        exit_code = 130
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
