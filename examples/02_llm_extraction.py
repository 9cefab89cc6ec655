#!/usr/bin/env python3
"""Example 02: URL extraction through a LangChain chat model.

Demonstrates:
- Building an LLMProfileExtractor around any BaseChatModel
- Serving the page from an httpx.MockTransport so the example runs offline
- Swapping in a real provider with --provider

Run:
    PYTHONPATH=src python examples/02_llm_extraction.py
    PYTHONPATH=src python examples/02_llm_extraction.py --provider anthropic
"""

from __future__ import annotations

import argparse

import httpx

from profile_onboarding.orchestrator import ConversationOrchestrator
from profile_onboarding.services.extraction import ExtractedProfileOutput, LLMProfileExtractor
from profile_onboarding.testing import MockStructuredChatModel

PAGE = """
<html>
  <head>
    <title>Acme Bakery | Sourdough since 1952</title>
    <meta name="description" content="Family bakery in Springfield.">
    <meta name="theme-color" content="#c0392b">
  </head>
  <body>
    <img src="/img/logo.png" alt="Acme logo">
    <h1>Acme Bakery</h1>
    <p>Bread, cakes and catering. Call 555-0100.</p>
    <a href="https://instagram.com/acmebakery">Instagram</a>
  </body>
</html>
"""


def _offline_client() -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "HEAD":
            return httpx.Response(200)
        return httpx.Response(200, text=PAGE, headers={"content-type": "text/html"})

    return httpx.Client(transport=httpx.MockTransport(handler))


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--provider", choices=["mock", "anthropic", "openai"], default="mock")
    parser.add_argument("--url", default="https://acmebakery.com")
    args = parser.parse_args()

    if args.provider == "mock":
        model = MockStructuredChatModel(
            structured_responses=[
                ExtractedProfileOutput(
                    name="Acme Bakery",
                    business_type="Bakery",
                    description="Family bakery in Springfield.",
                    phone="555-0100",
                    city="Springfield",
                    services=["Bread", "Cakes", "Catering"],
                    confidence="high",
                )
            ]
        )
        extractor = LLMProfileExtractor(model, client=_offline_client())
    elif args.provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        extractor = LLMProfileExtractor(ChatAnthropic(model="claude-sonnet-4-5-20250929"))
    else:
        from langchain_openai import ChatOpenAI

        extractor = LLMProfileExtractor(ChatOpenAI(model="gpt-4o-mini"))

    orchestrator = ConversationOrchestrator(extractor)
    response = orchestrator.process_turn(args.url)
    print(response.message)
    print()

    state = response.state
    if state is not None and state.extracted_profile is not None:
        extracted = state.extracted_profile
        print(f"logo:          {extracted.logo}")
        print(f"primary color: {extracted.primary_color}")
        print(f"social links:  {extracted.social_links}")
        print(f"pending:       {[f.value for f in state.pending_confirmations]}")


if __name__ == "__main__":
    main()
