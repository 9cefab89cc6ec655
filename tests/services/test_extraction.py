"""Tests for the HTTP/LLM extraction adapter."""

from __future__ import annotations

import httpx
import pytest

from profile_onboarding.domain.enums import ConfidenceLevel, ImageType
from profile_onboarding.domain.values import ExtractionResult
from profile_onboarding.infrastructure.config import ExtractionConfig
from profile_onboarding.services.extraction import (
    NAMELESS_PROFILE_ERROR,
    OFFLINE_ERROR,
    ExtractedProfileOutput,
    FunctionExtractor,
    LLMProfileExtractor,
    OfflineExtractor,
    is_url_reachable,
    parse_page,
    social_links_from,
)
from profile_onboarding.testing import MockStructuredChatModel

PAGE = """
<html>
<head>
  <title>Acme Bakery</title>
  <meta name="description" content="Fresh bread daily">
  <meta property="og:image" content="/img/hero.jpg">
  <meta name="theme-color" content="#aa5500">
  <link rel="icon" href="/favicon.ico">
</head>
<body>
  <script>var tracking = 1;</script>
  <h1>Welcome to Acme</h1>
  <p>Sourdough   and pastries.</p>
  <img src="/img/logo.png" alt="Acme logo">
  <img src="/img/cake.jpg" alt="Chocolate cake">
  <a href="https://www.instagram.com/acmebakery">Instagram</a>
  <a href="https://facebook.com/acme">Facebook</a>
  <a href="/contact">Contact</a>
</body>
</html>
"""


def _client(status: int = 200, head_status: int = 200, body: str = PAGE) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "HEAD":
            return httpx.Response(head_status)
        return httpx.Response(status, text=body, headers={"content-type": "text/html"})

    return httpx.Client(transport=httpx.MockTransport(handler))


def _down_client() -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestParsePage:

    def test_title_and_meta(self) -> None:
        page = parse_page(PAGE, "https://acme.com")
        assert page.title == "Acme Bakery"
        assert page.meta_description == "Fresh bread daily"
        assert page.theme_color == "#aa5500"

    def test_urls_are_absolute(self) -> None:
        page = parse_page(PAGE, "https://acme.com")
        assert page.og_image == "https://acme.com/img/hero.jpg"
        assert page.icon == "https://acme.com/favicon.ico"
        assert "https://acme.com/contact" in page.links

    def test_text_drops_scripts_and_collapses_whitespace(self) -> None:
        page = parse_page(PAGE, "https://acme.com")
        assert "Welcome to Acme" in page.text
        assert "Sourdough and pastries." in page.text
        assert "tracking" not in page.text

    def test_text_is_capped(self) -> None:
        page = parse_page(PAGE, "https://acme.com", max_chars=10)
        assert len(page.text) == 10

    def test_images_are_classified(self) -> None:
        page = parse_page(PAGE, "https://acme.com")
        assert [img.type for img in page.images] == [ImageType.LOGO, ImageType.GALLERY]
        assert page.images[0].url == "https://acme.com/img/logo.png"
        assert page.images[1].alt == "Chocolate cake"


class TestSocialLinks:

    def test_known_networks(self) -> None:
        links = social_links_from(
            (
                "https://www.instagram.com/acmebakery",
                "https://x.com/acme",
                "https://acme.com/about",
            )
        )
        assert links is not None
        assert links.instagram == "https://www.instagram.com/acmebakery"
        assert links.twitter == "https://x.com/acme"
        assert links.facebook is None

    def test_first_link_per_network_wins(self) -> None:
        links = social_links_from(("https://facebook.com/a", "https://facebook.com/b"))
        assert links is not None
        assert links.facebook == "https://facebook.com/a"

    def test_no_social_links(self) -> None:
        assert social_links_from(("https://acme.com/",)) is None


class TestIsUrlReachable:

    @pytest.mark.parametrize("status", [200, 204, 403, 404])
    def test_below_500_is_reachable(self, status: int) -> None:
        assert is_url_reachable("https://acme.com", client=_client(head_status=status))

    @pytest.mark.parametrize("status", [500, 503])
    def test_server_error_is_unreachable(self, status: int) -> None:
        assert not is_url_reachable("https://acme.com", client=_client(head_status=status))

    def test_transport_error_is_unreachable(self) -> None:
        assert not is_url_reachable("https://acme.com", client=_down_client())


class TestFunctionExtractor:

    def test_wraps_callable(self) -> None:
        extractor = FunctionExtractor(lambda url: ExtractionResult.failed(f"no {url}"))
        assert extractor("https://a.com").error == "no https://a.com"

    def test_close_is_a_no_op(self) -> None:
        with FunctionExtractor(lambda url: ExtractionResult.failed("x")) as extractor:
            assert not extractor("https://a.com").success


class TestOfflineExtractor:

    def test_every_url_fails(self) -> None:
        result = OfflineExtractor().extract("https://acme.com")
        assert not result.success
        assert result.error == OFFLINE_ERROR

    def test_custom_reason(self) -> None:
        assert OfflineExtractor("no network").extract("https://acme.com").error == "no network"


class TestLLMProfileExtractor:

    def test_successful_extraction(self) -> None:
        model = MockStructuredChatModel(
            structured_responses=[
                ExtractedProfileOutput(
                    name="Acme Bakery",
                    business_type=" Restaurant ",
                    services=["Bread", "Cakes"],
                    confidence="high",
                )
            ]
        )
        extractor = LLMProfileExtractor(model, client=_client())
        result = extractor.extract("https://acme.com")

        assert result.success
        profile = result.profile
        assert profile is not None
        assert profile.name == "Acme Bakery"
        assert profile.business_type == "restaurant"
        assert profile.services == ("Bread", "Cakes")
        assert profile.confidence is ConfidenceLevel.HIGH
        assert profile.description == "Fresh bread daily"
        assert profile.logo == "https://acme.com/img/logo.png"
        assert profile.hero_image == "https://acme.com/img/hero.jpg"
        assert profile.gallery_images == ("https://acme.com/img/cake.jpg",)
        assert profile.primary_color == "#aa5500"
        assert profile.social_links is not None
        assert profile.social_links.instagram == "https://www.instagram.com/acmebakery"
        assert profile.source_url is not None
        assert profile.source_url.startswith("https://acme.com")
        assert "Welcome to Acme" in (profile.raw_text or "")
        assert profile.products is None

    def test_prompt_contains_page_material(self) -> None:
        model = MockStructuredChatModel(
            structured_responses=[ExtractedProfileOutput(name="Acme Bakery")]
        )
        LLMProfileExtractor(model, client=_client()).extract("https://acme.com")
        assert model.call_count == 1
        prompt = model.prompts[0].to_string()
        assert "Acme Bakery" in prompt
        assert "Fresh bread daily" in prompt
        assert "Welcome to Acme" in prompt

    def test_nameless_result_fails(self) -> None:
        model = MockStructuredChatModel(structured_responses=[ExtractedProfileOutput()])
        result = LLMProfileExtractor(model, client=_client()).extract("https://acme.com")
        assert not result.success
        assert result.error == NAMELESS_PROFILE_ERROR

    def test_http_error_fails(self) -> None:
        model = MockStructuredChatModel(structured_responses=[ExtractedProfileOutput(name="A")])
        result = LLMProfileExtractor(model, client=_client(status=404)).extract(
            "https://acme.com"
        )
        assert not result.success
        assert result.error == "Page returned HTTP 404"
        assert model.call_count == 0

    def test_unreachable_fails(self) -> None:
        model = MockStructuredChatModel(structured_responses=[ExtractedProfileOutput(name="A")])
        result = LLMProfileExtractor(model, client=_client(head_status=503)).extract(
            "https://acme.com"
        )
        assert not result.success
        assert result.error == "URL is not reachable"

    def test_download_error_without_precheck(self) -> None:
        model = MockStructuredChatModel(structured_responses=[ExtractedProfileOutput(name="A")])
        config = ExtractionConfig(check_reachability=False)
        result = LLMProfileExtractor(model, config=config, client=_down_client()).extract(
            "https://acme.com"
        )
        assert not result.success
        assert result.error is not None
        assert result.error.startswith("Could not download page")

    def test_model_error_fails(self) -> None:
        model = MockStructuredChatModel(structured_responses=[RuntimeError("rate limited")])
        result = LLMProfileExtractor(model, client=_client()).extract("https://acme.com")
        assert not result.success
        assert result.error == "Failed to extract from URL: rate limited"

    def test_invalid_config_rejected(self) -> None:
        model = MockStructuredChatModel(structured_responses=[ExtractedProfileOutput(name="A")])
        with pytest.raises(ValueError):
            LLMProfileExtractor(model, config=ExtractionConfig(fetch_timeout=0), client=_client())

    def test_close_releases_own_client(self) -> None:
        model = MockStructuredChatModel(structured_responses=[ExtractedProfileOutput(name="A")])
        extractor = LLMProfileExtractor(model)
        client = extractor._client
        assert not client.is_closed
        extractor.close()
        assert client.is_closed

    def test_context_manager_closes_own_client(self) -> None:
        model = MockStructuredChatModel(structured_responses=[ExtractedProfileOutput(name="A")])
        with LLMProfileExtractor(model) as extractor:
            client = extractor._client
        assert client.is_closed

    def test_injected_client_left_open(self) -> None:
        model = MockStructuredChatModel(structured_responses=[ExtractedProfileOutput(name="A")])
        client = _client()
        with LLMProfileExtractor(model, client=client) as extractor:
            assert extractor.extract("https://acme.com").success
        assert not client.is_closed
        client.close()
