"""Extraction collaborator: turn a URL into a candidate ``ExtractedProfile``.

The conversation only depends on ``BaseExtractor.extract(url)``, which must
return an ``ExtractionResult`` and never raise.  Two adapters are provided:

* ``FunctionExtractor`` wraps any ``Callable[[str], ExtractionResult]``;
* ``LLMProfileExtractor`` downloads the page with ``httpx``, reduces it to
  visible text with BeautifulSoup, and asks a LangChain chat model to fill
  the ``ExtractedProfileOutput`` schema via ``with_structured_output()``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import urljoin, urlsplit

import httpx
from bs4 import BeautifulSoup
from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field

from profile_onboarding.domain.enums import ConfidenceLevel, ImageType
from profile_onboarding.domain.exceptions import ExtractionError
from profile_onboarding.domain.values import (
    ExtractedProfile,
    ExtractionResult,
    ImageAsset,
    ProductItem,
    SocialLinks,
    Testimonial,
)
from profile_onboarding.infrastructure.config import ExtractionConfig

logger = logging.getLogger(__name__)

NAMELESS_PROFILE_ERROR = "Could not extract enough information from this URL"
OFFLINE_ERROR = "offline mode, URL extraction is disabled"


# ===================================================================== #
#  Extractor interface                                                   #
# ===================================================================== #

class BaseExtractor(ABC):
    """Given a URL, produce a candidate profile.

    Implementations must return within a bounded time and report every
    failure through ``ExtractionResult(success=False, error=...)``.
    """

    @abstractmethod
    def extract(self, url: str) -> ExtractionResult:
        """Extract a candidate profile from *url*."""

    def __call__(self, url: str) -> ExtractionResult:
        return self.extract(url)

    def close(self) -> None:
        """Release resources held by the extractor (none by default)."""

    def __enter__(self) -> BaseExtractor:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class FunctionExtractor(BaseExtractor):
    """Adapter for a plain ``url -> ExtractionResult`` callable."""

    def __init__(self, fn: Callable[[str], ExtractionResult]) -> None:
        self._fn = fn

    def extract(self, url: str) -> ExtractionResult:
        return self._fn(url)


class OfflineExtractor(BaseExtractor):
    """Reports every URL as failed without touching the network."""

    def __init__(self, reason: str = OFFLINE_ERROR) -> None:
        self.reason = reason

    def extract(self, url: str) -> ExtractionResult:
        logger.info("OfflineExtractor: skipping %s", url)
        return ExtractionResult.failed(self.reason)


# ===================================================================== #
#  Reachability pre-check                                                #
# ===================================================================== #

def is_url_reachable(
    url: str,
    timeout: float = 5.0,
    client: httpx.Client | None = None,
) -> bool:
    """HEAD *url* with a short deadline.

    Any status below 500 counts as reachable (a 403 page can often still be
    scraped); 5xx responses and transport errors do not.
    """
    try:
        if client is not None:
            response = client.head(url, timeout=timeout, follow_redirects=True)
        else:
            response = httpx.head(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as exc:
        logger.debug("is_url_reachable: %s unreachable: %s", url, exc)
        return False
    return response.status_code < 500


# ===================================================================== #
#  Page reduction                                                        #
# ===================================================================== #

_NOISE_TAGS = ("script", "style", "noscript", "svg", "iframe", "template")

_SOCIAL_HOSTS: dict[str, str] = {
    "instagram.com": "instagram",
    "facebook.com": "facebook",
    "twitter.com": "twitter",
    "x.com": "twitter",
    "linkedin.com": "linkedin",
    "youtube.com": "youtube",
    "tiktok.com": "tiktok",
}

_MAX_IMAGES = 20


@dataclass(frozen=True)
class PageContent:
    """Visible material pulled out of one HTML page."""

    url: str
    title: str = ""
    meta_description: str = ""
    text: str = ""
    links: tuple[str, ...] = ()
    images: tuple[ImageAsset, ...] = ()
    theme_color: str | None = None
    og_image: str | None = None
    icon: str | None = None


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    return str(tag.get("content") or "").strip()


def _classify_image(src: str, alt: str) -> ImageType:
    hint = f"{src} {alt}".lower()
    if "logo" in hint:
        return ImageType.LOGO
    if "hero" in hint or "banner" in hint:
        return ImageType.HERO
    if "team" in hint or "staff" in hint:
        return ImageType.TEAM
    if "product" in hint:
        return ImageType.PRODUCT
    if "icon" in hint:
        return ImageType.ICON
    return ImageType.GALLERY


def parse_page(html: str, url: str, max_chars: int = 12_000) -> PageContent:
    """Reduce *html* to the text, links and images the model needs."""
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""
    if not title:
        title = _meta_content(soup, property="og:title")

    meta_description = _meta_content(soup, name="description") or _meta_content(
        soup, property="og:description"
    )
    og_image = _meta_content(soup, property="og:image")
    og_image = urljoin(url, og_image) if og_image else None
    theme_color = _meta_content(soup, name="theme-color") or None

    icon_tag = soup.find("link", rel=lambda rel: bool(rel) and "icon" in rel)
    icon = urljoin(url, str(icon_tag["href"])) if icon_tag and icon_tag.get("href") else None

    links = tuple(
        urljoin(url, str(a["href"])) for a in soup.find_all("a", href=True)
    )

    images: list[ImageAsset] = []
    for img in soup.find_all("img", src=True):
        src = urljoin(url, str(img["src"]))
        alt = str(img.get("alt") or "")
        images.append(
            ImageAsset(url=src, type=_classify_image(src, alt), alt=alt or None, source_page=url)
        )
        if len(images) >= _MAX_IMAGES:
            break

    for tag in soup(_NOISE_TAGS):
        tag.decompose()
    body = soup.body or soup
    text = " ".join(body.get_text(" ", strip=True).split())

    return PageContent(
        url=url,
        title=title,
        meta_description=meta_description,
        text=text[:max_chars],
        links=links,
        images=tuple(images),
        theme_color=theme_color,
        og_image=og_image,
        icon=icon,
    )


def social_links_from(links: tuple[str, ...]) -> SocialLinks | None:
    """Pick the first link per social network out of *links*."""
    found: dict[str, str] = {}
    for link in links:
        host = (urlsplit(link).hostname or "").lower()
        if host.startswith("www."):
            host = host[4:]
        network = _SOCIAL_HOSTS.get(host)
        if network is not None and network not in found:
            found[network] = link
    if not found:
        return None
    return SocialLinks(**found)


# ===================================================================== #
#  Structured output schema                                              #
# ===================================================================== #

class ProductOutput(BaseModel):
    name: str
    description: str | None = None
    price: float | None = None


class TestimonialOutput(BaseModel):
    name: str
    text: str
    rating: float | None = Field(default=None, ge=0, le=5)


class ExtractedProfileOutput(BaseModel):
    """Structured output schema for LLM profile extraction."""

    name: str | None = Field(default=None, description="Business name, or null if unknown")
    business_type: str | None = Field(
        default=None,
        description=(
            "One lower-case category: restaurant, beauty, fitness, healthcare, "
            "ecommerce, startup, education, realestate, agency, portfolio, service, other"
        ),
    )
    description: str | None = Field(default=None, description="One or two sentence summary")
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    services: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    products: list[ProductOutput] = Field(default_factory=list)
    testimonials: list[TestimonialOutput] = Field(default_factory=list)
    primary_color: str | None = Field(default=None, description="Hex brand color")
    secondary_color: str | None = Field(default=None, description="Hex accent color")
    about_content: str | None = Field(default=None, description="About-us text, verbatim")
    confidence: Literal["high", "medium", "low"] = Field(
        default="medium",
        description="How sure you are that this page describes one business",
    )


# ===================================================================== #
#  Prompt                                                                #
# ===================================================================== #

_EXTRACTION_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You extract a structured business profile from the text of a web "
            "page or social media profile. Only report facts stated on the page. "
            "Leave a field null (or a list empty) when the page does not say it. "
            "If the page does not describe a single business, leave the name null.",
        ),
        (
            "human",
            "## Page\n"
            "**URL**: {url}\n"
            "**Title**: {title}\n"
            "**Meta description**: {meta_description}\n\n"
            "## Visible text\n"
            "{text}\n\n"
            "Extract the business profile.",
        ),
    ]
)


# ===================================================================== #
#  LLMProfileExtractor                                                   #
# ===================================================================== #

class LLMProfileExtractor(BaseExtractor):
    """Fetch a page over HTTP and classify it with a LangChain chat model.

    Parameters
    ----------
    model:
        A LangChain chat model supporting ``with_structured_output``.
    config:
        Timeouts and limits; defaults to ``ExtractionConfig()``.
    client:
        Optional ``httpx.Client`` (inject one with a ``MockTransport`` in tests).
    prompt:
        Optional custom ``ChatPromptTemplate`` to replace the default.
    """

    def __init__(
        self,
        model: BaseChatModel,
        config: ExtractionConfig | None = None,
        client: httpx.Client | None = None,
        prompt: ChatPromptTemplate | None = None,
    ) -> None:
        self.model = model
        self.config = config or ExtractionConfig()
        self.config.validate()
        # Only a client built here is closed by close(); an injected one
        # belongs to the caller.
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(self.config.fetch_timeout),
            headers={"User-Agent": self.config.user_agent},
            follow_redirects=True,
        )
        self._prompt = prompt or _EXTRACTION_PROMPT
        self._chain = self._build_chain()

    def close(self) -> None:
        """Close the HTTP client if this extractor created it."""
        if self._owns_client:
            self._client.close()

    def __del__(self) -> None:
        """Best-effort cleanup of the HTTP client."""
        try:
            self.close()
        except Exception:
            pass

    def _build_chain(self) -> Any:
        structured_model = self.model.with_structured_output(ExtractedProfileOutput)
        return self._prompt | structured_model

    def fetch(self, url: str) -> PageContent:
        """Download *url* and reduce it to ``PageContent``.

        Raises
        ------
        ExtractionError
            On transport errors or non-2xx responses.
        """
        try:
            response = self._client.get(url, timeout=self.config.fetch_timeout)
        except httpx.HTTPError as exc:
            raise ExtractionError(f"Could not download page: {exc}", url=url) from exc
        if response.status_code >= 400:
            raise ExtractionError(
                f"Page returned HTTP {response.status_code}",
                url=url,
                details={"status_code": response.status_code},
            )
        return parse_page(response.text, str(response.url), self.config.max_page_chars)

    def extract(self, url: str) -> ExtractionResult:
        """Extract a candidate profile from *url*; never raises."""
        logger.info("LLMProfileExtractor: extracting from %s", url)
        try:
            if self.config.check_reachability and not is_url_reachable(
                url, self.config.reachability_timeout, self._client
            ):
                raise ExtractionError("URL is not reachable", url=url)
            page = self.fetch(url)
            output: ExtractedProfileOutput = self._chain.invoke(
                {
                    "url": page.url,
                    "title": page.title or "N/A",
                    "meta_description": page.meta_description or "N/A",
                    "text": page.text or "No visible text",
                }
            )
        except ExtractionError as exc:
            logger.warning("LLMProfileExtractor: %s: %s", url, exc)
            return ExtractionResult.failed(str(exc))
        except Exception as exc:
            logger.warning("LLMProfileExtractor: extraction failed for %s: %s", url, exc)
            return ExtractionResult.failed(f"Failed to extract from URL: {exc}")

        if not output.name:
            return ExtractionResult.failed(NAMELESS_PROFILE_ERROR)

        profile = self._to_profile(output, page)
        logger.info(
            "LLMProfileExtractor: extracted %r (%s, %d services)",
            profile.name,
            profile.business_type,
            len(profile.services or ()),
        )
        return ExtractionResult.ok(profile)

    @staticmethod
    def _to_profile(output: ExtractedProfileOutput, page: PageContent) -> ExtractedProfile:
        logo = next((img.url for img in page.images if img.type is ImageType.LOGO), page.icon)
        hero = page.og_image or next(
            (img.url for img in page.images if img.type is ImageType.HERO), None
        )
        gallery = tuple(img.url for img in page.images if img.type is ImageType.GALLERY)
        return ExtractedProfile(
            name=output.name,
            business_type=output.business_type.strip().lower() if output.business_type else None,
            description=output.description or page.meta_description or None,
            phone=output.phone,
            email=output.email,
            address=output.address,
            city=output.city,
            services=tuple(output.services) or None,
            products=tuple(
                ProductItem(name=p.name, description=p.description, price=p.price)
                for p in output.products
            ) or None,
            features=tuple(output.features) or None,
            testimonials=tuple(
                Testimonial(name=t.name, text=t.text, rating=t.rating)
                for t in output.testimonials
            ) or None,
            social_links=social_links_from(page.links),
            source_url=page.url,
            logo=logo,
            hero_image=hero,
            gallery_images=gallery or None,
            primary_color=output.primary_color or page.theme_color,
            secondary_color=output.secondary_color,
            confidence=ConfidenceLevel(output.confidence),
            raw_text=page.text or None,
            about_content=output.about_content,
            scraped_images=page.images or None,
        )
