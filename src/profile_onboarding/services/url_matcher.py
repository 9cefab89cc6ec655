"""Detection and normalization of URLs inside free-form user text.

``detect_url`` tries three patterns in order and returns the first hit:

1. an explicit ``http://`` / ``https://`` URL,
2. a ``www.`` host (re-prefixed with ``https://``),
3. a bare ``label.tld`` host whose TLD is on a short allow-list
   (re-prefixed with ``https://``).

The allow-list keeps ordinary sentences with periods ("e.g. this.") and
email addresses from being mistaken for websites.

All functions are pure and perform no network access.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from profile_onboarding.domain.exceptions import InvalidUrlError

logger = logging.getLogger(__name__)

ALLOWED_BARE_TLDS: tuple[str, ...] = (
    "com", "net", "org", "io", "co", "uk", "us", "ca", "au", "de", "fr", "app", "dev", "tech",
)

_SCHEME_URL = re.compile(r"https?://[^\s]+", re.IGNORECASE)
_WWW_URL = re.compile(r"(?<![\w.@/-])www\.[a-z0-9-]+\.[a-z]{2,}[^\s]*", re.IGNORECASE)
_BARE_DOMAIN = re.compile(
    r"(?<![\w.@/-])"  # not inside an email address or a longer host
    r"(?:[a-z0-9-]+\.)+"
    r"(?:" + "|".join(ALLOWED_BARE_TLDS) + r")"
    r"(?![\w-])",
    re.IGNORECASE,
)

# Sentence punctuation that trails a URL in prose ("see example.com.")
_TRAILING_PUNCTUATION = ".,;:!?)]}>'\""

_HOST_LABEL = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$", re.IGNORECASE)
_IPV4 = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")


def _strip_trailing(candidate: str) -> str:
    return candidate.rstrip(_TRAILING_PUNCTUATION)


def detect_url(text: str | None) -> str | None:
    """Return the first URL-looking substring of *text*, or ``None``.

    Hosts found without a scheme are returned with ``https://`` prefixed.
    """
    if not text or not isinstance(text, str):
        return None

    match = _SCHEME_URL.search(text)
    if match:
        return _strip_trailing(match.group(0))

    match = _WWW_URL.search(text)
    if match:
        return f"https://{_strip_trailing(match.group(0))}"

    match = _BARE_DOMAIN.search(text)
    if match:
        return f"https://{match.group(0)}"

    return None


def normalize_url(url: str) -> str:
    """Prefix ``https://`` when *url* carries no http(s) scheme."""
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        return f"https://{url}"
    return url


def validate_url(url: str) -> str:
    """Check *url* is a structurally valid http(s) URL and return it.

    Raises
    ------
    InvalidUrlError
        When the scheme, host or port is malformed.
    """
    if not url or any(ch.isspace() for ch in url):
        raise InvalidUrlError("URL is empty or contains whitespace", url=url)

    try:
        parts = urlsplit(url)
        # Accessing .port validates it; a bad port raises ValueError.
        parts.port
    except ValueError as exc:
        raise InvalidUrlError(f"Malformed URL: {exc}", url=url) from exc

    if parts.scheme.lower() not in ("http", "https"):
        raise InvalidUrlError(f"Unsupported scheme {parts.scheme!r}", url=url)

    host = parts.hostname or ""
    if not host:
        raise InvalidUrlError("URL has no host", url=url)

    if host == "localhost" or _IPV4.match(host):
        return url
    if host.startswith("[") or ":" in host:
        # IPv6 literal; urlsplit already checked the brackets.
        return url

    try:
        ascii_host = host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise InvalidUrlError(f"Invalid host {host!r}", url=url) from exc

    labels = ascii_host.rstrip(".").split(".")
    if not all(_HOST_LABEL.match(label) for label in labels):
        raise InvalidUrlError(f"Invalid host {host!r}", url=url)
    return url


def is_valid_url_format(url: str) -> bool:
    """Structural URL-syntax check (no network access)."""
    try:
        validate_url(url)
    except InvalidUrlError as exc:
        logger.debug("is_valid_url_format: rejected %r: %s", url, exc)
        return False
    return True
