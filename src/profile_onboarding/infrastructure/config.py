"""Configuration dataclasses for the profile-onboarding package.

Each config is a plain ``dataclass`` with a ``validate()`` method that raises
``ValueError`` on invalid combinations.  Configs are **frozen** so they can be
shared between conversations without risking silent mutation.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from typing import Any

from profile_onboarding.domain.enums import ProfileField
from profile_onboarding.domain.values import TEXT_FIELDS


# ===================================================================== #
#  Conversation Configuration                                            #
# ===================================================================== #

@dataclass(frozen=True)
class ConversationConfig:
    """Parameters governing the onboarding dialogue.

    Attributes
    ----------
    confirmation_fields:
        Extracted fields the user must explicitly confirm or correct, in the
        order they are asked.  Fields missing from the extraction are skipped.
        Only free-text fields (``TEXT_FIELDS``) are allowed, since a typed
        correction replaces the value verbatim.
    business_type_suggestions:
        Quick replies offered when asking for the business category.
    summary_max_services:
        Number of services listed in the extraction summary.
    summary_description_chars:
        Length of the description preview in the extraction summary.
    """

    confirmation_fields: tuple[ProfileField, ...] = (
        ProfileField.NAME,
        ProfileField.BUSINESS_TYPE,
    )
    business_type_suggestions: tuple[str, ...] = (
        "restaurant",
        "beauty salon",
        "e-commerce",
        "agency",
        "portfolio",
    )
    summary_max_services: int = 5
    summary_description_chars: int = 150

    def validate(self) -> None:
        """Raise ``ValueError`` if any field is out of valid range."""
        if len(set(self.confirmation_fields)) != len(self.confirmation_fields):
            raise ValueError(
                f"confirmation_fields must not repeat, got {self.confirmation_fields}"
            )
        structured = [f.value for f in self.confirmation_fields if f not in TEXT_FIELDS]
        if structured:
            raise ValueError(
                f"confirmation_fields must be free-text fields, got {structured}"
            )
        if self.summary_max_services < 1:
            raise ValueError(
                f"summary_max_services must be >= 1, got {self.summary_max_services}"
            )
        if self.summary_description_chars < 1:
            raise ValueError(
                "summary_description_chars must be >= 1, "
                f"got {self.summary_description_chars}"
            )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["confirmation_fields"] = [f.value for f in self.confirmation_fields]
        data["business_type_suggestions"] = list(self.business_type_suggestions)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        if "confirmation_fields" in filtered:
            filtered["confirmation_fields"] = tuple(
                ProfileField(v) for v in filtered["confirmation_fields"]
            )
        if "business_type_suggestions" in filtered:
            filtered["business_type_suggestions"] = tuple(filtered["business_type_suggestions"])
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  Extraction Configuration                                              #
# ===================================================================== #

@dataclass(frozen=True)
class ExtractionConfig:
    """Parameters for the HTTP/LLM extraction adapter.

    Attributes
    ----------
    check_reachability:
        Issue a HEAD request before fetching the page.
    reachability_timeout:
        Deadline in seconds for the HEAD request.
    fetch_timeout:
        Deadline in seconds for downloading the page.
    max_page_chars:
        Visible text sent to the model is cut to this length.
    user_agent:
        ``User-Agent`` header sent with every request.
    """

    check_reachability: bool = True
    reachability_timeout: float = 5.0
    fetch_timeout: float = 15.0
    max_page_chars: int = 12_000
    user_agent: str = "profile-onboarding/0.1 (+https://github.com/profile-onboarding)"

    def validate(self) -> None:
        """Raise ``ValueError`` if any field is out of valid range."""
        if self.reachability_timeout <= 0:
            raise ValueError(
                f"reachability_timeout must be > 0, got {self.reachability_timeout}"
            )
        if self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be > 0, got {self.fetch_timeout}")
        if self.max_page_chars < 1:
            raise ValueError(f"max_page_chars must be >= 1, got {self.max_page_chars}")
        if not self.user_agent:
            raise ValueError("user_agent must be non-empty")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtractionConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  JSON loader                                                           #
# ===================================================================== #

_CONFIG_MAP: dict[str, type] = {
    "conversation": ConversationConfig,
    "extraction": ExtractionConfig,
}


def load_config_from_json(json_str: str) -> dict[str, Any]:
    """Parse a JSON string into a dict of typed config objects.

    The JSON is expected to be an object whose top-level keys correspond to
    config section names (``conversation``, ``extraction``).  Unknown
    sections are preserved as raw dicts.

    Returns a dict mapping section name -> config instance (or raw dict).
    """
    raw = json.loads(json_str)
    if not isinstance(raw, dict):
        raise ValueError("Top-level JSON must be an object")
    result: dict[str, Any] = {}
    for section, data in raw.items():
        cls = _CONFIG_MAP.get(section)
        if cls is not None and isinstance(data, dict):
            result[section] = cls.from_dict(data)
        else:
            result[section] = data
    return result
