"""Services layer: URL matcher, merge engine, summary and extraction adapters."""

from profile_onboarding.services.extraction import (
    BaseExtractor,
    ExtractedProfileOutput,
    FunctionExtractor,
    LLMProfileExtractor,
    OfflineExtractor,
    PageContent,
    is_url_reachable,
    parse_page,
    social_links_from,
)
from profile_onboarding.services.merge import compute_overall_confidence, merge_profiles
from profile_onboarding.services.summary import (
    format_business_type,
    format_field_name,
    generate_extraction_summary,
)
from profile_onboarding.services.url_matcher import (
    ALLOWED_BARE_TLDS,
    detect_url,
    is_valid_url_format,
    normalize_url,
    validate_url,
)

__all__ = [
    # url matcher
    "ALLOWED_BARE_TLDS",
    "detect_url",
    "normalize_url",
    "validate_url",
    "is_valid_url_format",
    # merge
    "merge_profiles",
    "compute_overall_confidence",
    # summary
    "generate_extraction_summary",
    "format_business_type",
    "format_field_name",
    # extraction
    "BaseExtractor",
    "FunctionExtractor",
    "OfflineExtractor",
    "LLMProfileExtractor",
    "ExtractedProfileOutput",
    "PageContent",
    "parse_page",
    "social_links_from",
    "is_url_reachable",
]
