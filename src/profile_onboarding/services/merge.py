"""Merge engine: reconcile an extracted candidate, a working profile and corrections.

Priority, lowest to highest (each step overwrites value, confidence and
provenance set by an earlier one):

1. fields of the extracted candidate -- ``structured-data`` with the
   candidate's aggregate confidence (``medium`` when it has none);
2. fields of the working profile -- the value always wins; the confidence and
   provenance the working profile recorded for the field are kept, and
   default to ``high`` / ``user-provided`` when none was recorded;
3. confirmed correction patches, in list order -- ``user-provided`` / ``high``.

Finally the overall confidence is derived from the per-field labels.

``merge_profiles`` is pure: identical inputs give an identical output and it
performs no I/O.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from profile_onboarding.domain.enums import (
    ConfidenceLevel,
    DataSource,
    ExtractionMethod,
    ProfileField,
)
from profile_onboarding.domain.values import (
    FIELD_ATTRIBUTES,
    ConfirmationPatch,
    ExtractedProfile,
    WorkingProfile,
)

HIGH_RATIO_THRESHOLD = 0.7
MEDIUM_RATIO_THRESHOLD = 0.4


def compute_overall_confidence(
    confidence: Mapping[ProfileField, ConfidenceLevel],
    fallback: ConfidenceLevel = ConfidenceLevel.NONE,
) -> ConfidenceLevel:
    """Derive the profile-wide confidence from per-field labels.

    ``ratio = #high / #(not none)``; ``high`` above 0.7, ``medium`` above 0.4,
    otherwise ``low``.  With no rated field the *fallback* is returned.
    """
    rated = [level for level in confidence.values() if level is not ConfidenceLevel.NONE]
    if not rated:
        return fallback
    high = sum(1 for level in rated if level is ConfidenceLevel.HIGH)
    ratio = high / len(rated)
    if ratio > HIGH_RATIO_THRESHOLD:
        return ConfidenceLevel.HIGH
    if ratio > MEDIUM_RATIO_THRESHOLD:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def merge_profiles(
    extracted: ExtractedProfile | None = None,
    user_provided: WorkingProfile | None = None,
    patches: Sequence[ConfirmationPatch] | None = None,
    extraction_method: ExtractionMethod | None = None,
) -> WorkingProfile:
    """Reconcile the three sources into one ``WorkingProfile``.

    Parameters
    ----------
    extracted:
        Candidate returned by the extraction collaborator, if any.
    user_provided:
        The profile built so far in the conversation.
    patches:
        Ordered user corrections; only ``confirmed`` patches apply.
    extraction_method:
        Stamped on the result.  Defaults to the method already recorded on
        *user_provided*.
    """
    values: dict[ProfileField, object] = {}
    confidence: dict[ProfileField, ConfidenceLevel] = {}
    sources: dict[ProfileField, DataSource] = {}

    if extracted is not None:
        seeded = extracted.confidence or ConfidenceLevel.MEDIUM
        for profile_field in extracted.present_fields():
            values[profile_field] = extracted.get(profile_field)
            confidence[profile_field] = seeded
            sources[profile_field] = DataSource.STRUCTURED_DATA

    if user_provided is not None:
        for profile_field in user_provided.present_fields():
            values[profile_field] = user_provided.get(profile_field)
            confidence[profile_field] = user_provided.confidence.get(
                profile_field, ConfidenceLevel.HIGH
            )
            sources[profile_field] = user_provided.data_source.get(
                profile_field, DataSource.USER_PROVIDED
            )

    for patch in patches or ():
        if not patch.confirmed:
            continue
        values[patch.field] = patch.new_value
        confidence[patch.field] = ConfidenceLevel.HIGH
        sources[patch.field] = DataSource.USER_PROVIDED

    if extraction_method is None and user_provided is not None:
        extraction_method = user_provided.extraction_method

    # Rebuild maps in declaration order so equal inputs give equal outputs.
    ordered = [f for f in ProfileField if f in values]
    merged_confidence = {f: confidence[f] for f in ordered}
    previous_overall = (
        user_provided.overall_confidence if user_provided is not None else ConfidenceLevel.NONE
    )
    return WorkingProfile(
        **{FIELD_ATTRIBUTES[f]: values[f] for f in ordered},
        confidence=merged_confidence,
        overall_confidence=compute_overall_confidence(merged_confidence, previous_overall),
        data_source={f: sources[f] for f in ordered},
        extraction_method=extraction_method,
    )
