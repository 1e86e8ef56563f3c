"""Translate guide payloads into domain guide records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from arrsync.domain.guide import GuideCustomFormat, GuideReleaseProfile, PreferredTerms

if TYPE_CHECKING:
    from arrsync.domain.documents import DocumentMapping

    from .schema import CustomFormatPayload, ReleaseProfilePayload

GUIDE_ONLY_PREFIX = "trash_"


def translate_custom_format(
    payload: CustomFormatPayload,
    raw: DocumentMapping,
) -> GuideCustomFormat:
    document = {key: value for key, value in raw.items() if not key.startswith(GUIDE_ONLY_PREFIX)}
    default_score = payload.trash_scores.default if payload.trash_scores else None
    return GuideCustomFormat(
        trash_id=payload.trash_id,
        name=payload.name,
        document=document,
        default_score=default_score,
    )


def translate_release_profile(payload: ReleaseProfilePayload) -> GuideReleaseProfile:
    return GuideReleaseProfile(
        trash_id=payload.trash_id,
        name=payload.name,
        include_preferred_when_renaming=payload.include_preferred_when_renaming,
        required=tuple(term.term for term in payload.required),
        ignored=tuple(term.term for term in payload.ignored),
        preferred=tuple(
            PreferredTerms(score=group.score, terms=tuple(term.term for term in group.terms))
            for group in payload.preferred
        ),
    )
