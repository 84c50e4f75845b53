"""Collapse free-form clinic categories into the five catalog buckets."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from clinic_intake.domain.model.enums import ClinicCategory

if TYPE_CHECKING:
    from collections.abc import Iterable

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\s]")
_TRAILING_PLURAL = re.compile(r"s$")


def _fold(text: str) -> str:
    folded = _WHITESPACE.sub(" ", text.lower().strip())
    folded = _NON_WORD.sub("", folded)
    return _TRAILING_PLURAL.sub("", folded)


def _keywords(*words: str) -> tuple[str, ...]:
    return tuple(_fold(word) for word in words)


# Ordered: dermatology is checked before medspa so "skin care spa" stays dermatology.
_RULES: tuple[tuple[ClinicCategory, tuple[str, ...]], ...] = (
    (
        ClinicCategory.PLASTIC_SURGERY,
        _keywords(
            "plastic surgeon",
            "plastic surgery",
            "cosmetic surgeon",
            "cosmetic surgery",
            "plastic",
            "reconstructive surgery",
            "reconstructive surgeon",
        ),
    ),
    (
        ClinicCategory.DERMATOLOGY,
        _keywords("dermatolog", "skin care", "skincare", "skin clinic"),
    ),
    (
        ClinicCategory.MEDSPA_AESTHETICS,
        _keywords(
            "med spa",
            "medical spa",
            "medspa",
            "aesthetic",
            "aesthetics",
            "beauty clinic",
            "beauty center",
            "spa",
        ),
    ),
    (
        ClinicCategory.MEDICAL,
        _keywords(
            "hospital",
            "medical center",
            "health center",
            "healthcare",
            "surgical center",
            "surgery center",
            "doctor",
            "physician",
            "nurse practitioner",
            "family medicine",
            "primary care",
            "urgent care",
            "medical clinic",
            "health clinic",
        ),
    ),
)


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def normalize_category(category: str | None) -> ClinicCategory:
    """Map a free-form category onto one of the catalog buckets.

    Matching is keyword based and tolerant of case, punctuation and a trailing plural
    ``s``. A bare mention of "clinic" counts as medical; anything else is ``Other``.
    """

    if not category or not category.strip():
        return ClinicCategory.OTHER
    # bucket names map to themselves
    for bucket in ClinicCategory:
        if category.strip() == bucket.value:
            return bucket

    folded = _fold(category)
    if not folded:
        return ClinicCategory.OTHER

    for bucket, keywords in _RULES:
        if _contains_any(folded, keywords):
            return bucket
    if "clinic" in folded:
        return ClinicCategory.MEDICAL
    return ClinicCategory.OTHER
