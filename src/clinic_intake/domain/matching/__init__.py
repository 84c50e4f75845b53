"""Duplicate detection against the committed catalog."""

from __future__ import annotations

from .contracts import (
    CatalogEntry,
    CatalogField,
    ClinicQuery,
    DuplicateCheckResult,
    MatchCandidate,
    MatchReason,
)
from .engine import check_duplicates
from .strategies import (
    DEFAULT_STRATEGIES,
    MatchStrategy,
    match_name_address,
    match_name_locality,
    match_phone,
    match_place_ref,
    match_website,
)

__all__ = [
    "DEFAULT_STRATEGIES",
    "CatalogEntry",
    "CatalogField",
    "ClinicQuery",
    "DuplicateCheckResult",
    "MatchCandidate",
    "MatchReason",
    "MatchStrategy",
    "check_duplicates",
    "match_name_address",
    "match_name_locality",
    "match_phone",
    "match_place_ref",
    "match_website",
]
