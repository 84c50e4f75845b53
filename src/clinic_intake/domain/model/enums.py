"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class DraftStatus(StrEnum):
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    MERGED = "merged"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES

    @property
    def rank(self) -> int:
        """Lifecycle position; a draft may only move to an equal or higher rank."""

        if self is DraftStatus.DRAFT:
            return 0
        if self is DraftStatus.PENDING_REVIEW:
            return 1
        return 2


_TERMINAL_STATUSES = frozenset({DraftStatus.APPROVED, DraftStatus.REJECTED, DraftStatus.MERGED})


class DraftSource(StrEnum):
    MANUAL = "manual"
    WIZARD = "wizard"
    BULK = "bulk"


class SubmissionFlow(StrEnum):
    NEW_CLINIC = "new_clinic"
    ADD_TO_EXISTING = "add_to_existing"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {Confidence.HIGH: 3, Confidence.MEDIUM: 2, Confidence.LOW: 1}


class PhotoSource(StrEnum):
    """Which photos an approval copies into the catalog."""

    USER = "user"
    GOOGLE = "google"
    BOTH = "both"


class RatingSource(StrEnum):
    GOOGLE = "google"
    MANUAL = "manual"


class PhotoOrigin(StrEnum):
    USER = "user"
    GOOGLE = "google"


class ClinicCategory(StrEnum):
    PLASTIC_SURGERY = "Plastic Surgery"
    MEDSPA_AESTHETICS = "Medspa / Aesthetics"
    MEDICAL = "Medical"
    DERMATOLOGY = "Dermatology"
    OTHER = "Other"
