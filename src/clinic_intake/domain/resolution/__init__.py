"""Draft approval: create-or-merge into the catalog."""

from __future__ import annotations

from .allocation import ClinicIdAllocator
from .engine import ApprovalOptions, ApprovalResult, ResolutionEngine, approve_draft
from .merge import MERGEABLE_FIELDS, merge_contact_details
from .photos import (
    CombinedPhotos,
    PhotoPolicy,
    PlacePhotos,
    SelectedPhoto,
    UserPhotos,
    photo_policy_for,
)
from .ratings import LiveRating, ManualRating, RatingPolicy, RatingSnapshot, rating_policy_for

__all__ = [
    "MERGEABLE_FIELDS",
    "ApprovalOptions",
    "ApprovalResult",
    "ClinicIdAllocator",
    "CombinedPhotos",
    "LiveRating",
    "ManualRating",
    "PhotoPolicy",
    "PlacePhotos",
    "RatingPolicy",
    "RatingSnapshot",
    "ResolutionEngine",
    "SelectedPhoto",
    "UserPhotos",
    "approve_draft",
    "merge_contact_details",
    "photo_policy_for",
    "rating_policy_for",
]
