"""Public domain model surface."""

from __future__ import annotations

from clinic_intake.domain.model.catalog import (
    Category,
    Clinic,
    ClinicPhoto,
    Location,
    PlaceMetadata,
    Procedure,
    Provider,
    Specialty,
)
from clinic_intake.domain.model.drafts import Draft, DraftPhoto, DraftProcedure, DraftProvider
from clinic_intake.domain.model.enums import (
    ClinicCategory,
    Confidence,
    DraftSource,
    DraftStatus,
    PhotoOrigin,
    PhotoSource,
    RatingSource,
    SubmissionFlow,
)

__all__ = [
    "Category",
    "Clinic",
    "ClinicCategory",
    "ClinicPhoto",
    "Confidence",
    "Draft",
    "DraftPhoto",
    "DraftProcedure",
    "DraftProvider",
    "DraftSource",
    "DraftStatus",
    "Location",
    "PhotoOrigin",
    "PhotoSource",
    "PlaceMetadata",
    "Procedure",
    "Provider",
    "RatingSource",
    "Specialty",
    "SubmissionFlow",
]
