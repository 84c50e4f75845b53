"""Field-level merge of a draft into an existing clinic."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

    from clinic_intake.domain.model import Clinic, Draft

# draft attribute -> clinic attribute; the clinic name is never overwritten
MERGEABLE_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("address", "address"),
    ("phone", "phone"),
    ("website", "website"),
    ("place_ref", "place_ref"),
    ("latitude", "latitude"),
    ("longitude", "longitude"),
)


def merge_contact_details(clinic: Clinic, draft: Draft, *, at: datetime) -> tuple[str, ...]:
    """Copy every present draft value onto ``clinic`` and return the changed names.

    Absent (``None`` or blank) draft values leave the clinic untouched. ``updated_at``
    always advances so the merge is visible to concurrent writers.
    """

    changed: list[str] = []
    for draft_field, clinic_field in MERGEABLE_FIELDS:
        value = getattr(draft, draft_field)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        if getattr(clinic, clinic_field) != value:
            setattr(clinic, clinic_field, value)
            changed.append(clinic_field)
    clinic.updated_at = at
    return tuple(changed)
