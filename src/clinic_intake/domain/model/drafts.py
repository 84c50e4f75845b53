"""Reviewable submissions that propose catalog changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from clinic_intake.domain.errors import DraftAlreadyResolvedError, InvalidStatusTransitionError
from clinic_intake.domain.model.enums import DraftSource, DraftStatus, PhotoOrigin, SubmissionFlow

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class DraftProvider:
    id: int | None = None
    draft_id: int | None = None
    name: str
    specialty: str | None = None
    photo_url: str | None = None


@dataclass(eq=False, kw_only=True)
class DraftProcedure:
    id: int | None = None
    draft_id: int | None = None
    name: str
    category: str | None = None
    average_cost: float | None = None
    price_min: float | None = None
    price_max: float | None = None
    price_unit: str | None = None
    provider_name: str | None = None


@dataclass(eq=False, kw_only=True)
class DraftPhoto:
    id: int | None = None
    draft_id: int | None = None
    url: str
    photo_type: str = "clinic"
    display_order: int = 0
    is_primary: bool = False
    caption: str | None = None
    origin: PhotoOrigin = PhotoOrigin.USER


@dataclass(eq=False, kw_only=True)
class Draft:
    """A pending proposal to create a clinic or to update an existing one.

    ``duplicate_clinic_id`` is the duplicate-link: when set, approval merges into that
    clinic instead of creating a new one.
    """

    id: int | None = None
    submission_id: str | None = None

    clinic_name: str
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    website: str | None = None
    phone: str | None = None
    email: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    place_ref: str | None = None
    category: str | None = None

    # cached place rating, used when live lookups are unavailable
    google_rating: float | None = None
    google_review_count: int | None = None

    duplicate_clinic_id: int | None = None

    status: DraftStatus = DraftStatus.DRAFT
    source: DraftSource = DraftSource.MANUAL
    submission_flow: SubmissionFlow | None = None
    submitted_by: str | None = None
    notes: str | None = None

    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int | None = None

    providers: list[DraftProvider] = field(default_factory=list[DraftProvider])
    procedures: list[DraftProcedure] = field(default_factory=list[DraftProcedure])
    photos: list[DraftPhoto] = field(default_factory=list[DraftPhoto])

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_merge(self) -> bool:
        return self.duplicate_clinic_id is not None

    def ensure_open(self) -> None:
        if self.is_terminal:
            raise DraftAlreadyResolvedError(
                f"Draft {self.id} is already {self.status}; it cannot be changed"
            )

    def transition_to(
        self,
        status: DraftStatus,
        *,
        at: datetime,
        reviewer: str | None = None,
    ) -> None:
        """Move the draft forward in its lifecycle.

        Terminal drafts are never revived and non-terminal drafts never move back.
        Reviewer and review timestamp are stamped when a terminal status is reached.
        """

        self.ensure_open()
        if status.rank < self.status.rank:
            raise InvalidStatusTransitionError(
                f"Draft {self.id} cannot move from {self.status} back to {status}"
            )
        self.status = status
        if reviewer is not None:
            self.reviewed_by = reviewer
        if status.is_terminal:
            self.reviewed_at = at
        self.updated_at = at
