"""Draft lifecycle services: create, edit, transition, validate, list."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from clinic_intake.domain.categories import normalize_category
from clinic_intake.domain.errors import NotFoundError, ValidationFailedError
from clinic_intake.domain.model import DraftStatus
from clinic_intake.domain.normalization import average_price

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from clinic_intake.domain.model import (
        Draft,
        DraftPhoto,
        DraftProcedure,
        DraftProvider,
        DraftSource,
    )
    from clinic_intake.domain.ports.unit_of_work import CatalogUnitOfWork

    type UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]

log = getLogger(__name__)

REQUIRED_FOR_APPROVAL: Final[tuple[str, ...]] = ("category",)
RECOMMENDED_FOR_APPROVAL: Final[tuple[str, ...]] = ("website", "phone", "email", "place_ref")
EDITABLE_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "clinic_name",
        "address",
        "city",
        "state",
        "zip_code",
        "website",
        "phone",
        "email",
        "latitude",
        "longitude",
        "place_ref",
        "category",
        "google_rating",
        "google_review_count",
        "duplicate_clinic_id",
        "notes",
    }
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True)
class ApprovalValidation:
    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    missing_fields: tuple[str, ...] = ()


@dataclass(slots=True, kw_only=True)
class DraftChanges:
    """Partial edit of a draft.

    ``fields`` overwrites scalar attributes; a child collection given here replaces the
    stored one wholesale, ``None`` leaves it untouched.
    """

    fields: Mapping[str, object] = field(default_factory=dict[str, object])
    providers: list[DraftProvider] | None = None
    procedures: list[DraftProcedure] | None = None
    photos: list[DraftPhoto] | None = None


def validate_for_approval(draft: Draft) -> ApprovalValidation:
    """Check whether ``draft`` carries what approval needs.

    Only the category is mandatory. Missing contact fields and place reference are
    reported as warnings.
    """

    missing = tuple(name for name in REQUIRED_FOR_APPROVAL if _is_blank(getattr(draft, name)))
    warnings = tuple(
        f"Missing recommended field: {name}"
        for name in RECOMMENDED_FOR_APPROVAL
        if _is_blank(getattr(draft, name))
    )
    return ApprovalValidation(
        is_valid=not missing,
        errors=tuple(f"Missing required field: {name}" for name in missing),
        warnings=warnings,
        missing_fields=missing,
    )


def ensure_approvable(draft: Draft) -> None:
    draft.ensure_open()
    validation = validate_for_approval(draft)
    if not validation.is_valid:
        raise ValidationFailedError(
            f"Draft {draft.id} is not ready for approval: {'; '.join(validation.errors)}",
            missing_fields=validation.missing_fields,
        )


def prepare_procedures(procedures: Iterable[DraftProcedure]) -> None:
    for procedure in procedures:
        if procedure.average_cost is None:
            procedure.average_cost = average_price(None, procedure.price_min, procedure.price_max)


def create_draft(
    draft: Draft,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    now: Callable[[], datetime] = _utcnow,
) -> Draft:
    """Persist a new draft with its child collections and return it with its id."""

    if draft.id is not None:
        raise ValidationFailedError("New drafts must not carry an id")
    if draft.status.is_terminal:
        raise ValidationFailedError(f"New drafts cannot start as {draft.status}")

    timestamp = now()
    draft.created_at = draft.created_at or timestamp
    draft.updated_at = timestamp
    if draft.category is not None:
        draft.category = normalize_category(draft.category).value
    prepare_procedures(draft.procedures)

    with unit_of_work_factory() as uow:
        uow.repositories.drafts.add(draft)
        uow.commit()

    log.info("Created draft %s (%s) for %r", draft.id, draft.source, draft.clinic_name)
    return draft


def get_draft(draft_id: int, *, unit_of_work_factory: UnitOfWorkFactory) -> Draft:
    with unit_of_work_factory() as uow:
        draft = uow.repositories.drafts.get(draft_id)
        if draft is None:
            raise NotFoundError(f"Draft {draft_id} not found")
        return draft


def list_drafts(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    status: DraftStatus | None = None,
    source: DraftSource | None = None,
    submitted_by: str | None = None,
    limit: int | None = None,
) -> list[Draft]:
    """List drafts newest first, optionally filtered."""

    if limit is not None and limit < 1:
        raise ValidationFailedError("limit must be positive")
    with unit_of_work_factory() as uow:
        return uow.repositories.drafts.list(
            status=status,
            source=source,
            submitted_by=submitted_by,
            limit=limit,
        )


def update_draft(
    draft_id: int,
    changes: DraftChanges,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    now: Callable[[], datetime] = _utcnow,
) -> Draft:
    """Apply ``changes`` to an open draft.

    Raises:
        NotFoundError: the draft does not exist.
        DraftAlreadyResolvedError: the draft is terminal.
        ValidationFailedError: ``changes`` names fields that cannot be edited.
    """

    unknown = sorted(set(changes.fields) - EDITABLE_FIELDS)
    if unknown:
        raise ValidationFailedError(f"Fields cannot be edited: {', '.join(unknown)}")

    with unit_of_work_factory() as uow:
        draft = uow.repositories.drafts.get(draft_id, for_update=True)
        if draft is None:
            raise NotFoundError(f"Draft {draft_id} not found")
        draft.ensure_open()

        for name, value in changes.fields.items():
            setattr(draft, name, value)
        if "category" in changes.fields and draft.category is not None:
            draft.category = normalize_category(draft.category).value
        if changes.providers is not None:
            draft.providers = list(changes.providers)
        if changes.procedures is not None:
            prepare_procedures(changes.procedures)
            draft.procedures = list(changes.procedures)
        if changes.photos is not None:
            draft.photos = list(changes.photos)
        draft.updated_at = now()
        uow.commit()

    log.info("Updated draft %s: %s", draft_id, ", ".join(sorted(changes.fields)) or "children")
    return draft


def update_status(
    draft_id: int,
    status: DraftStatus,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    reviewer_id: str | None = None,
    now: Callable[[], datetime] = _utcnow,
) -> Draft:
    """Move a draft to ``status``; terminal statuses stamp reviewer and review time."""

    with unit_of_work_factory() as uow:
        draft = uow.repositories.drafts.get(draft_id, for_update=True)
        if draft is None:
            raise NotFoundError(f"Draft {draft_id} not found")
        draft.transition_to(status, at=now(), reviewer=reviewer_id)
        uow.commit()

    log.info("Draft %s is now %s", draft_id, status)
    return draft


def reject_draft(
    draft_id: int,
    *,
    reviewer_id: str,
    unit_of_work_factory: UnitOfWorkFactory,
    now: Callable[[], datetime] = _utcnow,
) -> Draft:
    return update_status(
        draft_id,
        DraftStatus.REJECTED,
        unit_of_work_factory=unit_of_work_factory,
        reviewer_id=reviewer_id,
        now=now,
    )


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()
