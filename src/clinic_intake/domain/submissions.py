"""Wizard submissions: validate, number and store them as reviewable drafts."""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from clinic_intake.domain.categories import normalize_category
from clinic_intake.domain.drafts import prepare_procedures
from clinic_intake.domain.errors import (
    IdentifierConflictError,
    NotFoundError,
    ValidationFailedError,
)
from clinic_intake.domain.matching import ClinicQuery, check_duplicates
from clinic_intake.domain.model import (
    ClinicCategory,
    Draft,
    DraftSource,
    DraftStatus,
    SubmissionFlow,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from clinic_intake.domain.matching import DuplicateCheckResult
    from clinic_intake.domain.model import DraftPhoto, DraftProcedure, DraftProvider
    from clinic_intake.domain.ports.unit_of_work import CatalogRepositories, CatalogUnitOfWork

log = getLogger(__name__)

SUBMISSION_PREFIX: Final[str] = "GLW"
DEFAULT_SUBMISSION_ATTEMPTS: Final[int] = 3
_SUBMISSION_SEQUENCE = re.compile(r"-(\d+)$")


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, kw_only=True)
class SubmittedClinic:
    name: str | None = None
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
    google_rating: float | None = None
    google_review_count: int | None = None


@dataclass(slots=True, kw_only=True)
class ClinicSubmission:
    flow: SubmissionFlow
    clinic: SubmittedClinic | None = None
    existing_clinic_id: int | None = None
    submitted_by: str | None = None
    providers: list[DraftProvider] = field(default_factory=list["DraftProvider"])
    procedures: list[DraftProcedure] = field(default_factory=list["DraftProcedure"])
    photos: list[DraftPhoto] = field(default_factory=list["DraftPhoto"])


@dataclass(slots=True, frozen=True, kw_only=True)
class DuplicateWarning:
    clinic_id: int
    clinic_name: str
    address: str | None
    city: str | None
    state: str | None
    confidence: str
    reason: str

    @classmethod
    def from_check(cls, result: DuplicateCheckResult) -> DuplicateWarning | None:
        match = result.primary
        if match is None:
            return None
        return cls(
            clinic_id=match.clinic_id,
            clinic_name=match.clinic_name,
            address=match.address,
            city=match.city,
            state=match.state,
            confidence=match.confidence.value,
            reason=match.reason.value,
        )

    def as_note(self) -> str:
        return f"Potential duplicate detected: {json.dumps(asdict(self), sort_keys=True)}"


@dataclass(slots=True, frozen=True)
class SubmissionReceipt:
    submission_id: str
    draft_id: int
    status: DraftStatus
    duplicate_warning: DuplicateWarning | None = None


def next_submission_id(latest: str | None, *, year: int) -> str:
    """Return the id after ``latest`` in ``GLW-<year>-<NNNN>`` form."""

    sequence = 0
    if latest is not None:
        found = _SUBMISSION_SEQUENCE.search(latest)
        if found is not None:
            sequence = int(found.group(1))
    return f"{SUBMISSION_PREFIX}-{year}-{sequence + 1:04d}"


def validate_submission(submission: ClinicSubmission) -> None:
    missing: list[str] = []
    if submission.flow is SubmissionFlow.NEW_CLINIC:
        if submission.clinic is None:
            missing.append("clinic")
        else:
            clinic = submission.clinic
            missing.extend(
                f"clinic.{name}"
                for name in ("name", "address", "city", "state", "category")
                if not (getattr(clinic, name) or "").strip()
            )
    elif submission.existing_clinic_id is None:
        missing.append("existing_clinic_id")

    missing.extend(
        f"providers[{index}].name"
        for index, provider in enumerate(submission.providers)
        if not provider.name.strip()
    )
    missing.extend(
        f"procedures[{index}].name"
        for index, procedure in enumerate(submission.procedures)
        if not procedure.name.strip()
    )
    if missing:
        raise ValidationFailedError(
            f"Submission is incomplete: {', '.join(missing)}",
            missing_fields=missing,
        )


def submit_clinic(
    submission: ClinicSubmission,
    *,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    now: Callable[[], datetime] = _utcnow,
    max_attempts: int = DEFAULT_SUBMISSION_ATTEMPTS,
) -> SubmissionReceipt:
    """Store a wizard submission as a ``pending_review`` draft.

    New-clinic submissions are checked for duplicates first; a hit never blocks the
    submission, it is recorded in the draft notes and returned as a warning.
    """

    validate_submission(submission)
    attempt = 1
    while True:
        try:
            return _submit_once(submission, unit_of_work_factory=unit_of_work_factory, now=now)
        except IdentifierConflictError:
            if attempt >= max_attempts:
                raise
            log.warning("Submission id collided; retrying (attempt %d)", attempt + 1)
            attempt += 1


def _submit_once(
    submission: ClinicSubmission,
    *,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    now: Callable[[], datetime],
) -> SubmissionReceipt:
    timestamp = now()
    new_draft: Draft | None = None
    warning: DuplicateWarning | None = None
    if submission.flow is SubmissionFlow.NEW_CLINIC:
        new_draft = _draft_for_new_clinic(submission)
        warning = _detect_duplicate(new_draft, unit_of_work_factory=unit_of_work_factory)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        prefix = f"{SUBMISSION_PREFIX}-{timestamp.year}-"
        submission_id = next_submission_id(
            repositories.drafts.latest_submission_id(prefix),
            year=timestamp.year,
        )

        if new_draft is not None:
            draft = new_draft
        else:
            draft = _draft_for_existing_clinic(submission, repositories)

        draft.submission_id = submission_id
        draft.status = DraftStatus.PENDING_REVIEW
        draft.source = DraftSource.WIZARD
        draft.submission_flow = submission.flow
        draft.submitted_by = submission.submitted_by
        draft.notes = warning.as_note() if warning is not None else None
        draft.created_at = timestamp
        draft.updated_at = timestamp
        draft.providers = list(submission.providers)
        draft.procedures = list(submission.procedures)
        draft.photos = list(submission.photos)
        prepare_procedures(draft.procedures)

        repositories.drafts.add(draft)
        uow.commit()

    if draft.id is None:
        raise RuntimeError("Draft store did not assign an id")
    if warning is not None:
        log.info(
            "Submission %s looks like clinic %s (%s, %s)",
            submission_id,
            warning.clinic_id,
            warning.reason,
            warning.confidence,
        )
    log.info("Stored submission %s as draft %s", submission_id, draft.id)
    return SubmissionReceipt(
        submission_id=submission_id,
        draft_id=draft.id,
        status=draft.status,
        duplicate_warning=warning,
    )


def _detect_duplicate(
    draft: Draft,
    *,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
) -> DuplicateWarning | None:
    # read-only transaction, kept apart from the one that stores the draft
    with unit_of_work_factory() as uow:
        result = check_duplicates(ClinicQuery.from_draft(draft), catalog=uow.repositories.clinics)
    return DuplicateWarning.from_check(result)


def _draft_for_new_clinic(submission: ClinicSubmission) -> Draft:
    clinic = submission.clinic
    if clinic is None or clinic.name is None:
        raise ValidationFailedError("Clinic details are required", missing_fields=("clinic",))
    return Draft(
        clinic_name=clinic.name.strip(),
        address=clinic.address,
        city=clinic.city,
        state=clinic.state,
        zip_code=clinic.zip_code,
        website=clinic.website,
        phone=clinic.phone,
        email=clinic.email,
        latitude=clinic.latitude,
        longitude=clinic.longitude,
        place_ref=clinic.place_ref,
        category=normalize_category(clinic.category).value,
        google_rating=clinic.google_rating,
        google_review_count=clinic.google_review_count,
    )


def _draft_for_existing_clinic(
    submission: ClinicSubmission,
    repositories: CatalogRepositories,
) -> Draft:
    clinic_id = submission.existing_clinic_id
    if clinic_id is None:
        raise ValidationFailedError(
            "An existing clinic id is required", missing_fields=("existing_clinic_id",)
        )
    entry = repositories.clinics.get_entry(clinic_id)
    if entry is None:
        raise NotFoundError(f"Clinic {clinic_id} not found")
    metadata = repositories.place_metadata.get_for_clinic(clinic_id)
    category = metadata.category if metadata is not None and metadata.category else None

    # submitted contact details become merge updates; the clinic name is never changed
    update = submission.clinic or SubmittedClinic()
    return Draft(
        clinic_name=entry.name,
        address=update.address or entry.address,
        city=update.city or entry.city,
        state=update.state or entry.state,
        zip_code=update.zip_code,
        website=update.website,
        phone=update.phone,
        email=update.email,
        latitude=update.latitude,
        longitude=update.longitude,
        place_ref=update.place_ref,
        category=category or ClinicCategory.OTHER.value,
        google_rating=update.google_rating,
        google_review_count=update.google_review_count,
        duplicate_clinic_id=clinic_id,
    )
