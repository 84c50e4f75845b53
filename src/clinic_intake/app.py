"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from clinic_intake.adapters.google_places import GooglePlacesDataClient
from clinic_intake.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from clinic_intake.config import MissingConfigurationError, get_places_config, get_resolution_config
from clinic_intake.domain import drafts as draft_store
from clinic_intake.domain.matching import ClinicQuery, check_duplicates
from clinic_intake.domain.ports.unit_of_work import CatalogUnitOfWork
from clinic_intake.domain.resolution import ResolutionEngine
from clinic_intake.domain.submissions import submit_clinic

if TYPE_CHECKING:
    from clinic_intake.config import ResolutionConfig
    from clinic_intake.domain.matching import DuplicateCheckResult
    from clinic_intake.domain.model import Draft, DraftSource, DraftStatus
    from clinic_intake.domain.ports.places import PlaceDataClient
    from clinic_intake.domain.resolution import ApprovalOptions, ApprovalResult
    from clinic_intake.domain.submissions import ClinicSubmission, SubmissionReceipt

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def _unit_of_work_factory(override: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if override is not None:
        return override
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_places_client() -> PlaceDataClient | None:
    """Return the live place-data client, or ``None`` when no API key is configured."""

    try:
        config = get_places_config()
    except MissingConfigurationError as exc:
        log.warning("Google Places disabled, live ratings and photos fall back: %s", exc)
        return None
    return GooglePlacesDataClient(config=config)


def check_clinic_duplicates(
    query: ClinicQuery,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> DuplicateCheckResult:
    """Look ``query`` up in the committed catalog."""

    factory = _unit_of_work_factory(unit_of_work_factory)
    with factory() as uow:
        return check_duplicates(query, catalog=uow.repositories.clinics)


def check_draft_duplicates(
    draft_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> DuplicateCheckResult:
    """Run duplicate detection with the fields of a stored draft."""

    factory = _unit_of_work_factory(unit_of_work_factory)
    draft = draft_store.get_draft(draft_id, unit_of_work_factory=factory)
    result = check_clinic_duplicates(ClinicQuery.from_draft(draft), unit_of_work_factory=factory)
    log.info(
        "Draft %s: %d duplicate candidate(s), confidence=%s",
        draft_id,
        len(result.matches),
        result.confidence,
    )
    return result


def submit_wizard_clinic(
    submission: ClinicSubmission,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SubmissionReceipt:
    factory = _unit_of_work_factory(unit_of_work_factory)
    return submit_clinic(submission, unit_of_work_factory=factory)


def list_clinic_drafts(
    *,
    status: DraftStatus | None = None,
    source: DraftSource | None = None,
    submitted_by: str | None = None,
    limit: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[Draft]:
    factory = _unit_of_work_factory(unit_of_work_factory)
    return draft_store.list_drafts(
        unit_of_work_factory=factory,
        status=status,
        source=source,
        submitted_by=submitted_by,
        limit=limit,
    )


def approve_clinic_draft(
    draft_id: int,
    options: ApprovalOptions,
    *,
    places: PlaceDataClient | None = None,
    resolution: ResolutionConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ApprovalResult:
    """Approve a draft with the configured adapters.

    Without an explicit ``places`` client the Google Places adapter is used when an API
    key is configured.
    """

    factory = _unit_of_work_factory(unit_of_work_factory)
    settings = resolution or get_resolution_config()
    engine = ResolutionEngine(
        unit_of_work_factory=factory,
        places=places if places is not None else build_places_client(),
        max_attempts=settings.max_attempts,
        google_photo_limit=settings.google_photo_limit,
        combined_google_photo_limit=settings.combined_google_photo_limit,
        fallback_to_first_provider=settings.fallback_to_first_provider,
    )
    log.info(
        "Approving draft %s: reviewer=%s, photos=%s, rating=%s",
        draft_id,
        options.reviewer_id,
        options.photo_source,
        options.rating_source,
    )
    return engine.approve(draft_id, options)


def reject_clinic_draft(
    draft_id: int,
    *,
    reviewer_id: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Draft:
    factory = _unit_of_work_factory(unit_of_work_factory)
    return draft_store.reject_draft(
        draft_id,
        reviewer_id=reviewer_id,
        unit_of_work_factory=factory,
    )
