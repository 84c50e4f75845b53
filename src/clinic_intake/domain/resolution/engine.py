"""Draft approval: materialize a draft as a new clinic or merge it into an existing one.

Every write of one approval happens inside a single unit of work. Any failure rolls
the whole approval back and leaves the draft in its pre-approval status.

Order of writes on the create path:
- allocate the clinic id, resolve the rating, resolve the location
- insert clinic, place metadata and photos
- insert providers, then their procedures
- mark the draft ``approved``

The merge path updates present contact fields on the linked clinic, adds missing
providers and the submitted procedures, then marks the draft ``merged``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from clinic_intake.domain.categories import normalize_category
from clinic_intake.domain.drafts import ensure_approvable
from clinic_intake.domain.errors import (
    ClinicIntakeError,
    ConcurrentUpdateError,
    NotFoundError,
    TransactionFailureError,
    UnresolvableReferenceError,
    ValidationFailedError,
)
from clinic_intake.domain.model import (
    Clinic,
    ClinicPhoto,
    DraftStatus,
    PhotoSource,
    PlaceMetadata,
    Procedure,
    Provider,
    RatingSource,
)
from clinic_intake.domain.normalization import average_price

from .allocation import ClinicIdAllocator
from .merge import merge_contact_details
from .photos import COMBINED_GOOGLE_PHOTO_LIMIT, GOOGLE_PHOTO_LIMIT, photo_policy_for
from .ratings import rating_policy_for

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from clinic_intake.domain.model import Draft, DraftProcedure
    from clinic_intake.domain.ports.places import PlaceDataClient
    from clinic_intake.domain.ports.unit_of_work import CatalogRepositories, CatalogUnitOfWork

    from .photos import PhotoPolicy
    from .ratings import RatingPolicy

log = getLogger(__name__)

DEFAULT_MAX_ATTEMPTS: Final[int] = 3
DEFAULT_PROCEDURE_CATEGORY: Final[str] = "Other"
DEFAULT_SPECIALTY: Final[str] = "General"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True, kw_only=True)
class ApprovalOptions:
    reviewer_id: str
    photo_source: PhotoSource = PhotoSource.USER
    rating_source: RatingSource = RatingSource.GOOGLE
    manual_rating: float | None = None
    manual_review_count: int | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class ApprovalResult:
    clinic_id: int
    clinic_name: str
    status: DraftStatus
    providers_added: int = 0
    procedures_added: int = 0
    photos_added: int = 0
    updated_fields: tuple[str, ...] = ()


class _ProviderRoster:
    """Providers of one clinic, addressable by name, in insertion order."""

    def __init__(self, providers: Iterable[Provider], *, fallback_to_first: bool) -> None:
        self._ordered: list[Provider] = []
        self._by_key: dict[str, Provider] = {}
        self._fallback_to_first = fallback_to_first
        for provider in providers:
            self.add(provider)

    @staticmethod
    def key(name: str | None) -> str:
        return " ".join((name or "").split()).casefold()

    def __contains__(self, name: str) -> bool:
        return self.key(name) in self._by_key

    def add(self, provider: Provider) -> None:
        self._ordered.append(provider)
        self._by_key.setdefault(self.key(provider.name), provider)

    def resolve(self, procedure: DraftProcedure) -> Provider:
        if procedure.provider_name and procedure.provider_name.strip():
            provider = self._by_key.get(self.key(procedure.provider_name))
            if provider is None:
                raise UnresolvableReferenceError(
                    f"Procedure {procedure.name!r} names unknown provider "
                    f"{procedure.provider_name!r}"
                )
            return provider
        if self._fallback_to_first and self._ordered:
            provider = self._ordered[0]
            log.warning(
                "Procedure %r names no provider; attaching it to %r",
                procedure.name,
                provider.name,
            )
            return provider
        raise UnresolvableReferenceError(f"Procedure {procedure.name!r} has no provider")


class ResolutionEngine:
    """Approve drafts against the catalog.

    ``places`` is optional; without it live ratings and place photos fall back exactly
    as they do when the collaborator is down.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], CatalogUnitOfWork],
        places: PlaceDataClient | None = None,
        clock: Callable[[], datetime] = _utcnow,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        google_photo_limit: int = GOOGLE_PHOTO_LIMIT,
        combined_google_photo_limit: int = COMBINED_GOOGLE_PHOTO_LIMIT,
        fallback_to_first_provider: bool = True,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._unit_of_work_factory = unit_of_work_factory
        self._places = places
        self._clock = clock
        self._max_attempts = max_attempts
        self._google_photo_limit = google_photo_limit
        self._combined_google_photo_limit = combined_google_photo_limit
        self._fallback_to_first_provider = fallback_to_first_provider

    def approve(self, draft_id: int, options: ApprovalOptions) -> ApprovalResult:
        """Approve ``draft_id``, retrying when a concurrent writer got in the way.

        Raises:
            NotFoundError: the draft or its linked clinic does not exist.
            DraftAlreadyResolvedError: the draft is already terminal.
            ValidationFailedError: the draft or the options are incomplete.
            TransactionFailureError: the write sequence failed and was rolled back.
        """

        if not options.reviewer_id or not options.reviewer_id.strip():
            raise ValidationFailedError("A reviewer is required", missing_fields=("reviewer_id",))
        rating_policy = rating_policy_for(
            options.rating_source,
            manual_rating=options.manual_rating,
            manual_review_count=options.manual_review_count,
        )
        photo_policy = photo_policy_for(
            options.photo_source,
            google_limit=self._google_photo_limit,
            combined_google_limit=self._combined_google_photo_limit,
        )

        attempt = 1
        while True:
            try:
                result = self._approve_once(
                    draft_id,
                    reviewer_id=options.reviewer_id.strip(),
                    rating_policy=rating_policy,
                    photo_policy=photo_policy,
                )
            except ConcurrentUpdateError as exc:
                if attempt >= self._max_attempts:
                    raise
                log.warning(
                    "Approval of draft %s hit a concurrent update (%s); retrying %d/%d",
                    draft_id,
                    exc,
                    attempt + 1,
                    self._max_attempts,
                )
                attempt += 1
                continue
            log.info(
                "Draft %s %s as clinic %s (%r): providers=%d, procedures=%d, photos=%d",
                draft_id,
                result.status,
                result.clinic_id,
                result.clinic_name,
                result.providers_added,
                result.procedures_added,
                result.photos_added,
            )
            return result

    def _approve_once(
        self,
        draft_id: int,
        *,
        reviewer_id: str,
        rating_policy: RatingPolicy,
        photo_policy: PhotoPolicy,
    ) -> ApprovalResult:
        with self._unit_of_work_factory() as uow:
            try:
                repositories = uow.repositories
                draft = repositories.drafts.get(draft_id, for_update=True)
                if draft is None:
                    raise NotFoundError(f"Draft {draft_id} not found")
                ensure_approvable(draft)
                now = self._clock()
                if draft.duplicate_clinic_id is not None:
                    result = self._merge(repositories, draft, reviewer_id=reviewer_id, now=now)
                else:
                    result = self._create(
                        repositories,
                        draft,
                        reviewer_id=reviewer_id,
                        rating_policy=rating_policy,
                        photo_policy=photo_policy,
                        now=now,
                    )
                uow.commit()
            except ClinicIntakeError:
                raise
            except Exception as exc:
                raise TransactionFailureError(
                    f"Approval of draft {draft_id} failed and was rolled back: {exc}"
                ) from exc
        return result

    def _create(
        self,
        repositories: CatalogRepositories,
        draft: Draft,
        *,
        reviewer_id: str,
        rating_policy: RatingPolicy,
        photo_policy: PhotoPolicy,
        now: datetime,
    ) -> ApprovalResult:
        clinic_id = ClinicIdAllocator(repositories.clinics).next_id()
        rating = rating_policy.resolve(draft, places=self._places)

        location_id: int | None = None
        if draft.city and draft.city.strip() and draft.state and draft.state.strip():
            location = repositories.locations.get_or_create(
                city=draft.city.strip(),
                state=draft.state.strip(),
            )
            location_id = location.id

        clinic = Clinic(
            id=clinic_id,
            name=draft.clinic_name.strip(),
            address=draft.address,
            phone=draft.phone,
            website=draft.website,
            latitude=draft.latitude,
            longitude=draft.longitude,
            place_ref=draft.place_ref,
            location_id=location_id,
            rating=rating.rating,
            review_count=rating.review_count,
            reviews_json=rating.reviews_json(),
            rating_updated_at=now if rating.rating is not None else None,
            updated_at=now,
        )
        repositories.clinics.add(clinic)

        selected = photo_policy.select(draft, places=self._places)
        for index, photo in enumerate(selected):
            repositories.photos.add(
                ClinicPhoto(
                    clinic_id=clinic_id,
                    url=photo.url,
                    photo_reference=photo.reference,
                    width=photo.width,
                    height=photo.height,
                    is_primary=index == 0,
                    display_order=index,
                    photo_type=photo.photo_type,
                    caption=photo.caption,
                    origin=photo.origin,
                )
            )
        repositories.place_metadata.add(
            PlaceMetadata(
                clinic_id=clinic_id,
                place_ref=draft.place_ref,
                business_name=clinic.name,
                full_address=draft.address,
                city=draft.city,
                state=draft.state,
                website=draft.website,
                email=draft.email,
                category=normalize_category(draft.category).value,
                photo_url=selected[0].url if selected else None,
            )
        )

        roster = _ProviderRoster((), fallback_to_first=self._fallback_to_first_provider)
        providers_added = self._add_providers(repositories, clinic_id, draft, roster)
        procedures_added = self._add_procedures(repositories, draft, roster)

        draft.transition_to(DraftStatus.APPROVED, at=now, reviewer=reviewer_id)
        return ApprovalResult(
            clinic_id=clinic_id,
            clinic_name=clinic.name,
            status=draft.status,
            providers_added=providers_added,
            procedures_added=procedures_added,
            photos_added=len(selected),
        )

    def _merge(
        self,
        repositories: CatalogRepositories,
        draft: Draft,
        *,
        reviewer_id: str,
        now: datetime,
    ) -> ApprovalResult:
        clinic_id = draft.duplicate_clinic_id
        clinic = repositories.clinics.get(clinic_id) if clinic_id is not None else None
        if clinic is None:
            raise NotFoundError(f"Draft {draft.id} links to missing clinic {clinic_id}")

        updated = merge_contact_details(clinic, draft, at=now)
        repositories.clinics.update(clinic)

        roster = _ProviderRoster(
            repositories.providers.list_for_clinic(clinic.id),
            fallback_to_first=self._fallback_to_first_provider,
        )
        providers_added = self._add_providers(repositories, clinic.id, draft, roster)
        procedures_added = self._add_procedures(repositories, draft, roster)

        draft.transition_to(DraftStatus.MERGED, at=now, reviewer=reviewer_id)
        return ApprovalResult(
            clinic_id=clinic.id,
            clinic_name=clinic.name,
            status=draft.status,
            providers_added=providers_added,
            procedures_added=procedures_added,
            updated_fields=updated,
        )

    @staticmethod
    def _add_providers(
        repositories: CatalogRepositories,
        clinic_id: int,
        draft: Draft,
        roster: _ProviderRoster,
    ) -> int:
        added = 0
        for submitted in draft.providers:
            name = submitted.name.strip()
            if not name or name in roster:
                continue
            provider = Provider(
                clinic_id=clinic_id,
                name=name,
                specialty=submitted.specialty,
                photo_url=submitted.photo_url,
            )
            repositories.providers.add(provider)
            roster.add(provider)
            added += 1
        return added

    @staticmethod
    def _add_procedures(
        repositories: CatalogRepositories,
        draft: Draft,
        roster: _ProviderRoster,
    ) -> int:
        added = 0
        for submitted in draft.procedures:
            provider = roster.resolve(submitted)
            if provider.id is None:
                raise TransactionFailureError(f"Provider {provider.name!r} was not assigned an id")
            category = repositories.categories.get_or_create(
                (submitted.category or "").strip() or DEFAULT_PROCEDURE_CATEGORY
            )
            specialty = repositories.specialties.get_or_create(
                (provider.specialty or "").strip() or DEFAULT_SPECIALTY
            )
            if category.id is None:
                raise TransactionFailureError(f"Category {category.name!r} was not assigned an id")
            repositories.procedures.add(
                Procedure(
                    provider_id=provider.id,
                    name=submitted.name.strip(),
                    category_id=category.id,
                    specialty_id=specialty.id,
                    average_cost=average_price(
                        submitted.average_cost, submitted.price_min, submitted.price_max
                    ),
                    price_min=submitted.price_min,
                    price_max=submitted.price_max,
                    price_unit=submitted.price_unit,
                )
            )
            added += 1
        return added


def approve_draft(
    draft_id: int,
    options: ApprovalOptions,
    *,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    places: PlaceDataClient | None = None,
    clock: Callable[[], datetime] = _utcnow,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    fallback_to_first_provider: bool = True,
) -> ApprovalResult:
    """Approve one draft with a throwaway ``ResolutionEngine``."""

    engine = ResolutionEngine(
        unit_of_work_factory=unit_of_work_factory,
        places=places,
        clock=clock,
        max_attempts=max_attempts,
        fallback_to_first_provider=fallback_to_first_provider,
    )
    return engine.approve(draft_id, options)
