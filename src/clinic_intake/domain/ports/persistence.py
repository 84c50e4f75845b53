"""Ports for persisting catalog and draft aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from clinic_intake.domain.model import (
    Clinic,
    ClinicPhoto,
    Draft,
    PlaceMetadata,
    Procedure,
    Provider,
)

if TYPE_CHECKING:
    from clinic_intake.domain.matching.contracts import CatalogEntry, CatalogField
    from clinic_intake.domain.model import (
        Category,
        DraftSource,
        DraftStatus,
        Location,
        Specialty,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CatalogReader(Protocol):
    """Read-only view of the catalog used by duplicate detection."""

    def find_by_place_ref(self, place_ref: str) -> list[CatalogEntry]: ...

    def list_entries(self, *, having: tuple[CatalogField, ...] = ()) -> list[CatalogEntry]:
        """Return catalog entries whose ``having`` fields are all non-null."""
        ...


@runtime_checkable
class ClinicRepository(CatalogReader, Repository[Clinic], Protocol):
    """Repository contract for clinics.

    ``add`` flushes immediately so an identifier collision surfaces as
    ``IdentifierConflictError`` at the point of insert.
    """

    def get(self, clinic_id: int) -> Clinic | None: ...

    def get_entry(self, clinic_id: int) -> CatalogEntry | None: ...

    def max_id(self) -> int | None: ...

    def update(self, clinic: Clinic) -> None: ...


@runtime_checkable
class LocationRepository(Protocol):
    def get_or_create(self, *, city: str, state: str) -> Location: ...


@runtime_checkable
class CategoryRepository(Protocol):
    def get_or_create(self, name: str) -> Category: ...


@runtime_checkable
class SpecialtyRepository(Protocol):
    def get_or_create(self, name: str) -> Specialty: ...


@runtime_checkable
class ProviderRepository(Repository[Provider], Protocol):
    def list_for_clinic(self, clinic_id: int) -> list[Provider]: ...


@runtime_checkable
class ProcedureRepository(Repository[Procedure], Protocol):
    def list_for_clinic(self, clinic_id: int) -> list[Procedure]: ...


@runtime_checkable
class PhotoRepository(Repository[ClinicPhoto], Protocol):
    def list_for_clinic(self, clinic_id: int) -> list[ClinicPhoto]: ...


@runtime_checkable
class PlaceMetadataRepository(Repository[PlaceMetadata], Protocol):
    def get_for_clinic(self, clinic_id: int) -> PlaceMetadata | None: ...


@runtime_checkable
class DraftRepository(Repository[Draft], Protocol):
    """Repository contract for drafts and their child collections."""

    def get(self, draft_id: int, *, for_update: bool = False) -> Draft | None: ...

    def list(
        self,
        *,
        status: DraftStatus | None = None,
        source: DraftSource | None = None,
        submitted_by: str | None = None,
        limit: int | None = None,
    ) -> list[Draft]: ...

    def latest_submission_id(self, prefix: str) -> str | None: ...
