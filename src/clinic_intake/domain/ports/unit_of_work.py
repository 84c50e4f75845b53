"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from clinic_intake.domain.ports.persistence import (
        CategoryRepository,
        ClinicRepository,
        DraftRepository,
        LocationRepository,
        PhotoRepository,
        PlaceMetadataRepository,
        ProcedureRepository,
        ProviderRepository,
        SpecialtyRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    Leaving the context with an exception rolls back every pending write.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    """Repositories touched by intake, detection and approval."""

    clinics: ClinicRepository
    locations: LocationRepository
    categories: CategoryRepository
    specialties: SpecialtyRepository
    providers: ProviderRepository
    procedures: ProcedureRepository
    photos: PhotoRepository
    place_metadata: PlaceMetadataRepository
    drafts: DraftRepository


type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]
