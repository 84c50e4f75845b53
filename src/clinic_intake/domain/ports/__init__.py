"""Ports the domain depends on; adapters provide the implementations."""

from __future__ import annotations

from clinic_intake.domain.ports.persistence import (
    CatalogReader,
    CategoryRepository,
    ClinicRepository,
    DraftRepository,
    LocationRepository,
    PhotoRepository,
    PlaceMetadataRepository,
    ProcedureRepository,
    ProviderRepository,
    Repository,
    SpecialtyRepository,
)
from clinic_intake.domain.ports.places import (
    PlaceDataClient,
    PlaceDetails,
    PlacePhoto,
    PlaceReview,
)
from clinic_intake.domain.ports.unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogReader",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CategoryRepository",
    "ClinicRepository",
    "DraftRepository",
    "LocationRepository",
    "PhotoRepository",
    "PlaceDataClient",
    "PlaceDetails",
    "PlaceMetadataRepository",
    "PlacePhoto",
    "PlaceReview",
    "ProcedureRepository",
    "ProviderRepository",
    "Repository",
    "RepositoryCollection",
    "SpecialtyRepository",
    "UnitOfWork",
]
