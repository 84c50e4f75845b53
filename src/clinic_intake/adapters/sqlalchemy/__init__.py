"""SQLAlchemy adapter package for clinic intake."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCategoryRepository,
    SqlAlchemyClinicRepository,
    SqlAlchemyDraftRepository,
    SqlAlchemyLocationRepository,
    SqlAlchemyPhotoRepository,
    SqlAlchemyPlaceMetadataRepository,
    SqlAlchemyProcedureRepository,
    SqlAlchemyProviderRepository,
    SqlAlchemySpecialtyRepository,
)
from .unit_of_work import (
    BaseSqlAlchemyUnitOfWork,
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "BaseSqlAlchemyUnitOfWork",
    "SqlAlchemyCategoryRepository",
    "SqlAlchemyClinicRepository",
    "SqlAlchemyDraftRepository",
    "SqlAlchemyLocationRepository",
    "SqlAlchemyPhotoRepository",
    "SqlAlchemyPlaceMetadataRepository",
    "SqlAlchemyProcedureRepository",
    "SqlAlchemyProviderRepository",
    "SqlAlchemySpecialtyRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "startup",
]
