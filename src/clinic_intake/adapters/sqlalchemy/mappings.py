"""SQLAlchemy mapping metadata for the clinic catalog and draft model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import relationship

from clinic_intake.domain.model import (
    Category,
    Clinic,
    ClinicPhoto,
    Draft,
    DraftPhoto,
    DraftProcedure,
    DraftProvider,
    DraftSource,
    DraftStatus,
    Location,
    PhotoOrigin,
    PlaceMetadata,
    Procedure,
    Provider,
    Specialty,
    SubmissionFlow,
)

if TYPE_CHECKING:
    from enum import StrEnum

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class Money(TypeDecorator[float]):
    """Fixed-point storage for prices, exposed to the domain as floats."""

    impl = Numeric(10, 2, asdecimal=False)
    cache_ok = True


def _str_enum(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog ---------------------------------------------------------------------

location_table = Table(
    "location",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("city", String(128), nullable=False),
    Column("state", String(64), nullable=False),
    UniqueConstraint("city", "state"),
)

category_table = Table(
    "category",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(128), nullable=False, unique=True),
)

specialty_table = Table(
    "specialty",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(128), nullable=False, unique=True),
)

clinic_table = Table(
    "clinic",
    mapper_registry.metadata,
    # allocated by the application (max + 1), never by the database
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", String(255), nullable=False),
    Column("address", String(512), nullable=True),
    Column("phone", String(64), nullable=True),
    Column("website", String(512), nullable=True),
    Column("latitude", Float, nullable=True),
    Column("longitude", Float, nullable=True),
    Column("place_ref", String(255), nullable=True),
    Column("location_id", Integer, ForeignKey("location.id"), nullable=True),
    Column("rating", Float, nullable=True),
    Column("review_count", Integer, nullable=True),
    Column("reviews_json", Text, nullable=True),
    Column("rating_updated_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    Column("version", Integer, nullable=False),
    Index("ix_clinic_place_ref", "place_ref"),
)

provider_table = Table(
    "provider",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("clinic_id", Integer, ForeignKey("clinic.id"), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("specialty", String(128), nullable=True),
    Column("photo_url", String(1024), nullable=True),
)

procedure_table = Table(
    "clinic_procedure",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("provider_id", Integer, ForeignKey("provider.id"), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("category_id", Integer, ForeignKey("category.id"), nullable=False),
    Column("specialty_id", Integer, ForeignKey("specialty.id"), nullable=True),
    Column("average_cost", Money(), nullable=True),
    Column("price_min", Money(), nullable=True),
    Column("price_max", Money(), nullable=True),
    Column("price_unit", String(64), nullable=True),
)

clinic_photo_table = Table(
    "clinic_photo",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("clinic_id", Integer, ForeignKey("clinic.id"), nullable=False, index=True),
    Column("url", String(2048), nullable=False),
    Column("photo_reference", String(1024), nullable=True),
    Column("width", Integer, nullable=True),
    Column("height", Integer, nullable=True),
    Column("is_primary", Boolean, nullable=False, default=False),
    Column("display_order", Integer, nullable=False, default=0),
    Column("photo_type", String(32), nullable=False, default="clinic"),
    Column("caption", String(512), nullable=True),
    Column("origin", _str_enum(PhotoOrigin), nullable=False),
)

place_metadata_table = Table(
    "place_metadata",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("clinic_id", Integer, ForeignKey("clinic.id"), nullable=False, unique=True),
    Column("place_ref", String(255), nullable=True),
    Column("business_name", String(255), nullable=True),
    Column("full_address", String(512), nullable=True),
    Column("city", String(128), nullable=True),
    Column("state", String(64), nullable=True),
    Column("website", String(512), nullable=True),
    Column("email", String(255), nullable=True),
    Column("category", String(64), nullable=True),
    Column("photo_url", String(2048), nullable=True),
)

# Drafts ----------------------------------------------------------------------

draft_table = Table(
    "clinic_draft",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("submission_id", String(32), nullable=True, unique=True),
    Column("clinic_name", String(255), nullable=False),
    Column("address", String(512), nullable=True),
    Column("city", String(128), nullable=True),
    Column("state", String(64), nullable=True),
    Column("zip_code", String(16), nullable=True),
    Column("website", String(512), nullable=True),
    Column("phone", String(64), nullable=True),
    Column("email", String(255), nullable=True),
    Column("latitude", Float, nullable=True),
    Column("longitude", Float, nullable=True),
    Column("place_ref", String(255), nullable=True),
    Column("category", String(64), nullable=True),
    Column("google_rating", Float, nullable=True),
    Column("google_review_count", Integer, nullable=True),
    Column("duplicate_clinic_id", Integer, nullable=True),
    Column("status", _str_enum(DraftStatus), nullable=False, index=True),
    Column("source", _str_enum(DraftSource), nullable=False),
    Column("submission_flow", _str_enum(SubmissionFlow), nullable=True),
    Column("submitted_by", String(255), nullable=True),
    Column("notes", Text, nullable=True),
    Column("reviewed_by", String(255), nullable=True),
    Column("reviewed_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    Column("version", Integer, nullable=False),
)

draft_provider_table = Table(
    "draft_provider",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("draft_id", Integer, ForeignKey("clinic_draft.id"), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("specialty", String(128), nullable=True),
    Column("photo_url", String(1024), nullable=True),
)

draft_procedure_table = Table(
    "draft_procedure",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("draft_id", Integer, ForeignKey("clinic_draft.id"), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("category", String(128), nullable=True),
    Column("average_cost", Money(), nullable=True),
    Column("price_min", Money(), nullable=True),
    Column("price_max", Money(), nullable=True),
    Column("price_unit", String(64), nullable=True),
    Column("provider_name", String(255), nullable=True),
)

draft_photo_table = Table(
    "draft_photo",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("draft_id", Integer, ForeignKey("clinic_draft.id"), nullable=False, index=True),
    Column("url", String(2048), nullable=False),
    Column("photo_type", String(32), nullable=False, default="clinic"),
    Column("display_order", Integer, nullable=False, default=0),
    Column("is_primary", Boolean, nullable=False, default=False),
    Column("caption", String(512), nullable=True),
    Column("origin", _str_enum(PhotoOrigin), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Location, location_table)
    mapper_registry.map_imperatively(Category, category_table)
    mapper_registry.map_imperatively(Specialty, specialty_table)
    mapper_registry.map_imperatively(
        Clinic,
        clinic_table,
        version_id_col=clinic_table.c.version,
    )
    mapper_registry.map_imperatively(Provider, provider_table)
    mapper_registry.map_imperatively(Procedure, procedure_table)
    mapper_registry.map_imperatively(ClinicPhoto, clinic_photo_table)
    mapper_registry.map_imperatively(PlaceMetadata, place_metadata_table)

    mapper_registry.map_imperatively(DraftProvider, draft_provider_table)
    mapper_registry.map_imperatively(DraftProcedure, draft_procedure_table)
    mapper_registry.map_imperatively(DraftPhoto, draft_photo_table)
    mapper_registry.map_imperatively(
        Draft,
        draft_table,
        version_id_col=draft_table.c.version,
        properties={
            "providers": relationship(
                DraftProvider,
                cascade="all, delete-orphan",
                order_by=draft_provider_table.c.id,
                lazy="selectin",
            ),
            "procedures": relationship(
                DraftProcedure,
                cascade="all, delete-orphan",
                order_by=draft_procedure_table.c.id,
                lazy="selectin",
            ),
            "photos": relationship(
                DraftPhoto,
                cascade="all, delete-orphan",
                order_by=(draft_photo_table.c.display_order, draft_photo_table.c.id),
                lazy="selectin",
            ),
        },
    )

    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
