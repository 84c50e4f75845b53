"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from clinic_intake.adapters.sqlalchemy.mappings import (
    category_table,
    clinic_photo_table,
    clinic_table,
    draft_table,
    location_table,
    place_metadata_table,
    procedure_table,
    provider_table,
    specialty_table,
)
from clinic_intake.domain.errors import ConcurrentUpdateError, IdentifierConflictError
from clinic_intake.domain.matching import CatalogEntry
from clinic_intake.domain.model import (
    Category,
    Clinic,
    ClinicPhoto,
    Draft,
    Location,
    PlaceMetadata,
    Procedure,
    Provider,
    Specialty,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Row, Select
    from sqlalchemy.orm import Session

    from clinic_intake.domain.matching import CatalogField
    from clinic_intake.domain.model import DraftSource, DraftStatus

_ENTRY_COLUMNS = {
    "address": clinic_table.c.address,
    "city": location_table.c.city,
    "state": location_table.c.state,
    "phone": clinic_table.c.phone,
    "website": clinic_table.c.website,
    "place_ref": clinic_table.c.place_ref,
}


@contextmanager
def _translate_write_errors(
    message: str,
    *,
    conflict: type[ConcurrentUpdateError] = ConcurrentUpdateError,
) -> Iterator[None]:
    try:
        yield
    except StaleDataError as exc:
        raise ConcurrentUpdateError(f"{message}: row was changed by another writer") from exc
    except IntegrityError as exc:
        raise conflict(f"{message}: {exc.orig}") from exc


class SqlAlchemyClinicRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Clinic) -> None:
        self.session.add(entity)
        with _translate_write_errors(
            f"Clinic id {entity.id} is already taken",
            conflict=IdentifierConflictError,
        ):
            self.session.flush()

    def update(self, clinic: Clinic) -> None:
        with _translate_write_errors(f"Update of clinic {clinic.id} conflicted"):
            self.session.flush()

    def get(self, clinic_id: int) -> Clinic | None:
        return self.session.get(Clinic, clinic_id)

    def get_entry(self, clinic_id: int) -> CatalogEntry | None:
        stmt = self._entries().where(clinic_table.c.id == clinic_id)
        row = self.session.execute(stmt).one_or_none()
        return _catalog_entry(row) if row is not None else None

    def max_id(self) -> int | None:
        return self.session.execute(select(func.max(clinic_table.c.id))).scalar_one_or_none()

    def find_by_place_ref(self, place_ref: str) -> list[CatalogEntry]:
        stmt = self._entries().where(clinic_table.c.place_ref == place_ref)
        return self._read_entries(stmt)

    def list_entries(self, *, having: tuple[CatalogField, ...] = ()) -> list[CatalogEntry]:
        stmt = self._entries()
        for name in having:
            stmt = stmt.where(_ENTRY_COLUMNS[name].is_not(None))
        return self._read_entries(stmt)

    def _read_entries(self, stmt: Select[Any]) -> list[CatalogEntry]:
        # a failed read rolls back to its savepoint and leaves the transaction usable
        with self.session.begin_nested():
            return [_catalog_entry(row) for row in self.session.execute(stmt)]

    @staticmethod
    def _entries() -> Select[Any]:
        return (
            select(
                clinic_table.c.id,
                clinic_table.c.name,
                clinic_table.c.address,
                location_table.c.city,
                location_table.c.state,
                clinic_table.c.phone,
                clinic_table.c.website,
                clinic_table.c.place_ref,
            )
            .select_from(
                clinic_table.outerjoin(
                    location_table,
                    clinic_table.c.location_id == location_table.c.id,
                )
            )
            .order_by(clinic_table.c.id)
        )


def _catalog_entry(row: Row[Any]) -> CatalogEntry:
    return CatalogEntry(
        clinic_id=row.id,
        name=row.name,
        address=row.address,
        city=row.city,
        state=row.state,
        phone=row.phone,
        website=row.website,
        place_ref=row.place_ref,
    )


class SqlAlchemyLocationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_or_create(self, *, city: str, state: str) -> Location:
        stmt = select(Location).where(location_table.c.city == city, location_table.c.state == state)
        existing = self.session.execute(stmt).scalar_one_or_none()
        if existing is not None:
            return existing
        location = Location(city=city, state=state)
        self.session.add(location)
        with _translate_write_errors(f"Location {city}, {state} was created concurrently"):
            self.session.flush()
        return location


class SqlAlchemyCategoryRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_or_create(self, name: str) -> Category:
        stmt = select(Category).where(category_table.c.name == name)
        existing = self.session.execute(stmt).scalar_one_or_none()
        if existing is not None:
            return existing
        category = Category(name=name)
        self.session.add(category)
        with _translate_write_errors(f"Category {name!r} was created concurrently"):
            self.session.flush()
        return category


class SqlAlchemySpecialtyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_or_create(self, name: str) -> Specialty:
        stmt = select(Specialty).where(specialty_table.c.name == name)
        existing = self.session.execute(stmt).scalar_one_or_none()
        if existing is not None:
            return existing
        specialty = Specialty(name=name)
        self.session.add(specialty)
        with _translate_write_errors(f"Specialty {name!r} was created concurrently"):
            self.session.flush()
        return specialty


class SqlAlchemyProviderRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Provider) -> None:
        # flushed so procedures can reference the new id
        self.session.add(entity)
        with _translate_write_errors(f"Provider {entity.name!r} could not be stored"):
            self.session.flush()

    def list_for_clinic(self, clinic_id: int) -> list[Provider]:
        stmt = (
            select(Provider)
            .where(provider_table.c.clinic_id == clinic_id)
            .order_by(provider_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyProcedureRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Procedure) -> None:
        self.session.add(entity)

    def list_for_clinic(self, clinic_id: int) -> list[Procedure]:
        stmt = (
            select(Procedure)
            .join(provider_table, procedure_table.c.provider_id == provider_table.c.id)
            .where(provider_table.c.clinic_id == clinic_id)
            .order_by(procedure_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyPhotoRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ClinicPhoto) -> None:
        self.session.add(entity)

    def list_for_clinic(self, clinic_id: int) -> list[ClinicPhoto]:
        stmt = (
            select(ClinicPhoto)
            .where(clinic_photo_table.c.clinic_id == clinic_id)
            .order_by(clinic_photo_table.c.display_order, clinic_photo_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyPlaceMetadataRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: PlaceMetadata) -> None:
        self.session.add(entity)

    def get_for_clinic(self, clinic_id: int) -> PlaceMetadata | None:
        stmt = select(PlaceMetadata).where(place_metadata_table.c.clinic_id == clinic_id)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyDraftRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Draft) -> None:
        self.session.add(entity)
        with _translate_write_errors(
            f"Submission id {entity.submission_id} is already taken",
            conflict=IdentifierConflictError,
        ):
            self.session.flush()

    def get(self, draft_id: int, *, for_update: bool = False) -> Draft | None:
        return self.session.get(Draft, draft_id, with_for_update=True if for_update else None)

    def list(
        self,
        *,
        status: DraftStatus | None = None,
        source: DraftSource | None = None,
        submitted_by: str | None = None,
        limit: int | None = None,
    ) -> list[Draft]:
        stmt = select(Draft).order_by(draft_table.c.created_at.desc(), draft_table.c.id.desc())
        if status is not None:
            stmt = stmt.where(draft_table.c.status == status)
        if source is not None:
            stmt = stmt.where(draft_table.c.source == source)
        if submitted_by is not None:
            stmt = stmt.where(draft_table.c.submitted_by == submitted_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        return [*self.session.execute(stmt).scalars()]

    def latest_submission_id(self, prefix: str) -> str | None:
        column = draft_table.c.submission_id
        stmt = (
            select(column)
            .where(column.startswith(prefix, autoescape=True))
            .order_by(func.length(column).desc(), column.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()
