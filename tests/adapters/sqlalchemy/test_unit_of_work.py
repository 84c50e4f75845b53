from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from clinic_intake.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from clinic_intake.domain.errors import ConcurrentUpdateError, IdentifierConflictError
from clinic_intake.domain.model import Clinic, PlaceMetadata
from tests.helpers.catalog import seed_clinic

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_startup_builds_engine_from_uri(tmp_path: Path) -> None:
    startup(database_uri=f"sqlite+pysqlite:///{tmp_path / 'catalog.db'}")

    engine = configured_engine()
    assert engine is not None
    assert engine.url.database == str(tmp_path / "catalog.db")


def test_unit_of_work_persists_clinics(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.clinics.add(Clinic(id=10, name="Persisted"))
        uow.commit()

    with SqlAlchemyUnitOfWork() as uow:
        clinic = uow.repositories.clinics.get(10)
        assert clinic is not None
        assert clinic.version == 1


def test_leaving_with_an_error_rolls_back(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError, match="boom"), SqlAlchemyUnitOfWork() as uow:
        uow.repositories.clinics.add(Clinic(id=10, name="Discarded"))
        raise RuntimeError("boom")

    with SqlAlchemyUnitOfWork() as uow:
        assert uow.repositories.clinics.max_id() is None


def test_repositories_require_an_open_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_commit_reports_constraint_violations_as_concurrent_updates(
    sqlite_engine: Engine,
) -> None:
    startup(engine=sqlite_engine, force=True)
    seed_clinic(SqlAlchemyUnitOfWork, 1, "Glow")

    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.place_metadata.add(PlaceMetadata(clinic_id=1))
        uow.repositories.place_metadata.add(PlaceMetadata(clinic_id=1))
        with pytest.raises(ConcurrentUpdateError):
            uow.commit()


def test_stale_clinic_update_is_detected(tmp_path: Path) -> None:
    startup(database_uri=f"sqlite+pysqlite:///{tmp_path / 'catalog.db'}")
    seed_clinic(SqlAlchemyUnitOfWork, 1, "Glow", phone="111")

    with SqlAlchemyUnitOfWork() as slow, SqlAlchemyUnitOfWork() as fast:
        slow_clinic = slow.repositories.clinics.get(1)
        fast_clinic = fast.repositories.clinics.get(1)
        assert slow_clinic is not None
        assert fast_clinic is not None

        fast_clinic.phone = "222"
        fast.repositories.clinics.update(fast_clinic)
        fast.commit()

        slow_clinic.phone = "333"
        with pytest.raises(ConcurrentUpdateError):
            slow.repositories.clinics.update(slow_clinic)

    with SqlAlchemyUnitOfWork() as uow:
        clinic = uow.repositories.clinics.get(1)
        assert clinic is not None
        assert (clinic.phone, clinic.version) == ("222", 2)


def test_taken_clinic_id_is_an_identifier_conflict(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    seed_clinic(SqlAlchemyUnitOfWork, 1, "Glow")

    with SqlAlchemyUnitOfWork() as uow, pytest.raises(IdentifierConflictError):
        uow.repositories.clinics.add(Clinic(id=1, name="Second"))
