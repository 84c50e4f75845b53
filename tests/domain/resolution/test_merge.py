from __future__ import annotations

from datetime import UTC, datetime

from clinic_intake.domain.model import Clinic, Draft
from clinic_intake.domain.resolution import merge_contact_details

NOW = datetime(2025, 2, 2, tzinfo=UTC)


def test_present_values_overwrite_absent_values_do_not() -> None:
    clinic = Clinic(id=1, name="Glow", address="1 Old Rd", phone="111", website="https://old.example")
    draft = Draft(clinic_name="Renamed", address=None, phone="222", website="  ", latitude=30.2)

    changed = merge_contact_details(clinic, draft, at=NOW)

    assert changed == ("phone", "latitude")
    assert clinic.name == "Glow"
    assert clinic.address == "1 Old Rd"
    assert clinic.phone == "222"
    assert clinic.website == "https://old.example"
    assert clinic.latitude == 30.2
    assert clinic.updated_at == NOW


def test_identical_values_report_no_change() -> None:
    clinic = Clinic(id=1, name="Glow", phone="111")

    assert merge_contact_details(clinic, Draft(clinic_name="Glow", phone="111"), at=NOW) == ()
    assert clinic.updated_at == NOW
