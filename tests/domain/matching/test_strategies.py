from __future__ import annotations

from clinic_intake.domain.matching import (
    ClinicQuery,
    MatchReason,
    match_name_address,
    match_name_locality,
    match_phone,
    match_place_ref,
    match_website,
)
from clinic_intake.domain.model import Confidence
from tests.helpers.catalog import InMemoryCatalog


def _catalog() -> InMemoryCatalog:
    catalog = InMemoryCatalog()
    catalog.add(
        1,
        "ACME SPA",
        address="100 Main Street",
        city="Austin",
        state="TX",
        phone="512-555-0100",
        website="https://www.acme.example",
        place_ref="place-acme",
    )
    catalog.add(2, "Riverside Dermatology", address="9 River Rd", city="Dallas", state="TX")
    catalog.add(3, "Unlisted Clinic")
    return catalog


def test_place_ref_match_is_high_and_exact() -> None:
    matches = match_place_ref(ClinicQuery(place_ref="place-acme"), _catalog())

    assert [match.clinic_id for match in matches] == [1]
    assert matches[0].confidence is Confidence.HIGH
    assert matches[0].similarity == 1.0
    assert matches[0].reason is MatchReason.PLACE_REF


def test_place_ref_blank_is_ignored() -> None:
    assert match_place_ref(ClinicQuery(place_ref="  "), _catalog()) == []


def test_name_address_tolerates_abbreviation() -> None:
    matches = match_name_address(
        ClinicQuery(name="Acme Spa", address="100 Main St"),
        _catalog(),
    )

    assert [match.clinic_id for match in matches] == [1]
    assert matches[0].reason is MatchReason.NAME_ADDRESS
    assert matches[0].confidence is Confidence.HIGH
    assert matches[0].similarity >= 0.9


def test_name_address_needs_both_fields() -> None:
    assert match_name_address(ClinicQuery(name="Acme Spa"), _catalog()) == []


def test_name_address_rejects_unrelated_clinic() -> None:
    matches = match_name_address(
        ClinicQuery(name="Totally Different", address="55 Elm Blvd"),
        _catalog(),
    )
    assert matches == []


def test_phone_match_ignores_formatting() -> None:
    matches = match_phone(ClinicQuery(phone="(512) 555 0100"), _catalog())

    assert [match.clinic_id for match in matches] == [1]
    assert matches[0].confidence is Confidence.MEDIUM
    assert matches[0].similarity == 0.9


def test_website_match_compares_domains() -> None:
    matches = match_website(ClinicQuery(website="acme.example/contact"), _catalog())

    assert [match.clinic_id for match in matches] == [1]
    assert matches[0].confidence is Confidence.LOW
    assert matches[0].similarity == 0.7


def test_name_locality_requires_same_state() -> None:
    catalog = _catalog()
    same_state = match_name_locality(
        ClinicQuery(name="Riverside Dermatology", city="Dallas", state="tx"),
        catalog,
    )
    other_state = match_name_locality(
        ClinicQuery(name="Riverside Dermatology", city="Dallas", state="OK"),
        catalog,
    )

    assert [match.clinic_id for match in same_state] == [2]
    assert same_state[0].confidence is Confidence.MEDIUM
    assert other_state == []


def test_name_locality_low_tier_for_looser_names() -> None:
    matches = match_name_locality(
        ClinicQuery(name="Riverside Dermatology Skin Center", city="Dallas", state="TX"),
        _catalog(),
    )

    assert [match.clinic_id for match in matches] == [2]
    assert matches[0].confidence is Confidence.LOW
