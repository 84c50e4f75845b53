"""Independent duplicate-detection strategies.

Each strategy reads the catalog on its own and returns candidates for one kind of
evidence. Strategies never see each other's output; the engine unions and ranks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from clinic_intake.domain.model import Confidence
from clinic_intake.domain.normalization import (
    normalize_address,
    normalize_domain,
    normalize_name,
    normalize_phone,
    normalize_state,
)

from .contracts import MatchCandidate, MatchReason

if TYPE_CHECKING:
    from clinic_intake.domain.ports.persistence import CatalogReader

    from .contracts import ClinicQuery

NAME_WEIGHT: Final[float] = 0.6
ADDRESS_WEIGHT: Final[float] = 0.4
NAME_ADDRESS_THRESHOLD: Final[float] = 0.75
NAME_ADDRESS_HIGH: Final[float] = 0.9
PHONE_SIMILARITY: Final[float] = 0.9
WEBSITE_SIMILARITY: Final[float] = 0.7
CITY_THRESHOLD: Final[float] = 80.0
NAME_LOCALITY_THRESHOLD: Final[float] = 0.70
NAME_LOCALITY_MEDIUM: Final[float] = 0.85


class MatchStrategy(Protocol):
    __name__: str

    def __call__(self, query: ClinicQuery, catalog: CatalogReader) -> list[MatchCandidate]: ...


def similarity(left: str, right: str) -> float:
    """Edit-distance similarity on a 0-100 scale."""

    return fuzz.ratio(left, right, processor=default_process)


def match_place_ref(query: ClinicQuery, catalog: CatalogReader) -> list[MatchCandidate]:
    if not query.place_ref or not query.place_ref.strip():
        return []
    return [
        MatchCandidate.from_entry(
            entry,
            reason=MatchReason.PLACE_REF,
            confidence=Confidence.HIGH,
            similarity=1.0,
        )
        for entry in catalog.find_by_place_ref(query.place_ref.strip())
    ]


def match_name_address(query: ClinicQuery, catalog: CatalogReader) -> list[MatchCandidate]:
    name = normalize_name(query.name)
    address = normalize_address(query.address)
    if not name or not address:
        return []

    matches: list[MatchCandidate] = []
    for entry in catalog.list_entries(having=("address",)):
        name_score = similarity(name, normalize_name(entry.name))
        address_score = similarity(address, normalize_address(entry.address))
        combined = (name_score * NAME_WEIGHT + address_score * ADDRESS_WEIGHT) / 100
        if combined < NAME_ADDRESS_THRESHOLD:
            continue
        matches.append(
            MatchCandidate.from_entry(
                entry,
                reason=MatchReason.NAME_ADDRESS,
                confidence=Confidence.HIGH if combined >= NAME_ADDRESS_HIGH else Confidence.MEDIUM,
                similarity=combined,
            )
        )
    return matches


def match_phone(query: ClinicQuery, catalog: CatalogReader) -> list[MatchCandidate]:
    phone = normalize_phone(query.phone)
    if not phone:
        return []
    return [
        MatchCandidate.from_entry(
            entry,
            reason=MatchReason.PHONE,
            confidence=Confidence.MEDIUM,
            similarity=PHONE_SIMILARITY,
        )
        for entry in catalog.list_entries(having=("phone",))
        if normalize_phone(entry.phone) == phone
    ]


def match_website(query: ClinicQuery, catalog: CatalogReader) -> list[MatchCandidate]:
    domain = normalize_domain(query.website)
    if domain is None:
        return []
    return [
        MatchCandidate.from_entry(
            entry,
            reason=MatchReason.WEBSITE,
            confidence=Confidence.LOW,
            similarity=WEBSITE_SIMILARITY,
        )
        for entry in catalog.list_entries(having=("website",))
        if normalize_domain(entry.website) == domain
    ]


def match_name_locality(query: ClinicQuery, catalog: CatalogReader) -> list[MatchCandidate]:
    name = normalize_name(query.name)
    city = normalize_name(query.city)
    state = normalize_state(query.state)
    if not name or not city or not state:
        return []

    matches: list[MatchCandidate] = []
    for entry in catalog.list_entries(having=("city", "state")):
        if normalize_state(entry.state) != state:
            continue
        if similarity(city, normalize_name(entry.city)) < CITY_THRESHOLD:
            continue
        name_score = similarity(name, normalize_name(entry.name)) / 100
        if name_score < NAME_LOCALITY_THRESHOLD:
            continue
        matches.append(
            MatchCandidate.from_entry(
                entry,
                reason=MatchReason.NAME_LOCALITY,
                confidence=(
                    Confidence.MEDIUM if name_score >= NAME_LOCALITY_MEDIUM else Confidence.LOW
                ),
                similarity=name_score,
            )
        )
    return matches


DEFAULT_STRATEGIES: tuple[MatchStrategy, ...] = (
    match_place_ref,
    match_name_address,
    match_phone,
    match_website,
    match_name_locality,
)
