"""Value types exchanged by duplicate detection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from clinic_intake.domain.model import Confidence, Draft

type CatalogField = Literal["address", "city", "state", "phone", "website", "place_ref"]


class MatchReason(StrEnum):
    PLACE_REF = "PlaceID match"
    NAME_ADDRESS = "Fuzzy name + address match"
    PHONE = "Phone number match"
    WEBSITE = "Website domain match"
    NAME_LOCALITY = "Fuzzy name + city/state match"


@dataclass(slots=True, frozen=True, kw_only=True)
class ClinicQuery:
    """Partial description of a clinic to look up in the catalog."""

    name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    phone: str | None = None
    website: str | None = None
    place_ref: str | None = None

    @classmethod
    def from_draft(cls, draft: Draft) -> ClinicQuery:
        return cls(
            name=draft.clinic_name,
            address=draft.address,
            city=draft.city,
            state=draft.state,
            phone=draft.phone,
            website=draft.website,
            place_ref=draft.place_ref,
        )

    def has_signal(self) -> bool:
        """Whether at least one identifying field is present."""

        signals = (self.name, self.address, self.phone, self.website, self.place_ref)
        return any(value is not None and value.strip() for value in signals)


@dataclass(slots=True, frozen=True, kw_only=True)
class CatalogEntry:
    """Flattened catalog read model: a clinic joined with its location."""

    clinic_id: int
    name: str
    address: str | None = None
    city: str | None = None
    state: str | None = None
    phone: str | None = None
    website: str | None = None
    place_ref: str | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class MatchCandidate:
    clinic_id: int
    clinic_name: str
    address: str | None
    city: str | None
    state: str | None
    phone: str | None
    website: str | None
    place_ref: str | None
    reason: MatchReason
    confidence: Confidence
    similarity: float

    @classmethod
    def from_entry(
        cls,
        entry: CatalogEntry,
        *,
        reason: MatchReason,
        confidence: Confidence,
        similarity: float,
    ) -> MatchCandidate:
        return cls(
            clinic_id=entry.clinic_id,
            clinic_name=entry.name,
            address=entry.address,
            city=entry.city,
            state=entry.state,
            phone=entry.phone,
            website=entry.website,
            place_ref=entry.place_ref,
            reason=reason,
            confidence=confidence,
            similarity=similarity,
        )

    @property
    def sort_key(self) -> tuple[int, float]:
        return (-self.confidence.rank, -self.similarity)


@dataclass(slots=True, frozen=True, kw_only=True)
class DuplicateCheckResult:
    query: ClinicQuery
    matches: tuple[MatchCandidate, ...] = ()

    @property
    def has_duplicates(self) -> bool:
        return bool(self.matches)

    @property
    def confidence(self) -> Confidence | None:
        return self.matches[0].confidence if self.matches else None

    @property
    def primary(self) -> MatchCandidate | None:
        return self.matches[0] if self.matches else None
