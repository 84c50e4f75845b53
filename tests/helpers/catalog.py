"""Reusable builders and fakes for catalog and draft tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from clinic_intake.domain.errors import DependencyDegradedError
from clinic_intake.domain.matching import CatalogEntry
from clinic_intake.domain.model import (
    Clinic,
    Draft,
    DraftPhoto,
    DraftProcedure,
    DraftProvider,
    DraftStatus,
)
from clinic_intake.domain.ports.places import PlaceDetails, PlacePhoto

if TYPE_CHECKING:
    from collections.abc import Callable

    from clinic_intake.domain.matching import CatalogField
    from clinic_intake.domain.ports.unit_of_work import CatalogUnitOfWork


def make_draft(
    name: str = "Glow Aesthetics",
    *,
    status: DraftStatus = DraftStatus.PENDING_REVIEW,
    providers: tuple[str, ...] = ("Dr. Ada Park",),
    procedures: tuple[tuple[str, str | None], ...] = (("Botox", "Dr. Ada Park"),),
    photo_urls: tuple[str, ...] = (),
    **fields: object,
) -> Draft:
    """Build a reviewable draft; ``procedures`` pairs a name with its provider name."""

    values: dict[str, object] = {
        "address": "100 Main St",
        "city": "Austin",
        "state": "TX",
        "phone": "(512) 555-0100",
        "website": "https://glow.example",
        "email": "hello@glow.example",
        "category": "Medspa / Aesthetics",
    }
    values.update(fields)
    return Draft(
        clinic_name=name,
        status=status,
        providers=[DraftProvider(name=provider, specialty="Dermatology") for provider in providers],
        procedures=[
            DraftProcedure(
                name=procedure,
                category="Injectables",
                price_min=200.0,
                price_max=400.0,
                provider_name=provider_name,
            )
            for procedure, provider_name in procedures
        ],
        photos=[
            DraftPhoto(url=url, display_order=index) for index, url in enumerate(photo_urls)
        ],
        **values,  # pyright: ignore[reportArgumentType]
    )


def seed_clinic(
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    clinic_id: int,
    name: str,
    *,
    city: str | None = None,
    state: str | None = None,
    **fields: object,
) -> None:
    with unit_of_work_factory() as uow:
        location_id: int | None = None
        if city is not None and state is not None:
            location_id = uow.repositories.locations.get_or_create(city=city, state=state).id
        uow.repositories.clinics.add(
            Clinic(id=clinic_id, name=name, location_id=location_id, **fields)  # pyright: ignore[reportArgumentType]
        )
        uow.commit()


@dataclass
class InMemoryCatalog:
    entries: list[CatalogEntry] = field(default_factory=list[CatalogEntry])

    def add(self, clinic_id: int, name: str, **fields: str | None) -> CatalogEntry:
        entry = CatalogEntry(clinic_id=clinic_id, name=name, **fields)
        self.entries.append(entry)
        return entry

    def find_by_place_ref(self, place_ref: str) -> list[CatalogEntry]:
        return [entry for entry in self.entries if entry.place_ref == place_ref]

    def list_entries(self, *, having: tuple[CatalogField, ...] = ()) -> list[CatalogEntry]:
        return [
            entry
            for entry in self.entries
            if all(getattr(entry, name) is not None for name in having)
        ]


class FakePlaces:
    """Place-data collaborator with canned answers and an optional outage."""

    def __init__(
        self,
        *,
        details: PlaceDetails | None = None,
        photo_count: int = 0,
        unavailable: bool = False,
    ) -> None:
        self.details = details
        self.photos = [
            PlacePhoto(
                reference=f"ref-{index}",
                url=f"https://places.example/photo/{index}",
                width=1600,
                height=1200,
            )
            for index in range(photo_count)
        ]
        self.unavailable = unavailable
        self.calls: list[tuple[str, str]] = []

    def fetch_place_details(self, place_ref: str) -> PlaceDetails | None:
        self.calls.append(("details", place_ref))
        if self.unavailable:
            raise DependencyDegradedError("places down")
        return self.details

    def fetch_place_photos(self, place_ref: str) -> list[PlacePhoto]:
        self.calls.append(("photos", place_ref))
        if self.unavailable:
            raise DependencyDegradedError("places down")
        return list(self.photos)
