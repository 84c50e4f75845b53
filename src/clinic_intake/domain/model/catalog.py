"""Committed catalog entities.

Identity rules:
- ``Clinic.id`` is allocated explicitly (max + 1) and never reused.
- every other entity receives a surrogate id from the store on insert.
- child rows reference their parent by id; navigation lives in repositories.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from clinic_intake.domain.model.enums import PhotoOrigin

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class Location:
    id: int | None = None
    city: str
    state: str


@dataclass(eq=False, kw_only=True)
class Category:
    id: int | None = None
    name: str


@dataclass(eq=False, kw_only=True)
class Specialty:
    id: int | None = None
    name: str


@dataclass(eq=False, kw_only=True)
class Clinic:
    id: int
    name: str
    address: str | None = None
    phone: str | None = None
    website: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    place_ref: str | None = None
    location_id: int | None = None

    # rating snapshot
    rating: float | None = None
    review_count: int | None = None
    reviews_json: str | None = None
    rating_updated_at: datetime | None = None

    updated_at: datetime | None = None
    # optimistic concurrency counter, managed by the store
    version: int | None = None


@dataclass(eq=False, kw_only=True)
class Provider:
    id: int | None = None
    clinic_id: int
    name: str
    specialty: str | None = None
    photo_url: str | None = None


@dataclass(eq=False, kw_only=True)
class Procedure:
    id: int | None = None
    provider_id: int
    name: str
    category_id: int
    specialty_id: int | None = None
    average_cost: float | None = None
    price_min: float | None = None
    price_max: float | None = None
    price_unit: str | None = None


@dataclass(eq=False, kw_only=True)
class ClinicPhoto:
    id: int | None = None
    clinic_id: int
    url: str
    photo_reference: str | None = None
    width: int | None = None
    height: int | None = None
    is_primary: bool = False
    display_order: int = 0
    photo_type: str = "clinic"
    caption: str | None = None
    origin: PhotoOrigin = PhotoOrigin.USER


@dataclass(eq=False, kw_only=True)
class PlaceMetadata:
    """Contact and category details mirrored next to a clinic."""

    id: int | None = None
    clinic_id: int
    place_ref: str | None = None
    business_name: str | None = None
    full_address: str | None = None
    city: str | None = None
    state: str | None = None
    website: str | None = None
    email: str | None = None
    category: str | None = None
    photo_url: str | None = None
