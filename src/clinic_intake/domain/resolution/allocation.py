"""Explicit clinic identifier allocation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clinic_intake.domain.ports.persistence import ClinicRepository


class ClinicIdAllocator:
    """Hand out ``max(existing) + 1`` read inside the caller's transaction.

    Two transactions can read the same maximum; the loser's insert fails on the
    primary key and surfaces as ``IdentifierConflictError`` for the caller to retry.
    """

    def __init__(self, clinics: ClinicRepository) -> None:
        self._clinics = clinics

    def next_id(self) -> int:
        current = self._clinics.max_id()
        return (current or 0) + 1
