"""Duplicate detection: run strategies, union by clinic, rank."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import DuplicateCheckResult
from .strategies import DEFAULT_STRATEGIES

if TYPE_CHECKING:
    from collections.abc import Sequence

    from clinic_intake.domain.ports.persistence import CatalogReader

    from .contracts import ClinicQuery, MatchCandidate
    from .strategies import MatchStrategy

log = getLogger(__name__)


def check_duplicates(
    query: ClinicQuery,
    *,
    catalog: CatalogReader,
    strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES,
) -> DuplicateCheckResult:
    """Return ranked duplicate candidates for ``query``.

    Strategies run in priority order; a clinic found by an earlier strategy keeps that
    match and later evidence for it is ignored. A strategy that fails is logged and
    treated as having found nothing, so detection as a whole never raises for store
    errors. Candidates are ordered by confidence tier, then similarity, stable on ties.
    """

    if not query.has_signal():
        return DuplicateCheckResult(query=query)

    best_by_clinic: dict[int, MatchCandidate] = {}
    for strategy in strategies:
        try:
            candidates = strategy(query, catalog)
        except Exception:  # noqa: BLE001
            log.warning(
                "Duplicate strategy %s failed; continuing without it",
                strategy.__name__,
                exc_info=True,
            )
            continue
        for candidate in candidates:
            best_by_clinic.setdefault(candidate.clinic_id, candidate)

    ranked = sorted(best_by_clinic.values(), key=lambda candidate: candidate.sort_key)
    log.debug("Duplicate check for %r found %d candidate(s)", query.name, len(ranked))
    return DuplicateCheckResult(query=query, matches=tuple(ranked))
