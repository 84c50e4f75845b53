"""Domain-level error taxonomy for intake, detection and resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ClinicIntakeError(RuntimeError):
    """Base class for every error raised by the intake domain."""


class NotFoundError(ClinicIntakeError):
    """A draft or a referenced clinic does not exist."""


class ValidationFailedError(ClinicIntakeError):
    """Input is incomplete or inconsistent; nothing was written."""

    def __init__(self, message: str, *, missing_fields: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.missing_fields: tuple[str, ...] = tuple(missing_fields)


class DraftAlreadyResolvedError(ValidationFailedError):
    """The draft already reached a terminal status."""


class InvalidStatusTransitionError(ValidationFailedError):
    """A status change would move a draft backwards in its lifecycle."""


class DependencyDegradedError(ClinicIntakeError):
    """An external collaborator failed; callers fall back instead of aborting."""


class TransactionFailureError(ClinicIntakeError):
    """The approval write sequence failed and was rolled back."""


class UnresolvableReferenceError(TransactionFailureError):
    """A procedure points at a provider that cannot be resolved."""


class ConcurrentUpdateError(TransactionFailureError):
    """A concurrent writer changed the same rows; the operation may be retried."""


class IdentifierConflictError(ConcurrentUpdateError):
    """An explicitly allocated identifier was taken by a concurrent writer."""
