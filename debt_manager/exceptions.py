"""Custom exception hierarchy for debt-manager."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single validation failure bound to a request field."""

    field: str
    message: str


class DebtManagerError(Exception):
    """Base exception for all debt-manager errors."""


class ValidationError(DebtManagerError):
    """Raised when input data is rejected at a boundary.

    Parameters
    ----------
    message : str
        Human readable summary.
    errors : list[FieldError] | None
        Per-field failures, when the caller validated a whole request.
    """

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.errors: list[FieldError] = list(errors or [])


class InvalidAmountError(ValidationError):
    """Raised when a monetary amount is negative or not positive where required."""


class InvalidRateError(ValidationError):
    """Raised when an interest or penalty rate is out of range."""


class InvalidDateRangeError(ValidationError):
    """Raised when a date range has its bounds inverted."""


class DocumentValidationError(ValidationError):
    """Raised when a CPF/CNPJ document is malformed."""


class EntityNotFoundError(DebtManagerError):
    """Raised when a referenced entity does not exist."""


class DebtTitleNotFoundError(EntityNotFoundError):
    """Raised when a debt title id is unknown."""


class InstallmentNotFoundError(EntityNotFoundError):
    """Raised when an installment id is unknown."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(DebtManagerError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(DebtManagerError):
    """Raised when configuration is invalid or missing."""


class SinkError(DebtManagerError):
    """Raised when a sink operation fails."""
