"""Debt title and installment entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from debt_manager.dates import as_date
from debt_manager.exceptions import (
    FieldError,
    InvalidAmountError,
    ValidationError,
)
from debt_manager.models.debtor import Debtor
from debt_manager.models.enums import InstallmentStatus
from debt_manager.money import to_decimal
from debt_manager.rates import parse_percent

TITLE_NUMBER_MAX_LENGTH = 50


def _positive_amount(value: Decimal, field_name: str) -> Decimal:
    try:
        amount = to_decimal(value)
    except ValueError as exc:
        raise InvalidAmountError(str(exc), [FieldError(field_name, "Must be a number")]) from exc
    if amount <= 0:
        raise InvalidAmountError(
            f"{field_name} must be greater than zero, got {amount}",
            [FieldError(field_name, "Must be greater than zero")],
        )
    return amount


@dataclass
class DebtTitle:
    """Debt title (titulo de divida).

    Rates are stored in percent, as entered: ``interest_rate_per_day=0.1``
    is 0.1 % per day and ``penalty_rate=10`` is a 10 % penalty.
    """

    title_id: str
    title_number: str
    original_value: Decimal
    due_date: date
    interest_rate_per_day: Decimal  # percent
    penalty_rate: Decimal  # percent
    debtor: Debtor
    created_at: datetime
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.title_number = (self.title_number or "").strip()
        if not 1 <= len(self.title_number) <= TITLE_NUMBER_MAX_LENGTH:
            raise ValidationError(
                "Title number must have between 1 and 50 characters",
                [FieldError("titleNumber", "Must have between 1 and 50 characters")],
            )
        self.original_value = _positive_amount(self.original_value, "originalValue")
        self.due_date = as_date(self.due_date)
        self.interest_rate_per_day = parse_percent(self.interest_rate_per_day, "interestRatePerDay")
        self.penalty_rate = parse_percent(self.penalty_rate, "penaltyRate")


@dataclass
class Installment:
    """Installment (parcela) of a debt title."""

    installment_id: str
    title_id: str
    installment_number: int  # 1, 2, 3, ...
    value: Decimal
    due_date: date
    is_paid: bool = False
    paid_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.installment_number <= 0:
            raise ValidationError(
                f"Installment number must be greater than zero, got {self.installment_number}",
                [FieldError("installmentNumber", "Must be greater than zero")],
            )
        if not self.title_id:
            raise ValidationError(
                "Installment must reference a debt title",
                [FieldError("titleId", "Is required")],
            )
        self.value = _positive_amount(self.value, "value")
        self.due_date = as_date(self.due_date)

    def mark_as_paid(self, paid_at: datetime) -> None:
        """Record a payment; paying again replaces the previous payment date."""
        self.is_paid = True
        self.paid_at = paid_at
        self.updated_at = paid_at

    def mark_as_unpaid(self, changed_at: datetime) -> None:
        self.is_paid = False
        self.paid_at = None
        self.updated_at = changed_at

    def is_overdue(self, reference_date: date | datetime) -> bool:
        return not self.is_paid and as_date(reference_date) > self.due_date

    def status(self, reference_date: date | datetime) -> InstallmentStatus:
        if self.is_paid:
            return InstallmentStatus.PAID
        if self.is_overdue(reference_date):
            return InstallmentStatus.OVERDUE
        return InstallmentStatus.PENDING
