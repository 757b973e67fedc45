"""Installment plan preview for titles that are not saved yet.

The preview uses the same :class:`AccrualCalculator` as persisted titles, so
what a user sees before submitting matches what the store reports after.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_DOWN, Decimal

from debt_manager.accrual import AccrualCalculator, AccrualResult
from debt_manager.dates import add_months
from debt_manager.exceptions import FieldError, InvalidAmountError, ValidationError
from debt_manager.money import CENT, ZERO, to_decimal
from debt_manager.rates import parse_percent, percent_to_fraction
from debt_manager.services.requests import InstallmentRequest

MAX_INSTALLMENTS = 60


@dataclass(frozen=True)
class InstallmentPreview:
    installment_number: int
    due_date: date
    value: Decimal
    accrual: AccrualResult


@dataclass(frozen=True)
class PlanPreview:
    lines: list[InstallmentPreview]
    original_value: Decimal
    updated_value: Decimal

    def to_requests(self) -> list[InstallmentRequest]:
        """Installment requests ready for :meth:`DebtTitleService.create`."""
        return [
            InstallmentRequest(line.installment_number, line.value, line.due_date)
            for line in self.lines
        ]


def split_value(total: Decimal, count: int) -> list[Decimal]:
    """Split ``total`` into ``count`` cent amounts; the last absorbs the remainder."""
    base = (total / count).quantize(CENT, rounding=ROUND_DOWN)
    return [base] * (count - 1) + [total - base * (count - 1)]


def preview_installment_plan(
    original_value: Decimal,
    installment_count: int,
    first_due_date: date,
    interest_rate_per_day: Decimal,
    penalty_rate: Decimal,
    reference_date: date,
    calculator: AccrualCalculator | None = None,
) -> PlanPreview:
    """Split a value into monthly installments and evaluate each one.

    Parameters
    ----------
    original_value : Decimal
        Title value to split.
    installment_count : int
        Number of installments, 1 to 60.
    first_due_date : date
        Due date of installment 1; later ones fall on the same day of the
        following months (clamped to month end).
    interest_rate_per_day, penalty_rate : Decimal
        Rates in percent, as they would be stored.
    reference_date : date
        Date the preview is evaluated at.
    calculator : AccrualCalculator | None
        Calculator of the deployment; defaults to a daily rate.
    """
    try:
        value = to_decimal(original_value)
    except ValueError as exc:
        raise InvalidAmountError(str(exc), [FieldError("originalValue", "Must be a number")]) from exc
    if value <= 0:
        raise InvalidAmountError(
            f"Original value must be greater than zero, got {value}",
            [FieldError("originalValue", "Must be greater than zero")],
        )
    if not 1 <= installment_count <= MAX_INSTALLMENTS:
        raise ValidationError(
            f"Installment count must be between 1 and {MAX_INSTALLMENTS}",
            [FieldError("numberOfInstallments", f"Must be between 1 and {MAX_INSTALLMENTS}")],
        )
    if value < CENT * installment_count:
        raise InvalidAmountError(
            f"{value} cannot be split into {installment_count} installments",
            [FieldError("originalValue", "Too small for the number of installments")],
        )

    calculator = calculator or AccrualCalculator()
    rate = percent_to_fraction(parse_percent(interest_rate_per_day, "interestRatePerDay"))
    penalty = percent_to_fraction(parse_percent(penalty_rate, "penaltyRate"))

    lines = []
    for i, amount in enumerate(split_value(value, installment_count)):
        due = add_months(first_due_date, i)
        lines.append(
            InstallmentPreview(
                installment_number=i + 1,
                due_date=due,
                value=amount,
                accrual=calculator.compute(amount, due, reference_date, rate, penalty, False),
            )
        )

    return PlanPreview(
        lines=lines,
        original_value=value,
        updated_value=sum((line.accrual.total for line in lines), ZERO),
    )
