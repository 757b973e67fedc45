"""Evaluate stored titles and installments at a reference date.

Every read path (responses, filters, statistics, overdue totals) goes
through :class:`TitleEvaluator`, so all of them share one accrual rule and
one rate conversion.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from debt_manager.accrual import AccrualCalculator, AccrualResult
from debt_manager.dates import as_date
from debt_manager.models import DebtStatus, DebtTitle, Installment, InstallmentStatus
from debt_manager.money import ZERO
from debt_manager.rates import percent_to_fraction


@dataclass(frozen=True)
class InstallmentAccrual:
    """An installment together with its accrual at a reference date."""

    installment: Installment
    accrual: AccrualResult
    status: InstallmentStatus


@dataclass(frozen=True)
class TitleAccrual:
    """A title, its installments' accruals and the aggregate."""

    title: DebtTitle
    installments: list[InstallmentAccrual]
    accrual: AccrualResult
    outstanding_value: Decimal
    status: DebtStatus
    reference_date: date

    @property
    def updated_value(self) -> Decimal:
        return self.accrual.total

    @property
    def days_overdue(self) -> int:
        return self.accrual.days_overdue

    @property
    def paid_installments(self) -> int:
        return sum(1 for i in self.installments if i.installment.is_paid)


class TitleEvaluator:
    """Applies an :class:`AccrualCalculator` to stored entities."""

    def __init__(self, calculator: AccrualCalculator) -> None:
        self.calculator = calculator

    @staticmethod
    def rates(title: DebtTitle) -> tuple[Decimal, Decimal]:
        """Stored percent rates of ``title`` as fractions."""
        return (
            percent_to_fraction(title.interest_rate_per_day, "interestRatePerDay"),
            percent_to_fraction(title.penalty_rate, "penaltyRate"),
        )

    def evaluate_installment(
        self, installment: Installment, title: DebtTitle, reference_date: date
    ) -> InstallmentAccrual:
        rate, penalty = self.rates(title)
        result = self.calculator.compute(
            installment.value,
            installment.due_date,
            reference_date,
            rate,
            penalty,
            installment.is_paid,
        )
        return InstallmentAccrual(installment, result, installment.status(reference_date))

    def evaluate_title(
        self, title: DebtTitle, installments: list[Installment], reference_date: date
    ) -> TitleAccrual:
        """Evaluate a title from its installments.

        The title total is the sum of installment totals (paid installments
        count at their principal). A title with no installments is accrued
        on its own value and due date.
        """
        reference = as_date(reference_date)
        if not installments:
            rate, penalty = self.rates(title)
            result = self.calculator.compute(
                title.original_value, title.due_date, reference, rate, penalty, False
            )
            status = DebtStatus.OVERDUE if result.is_overdue else DebtStatus.ACTIVE
            return TitleAccrual(title, [], result, result.total, status, reference)

        lines = [self.evaluate_installment(i, title, reference) for i in installments]
        aggregate = AccrualResult(
            principal=sum((line.accrual.principal for line in lines), ZERO),
            interest=sum((line.accrual.interest for line in lines), ZERO),
            penalty=sum((line.accrual.penalty for line in lines), ZERO),
            total=sum((line.accrual.total for line in lines), ZERO),
            days_overdue=max(line.accrual.days_overdue for line in lines),
        )
        outstanding = sum(
            (line.accrual.total for line in lines if not line.installment.is_paid), ZERO
        )

        if all(line.installment.is_paid for line in lines):
            status = DebtStatus.PAID
        elif any(line.status == InstallmentStatus.OVERDUE for line in lines):
            status = DebtStatus.OVERDUE
        else:
            status = DebtStatus.ACTIVE

        return TitleAccrual(title, lines, aggregate, outstanding, status, reference)
