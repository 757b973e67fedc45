"""Interest and penalty accrual for overdue obligations.

This module holds the one rule used everywhere a title or installment value
is shown, summed or previewed:

    days     = 0 if paid else max(0, reference_date - due_date)
    interest = principal * (rate / rate_period_days) * days
    penalty  = principal * penalty_rate          (once, when days > 0)
    total    = principal + interest + penalty

Rates are fractions (``0.001`` for 0.1 %). Conversion from stored
percentages happens in :mod:`debt_manager.rates`, never here. All arithmetic
is ``Decimal``; ``interest``, ``penalty`` and ``total`` are rounded half up
to cents once, from the unrounded intermediate values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from debt_manager.dates import as_date
from debt_manager.exceptions import FieldError, InvalidAmountError, InvalidRateError
from debt_manager.models.enums import RateUnit
from debt_manager.money import ZERO, quantize_money


def days_overdue(due_date: date | datetime, reference_date: date | datetime, is_paid: bool = False) -> int:
    """Whole days ``reference_date`` lies after ``due_date``; zero when paid."""
    if is_paid:
        return 0
    return max(0, (as_date(reference_date) - as_date(due_date)).days)


@dataclass(frozen=True)
class AccrualResult:
    """Amount owed on an obligation at a reference date."""

    principal: Decimal
    interest: Decimal
    penalty: Decimal
    total: Decimal
    days_overdue: int

    @property
    def is_overdue(self) -> bool:
        return self.days_overdue > 0

    @property
    def accrued(self) -> Decimal:
        """Interest plus penalty."""
        return self.interest + self.penalty


class AccrualCalculator:
    """Computes accrued interest and penalty under one rate unit.

    Parameters
    ----------
    rate_unit : RateUnit
        Period the periodic rate is denominated over. Chosen once per
        deployment (see :class:`debt_manager.config.AccrualConfig`); a
        monthly rate is spread over 30 days.
    """

    def __init__(self, rate_unit: RateUnit = RateUnit.DAY) -> None:
        self.rate_unit = rate_unit
        self.rate_period_days = Decimal(rate_unit.period_days)

    def __repr__(self) -> str:
        return f"AccrualCalculator(rate_unit={self.rate_unit.value})"

    def compute(
        self,
        principal: Decimal,
        due_date: date | datetime,
        reference_date: date | datetime,
        periodic_rate: Decimal,
        penalty_rate: Decimal,
        is_paid: bool = False,
    ) -> AccrualResult:
        """Compute the amount owed at ``reference_date``.

        Parameters
        ----------
        principal : Decimal
            Original value of the title or installment.
        due_date : date | datetime
            Date after which the obligation is overdue.
        reference_date : date | datetime
            "Today", supplied by the caller.
        periodic_rate : Decimal
            Interest rate as a fraction per ``rate_unit``.
        penalty_rate : Decimal
            Flat penalty as a fraction of principal.
        is_paid : bool
            Paid obligations accrue nothing.

        Returns
        -------
        AccrualResult
            Principal, interest, penalty, total and days overdue.

        Raises
        ------
        InvalidAmountError
            If ``principal`` is negative.
        InvalidRateError
            If either rate is negative.
        """
        if principal < 0:
            raise InvalidAmountError(
                f"Principal cannot be negative: {principal}",
                [FieldError("principal", "Cannot be negative")],
            )
        if periodic_rate < 0 or penalty_rate < 0:
            raise InvalidRateError(
                f"Rates cannot be negative: interest={periodic_rate}, penalty={penalty_rate}",
                [FieldError("rate", "Cannot be negative")],
            )

        days = days_overdue(due_date, reference_date, is_paid)
        if days == 0:
            return AccrualResult(
                principal=principal,
                interest=ZERO,
                penalty=ZERO,
                total=quantize_money(principal),
                days_overdue=0,
            )

        interest = principal * (periodic_rate / self.rate_period_days) * days
        penalty = principal * penalty_rate
        total = principal + interest + penalty

        return AccrualResult(
            principal=principal,
            interest=quantize_money(interest),
            penalty=quantize_money(penalty),
            total=quantize_money(total),
            days_overdue=days,
        )


_DAILY = AccrualCalculator(RateUnit.DAY)


def compute(
    principal: Decimal,
    due_date: date | datetime,
    reference_date: date | datetime,
    periodic_rate: Decimal,
    penalty_rate: Decimal,
    is_paid: bool = False,
) -> AccrualResult:
    """Compute accrual with a daily rate. See :meth:`AccrualCalculator.compute`."""
    return _DAILY.compute(principal, due_date, reference_date, periodic_rate, penalty_rate, is_paid)
