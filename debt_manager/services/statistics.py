"""Dashboard statistics over evaluated titles."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from debt_manager.models import DebtStatus, InstallmentStatus
from debt_manager.money import ZERO
from debt_manager.services.evaluation import TitleAccrual


@dataclass(frozen=True)
class DebtSummary:
    """Portfolio KPIs."""

    total_debts: int
    total_active_debts: int
    total_overdue_debts: int
    total_paid_debts: int
    total_value: Decimal
    total_overdue_value: Decimal
    total_paid_value: Decimal
    average_days_overdue: Decimal
    largest_debt: Decimal
    oldest_overdue_days: int


def build_summary(evaluations: Iterable[TitleAccrual]) -> DebtSummary:
    """Aggregate title evaluations into dashboard KPIs.

    Average and oldest days overdue are taken over overdue installments
    (or over the title itself when it has no installments), not over titles.
    """
    items = list(evaluations)
    by_status = {status: [e for e in items if e.status == status] for status in DebtStatus}

    overdue_days: list[int] = []
    for evaluation in by_status[DebtStatus.OVERDUE]:
        if evaluation.installments:
            overdue_days.extend(
                line.accrual.days_overdue
                for line in evaluation.installments
                if line.status == InstallmentStatus.OVERDUE
            )
        else:
            overdue_days.append(evaluation.days_overdue)

    if overdue_days:
        average = (Decimal(sum(overdue_days)) / len(overdue_days)).quantize(
            Decimal("0.1"), rounding=ROUND_HALF_UP
        )
    else:
        average = ZERO

    return DebtSummary(
        total_debts=len(items),
        total_active_debts=len(by_status[DebtStatus.ACTIVE]),
        total_overdue_debts=len(by_status[DebtStatus.OVERDUE]),
        total_paid_debts=len(by_status[DebtStatus.PAID]),
        total_value=sum((e.updated_value for e in items), ZERO),
        total_overdue_value=sum((e.updated_value for e in by_status[DebtStatus.OVERDUE]), ZERO),
        total_paid_value=sum((e.updated_value for e in by_status[DebtStatus.PAID]), ZERO),
        average_days_overdue=average,
        largest_debt=max((e.updated_value for e in items), default=ZERO),
        oldest_overdue_days=max(overdue_days, default=0),
    )
