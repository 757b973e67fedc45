"""Request objects accepted by the services.

Rates are carried in percent, the stored unit. Values arrive already parsed
into ``Decimal``/``date``; :mod:`debt_manager.mapping` builds these from
JSON-like payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass
class InstallmentRequest:
    installment_number: int
    value: Decimal
    due_date: date


@dataclass
class CreateDebtTitleRequest:
    title_number: str
    debtor_name: str
    debtor_document: str
    interest_rate_per_day: Decimal  # percent
    penalty_rate: Decimal  # percent
    installments: list[InstallmentRequest] = field(default_factory=list)
    original_value: Decimal | None = None
    due_date: date | None = None


@dataclass
class UpdateDebtTitleRequest:
    title_number: str
    original_value: Decimal
    due_date: date
    interest_rate_per_day: Decimal  # percent
    penalty_rate: Decimal  # percent
    debtor_name: str
    debtor_document: str | None = None
