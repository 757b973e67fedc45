"""Enumeration types for debt management entities."""

from enum import Enum


class DocumentType(str, Enum):
    CPF = "CPF"
    CNPJ = "CNPJ"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class DebtStatus(str, Enum):
    ACTIVE = "ACTIVE"
    OVERDUE = "OVERDUE"
    PAID = "PAID"


class RateUnit(str, Enum):
    """Period a stored interest rate is denominated over."""

    DAY = "DAY"
    MONTH = "MONTH"

    @property
    def period_days(self) -> int:
        return 1 if self is RateUnit.DAY else 30
