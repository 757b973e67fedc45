"""Domain models for debt management."""

from debt_manager.models.base import Event
from debt_manager.models.debt import DebtTitle, Installment
from debt_manager.models.debtor import Debtor, Document
from debt_manager.models.enums import DebtStatus, DocumentType, InstallmentStatus, RateUnit

__all__ = [
    "DebtStatus",
    "DebtTitle",
    "Debtor",
    "Document",
    "DocumentType",
    "Event",
    "Installment",
    "InstallmentStatus",
    "RateUnit",
]
