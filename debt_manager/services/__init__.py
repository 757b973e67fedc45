"""Application services for debt titles and installments."""

from debt_manager.services.debt_title import DebtTitleService, TitleFilter, TitlePage
from debt_manager.services.evaluation import InstallmentAccrual, TitleAccrual, TitleEvaluator
from debt_manager.services.installment import InstallmentService
from debt_manager.services.preview import PlanPreview, preview_installment_plan
from debt_manager.services.requests import (
    CreateDebtTitleRequest,
    InstallmentRequest,
    UpdateDebtTitleRequest,
)
from debt_manager.services.statistics import DebtSummary, build_summary

__all__ = [
    "CreateDebtTitleRequest",
    "DebtSummary",
    "DebtTitleService",
    "InstallmentAccrual",
    "InstallmentRequest",
    "InstallmentService",
    "PlanPreview",
    "TitleAccrual",
    "TitleEvaluator",
    "TitleFilter",
    "TitlePage",
    "UpdateDebtTitleRequest",
    "build_summary",
    "preview_installment_plan",
]
