"""Synthetic data generators."""

from debt_manager.generators.base import BaseGenerator
from debt_manager.generators.debt import DebtTitleGenerator

__all__ = ["BaseGenerator", "DebtTitleGenerator"]
