"""Scenarios for generating realistic debt portfolios."""

from debt_manager.scenarios.portfolio import DebtPortfolioScenario

__all__ = ["DebtPortfolioScenario"]
