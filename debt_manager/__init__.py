"""Debt title and installment management with interest/penalty accrual."""

__version__ = "0.1.0"

__all__ = ["__version__"]
