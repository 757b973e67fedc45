"""In-memory data store for maintaining entity relationships."""

from debt_manager.store.debt import DebtDataStore

__all__ = ["DebtDataStore"]
