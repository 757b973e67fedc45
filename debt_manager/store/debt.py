"""Debt data store with referential integrity."""

from dataclasses import dataclass, field
from datetime import datetime

from debt_manager.exceptions import (
    DebtTitleNotFoundError,
    InstallmentNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
)
from debt_manager.models import DebtTitle, Event, Installment
from debt_manager.models.debtor import clean_document


@dataclass
class DebtDataStore:
    """In-memory store for debt titles and installments with relationship tracking."""

    # Primary entities
    titles: dict[str, DebtTitle] = field(default_factory=dict)
    installments: dict[str, Installment] = field(default_factory=dict)

    # Audit trail
    events: list[Event] = field(default_factory=list)

    # Relationship indexes
    _title_installments: dict[str, list[str]] = field(default_factory=dict)
    _document_titles: dict[str, list[str]] = field(default_factory=dict)

    def add_title(self, title: DebtTitle) -> None:
        """Add a debt title to the store."""
        if title.title_id in self.titles:
            raise InvalidEntityStateError(f"Debt title {title.title_id} already exists")

        self.titles[title.title_id] = title
        self._title_installments[title.title_id] = []
        self._document_titles.setdefault(title.debtor.document.value, []).append(title.title_id)

    def replace_title(self, title: DebtTitle) -> None:
        """Swap in an updated version of an existing title."""
        previous = self.get_title(title.title_id)
        old_doc = previous.debtor.document.value
        new_doc = title.debtor.document.value
        if old_doc != new_doc:
            self._document_titles[old_doc].remove(title.title_id)
            self._document_titles.setdefault(new_doc, []).append(title.title_id)
        self.titles[title.title_id] = title

    def add_installment(self, installment: Installment) -> None:
        """Add an installment to the store."""
        if installment.title_id not in self.titles:
            raise ReferentialIntegrityError(f"Debt title {installment.title_id} not found")

        for existing in self.get_title_installments(installment.title_id):
            if existing.installment_number == installment.installment_number:
                raise InvalidEntityStateError(
                    f"Debt title {installment.title_id} already has installment "
                    f"number {installment.installment_number}"
                )

        if installment.created_at is None:
            installment.created_at = datetime.now()
        self.installments[installment.installment_id] = installment
        self._title_installments[installment.title_id].append(installment.installment_id)

    def remove_title(self, title_id: str) -> list[Installment]:
        """Delete a title and cascade to its installments.

        Returns
        -------
        list[Installment]
            The installments removed with the title.
        """
        title = self.get_title(title_id)
        removed = [self.installments.pop(iid) for iid in self._title_installments.pop(title_id)]
        self._document_titles[title.debtor.document.value].remove(title_id)
        del self.titles[title_id]
        return removed

    def record_event(self, event: Event) -> None:
        self.events.append(event)

    # Query methods
    def get_title(self, title_id: str) -> DebtTitle:
        """Get a title by id."""
        try:
            return self.titles[title_id]
        except KeyError:
            raise DebtTitleNotFoundError(f"Debt title {title_id} not found") from None

    def get_installment(self, installment_id: str) -> Installment:
        """Get an installment by id."""
        try:
            return self.installments[installment_id]
        except KeyError:
            raise InstallmentNotFoundError(f"Installment {installment_id} not found") from None

    def get_title_installments(self, title_id: str) -> list[Installment]:
        """Get all installments for a title, ordered by number."""
        ids = self._title_installments.get(title_id, [])
        return sorted((self.installments[iid] for iid in ids), key=lambda i: i.installment_number)

    def get_titles_by_document(self, document: str) -> list[DebtTitle]:
        """Get all titles owed by the debtor with this CPF/CNPJ."""
        ids = self._document_titles.get(clean_document(document), [])
        return [self.titles[tid] for tid in ids]

    def get_subject_events(self, subject: str) -> list[Event]:
        """Get audit events recorded for an entity."""
        return [e for e in self.events if e.subject == subject]

    def all_titles(self) -> list[DebtTitle]:
        return list(self.titles.values())

    def all_installments(self) -> list[Installment]:
        return list(self.installments.values())

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "titles": len(self.titles),
            "installments": len(self.installments),
            "debtors": sum(1 for ids in self._document_titles.values() if ids),
            "events": len(self.events),
        }
