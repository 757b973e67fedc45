"""Installment service: payment status transitions and overdue queries."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from debt_manager.config import AccrualConfig
from debt_manager.exceptions import FieldError, ValidationError
from debt_manager.models import Event, Installment
from debt_manager.money import ZERO
from debt_manager.services.evaluation import InstallmentAccrual, TitleEvaluator
from debt_manager.store import DebtDataStore

logger = logging.getLogger(__name__)

EVENT_SOURCE = "debt-manager"


class InstallmentService:
    """Application service for installments.

    Paying and un-paying an installment are both recorded as audit events
    on the store. Un-paying is logged at WARNING: it re-enables accrual from
    the original due date, as if the installment had never been paid.
    """

    def __init__(
        self,
        store: DebtDataStore,
        config: AccrualConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.config = config or AccrualConfig()
        self.evaluator = TitleEvaluator(self.config.calculator())
        self._clock = clock

    def get(self, installment_id: str) -> Installment:
        return self.store.get_installment(installment_id)

    def evaluate(self, installment_id: str, reference_date: date) -> InstallmentAccrual:
        installment = self.store.get_installment(installment_id)
        title = self.store.get_title(installment.title_id)
        return self.evaluator.evaluate_installment(installment, title, reference_date)

    def list_for_title(self, title_id: str) -> list[Installment]:
        self.store.get_title(title_id)
        return self.store.get_title_installments(title_id)

    def list_by_document(self, document: str) -> list[Installment]:
        if not document or not document.strip():
            raise ValidationError(
                "Document is required",
                [FieldError("document", "Document is required")],
            )
        result: list[Installment] = []
        for title in self.store.get_titles_by_document(document):
            result.extend(self.store.get_title_installments(title.title_id))
        return result

    def mark_as_paid(self, installment_id: str, paid_at: datetime | None = None) -> Installment:
        """Mark an installment paid, freezing its value at principal.

        Paying an installment that is already paid is last-write-wins: the
        new ``paid_at`` replaces the old one and the event carries both.
        """
        installment = self.store.get_installment(installment_id)
        previous_paid_at = installment.paid_at if installment.is_paid else None
        paid_at = paid_at or self._clock()
        installment.mark_as_paid(paid_at)
        data = {"paid_at": paid_at.isoformat()}
        if previous_paid_at is not None:
            data["previous_paid_at"] = previous_paid_at.isoformat()
        self._record(installment, "installment.paid", data)
        logger.info(
            "Installment %s (#%d of title %s) marked as paid",
            installment_id,
            installment.installment_number,
            installment.title_id,
            extra={"installment_id": installment_id, "title_id": installment.title_id},
        )
        return installment

    def mark_as_unpaid(self, installment_id: str, reason: str | None = None) -> Installment:
        """Reopen a paid installment.

        Accrual resumes from the original due date. An installment that is
        not paid is returned unchanged and nothing is recorded.
        """
        installment = self.store.get_installment(installment_id)
        if not installment.is_paid:
            logger.debug("Installment %s is not paid; nothing to reopen", installment_id)
            return installment
        previous_paid_at = installment.paid_at
        installment.mark_as_unpaid(self._clock())
        self._record(
            installment,
            "installment.unpaid",
            {
                "previous_paid_at": previous_paid_at.isoformat() if previous_paid_at else None,
                "reason": reason,
            },
        )
        logger.warning(
            "Installment %s (#%d of title %s) reopened; accrual resumes from due date %s",
            installment_id,
            installment.installment_number,
            installment.title_id,
            installment.due_date.isoformat(),
            extra={"installment_id": installment_id, "title_id": installment.title_id},
        )
        return installment

    def overdue(self, reference_date: date) -> list[InstallmentAccrual]:
        """All unpaid installments past due at ``reference_date``."""
        result = []
        for installment in self.store.all_installments():
            if installment.is_overdue(reference_date):
                title = self.store.get_title(installment.title_id)
                result.append(self.evaluator.evaluate_installment(installment, title, reference_date))
        result.sort(key=lambda a: a.accrual.days_overdue, reverse=True)
        return result

    def total_overdue_value(self, reference_date: date) -> Decimal:
        return sum((a.accrual.total for a in self.overdue(reference_date)), ZERO)

    def count(self) -> int:
        return len(self.store.installments)

    def overdue_count(self, reference_date: date) -> int:
        return sum(1 for i in self.store.all_installments() if i.is_overdue(reference_date))

    def _record(self, installment: Installment, event_type: str, data: dict) -> None:
        self.store.record_event(
            Event(
                event_id=str(uuid.uuid4()),
                event_type=event_type,
                event_time=self._clock(),
                source=EVENT_SOURCE,
                subject=installment.installment_id,
                data={"title_id": installment.title_id, **data},
            )
        )
