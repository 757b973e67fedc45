"""Debt title service: create, update, delete, query and filter titles."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from debt_manager.config import AccrualConfig
from debt_manager.exceptions import (
    FieldError,
    InvalidAmountError,
    InvalidDateRangeError,
    ValidationError,
)
from debt_manager.models import DebtStatus, DebtTitle, Debtor, Installment
from debt_manager.models.debtor import clean_document
from debt_manager.money import ZERO
from debt_manager.services.evaluation import TitleAccrual, TitleEvaluator
from debt_manager.services.requests import CreateDebtTitleRequest, UpdateDebtTitleRequest
from debt_manager.store import DebtDataStore

logger = logging.getLogger(__name__)

SORT_KEYS: dict[str, Callable[[TitleAccrual], object]] = {
    "titleNumber": lambda e: e.title.title_number,
    "debtorName": lambda e: e.title.debtor.name.lower(),
    "originalValue": lambda e: e.title.original_value,
    "updatedValue": lambda e: e.updated_value,
    "dueDate": lambda e: e.title.due_date,
    "createdAt": lambda e: e.title.created_at,
    "daysOverdue": lambda e: e.days_overdue,
}


@dataclass
class TitleFilter:
    """Criteria for :meth:`DebtTitleService.filter`."""

    debtor_name: str | None = None
    debtor_document: str | None = None
    statuses: list[DebtStatus] = field(default_factory=list)
    overdue_only: bool = False
    value_from: Decimal | None = None
    value_to: Decimal | None = None
    due_date_from: date | None = None
    due_date_to: date | None = None
    sort_by: str = "createdAt"
    descending: bool = True
    page: int = 1
    page_size: int = 20


@dataclass
class TitlePage:
    items: list[TitleAccrual]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


class DebtTitleService:
    """Application service for debt titles.

    Parameters
    ----------
    store : DebtDataStore
        Backing store.
    config : AccrualConfig | None
        Accrual convention; defaults to a daily rate.
    clock : Callable[[], datetime]
        Source of creation/update timestamps. Never used for accrual, which
        always takes an explicit reference date.
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

    def create(self, request: CreateDebtTitleRequest) -> DebtTitle:
        """Create a title and its installments.

        ``original_value`` defaults to the sum of installment values and the
        title due date to the earliest installment due date.

        Raises
        ------
        ValidationError
            If there are no installments, the values do not add up, or any
            entity-level validation fails.
        """
        if not request.installments:
            raise ValidationError(
                "At least one installment is required",
                [FieldError("installments", "At least one installment is required")],
            )

        installments_total = sum((i.value for i in request.installments), ZERO)
        original_value = (
            request.original_value if request.original_value is not None else installments_total
        )
        if original_value != installments_total:
            raise InvalidAmountError(
                f"Installments add up to {installments_total}, not {original_value}",
                [FieldError("installments", "Installment values must add up to the original value")],
            )
        due_date = request.due_date or min(i.due_date for i in request.installments)

        now = self._clock()
        title = DebtTitle(
            title_id=str(uuid.uuid4()),
            title_number=request.title_number,
            original_value=original_value,
            due_date=due_date,
            interest_rate_per_day=request.interest_rate_per_day,
            penalty_rate=request.penalty_rate,
            debtor=Debtor.create(request.debtor_name, request.debtor_document),
            created_at=now,
        )
        installments = [
            Installment(
                installment_id=str(uuid.uuid4()),
                title_id=title.title_id,
                installment_number=item.installment_number,
                value=item.value,
                due_date=item.due_date,
                created_at=now,
            )
            for item in request.installments
        ]
        numbers = [i.installment_number for i in installments]
        if len(set(numbers)) != len(numbers):
            raise ValidationError(
                "Installment numbers must be unique",
                [FieldError("installments", "Installment numbers must be unique")],
            )

        self.store.add_title(title)
        for installment in installments:
            self.store.add_installment(installment)

        logger.info(
            "Created debt title %s (%s) with %d installments, value %s",
            title.title_id,
            title.title_number,
            len(installments),
            title.original_value,
            extra={"title_id": title.title_id},
        )
        return title

    def update(self, title_id: str, request: UpdateDebtTitleRequest) -> DebtTitle:
        """Replace the editable fields of a title.

        The debtor document is kept when the request omits it. When the title
        has installments, the new original value must still equal their sum.
        """
        current = self.store.get_title(title_id)
        document = request.debtor_document or current.debtor.document.value

        installments = self.store.get_title_installments(title_id)
        if installments:
            installments_total = sum((i.value for i in installments), ZERO)
            if request.original_value != installments_total:
                raise InvalidAmountError(
                    f"Installments add up to {installments_total}, not {request.original_value}",
                    [FieldError("originalValue", "Must equal the sum of the installment values")],
                )

        updated = replace(
            current,
            title_number=request.title_number,
            original_value=request.original_value,
            due_date=request.due_date,
            interest_rate_per_day=request.interest_rate_per_day,
            penalty_rate=request.penalty_rate,
            debtor=Debtor.create(request.debtor_name, document),
            updated_at=self._clock(),
        )
        if (
            updated.interest_rate_per_day != current.interest_rate_per_day
            or updated.penalty_rate != current.penalty_rate
        ):
            logger.warning(
                "Rates of debt title %s changed: interest %s%% -> %s%%, penalty %s%% -> %s%%",
                title_id,
                current.interest_rate_per_day,
                updated.interest_rate_per_day,
                current.penalty_rate,
                updated.penalty_rate,
            )
        self.store.replace_title(updated)
        logger.info("Updated debt title %s", title_id)
        return updated

    def delete(self, title_id: str) -> None:
        removed = self.store.remove_title(title_id)
        logger.info("Deleted debt title %s and %d installments", title_id, len(removed))

    def get(self, title_id: str) -> DebtTitle:
        return self.store.get_title(title_id)

    def list_all(self) -> list[DebtTitle]:
        return self.store.all_titles()

    def list_by_document(self, document: str) -> list[DebtTitle]:
        if not document or not document.strip():
            raise ValidationError(
                "Document is required",
                [FieldError("document", "Document is required")],
            )
        return self.store.get_titles_by_document(document)

    def evaluate(self, title_id: str, reference_date: date) -> TitleAccrual:
        """Evaluate one title at ``reference_date``."""
        title = self.store.get_title(title_id)
        return self.evaluator.evaluate_title(
            title, self.store.get_title_installments(title_id), reference_date
        )

    def evaluate_all(self, reference_date: date) -> list[TitleAccrual]:
        return [self.evaluate(t.title_id, reference_date) for t in self.store.all_titles()]

    def total_debt_value(self, reference_date: date) -> Decimal:
        """Sum of updated values across all titles."""
        return sum((e.updated_value for e in self.evaluate_all(reference_date)), ZERO)

    def filter(self, reference_date: date, criteria: TitleFilter | None = None) -> TitlePage:
        """Filter, sort and paginate titles evaluated at ``reference_date``.

        Raises
        ------
        InvalidDateRangeError
            If ``due_date_from`` is after ``due_date_to``.
        ValidationError
            On an unknown sort key or a non-positive page/page size,
            or a document filter without digits.
        """
        criteria = criteria or TitleFilter()
        if (
            criteria.due_date_from is not None
            and criteria.due_date_to is not None
            and criteria.due_date_from > criteria.due_date_to
        ):
            raise InvalidDateRangeError(
                f"dueDateFrom {criteria.due_date_from} is after dueDateTo {criteria.due_date_to}",
                [FieldError("dueDateFrom", "Must not be after dueDateTo")],
            )
        if criteria.sort_by not in SORT_KEYS:
            raise ValidationError(
                f"Unknown sort key {criteria.sort_by!r}",
                [FieldError("sortBy", f"Must be one of {', '.join(SORT_KEYS)}")],
            )
        if criteria.debtor_document and not clean_document(criteria.debtor_document):
            raise ValidationError(
                f"Document filter {criteria.debtor_document!r} has no digits",
                [FieldError("debtorDocument", "Must contain digits")],
            )
        if criteria.page < 1 or criteria.page_size < 1:
            raise ValidationError(
                "Page and page size must be positive",
                [FieldError("page", "Must be positive")],
            )

        matches = [e for e in self.evaluate_all(reference_date) if self._matches(e, criteria)]
        matches.sort(key=SORT_KEYS[criteria.sort_by], reverse=criteria.descending)

        start = (criteria.page - 1) * criteria.page_size
        return TitlePage(
            items=matches[start : start + criteria.page_size],
            total=len(matches),
            page=criteria.page,
            page_size=criteria.page_size,
        )

    @staticmethod
    def _matches(evaluation: TitleAccrual, criteria: TitleFilter) -> bool:
        title = evaluation.title
        if criteria.debtor_name and criteria.debtor_name.lower() not in title.debtor.name.lower():
            return False
        if criteria.debtor_document:
            if clean_document(criteria.debtor_document) not in title.debtor.document.value:
                return False
        if criteria.statuses and evaluation.status not in criteria.statuses:
            return False
        if criteria.overdue_only and evaluation.status != DebtStatus.OVERDUE:
            return False
        if criteria.value_from is not None and title.original_value < criteria.value_from:
            return False
        if criteria.value_to is not None and title.original_value > criteria.value_to:
            return False
        if criteria.due_date_from is not None and title.due_date < criteria.due_date_from:
            return False
        if criteria.due_date_to is not None and title.due_date > criteria.due_date_to:
            return False
        return True
