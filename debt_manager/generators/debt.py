"""Debt title request generator."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from debt_manager.generators.base import BaseGenerator
from debt_manager.services.preview import preview_installment_plan
from debt_manager.services.requests import CreateDebtTitleRequest


class DebtTitleGenerator(BaseGenerator):
    """Generate synthetic create-title requests.

    Requests go through :class:`DebtTitleService` like any user input, so
    generated data obeys the same validation.
    """

    INSTALLMENT_COUNTS = [1, 2, 3, 4, 6, 10, 12, 18, 24]

    # Percent per day / flat percent, as users type them
    INTEREST_RATES = [Decimal("0"), Decimal("0.033"), Decimal("0.05"), Decimal("0.1"), Decimal("0.2")]
    PENALTY_RATES = [Decimal("0"), Decimal("2"), Decimal("5"), Decimal("10")]

    COMPANY_DEBTOR_RATE = 0.25

    def __init__(self, seed: int | None = None, locale: str = "pt_BR") -> None:
        super().__init__(seed, locale)
        self._sequence = 0

    def generate(self, reference_date: date | None = None) -> CreateDebtTitleRequest:
        """Generate a single create request.

        Parameters
        ----------
        reference_date : date | None
            Anchor for due dates; the first due date falls between one
            year before and three months after it.

        Returns
        -------
        CreateDebtTitleRequest
            Request with installments already split.
        """
        reference = reference_date or date.today()
        self._sequence += 1

        if self.random.random() < self.COMPANY_DEBTOR_RATE:
            name, document = self.fake.company(), self.fake.cnpj()
        else:
            name, document = self.fake.name(), self.fake.cpf()

        value = self.amount(100, 50000, step=10)
        count = self.random.choice(self.INSTALLMENT_COUNTS)
        first_due = reference + timedelta(days=self.random.randint(-365, 90))
        interest = self.random.choice(self.INTEREST_RATES)
        penalty = self.random.choice(self.PENALTY_RATES)

        plan = preview_installment_plan(value, count, first_due, interest, penalty, reference)

        return CreateDebtTitleRequest(
            title_number=f"TIT-{reference.year}-{self._sequence:05d}",
            debtor_name=name,
            debtor_document=document,
            interest_rate_per_day=interest,
            penalty_rate=penalty,
            installments=plan.to_requests(),
            original_value=value,
        )
