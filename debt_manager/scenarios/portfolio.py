"""Debt portfolio scenario with payment behavior."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, time, timedelta

from debt_manager.config import DebtManagerConfig
from debt_manager.generators import DebtTitleGenerator
from debt_manager.services import DebtTitleService, InstallmentService
from debt_manager.store import DebtDataStore

logger = logging.getLogger(__name__)


class DebtPortfolioScenario:
    """Generate a portfolio of titles whose installments are partly paid.

    This scenario creates:
    - Titles for individual (CPF) and company (CNPJ) debtors
    - Installments split monthly from a first due date
    - Payment behavior on installments already due:
        - Paid up to a few days late
        - Left open, so they accrue interest and penalty
        - Paid and then reopened (audit trail exercise)
    """

    def __init__(
        self,
        num_titles: int = 50,
        paid_rate: float = 0.70,
        reopen_rate: float = 0.02,
        seed: int | None = None,
        *,
        config: DebtManagerConfig | None = None,
    ) -> None:
        """Initialize the scenario.

        Parameters
        ----------
        num_titles : int
            Number of titles to create.
        paid_rate : float
            Share of due installments that get paid (0.0 to 1.0).
        reopen_rate : float
            Share of paid installments that are reopened afterwards.
        seed : int | None
            Random seed for reproducibility.
        config : DebtManagerConfig | None
            Optional configuration; supplies seed, locale and accrual
            convention when given.
        """
        self.config = config or DebtManagerConfig(seed=seed)
        self.seed = seed if seed is not None else self.config.seed
        self.num_titles = num_titles
        self.paid_rate = paid_rate
        self.reopen_rate = reopen_rate

        self._random = random.Random(self.seed)
        self.store = DebtDataStore()
        self.titles = DebtTitleService(self.store, self.config.accrual)
        self.installments = InstallmentService(self.store, self.config.accrual)
        self._generator = DebtTitleGenerator(seed=self.seed, locale=self.config.locale)

    def generate(self, reference_date: date | None = None) -> DebtDataStore:
        """Generate all data for the portfolio.

        Returns
        -------
        DebtDataStore
            Store containing all generated data.
        """
        reference = reference_date or date.today()
        logger.info(
            "Starting debt portfolio scenario: %d titles, %.0f%% of due installments paid",
            self.num_titles,
            self.paid_rate * 100,
        )

        for request in self._generator.generate_batch(self.num_titles, reference):
            title = self.titles.create(request)
            for installment in self.store.get_title_installments(title.title_id):
                if installment.due_date > reference or self._random.random() >= self.paid_rate:
                    continue
                delay = self._random.randint(0, 5)
                paid_on = min(installment.due_date + timedelta(days=delay), reference)
                self.installments.mark_as_paid(
                    installment.installment_id, datetime.combine(paid_on, time(12))
                )
                if self._random.random() < self.reopen_rate:
                    self.installments.mark_as_unpaid(
                        installment.installment_id, reason="payment reversed"
                    )

        logger.info("Generated portfolio: %s", self.store.summary())
        return self.store
