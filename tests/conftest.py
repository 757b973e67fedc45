"""Pytest configuration and fixtures."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from debt_manager.services import (
    CreateDebtTitleRequest,
    DebtTitleService,
    InstallmentRequest,
    InstallmentService,
)
from debt_manager.store import DebtDataStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def reference_date() -> date:
    """Reference date one month after the first sample due date."""
    return date(2024, 1, 31)


@pytest.fixture
def valid_cpf() -> str:
    """A CPF with correct check digits."""
    return "11144477735"


@pytest.fixture
def valid_cnpj() -> str:
    """A CNPJ with correct check digits."""
    return "11222333000181"


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 10, 0, 0)


@pytest.fixture
def store() -> DebtDataStore:
    """Create a fresh store for each test."""
    return DebtDataStore()


@pytest.fixture
def title_service(store: DebtDataStore, fixed_now: datetime) -> DebtTitleService:
    return DebtTitleService(store, clock=lambda: fixed_now)


@pytest.fixture
def installment_service(store: DebtDataStore, fixed_now: datetime) -> InstallmentService:
    return InstallmentService(store, clock=lambda: fixed_now)


@pytest.fixture
def create_request(valid_cpf: str) -> CreateDebtTitleRequest:
    """Two installments of 500.00, 0.1% per day interest and a 10% penalty."""
    return CreateDebtTitleRequest(
        title_number="TIT-001",
        debtor_name="Maria Silva",
        debtor_document=valid_cpf,
        interest_rate_per_day=Decimal("0.1"),
        penalty_rate=Decimal("10"),
        installments=[
            InstallmentRequest(1, Decimal("500.00"), date(2024, 1, 1)),
            InstallmentRequest(2, Decimal("500.00"), date(2024, 2, 1)),
        ],
        original_value=Decimal("1000.00"),
    )
