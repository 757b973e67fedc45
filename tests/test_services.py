"""Tests for the debt title and installment services."""

import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from debt_manager.config import AccrualConfig
from debt_manager.exceptions import (
    DebtTitleNotFoundError,
    InvalidAmountError,
    InvalidDateRangeError,
    ValidationError,
)
from debt_manager.models import DebtStatus, InstallmentStatus, RateUnit
from debt_manager.services import (
    CreateDebtTitleRequest,
    DebtTitleService,
    InstallmentRequest,
    InstallmentService,
    TitleFilter,
    UpdateDebtTitleRequest,
)
from debt_manager.store import DebtDataStore


def single_installment_request(
    number: str, name: str, document: str, value: str, due: date
) -> CreateDebtTitleRequest:
    return CreateDebtTitleRequest(
        title_number=number,
        debtor_name=name,
        debtor_document=document,
        interest_rate_per_day=Decimal("0.1"),
        penalty_rate=Decimal("10"),
        installments=[InstallmentRequest(1, Decimal(value), due)],
    )


def update_request(**overrides: object) -> UpdateDebtTitleRequest:
    values: dict = {
        "title_number": "TIT-001-A",
        "original_value": Decimal("1000.00"),
        "due_date": date(2024, 1, 1),
        "interest_rate_per_day": Decimal("0.1"),
        "penalty_rate": Decimal("10"),
        "debtor_name": "Maria Souza",
    }
    values.update(overrides)
    return UpdateDebtTitleRequest(**values)


class TestCreate:
    """Tests for DebtTitleService.create."""

    def test_create(
        self,
        title_service: DebtTitleService,
        create_request: CreateDebtTitleRequest,
        fixed_now: datetime,
    ) -> None:
        title = title_service.create(create_request)

        assert title.title_number == "TIT-001"
        assert title.due_date == date(2024, 1, 1)
        assert title.created_at == fixed_now
        assert title.debtor.document.value == "11144477735"
        installments = title_service.store.get_title_installments(title.title_id)
        assert [i.installment_number for i in installments] == [1, 2]
        assert all(i.created_at == fixed_now for i in installments)

    def test_value_defaults_to_installment_sum(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        create_request.original_value = None

        title = title_service.create(create_request)

        assert title.original_value == Decimal("1000.00")

    def test_explicit_due_date_kept(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        create_request.due_date = date(2024, 2, 1)

        assert title_service.create(create_request).due_date == date(2024, 2, 1)

    def test_requires_installments(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        create_request.installments = []

        with pytest.raises(ValidationError) as exc_info:
            title_service.create(create_request)

        assert exc_info.value.errors[0].field == "installments"

    def test_installments_must_add_up(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        create_request.original_value = Decimal("999.99")

        with pytest.raises(InvalidAmountError):
            title_service.create(create_request)
        assert title_service.store.titles == {}

    def test_duplicate_installment_numbers(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        create_request.installments[1].installment_number = 1

        with pytest.raises(ValidationError):
            title_service.create(create_request)
        assert title_service.store.titles == {}

    def test_invalid_document(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        create_request.debtor_document = "123.456.789-00"

        with pytest.raises(ValidationError):
            title_service.create(create_request)

    def test_logs_creation(
        self,
        title_service: DebtTitleService,
        create_request: CreateDebtTitleRequest,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="debt_manager"):
            title_service.create(create_request)

        assert "Created debt title" in caplog.text


class TestUpdateDelete:
    """Tests for DebtTitleService.update and delete."""

    def test_update_keeps_document_when_omitted(
        self,
        title_service: DebtTitleService,
        create_request: CreateDebtTitleRequest,
        fixed_now: datetime,
    ) -> None:
        title = title_service.create(create_request)

        updated = title_service.update(title.title_id, update_request())

        assert updated.title_number == "TIT-001-A"
        assert updated.debtor.name == "Maria Souza"
        assert updated.debtor.document.value == "11144477735"
        assert updated.created_at == title.created_at
        assert updated.updated_at == fixed_now
        assert title_service.get(title.title_id) is updated

    def test_update_document(
        self,
        title_service: DebtTitleService,
        create_request: CreateDebtTitleRequest,
        valid_cnpj: str,
    ) -> None:
        title = title_service.create(create_request)

        title_service.update(title.title_id, update_request(debtor_document=valid_cnpj))

        assert title_service.list_by_document(valid_cnpj)[0].title_id == title.title_id
        assert title_service.list_by_document("11144477735") == []

    def test_update_value_must_match_installments(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        title = title_service.create(create_request)

        with pytest.raises(InvalidAmountError):
            title_service.update(title.title_id, update_request(original_value=Decimal("1200")))

    def test_rate_change_logged_as_warning(
        self,
        title_service: DebtTitleService,
        create_request: CreateDebtTitleRequest,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        title = title_service.create(create_request)

        with caplog.at_level(logging.INFO, logger="debt_manager"):
            title_service.update(title.title_id, update_request(penalty_rate=Decimal("2")))

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Rates of debt title" in warnings[0].getMessage()

    def test_update_unknown(self, title_service: DebtTitleService) -> None:
        with pytest.raises(DebtTitleNotFoundError):
            title_service.update("missing", update_request())

    def test_delete_cascades(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        title = title_service.create(create_request)

        title_service.delete(title.title_id)

        assert title_service.list_all() == []
        assert title_service.store.installments == {}
        with pytest.raises(DebtTitleNotFoundError):
            title_service.get(title.title_id)

    def test_list_by_document_requires_value(self, title_service: DebtTitleService) -> None:
        with pytest.raises(ValidationError):
            title_service.list_by_document("  ")


class TestEvaluate:
    """Tests for title evaluation."""

    def test_overdue_title(
        self,
        title_service: DebtTitleService,
        create_request: CreateDebtTitleRequest,
        reference_date: date,
    ) -> None:
        title = title_service.create(create_request)

        evaluation = title_service.evaluate(title.title_id, reference_date)

        first, second = evaluation.installments
        assert first.accrual.total == Decimal("565.00")
        assert first.status == InstallmentStatus.OVERDUE
        assert second.accrual.total == Decimal("500.00")
        assert second.status == InstallmentStatus.PENDING
        assert evaluation.updated_value == Decimal("1065.00")
        assert evaluation.accrual.interest == Decimal("15.00")
        assert evaluation.accrual.penalty == Decimal("50.00")
        assert evaluation.outstanding_value == Decimal("1065.00")
        assert evaluation.days_overdue == 30
        assert evaluation.status == DebtStatus.OVERDUE

    def test_before_any_due_date(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> None:
        title = title_service.create(create_request)

        evaluation = title_service.evaluate(title.title_id, date(2023, 12, 1))

        assert evaluation.updated_value == Decimal("1000.00")
        assert evaluation.status == DebtStatus.ACTIVE

    def test_paid_installment_counts_at_principal(
        self,
        title_service: DebtTitleService,
        installment_service: InstallmentService,
        create_request: CreateDebtTitleRequest,
    ) -> None:
        title = title_service.create(create_request)
        first = title_service.store.get_title_installments(title.title_id)[0]
        installment_service.mark_as_paid(first.installment_id, datetime(2024, 1, 1, 12))

        evaluation = title_service.evaluate(title.title_id, date(2024, 3, 1))

        assert evaluation.installments[0].accrual.total == Decimal("500.00")
        assert evaluation.installments[1].accrual.total == Decimal("564.50")
        assert evaluation.updated_value == Decimal("1064.50")
        assert evaluation.outstanding_value == Decimal("564.50")
        assert evaluation.paid_installments == 1

    def test_fully_paid_title(
        self,
        title_service: DebtTitleService,
        installment_service: InstallmentService,
        create_request: CreateDebtTitleRequest,
    ) -> None:
        title = title_service.create(create_request)
        for item in title_service.store.get_title_installments(title.title_id):
            installment_service.mark_as_paid(item.installment_id)

        evaluation = title_service.evaluate(title.title_id, date(2024, 6, 1))

        assert evaluation.status == DebtStatus.PAID
        assert evaluation.updated_value == Decimal("1000.00")
        assert evaluation.outstanding_value == Decimal("0")

    def test_monthly_deployment(
        self, store: DebtDataStore, create_request: CreateDebtTitleRequest
    ) -> None:
        """The stored rate is read as percent per month."""
        service = DebtTitleService(store, AccrualConfig(rate_unit=RateUnit.MONTH))
        create_request.interest_rate_per_day = Decimal("3")
        title = service.create(create_request)

        evaluation = service.evaluate(title.title_id, date(2024, 1, 31))

        # 500 * 3% * 30/30 + 10% penalty
        assert evaluation.installments[0].accrual.total == Decimal("565.00")

    def test_total_debt_value(
        self,
        title_service: DebtTitleService,
        create_request: CreateDebtTitleRequest,
        reference_date: date,
        valid_cnpj: str,
    ) -> None:
        title_service.create(create_request)
        title_service.create(
            single_installment_request("TIT-002", "Acme Ltda", valid_cnpj, "200.00", date(2024, 3, 1))
        )

        assert title_service.total_debt_value(reference_date) == Decimal("1265.00")


class TestFilter:
    """Tests for DebtTitleService.filter."""

    @pytest.fixture
    def populated(
        self,
        title_service: DebtTitleService,
        create_request: CreateDebtTitleRequest,
        valid_cnpj: str,
    ) -> DebtTitleService:
        title_service.create(create_request)
        title_service.create(
            single_installment_request("TIT-002", "Acme Ltda", valid_cnpj, "200.00", date(2024, 3, 1))
        )
        title_service.create(
            single_installment_request("TIT-003", "Acme Ltda", valid_cnpj, "3000.00", date(2024, 1, 20))
        )
        return title_service

    def test_default_returns_all(self, populated: DebtTitleService, reference_date: date) -> None:
        page = populated.filter(reference_date)

        assert page.total == 3
        assert page.total_pages == 1

    def test_by_debtor_name(self, populated: DebtTitleService, reference_date: date) -> None:
        page = populated.filter(reference_date, TitleFilter(debtor_name="acme"))

        assert {e.title.title_number for e in page.items} == {"TIT-002", "TIT-003"}

    def test_by_document_fragment(self, populated: DebtTitleService, reference_date: date) -> None:
        page = populated.filter(reference_date, TitleFilter(debtor_document="111.444"))

        assert [e.title.title_number for e in page.items] == ["TIT-001"]

    def test_document_without_digits_rejected(
        self, populated: DebtTitleService, reference_date: date
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            populated.filter(reference_date, TitleFilter(debtor_document="abc"))

        assert exc_info.value.errors[0].field == "debtorDocument"

    def test_overdue_only(self, populated: DebtTitleService, reference_date: date) -> None:
        page = populated.filter(reference_date, TitleFilter(overdue_only=True))

        assert {e.title.title_number for e in page.items} == {"TIT-001", "TIT-003"}

    def test_status(self, populated: DebtTitleService, reference_date: date) -> None:
        page = populated.filter(reference_date, TitleFilter(statuses=[DebtStatus.ACTIVE]))

        assert [e.title.title_number for e in page.items] == ["TIT-002"]

    def test_value_range(self, populated: DebtTitleService, reference_date: date) -> None:
        criteria = TitleFilter(value_from=Decimal("500"), value_to=Decimal("2000"))

        page = populated.filter(reference_date, criteria)

        assert [e.title.title_number for e in page.items] == ["TIT-001"]

    def test_due_date_range(self, populated: DebtTitleService, reference_date: date) -> None:
        criteria = TitleFilter(due_date_from=date(2024, 1, 10), due_date_to=date(2024, 2, 1))

        page = populated.filter(reference_date, criteria)

        assert [e.title.title_number for e in page.items] == ["TIT-003"]

    def test_inverted_date_range(self, populated: DebtTitleService, reference_date: date) -> None:
        criteria = TitleFilter(due_date_from=date(2024, 2, 1), due_date_to=date(2024, 1, 1))

        with pytest.raises(InvalidDateRangeError):
            populated.filter(reference_date, criteria)

    def test_sort_by_updated_value(self, populated: DebtTitleService, reference_date: date) -> None:
        criteria = TitleFilter(sort_by="updatedValue", descending=False)

        page = populated.filter(reference_date, criteria)

        assert [e.title.title_number for e in page.items] == ["TIT-002", "TIT-001", "TIT-003"]

    def test_unknown_sort_key(self, populated: DebtTitleService, reference_date: date) -> None:
        with pytest.raises(ValidationError):
            populated.filter(reference_date, TitleFilter(sort_by="color"))

    def test_pagination(self, populated: DebtTitleService, reference_date: date) -> None:
        criteria = TitleFilter(sort_by="titleNumber", descending=False, page=2, page_size=2)

        page = populated.filter(reference_date, criteria)

        assert page.total == 3
        assert page.total_pages == 2
        assert [e.title.title_number for e in page.items] == ["TIT-003"]

    def test_invalid_page(self, populated: DebtTitleService, reference_date: date) -> None:
        with pytest.raises(ValidationError):
            populated.filter(reference_date, TitleFilter(page=0))


class TestInstallmentService:
    """Tests for InstallmentService."""

    @pytest.fixture
    def title_id(
        self, title_service: DebtTitleService, create_request: CreateDebtTitleRequest
    ) -> str:
        return title_service.create(create_request).title_id

    def test_mark_as_paid_records_event(
        self, installment_service: InstallmentService, title_id: str, fixed_now: datetime
    ) -> None:
        first = installment_service.list_for_title(title_id)[0]

        paid = installment_service.mark_as_paid(first.installment_id)

        assert paid.is_paid is True
        assert paid.paid_at == fixed_now
        events = installment_service.store.get_subject_events(first.installment_id)
        assert [e.event_type for e in events] == ["installment.paid"]
        assert events[0].data["title_id"] == title_id
        assert events[0].source == "debt-manager"

    def test_mark_as_paid_twice_keeps_last_payment(
        self, installment_service: InstallmentService, title_id: str
    ) -> None:
        first = installment_service.list_for_title(title_id)[0]
        installment_service.mark_as_paid(first.installment_id, datetime(2024, 1, 5, 9))

        paid = installment_service.mark_as_paid(first.installment_id, datetime(2024, 1, 6, 9))

        assert paid.is_paid is True
        assert paid.paid_at == datetime(2024, 1, 6, 9)
        events = installment_service.store.get_subject_events(first.installment_id)
        assert [e.event_type for e in events] == ["installment.paid", "installment.paid"]
        assert "previous_paid_at" not in events[0].data
        assert events[1].data["previous_paid_at"] == "2024-01-05T09:00:00"

    def test_mark_as_unpaid_when_not_paid(
        self,
        installment_service: InstallmentService,
        title_id: str,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        first = installment_service.list_for_title(title_id)[0]

        with caplog.at_level(logging.INFO, logger="debt_manager"):
            result = installment_service.mark_as_unpaid(first.installment_id, reason="typo")

        assert result.is_paid is False
        assert result.updated_at is None
        assert installment_service.store.get_subject_events(first.installment_id) == []
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_mark_as_unpaid_resumes_accrual(
        self,
        installment_service: InstallmentService,
        title_id: str,
        reference_date: date,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        first = installment_service.list_for_title(title_id)[0]
        installment_service.mark_as_paid(first.installment_id, datetime(2024, 1, 1, 12))

        with caplog.at_level(logging.INFO, logger="debt_manager"):
            installment_service.mark_as_unpaid(first.installment_id, reason="chargeback")

        line = installment_service.evaluate(first.installment_id, reference_date)
        assert line.accrual.total == Decimal("565.00")
        assert line.status == InstallmentStatus.OVERDUE
        events = installment_service.store.get_subject_events(first.installment_id)
        assert [e.event_type for e in events] == ["installment.paid", "installment.unpaid"]
        assert events[1].data["reason"] == "chargeback"
        assert events[1].data["previous_paid_at"] == "2024-01-01T12:00:00"
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_overdue(
        self, installment_service: InstallmentService, title_id: str, reference_date: date
    ) -> None:
        overdue = installment_service.overdue(reference_date)

        assert len(overdue) == 1
        assert overdue[0].installment.installment_number == 1
        assert installment_service.overdue_count(reference_date) == 1
        assert installment_service.total_overdue_value(reference_date) == Decimal("565.00")
        assert installment_service.count() == 2

    def test_overdue_sorted_by_days(
        self, installment_service: InstallmentService, title_id: str
    ) -> None:
        overdue = installment_service.overdue(date(2024, 3, 1))

        assert [line.accrual.days_overdue for line in overdue] == [60, 29]

    def test_list_by_document(
        self, installment_service: InstallmentService, title_id: str, valid_cpf: str
    ) -> None:
        assert len(installment_service.list_by_document(valid_cpf)) == 2

        with pytest.raises(ValidationError):
            installment_service.list_by_document("")

    def test_list_for_unknown_title(self, installment_service: InstallmentService) -> None:
        with pytest.raises(DebtTitleNotFoundError):
            installment_service.list_for_title("missing")
