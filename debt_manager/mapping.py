"""Request parsing and response mapping.

Requests and responses use camelCase keys, as the web frontend expects.
Rates cross this boundary in percent, the stored unit; they are converted to
fractions only when a title is evaluated.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Callable

from debt_manager.dates import parse_date
from debt_manager.exceptions import FieldError, ValidationError
from debt_manager.models.debtor import NAME_MAX_LENGTH, NAME_MIN_LENGTH, is_valid_document
from debt_manager.money import to_decimal
from debt_manager.rates import MAX_PERCENT
from debt_manager.services.evaluation import InstallmentAccrual, TitleAccrual
from debt_manager.services.requests import (
    CreateDebtTitleRequest,
    InstallmentRequest,
    UpdateDebtTitleRequest,
)
from debt_manager.sinks.serialization import serialize_value


def _whole_number(value: Any) -> int:
    number = to_decimal(value)
    if number != number.to_integral_value():
        raise ValueError(f"Not a whole number: {value!r}")
    return int(number)


class _Reader:
    """Collects field errors while reading a payload."""

    def __init__(self, payload: dict[str, Any], prefix: str = "") -> None:
        self.payload = payload
        self.prefix = prefix
        self.errors: list[FieldError] = []

    def _fail(self, key: str, message: str) -> None:
        self.errors.append(FieldError(f"{self.prefix}{key}", message))

    def _get(self, key: str, required: bool, convert: Callable[[Any], Any]) -> Any:
        raw = self.payload.get(key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            if required:
                self._fail(key, "Is required")
            return None
        try:
            return convert(raw)
        except (ValueError, TypeError):
            self._fail(key, "Has an invalid format")
            return None

    def text(self, key: str, required: bool = True, min_len: int = 1, max_len: int = 200) -> str | None:
        value = self._get(key, required, lambda v: str(v).strip())
        if value is not None and not min_len <= len(value) <= max_len:
            self._fail(key, f"Must have between {min_len} and {max_len} characters")
        return value

    def decimal(self, key: str, required: bool = True, positive: bool = False) -> Decimal | None:
        value = self._get(key, required, to_decimal)
        if value is not None and positive and value <= 0:
            self._fail(key, "Must be greater than zero")
        return value

    def percent(self, key: str) -> Decimal | None:
        value = self._get(key, True, to_decimal)
        if value is not None and not 0 <= value <= MAX_PERCENT:
            self._fail(key, "Must be between 0 and 100")
        return value

    def date(self, key: str, required: bool = True) -> date | None:
        return self._get(key, required, parse_date)

    def integer(self, key: str) -> int | None:
        value = self._get(key, True, _whole_number)
        if value is not None and value <= 0:
            self._fail(key, "Must be greater than zero")
        return value

    def document(self, key: str, required: bool = True) -> str | None:
        value = self._get(key, required, str)
        if value is not None and not is_valid_document(value):
            self._fail(key, "Must be a valid CPF or CNPJ")
        return value

    def raise_if_invalid(self, message: str) -> None:
        if self.errors:
            raise ValidationError(message, self.errors)


def parse_create_request(payload: dict[str, Any]) -> CreateDebtTitleRequest:
    """Build a :class:`CreateDebtTitleRequest` from a JSON-like payload.

    Raises
    ------
    ValidationError
        With one :class:`FieldError` per invalid field.
    """
    reader = _Reader(payload)
    title_number = reader.text("titleNumber", max_len=50)
    original_value = reader.decimal("originalValue", required=False, positive=True)
    due_date = reader.date("dueDate", required=False)
    interest = reader.percent("interestRatePerDay")
    penalty = reader.percent("penaltyRate")
    debtor_name = reader.text("debtorName", min_len=NAME_MIN_LENGTH, max_len=NAME_MAX_LENGTH)
    debtor_document = reader.document("debtorDocument")

    raw_installments = payload.get("installments") or []
    if not isinstance(raw_installments, list) or not raw_installments:
        reader.errors.append(FieldError("installments", "At least one installment is required"))
        raw_installments = []

    installments = []
    for index, raw in enumerate(raw_installments):
        item = _Reader(raw if isinstance(raw, dict) else {}, prefix=f"installments[{index}].")
        number = item.integer("installmentNumber")
        value = item.decimal("value", positive=True)
        item_due = item.date("dueDate")
        reader.errors.extend(item.errors)
        if not item.errors:
            installments.append(InstallmentRequest(number, value, item_due))

    reader.raise_if_invalid("Create request is invalid")
    return CreateDebtTitleRequest(
        title_number=title_number,
        debtor_name=debtor_name,
        debtor_document=debtor_document,
        interest_rate_per_day=interest,
        penalty_rate=penalty,
        installments=installments,
        original_value=original_value,
        due_date=due_date,
    )


def parse_update_request(payload: dict[str, Any]) -> UpdateDebtTitleRequest:
    """Build an :class:`UpdateDebtTitleRequest`; the document is optional."""
    reader = _Reader(payload)
    request = UpdateDebtTitleRequest(
        title_number=reader.text("titleNumber", max_len=50),
        original_value=reader.decimal("originalValue", positive=True),
        due_date=reader.date("dueDate"),
        interest_rate_per_day=reader.percent("interestRatePerDay"),
        penalty_rate=reader.percent("penaltyRate"),
        debtor_name=reader.text("debtorName", min_len=NAME_MIN_LENGTH, max_len=NAME_MAX_LENGTH),
        debtor_document=reader.document("debtorDocument", required=False),
    )
    reader.raise_if_invalid("Update request is invalid")
    return request


def installment_to_response(line: InstallmentAccrual) -> dict[str, Any]:
    installment = line.installment
    return serialize_value(
        {
            "id": installment.installment_id,
            "installmentNumber": installment.installment_number,
            "value": installment.value,
            "dueDate": installment.due_date,
            "isPaid": installment.is_paid,
            "paidAt": installment.paid_at,
            "isOverdue": line.accrual.is_overdue,
            "daysOverdue": line.accrual.days_overdue,
            "interestAmount": line.accrual.interest,
            "penaltyAmount": line.accrual.penalty,
            "updatedValue": line.accrual.total,
            "status": line.status,
        }
    )


def title_to_response(evaluation: TitleAccrual) -> dict[str, Any]:
    title = evaluation.title
    document = title.debtor.document
    return serialize_value(
        {
            "id": title.title_id,
            "titleNumber": title.title_number,
            "originalValue": title.original_value,
            "updatedValue": evaluation.updated_value,
            "outstandingValue": evaluation.outstanding_value,
            "interestAmount": evaluation.accrual.interest,
            "penaltyAmount": evaluation.accrual.penalty,
            "dueDate": title.due_date,
            "interestRatePerDay": title.interest_rate_per_day,
            "penaltyRate": title.penalty_rate,
            "debtorName": title.debtor.name,
            "debtorDocument": document.value,
            "debtorDocumentType": document.document_type,
            "debtorDocumentFormatted": document.formatted,
            "createdAt": title.created_at,
            "updatedAt": title.updated_at,
            "installmentCount": len(evaluation.installments),
            "paidInstallments": evaluation.paid_installments,
            "daysOverdue": evaluation.days_overdue,
            "isOverdue": evaluation.days_overdue > 0,
            "status": evaluation.status,
            "referenceDate": evaluation.reference_date,
            "installments": [installment_to_response(line) for line in evaluation.installments],
        }
    )
