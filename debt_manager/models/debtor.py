"""Debtor and document value objects.

A document is a Brazilian CPF (individuals, 11 digits) or CNPJ (companies,
14 digits). Both carry two check digits computed with mod-11 weights; a
value is accepted only if its check digits match and it is not a run of a
single repeated digit (``111.111.111-11`` passes the arithmetic but is not
issued).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from debt_manager.exceptions import DocumentValidationError, FieldError
from debt_manager.models.enums import DocumentType

_NON_DIGITS = re.compile(r"[^0-9]")

_CNPJ_WEIGHTS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
_CNPJ_WEIGHTS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 200


def clean_document(value: str) -> str:
    """Strip everything but digits from a document string."""
    return _NON_DIGITS.sub("", value or "")


def _cpf_check_digit(digits: list[int]) -> int:
    start = len(digits) + 1
    total = sum(d * w for d, w in zip(digits, range(start, 1, -1)))
    check = (total * 10) % 11
    return 0 if check == 10 else check


def _cnpj_check_digit(digits: list[int], weights: tuple[int, ...]) -> int:
    remainder = sum(d * w for d, w in zip(digits, weights)) % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_cpf(value: str) -> bool:
    """Return True if ``value`` (digits only) is a valid CPF."""
    if len(value) != 11 or not value.isdigit() or len(set(value)) == 1:
        return False
    digits = [int(c) for c in value]
    if digits[9] != _cpf_check_digit(digits[:9]):
        return False
    return digits[10] == _cpf_check_digit(digits[:10])


def is_valid_cnpj(value: str) -> bool:
    """Return True if ``value`` (digits only) is a valid CNPJ."""
    if len(value) != 14 or not value.isdigit() or len(set(value)) == 1:
        return False
    digits = [int(c) for c in value]
    if digits[12] != _cnpj_check_digit(digits[:12], _CNPJ_WEIGHTS_1):
        return False
    return digits[13] == _cnpj_check_digit(digits[:13], _CNPJ_WEIGHTS_2)


def is_valid_document(value: str) -> bool:
    cleaned = clean_document(value)
    return is_valid_cpf(cleaned) or is_valid_cnpj(cleaned)


@dataclass(frozen=True)
class Document:
    """A validated CPF or CNPJ, stored as digits only."""

    value: str
    document_type: DocumentType

    @classmethod
    def parse(cls, raw: str) -> Document:
        """Build a document from user input, formatted or not.

        Raises
        ------
        DocumentValidationError
            If the input is blank or neither a valid CPF nor CNPJ.
        """
        if raw is None or not str(raw).strip():
            raise DocumentValidationError(
                "Document is required",
                [FieldError("debtorDocument", "Document is required")],
            )
        cleaned = clean_document(str(raw))
        if is_valid_cpf(cleaned):
            return cls(cleaned, DocumentType.CPF)
        if is_valid_cnpj(cleaned):
            return cls(cleaned, DocumentType.CNPJ)
        raise DocumentValidationError(
            f"Invalid document {raw!r}: must be a valid CPF or CNPJ",
            [FieldError("debtorDocument", "Must be a valid CPF or CNPJ")],
        )

    @property
    def formatted(self) -> str:
        v = self.value
        if self.document_type == DocumentType.CPF:
            return f"{v[:3]}.{v[3:6]}.{v[6:9]}-{v[9:]}"
        return f"{v[:2]}.{v[2:5]}.{v[5:8]}/{v[8:12]}-{v[12:]}"


@dataclass(frozen=True)
class Debtor:
    """The party that owes a debt title."""

    name: str
    document: Document

    @classmethod
    def create(cls, name: str, document: str) -> Debtor:
        clean_name = (name or "").strip()
        if not NAME_MIN_LENGTH <= len(clean_name) <= NAME_MAX_LENGTH:
            raise DocumentValidationError(
                "Debtor name must have between 2 and 200 characters",
                [FieldError("debtorName", "Must have between 2 and 200 characters")],
            )
        return cls(clean_name, Document.parse(document))

    def __str__(self) -> str:
        return f"{self.name} ({self.document.formatted})"
