from __future__ import annotations

from enum import Enum


class LoanStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DISBURSED = "DISBURSED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DEFAULTED = "DEFAULTED"
    REJECTED = "REJECTED"


# Statuses whose principal has left the books.
DISBURSED_STATUSES = frozenset({LoanStatus.ACTIVE, LoanStatus.COMPLETED, LoanStatus.DISBURSED})


class FileType(str, Enum):
    CONTRACT_PDF = "CONTRACT_PDF"
    OTHER_DOCUMENT = "OTHER_DOCUMENT"


def coerce_status(value: str | LoanStatus | None) -> LoanStatus | None:
    if value is None:
        return None
    try:
        return LoanStatus(value)
    except ValueError:
        return None
