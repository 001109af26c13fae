from __future__ import annotations

from enum import Enum


class ReportType(str, Enum):
    LOANS = "loans"
    PAYMENTS = "payments"
    CLIENTS = "clients"
    SUMMARY = "summary"

    @classmethod
    def _missing_(cls, value):  # type: ignore[override]
        if isinstance(value, str):
            member = cls._value2member_map_.get(value.strip().lower())
            if member is not None:
                return member
        return cls.LOANS


class ReportFormat(str, Enum):
    CSV = "csv"
    PDF = "pdf"

    @classmethod
    def _missing_(cls, value):  # type: ignore[override]
        if isinstance(value, str):
            member = cls._value2member_map_.get(value.strip().lower())
            if member is not None:
                return member
        return cls.CSV

    @property
    def media_type(self) -> str:
        return "application/pdf" if self is ReportFormat.PDF else "text/csv"
