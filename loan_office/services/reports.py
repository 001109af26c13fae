from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.models.client import Client
from loan_office.models.loan_record import LoanRecord
from loan_office.schemas.common import LoanStatus, coerce_status
from loan_office.schemas.reports import ReportFormat, ReportType
from loan_office.services import records
from loan_office.services.dashboard_stats import as_utc
from loan_office.services.fallback import DataSource, FallbackReason, with_fallback
from loan_office.services.fallback_data import fallback_clients, fallback_loan_records
from loan_office.services.money import ZERO, as_decimal, interest_amount, round_cents, total_payable
from loan_office.services.report_exports import render_csv, render_pdf, report_filename

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


@dataclass(slots=True)
class ReportFile:
    content: bytes
    media_type: str
    filename: str
    source: DataSource = DataSource.LIVE
    reason: FallbackReason | None = None


def _parse_day(value: str | date | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        return datetime.fromisoformat(cleaned.replace("Z", "+00:00")).date()
    except ValueError:
        logger.warning("Ignoring unparsable report date %r", value)
        return None


def resolve_report_period(
    from_value: str | date | None,
    to_value: str | date | None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Resolve the inclusive report window.

    Missing or unparsable bounds default to the first of the current month and
    today; the end bound always covers its whole day.
    """
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    start_day = _parse_day(from_value) or now.date().replace(day=1)
    end_day = _parse_day(to_value) or now.date()
    start = datetime.combine(start_day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_day, time.max, tzinfo=timezone.utc)
    return start, end


def _format_day(value: datetime | None, default: str = "") -> str:
    return value.strftime(DATE_FORMAT) if value is not None else default


def _money(value) -> Decimal:
    return round_cents(as_decimal(value))


def loan_rows(loans: Iterable[LoanRecord]) -> list[dict]:
    rows = []
    for loan in loans:
        client = loan.client
        rows.append(
            {
                "ID": str(loan.id),
                "ClientName": client.name if client is not None else "",
                "ClientID": client.id_number if client is not None else "",
                "PhoneNumber": client.phone_number_1 if client is not None else "",
                "LoanAmount": _money(loan.loan_amount),
                "InterestRate": float(as_decimal(loan.interest_rate)),
                "TotalAmount": round_cents(total_payable(loan.loan_amount, loan.interest_rate)),
                "ApplicationDate": _format_day(loan.application_date),
                "DisbursementDate": _format_day(loan.disbursement_date, "N/A"),
                "Status": loan.status,
                "LoanOfficer": loan.loan_officer,
            }
        )
    return rows


def payment_rows() -> list[dict]:
    """Illustrative rows only: no payments are recorded anywhere yet."""
    return [
        {
            "ID": "1",
            "ClientName": "John Doe",
            "LoanID": "LOAN-001",
            "PaymentDate": "2023-05-01",
            "Amount": Decimal("5000.00"),
            "PaymentMethod": "Cash",
            "ReceivedBy": "Jane Smith",
        },
        {
            "ID": "2",
            "ClientName": "Alice Johnson",
            "LoanID": "LOAN-002",
            "PaymentDate": "2023-05-02",
            "Amount": Decimal("3000.00"),
            "PaymentMethod": "M-Pesa",
            "ReceivedBy": "Jane Smith",
        },
    ]


def client_rows(clients: Iterable[Client]) -> list[dict]:
    rows = []
    for client in clients:
        loans = list(client.loan_records or [])
        active = sum(1 for loan in loans if coerce_status(loan.status) is LoanStatus.ACTIVE)
        total_amount = sum((as_decimal(loan.loan_amount) for loan in loans), ZERO)
        rows.append(
            {
                "ID": str(client.id),
                "Name": client.name,
                "IDNumber": client.id_number,
                "PhoneNumber": client.phone_number_1,
                "BusinessLocation": client.business_location,
                "TotalLoans": len(loans),
                "ActiveLoans": active,
                "TotalAmount": round_cents(total_amount),
            }
        )
    return rows


def summary_rows(loans: Iterable[LoanRecord], start: datetime, end: datetime) -> list[dict]:
    loans = list(loans)
    counts = {status: 0 for status in LoanStatus}
    total_amount = ZERO
    total_interest = ZERO
    for loan in loans:
        status = coerce_status(loan.status)
        if status is not None:
            counts[status] += 1
        total_amount += as_decimal(loan.loan_amount)
        total_interest += interest_amount(loan.loan_amount, loan.interest_rate)
    return [
        {
            "TotalLoans": len(loans),
            "PendingLoans": counts[LoanStatus.PENDING],
            "ApprovedLoans": counts[LoanStatus.APPROVED],
            "DisbursedLoans": counts[LoanStatus.DISBURSED],
            "ActiveLoans": counts[LoanStatus.ACTIVE],
            "CompletedLoans": counts[LoanStatus.COMPLETED],
            "DefaultedLoans": counts[LoanStatus.DEFAULTED],
            "RejectedLoans": counts[LoanStatus.REJECTED],
            "TotalAmount": round_cents(total_amount),
            "TotalInterest": round_cents(total_interest),
            "Period": f"{start:%Y-%m-%d} to {end:%Y-%m-%d}",
        }
    ]


def _in_period(value: datetime | None, start: datetime, end: datetime) -> bool:
    value = as_utc(value)
    return value is not None and start <= value <= end


def fallback_report_rows(report_type: ReportType, start: datetime, end: datetime) -> list[dict]:
    """Shape the substitute dataset exactly as the live queries would."""
    if start > end:
        return []
    if report_type is ReportType.PAYMENTS:
        return payment_rows()
    if report_type is ReportType.CLIENTS:
        clients = [c for c in fallback_clients() if _in_period(c.created_at, start, end)]
        return client_rows(clients)
    loans = [
        loan for loan in fallback_loan_records() if _in_period(loan.application_date, start, end)
    ]
    if report_type is ReportType.SUMMARY:
        return summary_rows(loans, start, end)
    return loan_rows(loans)


async def collect_report_rows(
    db: AsyncSession, report_type: ReportType, start: datetime, end: datetime
) -> list[dict]:
    if start > end:
        return []
    if report_type is ReportType.PAYMENTS:
        return payment_rows()
    if report_type is ReportType.CLIENTS:
        clients = await records.list_clients(
            db, created_from=start, created_to=end, with_loans=True
        )
        return client_rows(clients)
    if report_type is ReportType.SUMMARY:
        loans = await records.list_loan_records(db, applied_from=start, applied_to=end)
        return summary_rows(loans, start, end)
    loans = await records.list_loan_records(
        db, applied_from=start, applied_to=end, with_client=True
    )
    return loan_rows(loans)


async def generate_report(
    db: AsyncSession,
    report_type: ReportType,
    report_format: ReportFormat,
    start: datetime,
    end: datetime,
    timeout_ms: int | None = None,
) -> ReportFile:
    result = await with_fallback(
        lambda: collect_report_rows(db, report_type, start, end),
        lambda: fallback_report_rows(report_type, start, end),
        timeout_ms,
        f"Collect {report_type.value} report rows",
    )
    if report_format is ReportFormat.PDF:
        content = render_pdf(result.value, report_type, start, end)
    else:
        content = render_csv(result.value)
    return ReportFile(
        content=content,
        media_type=report_format.media_type,
        filename=report_filename(report_type, start, end, report_format),
        source=result.source,
        reason=result.reason,
    )
