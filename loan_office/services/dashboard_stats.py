from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.core.settings import settings
from loan_office.models.loan_record import LoanRecord
from loan_office.schemas.common import DISBURSED_STATUSES, LoanStatus, coerce_status
from loan_office.schemas.dashboard import DashboardStats, UpcomingPayment
from loan_office.services import records
from loan_office.services.fallback import FallbackResult, with_fallback
from loan_office.services.fallback_data import fallback_dashboard_stats
from loan_office.services.money import ZERO, as_decimal, interest_amount, round_cents


def as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _within(value: datetime | None, start: datetime, end: datetime) -> bool:
    value = as_utc(value)
    return value is not None and start <= value <= end


def installment_amount(loan: LoanRecord) -> Decimal:
    """Even per-day share of principal plus interest over the loan duration."""
    duration = int(loan.loan_duration or 0)
    if duration <= 0:
        return ZERO
    principal = as_decimal(loan.loan_amount)
    payable = principal + interest_amount(principal, loan.interest_rate)
    return round_cents(payable / Decimal(duration))


def _upcoming_payment(loan: LoanRecord, currency: str) -> UpcomingPayment:
    client = loan.client
    return UpcomingPayment(
        id=loan.id,
        client_name=client.name if client is not None else "",
        client_id=client.id_number if client is not None else "",
        phone_number=client.phone_number_1 if client is not None else None,
        due_date=as_utc(loan.first_installment_date),
        amount=float(installment_amount(loan)),
        currency=currency,
    )


def build_dashboard_stats_from_data(
    loans: Iterable[LoanRecord],
    now: datetime,
    *,
    ending_soon_days: int | None = None,
    upcoming_days: int | None = None,
    upcoming_limit: int | None = None,
    currency: str | None = None,
) -> DashboardStats:
    """Summarise loan records for the dashboard.

    Interest is recognised at disbursement rather than at collection: an ACTIVE
    loan's interest counts towards ``total_interest_earned`` as well as
    ``total_active_interest``. PENDING, APPROVED, REJECTED and DEFAULTED loans
    never contribute to the monetary totals.
    """
    now = as_utc(now)
    ending_soon_end = now + timedelta(
        days=settings.ending_soon_window_days if ending_soon_days is None else ending_soon_days
    )
    upcoming_end = now + timedelta(
        days=settings.upcoming_payment_window_days if upcoming_days is None else upcoming_days
    )
    limit = settings.upcoming_payment_limit if upcoming_limit is None else upcoming_limit

    total_loans = 0
    active_loans = 0
    loans_ending_soon = 0
    total_disbursed = ZERO
    total_interest_earned = ZERO
    total_active_interest = ZERO
    total_expected_return = ZERO
    total_active_expected_return = ZERO
    distribution = {status.value: 0 for status in LoanStatus}
    upcoming: list[LoanRecord] = []

    for loan in loans:
        total_loans += 1
        status = coerce_status(loan.status)
        if status is not None:
            distribution[status.value] += 1

        if status is LoanStatus.ACTIVE:
            active_loans += 1
            if _within(loan.last_installment_date, now, ending_soon_end):
                loans_ending_soon += 1
            if _within(loan.first_installment_date, now, upcoming_end):
                upcoming.append(loan)

        if status not in DISBURSED_STATUSES:
            continue

        principal = as_decimal(loan.loan_amount)
        interest = interest_amount(principal, loan.interest_rate)
        expected_return = principal + interest
        total_disbursed += principal
        total_expected_return += expected_return
        if status is LoanStatus.COMPLETED:
            total_interest_earned += interest
        elif status is LoanStatus.ACTIVE:
            total_active_interest += interest
            total_active_expected_return += expected_return
            total_interest_earned += interest

    upcoming.sort(key=lambda loan: as_utc(loan.first_installment_date))
    payment_currency = currency or settings.report_currency
    upcoming_payments = [_upcoming_payment(loan, payment_currency) for loan in upcoming[:limit]]

    return DashboardStats(
        total_loans=total_loans,
        active_loans=active_loans,
        loans_ending_soon=loans_ending_soon,
        total_disbursed=float(total_disbursed),
        total_interest_earned=float(total_interest_earned),
        total_active_interest=float(total_active_interest),
        total_expected_return=float(total_expected_return),
        total_active_expected_return=float(total_active_expected_return),
        upcoming_payments=upcoming_payments,
        loan_status_distribution=distribution,
    )


async def build_dashboard_stats(db: AsyncSession, now: datetime | None = None) -> DashboardStats:
    loans = await records.list_loan_records(db, with_client=True)
    return build_dashboard_stats_from_data(loans, now or datetime.now(timezone.utc))


async def get_dashboard_stats(
    db: AsyncSession,
    now: datetime | None = None,
    timeout_ms: int | None = None,
) -> FallbackResult[DashboardStats]:
    return await with_fallback(
        lambda: build_dashboard_stats(db, now),
        fallback_dashboard_stats,
        timeout_ms,
        "Get dashboard stats",
    )
