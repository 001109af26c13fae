from __future__ import annotations

import logging
import random
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.core.settings import settings
from loan_office.models.loan_record import LoanRecord
from loan_office.schemas.common import LoanStatus
from loan_office.schemas.dashboard import (
    ChartSeries,
    MonthlyLoanCount,
    NamedValue,
    RepaymentTrends,
    TrendPoint,
)
from loan_office.services import records
from loan_office.services.dashboard_stats import as_utc
from loan_office.services.fallback import FallbackReason, FallbackResult, with_fallback
from loan_office.services.fallback_data import fallback_chart_series
from loan_office.services.money import as_decimal

logger = logging.getLogger(__name__)

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

SHORT_TERM_MAX_DAYS = 30
MEDIUM_TERM_MAX_DAYS = 60

DAILY_JITTER = (0.8, 1.2)
WEEKLY_JITTER = (0.9, 1.1)
MONTHLY_JITTER = (0.9, 1.1)
# Upward trend applied across the six monthly points, oldest first.
MONTHLY_TREND = (0.7, 0.8, 0.9, 1.0, 1.1, 1.2)


@dataclass(frozen=True, slots=True)
class SectionOutcome:
    name: str
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def trend_rng(seed: int | None = None) -> random.Random:
    return random.Random(settings.repayment_trend_seed if seed is None else seed)


def monthly_loans(loans: Iterable[LoanRecord], year: int) -> list[MonthlyLoanCount]:
    counts = [0] * 12
    for loan in loans:
        applied = as_utc(loan.application_date)
        if applied is None or applied.year != year:
            continue
        counts[applied.month - 1] += 1
    return [MonthlyLoanCount(name=name, loans=count) for name, count in zip(MONTH_NAMES, counts)]


def duration_bucket(duration: int | None) -> str:
    days = int(duration or 0)
    if days <= SHORT_TERM_MAX_DAYS:
        return "Short Term"
    if days <= MEDIUM_TERM_MAX_DAYS:
        return "Medium Term"
    return "Long Term"


def loan_durations(loans: Iterable[LoanRecord]) -> list[NamedValue]:
    buckets = {"Short Term": 0, "Medium Term": 0, "Long Term": 0}
    for loan in loans:
        buckets[duration_bucket(loan.loan_duration)] += 1
    return [NamedValue(name=name, value=count) for name, count in buckets.items()]


def _last_months(today: date, count: int) -> list[str]:
    names = []
    for offset in range(count - 1, -1, -1):
        index = (today.month - 1 - offset) % 12
        names.append(MONTH_NAMES[index])
    return names


def _daily_labels(today: date) -> list[str]:
    start = today.toordinal() - 6
    return [WEEKDAY_NAMES[date.fromordinal(start + offset).weekday()] for offset in range(7)]


def repayment_trends(
    active_loans: Iterable[LoanRecord],
    today: date,
    rng: random.Random,
) -> RepaymentTrends:
    """Estimate repayment inflows from the active book.

    There is no payments ledger, so the figures are modelled: each active loan
    repays ``loan_amount / loan_duration`` per day, jittered per loan per day,
    and the weekly and monthly points are rolled up from the daily total with
    their own jitter. The result is flagged ``estimated``.
    """
    daily_rates = []
    for loan in active_loans:
        duration = int(loan.loan_duration or 0)
        if duration <= 0:
            continue
        daily_rates.append(float(as_decimal(loan.loan_amount)) / duration)

    daily: list[TrendPoint] = []
    for label in _daily_labels(today):
        amount = sum(rate * rng.uniform(*DAILY_JITTER) for rate in daily_rates)
        daily.append(TrendPoint(name=label, amount=round(amount, 2)))

    daily_total = sum(point.amount for point in daily)
    weekly = [
        TrendPoint(name=f"Week {index}", amount=round(daily_total * rng.uniform(*WEEKLY_JITTER), 2))
        for index in range(1, 5)
    ]

    weekly_total = sum(point.amount for point in weekly)
    monthly = [
        TrendPoint(
            name=label,
            amount=round(weekly_total * rng.uniform(*MONTHLY_JITTER) * trend, 2),
        )
        for label, trend in zip(_last_months(today, len(MONTHLY_TREND)), MONTHLY_TREND)
    ]
    return RepaymentTrends(daily=daily, weekly=weekly, monthly=monthly, estimated=True)


def loan_officer_distribution(rows: Iterable[tuple[str, int]]) -> list[NamedValue]:
    # Officer names are free text; differently spelled entries stay separate.
    return [NamedValue(name=officer or "", value=int(count)) for officer, count in rows]


async def _run_section(name: str, compute: Callable[[], Awaitable[Any]]) -> SectionOutcome:
    try:
        value = await compute()
    except Exception as exc:
        logger.exception("Dashboard chart section %s failed", name)
        return SectionOutcome(name=name, error=str(exc) or exc.__class__.__name__)
    return SectionOutcome(name=name, value=value)


async def build_dashboard_charts(
    db: AsyncSession,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[SectionOutcome]:
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    year = now.year
    rng = rng or trend_rng()

    async def _monthly():
        loans = await records.list_loan_records(
            db,
            applied_from=datetime(year, 1, 1, tzinfo=timezone.utc),
            applied_to=datetime(year, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc),
        )
        return monthly_loans(loans, year)

    async def _durations():
        return loan_durations(await records.list_loan_records(db))

    async def _trends():
        active = await records.list_loan_records(db, statuses=[LoanStatus.ACTIVE])
        return repayment_trends(active, now.date(), rng)

    async def _officers():
        return loan_officer_distribution(await records.count_loans_by_officer(db))

    # Sections share one session, so they run one after another.
    return [
        await _run_section("monthly_loans", _monthly),
        await _run_section("loan_durations", _durations),
        await _run_section("repayment_trends", _trends),
        await _run_section("loan_officer_distribution", _officers),
    ]


def merge_sections(outcomes: list[SectionOutcome]) -> ChartSeries:
    return ChartSeries(**{outcome.name: outcome.value for outcome in outcomes})


async def get_dashboard_charts(
    db: AsyncSession,
    now: datetime | None = None,
    rng: random.Random | None = None,
    timeout_ms: int | None = None,
) -> FallbackResult[ChartSeries]:
    """Chart series are all live or all substitute; a single failed section swaps in the fallback."""

    async def _compute() -> FallbackResult[ChartSeries]:
        outcomes = await build_dashboard_charts(db, now, rng)
        failed = [outcome for outcome in outcomes if not outcome.ok]
        if failed:
            message = "; ".join(f"{outcome.name}: {outcome.error}" for outcome in failed)
            logger.warning("Chart sections failed, using fallback data: %s", message)
            return FallbackResult.substitute(
                fallback_chart_series(), FallbackReason.SECTION_FAILED, message
            )
        return FallbackResult.live(merge_sections(outcomes))

    outer = await with_fallback(_compute, None, timeout_ms, "Get chart data")
    if outer.is_live:
        return outer.value
    return FallbackResult.substitute(fallback_chart_series(), outer.reason, outer.error)
