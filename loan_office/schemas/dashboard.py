from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UpcomingPayment(CamelModel):
    id: UUID | str | None = None
    client_name: str
    client_id: str
    phone_number: str | None = None
    due_date: datetime
    amount: float
    currency: str = "KES"


class DashboardStats(CamelModel):
    total_loans: int = 0
    active_loans: int = 0
    loans_ending_soon: int = 0
    total_disbursed: float = 0
    total_interest_earned: float = 0
    total_active_interest: float = 0
    total_expected_return: float = 0
    total_active_expected_return: float = 0
    upcoming_payments: list[UpcomingPayment] = Field(default_factory=list)
    loan_status_distribution: dict[str, int] = Field(default_factory=dict)


class MonthlyLoanCount(CamelModel):
    name: str
    loans: int = 0


class NamedValue(CamelModel):
    name: str
    value: int = 0


class TrendPoint(CamelModel):
    name: str
    amount: float = 0


class RepaymentTrends(CamelModel):
    """Estimated repayment series; there is no payments ledger to read real figures from."""

    daily: list[TrendPoint] = Field(default_factory=list)
    weekly: list[TrendPoint] = Field(default_factory=list)
    monthly: list[TrendPoint] = Field(default_factory=list)
    estimated: bool = True


class ChartSeries(CamelModel):
    monthly_loans: list[MonthlyLoanCount] = Field(default_factory=list)
    loan_durations: list[NamedValue] = Field(default_factory=list)
    repayment_trends: RepaymentTrends = Field(default_factory=RepaymentTrends)
    loan_officer_distribution: list[NamedValue] = Field(default_factory=list)
