"""Fixed substitute dataset served while the store is unreachable."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from loan_office.models.client import Client
from loan_office.models.guarantor import Guarantor
from loan_office.models.loan_record import LoanRecord
from loan_office.models.media_file import MediaFile
from loan_office.models.reference import Reference
from loan_office.schemas.common import FileType, LoanStatus
from loan_office.schemas.dashboard import (
    ChartSeries,
    DashboardStats,
    MonthlyLoanCount,
    NamedValue,
    RepaymentTrends,
    TrendPoint,
)

CLIENT_1_ID = UUID("00000000-0000-4000-8000-00000000c001")
CLIENT_2_ID = UUID("00000000-0000-4000-8000-00000000c002")
LOAN_1_ID = UUID("00000000-0000-4000-8000-00000000a001")
LOAN_2_ID = UUID("00000000-0000-4000-8000-00000000a002")
LOAN_3_ID = UUID("00000000-0000-4000-8000-00000000a003")
GUARANTOR_IDS = (
    UUID("00000000-0000-4000-8000-00000000b001"),
    UUID("00000000-0000-4000-8000-00000000b002"),
)
REFERENCE_IDS = (
    UUID("00000000-0000-4000-8000-00000000d001"),
    UUID("00000000-0000-4000-8000-00000000d002"),
)
MEDIA_FILE_ID = UUID("00000000-0000-4000-8000-00000000e001")


def _ts(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def fallback_clients() -> list[Client]:
    """Build the substitute clients with their loans, guarantors, references and files attached.

    Fresh instances are returned on every call so callers may mutate them freely.
    """
    john = Client(
        id=CLIENT_1_ID,
        name="John Doe",
        id_number="ID123456",
        phone_number_1="+1234567890",
        phone_number_2=None,
        business_location="Downtown Market",
        permit_number="P-12345",
        home_address="123 Main St",
        created_at=_ts(2025, 1, 15),
        updated_at=_ts(2025, 1, 15),
    )
    jane = Client(
        id=CLIENT_2_ID,
        name="Jane Smith",
        id_number="ID789012",
        phone_number_1="+0987654321",
        phone_number_2="+1122334455",
        business_location="Central Plaza",
        permit_number="P-67890",
        home_address="456 Oak Ave",
        created_at=_ts(2025, 2, 20),
        updated_at=_ts(2025, 2, 20),
    )

    active_loan = LoanRecord(
        id=LOAN_1_ID,
        client_id=CLIENT_1_ID,
        loan_amount=Decimal("5000"),
        interest_rate=Decimal("10"),
        registration_fee=Decimal("100"),
        loan_duration=30,
        application_date=_ts(2025, 1, 20),
        disbursement_date=_ts(2025, 1, 25),
        first_installment_date=_ts(2025, 2, 1),
        last_installment_date=_ts(2025, 2, 25),
        daily_payment_check=True,
        loan_officer="Michael Johnson",
        status=LoanStatus.ACTIVE.value,
        created_at=_ts(2025, 1, 20),
        updated_at=_ts(2025, 1, 25),
    )
    disbursed_loan = LoanRecord(
        id=LOAN_2_ID,
        client_id=CLIENT_2_ID,
        loan_amount=Decimal("10000"),
        interest_rate=Decimal("12"),
        registration_fee=Decimal("200"),
        loan_duration=60,
        application_date=_ts(2025, 2, 25),
        disbursement_date=_ts(2025, 3, 1),
        first_installment_date=_ts(2025, 3, 10),
        last_installment_date=_ts(2025, 5, 10),
        daily_payment_check=False,
        loan_officer="Sarah Williams",
        status=LoanStatus.DISBURSED.value,
        created_at=_ts(2025, 2, 25),
        updated_at=_ts(2025, 3, 1),
    )
    pending_loan = LoanRecord(
        id=LOAN_3_ID,
        client_id=CLIENT_1_ID,
        loan_amount=Decimal("3000"),
        interest_rate=Decimal("8"),
        registration_fee=Decimal("50"),
        loan_duration=15,
        application_date=_ts(2025, 4, 5),
        disbursement_date=None,
        first_installment_date=None,
        last_installment_date=None,
        daily_payment_check=True,
        loan_officer="Michael Johnson",
        status=LoanStatus.PENDING.value,
        created_at=_ts(2025, 4, 5),
        updated_at=_ts(2025, 4, 5),
    )
    active_loan.client = john
    pending_loan.client = john
    disbursed_loan.client = jane

    active_loan.guarantors = [
        Guarantor(
            id=GUARANTOR_IDS[0],
            name="Robert Brown",
            id_number="ID-G12345",
            phone_number="+2233445566",
            client=john,
        )
    ]
    disbursed_loan.guarantors = [
        Guarantor(
            id=GUARANTOR_IDS[1],
            name="Emily Davis",
            id_number="ID-G67890",
            phone_number="+3344556677",
            client=jane,
        )
    ]
    active_loan.references = [
        Reference(
            id=REFERENCE_IDS[0],
            name="Thomas Wilson",
            phone_number="+4455667788",
            relationship_to_client="Friend",
            client=john,
        ),
        Reference(
            id=REFERENCE_IDS[1],
            name="Patricia Moore",
            phone_number="+5566778899",
            relationship_to_client="Colleague",
            client=john,
        ),
    ]
    active_loan.media_files = [
        MediaFile(
            id=MEDIA_FILE_ID,
            file_name="contract_loan1.pdf",
            file_type=FileType.CONTRACT_PDF.value,
            file_url="https://example.com/contracts/contract_loan1.pdf",
            description="Signed Contract",
            client=john,
        )
    ]
    for loan in (disbursed_loan, pending_loan):
        loan.references = []
        loan.media_files = []
    pending_loan.guarantors = []
    return [john, jane]


def fallback_loan_records() -> list[LoanRecord]:
    """Substitute loans, newest application first, each with its client attached."""
    loans = [loan for client in fallback_clients() for loan in client.loan_records]
    return sorted(loans, key=lambda loan: loan.application_date, reverse=True)


def fallback_dashboard_stats() -> DashboardStats:
    return DashboardStats(
        total_loans=3,
        active_loans=1,
        loans_ending_soon=0,
        total_disbursed=15000,
        total_interest_earned=500,
        total_active_interest=500,
        total_expected_return=16700,
        total_active_expected_return=5500,
        upcoming_payments=[],
        loan_status_distribution={
            "PENDING": 1,
            "APPROVED": 0,
            "DISBURSED": 1,
            "ACTIVE": 1,
            "COMPLETED": 0,
            "DEFAULTED": 0,
            "REJECTED": 0,
        },
    )


def fallback_chart_series() -> ChartSeries:
    monthly_counts = [1, 1, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0]
    month_names = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    daily = [160.12, 171.4, 158.75, 180.03, 166.67, 149.9, 175.22]
    weekly = [1120.5, 1185.3, 1150.75, 1201.1]
    monthly = [3260.0, 3730.0, 4190.0, 4660.0, 5120.0, 5590.0]
    return ChartSeries(
        monthly_loans=[
            MonthlyLoanCount(name=name, loans=count)
            for name, count in zip(month_names, monthly_counts)
        ],
        loan_durations=[
            NamedValue(name="Short Term", value=2),
            NamedValue(name="Medium Term", value=1),
            NamedValue(name="Long Term", value=0),
        ],
        repayment_trends=RepaymentTrends(
            daily=[
                TrendPoint(name=name, amount=amount)
                for name, amount in zip(["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"], daily)
            ],
            weekly=[TrendPoint(name=f"Week {index}", amount=amount) for index, amount in enumerate(weekly, 1)],
            monthly=[TrendPoint(name=name, amount=amount) for name, amount in zip(month_names, monthly)],
        ),
        loan_officer_distribution=[
            NamedValue(name="Michael Johnson", value=2),
            NamedValue(name="Sarah Williams", value=1),
        ],
    )
