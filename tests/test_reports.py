from __future__ import annotations

import csv
import io
from datetime import datetime, time, timezone
from decimal import Decimal

import pytest
from reportlab.pdfgen import canvas

from loan_office.schemas.reports import ReportFormat, ReportType
from loan_office.services.fallback import DataSource, FallbackReason
from loan_office.services.report_exports import (
    NO_DATA_MESSAGE,
    format_cell,
    format_period,
    render_csv,
    render_pdf,
    report_filename,
)
from loan_office.services.reports import (
    client_rows,
    collect_report_rows,
    generate_report,
    loan_rows,
    payment_rows,
    resolve_report_period,
    summary_rows,
)
from conftest import FailingAsyncSession, FakeResult, make_client, make_loan, utc

START = utc(2026, 10, 1)
END = datetime.combine(datetime(2026, 10, 18).date(), time.max, tzinfo=timezone.utc)


def _csv_rows(content: bytes) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content.decode("utf-8"))))


@pytest.fixture
def pdf_calls(monkeypatch) -> dict[str, list]:
    """Record what render_pdf draws without parsing the compressed PDF streams."""
    calls: dict[str, list] = {"text": [], "centred": [], "pages": []}
    draw_string = canvas.Canvas.drawString
    draw_centred = canvas.Canvas.drawCentredString
    show_page = canvas.Canvas.showPage

    def _draw_string(self, x, y, text, *args, **kwargs):
        calls["text"].append(text)
        return draw_string(self, x, y, text, *args, **kwargs)

    def _draw_centred(self, x, y, text, *args, **kwargs):
        calls["centred"].append(text)
        return draw_centred(self, x, y, text, *args, **kwargs)

    def _show_page(self):
        calls["pages"].append(1)
        return show_page(self)

    monkeypatch.setattr(canvas.Canvas, "drawString", _draw_string)
    monkeypatch.setattr(canvas.Canvas, "drawCentredString", _draw_centred)
    monkeypatch.setattr(canvas.Canvas, "showPage", _show_page)
    return calls


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def test_csv_columns_follow_first_row_order() -> None:
    rows = [
        {"ID": "1", "ClientName": "Amina", "LoanAmount": Decimal("5000.00")},
        {"ID": "2", "ClientName": "Brian", "LoanAmount": Decimal("750.50")},
    ]

    parsed = _csv_rows(render_csv(rows))

    assert parsed == [
        ["ID", "ClientName", "LoanAmount"],
        ["1", "Amina", "5000.00"],
        ["2", "Brian", "750.50"],
    ]


def test_csv_missing_keys_become_empty_cells() -> None:
    parsed = _csv_rows(render_csv([{"a": 1, "b": 2}, {"a": 3}]))

    assert parsed == [["a", "b"], ["1", "2"], ["3", ""]]


def test_csv_quotes_values_with_commas() -> None:
    parsed = _csv_rows(render_csv([{"Location": "Gikomba, Stall 4"}]))

    assert parsed[1] == ["Gikomba, Stall 4"]


def test_empty_csv_is_the_no_data_message() -> None:
    assert render_csv([]) == NO_DATA_MESSAGE.encode("utf-8")


# ---------------------------------------------------------------------------
# Cell and period formatting
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("header", "value", "expected"),
    [
        ("LoanAmount", Decimal("5000"), "KES 5,000.00"),
        ("TotalInterest", 1234.5, "KES 1,234.50"),
        ("InterestRate", 10.0, "KES 10.00"),
        ("TotalLoans", 3, "3"),
        ("Status", "ACTIVE", "ACTIVE"),
        ("LoanAmount", "N/A", "N/A"),
        ("Notes", None, ""),
    ],
)
def test_format_cell(header, value, expected) -> None:
    assert format_cell(header, value, "KES") == expected


def test_format_period_spells_out_months() -> None:
    assert format_period(START, END) == "October 1, 2026 to October 18, 2026"


def test_report_filename() -> None:
    assert report_filename(ReportType.LOANS, START, END, ReportFormat.CSV) == (
        "loans_report_2026-10-01_to_2026-10-18.csv"
    )
    assert report_filename(ReportType.SUMMARY, START, END, ReportFormat.PDF) == (
        "summary_report_2026-10-01_to_2026-10-18.pdf"
    )


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------


def test_pdf_has_title_period_and_table(pdf_calls) -> None:
    rows = loan_rows([make_loan(client=make_client())])

    content = render_pdf(rows, ReportType.LOANS, START, END)

    assert content.startswith(b"%PDF")
    assert "Loans Report" in pdf_calls["centred"]
    assert "Period: October 1, 2026 to October 18, 2026" in pdf_calls["centred"]
    assert "ID" in pdf_calls["text"]
    assert "ACTIVE" in pdf_calls["text"]
    assert len(pdf_calls["pages"]) == 1


def test_empty_pdf_states_no_data(pdf_calls) -> None:
    content = render_pdf([], ReportType.CLIENTS, START, END)

    assert content.startswith(b"%PDF")
    assert NO_DATA_MESSAGE in pdf_calls["centred"]
    assert "Clients Report" in pdf_calls["centred"]
    assert len(pdf_calls["pages"]) == 1


def test_long_pdf_breaks_pages_and_repeats_header(pdf_calls) -> None:
    client = make_client()
    rows = loan_rows([make_loan(client=client) for _ in range(120)])

    render_pdf(rows, ReportType.LOANS, START, END)

    pages = len(pdf_calls["pages"])
    assert pages > 1
    assert pdf_calls["text"].count("ID") == pages


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def test_loan_rows_columns_and_values() -> None:
    client = make_client(name="Amina Otieno", id_number="ID555001", phone_number_1="+254711000111")
    loan = make_loan(
        client=client,
        loan_amount=Decimal("5000"),
        interest_rate=Decimal("10"),
        application_date=utc(2026, 10, 2),
        loan_officer="Grace Wanjiku",
    )

    (row,) = loan_rows([loan])

    assert list(row) == [
        "ID",
        "ClientName",
        "ClientID",
        "PhoneNumber",
        "LoanAmount",
        "InterestRate",
        "TotalAmount",
        "ApplicationDate",
        "DisbursementDate",
        "Status",
        "LoanOfficer",
    ]
    assert row["ClientName"] == "Amina Otieno"
    assert row["ClientID"] == "ID555001"
    assert row["TotalAmount"] == Decimal("5500.00")
    assert row["ApplicationDate"] == "2026-10-02"
    assert row["DisbursementDate"] == "N/A"


def test_client_rows_count_loans() -> None:
    client = make_client(name="Brian Mwangi")
    make_loan(client=client, status="ACTIVE", loan_amount=Decimal("1000"))
    make_loan(client=client, status="COMPLETED", loan_amount=Decimal("2500"))

    (row,) = client_rows([client])

    assert row["Name"] == "Brian Mwangi"
    assert row["TotalLoans"] == 2
    assert row["ActiveLoans"] == 1
    assert row["TotalAmount"] == Decimal("3500.00")


def test_summary_row_counts_every_status() -> None:
    loans = [
        make_loan(status="ACTIVE", loan_amount=Decimal("5000"), interest_rate=Decimal("10")),
        make_loan(status="PENDING", loan_amount=Decimal("1000"), interest_rate=Decimal("5")),
        make_loan(status="REJECTED", loan_amount=Decimal("2000"), interest_rate=Decimal("0")),
    ]

    (row,) = summary_rows(loans, START, END)

    assert row["TotalLoans"] == 3
    assert row["ActiveLoans"] == 1
    assert row["PendingLoans"] == 1
    assert row["RejectedLoans"] == 1
    assert row["ApprovedLoans"] == 0
    assert row["TotalAmount"] == Decimal("8000.00")
    assert row["TotalInterest"] == Decimal("550.00")
    assert row["Period"] == "2026-10-01 to 2026-10-18"


def test_payment_rows_are_illustrative() -> None:
    rows = payment_rows()

    assert len(rows) == 2
    assert list(rows[0]) == ["ID", "ClientName", "LoanID", "PaymentDate", "Amount", "PaymentMethod", "ReceivedBy"]


# ---------------------------------------------------------------------------
# Period and enum resolution
# ---------------------------------------------------------------------------


def test_period_defaults_to_month_to_date() -> None:
    start, end = resolve_report_period(None, None, now=utc(2026, 10, 18, 15))

    assert start == utc(2026, 10, 1)
    assert end == END


def test_period_end_covers_the_whole_day() -> None:
    start, end = resolve_report_period("2026-09-01", "2026-09-30")

    assert start == utc(2026, 9, 1)
    assert end.date().isoformat() == "2026-09-30"
    assert end.time() == time.max


def test_unparsable_dates_fall_back_to_defaults() -> None:
    start, end = resolve_report_period("not-a-date", "", now=utc(2026, 10, 18))

    assert start == utc(2026, 10, 1)
    assert end == END


@pytest.mark.parametrize(("raw", "expected"), [("clients", ReportType.CLIENTS), ("SUMMARY", ReportType.SUMMARY), ("weird", ReportType.LOANS), (None, ReportType.LOANS)])
def test_report_type_defaults_to_loans(raw, expected) -> None:
    assert ReportType(raw) is expected


@pytest.mark.parametrize(("raw", "expected"), [("pdf", ReportFormat.PDF), ("xlsx", ReportFormat.CSV), (None, ReportFormat.CSV)])
def test_report_format_defaults_to_csv(raw, expected) -> None:
    assert ReportFormat(raw) is expected


# ---------------------------------------------------------------------------
# Collection and generation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_inverted_period_yields_no_rows_without_querying() -> None:
    session = FailingAsyncSession()

    for report_type in ReportType:
        assert await collect_report_rows(session, report_type, END, START) == []
    assert session.statements == []


@pytest.mark.asyncio
async def test_generate_csv_report_from_live_rows(fake_db) -> None:
    client = make_client()
    loans = [make_loan(client=client, application_date=utc(2026, 10, day)) for day in (3, 4, 5)]
    fake_db.on_execute_return(FakeResult(items=loans))

    report = await generate_report(fake_db, ReportType.LOANS, ReportFormat.CSV, START, END, timeout_ms=1000)

    assert report.source is DataSource.LIVE
    assert report.media_type == "text/csv"
    assert report.filename == "loans_report_2026-10-01_to_2026-10-18.csv"
    parsed = _csv_rows(report.content)
    assert parsed[0][0] == "ID"
    assert len(parsed) == 4


@pytest.mark.asyncio
async def test_generate_report_for_empty_period(fake_db) -> None:
    report = await generate_report(fake_db, ReportType.CLIENTS, ReportFormat.CSV, START, END, timeout_ms=1000)

    assert report.content == NO_DATA_MESSAGE.encode("utf-8")
    assert report.source is DataSource.LIVE


@pytest.mark.asyncio
async def test_generate_report_uses_fallback_rows_during_outage() -> None:
    start, end = utc(2025, 1, 1), utc(2025, 12, 31, 23)

    report = await generate_report(
        FailingAsyncSession(), ReportType.LOANS, ReportFormat.CSV, start, end, timeout_ms=1000
    )

    assert report.source is DataSource.FALLBACK
    assert report.reason is FallbackReason.ERROR
    parsed = _csv_rows(report.content)
    assert len(parsed) == 4
    assert {row[1] for row in parsed[1:]} == {"John Doe", "Jane Smith"}


@pytest.mark.asyncio
async def test_generate_pdf_report(fake_db) -> None:
    fake_db.on_execute_return(FakeResult(items=[make_loan(status="ACTIVE")]))

    report = await generate_report(fake_db, ReportType.SUMMARY, ReportFormat.PDF, START, END, timeout_ms=1000)

    assert report.media_type == "application/pdf"
    assert report.content.startswith(b"%PDF")
    assert report.filename.endswith(".pdf")
