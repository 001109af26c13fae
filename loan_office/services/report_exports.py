from __future__ import annotations

import csv
from datetime import datetime
from decimal import Decimal
from io import BytesIO, StringIO

from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from loan_office.core.settings import settings
from loan_office.schemas.reports import ReportFormat, ReportType

NO_DATA_MESSAGE = "No data available for the selected period"

PAGE_WIDTH, PAGE_HEIGHT = letter
MARGIN = 50
TABLE_WIDTH = 500
# Rows are not started below this line; the cursor moves down from the top margin.
PAGE_BREAK_Y = PAGE_HEIGHT - 700
FONT_SIZE = 10
LEADING = 12
ROW_GAP = 6
CELL_PADDING = 4


def _stringify(value) -> str:
    if isinstance(value, Decimal):
        return str(value)
    if value is None:
        return ""
    return str(value)


def render_csv(rows: list[dict]) -> bytes:
    """Columns follow the keys of the first row; keys absent from later rows give empty cells."""
    if not rows:
        return NO_DATA_MESSAGE.encode("utf-8")
    headers = list(rows[0].keys())
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_stringify(row.get(header)) for header in headers])
    return buffer.getvalue().encode("utf-8")


def is_currency_column(header: str) -> bool:
    return "Amount" in header or "Interest" in header


def format_cell(header: str, value, currency: str | None = None) -> str:
    if is_currency_column(header) and isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return f"{currency or settings.report_currency} {value:,.2f}"
    return _stringify(value)


def format_period(start: datetime, end: datetime) -> str:
    return f"{start:%B} {start.day}, {start.year} to {end:%B} {end.day}, {end.year}"


def _wrap(cells: list[str], font: str, column_width: float) -> list[list[str]]:
    width = max(column_width - CELL_PADDING, 1)
    return [simpleSplit(cell, font, FONT_SIZE, width) or [""] for cell in cells]


def _row_height(wrapped: list[list[str]]) -> float:
    return max(len(lines) for lines in wrapped) * LEADING + ROW_GAP


def _draw_row(pdf: canvas.Canvas, wrapped: list[list[str]], font: str, y: float, column_width: float) -> float:
    pdf.setFont(font, FONT_SIZE)
    for index, lines in enumerate(wrapped):
        x = MARGIN + index * column_width
        for line_number, line in enumerate(lines, start=1):
            pdf.drawString(x, y - line_number * LEADING, line)
    return y - _row_height(wrapped)


def render_pdf(
    rows: list[dict],
    report_type: ReportType,
    start: datetime,
    end: datetime,
    currency: str | None = None,
) -> bytes:
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    title = f"{report_type.value.capitalize()} Report"
    pdf.setTitle(title)

    y = PAGE_HEIGHT - MARGIN
    pdf.setFont("Helvetica-Bold", 20)
    pdf.drawCentredString(PAGE_WIDTH / 2, y - 20, title)
    y -= 20 + 16
    pdf.setFont("Helvetica", 12)
    pdf.drawCentredString(PAGE_WIDTH / 2, y - 12, f"Period: {format_period(start, end)}")
    y -= 12 + 32

    if not rows:
        pdf.drawCentredString(PAGE_WIDTH / 2, y - 12, NO_DATA_MESSAGE)
        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    headers = list(rows[0].keys())
    column_width = TABLE_WIDTH / len(headers)
    header_cells = _wrap(headers, "Helvetica-Bold", column_width)
    y = _draw_row(pdf, header_cells, "Helvetica-Bold", y, column_width)

    for row in rows:
        cells = _wrap(
            [format_cell(header, row.get(header), currency) for header in headers],
            "Helvetica",
            column_width,
        )
        if y - _row_height(cells) < PAGE_BREAK_Y:
            pdf.showPage()
            y = _draw_row(pdf, header_cells, "Helvetica-Bold", PAGE_HEIGHT - MARGIN, column_width)
        y = _draw_row(pdf, cells, "Helvetica", y, column_width)

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def report_filename(
    report_type: ReportType, start: datetime, end: datetime, report_format: ReportFormat
) -> str:
    return f"{report_type.value}_report_{start:%Y-%m-%d}_to_{end:%Y-%m-%d}.{report_format.value}"
