from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.db.session import get_db
from loan_office.schemas.reports import ReportFormat, ReportType
from loan_office.services import reports
from loan_office.services.fallback import source_headers

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get(
    "/export",
    response_class=StreamingResponse,
    summary="Export a loans, payments, clients or summary report as CSV or PDF",
)
async def export_report(
    report_type: str | None = Query(default=None, alias="type"),
    report_format: str | None = Query(default=None, alias="format"),
    from_date: str | None = Query(default=None, alias="from"),
    to_date: str | None = Query(default=None, alias="to"),
    db: AsyncSession = Depends(get_db),
) -> StreamingResponse:
    resolved_type = ReportType(report_type)
    resolved_format = ReportFormat(report_format)
    start, end = reports.resolve_report_period(from_date, to_date)
    report = await reports.generate_report(db, resolved_type, resolved_format, start, end)
    headers = {"Content-Disposition": f'attachment; filename="{report.filename}"'}
    headers.update(source_headers(report))
    return StreamingResponse(
        iter([report.content]),
        media_type=report.media_type,
        headers=headers,
    )
