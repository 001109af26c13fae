from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.db.session import get_db
from loan_office.schemas.dashboard import ChartSeries, DashboardStats
from loan_office.services import dashboard_charts, dashboard_stats
from loan_office.services.fallback import source_headers

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Get dashboard loan statistics",
)
async def get_dashboard_stats(
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> DashboardStats:
    result = await dashboard_stats.get_dashboard_stats(db)
    response.headers.update(source_headers(result))
    return result.value


@router.get(
    "/charts",
    response_model=ChartSeries,
    summary="Get dashboard chart series",
)
async def get_dashboard_charts(
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> ChartSeries:
    result = await dashboard_charts.get_dashboard_charts(db)
    response.headers.update(source_headers(result))
    return result.value
