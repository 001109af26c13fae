from fastapi import APIRouter, Depends

from loan_office.core.health import live_payload, ready_payload
from loan_office.core.limiter import limiter
from loan_office.db.session import Database, get_database

router = APIRouter(tags=["health"])


@router.get("/health/live", summary="Service liveness check")
@limiter.exempt
async def health_live() -> dict:
    return await live_payload()


@router.get("/health/ready", summary="Service readiness check")
@limiter.exempt
async def health_ready(database: Database = Depends(get_database)) -> dict:
    return await ready_payload(database)


@router.get("/health", summary="Backward-compatible readiness check")
@limiter.exempt
async def read_health(database: Database = Depends(get_database)) -> dict:
    return await ready_payload(database)
