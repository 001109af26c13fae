from fastapi import APIRouter

from loan_office.api.v1.routers import dashboard, health, loans, reports, search

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(dashboard.router)
api_router.include_router(reports.router)
api_router.include_router(loans.router)
api_router.include_router(search.router)

__all__ = ["api_router"]
