from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from loan_office import __version__
from loan_office.core.settings import settings
from loan_office.db.session import Database
from loan_office.services.fallback import is_database_available

APP_VERSION = __version__


async def _check_db(database: Database) -> dict[str, str]:
    async with database.session() as session:
        available = await is_database_available(session)
    if available:
        return {"status": "ok"}
    return {"status": "error", "error": "database unreachable"}


async def _check_api() -> dict[str, str]:
    return {"status": "ok", "version": APP_VERSION}


def _overall_status(checks: dict[str, dict[str, Any]]) -> tuple[str, bool]:
    ready = all(check.get("status") == "ok" for check in checks.values())
    return ("ok" if ready else "degraded", ready)


async def live_payload() -> dict[str, str]:
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def ready_payload(database: Database) -> dict[str, Any]:
    checks = {
        "api": await _check_api(),
        "database": await _check_db(database),
    }
    overall, ready = _overall_status(checks)
    return {
        "status": overall,
        "ready": ready,
        "environment": settings.environment,
        "version": APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }
