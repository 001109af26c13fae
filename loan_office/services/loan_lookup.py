from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.schemas.records import ClientDetail, LoanRecordWithClient
from loan_office.services import records
from loan_office.services.fallback import FallbackResult, with_fallback
from loan_office.services.fallback_data import fallback_loan_records

DEFAULT_RECENT_LIMIT = 50


def _to_read(loans) -> list[LoanRecordWithClient]:
    return [LoanRecordWithClient.model_validate(loan) for loan in loans]


async def list_recent_loans(
    db: AsyncSession,
    limit: int = DEFAULT_RECENT_LIMIT,
    timeout_ms: int | None = None,
) -> FallbackResult[list[LoanRecordWithClient]]:
    async def _load() -> list[LoanRecordWithClient]:
        loans = await records.list_loan_records(db, with_client=True, limit=limit)
        return _to_read(loans)

    return await with_fallback(
        _load,
        lambda: _to_read(fallback_loan_records()[:limit]),
        timeout_ms,
        "Get all loans",
    )


async def find_client_by_id_number(db: AsyncSession, id_number: str) -> ClientDetail | None:
    client = await records.get_client_by_id_number(db, id_number.strip())
    if client is None:
        return None
    return ClientDetail.model_validate(client)
