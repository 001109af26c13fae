from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.db.session import get_db
from loan_office.schemas.records import LoanRecordWithClient
from loan_office.services import loan_lookup
from loan_office.services.fallback import source_headers

router = APIRouter(prefix="/loans", tags=["loans"])


@router.get(
    "",
    response_model=list[LoanRecordWithClient],
    summary="List the most recent loan records",
)
async def list_loans(
    response: Response,
    limit: int = Query(default=loan_lookup.DEFAULT_RECENT_LIMIT, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> list[LoanRecordWithClient]:
    result = await loan_lookup.list_recent_loans(db, limit)
    response.headers.update(source_headers(result))
    return result.value
