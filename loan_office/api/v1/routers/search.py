from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.db.session import get_db
from loan_office.schemas.records import ClientDetail
from loan_office.services import loan_lookup

router = APIRouter(tags=["search"])


@router.get(
    "/search",
    response_model=ClientDetail,
    summary="Find a client and their loan records by national ID number",
)
async def search_by_id_number(
    id_number: str | None = Query(default=None, alias="idNumber"),
    db: AsyncSession = Depends(get_db),
) -> ClientDetail:
    if not id_number or not id_number.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ID Number is required for search",
        )
    client = await loan_lookup.find_client_by_id_number(db, id_number)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No client found with the provided ID number",
        )
    return client
