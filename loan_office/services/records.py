from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from loan_office.models.client import Client
from loan_office.models.loan_record import LoanRecord
from loan_office.schemas.common import LoanStatus


def _status_values(statuses: Iterable[LoanStatus | str]) -> list[str]:
    return [status.value if isinstance(status, LoanStatus) else str(status) for status in statuses]


def _loan_relations():
    return (
        selectinload(LoanRecord.guarantors),
        selectinload(LoanRecord.references),
        selectinload(LoanRecord.media_files),
    )


async def list_loan_records(
    db: AsyncSession,
    *,
    statuses: Iterable[LoanStatus | str] | None = None,
    applied_from: datetime | None = None,
    applied_to: datetime | None = None,
    with_client: bool = False,
    with_relations: bool = False,
    limit: int | None = None,
) -> list[LoanRecord]:
    stmt = select(LoanRecord)
    if statuses is not None:
        stmt = stmt.where(LoanRecord.status.in_(_status_values(statuses)))
    if applied_from is not None:
        stmt = stmt.where(LoanRecord.application_date >= applied_from)
    if applied_to is not None:
        stmt = stmt.where(LoanRecord.application_date <= applied_to)
    if with_client:
        stmt = stmt.options(selectinload(LoanRecord.client))
    if with_relations:
        stmt = stmt.options(*_loan_relations())
    stmt = stmt.order_by(LoanRecord.application_date.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    return list((await db.execute(stmt)).scalars().all())


async def list_clients(
    db: AsyncSession,
    *,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    with_loans: bool = False,
) -> list[Client]:
    stmt = select(Client)
    if created_from is not None:
        stmt = stmt.where(Client.created_at >= created_from)
    if created_to is not None:
        stmt = stmt.where(Client.created_at <= created_to)
    if with_loans:
        stmt = stmt.options(selectinload(Client.loan_records))
    stmt = stmt.order_by(Client.name.asc())
    return list((await db.execute(stmt)).scalars().all())


async def get_client_by_id_number(db: AsyncSession, id_number: str) -> Client | None:
    stmt = (
        select(Client)
        .options(
            selectinload(Client.loan_records).selectinload(LoanRecord.guarantors),
            selectinload(Client.loan_records).selectinload(LoanRecord.references),
            selectinload(Client.loan_records).selectinload(LoanRecord.media_files),
        )
        .where(Client.id_number == id_number)
    )
    return (await db.execute(stmt)).scalars().first()


async def count_loans_by_officer(db: AsyncSession) -> list[tuple[str, int]]:
    stmt = (
        select(LoanRecord.loan_officer, func.count(LoanRecord.id))
        .group_by(LoanRecord.loan_officer)
        .order_by(LoanRecord.loan_officer)
    )
    rows = (await db.execute(stmt)).all()
    return [(row[0], int(row[1])) for row in rows]


async def ping(db: AsyncSession) -> None:
    await db.execute(text("SELECT 1"))
