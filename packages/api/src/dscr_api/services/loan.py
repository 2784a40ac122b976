"""Loan file CRUD service."""

import logging

from dscr_db import Loan
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.loan import LoanCreate, LoanUpdate
from .completeness import load_loan_documents
from .storage import get_storage_service

logger = logging.getLogger(__name__)


async def list_loans(
    session: AsyncSession,
    *,
    offset: int = 0,
    limit: int = 20,
    funder: str | None = None,
) -> tuple[list[Loan], int]:
    """Return loans, most recently updated first.

    Args:
        funder: Only return loans for this funder key (case-insensitive).
    """
    count_stmt = select(func.count(Loan.id))
    stmt = select(Loan).order_by(Loan.updated_at.desc()).offset(offset).limit(limit)
    if funder:
        condition = func.lower(Loan.funder) == funder.strip().lower()
        count_stmt = count_stmt.where(condition)
        stmt = stmt.where(condition)

    total = (await session.execute(count_stmt)).scalar() or 0
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def get_loan(session: AsyncSession, loan_id: int) -> Loan | None:
    return await session.get(Loan, loan_id)


async def create_loan(session: AsyncSession, data: LoanCreate) -> Loan:
    loan = Loan(**data.model_dump())
    session.add(loan)
    await session.commit()
    await session.refresh(loan)
    logger.info("Created loan %s (funder=%s)", loan.id, loan.funder)
    return loan


async def update_loan(session: AsyncSession, loan_id: int, data: LoanUpdate) -> Loan | None:
    """Apply the fields set on ``data``.

    Changing the funder needs no follow-up: completeness is recomputed from
    the new funder's requirements on the next read.
    """
    loan = await get_loan(session, loan_id)
    if loan is None:
        return None

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(loan, field, value)
    await session.commit()
    await session.refresh(loan)
    return loan


async def delete_loan(session: AsyncSession, loan_id: int) -> bool:
    """Delete a loan, its documents, and their stored files."""
    loan = await get_loan(session, loan_id)
    if loan is None:
        return False

    documents = await load_loan_documents(session, loan_id)
    stored = [doc.file_path for doc in documents if doc.file_path]
    if stored:
        storage = get_storage_service()
        for object_key in stored:
            await storage.delete_file(object_key)

    await session.delete(loan)
    await session.commit()
    logger.info("Deleted loan %s (%d documents)", loan_id, len(documents))
    return True
