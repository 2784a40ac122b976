"""Loan file routes."""

from dscr_db import get_db
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas import Pagination
from ..schemas.loan import LoanCreate, LoanListResponse, LoanResponse, LoanUpdate
from ..services import loan as loan_service

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loan not found")


@router.post("/", response_model=LoanResponse, status_code=201)
async def create_loan(
    body: LoanCreate,
    session: AsyncSession = Depends(get_db),
) -> LoanResponse:
    loan = await loan_service.create_loan(session, body)
    return LoanResponse.model_validate(loan)


@router.get("/", response_model=LoanListResponse)
async def list_loans(
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    funder: str | None = Query(default=None),
) -> LoanListResponse:
    loans, total = await loan_service.list_loans(
        session, offset=offset, limit=limit, funder=funder
    )
    return LoanListResponse(
        data=[LoanResponse.model_validate(loan) for loan in loans],
        pagination=Pagination.for_page(total, offset, limit),
    )


@router.get("/{loan_id}", response_model=LoanResponse)
async def get_loan(loan_id: int, session: AsyncSession = Depends(get_db)) -> LoanResponse:
    loan = await loan_service.get_loan(session, loan_id)
    if loan is None:
        raise _not_found()
    return LoanResponse.model_validate(loan)


@router.patch("/{loan_id}", response_model=LoanResponse)
async def update_loan(
    loan_id: int,
    body: LoanUpdate,
    session: AsyncSession = Depends(get_db),
) -> LoanResponse:
    """Partially update a loan. A funder change takes effect on the next completeness read."""
    loan = await loan_service.update_loan(session, loan_id, body)
    if loan is None:
        raise _not_found()
    return LoanResponse.model_validate(loan)


@router.delete("/{loan_id}", status_code=204)
async def delete_loan(loan_id: int, session: AsyncSession = Depends(get_db)) -> None:
    if not await loan_service.delete_loan(session, loan_id):
        raise _not_found()
