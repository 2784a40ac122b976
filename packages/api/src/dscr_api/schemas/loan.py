"""Loan request/response schemas."""

from datetime import datetime
from decimal import Decimal

from dscr_db.enums import LoanPurpose, PropertyType
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination


class LoanCreate(BaseModel):
    """Fields accepted when opening a new loan file."""

    borrower_name: str = Field(min_length=1, max_length=255)
    borrower_entity_name: str | None = Field(default=None, max_length=255)
    property_address: str = Field(min_length=1)
    property_type: PropertyType | None = None
    loan_purpose: LoanPurpose | None = None
    loan_amount: Decimal | None = Field(default=None, ge=0)
    estimated_value: Decimal | None = Field(default=None, ge=0)
    funder: str | None = Field(default=None, max_length=100)
    target_close_date: datetime | None = None


class LoanUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    borrower_name: str | None = Field(default=None, min_length=1, max_length=255)
    borrower_entity_name: str | None = Field(default=None, max_length=255)
    property_address: str | None = Field(default=None, min_length=1)
    property_type: PropertyType | None = None
    loan_purpose: LoanPurpose | None = None
    loan_amount: Decimal | None = Field(default=None, ge=0)
    estimated_value: Decimal | None = Field(default=None, ge=0)
    funder: str | None = Field(default=None, max_length=100)
    target_close_date: datetime | None = None


class LoanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    borrower_name: str
    borrower_entity_name: str | None = None
    property_address: str
    property_type: PropertyType | None = None
    loan_purpose: LoanPurpose | None = None
    loan_amount: Decimal | None = None
    estimated_value: Decimal | None = None
    funder: str | None = None
    target_close_date: datetime | None = None
    created_at: datetime
    updated_at: datetime


class LoanListResponse(BaseModel):
    """Paginated list of loans."""

    data: list[LoanResponse]
    pagination: Pagination
