"""
DSCR document packaging -- domain models

Loans under preparation for a funder and the documents uploaded against them.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import LoanPurpose, PropertyType


class Loan(Base):
    """DSCR loan whose document package is being assembled."""

    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    borrower_name = Column(String(255), nullable=False)
    borrower_entity_name = Column(String(255), nullable=True)
    property_address = Column(Text, nullable=False)
    property_type = Column(
        Enum(PropertyType, name="property_type", native_enum=False),
        nullable=True,
    )
    loan_purpose = Column(
        Enum(LoanPurpose, name="loan_purpose", native_enum=False),
        nullable=True,
    )
    loan_amount = Column(Numeric(12, 2), nullable=True)
    estimated_value = Column(Numeric(12, 2), nullable=True)
    # Free-form funder key; resolved case-insensitively against the catalog.
    funder = Column(String(100), nullable=True, index=True)
    target_close_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    documents = relationship(
        "Document", back_populates="loan", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Loan(id={self.id}, funder='{self.funder}')>"


class Document(Base):
    """Document uploaded for a loan."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_id = Column(
        Integer, ForeignKey("loans.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    name = Column(String(255), nullable=False)
    # Requirement id when filed against a requirement, otherwise a free-form label.
    category = Column(String(100), nullable=False, index=True)
    file_path = Column(String(500), nullable=True)
    content_type = Column(String(100), nullable=True)
    size = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    loan = relationship("Loan", back_populates="documents")

    def __repr__(self):
        return f"<Document(id={self.id}, category='{self.category}')>"
