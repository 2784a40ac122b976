"""Document completeness checking service.

Reconciles a loan's documents against its funder's requirement list. A
document satisfies a requirement only when its category equals the
requirement id exactly; anything else is reported as extra so an uploaded
document never drops out of view because it could not be classified.

Reports are recomputed on every call and never cached.
"""

import logging
from collections.abc import Sequence
from typing import Any

from dscr_db import Document, Loan
from dscr_db.enums import RequirementCategory
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.completeness import CategoryProgress, CompletenessReport, CompletenessResponse
from ..schemas.document import DocumentRecord
from ..schemas.requirements import RequirementDefinition
from .requirements import RequirementResolver

logger = logging.getLogger(__name__)


def _as_record(document: Any) -> DocumentRecord:
    if isinstance(document, DocumentRecord):
        return document
    return DocumentRecord.model_validate(document)


def compute_completeness(
    requirements: Sequence[RequirementDefinition],
    documents: Sequence[Any],
) -> CompletenessReport:
    """Compute satisfied / missing / extra for a document collection.

    ``documents`` may be ``DocumentRecord`` instances or any objects exposing
    ``id``, ``category``, ``name`` (and optionally ``size``), e.g. ORM rows.
    """
    records = [_as_record(doc) for doc in documents]
    requirement_ids = {req.id for req in requirements}
    present = {rec.category for rec in records}

    satisfied = {req.id for req in requirements if req.id in present}

    missing_required = [r for r in requirements if r.required and r.id not in satisfied]
    missing_optional = [r for r in requirements if not r.required and r.id not in satisfied]

    extra = [rec for rec in records if rec.category not in requirement_ids]

    by_category: dict[RequirementCategory, CategoryProgress] = {}
    for req in requirements:
        progress = by_category.setdefault(req.category, CategoryProgress())
        if req.required:
            progress.required_count += 1
            if req.id in satisfied:
                progress.satisfied_count += 1

    required_count = sum(p.required_count for p in by_category.values())
    satisfied_required_count = sum(p.satisfied_count for p in by_category.values())
    if required_count:
        completion_percent = round(satisfied_required_count * 100 / required_count)
    else:
        completion_percent = 100

    return CompletenessReport(
        satisfied=satisfied,
        missing=missing_required + missing_optional,
        extra=extra,
        by_category=by_category,
        is_complete=not missing_required,
        required_count=required_count,
        satisfied_required_count=satisfied_required_count,
        completion_percent=completion_percent,
    )


async def load_loan_documents(session: AsyncSession, loan_id: int) -> list[Document]:
    """Return a loan's documents, oldest first."""
    stmt = (
        select(Document)
        .where(Document.loan_id == loan_id)
        .order_by(Document.created_at, Document.id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def check_completeness(
    session: AsyncSession,
    resolver: RequirementResolver,
    loan_id: int,
) -> CompletenessResponse | None:
    """Check document completeness for a loan.

    Returns None if the loan is not found.
    """
    loan = await session.get(Loan, loan_id)
    if loan is None:
        return None

    requirements = resolver.resolve(loan.funder)
    documents = await load_loan_documents(session, loan_id)
    report = compute_completeness(requirements, documents)

    logger.debug(
        "Loan %s completeness: %d/%d required satisfied, %d extra",
        loan_id,
        report.satisfied_required_count,
        report.required_count,
        len(report.extra),
    )
    return CompletenessResponse(
        **report.model_dump(),
        loan_id=loan_id,
        funder=loan.funder,
        funder_known=resolver.is_known(loan.funder),
    )
