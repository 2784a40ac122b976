"""Document completeness schemas."""

from dscr_db.enums import RequirementCategory
from pydantic import BaseModel

from .document import DocumentRecord
from .requirements import RequirementDefinition


class CategoryProgress(BaseModel):
    """Required-requirement progress for one category."""

    satisfied_count: int = 0
    required_count: int = 0


class CompletenessReport(BaseModel):
    """Satisfied / missing / extra breakdown of a document collection."""

    satisfied: set[str]
    missing: list[RequirementDefinition]
    extra: list[DocumentRecord]
    by_category: dict[RequirementCategory, CategoryProgress]
    is_complete: bool
    required_count: int
    satisfied_required_count: int
    completion_percent: int


class CompletenessResponse(CompletenessReport):
    """Completeness report for a loan, tagged with the funder it was resolved for."""

    loan_id: int
    funder: str | None = None
    funder_known: bool
