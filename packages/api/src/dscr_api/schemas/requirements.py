"""Requirement catalog schemas."""

from dscr_db.enums import RequirementCategory
from pydantic import BaseModel, ConfigDict


class RequirementDefinition(BaseModel):
    """A single document a funder mandates (or optionally accepts)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    required: bool
    category: RequirementCategory
    description: str | None = None
    funder_specific: bool = False


class FunderSummary(BaseModel):
    """Known funder with the size of its resolved requirement list."""

    key: str
    name: str
    requirement_count: int
    funder_specific_count: int


class FunderRequirementsResponse(BaseModel):
    """Resolved requirement list for a funder key."""

    funder_key: str
    known: bool
    requirements: list[RequirementDefinition]


class CategoryInfo(BaseModel):
    category: RequirementCategory
    display_name: str
