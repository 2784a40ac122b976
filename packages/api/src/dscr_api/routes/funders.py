"""Funder and requirement catalog routes (read-only)."""

from dscr_db.enums import RequirementCategory
from fastapi import APIRouter, Depends

from ..schemas.requirements import CategoryInfo, FunderRequirementsResponse, FunderSummary
from ..services.requirements import RequirementResolver, get_requirement_resolver

router = APIRouter()


@router.get("/funders", response_model=list[FunderSummary])
async def list_funders(
    resolver: RequirementResolver = Depends(get_requirement_resolver),
) -> list[FunderSummary]:
    """Funders with a dedicated requirement list."""
    return [
        FunderSummary(
            key=profile.key,
            name=profile.name,
            requirement_count=len(profile.requirements),
            funder_specific_count=sum(1 for r in profile.requirements if r.funder_specific),
        )
        for profile in resolver.funders()
    ]


@router.get("/funders/{funder_key}/requirements", response_model=FunderRequirementsResponse)
async def get_funder_requirements(
    funder_key: str,
    resolver: RequirementResolver = Depends(get_requirement_resolver),
) -> FunderRequirementsResponse:
    """Resolved requirements for a funder. Unknown funders get the base set."""
    return FunderRequirementsResponse(
        funder_key=funder_key,
        known=resolver.is_known(funder_key),
        requirements=resolver.resolve(funder_key),
    )


@router.get("/requirements/categories", response_model=list[CategoryInfo])
async def list_categories() -> list[CategoryInfo]:
    return [CategoryInfo(category=c, display_name=c.display_name) for c in RequirementCategory]
