"""Health check routes."""

import logging

from dscr_db import get_db
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..services.requirements import RequirementResolver, get_requirement_resolver

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def health(
    session: AsyncSession = Depends(get_db),
    resolver: RequirementResolver = Depends(get_requirement_resolver),
) -> dict:
    """Liveness plus database reachability and catalog size."""
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable", exc_info=True)
        database = "unavailable"
    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "funders": len(resolver.catalog),
    }
