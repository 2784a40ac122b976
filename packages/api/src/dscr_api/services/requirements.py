"""Requirement resolution by funder.

The resolver wraps an immutable ``RequirementCatalog`` built once at startup
(``init_requirement_resolver()``) and hands out fresh requirement lists per
call. Unknown funders are not an error: they resolve to the base set.
"""

import logging

from ..core.config import Settings
from ..schemas.requirements import RequirementDefinition
from .catalog import FunderProfile, RequirementCatalog, build_default_catalog

logger = logging.getLogger(__name__)


class RequirementResolver:
    """Resolve a funder key to its effective requirement list."""

    def __init__(self, catalog: RequirementCatalog):
        self._catalog = catalog

    @property
    def catalog(self) -> RequirementCatalog:
        return self._catalog

    def resolve(self, funder_key: str | None) -> list[RequirementDefinition]:
        """Return the funder's requirements, or the base set for unknown funders.

        The result is a new list on every call; its items are frozen models, so
        callers cannot reach back into the catalog through it.
        """
        profile = self._catalog.get(funder_key)
        if profile is None:
            logger.debug("No catalog entry for funder %r, using base requirements", funder_key)
            return list(self._catalog.base)
        return list(profile.requirements)

    def is_known(self, funder_key: str | None) -> bool:
        return self._catalog.get(funder_key) is not None

    def funders(self) -> list[FunderProfile]:
        return list(self._catalog.profiles())


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_resolver: RequirementResolver | None = None


def init_requirement_resolver(cfg: Settings) -> RequirementResolver:
    """Build the catalog and the singleton resolver (called once from app lifespan)."""
    global _resolver  # noqa: PLW0603
    if cfg.REQUIREMENTS_FILE:
        catalog = RequirementCatalog.from_file(cfg.REQUIREMENTS_FILE)
    else:
        catalog = build_default_catalog()
    _resolver = RequirementResolver(catalog)
    logger.info("RequirementResolver initialised (%d funders)", len(catalog))
    return _resolver


def get_requirement_resolver() -> RequirementResolver:
    """Return the resolver; falls back to the built-in catalog if startup did not run."""
    global _resolver  # noqa: PLW0603
    if _resolver is None:
        _resolver = RequirementResolver(build_default_catalog())
    return _resolver
