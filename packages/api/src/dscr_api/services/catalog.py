"""Funder requirement catalog.

Holds the base DSCR document set every funder expects and the additions each
funder layers on top. Funder lists are always built with ``compose()`` so the
base set comes first, in catalog order, followed by the funder's additions.

The catalog is immutable once built. The built-in tables below can be replaced
wholesale by a JSON file (``REQUIREMENTS_FILE``) with the shape::

    {
      "base": [{"id": ..., "name": ..., "required": ..., "category": ...}, ...],
      "funders": {"kiavi": {"name": "Kiavi", "additions": [...]}, ...}
    }
"""

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from dscr_db.enums import RequirementCategory
from pydantic import ValidationError

from ..schemas.requirements import RequirementDefinition

logger = logging.getLogger(__name__)

_C = RequirementCategory


def _req(
    id: str,
    name: str,
    category: RequirementCategory,
    *,
    required: bool = True,
    description: str | None = None,
    funder_specific: bool = False,
) -> RequirementDefinition:
    return RequirementDefinition(
        id=id,
        name=name,
        required=required,
        category=category,
        description=description,
        funder_specific=funder_specific,
    )


def _funder_req(id: str, name: str, **kwargs) -> RequirementDefinition:
    return _req(id, name, _C.LENDER_SPECIFIC, funder_specific=True, **kwargs)


# Documents every funder expects, in display order.
BASE_REQUIREMENTS: tuple[RequirementDefinition, ...] = (
    # Borrower & entity
    _req("drivers_license", "Driver's License (front and back)", _C.BORROWER_ENTITY),
    _req("articles_org", "Articles of Organization / Incorporation", _C.BORROWER_ENTITY),
    _req("operating_agreement", "Operating Agreement", _C.BORROWER_ENTITY),
    _req("good_standing", "Certificate of Good Standing", _C.BORROWER_ENTITY),
    _req("ein_letter", "EIN Letter from IRS", _C.BORROWER_ENTITY),
    # Financials
    _req("bank_statements", "2 most recent Bank Statements", _C.FINANCIALS),
    _req("voided_check", "Voided Check", _C.FINANCIALS),
    # Property ownership
    _req("property_ownership", "HUD or Other Documentation of Property Ownership", _C.PROPERTY),
    _req("current_leases", "All Current Leases", _C.PROPERTY),
    # Appraisal
    _req("appraisal", "Appraisal (Ordered through AMC)", _C.APPRAISAL),
    # Insurance
    _req("insurance_policy", "Insurance Policy", _C.INSURANCE),
    _req("insurance_contact", "Insurance Agent Contact Info", _C.INSURANCE),
    _req("flood_policy", "Flood Policy (If applicable)", _C.INSURANCE, required=False),
    _req("flood_contact", "Flood Insurance Agent Contact Info", _C.INSURANCE, required=False),
    # Title
    _req("title_contact", "Title Agent Contact Info", _C.TITLE),
    # Payoff, refinances only
    _req("lender_contact", "Current Lender Contact Info", _C.PAYOFF, required=False),
    _req("payoff_statement", "Payoff Statement and VOM", _C.PAYOFF, required=False),
)

# funder key -> (display name, additions appended to the base set)
FUNDER_ADDITIONS: Mapping[str, tuple[str, tuple[RequirementDefinition, ...]]] = MappingProxyType(
    {
        "kiavi": (
            "Kiavi",
            (
                _funder_req("kiavi_auth_form", "Signed/Completed Borrowing Authorization Form"),
                _funder_req("kiavi_disclosure", "Signed/Completed Disclosure Form"),
            ),
        ),
        "visio": (
            "Visio Financial Services",
            (
                _funder_req("vfs_application", "VFS Loan Application"),
                _funder_req("broker_submission", "Broker Submission Form"),
                _funder_req("broker_w9", "Broker W9"),
                _funder_req("plaid_liquidity", "Proof of Liquidity (via Plaid)"),
                _funder_req(
                    "rent_collection_proof",
                    "Proof of Rent Collection Deposits",
                    required=False,
                    description="Required if lease rents > market rents",
                ),
            ),
        ),
        "roc_capital": (
            "ROC Capital",
            (
                _funder_req("roc_background", "Completed Roc Capital Background/Credit Link"),
                _funder_req("ach_consent", "ACH Consent Form"),
                _funder_req("property_tax_doc", "Property Tax Document"),
                _funder_req(
                    "rent_collection_3mo",
                    "Proof of 3 Months Rent Collection",
                    required=False,
                    description="For all units",
                ),
                _funder_req(
                    "security_deposit_proof",
                    "Proof of Receipt of Security Deposit",
                    required=False,
                    description="New Leases < 30 days",
                ),
            ),
        ),
        "ahl": (
            "American Heritage Lending",
            (
                _funder_req("ahl_entity_resolution", "Entity Resolution (AHL template)"),
                _funder_req(
                    "ahl_business_purpose",
                    "Borrower's Statement of Business Purpose (AHL template)",
                ),
                _funder_req("ahl_liquidity_proof", "Proof of Liquidity / Funds to Close"),
                _funder_req(
                    "ahl_piti_reserves", "6 Months PITI Reserves", description="Must be documented"
                ),
                _funder_req(
                    "ahl_vom_12mo", "VOM showing 12 months payment history", required=False
                ),
                _funder_req(
                    "ahl_mortgage_statements",
                    "2 Recent Mortgage Statements",
                    required=False,
                    description="For any open accounts on background check",
                ),
            ),
        ),
        # Velocity takes the base package as-is.
        "velocity": ("Velocity Mortgage Capital", ()),
    }
)


def normalize_funder_key(funder_key: str | None) -> str:
    """Catalog keys are matched case-insensitively, ignoring surrounding whitespace."""
    return (funder_key or "").strip().lower()


def compose(
    base: Sequence[RequirementDefinition],
    additions: Iterable[RequirementDefinition],
) -> tuple[RequirementDefinition, ...]:
    """Return ``base`` followed by ``additions``, keeping ids unique.

    An addition whose id is already present is dropped (first definition
    wins), so a composed list always contains every base requirement.
    """
    composed = list(base)
    seen = {req.id for req in composed}
    for req in additions:
        if req.id in seen:
            logger.warning("Dropping duplicate requirement id %r from funder additions", req.id)
            continue
        seen.add(req.id)
        composed.append(req)
    return tuple(composed)


@dataclass(frozen=True)
class FunderProfile:
    """A funder and its composed requirement list."""

    key: str
    name: str
    requirements: tuple[RequirementDefinition, ...]


class RequirementCatalog:
    """Immutable base set plus composed per-funder requirement lists."""

    def __init__(
        self,
        base: Sequence[RequirementDefinition],
        funders: Mapping[str, tuple[str, Sequence[RequirementDefinition]]],
    ):
        self._base = compose((), base)
        profiles: dict[str, FunderProfile] = {}
        for raw_key, (name, additions) in funders.items():
            key = normalize_funder_key(raw_key)
            if not key:
                logger.warning("Skipping funder with empty key (name=%r)", name)
                continue
            profiles[key] = FunderProfile(
                key=key, name=name, requirements=compose(self._base, additions)
            )
        self._profiles: Mapping[str, FunderProfile] = MappingProxyType(profiles)

    @property
    def base(self) -> tuple[RequirementDefinition, ...]:
        return self._base

    def get(self, funder_key: str | None) -> FunderProfile | None:
        return self._profiles.get(normalize_funder_key(funder_key))

    def profiles(self) -> tuple[FunderProfile, ...]:
        return tuple(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequirementCatalog":
        """Build a catalog from plain data, skipping malformed entries.

        Entries with an unknown category (or otherwise invalid) are logged and
        left out rather than failing the whole catalog.
        """
        base = _parse_definitions(data.get("base"), source="base")
        funders: dict[str, tuple[str, list[RequirementDefinition]]] = {}
        raw_funders = data.get("funders") or {}
        if not isinstance(raw_funders, Mapping):
            logger.warning("Ignoring non-object funders section: %r", raw_funders)
            raw_funders = {}
        for key, entry in raw_funders.items():
            if not isinstance(entry, Mapping):
                logger.warning("Skipping non-object funder entry %r: %r", key, entry)
                continue
            additions = _parse_definitions(
                entry.get("additions"), source=key, funder_specific=True
            )
            funders[key] = (entry.get("name") or key, additions)
        return cls(base, funders)

    @classmethod
    def from_file(cls, path: str | Path) -> "RequirementCatalog":
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        catalog = cls.from_dict(data)
        logger.info(
            "Loaded requirement catalog from %s (%d base requirements, %d funders)",
            path,
            len(catalog.base),
            len(catalog),
        )
        return catalog


def _parse_definitions(
    raw_entries: Any,
    *,
    source: str,
    funder_specific: bool = False,
) -> list[RequirementDefinition]:
    definitions: list[RequirementDefinition] = []
    if raw_entries is None:
        return definitions
    if not isinstance(raw_entries, list):
        logger.warning("Ignoring non-list requirements in %s: %r", source, raw_entries)
        return definitions
    for raw in raw_entries:
        if not isinstance(raw, Mapping):
            logger.warning("Skipping non-object requirement entry in %s: %r", source, raw)
            continue
        try:
            definitions.append(
                RequirementDefinition.model_validate({"funder_specific": funder_specific, **raw})
            )
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid requirement %r in %s: %s",
                raw.get("id"),
                source,
                exc.errors(include_url=False),
            )
    return definitions


def build_default_catalog() -> RequirementCatalog:
    """Catalog built from the tables in this module."""
    return RequirementCatalog(BASE_REQUIREMENTS, FUNDER_ADDITIONS)

