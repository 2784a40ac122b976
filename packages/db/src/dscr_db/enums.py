"""
Domain enums for DSCR document packaging.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class RequirementCategory(str, enum.Enum):
    BORROWER_ENTITY = "borrower_entity"
    FINANCIALS = "financials"
    PROPERTY = "property"
    APPRAISAL = "appraisal"
    INSURANCE = "insurance"
    TITLE = "title"
    PAYOFF = "payoff"
    LENDER_SPECIFIC = "lender_specific"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]


_CATEGORY_DISPLAY_NAMES: dict[RequirementCategory, str] = {
    RequirementCategory.BORROWER_ENTITY: "Borrower & Entity Documents",
    RequirementCategory.FINANCIALS: "Financial Documents",
    RequirementCategory.PROPERTY: "Property Ownership",
    RequirementCategory.APPRAISAL: "Appraisal",
    RequirementCategory.INSURANCE: "Insurance",
    RequirementCategory.TITLE: "Title",
    RequirementCategory.PAYOFF: "Payoff Information",
    RequirementCategory.LENDER_SPECIFIC: "Lender-Specific Documents",
}


class PropertyType(str, enum.Enum):
    SINGLE_FAMILY = "single_family"
    TWO_TO_FOUR_UNIT = "two_to_four_unit"
    CONDO = "condo"
    TOWNHOME = "townhome"
    MULTIFAMILY = "multifamily"
    MIXED_USE = "mixed_use"


class LoanPurpose(str, enum.Enum):
    PURCHASE = "purchase"
    RATE_TERM_REFINANCE = "rate_term_refinance"
    CASH_OUT_REFINANCE = "cash_out_refinance"
