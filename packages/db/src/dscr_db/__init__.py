__version__ = "0.1.0"

from .database import Base, SessionLocal, engine, get_db
from .enums import LoanPurpose, PropertyType, RequirementCategory
from .models import Document, Loan

__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
    "__version__",
    # Enums
    "LoanPurpose",
    "PropertyType",
    "RequirementCategory",
    # Models
    "Document",
    "Loan",
]
