"""Document request/response schemas, disposition choices and mutations."""

import enum
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class DocumentRecord(BaseModel):
    """The slice of a document the completeness engine reasons about."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    name: str
    size: int = 0


class DocumentResponse(BaseModel):
    """Document metadata response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    loan_id: int
    name: str
    category: str
    content_type: str | None = None
    size: int
    file_path: str | None = None
    created_at: datetime
    updated_at: datetime


class DocumentListResponse(BaseModel):
    """List of a loan's documents."""

    data: list[DocumentResponse]
    count: int


class FileMeta(BaseModel):
    """Metadata of an uploaded file; the bytes travel separately."""

    filename: str
    content_type: str
    size: int


# -- Disposition choices --


class MissingRequirementChoice(BaseModel):
    """File the upload against a requirement that is still missing."""

    kind: Literal["missing"] = "missing"
    requirement_id: str


class ExistingDocumentChoice(BaseModel):
    """Replace the file behind an existing document, keeping its category."""

    kind: Literal["existing"] = "existing"
    document_id: int


class NewCategoryChoice(BaseModel):
    """File the upload under a free-form category."""

    kind: Literal["new"] = "new"
    category: str


DispositionChoice = Annotated[
    MissingRequirementChoice | ExistingDocumentChoice | NewCategoryChoice,
    Field(discriminator="kind"),
]


class MutationAction(str, enum.Enum):
    CREATE = "create"
    REPLACE = "replace"


class DocumentMutation(BaseModel):
    """Change to apply to a loan's document collection."""

    model_config = ConfigDict(frozen=True)

    action: MutationAction
    category: str
    name: str
    file: FileMeta
    document_id: int | None = None
    requirement_id: str | None = None
    summary: str


class DocumentUploadResponse(BaseModel):
    """Response after uploading a document."""

    document: DocumentResponse
    action: MutationAction
    requirement_id: str | None = None
    summary: str
