"""Document routes: listing, disposition-driven upload, deletion, completeness."""

import logging
from typing import Literal

from dscr_db import get_db
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.completeness import CompletenessResponse
from ..schemas.document import (
    DispositionChoice,
    DocumentListResponse,
    DocumentResponse,
    DocumentUploadResponse,
)
from ..services import document as doc_service
from ..services.completeness import check_completeness
from ..services.document import (
    DocumentStoreError,
    FileTooLargeError,
    UnsupportedContentTypeError,
)
from ..services.requirements import RequirementResolver, get_requirement_resolver

logger = logging.getLogger(__name__)

router = APIRouter()

_CHOICE_ADAPTER: TypeAdapter = TypeAdapter(DispositionChoice)


def _build_choice(
    kind: str,
    requirement_id: str | None,
    document_id: int | None,
    category: str | None,
):
    payload: dict = {"kind": kind}
    if kind == "missing" and requirement_id is not None:
        payload["requirement_id"] = requirement_id
    elif kind == "existing" and document_id is not None:
        payload["document_id"] = document_id
    elif kind == "new":
        # Blank and absent categories both surface as empty_category.
        payload["category"] = category or ""
    try:
        return _CHOICE_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid disposition for kind '{kind}': {exc.errors(include_url=False)}",
        ) from exc


@router.get("/loans/{loan_id}/documents", response_model=DocumentListResponse)
async def list_documents(
    loan_id: int,
    session: AsyncSession = Depends(get_db),
) -> DocumentListResponse:
    documents = await doc_service.list_documents(session, loan_id)
    if documents is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loan not found")
    items = [DocumentResponse.model_validate(doc) for doc in documents]
    return DocumentListResponse(data=items, count=len(items))


@router.post(
    "/loans/{loan_id}/documents",
    response_model=DocumentUploadResponse,
    status_code=201,
)
async def upload_document(
    loan_id: int,
    file: UploadFile = File(...),
    kind: Literal["missing", "existing", "new"] = Form(...),
    requirement_id: str | None = Form(default=None),
    document_id: int | None = Form(default=None),
    category: str | None = Form(default=None),
    session: AsyncSession = Depends(get_db),
    resolver: RequirementResolver = Depends(get_requirement_resolver),
) -> DocumentUploadResponse:
    """Upload a file and file it as a missing requirement, a replacement, or a new category.

    Disposition failures are returned as Problem Details with a ``code``
    (see the DispositionError handler in main); the client should refresh
    the loan's documents and re-show categorization.
    """
    choice = _build_choice(kind, requirement_id, document_id, category)
    file_data = await file.read()

    try:
        result = await doc_service.upload_document(
            session=session,
            resolver=resolver,
            loan_id=loan_id,
            choice=choice,
            filename=file.filename or "document",
            content_type=file.content_type or "",
            file_data=file_data,
        )
    except UnsupportedContentTypeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except FileTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    except DocumentStoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loan not found")

    doc, mutation = result
    return DocumentUploadResponse(
        document=DocumentResponse.model_validate(doc),
        action=mutation.action,
        requirement_id=mutation.requirement_id,
        summary=mutation.summary,
    )


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    session: AsyncSession = Depends(get_db),
) -> DocumentResponse:
    doc = await doc_service.get_document(session, document_id)
    if doc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return DocumentResponse.model_validate(doc)


@router.delete("/documents/{document_id}", status_code=204)
async def delete_document(
    document_id: int,
    session: AsyncSession = Depends(get_db),
) -> None:
    if not await doc_service.delete_document(session, document_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")


@router.get("/loans/{loan_id}/completeness", response_model=CompletenessResponse)
async def get_completeness(
    loan_id: int,
    session: AsyncSession = Depends(get_db),
    resolver: RequirementResolver = Depends(get_requirement_resolver),
) -> CompletenessResponse:
    """Satisfied / missing / extra breakdown against the loan's funder requirements."""
    result = await check_completeness(session, resolver, loan_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loan not found")
    return result
