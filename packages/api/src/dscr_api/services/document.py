"""Document service: listing, uploads routed through the disposition rules, deletion.

An upload runs the wizard end to end against a fresh read of the loan:

1. Reject empty files, then validate content type and size
2. Load the loan, its documents, and its funder's requirements
3. Compute completeness to get the current missing set
4. Validate the disposition (categorizing -> submitting)
5. Apply the mutation: store the file, create or update the Document row
6. Mark the wizard done, or failed if storage / the database rejected it
"""

import logging

from botocore.exceptions import ClientError
from dscr_db import Document, Loan
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..schemas.document import (
    DocumentMutation,
    ExistingDocumentChoice,
    FileMeta,
    MissingRequirementChoice,
    MutationAction,
    NewCategoryChoice,
)
from .completeness import compute_completeness, load_loan_documents
from .disposition import EmptyUploadError
from .requirements import RequirementResolver
from .storage import get_storage_service
from .upload_wizard import UploadWizard

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/png",
}


class DocumentUploadError(Exception):
    """Raised when a document upload fails validation."""


class UnsupportedContentTypeError(DocumentUploadError):
    pass


class FileTooLargeError(DocumentUploadError):
    pass


class DocumentStoreError(Exception):
    """Raised when a validated mutation could not be persisted."""


async def list_documents(session: AsyncSession, loan_id: int) -> list[Document] | None:
    """Return a loan's documents, or None if the loan does not exist."""
    if await session.get(Loan, loan_id) is None:
        return None
    return await load_loan_documents(session, loan_id)


async def get_document(session: AsyncSession, document_id: int) -> Document | None:
    return await session.get(Document, document_id)


def validate_upload(content_type: str, size: int) -> None:
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedContentTypeError(
            f"Unsupported content type: {content_type}. "
            f"Allowed: {', '.join(sorted(ALLOWED_CONTENT_TYPES))}"
        )
    max_bytes = settings.UPLOAD_MAX_SIZE_MB * 1024 * 1024
    if size > max_bytes:
        raise FileTooLargeError(
            f"File size {size} exceeds maximum of {settings.UPLOAD_MAX_SIZE_MB}MB"
        )


async def upload_document(
    session: AsyncSession,
    resolver: RequirementResolver,
    loan_id: int,
    choice: MissingRequirementChoice | ExistingDocumentChoice | NewCategoryChoice,
    filename: str,
    content_type: str,
    file_data: bytes,
) -> tuple[Document, DocumentMutation] | None:
    """Upload a file for a loan according to the chosen disposition.

    Returns None if the loan does not exist. Raises ``DocumentUploadError``
    for invalid files, ``DispositionError`` for a rejected choice, and
    ``DocumentStoreError`` when storage or the database fails.
    """
    if not file_data:
        raise EmptyUploadError("Uploaded file is empty")
    validate_upload(content_type, len(file_data))

    loan = await session.get(Loan, loan_id)
    if loan is None:
        return None

    documents = await load_loan_documents(session, loan_id)
    report = compute_completeness(resolver.resolve(loan.funder), documents)

    wizard = UploadWizard()
    wizard.select_file(
        FileMeta(filename=filename, content_type=content_type, size=len(file_data))
    )
    mutation = wizard.submit(choice, missing=report.missing, documents=documents)

    try:
        doc, stale_key = await _apply_mutation(session, loan_id, mutation, documents, file_data)
    except (ClientError, SQLAlchemyError) as exc:
        wizard.fail(str(exc))
        await session.rollback()
        logger.warning("Upload for loan %s failed: %s", loan_id, mutation.summary, exc_info=True)
        raise DocumentStoreError(f"Could not store document ({mutation.summary})") from exc
    wizard.complete()

    if stale_key:
        try:
            await get_storage_service().delete_file(stale_key)
        except ClientError:
            logger.warning("Could not delete replaced object %s", stale_key, exc_info=True)

    logger.info("Loan %s: %s (document %s)", loan_id, mutation.summary, doc.id)
    return doc, mutation


async def _apply_mutation(
    session: AsyncSession,
    loan_id: int,
    mutation: DocumentMutation,
    documents: list[Document],
    file_data: bytes,
) -> tuple[Document, str | None]:
    """Persist ``mutation``; returns the document and any object key it replaced."""
    storage = get_storage_service()
    stale_key = None

    if mutation.action is MutationAction.REPLACE:
        doc = next(d for d in documents if d.id == mutation.document_id)
        stale_key = doc.file_path
    else:
        doc = Document(loan_id=loan_id, name=mutation.name, category=mutation.category)
        session.add(doc)
        await session.flush()  # Assign doc.id

    object_key = storage.build_object_key(loan_id, doc.id, mutation.file.filename)
    await storage.upload_file(file_data, object_key, mutation.file.content_type)

    doc.file_path = object_key
    doc.content_type = mutation.file.content_type
    doc.size = mutation.file.size
    await session.commit()
    await session.refresh(doc)

    if stale_key == object_key:
        stale_key = None
    return doc, stale_key


async def delete_document(session: AsyncSession, document_id: int) -> bool:
    """Delete a document and its stored file. Returns False if it does not exist."""
    doc = await get_document(session, document_id)
    if doc is None:
        return False

    if doc.file_path:
        await get_storage_service().delete_file(doc.file_path)
    await session.delete(doc)
    await session.commit()
    logger.info("Deleted document %s from loan %s", document_id, doc.loan_id)
    return True
