"""Upload disposition rules.

Validates where a newly uploaded file should go and describes the change as a
``DocumentMutation``. Nothing is persisted here; the document service applies
the mutation.

The ``missing`` and ``documents`` arguments must come from a fresh read of the
loan. A choice made against stale state (a requirement satisfied by a
concurrent upload, a document deleted meanwhile) fails with
``InvalidRequirementError`` / ``DocumentNotFoundError`` and the caller has to
re-resolve against current data.
"""

from collections.abc import Sequence
from typing import Any

from ..schemas.document import (
    DocumentMutation,
    ExistingDocumentChoice,
    FileMeta,
    MissingRequirementChoice,
    MutationAction,
    NewCategoryChoice,
)
from ..schemas.requirements import RequirementDefinition


class DispositionError(Exception):
    """Base class for rejected upload dispositions. Always recoverable by re-categorizing."""

    code = "disposition_error"


class InvalidRequirementError(DispositionError):
    """The chosen requirement is not (or no longer) missing."""

    code = "invalid_requirement"


class DocumentNotFoundError(DispositionError):
    """The document chosen for replacement no longer exists."""

    code = "document_not_found"


class EmptyCategoryError(DispositionError):
    """A new category was requested with a blank name."""

    code = "empty_category"


class EmptyUploadError(DispositionError):
    """No file, or a zero-byte file, was uploaded."""

    code = "empty_upload"


def resolve_disposition(
    choice: MissingRequirementChoice | ExistingDocumentChoice | NewCategoryChoice,
    uploaded_file: FileMeta | None,
    *,
    missing: Sequence[RequirementDefinition],
    documents: Sequence[Any],
) -> DocumentMutation:
    """Validate ``choice`` for ``uploaded_file`` and return the mutation to apply.

    Raises a ``DispositionError`` subclass when the choice cannot be honoured.
    """
    if uploaded_file is None or uploaded_file.size <= 0:
        raise EmptyUploadError("Uploaded file is empty")

    if isinstance(choice, MissingRequirementChoice):
        requirement = next((r for r in missing if r.id == choice.requirement_id), None)
        if requirement is None:
            raise InvalidRequirementError(
                f"Requirement '{choice.requirement_id}' is not currently missing"
            )
        return DocumentMutation(
            action=MutationAction.CREATE,
            category=requirement.id,
            name=requirement.name,
            file=uploaded_file,
            requirement_id=requirement.id,
            summary=f"Linked to missing requirement: {requirement.name}",
        )

    if isinstance(choice, ExistingDocumentChoice):
        document = next((d for d in documents if d.id == choice.document_id), None)
        if document is None:
            raise DocumentNotFoundError(f"Document {choice.document_id} not found")
        return DocumentMutation(
            action=MutationAction.REPLACE,
            category=document.category,
            name=document.name,
            file=uploaded_file,
            document_id=document.id,
            summary=f"Replaced existing document: {document.name}",
        )

    if isinstance(choice, NewCategoryChoice):
        category = choice.category.strip()
        if not category:
            raise EmptyCategoryError("Category must not be blank")
        return DocumentMutation(
            action=MutationAction.CREATE,
            category=category,
            name=uploaded_file.filename,
            file=uploaded_file,
            summary=f"Filed as new document: {category}",
        )

    raise TypeError(f"Unsupported disposition choice: {type(choice).__name__}")
