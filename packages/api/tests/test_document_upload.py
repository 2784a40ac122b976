"""Tests for the document upload endpoint and service."""

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from botocore.exceptions import ClientError
from dscr_db import Document

from dscr_api.schemas.document import MissingRequirementChoice
from dscr_api.services import document as doc_service
from dscr_api.services.disposition import InvalidRequirementError
from factories import make_mock_document, make_mock_loan, make_mock_session

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_storage():
    storage = MagicMock()
    storage.build_object_key.side_effect = lambda loan_id, doc_id, name: f"loans/{loan_id}/{doc_id}/{name}"
    storage.upload_file = AsyncMock(side_effect=lambda data, key, ct: key)
    storage.delete_file = AsyncMock()
    with patch("dscr_api.services.document.get_storage_service", return_value=storage):
        yield storage


def _upload(client, form, content_type="application/pdf", filename="scan.pdf", data=None):
    """POST a file with disposition form fields to the upload endpoint."""
    if data is None:
        data = b"%PDF-1.4 fake content"
    return client.post(
        "/api/loans/1/documents",
        files={"file": (filename, BytesIO(data), content_type)},
        data=form,
    )


def _kiavi_session(documents=()):
    return make_mock_session(loan=make_mock_loan(id=1, funder="kiavi"), documents=documents)


# ---------------------------------------------------------------------------
# Upload success
# ---------------------------------------------------------------------------


def test_upload_fulfils_missing_requirement(make_client, mock_storage):
    session = _kiavi_session()
    client = make_client(session)

    response = _upload(client, {"kind": "missing", "requirement_id": "kiavi_auth_form"})

    assert response.status_code == 201
    data = response.json()
    assert data["action"] == "create"
    assert data["requirement_id"] == "kiavi_auth_form"
    assert data["document"]["id"] == 900
    assert data["document"]["category"] == "kiavi_auth_form"
    assert data["document"]["name"] == "Signed/Completed Borrowing Authorization Form"
    assert data["document"]["file_path"] == "loans/1/900/scan.pdf"
    mock_storage.upload_file.assert_awaited_once()
    session.commit.assert_awaited()

    added = session.add.call_args.args[0]
    assert isinstance(added, Document)
    assert added.size == len(b"%PDF-1.4 fake content")


def test_upload_new_category_trims(make_client, mock_storage):
    client = make_client(_kiavi_session())
    response = _upload(client, {"kind": "new", "category": "  Rent Roll  "}, filename="roll.png", content_type="image/png")

    assert response.status_code == 201
    assert response.json()["document"]["category"] == "Rent Roll"
    assert response.json()["document"]["name"] == "roll.png"


def test_upload_replaces_existing_document(make_client, mock_storage):
    existing = make_mock_document(id=4, category="appraisal", name="Appraisal", file_path="loans/1/4/old.pdf")
    session = _kiavi_session(documents=[existing])
    client = make_client(session)

    response = _upload(client, {"kind": "existing", "document_id": "4"}, filename="new.pdf")

    assert response.status_code == 201
    data = response.json()
    assert data["action"] == "replace"
    assert data["document"]["id"] == 4
    assert data["document"]["category"] == "appraisal"
    assert existing.file_path == "loans/1/4/new.pdf"
    session.add.assert_not_called()
    mock_storage.delete_file.assert_awaited_once_with("loans/1/4/old.pdf")


def test_replace_with_same_key_keeps_object(make_client, mock_storage):
    existing = make_mock_document(id=4, category="appraisal", file_path="loans/1/4/scan.pdf")
    client = make_client(_kiavi_session(documents=[existing]))

    response = _upload(client, {"kind": "existing", "document_id": "4"})

    assert response.status_code == 201
    mock_storage.delete_file.assert_not_awaited()


# ---------------------------------------------------------------------------
# Disposition failures
# ---------------------------------------------------------------------------


def test_stale_missing_requirement_returns_409(make_client, mock_storage):
    """Requirement already satisfied by another upload -> conflict, client re-resolves."""
    session = _kiavi_session(documents=[make_mock_document(id=1, category="drivers_license")])
    client = make_client(session)

    response = _upload(client, {"kind": "missing", "requirement_id": "drivers_license"})

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "invalid_requirement"
    assert body["title"] == "Conflict"
    mock_storage.upload_file.assert_not_awaited()


def test_replace_deleted_document_returns_409(make_client, mock_storage):
    client = make_client(_kiavi_session())
    response = _upload(client, {"kind": "existing", "document_id": "77"})
    assert response.status_code == 409
    assert response.json()["code"] == "document_not_found"


@pytest.mark.parametrize("form", [{"kind": "new", "category": "   "}, {"kind": "new"}])
def test_blank_category_returns_422(make_client, mock_storage, form):
    client = make_client(_kiavi_session())
    response = _upload(client, form)
    assert response.status_code == 422
    assert response.json()["code"] == "empty_category"


def test_empty_file_returns_422(make_client, mock_storage):
    client = make_client(_kiavi_session())
    response = _upload(client, {"kind": "new", "category": "Lease"}, data=b"")
    assert response.status_code == 422
    assert response.json()["code"] == "empty_upload"


@pytest.mark.parametrize("content_type", ["text/plain", ""])
def test_empty_file_is_empty_upload_regardless_of_content_type(make_client, mock_storage, content_type):
    client = make_client(_kiavi_session())
    response = _upload(
        client, {"kind": "missing", "requirement_id": "appraisal"}, content_type=content_type, data=b""
    )
    assert response.status_code == 422
    assert response.json()["code"] == "empty_upload"
    mock_storage.upload_file.assert_not_awaited()


def test_missing_kind_field_returns_422(make_client, mock_storage):
    client = make_client(_kiavi_session())
    response = _upload(client, {"kind": "missing"})
    assert response.status_code == 422
    assert response.json()["code"] is None


# ---------------------------------------------------------------------------
# File validation and infrastructure failures
# ---------------------------------------------------------------------------


def test_unsupported_content_type_returns_422(make_client, mock_storage):
    client = make_client(_kiavi_session())
    response = _upload(client, {"kind": "new", "category": "Notes"}, content_type="text/plain", filename="notes.txt")
    assert response.status_code == 422
    assert "Unsupported content type" in response.json()["detail"]


def test_oversize_file_returns_413(make_client, mock_storage):
    client = make_client(_kiavi_session())
    with patch.object(doc_service.settings, "UPLOAD_MAX_SIZE_MB", 0):
        response = _upload(client, {"kind": "new", "category": "Lease"})
    assert response.status_code == 413


def test_upload_unknown_loan_returns_404(make_client, mock_storage):
    client = make_client(make_mock_session(loan=None))
    response = _upload(client, {"kind": "new", "category": "Lease"})
    assert response.status_code == 404


def test_storage_failure_returns_502(make_client, mock_storage):
    mock_storage.upload_file.side_effect = ClientError(
        {"Error": {"Code": "SlowDown", "Message": "busy"}}, "PutObject"
    )
    session = _kiavi_session()
    client = make_client(session)

    response = _upload(client, {"kind": "new", "category": "Lease"})

    assert response.status_code == 502
    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


# ---------------------------------------------------------------------------
# Service-level
# ---------------------------------------------------------------------------


async def test_service_raises_disposition_error(resolver, mock_storage):
    session = _kiavi_session(documents=[make_mock_document(id=1, category="appraisal")])
    with pytest.raises(InvalidRequirementError):
        await doc_service.upload_document(
            session=session,
            resolver=resolver,
            loan_id=1,
            choice=MissingRequirementChoice(requirement_id="appraisal"),
            filename="appraisal.pdf",
            content_type="application/pdf",
            file_data=b"data",
        )


async def test_service_returns_none_for_unknown_loan(resolver, mock_storage):
    result = await doc_service.upload_document(
        session=make_mock_session(loan=None),
        resolver=resolver,
        loan_id=3,
        choice=MissingRequirementChoice(requirement_id="appraisal"),
        filename="appraisal.pdf",
        content_type="application/pdf",
        file_data=b"data",
    )
    assert result is None
