"""Tests for the health endpoint."""

from sqlalchemy.exc import OperationalError

from factories import make_mock_session


def test_health_ok(make_client):
    client = make_client(make_mock_session())
    response = client.get("/health/")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"
    assert data["funders"] == 5


def test_health_degraded_when_database_down(make_client):
    session = make_mock_session()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    client = make_client(session)

    data = client.get("/health/").json()

    assert data["status"] == "degraded"
    assert data["database"] == "unavailable"


def test_root(make_client):
    client = make_client(make_mock_session())
    assert client.get("/").json() == {"message": "DSCR Document Package API"}
