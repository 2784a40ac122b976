"""Tests for funder and requirement catalog routes."""

from dscr_db.enums import RequirementCategory

from dscr_api.services.catalog import BASE_REQUIREMENTS
from factories import make_mock_session


def test_list_funders(make_client):
    client = make_client(make_mock_session())
    response = client.get("/api/funders")

    assert response.status_code == 200
    funders = {f["key"]: f for f in response.json()}
    assert set(funders) == {"kiavi", "visio", "roc_capital", "ahl", "velocity"}
    assert funders["kiavi"]["requirement_count"] == len(BASE_REQUIREMENTS) + 2
    assert funders["kiavi"]["funder_specific_count"] == 2
    assert funders["velocity"]["funder_specific_count"] == 0


def test_funder_requirements_known(make_client):
    client = make_client(make_mock_session())
    response = client.get("/api/funders/AHL/requirements")

    data = response.json()
    assert data["known"] is True
    assert data["requirements"][-1]["id"] == "ahl_mortgage_statements"
    assert data["requirements"][-1]["funder_specific"] is True


def test_funder_requirements_unknown_falls_back(make_client):
    client = make_client(make_mock_session())
    response = client.get("/api/funders/unknown_funder_xyz/requirements")

    assert response.status_code == 200
    data = response.json()
    assert data["known"] is False
    assert [r["id"] for r in data["requirements"]] == [r.id for r in BASE_REQUIREMENTS]


def test_list_categories(make_client):
    client = make_client(make_mock_session())
    response = client.get("/api/requirements/categories")

    data = response.json()
    assert [c["category"] for c in data] == [c.value for c in RequirementCategory]
    assert data[0]["display_name"] == "Borrower & Entity Documents"
