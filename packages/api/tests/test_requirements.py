"""Tests for funder requirement resolution."""

import json

import pytest

from dscr_api.core.config import Settings
from dscr_api.services import requirements as requirements_module
from dscr_api.services.catalog import BASE_REQUIREMENTS, FUNDER_ADDITIONS
from dscr_api.services.requirements import (
    RequirementResolver,
    get_requirement_resolver,
    init_requirement_resolver,
)


def _ids(requirements):
    return [r.id for r in requirements]


@pytest.mark.parametrize("funder", ["unknown_funder_xyz", "", None, "   ", "chase"])
def test_unknown_funder_resolves_to_base(resolver, funder):
    assert resolver.resolve(funder) == list(BASE_REQUIREMENTS)


def test_unknown_funder_matches_base_only_funder(resolver):
    """Unknown, empty and velocity (no additions) resolve identically."""
    unknown = resolver.resolve("unknown_funder_xyz")
    assert unknown == resolver.resolve("")
    assert unknown == resolver.resolve("velocity")
    assert [(r.id, r.required, r.funder_specific) for r in unknown] == [
        (r.id, r.required, r.funder_specific) for r in resolver.resolve("velocity")
    ]


@pytest.mark.parametrize("funder", sorted(FUNDER_ADDITIONS))
def test_known_funders_extend_base(resolver, funder):
    resolved_ids = set(_ids(resolver.resolve(funder)))
    assert set(_ids(BASE_REQUIREMENTS)) <= resolved_ids


def test_resolution_is_case_insensitive(resolver):
    assert resolver.resolve("KIAVI") == resolver.resolve("kiavi")
    assert resolver.resolve(" Roc_Capital ") == resolver.resolve("roc_capital")


def test_kiavi_appends_two_forms(resolver):
    ids = _ids(resolver.resolve("kiavi"))
    assert ids[-2:] == ["kiavi_auth_form", "kiavi_disclosure"]
    assert len(ids) == len(BASE_REQUIREMENTS) + 2


def test_resolve_returns_fresh_list(resolver):
    first = resolver.resolve("kiavi")
    first.clear()
    assert len(resolver.resolve("kiavi")) == len(BASE_REQUIREMENTS) + 2


def test_resolve_is_deterministic(resolver):
    assert resolver.resolve("ahl") == resolver.resolve("ahl")


def test_is_known(resolver):
    assert resolver.is_known("Visio") is True
    assert resolver.is_known("nobody") is False
    assert resolver.is_known(None) is False


def test_funders_lists_every_profile(resolver):
    assert [p.key for p in resolver.funders()] == list(FUNDER_ADDITIONS)


def test_init_from_requirements_file(tmp_path, monkeypatch):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "base": [{"id": "ein_letter", "name": "EIN", "required": True, "category": "borrower_entity"}],
                "funders": {"solo": {"name": "Solo", "additions": []}},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr(requirements_module, "_resolver", None)
    resolver = init_requirement_resolver(Settings(REQUIREMENTS_FILE=str(path)))
    assert _ids(resolver.resolve("anything")) == ["ein_letter"]
    assert get_requirement_resolver() is resolver


def test_get_resolver_falls_back_to_builtin_catalog(monkeypatch):
    monkeypatch.setattr(requirements_module, "_resolver", None)
    resolver = get_requirement_resolver()
    assert isinstance(resolver, RequirementResolver)
    assert resolver.is_known("kiavi")
