"""Shared fixtures and helpers for the test suite."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from ecoharmony.models.tip import Tip
from ecoharmony.services.catalog import StaticTipRepository, load_catalog


def _build_tip(identifier: int, **overrides: Any) -> Tip:
    """Return a tip with neutral defaults that individual tests can override."""

    fields: dict[str, Any] = {
        "id": identifier,
        "title": f"Tip {identifier}",
        "description": f"Description for tip {identifier}",
        "short_description": "",
        "category": "General",
        "impact": "Medium",
        "difficulty": "Beginner",
        "author": "Eco Team",
        "tags": (),
    }
    fields.update(overrides)
    if isinstance(fields["tags"], list):
        fields["tags"] = tuple(fields["tags"])
    return Tip(**fields)


@pytest.fixture()
def tip_factory() -> Callable[..., Tip]:
    """Provide the tip builder so tests can create ad-hoc catalogs."""

    return _build_tip


@pytest.fixture()
def compost_tips() -> list[Tip]:
    """Three tips where only the first mentions compost in its title."""

    return [
        _build_tip(1, title="Compost Bin", impact="High", category="Waste Reduction"),
        _build_tip(2, title="Solar Panels", impact="Very High", category="Energy"),
        _build_tip(
            3,
            title="Native Garden",
            description="Mulch beds with homemade compost to feed native plants.",
            impact="Beginner-level, impact Low",
            category="Biodiversity",
        ),
    ]


@pytest.fixture(scope="session")
def packaged_catalog() -> StaticTipRepository:
    """Return the repository backed by the packaged YAML dataset."""

    return load_catalog()
