"""Tests for the catalog impact summary."""

from __future__ import annotations

from typing import Callable

import pytest

from ecoharmony.models.tip import Tip
from ecoharmony.services.stats import leading_figure, summarise_impact


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0.5 tons CO2/year", 0.5),
        ("4-6 tons CO2/year", 4.0),
        ("$200-400/year", 200.0),
        ("$2,000-5,000/year", 2000.0),
        ("varies", 0.0),
        ("", 0.0),
    ],
)
def test_leading_figure_uses_lower_bound(raw: str, expected: float) -> None:
    assert leading_figure(raw) == expected


def test_packaged_catalog_summary(packaged_catalog) -> None:
    summary = summarise_impact(packaged_catalog.get_all(), implemented_ids=[1, 7, 42])

    assert summary.tip_count == 7
    assert summary.implemented_count == 2
    assert summary.carbon_reduction_tons == pytest.approx(12.3)
    assert summary.cost_savings_dollars == 4850
    assert summary.categories["Energy"] == 2
    assert summary.categories["Waste Reduction"] == 2


def test_summary_document_uses_camel_case(tip_factory: Callable[..., Tip]) -> None:
    tips = [tip_factory(1, carbon_reduction="1.5 tons", cost_savings="$10/year", category="Energy")]

    document = summarise_impact(tips).to_document()

    assert document == {
        "tipCount": 1,
        "implementedCount": 0,
        "carbonReductionTons": 1.5,
        "costSavingsDollars": 10,
        "categories": {"Energy": 1},
    }
