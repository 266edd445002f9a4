"""Aggregate impact figures shown on the home page counters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import re

from ecoharmony.models.tip import Tip

_NUMBER_RE = re.compile(r"\d[\d,]*(?:\.\d+)?")


def leading_figure(value: str) -> float:
    """Return the first number in ``value`` or ``0.0``.

    Ranges such as ``"$200-400/year"`` or ``"3-5 tons CO2/year"`` contribute
    their lower bound. Thousands separators are ignored.
    """

    match = _NUMBER_RE.search(value or "")
    if match is None:
        return 0.0
    return float(match.group(0).replace(",", ""))


@dataclass(slots=True)
class ImpactSummary:
    """Totals across the catalog plus the visitor's implemented tips."""

    tip_count: int
    implemented_count: int
    carbon_reduction_tons: float
    cost_savings_dollars: int
    categories: dict[str, int] = field(default_factory=dict)

    def to_document(self) -> dict[str, object]:
        return {
            "tipCount": self.tip_count,
            "implementedCount": self.implemented_count,
            "carbonReductionTons": self.carbon_reduction_tons,
            "costSavingsDollars": self.cost_savings_dollars,
            "categories": dict(self.categories),
        }


def summarise_impact(tips: Iterable[Tip], implemented_ids: Iterable[int] = ()) -> ImpactSummary:
    """Sum the lower-bound carbon and cost figures of ``tips``."""

    catalog = list(tips)
    known_ids = {tip.id for tip in catalog}
    implemented = {tip_id for tip_id in implemented_ids if tip_id in known_ids}

    categories: dict[str, int] = {}
    carbon = 0.0
    savings = 0.0
    for tip in catalog:
        carbon += leading_figure(tip.carbon_reduction)
        savings += leading_figure(tip.cost_savings)
        categories[tip.category] = categories.get(tip.category, 0) + 1

    return ImpactSummary(
        tip_count=len(catalog),
        implemented_count=len(implemented),
        carbon_reduction_tons=round(carbon, 2),
        cost_savings_dollars=int(savings),
        categories=categories,
    )


__all__ = ["ImpactSummary", "leading_figure", "summarise_impact"]
