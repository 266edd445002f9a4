"""Filter and relevance ordering shared by every tip search surface."""

from __future__ import annotations

from collections.abc import Iterable

from ecoharmony.models.query import QuerySpec
from ecoharmony.models.tip import IMPACT_TOKENS, Tip
from ecoharmony.utils.text import normalise_category


def matches_text(tip: Tip, term: str) -> bool:
    """Return ``True`` when ``term`` occurs in any searchable field of ``tip``.

    ``term`` must already be lower-cased. Matching is plain substring search
    over title, description, short description, raw category, author and tags.
    """

    fields = (
        tip.title,
        tip.description,
        tip.short_description,
        tip.category,
        tip.author,
    )
    if any(term in value.lower() for value in fields):
        return True
    return any(term in tag.lower() for tag in tip.tags)


def search_tips(tips: Iterable[Tip], spec: QuerySpec) -> list[Tip]:
    """Apply ``spec`` to ``tips`` and return the ordered matches.

    Without a text term the result keeps collection order. With one, tips
    whose title contains the term come first, then higher impact, and the
    sort is stable so remaining ties keep collection order.
    """

    results = list(tips)

    if spec.category:
        category = normalise_category(spec.category)
        results = [tip for tip in results if tip.category_slug == category]

    if spec.difficulty:
        difficulty = spec.difficulty.lower()
        results = [tip for tip in results if tip.difficulty.lower() == difficulty]

    if spec.impact:
        label = IMPACT_TOKENS.get(spec.impact.lower())
        results = [tip for tip in results if label is not None and tip.impact == label]

    term = (spec.text or "").strip().lower()
    if not term:
        return results

    results = [tip for tip in results if matches_text(tip, term)]
    results.sort(key=lambda tip: (term not in tip.title.lower(), -tip.impact_rank))
    return results


__all__ = ["matches_text", "search_tips"]
