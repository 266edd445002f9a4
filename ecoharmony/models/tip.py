"""Domain model for sustainable living tips stored in the catalog."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Mapping, Sequence

from ecoharmony.utils.text import normalise_category


DIFFICULTY_LEVELS: Final[tuple[str, ...]] = ("Beginner", "Intermediate", "Advanced")

# Rank used to order search results; unknown labels rank 0.
IMPACT_RANK: Final[Mapping[str, int]] = {
    "Very High": 4,
    "High": 3,
    "Medium": 2,
    "Low": 1,
}

# Normalised query tokens accepted by the impact filter.
IMPACT_TOKENS: Final[Mapping[str, str]] = {
    "very-high": "Very High",
    "high": "High",
    "medium": "Medium",
    "low": "Low",
}


def _text_value(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _tuple_of_strings(value: Any) -> tuple[str, ...]:
    """Normalise a value into a tuple of non-empty strings."""

    if isinstance(value, str):
        trimmed = value.strip()
        return (trimmed,) if trimmed else ()

    if isinstance(value, Sequence):
        result: list[str] = []
        for item in value:
            if isinstance(item, str):
                trimmed = item.strip()
                if trimmed:
                    result.append(trimmed)
        return tuple(result)

    return ()


def _coerce_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Tip id must be a positive integer, got {value!r}")
    try:
        identifier = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Tip id must be a positive integer, got {value!r}") from exc
    if identifier <= 0:
        raise ValueError(f"Tip id must be a positive integer, got {value!r}")
    return identifier


@dataclass(frozen=True, slots=True)
class Tip:
    """Representation of a single sustainable living tip."""

    id: int
    title: str
    description: str
    category: str
    impact: str
    difficulty: str
    author: str
    short_description: str = ""
    tags: tuple[str, ...] = ()
    time_to_implement: str = ""
    cost_savings: str = ""
    carbon_reduction: str = ""
    image: str = ""
    author_bio: str = ""
    date_published: str = ""
    read_time: str = ""
    steps: tuple[str, ...] = ()
    benefits: tuple[str, ...] = ()
    pro_tips: tuple[str, ...] = ()

    @property
    def category_slug(self) -> str:
        """Return the normalised category used for filtering and URLs."""

        return normalise_category(self.category)

    @property
    def impact_rank(self) -> int:
        return IMPACT_RANK.get(self.impact, 0)

    def to_document(self) -> dict[str, Any]:
        """Return the wire representation using the catalog's camelCase keys."""

        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "shortDescription": self.short_description,
            "category": self.category,
            "impact": self.impact,
            "difficulty": self.difficulty,
            "timeToImplement": self.time_to_implement,
            "costSavings": self.cost_savings,
            "carbonReduction": self.carbon_reduction,
            "image": self.image,
            "author": self.author,
            "authorBio": self.author_bio,
            "datePublished": self.date_published,
            "readTime": self.read_time,
            "tags": list(self.tags),
            "steps": list(self.steps),
            "benefits": list(self.benefits),
            "tips": list(self.pro_tips),
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "Tip":
        """Build a tip from a catalog record, tolerating missing optional fields."""

        if not isinstance(data, Mapping):
            raise ValueError(f"Tip record must be a mapping, got {type(data).__name__}")

        return cls(
            id=_coerce_id(data.get("id")),
            title=_text_value(data.get("title")),
            description=_text_value(data.get("description")),
            short_description=_text_value(data.get("shortDescription")),
            category=_text_value(data.get("category")),
            impact=_text_value(data.get("impact")),
            difficulty=_text_value(data.get("difficulty")),
            author=_text_value(data.get("author")),
            tags=_tuple_of_strings(data.get("tags")),
            time_to_implement=_text_value(data.get("timeToImplement")),
            cost_savings=_text_value(data.get("costSavings")),
            carbon_reduction=_text_value(data.get("carbonReduction")),
            image=_text_value(data.get("image")),
            author_bio=_text_value(data.get("authorBio")),
            date_published=str(data.get("datePublished") or ""),
            read_time=_text_value(data.get("readTime")),
            steps=_tuple_of_strings(data.get("steps")),
            benefits=_tuple_of_strings(data.get("benefits")),
            pro_tips=_tuple_of_strings(data.get("tips")),
        )
