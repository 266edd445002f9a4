"""Query parameters accepted by the tip search engine."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ecoharmony.utils.text import normalise_category


def _blank_to_none(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    cleaned = value.strip()
    return cleaned or None


class QuerySpec(BaseModel):
    """Validated search request assembled at the HTTP or CLI boundary.

    Every field is optional and blank values are treated as absent, so an
    empty ``QuerySpec()`` matches the whole catalog. Unrecognised difficulty or
    impact tokens are kept as-is; the engine simply finds no tips for them.
    """

    model_config = ConfigDict(frozen=True)

    text: str | None = Field(default=None, description="Free-text term matched against tip fields.")
    category: str | None = Field(default=None, description="Normalised category, e.g. 'waste-reduction'.")
    difficulty: str | None = Field(default=None, description="Difficulty label, matched case-insensitively.")
    impact: str | None = Field(default=None, description="Impact token: very-high, high, medium or low.")

    @field_validator("text", mode="before")
    @classmethod
    def _clean_text(cls, value: Any) -> str | None:
        return _blank_to_none(value)

    @field_validator("category", mode="before")
    @classmethod
    def _clean_category(cls, value: Any) -> str | None:
        cleaned = _blank_to_none(value)
        return normalise_category(cleaned) if cleaned else None

    @field_validator("difficulty", "impact", mode="before")
    @classmethod
    def _clean_token(cls, value: Any) -> str | None:
        cleaned = _blank_to_none(value)
        return cleaned.lower() if cleaned else None

    @property
    def is_empty(self) -> bool:
        return not (self.text or self.category or self.difficulty or self.impact)

    def as_params(self) -> dict[str, str]:
        """Return the query-string parameters that reproduce this spec."""

        params: dict[str, str] = {}
        if self.text:
            params["q"] = self.text
        if self.category:
            params["category"] = self.category
        if self.difficulty:
            params["difficulty"] = self.difficulty
        if self.impact:
            params["impact"] = self.impact
        return params
