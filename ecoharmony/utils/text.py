"""Utilities for working with tip text."""
from __future__ import annotations

import re
from typing import Any

from markupsafe import Markup, escape


_WHITESPACE_RE = re.compile(r"\s+")


def normalise_category(value: Any) -> str:
    """Return the URL-friendly form of a category label.

    ``"Waste Reduction"`` becomes ``"waste-reduction"``. Leading and trailing
    whitespace is dropped first so that padded query parameters still match.
    Non-string inputs return an empty string.
    """

    if not isinstance(value, str):
        return ""
    return _WHITESPACE_RE.sub("-", value.strip().lower())


def highlight_terms(value: Any, term: str | None) -> Markup:
    """Escape ``value`` and wrap case-insensitive occurrences of ``term`` in ``<mark>``."""

    text = value if isinstance(value, str) else ""
    needle = (term or "").strip()
    if not needle:
        return escape(text)

    pattern = re.compile(re.escape(needle), re.IGNORECASE)
    parts: list[str] = []
    cursor = 0
    for match in pattern.finditer(text):
        parts.append(str(escape(text[cursor:match.start()])))
        parts.append(f"<mark>{escape(match.group(0))}</mark>")
        cursor = match.end()
    parts.append(str(escape(text[cursor:])))
    return Markup("".join(parts))


def excerpt(value: Any, limit: int = 120) -> str:
    """Return ``value`` truncated to ``limit`` characters with a trailing ellipsis."""

    if not isinstance(value, str):
        return ""
    text = _WHITESPACE_RE.sub(" ", value).strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


__all__ = ["excerpt", "highlight_terms", "normalise_category"]
