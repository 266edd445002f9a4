"""Tests for text utility helpers."""
from __future__ import annotations

from markupsafe import Markup

from ecoharmony.utils.text import excerpt, highlight_terms, normalise_category


def test_normalise_category_collapses_whitespace() -> None:
    assert normalise_category("Waste Reduction") == "waste-reduction"
    assert normalise_category("  Water \t Conservation ") == "water-conservation"
    assert normalise_category("energy") == "energy"


def test_normalise_category_handles_non_string_values() -> None:
    assert normalise_category(None) == ""
    assert normalise_category(42) == ""


def test_highlight_terms_marks_case_insensitive_matches() -> None:
    result = highlight_terms("Compost bins love compost", "COMPOST")

    assert isinstance(result, Markup)
    assert result == "<mark>Compost</mark> bins love <mark>compost</mark>"


def test_highlight_terms_escapes_markup() -> None:
    result = highlight_terms("<b>Solar</b> & wind", "solar")

    assert result == "&lt;b&gt;<mark>Solar</mark>&lt;/b&gt; &amp; wind"


def test_highlight_terms_treats_term_literally() -> None:
    assert highlight_terms("Save 30% (or more)", "(or") == "Save 30% <mark>(or</mark> more)"


def test_highlight_terms_without_term_only_escapes() -> None:
    assert highlight_terms("a < b", None) == "a &lt; b"
    assert highlight_terms("a < b", "   ") == "a &lt; b"


def test_excerpt_truncates_long_text() -> None:
    assert excerpt("short text", 20) == "short text"
    assert excerpt("one two three four", 7) == "one two..."
    assert excerpt(None) == ""
