"""Checks that the runtime dependencies the app imports are declared."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _declared_distributions() -> set[str]:
    with PYPROJECT.open("rb") as handle:
        project = tomllib.load(handle)["project"]
    return {re.split(r"[<>=!~\[ ]", requirement, maxsplit=1)[0].lower() for requirement in project["dependencies"]}


def test_directly_imported_web_stack_is_declared() -> None:
    assert {"fastapi", "starlette", "jinja2", "markupsafe", "pydantic", "pyyaml"} <= _declared_distributions()
