"""Read-only tip catalog loaded from the packaged YAML dataset.

The catalog is loaded once and never mutated afterwards, so a single
:class:`StaticTipRepository` instance can be shared by every request.

Default location (if not provided): ``ecoharmony/data/tips.yaml``
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
import os
from pathlib import Path
from typing import Any, Final, Protocol

import yaml

from ecoharmony.models.tip import Tip
from ecoharmony.utils.text import normalise_category

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH: Final[Path] = Path(__file__).resolve().parents[1] / "data" / "tips.yaml"
CATALOG_PATH_ENV: Final[str] = "ECOHARMONY_CATALOG_PATH"


class CatalogError(RuntimeError):
    """Raised when the tip dataset cannot be loaded."""


class TipNotFoundError(LookupError):
    """Raised when no tip carries the requested identifier."""

    def __init__(self, tip_id: int) -> None:
        super().__init__(f"Tip {tip_id} not found")
        self.tip_id = tip_id


class TipRepository(Protocol):
    """Contract for retrieving sustainable living tips."""

    def get_all(self) -> list[Tip]:
        """Return every tip in dataset order."""

    def get_by_id(self, tip_id: int) -> Tip:
        """Return a single tip or raise :class:`TipNotFoundError`."""

    def get_by_category(self, category: str) -> list[Tip]:
        """Return tips whose normalised category equals ``category``."""


class StaticTipRepository:
    """In-memory repository over an immutable snapshot of tips."""

    __slots__ = ("_tips", "_by_id")

    def __init__(self, tips: Iterable[Tip]) -> None:
        snapshot = tuple(tips)
        by_id: dict[int, Tip] = {}
        for tip in snapshot:
            if tip.id in by_id:
                raise CatalogError(f"Duplicate tip id {tip.id} in catalog")
            by_id[tip.id] = tip
        self._tips = snapshot
        self._by_id = by_id

    def __len__(self) -> int:
        return len(self._tips)

    def get_all(self) -> list[Tip]:
        return list(self._tips)

    def get_by_id(self, tip_id: int) -> Tip:
        try:
            return self._by_id[tip_id]
        except KeyError:
            raise TipNotFoundError(tip_id) from None

    def get_by_category(self, category: str) -> list[Tip]:
        wanted = normalise_category(category)
        return [tip for tip in self._tips if tip.category_slug == wanted]


def parse_catalog(payload: Any) -> list[Tip]:
    """Convert a decoded YAML document into tips.

    Accepts either a bare list of records or a mapping with a ``tips`` key.
    """

    if isinstance(payload, dict):
        payload = payload.get("tips")
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
        raise CatalogError("Catalog must contain a list of tip records")

    tips: list[Tip] = []
    for index, record in enumerate(payload):
        try:
            tips.append(Tip.from_document(record))
        except ValueError as exc:
            raise CatalogError(f"Invalid tip record at position {index}: {exc}") from exc
    return tips


def load_catalog(path: str | Path | None = None) -> StaticTipRepository:
    """Load the YAML dataset at ``path`` into a repository."""

    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    try:
        raw = catalog_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"Unable to read tip catalog at {catalog_path}") from exc

    try:
        payload = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise CatalogError(f"Tip catalog at {catalog_path} is not valid YAML") from exc

    repository = StaticTipRepository(parse_catalog(payload))
    logger.info(
        "Tip catalog loaded",
        extra={"event": "catalog.loaded", "path": str(catalog_path), "tip_count": len(repository)},
    )
    return repository


def create_repository(**kwargs: Any) -> StaticTipRepository:
    """Factory helper honouring the ``ECOHARMONY_CATALOG_PATH`` override."""

    path = kwargs.pop("path", None) or os.getenv(CATALOG_PATH_ENV)
    return load_catalog(path)


__all__ = [
    "CatalogError",
    "StaticTipRepository",
    "TipNotFoundError",
    "TipRepository",
    "create_repository",
    "load_catalog",
    "parse_catalog",
]
