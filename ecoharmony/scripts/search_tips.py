"""Search the Eco Harmony tip catalog from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Sequence, TextIO

from ecoharmony.models.query import QuerySpec
from ecoharmony.models.tip import Tip
from ecoharmony.services.catalog import CATALOG_PATH_ENV, CatalogError, load_catalog
from ecoharmony.services.search import search_tips

LOGGER = logging.getLogger("ecoharmony.search_cli")


DEFAULT_LOG_LEVEL = logging.WARNING


def _log_level() -> int:
    level_name = os.getenv("ECOHARMONY_LOG_LEVEL", "").strip().upper()
    level = getattr(logging, level_name, None) if level_name else None
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def _configure_logging() -> None:
    """Configure root logging based on ``ECOHARMONY_LOG_LEVEL``."""
    logging.basicConfig(level=_log_level(), format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search the Eco Harmony sustainable living tips")
    parser.add_argument("query", nargs="?", default=None, help="Free-text search term")
    parser.add_argument("--category", help="Normalised category, e.g. waste-reduction")
    parser.add_argument("--difficulty", help="beginner, intermediate or advanced")
    parser.add_argument("--impact", help="very-high, high, medium or low")
    parser.add_argument(
        "--catalog",
        default=os.getenv(CATALOG_PATH_ENV),
        help="Path to a YAML tip catalog (default: env or packaged dataset)",
    )
    parser.add_argument("--json", action="store_true", help="Print full tip records as JSON")
    return parser.parse_args(argv)


def _write_table(tips: Sequence[Tip], stream: TextIO) -> None:
    if not tips:
        stream.write("No tips found.\n")
        return
    for tip in tips:
        stream.write(f"{tip.id:>3}  {tip.impact:<9}  {tip.difficulty:<12}  {tip.title}\n")
    stream.write(f"{len(tips)} {'result' if len(tips) == 1 else 'results'} found\n")


def main(argv: Sequence[str] | None = None, *, stream: TextIO | None = None) -> int:
    _configure_logging()
    args = _parse_args(argv)
    out = stream or sys.stdout

    spec = QuerySpec(
        text=args.query,
        category=args.category,
        difficulty=args.difficulty,
        impact=args.impact,
    )

    try:
        repository = load_catalog(args.catalog)
    except CatalogError:
        LOGGER.exception("Failed to load the tip catalog")
        return 1

    results = search_tips(repository.get_all(), spec)
    LOGGER.info("SEARCH_COMPLETE params=%s results=%s", spec.as_params(), len(results))

    if args.json:
        json.dump([tip.to_document() for tip in results], out, ensure_ascii=False, indent=2)
        out.write("\n")
    else:
        _write_table(results, out)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
