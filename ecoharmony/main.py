"""FastAPI web application for the Eco Harmony sustainable living catalog"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
import logging
import os
from pathlib import Path

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecoharmony.models.query import QuerySpec
from ecoharmony.models.tip import DIFFICULTY_LEVELS, IMPACT_TOKENS, Tip
from ecoharmony.services.catalog import TipNotFoundError, TipRepository, create_repository
from ecoharmony.services.preferences import (
    PREFERENCE_KINDS,
    PreferenceKind,
    PreferenceStore,
    create_preference_store,
    toggle,
)
from ecoharmony.services.search import search_tips
from ecoharmony.services.stats import summarise_impact
from ecoharmony.utils.text import excerpt, highlight_terms, normalise_category

app = FastAPI(title="Eco Harmony Sustainable Living Tips")

TEMPLATE_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.globals.update(now=lambda: datetime.now(timezone.utc))
templates.env.filters["highlight"] = highlight_terms
templates.env.filters["excerpt"] = excerpt
templates.env.filters["category_slug"] = normalise_category

logger = logging.getLogger(__name__)

DEFAULT_RELATED_LIMIT = 3

_IMPACT_FILTER_LABELS: dict[str, str] = {token: f"{label} Impact" for token, label in IMPACT_TOKENS.items()}


def _related_limit() -> int:
    """Return how many related tips the detail views show."""

    raw_value = os.getenv("ECOHARMONY_RELATED_LIMIT")
    if raw_value and raw_value.strip().isdigit():
        return int(raw_value.strip())
    return DEFAULT_RELATED_LIMIT


def _is_api_request(request: Request) -> bool:
    return request.url.path.startswith("/api/")


@lru_cache
def get_repository() -> TipRepository:
    """Load the tip catalog once per process."""

    return create_repository()


@lru_cache
def get_preference_stores() -> dict[str, PreferenceStore]:
    """Return the shared favourites and implemented stores."""

    return {kind: create_preference_store(kind) for kind in PREFERENCE_KINDS}


def get_query_spec(
    q: str | None = Query(default=None, description="Free-text search term."),
    category: str | None = Query(default=None),
    difficulty: str | None = Query(default=None),
    impact: str | None = Query(default=None),
) -> QuerySpec:
    """Assemble a validated :class:`QuerySpec` from query-string parameters."""

    return QuerySpec(text=q, category=category, difficulty=difficulty, impact=impact)


def _category_options(tips: list[Tip]) -> list[dict[str, str]]:
    options: dict[str, str] = {}
    for tip in tips:
        options.setdefault(tip.category_slug, tip.category)
    return [{"slug": slug, "label": label} for slug, label in options.items()]


class PreferenceUpdate(BaseModel):
    """Payload used to set or clear a preference flag."""

    value: bool = Field(..., description="Whether the tip should carry the flag.")


class PreferenceState(BaseModel):
    """Current flag value for a single tip."""

    kind: str
    tip_id: int
    value: bool


class PreferenceList(BaseModel):
    """All tip ids flagged under a preference kind."""

    kind: str
    tip_ids: list[int]


def _tip_not_found_response(request: Request):
    if _is_api_request(request):
        return JSONResponse({"error": "Tip not found"}, status_code=404)
    return templates.TemplateResponse(
        request,
        "404.html",
        {"title": "Tip not found"},
        status_code=404,
    )


@app.exception_handler(TipNotFoundError)
async def tip_not_found_handler(request: Request, exc: TipNotFoundError):
    return _tip_not_found_response(request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # A non-numeric tip id can never match a tip.
    if any(tuple(error.get("loc", ())) == ("path", "tip_id") for error in exc.errors()):
        return _tip_not_found_response(request)
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and not _is_api_request(request):
        return templates.TemplateResponse(
            request,
            "404.html",
            {"title": "Page not found"},
            status_code=404,
        )
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error while serving request",
        extra={"event": "request.error", "path": request.url.path},
    )
    return JSONResponse({"error": "Something went wrong!"}, status_code=500)


@app.get("/healthz")
def healthz(repository: TipRepository = Depends(get_repository)):
    return {"ok": True, "tips": len(repository.get_all())}


@app.get("/api/tips")
async def list_tips_api(repository: TipRepository = Depends(get_repository)) -> list[dict]:
    """Return the full catalog in dataset order."""

    return [tip.to_document() for tip in repository.get_all()]


@app.get("/api/tips/category/{category}")
async def tips_by_category_api(
    category: str,
    repository: TipRepository = Depends(get_repository),
) -> list[dict]:
    """Return tips whose normalised category matches ``category``."""

    return [tip.to_document() for tip in repository.get_by_category(category)]


@app.get("/api/tips/search")
async def search_tips_api(
    spec: QuerySpec = Depends(get_query_spec),
    repository: TipRepository = Depends(get_repository),
) -> list[dict]:
    """Filter and rank the catalog according to the query-string parameters."""

    results = search_tips(repository.get_all(), spec)
    logger.info(
        "Tip search performed",
        extra={"event": "search.performed", **spec.as_params(), "result_count": len(results)},
    )
    return [tip.to_document() for tip in results]


@app.get("/api/tips/{tip_id}")
async def tip_detail_api(
    tip_id: int,
    repository: TipRepository = Depends(get_repository),
) -> dict:
    return repository.get_by_id(tip_id).to_document()


@app.get("/api/tips/{tip_id}/related")
async def related_tips_api(
    tip_id: int,
    repository: TipRepository = Depends(get_repository),
) -> list[dict]:
    """Return other tips from the same category, trimmed to the related limit."""

    tip = repository.get_by_id(tip_id)
    return [related.to_document() for related in _related_tips(repository, tip)]


@app.get("/api/stats")
def impact_stats_api(
    repository: TipRepository = Depends(get_repository),
    stores: dict[str, PreferenceStore] = Depends(get_preference_stores),
) -> dict:
    summary = summarise_impact(repository.get_all(), stores["implemented"].ids())
    return summary.to_document()


@app.get("/api/preferences/{kind}", response_model=PreferenceList)
def list_preferences(
    kind: PreferenceKind,
    stores: dict[str, PreferenceStore] = Depends(get_preference_stores),
) -> PreferenceList:
    return PreferenceList(kind=kind, tip_ids=stores[kind].ids())


@app.get("/api/preferences/{kind}/{tip_id}", response_model=PreferenceState)
def read_preference(
    kind: PreferenceKind,
    tip_id: int,
    repository: TipRepository = Depends(get_repository),
    stores: dict[str, PreferenceStore] = Depends(get_preference_stores),
) -> PreferenceState:
    repository.get_by_id(tip_id)
    return PreferenceState(kind=kind, tip_id=tip_id, value=stores[kind].get(tip_id))


@app.put("/api/preferences/{kind}/{tip_id}", response_model=PreferenceState)
def update_preference(
    kind: PreferenceKind,
    tip_id: int,
    payload: PreferenceUpdate,
    repository: TipRepository = Depends(get_repository),
    stores: dict[str, PreferenceStore] = Depends(get_preference_stores),
) -> PreferenceState:
    """Set or clear a favourite / implemented flag."""

    repository.get_by_id(tip_id)
    stores[kind].set(tip_id, payload.value)
    logger.info(
        "Preference updated",
        extra={"event": "preferences.updated", "kind": kind, "tip_id": tip_id, "value": payload.value},
    )
    return PreferenceState(kind=kind, tip_id=tip_id, value=payload.value)


@app.post("/api/preferences/{kind}/{tip_id}/toggle", response_model=PreferenceState)
def toggle_preference(
    kind: PreferenceKind,
    tip_id: int,
    repository: TipRepository = Depends(get_repository),
    stores: dict[str, PreferenceStore] = Depends(get_preference_stores),
) -> PreferenceState:
    repository.get_by_id(tip_id)
    value = toggle(stores[kind], tip_id)
    logger.info(
        "Preference toggled",
        extra={"event": "preferences.updated", "kind": kind, "tip_id": tip_id, "value": value},
    )
    return PreferenceState(kind=kind, tip_id=tip_id, value=value)


def _related_tips(repository: TipRepository, tip: Tip) -> list[Tip]:
    candidates = repository.get_by_category(tip.category_slug)
    return [candidate for candidate in candidates if candidate.id != tip.id][: _related_limit()]


@app.get("/", response_class=HTMLResponse)
def home(
    request: Request,
    spec: QuerySpec = Depends(get_query_spec),
    repository: TipRepository = Depends(get_repository),
    stores: dict[str, PreferenceStore] = Depends(get_preference_stores),
) -> HTMLResponse:
    """Render the homepage, narrowed by the category tab and the hero search box."""

    all_tips = repository.get_all()
    favorites = set(stores["favorites"].ids())
    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "title": "Eco Harmony",
            "tips": search_tips(all_tips, spec),
            "categories": _category_options(all_tips),
            "active_category": spec.category or "all",
            "term": spec.text,
            "favorites": favorites,
            "summary": summarise_impact(all_tips, stores["implemented"].ids()),
        },
    )


@app.get("/tips/{tip_id}", response_class=HTMLResponse)
def tip_detail(
    request: Request,
    tip_id: int,
    repository: TipRepository = Depends(get_repository),
    stores: dict[str, PreferenceStore] = Depends(get_preference_stores),
) -> HTMLResponse:
    """Render the tip detail page with related tips and the visitor's flags."""

    tip = repository.get_by_id(tip_id)
    return templates.TemplateResponse(
        request,
        "tips/detail.html",
        {
            "title": f"{tip.title} - Eco Harmony",
            "tip": tip,
            "related_tips": _related_tips(repository, tip),
            "is_favorite": stores["favorites"].get(tip.id),
            "is_implemented": stores["implemented"].get(tip.id),
        },
    )


@app.get("/category/{category}", response_class=HTMLResponse)
async def category_page(
    request: Request,
    category: str,
    repository: TipRepository = Depends(get_repository),
) -> HTMLResponse:
    tips = repository.get_by_category(category)
    label = tips[0].category if tips else category.replace("-", " ").title()
    return templates.TemplateResponse(
        request,
        "category.html",
        {
            "title": f"{label} Tips - Eco Harmony",
            "category_label": label,
            "category_slug": normalise_category(category),
            "tips": tips,
        },
    )


@app.get("/search", response_class=HTMLResponse)
async def search_page(
    request: Request,
    spec: QuerySpec = Depends(get_query_spec),
    repository: TipRepository = Depends(get_repository),
) -> HTMLResponse:
    """Render server-side search results with highlighted terms."""

    all_tips = repository.get_all()
    results = [] if spec.is_empty else search_tips(all_tips, spec)
    return templates.TemplateResponse(
        request,
        "search.html",
        {
            "title": "Search Tips - Eco Harmony",
            "spec": spec,
            "term": spec.text,
            "searched": not spec.is_empty,
            "results": results,
            "categories": _category_options(all_tips),
            "difficulties": DIFFICULTY_LEVELS,
            "impacts": _IMPACT_FILTER_LABELS,
        },
    )


@app.get("/about", response_class=HTMLResponse)
async def about(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "about.html", {"title": "About - Eco Harmony"})
