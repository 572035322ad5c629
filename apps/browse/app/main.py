"""FastAPI service that serves catalog screen data as JSON."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import Counter, Histogram, generate_latest

from catalog_sdk import CatalogClient, ErrorEnvelope, PageSection, load_home_page, load_movie_page

from .config import settings
from .models import HealthResponse, HomePageResponse, LoginRequest, MoviePageResponse, SectionModel

logger = logging.getLogger("browse")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Movie Catalog Browse Service", version="0.1.0")

PAGE_COUNTER = Counter("browse_page_requests_total", "Total screen loads", ["page"])
SECTION_ERRORS = Counter("browse_section_errors_total", "Screen sections that failed to load", ["section", "kind"])
PAGE_LATENCY = Histogram("browse_page_latency_seconds", "Screen load latency", ["page"])

_client = CatalogClient(settings.catalog)


def get_client() -> CatalogClient:
    return _client


@app.get("/healthz", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse()


@app.get("/metrics")
def metrics() -> PlainTextResponse:
    data = generate_latest()
    return PlainTextResponse(data, media_type="text/plain; version=0.0.4")


@app.get("/movies", response_model=HomePageResponse)
async def home_page(client: CatalogClient = Depends(get_client)) -> HomePageResponse:
    PAGE_COUNTER.labels(page="home").inc()
    with PAGE_LATENCY.labels(page="home").time():
        sections = await load_home_page(client)
    return HomePageResponse(sections=_section_models(sections))


@app.get("/movies/{movie_id}", response_model=MoviePageResponse)
async def movie_page(
    movie_id: str,
    review_page: int = 0,
    review_size: Optional[int] = None,
    client: CatalogClient = Depends(get_client),
) -> MoviePageResponse:
    size = max(1, min(review_size or settings.review_page_size, settings.max_review_page_size))
    page = max(0, review_page)
    PAGE_COUNTER.labels(page="movie").inc()
    with PAGE_LATENCY.labels(page="movie").time():
        sections = await load_movie_page(client, movie_id, review_page=page, review_size=size)

    movie = sections["movie"]
    if movie.error is not None and movie.error.status == 404:
        raise HTTPException(status_code=404, detail=movie.error.error)

    logger.info(
        "movie=%s sections_ok=%s sections_failed=%s",
        movie_id,
        [name for name, section in sections.items() if section.ok],
        [name for name, section in sections.items() if not section.ok],
    )
    return MoviePageResponse(
        movie_id=movie_id,
        review_page=page,
        review_size=size,
        sections=_section_models(sections),
    )


@app.post("/login", response_model=None)
async def login(payload: LoginRequest, client: CatalogClient = Depends(get_client)) -> Any:
    result = await client.login(payload.username, payload.password)
    if isinstance(result, ErrorEnvelope):
        return JSONResponse(status_code=_http_status(result), content=result.model_dump(by_alias=True))
    return result


def _section_models(sections: Dict[str, PageSection]) -> Dict[str, SectionModel]:
    for name, section in sections.items():
        if section.error is not None:
            SECTION_ERRORS.labels(section=name, kind=section.error.kind).inc()
    return {name: SectionModel.from_section(section) for name, section in sections.items()}


def _http_status(envelope: ErrorEnvelope) -> int:
    if 400 <= envelope.status < 600:
        return envelope.status
    return 502


@app.on_event("startup")
def on_startup() -> None:
    logger.info(
        "Browse startup complete (catalog=%s, re-authentication=%s)",
        settings.catalog.base_url,
        settings.catalog.has_credentials,
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await _client.aclose()


if __name__ == "__main__":
    uvicorn.run("apps.browse.app.main:app", host="0.0.0.0", port=8000)
