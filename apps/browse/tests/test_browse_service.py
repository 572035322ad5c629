from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient, MockTransport, Request, Response

from apps.browse.app.main import _http_status, app
from catalog_sdk import CatalogClient, ClientConfig, ErrorEnvelope


def catalog_handler(request: Request) -> Response:
    path = request.url.path
    if path == "/api/main/movies/":
        return Response(200, json=[{"id": 1, "title": "Alien"}])
    if path == "/api/main/movies/1":
        return Response(200, json={"id": 1, "title": "Alien"})
    if path == "/api/main/movies/404":
        return Response(404)
    if path == "/api/main/actors":
        return Response(500, text="boom")
    if path == "/api/main/directors":
        return Response(200, json=[{"name": "Ridley Scott"}])
    if path.startswith("/api/main/movie-reviews/reviews/"):
        return Response(200, json={"content": [], "params": dict(request.url.params)})
    if path == "/api/users/login":
        body = request.read()
        if b'"password":"secret"' in body:
            return Response(200, json={"token": "abc"})
        return Response(401, text="Bad credentials")
    return Response(404)


@pytest.fixture(autouse=True)
def mock_catalog(monkeypatch):
    client = CatalogClient(
        ClientConfig(base_url="http://catalog"),
        http_transport=MockTransport(catalog_handler),
    )
    monkeypatch.setattr("apps.browse.app.main._client", client)
    yield client


@pytest.fixture()
async def browse():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.mark.asyncio
async def test_healthz(browse: AsyncClient) -> None:
    response = await browse.get("/healthz")
    assert response.json() == {"status": "ok", "service": "browse"}


@pytest.mark.asyncio
async def test_home_page(browse: AsyncClient) -> None:
    response = await browse.get("/movies")
    response.raise_for_status()
    assert response.json()["sections"]["movies"]["data"] == [{"id": 1, "title": "Alien"}]


@pytest.mark.asyncio
async def test_movie_page_keeps_working_sections_when_one_fails(browse: AsyncClient) -> None:
    response = await browse.get("/movies/1", params={"review_page": 2, "review_size": 10})
    response.raise_for_status()
    data = response.json()

    sections = data["sections"]
    assert sections["movie"]["data"]["title"] == "Alien"
    assert sections["directors"]["data"] == [{"name": "Ridley Scott"}]
    assert sections["reviews"]["data"]["params"] == {"number": "2", "size": "10"}
    assert sections["actors"]["data"] is None
    assert sections["actors"]["error"]["isError"] is True
    assert sections["actors"]["error"]["status"] == 500
    assert data["review_page"] == 2
    assert data["review_size"] == 10


@pytest.mark.asyncio
async def test_review_size_is_clamped(browse: AsyncClient) -> None:
    response = await browse.get("/movies/1", params={"review_size": 10_000})
    assert response.json()["review_size"] == 200


@pytest.mark.asyncio
async def test_missing_movie_is_404(browse: AsyncClient) -> None:
    response = await browse.get("/movies/404")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_login_success(browse: AsyncClient) -> None:
    response = await browse.post("/login", json={"username": "ana", "password": "secret"})
    assert response.status_code == 200
    assert response.json() == {"token": "abc"}


@pytest.mark.asyncio
async def test_login_failure_maps_status(browse: AsyncClient) -> None:
    response = await browse.post("/login", json={"username": "ana", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["error"] == "Bad credentials"


@pytest.mark.asyncio
async def test_login_requires_fields(browse: AsyncClient) -> None:
    response = await browse.post("/login", json={"username": "", "password": "x"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_metrics_expose_page_counters(browse: AsyncClient) -> None:
    await browse.get("/movies")
    response = await browse.get("/metrics")
    assert "browse_page_requests_total" in response.text


def test_unusable_envelope_status_maps_to_bad_gateway() -> None:
    assert _http_status(ErrorEnvelope(status=0, error="x")) == 502
    assert _http_status(ErrorEnvelope(status=503, error="x")) == 503
