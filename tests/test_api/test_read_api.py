"""Tests for the catalog read API."""

from collections.abc import AsyncGenerator, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pytest_asyncio import fixture as asyncio_fixture
from starlette import status

from glooscap.api.v1.router import get_catalog
from glooscap.catalog.jobs import JobRegistry
from glooscap.catalog.models import (
    Page,
    PageState,
    Target,
    TranslationJob,
    TranslationJobSpec,
    TranslationJobState,
    TranslationJobStatus,
    TranslationSource,
)
from glooscap.catalog.store import PageCatalog
from glooscap.main import create_app


@pytest.fixture
def api_app(
    catalog: PageCatalog,
    registry: JobRegistry,
    target_a: Target,
    target_b: Target,
    make_page: Callable[..., Page],
) -> FastAPI:
    """Get the read API over a populated catalog and registry."""
    catalog.update(target_a.key, target_a, [make_page("alpha"), make_page("beta")])
    catalog.update(target_b.key, target_b, [make_page("gamma")])
    registry.update(
        TranslationJob(
            name="translate-alpha-fr",
            spec=TranslationJobSpec(
                source=TranslationSource(target_ref=target_a.key, page_id="id-alpha"),
                parameters={"pageTitle": "Alpha"},
            ),
            status=TranslationJobStatus(state=TranslationJobState.RUNNING),
        )
    )
    return create_app(catalog=catalog, jobs=registry)


@asyncio_fixture
async def api_client(api_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Get an async client bound to the read API."""
    async with AsyncClient(
        transport=ASGITransport(app=api_app), base_url="http://test"
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_healthz(api_client: AsyncClient) -> None:
    """Test the liveness probe echoes the correlation ID."""
    response = await api_client.get(
        "/healthz", headers={"X-Request-ID": "test-health"}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
    assert response.json()["correlation_id"] == "test-health"
    assert response.headers["X-Request-ID"] == "test-health"


@pytest.mark.asyncio
async def test_list_catalogue_all(api_client: AsyncClient) -> None:
    """Test listing every catalogued page."""
    response = await api_client.get("/api/v1/catalogue")

    assert response.status_code == status.HTTP_200_OK
    assert sorted(p["slug"] for p in response.json()) == ["alpha", "beta", "gamma"]


@pytest.mark.asyncio
async def test_list_catalogue_by_target(
    api_client: AsyncClient, target_a: Target
) -> None:
    """Test the target filter restricts the listing."""
    response = await api_client.get(
        "/api/v1/catalogue", params={"target": target_a.key}
    )

    pages = response.json()
    assert [p["slug"] for p in pages] == ["alpha", "beta"]
    assert pages[0]["state"] == PageState.DISCOVERED.value
    assert pages[0]["target"] == target_a.key


@pytest.mark.asyncio
async def test_get_catalogue_page(
    api_client: AsyncClient, make_page: Callable[..., Page]
) -> None:
    """Test looking up one page by URI."""
    uri = make_page("gamma").uri
    response = await api_client.get("/api/v1/catalogue/page", params={"uri": uri})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["uri"] == uri


@pytest.mark.asyncio
async def test_get_catalogue_page_not_found(api_client: AsyncClient) -> None:
    """Test an unknown URI is a 404."""
    response = await api_client.get(
        "/api/v1/catalogue/page", params={"uri": "https://nowhere/doc/x"}
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_get_catalogue_page_requires_uri(api_client: AsyncClient) -> None:
    """Test the URI parameter is mandatory."""
    response = await api_client.get("/api/v1/catalogue/page")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_list_targets(api_client: AsyncClient) -> None:
    """Test targets with a recorded scan are listed."""
    response = await api_client.get("/api/v1/targets")

    assert sorted(t["name"] for t in response.json()) == ["wiki-a", "wiki-b"]


@pytest.mark.asyncio
async def test_list_jobs(api_client: AsyncClient, target_a: Target) -> None:
    """Test job records are keyed by job name."""
    response = await api_client.get("/api/v1/jobs")

    jobs = response.json()
    assert list(jobs) == ["translate-alpha-fr"]
    record = jobs["translate-alpha-fr"]
    assert record["status"]["state"] == "Running"
    assert record["target_ref"] == target_a.key
    assert record["page_title"] == "Alpha"


@pytest.mark.asyncio
async def test_metrics_endpoint(api_client: AsyncClient) -> None:
    """Test Prometheus metrics are exposed."""
    await api_client.get("/api/v1/catalogue")
    response = await api_client.get("/metrics")

    assert response.status_code == status.HTTP_200_OK
    assert "glooscap_catalog_updates_total" in response.text
    assert "glooscap_http_requests_total" in response.text


@pytest.mark.asyncio
async def test_unhandled_error_returns_json(api_app: FastAPI) -> None:
    """Test unexpected errors become JSON bodies with the correlation ID."""

    def broken_catalog() -> PageCatalog:
        raise RuntimeError("catalog unavailable")

    api_app.dependency_overrides[get_catalog] = broken_catalog
    async with AsyncClient(
        transport=ASGITransport(app=api_app), base_url="http://test"
    ) as client:
        response = await client.get(
            "/api/v1/catalogue", headers={"X-Request-ID": "test-broken"}
        )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["error"] == "RuntimeError"
    assert body["message"] == "catalog unavailable"
    assert body["correlation_id"] == "test-broken"
