"""API v1 router module."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from glooscap.catalog.jobs import JobRegistry
from glooscap.catalog.models import Page, Target
from glooscap.catalog.store import PageCatalog

router = APIRouter(default_response_class=JSONResponse)


def get_catalog(request: Request) -> PageCatalog:
    """Return the page catalog attached to the application."""
    catalog: PageCatalog = request.app.state.catalog
    return catalog


def get_jobs(request: Request) -> JobRegistry:
    """Return the job registry attached to the application."""
    jobs: JobRegistry = request.app.state.jobs
    return jobs


@router.get("/catalogue", response_model=list[Page])
async def list_catalogue(
    target: str = Query("", description="Target key (namespace/name); empty for all"),
    catalog: PageCatalog = Depends(get_catalog),
) -> list[Page]:
    """
    List catalogued pages.

    Args:
    ----
        target: Restrict the listing to one target
        catalog: Page catalog dependency

    Returns:
    -------
        Snapshot of the matching pages
    """
    return catalog.list(target)


@router.get("/catalogue/page", response_model=Page)
async def get_catalogue_page(
    uri: str = Query(..., min_length=1, description="Page URI"),
    catalog: PageCatalog = Depends(get_catalog),
) -> Page:
    """Look up a single page by URI."""
    page = catalog.get_page(uri)
    if page is None:
        raise HTTPException(status_code=404, detail=f"page not found: {uri}")
    return page


@router.get("/targets", response_model=list[Target])
async def list_targets(catalog: PageCatalog = Depends(get_catalog)) -> list[Target]:
    """List targets with a recorded scan."""
    return catalog.targets()


@router.get("/jobs")
async def list_jobs(jobs: JobRegistry = Depends(get_jobs)) -> dict[str, Any]:
    """Return the latest known status of every translation job, keyed by name."""
    return {
        name: record.model_dump(mode="json") for name, record in jobs.list().items()
    }
