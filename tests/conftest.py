"""Test configuration."""

import os
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pytest import Config

from glooscap.catalog.jobs import JobRegistry
from glooscap.catalog.models import Page, Target, TargetMode
from glooscap.catalog.store import PageCatalog
from glooscap.core.logging import configure_logging

fixture = pytest.fixture

WIKI_URI = "https://wiki.example.com"


@fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def pytest_configure(config: Config) -> None:
    """Configure pytest.

    Args:
        config: Pytest configuration object
    """
    os.environ["TESTING"] = "true"
    # Configure logging for test environment
    configure_logging(testing=True)


def _make_page(slug: str, **overrides: object) -> Page:
    fields: dict[str, object] = {
        "uri": f"{WIKI_URI}/doc/{slug}",
        "id": f"id-{slug}",
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "updated_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return Page.model_validate(fields)


@fixture
def make_page() -> Callable[..., Page]:
    """Get a factory for catalog pages on the test wiki."""
    return _make_page


@fixture
def catalog() -> PageCatalog:
    """Get an empty page catalog."""
    return PageCatalog()


@fixture
def registry() -> JobRegistry:
    """Get an empty job registry."""
    return JobRegistry()


@fixture
def target_a() -> Target:
    """Get the primary test target."""
    return Target(
        id="target-a",
        namespace="glooscap-system",
        name="wiki-a",
        mode=TargetMode.READ_ONLY,
        uri=WIKI_URI,
    )


@fixture
def target_b() -> Target:
    """Get a second target pointing at the same wiki."""
    return Target(
        id="target-b",
        namespace="glooscap-system",
        name="wiki-b",
        mode=TargetMode.READ_WRITE,
        uri=WIKI_URI,
    )
