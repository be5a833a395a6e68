"""Wiki source clients."""

from glooscap.wiki.base import WikiSourceClient
from glooscap.wiki.models import (
    Collection,
    CreatedPage,
    CreatePageRequest,
    PageContent,
    PageSummary,
    PublishedPage,
    extract_language_from_title,
)
from glooscap.wiki.outline import OutlineClient, OutlineConfig

__all__ = [
    "Collection",
    "CreatedPage",
    "CreatePageRequest",
    "OutlineClient",
    "OutlineConfig",
    "PageContent",
    "PageSummary",
    "PublishedPage",
    "WikiSourceClient",
    "extract_language_from_title",
]
