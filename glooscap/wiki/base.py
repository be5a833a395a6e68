"""Contract for wiki sources the catalog can scan."""

from typing import Protocol, runtime_checkable

from glooscap.wiki.models import PageContent, PageSummary


@runtime_checkable
class WikiSourceClient(Protocol):
    """Read access to a remote wiki."""

    async def list_pages(self) -> list[PageSummary]: ...

    async def get_page_content(self, page_id: str) -> PageContent: ...
