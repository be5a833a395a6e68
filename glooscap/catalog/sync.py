"""One discovery pass: list a wiki target and merge the result into the catalog."""

from glooscap.catalog.models import Page, Target
from glooscap.catalog.store import PageCatalog
from glooscap.core.logging import get_logger
from glooscap.wiki.base import WikiSourceClient

logger = get_logger().bind(module="catalog_sync")


async def sync_target(
    client: WikiSourceClient, catalog: PageCatalog, target: Target
) -> list[Page]:
    """Scan ``target`` and replace its pages in ``catalog``.

    Errors from the wiki client propagate untouched and leave the catalog as
    it was; the caller decides when to try again.

    Args:
        client: Wiki client bound to the target's base URI
        catalog: Catalog to merge into
        target: Target being scanned

    Returns:
        The pages handed to the catalog
    """
    summaries = await client.list_pages()
    pages = [Page.from_summary(summary, target.key, target.uri) for summary in summaries]
    catalog.update(target.key, target, pages)
    logger.info("target_synced", target=target.key, pages=len(pages))
    return pages
