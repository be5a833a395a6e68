"""In-memory catalog of wiki pages per target."""

import queue
from datetime import datetime, timezone

from glooscap.catalog.models import Page, PageState, Target
from glooscap.core.locks import ReadWriteLock
from glooscap.core.logging import get_logger
from glooscap.core.metrics import (
    CATALOG_NOTIFICATIONS_DROPPED,
    CATALOG_PAGES,
    CATALOG_UPDATES,
)

logger = get_logger().bind(module="page_catalog")


class PageCatalog:
    """Deduplicated, stateful index of pages across wiki targets.

    Pages are keyed by URI, which is unique across the whole catalog. Each
    target keeps an ordered list of the URIs it owns. Everything handed out is
    a copy; mutations go through ``update``, ``update_page`` and
    ``delete_page`` so both indexes stay consistent.

    Change notification is a single slot. Writers never block on it: when a
    signal is already pending the new one is dropped. Consumers should treat
    it as a hint to re-list and keep polling on their own schedule.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._pages: dict[str, Page] = {}
        self._by_target: dict[str, list[str]] = {}
        self._meta: dict[str, Target] = {}
        self._changed: queue.Queue[None] = queue.Queue(maxsize=1)

    def update(self, target: str, meta: Target, pages: list[Page]) -> None:
        """Replace the page set owned by ``target`` with a fresh scan.

        Lifecycle fields (state, auto_translated, translation_uri) carry over
        from any page already tracked under the same URI, whichever target
        owned it. Descriptive fields come from the scan. New URIs start in the
        Discovered state. Pages from the previous scan that are missing from
        this one are dropped.

        Args:
            target: Target key (namespace/name)
            meta: Target metadata
            pages: Complete result of the scan
        """
        now = datetime.now(timezone.utc)
        with self._lock.write():
            self._meta[target] = meta.model_copy(deep=True)
            previous = self._by_target.get(target, [])

            merged: dict[str, Page] = {}
            touched = {target}
            for page in pages:
                if not page.uri:
                    logger.warning(
                        "page_without_uri_skipped", target=target, page_id=page.id
                    )
                    continue

                entry = page.model_copy(deep=True)
                entry.target = target
                entry.last_checked = now

                existing = self._pages.get(page.uri)
                if existing is not None:
                    entry.state = existing.state
                    entry.auto_translated = existing.auto_translated
                    entry.translation_uri = existing.translation_uri
                    if existing.target != target:
                        self._remove_from_target(existing.target, page.uri)
                        touched.add(existing.target)
                        logger.info(
                            "page_owner_changed",
                            uri=page.uri,
                            previous_target=existing.target,
                            target=target,
                        )
                else:
                    entry.state = PageState.DISCOVERED

                # Duplicate URIs within one scan: last one wins, first position kept
                merged[page.uri] = entry

            removed = 0
            for uri in previous:
                if uri in merged:
                    continue
                removed += 1
                stale = self._pages.get(uri)
                if stale is not None and stale.target == target:
                    del self._pages[uri]

            self._pages.update(merged)
            self._by_target[target] = list(merged)
            page_count = len(merged)
            counts = self._page_counts(touched)

        CATALOG_UPDATES.labels(target=target).inc()
        _set_page_gauges(counts)
        logger.info(
            "catalog_updated",
            target=target,
            pages=page_count,
            removed=removed,
        )
        self._notify()

    def get_page(self, uri: str) -> Page | None:
        """Look up a page by URI.

        Returns:
            A copy of the page, or None when the URI is not tracked
        """
        with self._lock.read():
            page = self._pages.get(uri)
            return page.model_copy(deep=True) if page is not None else None

    def update_page(self, page: Page) -> None:
        """Insert or replace a single page.

        The page's ``target`` decides which target list it belongs to. If the
        URI was owned by another target it moves.

        Raises:
            ValueError: If the page has no URI
        """
        if not page.uri:
            raise ValueError("page URI is required")

        entry = page.model_copy(deep=True)
        with self._lock.write():
            touched = {entry.target}
            existing = self._pages.get(entry.uri)
            if existing is not None and existing.target != entry.target:
                self._remove_from_target(existing.target, entry.uri)
                touched.add(existing.target)

            self._pages[entry.uri] = entry
            uris = self._by_target.setdefault(entry.target, [])
            if entry.uri not in uris:
                uris.append(entry.uri)
            counts = self._page_counts(touched)

        _set_page_gauges(counts)
        logger.debug(
            "page_updated", uri=entry.uri, target=entry.target, state=entry.state
        )
        self._notify()

    def delete_page(self, uri: str) -> bool:
        """Remove a page from the catalog.

        Returns:
            True if the page was tracked
        """
        with self._lock.write():
            page = self._pages.pop(uri, None)
            if page is None:
                return False
            self._remove_from_target(page.target, uri)
            counts = self._page_counts({page.target})

        _set_page_gauges(counts)
        logger.debug("page_deleted", uri=uri, target=page.target)
        self._notify()
        return True

    def remove_target(self, target: str) -> None:
        """Forget a target together with every page it owns."""
        with self._lock.write():
            self._meta.pop(target, None)
            for uri in self._by_target.pop(target, []):
                page = self._pages.get(uri)
                if page is not None and page.target == target:
                    del self._pages[uri]

        CATALOG_PAGES.labels(target=target).set(0)
        logger.info("catalog_target_removed", target=target)
        self._notify()

    def targets(self) -> list[Target]:
        """Return metadata for every known target."""
        with self._lock.read():
            return [meta.model_copy(deep=True) for meta in self._meta.values()]

    def list(self, target: str = "") -> list[Page]:
        """Return the pages of one target, or of all targets when empty."""
        with self._lock.read():
            if target:
                uris = self._by_target.get(target, [])
            else:
                uris = [uri for owned in self._by_target.values() for uri in owned]
            return [self._pages[uri].model_copy(deep=True) for uri in uris]

    def wait_for_change(self, timeout: float | None = None) -> bool:
        """Block until a change signal is pending and consume it.

        Returns:
            True if a signal was consumed, False on timeout
        """
        try:
            self._changed.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    def poll_change(self) -> bool:
        """Consume a pending change signal without blocking."""
        try:
            self._changed.get_nowait()
        except queue.Empty:
            return False
        return True

    def _notify(self) -> None:
        try:
            self._changed.put_nowait(None)
        except queue.Full:
            CATALOG_NOTIFICATIONS_DROPPED.inc()
            logger.debug("catalog_notification_coalesced")

    def _page_counts(self, targets: set[str]) -> dict[str, int]:
        # Caller holds the write lock
        return {t: len(self._by_target.get(t, [])) for t in targets}

    def _remove_from_target(self, target: str, uri: str) -> None:
        # Caller holds the write lock
        uris = self._by_target.get(target)
        if uris is None:
            return
        for index, owned in enumerate(uris):
            if owned == uri:
                del uris[index]
                break


def _set_page_gauges(counts: dict[str, int]) -> None:
    for target, count in counts.items():
        CATALOG_PAGES.labels(target=target).set(count)
