"""Outline wiki API client."""

from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from glooscap.core.errors import ConfigurationError, DecodeError, TransportError
from glooscap.core.logging import get_logger
from glooscap.wiki.models import (
    Collection,
    CreatedPage,
    CreatePageRequest,
    PageContent,
    PageSummary,
    PublishedPage,
    detect_template,
    extract_language_from_title,
)

logger = get_logger().bind(module="outline_client")

DEFAULT_TIMEOUT = 15.0
PAGE_LIMIT = 100  # Outline API maximum per request

DOCUMENTS_LIST_PATH = "/api/documents.list"
DOCUMENTS_EXPORT_PATH = "/api/documents.export"
DOCUMENTS_CREATE_PATH = "/api/documents.create"
DOCUMENTS_UPDATE_PATH = "/api/documents.update"
DOCUMENTS_DELETE_PATH = "/api/documents.delete"
COLLECTIONS_LIST_PATH = "/api/collections.list"


def _is_draft(item: dict[str, Any]) -> bool:
    # Older Outline releases send isDraft, newer ones leave publishedAt null
    if item.get("isDraft"):
        return True
    return "publishedAt" in item and item["publishedAt"] is None


class OutlineConfig(BaseModel):
    """Outline client settings."""

    base_url: str | None = None
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    insecure_skip_tls_verify: bool = False


class OutlineClient:
    """Talks to the Outline JSON-RPC style API.

    Every endpoint is a POST with a JSON body. Failures are wrapped with the
    operation name and returned to the caller; nothing is retried here.
    """

    def __init__(
        self,
        config: OutlineConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Connection settings
            transport: Optional httpx transport (used by tests)

        Raises:
            ConfigurationError: If the base URL or token is missing
        """
        if not config.base_url:
            raise ConfigurationError("outline: base URL is required")
        if not config.token or not config.token.strip():
            raise ConfigurationError("outline: API token is required")
        if not config.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"outline: base URL must be http(s): {config.base_url}"
            )

        self.base_url = config.base_url.rstrip("/")
        if config.insecure_skip_tls_verify:
            logger.warning("outline_tls_verification_disabled", base_url=self.base_url)

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=config.timeout or DEFAULT_TIMEOUT,
            verify=not config.insecure_skip_tls_verify,
            transport=transport,
            headers={
                "Authorization": f"Bearer {config.token.strip()}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def __aenter__(self) -> "OutlineClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _post(
        self, operation: str, path: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """POST a JSON payload and decode the JSON answer.

        Raises:
            TransportError: On network failures or non-200 answers
            DecodeError: If the body is not a JSON object
        """
        try:
            response = await self._client.post(path, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"outline: {operation}", f"request failed: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise TransportError(
                f"outline: {operation}",
                f"unexpected status code {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(f"outline: {operation}", str(e)) from e
        if not isinstance(body, dict):
            raise DecodeError(f"outline: {operation}", "expected a JSON object")
        return body

    async def list_collections(self) -> list[Collection]:
        """List all collections visible to the token."""
        body = await self._post(
            "list collections", COLLECTIONS_LIST_PATH, {"limit": PAGE_LIMIT}
        )
        try:
            return [Collection.model_validate(item) for item in body.get("data") or []]
        except ValidationError as e:
            raise DecodeError("outline: list collections", str(e)) from e

    async def _collection_names(self) -> dict[str, str]:
        try:
            collections = await self.list_collections()
        except (TransportError, DecodeError) as e:
            # Names are cosmetic; fall back to IDs
            logger.warning("outline_collection_lookup_failed", error=str(e))
            return {}
        return {collection.id: collection.name for collection in collections}

    async def list_pages(self, collection_id: str | None = None) -> list[PageSummary]:
        """Fetch up to PAGE_LIMIT most recently updated pages.

        Drafts are excluded. Language and template markers are derived from
        the title since Outline exposes neither.

        Args:
            collection_id: Optional collection to restrict the listing to

        Returns:
            Page summaries, newest first
        """
        payload: dict[str, Any] = {
            "direction": "DESC",
            "sort": "updatedAt",
            "limit": PAGE_LIMIT,
            "offset": 0,
        }
        if collection_id:
            payload["collectionId"] = collection_id

        body = await self._post("list pages", DOCUMENTS_LIST_PATH, payload)
        items = body.get("data") or []
        if not isinstance(items, list):
            raise DecodeError("outline: list pages", "data is not a list")

        names = await self._collection_names() if items else {}

        pages: list[PageSummary] = []
        for item in items:
            if not isinstance(item, dict):
                raise DecodeError("outline: list pages", "page entry is not an object")
            if _is_draft(item):
                continue

            title = item.get("title", "")
            template = detect_template(title)
            coll_id = item.get("collectionId") or None
            try:
                pages.append(
                    PageSummary(
                        id=item["id"],
                        title=title,
                        slug=item.get("urlId", ""),
                        updated_at=item.get("updatedAt"),
                        language=extract_language_from_title(title),
                        has_assets=False,
                        collection=names.get(coll_id, coll_id) if coll_id else None,
                        template=template,
                        is_template=template is not None,
                    )
                )
            except (KeyError, ValidationError) as e:
                raise DecodeError("outline: list pages", str(e)) from e

        logger.info("outline_pages_listed", count=len(pages), received=len(items))
        return pages

    async def get_page_content(self, page_id: str) -> PageContent:
        """Fetch the full Markdown of a page via documents.export.

        Title and slug are not part of the export answer and are left empty.
        """
        body = await self._post(
            "get page content", DOCUMENTS_EXPORT_PATH, {"id": page_id}
        )
        markdown = body.get("data")
        if not isinstance(markdown, str):
            raise DecodeError("outline: get page content", "data is not a string")

        logger.debug(
            "outline_page_exported", page_id=page_id, markdown_length=len(markdown)
        )
        return PageContent(id=page_id, markdown=markdown)

    async def create_page(self, request: CreatePageRequest) -> CreatedPage:
        """Create a new page. Existing pages are never modified."""
        payload: dict[str, Any] = {
            "title": request.title,
            "text": request.text,
            "publish": request.publish,
        }
        if request.collection_id:
            payload["collectionId"] = request.collection_id
        if request.parent_document_id:
            payload["parentDocumentId"] = request.parent_document_id

        body = await self._post("create page", DOCUMENTS_CREATE_PATH, payload)
        data = body.get("data") or {}
        try:
            created = CreatedPage(
                id=data["id"], title=data.get("title", ""), slug=data.get("urlId", "")
            )
        except (KeyError, TypeError, ValidationError) as e:
            raise DecodeError("outline: create page", str(e)) from e

        logger.info("outline_page_created", page_id=created.id, title=created.title)
        return created

    async def delete_page(self, page_id: str) -> None:
        """Delete a page by ID."""
        body = await self._post("delete page", DOCUMENTS_DELETE_PATH, {"id": page_id})
        if body.get("success") is False:
            raise TransportError("outline: delete page", f"page {page_id} not deleted")
        logger.info("outline_page_deleted", page_id=page_id)

    async def publish_page(self, page_id: str) -> PublishedPage:
        """Publish an existing draft page.

        Drafts are published through documents.update with ``publish: true``.

        Returns:
            The published page, with its URL under this wiki
        """
        body = await self._post(
            "publish page", DOCUMENTS_UPDATE_PATH, {"id": page_id, "publish": True}
        )
        data = body.get("data") or {}
        try:
            slug = data.get("urlId", "")
            published = PublishedPage(
                id=data["id"],
                title=data.get("title", ""),
                slug=slug,
                url=f"{self.base_url}/doc/{slug}" if slug else "",
            )
        except (KeyError, AttributeError, TypeError, ValidationError) as e:
            raise DecodeError("outline: publish page", str(e)) from e

        logger.info("outline_page_published", page_id=published.id, url=published.url)
        return published
