"""Translation runner executed inside a dispatched job."""

from datetime import datetime, timezone
from typing import Protocol

from glooscap.catalog.models import (
    Condition,
    TranslationJobState,
    TranslationJobStatus,
)
from glooscap.core.errors import (
    BackendNotImplementedError,
    ConfigurationError,
    DecodeError,
    TransportError,
)
from glooscap.core.logging import get_logger
from glooscap.inference.client import InferenceClient
from glooscap.inference.types import DocumentContent, Primitive, TranslateRequest
from glooscap.wiki.models import (
    CreatedPage,
    CreatePageRequest,
    PageContent,
    PublishedPage,
)

logger = get_logger().bind(module="translation_runner")

TITLE_PREFIX = "AUTOTRANSLATED"
CONDITION_TYPE = "Translated"
PUBLISH_CONDITION_TYPE = "Published"


class PublishingWikiClient(Protocol):
    """Wiki access the runner needs: read the source, write and publish drafts."""

    async def get_page_content(self, page_id: str) -> PageContent: ...

    async def create_page(self, request: CreatePageRequest) -> CreatedPage: ...

    async def publish_page(self, page_id: str) -> PublishedPage: ...


def title_from_markdown(markdown: str) -> str:
    """Return the first Markdown heading, or "" if there is none."""
    for line in markdown.splitlines():
        stripped = line.strip()
        if stripped.startswith("#"):
            return stripped.lstrip("#").strip()
    return ""


class TranslationRunner:
    """Translates pages into draft pages and publishes approved drafts.

    ``inference`` may be omitted when the runner only publishes.
    """

    def __init__(
        self,
        wiki: PublishingWikiClient,
        inference: InferenceClient | None = None,
        title_prefix: str = TITLE_PREFIX,
    ) -> None:
        self.wiki = wiki
        self.inference = inference
        self.title_prefix = title_prefix

    async def run(
        self,
        job_id: str,
        page_id: str,
        language: str,
        page_title: str | None = None,
        collection_id: str | None = None,
        source_wiki_uri: str = "",
    ) -> TranslationJobStatus:
        """Translate one page and report the resulting job status.

        Remote failures end in a Failed status rather than an exception so
        the status can always be reported back. Configuration problems are
        raised when the collaborators are built, before this point.

        Returns:
            AwaitingApproval with the draft page on success, Failed otherwise
        """
        if self.inference is None:
            raise ConfigurationError("runner: inference client is required")

        status = TranslationJobStatus(
            state=TranslationJobState.RUNNING,
            message="Translation runner processing",
            started_at=datetime.now(timezone.utc),
        )
        log = logger.bind(job_id=job_id, page_id=page_id, language=language)
        log.info("translation_started")

        try:
            content = await self.wiki.get_page_content(page_id)
            title = (
                page_title
                or content.title
                or title_from_markdown(content.markdown)
                or page_id
            )

            request = TranslateRequest(
                job_id=job_id,
                primitive=Primitive.DOC_TRANSLATE,
                title=title,
                document=DocumentContent(
                    title=title, markdown=content.markdown, slug=content.slug
                ),
                target_language=language,
                source_wiki_uri=source_wiki_uri,
                page_id=page_id,
                page_slug=content.slug,
            )
            response = await self.inference.translate(request)
            if not response.success:
                reason = response.error_message or "translation failed"
                return self._fail(status, "TranslationFailed", reason)

            translated_title = response.translated_title or title
            created = await self.wiki.create_page(
                CreatePageRequest(
                    title=f"{self.title_prefix}--> {translated_title}",
                    text=response.translated_markdown,
                    collection_id=collection_id,
                    publish=False,
                )
            )
        except BackendNotImplementedError as e:
            return self._fail(status, "BackendNotImplemented", str(e))
        except TransportError as e:
            return self._fail(status, "TransportError", str(e))
        except DecodeError as e:
            return self._fail(status, "DecodeError", str(e))
        except ValueError as e:
            return self._fail(status, "InvalidRequest", str(e))

        status.state = TranslationJobState.AWAITING_APPROVAL
        status.message = f"Draft page {created.id} created: {created.title}"
        status.finished_at = datetime.now(timezone.utc)
        status.conditions.append(
            Condition(
                type=CONDITION_TYPE,
                status="True",
                reason="DraftCreated",
                message=created.id,
                last_transition_time=status.finished_at,
            )
        )
        log.info("translation_draft_created", draft_id=created.id)
        return status

    async def publish_draft(self, job_id: str, page_id: str) -> TranslationJobStatus:
        """Publish an approved draft page.

        The job passes through Publishing and ends Completed with the
        published page recorded in its condition, or Failed when the wiki
        refuses.
        """
        status = TranslationJobStatus(
            state=TranslationJobState.PUBLISHING,
            message=f"Publishing draft page {page_id}",
            started_at=datetime.now(timezone.utc),
        )
        log = logger.bind(job_id=job_id, page_id=page_id)
        log.info("draft_publishing")

        try:
            published = await self.wiki.publish_page(page_id)
        except TransportError as e:
            return self._fail(status, "TransportError", str(e), PUBLISH_CONDITION_TYPE)
        except DecodeError as e:
            return self._fail(status, "DecodeError", str(e), PUBLISH_CONDITION_TYPE)

        status.state = TranslationJobState.COMPLETED
        status.message = f"Page published successfully (page: {published.slug})"
        status.finished_at = datetime.now(timezone.utc)
        status.conditions.append(
            Condition(
                type=PUBLISH_CONDITION_TYPE,
                status="True",
                reason="PagePublished",
                message=published.url or published.id,
                last_transition_time=status.finished_at,
            )
        )
        log.info("draft_published", url=published.url)
        return status

    def _fail(
        self,
        status: TranslationJobStatus,
        reason: str,
        message: str,
        condition_type: str = CONDITION_TYPE,
    ) -> TranslationJobStatus:
        status.state = TranslationJobState.FAILED
        status.message = message
        status.finished_at = datetime.now(timezone.utc)
        status.conditions.append(
            Condition(
                type=condition_type,
                status="False",
                reason=reason,
                message=message,
                last_transition_time=status.finished_at,
            )
        )
        logger.error("translation_failed", reason=reason, error=message)
        return status
