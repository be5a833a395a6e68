"""Catalog and translation job models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from glooscap.wiki.models import PageSummary


class PageState(str, Enum):
    """Translation lifecycle of a catalogued page."""

    DISCOVERED = "Discovered"
    QUEUED = "Queued"
    TRANSLATING = "Translating"
    TRANSLATED = "Translated"
    PUBLISHED = "Published"
    FAILED = "Failed"


class TargetMode(str, Enum):
    """How a wiki target may be used during publication."""

    READ_ONLY = "ReadOnly"
    READ_WRITE = "ReadWrite"
    PUSH_ONLY = "PushOnly"


class Target(BaseModel):
    """Metadata about a configured wiki target."""

    id: str = ""
    namespace: str
    name: str
    mode: TargetMode = TargetMode.READ_ONLY
    uri: str = ""

    @property
    def key(self) -> str:
        """Catalog key for this target (namespace/name)."""
        return f"{self.namespace}/{self.name}"


class Page(BaseModel):
    """A discovered wiki page and its translation lifecycle."""

    uri: str
    id: str
    title: str
    slug: str = ""
    target: str = ""
    state: PageState = PageState.DISCOVERED
    last_checked: datetime | None = None
    updated_at: datetime | None = None
    auto_translated: bool = False
    translation_uri: str | None = None
    language: str = ""
    has_assets: bool = False
    collection: str | None = None
    template: str | None = None
    is_template: bool = False

    @classmethod
    def from_summary(cls, summary: PageSummary, target: str, base_uri: str) -> "Page":
        """Build a catalog page from a wiki listing entry.

        Args:
            summary: Page summary returned by the wiki client
            target: Owning target key
            base_uri: Base URL of the wiki the summary came from

        Returns:
            A page in the Discovered state
        """
        return cls(
            uri=page_uri(base_uri, summary.slug or summary.id),
            id=summary.id,
            title=summary.title,
            slug=summary.slug,
            target=target,
            updated_at=summary.updated_at,
            language=summary.language,
            has_assets=summary.has_assets,
            collection=summary.collection,
            template=summary.template,
            is_template=summary.is_template,
        )


def page_uri(base_uri: str, slug: str) -> str:
    """Canonical URI of a page on an Outline wiki."""
    return f"{base_uri.rstrip('/')}/doc/{slug}"


class TranslationJobState(str, Enum):
    """Translation job lifecycle phases."""

    QUEUED = "Queued"
    VALIDATING = "Validating"
    AWAITING_APPROVAL = "AwaitingApproval"
    DISPATCHING = "Dispatching"
    RUNNING = "Running"
    PUBLISHING = "Publishing"
    COMPLETED = "Completed"
    FAILED = "Failed"


class Condition(BaseModel):
    """A granular status observation."""

    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_transition_time: datetime | None = None


class DuplicateInfo(BaseModel):
    """A duplicate page found at the destination."""

    page_id: str
    page_title: str
    page_uri: str
    message: str = ""


class TranslationJobStatus(BaseModel):
    """Observed state of a translation job."""

    state: TranslationJobState | None = None
    message: str = ""
    started_at: datetime | None = None
    finished_at: datetime | None = None
    audit_ref: str = ""
    conditions: list[Condition] = Field(default_factory=list)
    duplicate_info: DuplicateInfo | None = None


class TranslationSource(BaseModel):
    """Identifies the page to translate."""

    target_ref: str
    page_id: str
    revision: str = ""


class TranslationDestination(BaseModel):
    """Where translated content should be published."""

    target_ref: str = ""
    path_prefix: str = ""
    language_tag: str = ""


class TranslationJobSpec(BaseModel):
    """Desired state of a translation job."""

    source: TranslationSource
    destination: TranslationDestination | None = None
    pipeline: str = "TektonJob"
    parameters: dict[str, str] = Field(default_factory=dict)


class TranslationJob(BaseModel):
    """A translation job as reported by the reconciler."""

    name: str
    namespace: str = ""
    spec: TranslationJobSpec
    status: TranslationJobStatus = Field(default_factory=TranslationJobStatus)


class JobRecord(BaseModel):
    """Job status plus the spec metadata the UI needs."""

    status: TranslationJobStatus
    pipeline: str
    target_ref: str
    page_id: str
    page_title: str = ""

