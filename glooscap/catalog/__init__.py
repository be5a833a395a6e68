"""Page catalog and job registry."""

from glooscap.catalog.jobs import JobRegistry
from glooscap.catalog.models import (
    JobRecord,
    Page,
    PageState,
    Target,
    TargetMode,
    TranslationJob,
    TranslationJobState,
    TranslationJobStatus,
)
from glooscap.catalog.store import PageCatalog
from glooscap.catalog.sync import sync_target

__all__ = [
    "JobRecord",
    "JobRegistry",
    "Page",
    "PageCatalog",
    "PageState",
    "Target",
    "TargetMode",
    "TranslationJob",
    "TranslationJobState",
    "TranslationJobStatus",
    "sync_target",
]
