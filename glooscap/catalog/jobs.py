"""Translation job status snapshots for UI consumption."""

from glooscap.catalog.models import JobRecord, TranslationJob
from glooscap.core.locks import ReadWriteLock
from glooscap.core.logging import get_logger
from glooscap.core.metrics import JOB_STATUS_UPDATES

logger = get_logger().bind(module="job_registry")


class JobRegistry:
    """Keeps the latest reported status of each translation job.

    Last write wins. There is no ordering check, so a stale report that
    arrives after a newer one replaces it and the visible state regresses
    until the next report. No history is kept.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._jobs: dict[str, JobRecord] = {}

    def update(self, job: TranslationJob) -> None:
        """Record the latest status for ``job``, overwriting any prior entry."""
        record = JobRecord(
            status=job.status.model_copy(deep=True),
            pipeline=job.spec.pipeline,
            target_ref=job.spec.source.target_ref,
            page_id=job.spec.source.page_id,
            page_title=job.spec.parameters.get("pageTitle", ""),
        )
        with self._lock.write():
            self._jobs[job.name] = record

        state = job.status.state.value if job.status.state else "unknown"
        JOB_STATUS_UPDATES.labels(state=state).inc()
        logger.debug("job_status_recorded", job=job.name, state=state)

    def get(self, name: str) -> JobRecord | None:
        """Return a copy of one job's record, or None."""
        with self._lock.read():
            record = self._jobs.get(name)
            return record.model_copy(deep=True) if record is not None else None

    def list(self) -> dict[str, JobRecord]:
        """Return a copy of every job record keyed by job name."""
        with self._lock.read():
            return {
                name: record.model_copy(deep=True)
                for name, record in self._jobs.items()
            }
