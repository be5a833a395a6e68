"""Build a dispatcher for a configured mode."""

from glooscap.core.config import Settings
from glooscap.dispatch.base import DispatchMode, Dispatcher
from glooscap.dispatch.inline import InlineDispatcher, InlineFunc
from glooscap.dispatch.job import JobDispatcher
from glooscap.dispatch.kubernetes import ApplyClient


def create_dispatcher(
    mode: DispatchMode,
    settings: Settings,
    client: ApplyClient | None = None,
    func: InlineFunc | None = None,
) -> Dispatcher:
    """Create the dispatcher for ``mode``.

    Missing collaborators are not checked here; the dispatcher reports them
    as configuration errors on its first dispatch.
    """
    if mode is DispatchMode.INLINE:
        return InlineDispatcher(func)
    return JobDispatcher(
        client,
        namespace=settings.NAMESPACE,
        image=settings.RUNNER_IMAGE,
        api_server_url=settings.VLLM_URL,
        field_manager=settings.FIELD_MANAGER,
        ttl_seconds_after_finished=settings.JOB_TTL_SECONDS_AFTER_FINISHED,
        config_map=settings.RUNNER_CONFIG_MAP or None,
        token_secret=settings.RUNNER_SECRET_NAME or None,
    )
