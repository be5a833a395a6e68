"""Translation work dispatchers."""

from glooscap.dispatch.base import (
    DispatchMode,
    DispatchRequest,
    Dispatcher,
    mode_from_string,
)
from glooscap.dispatch.factory import create_dispatcher
from glooscap.dispatch.inline import InlineDispatcher
from glooscap.dispatch.job import JobDispatcher, job_resource_name
from glooscap.dispatch.kubernetes import KubernetesClient

__all__ = [
    "DispatchMode",
    "DispatchRequest",
    "Dispatcher",
    "InlineDispatcher",
    "JobDispatcher",
    "KubernetesClient",
    "create_dispatcher",
    "job_resource_name",
    "mode_from_string",
]
