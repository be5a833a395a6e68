"""Dispatch request types and the dispatcher contract."""

from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel


class DispatchMode(str, Enum):
    """Backend execution strategy."""

    TEKTON_JOB = "TektonJob"
    INLINE = "InlineLLM"


class DispatchRequest(BaseModel):
    """A request to translate one page."""

    job_name: str
    namespace: str = ""
    page_id: str
    language_tag: str = ""
    source_target: str = ""
    mode: DispatchMode = DispatchMode.TEKTON_JOB


class Dispatcher(ABC):
    """Turns a translate request into a unit of remote execution.

    Implementations must be safe to call repeatedly for the same
    ``job_name``: repeated calls converge on one managed unit of work.
    Retries belong to the caller.
    """

    mode: DispatchMode

    @abstractmethod
    async def dispatch(self, request: DispatchRequest) -> None:
        """Submit ``request`` for execution.

        Args:
            request: What to translate

        Raises:
            ConfigurationError: If the dispatcher is not wired up
        """
        raise NotImplementedError


def mode_from_string(value: str | None) -> DispatchMode:
    """Map a free-form string to a dispatch mode.

    Only the exact value "InlineLLM" selects the inline strategy. Anything
    else, including empty or unknown values, falls back to TektonJob.
    """
    if value == DispatchMode.INLINE.value:
        return DispatchMode.INLINE
    return DispatchMode.TEKTON_JOB
