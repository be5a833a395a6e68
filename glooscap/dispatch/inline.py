"""Dispatcher that runs translation work in the caller's task."""

import inspect
from collections.abc import Awaitable, Callable

from glooscap.core.errors import ConfigurationError
from glooscap.core.metrics import DISPATCH_TOTAL
from glooscap.dispatch.base import DispatchMode, DispatchRequest, Dispatcher

InlineFunc = Callable[[DispatchRequest], Awaitable[None] | None]


class InlineDispatcher(Dispatcher):
    """Calls a bound function directly instead of submitting remote work.

    Meant for tests and for strategies that do not need out-of-process
    isolation. Idempotency is whatever the bound function provides.
    """

    mode = DispatchMode.INLINE

    def __init__(self, func: InlineFunc | None = None) -> None:
        self.func = func

    async def dispatch(self, request: DispatchRequest) -> None:
        """Run the bound function for ``request``.

        Raises:
            ConfigurationError: If no function is bound
        """
        if self.func is None:
            raise ConfigurationError("inline dispatcher not configured")

        try:
            result = self.func(request)
            if inspect.isawaitable(result):
                await result
        except Exception:
            DISPATCH_TOTAL.labels(mode=self.mode.value, status="error").inc()
            raise
        DISPATCH_TOTAL.labels(mode=self.mode.value, status="success").inc()
