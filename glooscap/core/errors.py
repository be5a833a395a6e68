"""Error taxonomy shared by the catalog, dispatch, wiki and inference layers.

None of these errors are retried by the component that raises them. The
reconciliation loop that calls into this package owns retry and backoff.
"""


class GlooscapError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(GlooscapError):
    """Raised when a component is missing a required setting or collaborator.

    Configuration errors are fatal to the call that hit them.
    """


class TransportError(GlooscapError):
    """Raised when a remote call fails at the network or HTTP status level."""

    def __init__(
        self, operation: str, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.status_code = status_code


class DecodeError(GlooscapError):
    """Raised when a remote response body cannot be decoded."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: decode response: {message}")
        self.operation = operation


class BackendNotImplementedError(GlooscapError):
    """Raised when a backend capability exists in the API but is not wired up.

    Kept separate from TransportError so callers can tell "feature unready"
    apart from "call failed".
    """

    def __init__(self, backend: str, operation: str) -> None:
        super().__init__(f"{backend}: {operation} is not implemented")
        self.backend = backend
        self.operation = operation
