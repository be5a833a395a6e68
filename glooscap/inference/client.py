"""Inference backend clients."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from glooscap.core.errors import (
    BackendNotImplementedError,
    ConfigurationError,
    TransportError,
)
from glooscap.core.logging import get_logger
from glooscap.inference.types import (
    CheckTitleResult,
    Primitive,
    Readiness,
    TranslateRequest,
    TranslateResponse,
)

logger = get_logger().bind(module="inference_client")


class InferenceClient(ABC):
    """Capability every inference backend provides."""

    @abstractmethod
    async def check_title(self, title: str, languages: list[str]) -> CheckTitleResult:
        """Ask whether the backend can take a translation for ``title``.

        Args:
            title: Source page title
            languages: Target language codes

        Returns:
            Readiness details from the backend
        """
        raise NotImplementedError

    @abstractmethod
    async def translate(self, request: TranslateRequest) -> TranslateResponse:
        """Translate a title or a whole document."""
        raise NotImplementedError


class InferenceConfig(BaseModel):
    """Remote inference backend settings."""

    address: str | None = None
    client_name: str = "glooscap"
    namespace: str = ""
    timeout: float = 30.0


def validate_translate_request(request: TranslateRequest) -> None:
    """Reject requests the backend could never serve.

    Raises:
        ValueError: If required fields for the primitive are missing
    """
    if not request.target_language:
        raise ValueError("target language is required")
    if request.primitive is Primitive.TITLE and not request.title:
        raise ValueError("title is required for the title primitive")
    if request.primitive is Primitive.DOC_TRANSLATE and request.document is None:
        raise ValueError("document is required for the doc-translate primitive")


class RemoteInferenceClient(InferenceClient):
    """Client for the remote translation service.

    The wire protocol is not implemented yet. Construction validates the
    configuration and every call validates its request, then raises
    BackendNotImplementedError so callers can tell an unready backend apart
    from a failing one.
    """

    backend_name = "inference"

    def __init__(self, config: InferenceConfig) -> None:
        if not config.address:
            raise ConfigurationError("inference: address is required")
        self.config = config
        logger.info(
            "inference_client_created",
            address=config.address,
            client_name=config.client_name,
        )

    async def check_title(self, title: str, languages: list[str]) -> CheckTitleResult:
        if not title:
            raise ValueError("title is required")
        raise BackendNotImplementedError(self.backend_name, "check_title")

    async def translate(self, request: TranslateRequest) -> TranslateResponse:
        validate_translate_request(request)
        raise BackendNotImplementedError(self.backend_name, "translate")


async def check_readiness(
    client: InferenceClient, title: str, languages: list[str]
) -> Readiness:
    """Probe ``client`` and classify the outcome.

    Only the "not implemented" and transport failure kinds are mapped;
    anything else propagates.
    """
    try:
        result = await client.check_title(title, languages)
    except BackendNotImplementedError:
        return Readiness.UNIMPLEMENTED
    except TransportError as e:
        logger.warning("inference_probe_failed", error=str(e))
        return Readiness.UNAVAILABLE
    return Readiness.READY if result.ready else Readiness.NOT_READY
