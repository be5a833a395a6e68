"""Tests for the inference client contract and stub backend."""

import pytest
from pytest_mock import MockerFixture

from glooscap.core.errors import (
    BackendNotImplementedError,
    ConfigurationError,
    TransportError,
)
from glooscap.inference.client import (
    InferenceClient,
    InferenceConfig,
    RemoteInferenceClient,
    check_readiness,
    validate_translate_request,
)
from glooscap.inference.types import (
    CheckTitleResult,
    DocumentContent,
    Primitive,
    Readiness,
    TranslateRequest,
    TranslateResponse,
)


@pytest.fixture
def remote() -> RemoteInferenceClient:
    """Get a remote client with a valid configuration."""
    return RemoteInferenceClient(InferenceConfig(address="inference.example:50051"))


@pytest.fixture
def doc_request() -> TranslateRequest:
    """Get a complete document translation request."""
    return TranslateRequest(
        job_id="job-1",
        primitive=Primitive.DOC_TRANSLATE,
        document=DocumentContent(title="Runbook", markdown="# Runbook"),
        target_language="fr-CA",
    )


class StaticInference(InferenceClient):
    """Backend that always answers with a fixed title check."""

    def __init__(self, ready: bool) -> None:
        self.ready = ready

    async def check_title(self, title: str, languages: list[str]) -> CheckTitleResult:
        return CheckTitleResult(ready=self.ready, message="checked")

    async def translate(self, request: TranslateRequest) -> TranslateResponse:
        return TranslateResponse(job_id=request.job_id, success=True)


def test_remote_client_requires_address() -> None:
    """Test a missing address is a configuration error."""
    with pytest.raises(ConfigurationError, match="address is required"):
        RemoteInferenceClient(InferenceConfig())


@pytest.mark.asyncio
async def test_check_title_not_implemented(remote: RemoteInferenceClient) -> None:
    """Test the stub reports its title check as not implemented."""
    with pytest.raises(BackendNotImplementedError) as exc_info:
        await remote.check_title("Runbook", ["FR"])

    assert str(exc_info.value) == "inference: check_title is not implemented"
    assert not isinstance(exc_info.value, TransportError)


@pytest.mark.asyncio
async def test_check_title_requires_title(remote: RemoteInferenceClient) -> None:
    """Test an empty title is rejected before reaching the backend."""
    with pytest.raises(ValueError, match="title is required"):
        await remote.check_title("", ["FR"])


@pytest.mark.asyncio
async def test_translate_not_implemented(
    remote: RemoteInferenceClient, doc_request: TranslateRequest
) -> None:
    """Test the stub reports translation as not implemented."""
    with pytest.raises(BackendNotImplementedError, match="translate"):
        await remote.translate(doc_request)


@pytest.mark.asyncio
async def test_translate_validates_before_not_implemented(
    remote: RemoteInferenceClient, doc_request: TranslateRequest
) -> None:
    """Test invalid requests fail validation even on the stub."""
    request = doc_request.model_copy(update={"document": None})
    with pytest.raises(ValueError, match="document is required"):
        await remote.translate(request)


@pytest.mark.parametrize(
    ("update", "message"),
    [
        ({"target_language": ""}, "target language is required"),
        ({"primitive": Primitive.TITLE, "title": ""}, "title is required"),
        ({"document": None}, "document is required"),
    ],
)
def test_validate_translate_request(
    doc_request: TranslateRequest, update: dict[str, object], message: str
) -> None:
    """Test requests missing primitive-specific fields are rejected."""
    with pytest.raises(ValueError, match=message):
        validate_translate_request(doc_request.model_copy(update=update))


def test_validate_title_request(doc_request: TranslateRequest) -> None:
    """Test a title request needs no document."""
    request = doc_request.model_copy(
        update={"primitive": Primitive.TITLE, "title": "Runbook", "document": None}
    )
    validate_translate_request(request)


@pytest.mark.asyncio
async def test_readiness_unimplemented(remote: RemoteInferenceClient) -> None:
    """Test the stub backend is classified as unimplemented."""
    assert await check_readiness(remote, "Runbook", ["FR"]) is Readiness.UNIMPLEMENTED


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("ready", "expected"),
    [(True, Readiness.READY), (False, Readiness.NOT_READY)],
)
async def test_readiness_from_backend_answer(
    ready: bool, expected: Readiness
) -> None:
    """Test a backend answer maps to ready or not ready."""
    assert await check_readiness(StaticInference(ready), "Runbook", ["FR"]) is expected


@pytest.mark.asyncio
async def test_readiness_unavailable(mocker: MockerFixture) -> None:
    """Test transport failures classify the backend as unavailable."""
    client = StaticInference(ready=True)
    mocker.patch.object(
        client,
        "check_title",
        side_effect=TransportError("inference: check_title", "connection refused"),
    )

    assert await check_readiness(client, "Runbook", ["FR"]) is Readiness.UNAVAILABLE


@pytest.mark.asyncio
async def test_readiness_propagates_other_errors(mocker: MockerFixture) -> None:
    """Test unexpected errors are not swallowed by the probe."""
    client = StaticInference(ready=True)
    mocker.patch.object(client, "check_title", side_effect=RuntimeError("bug"))

    with pytest.raises(RuntimeError, match="bug"):
        await check_readiness(client, "Runbook", ["FR"])
