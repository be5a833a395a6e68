"""Tests for the server-side apply Kubernetes client."""

import json
from pathlib import Path

import pytest
import respx
from httpx import ConnectError, Response

from glooscap.core.config import Settings
from glooscap.core.errors import ConfigurationError, DecodeError, TransportError
from glooscap.dispatch.kubernetes import KubernetesClient, resource_path

API_URL = "https://k8s.example.com:6443"
JOB_PATH = "/apis/batch/v1/namespaces/wiki-jobs/jobs/vllm-translate"

MANIFEST = {
    "apiVersion": "batch/v1",
    "kind": "Job",
    "metadata": {"name": "vllm-translate", "namespace": "wiki-jobs"},
    "spec": {"backoffLimit": 0},
}


def test_resource_path_for_group_and_core_objects() -> None:
    """Test REST paths for grouped and core API objects."""
    assert resource_path(MANIFEST) == JOB_PATH
    config_map = {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "cfg", "namespace": "ns"},
    }
    assert resource_path(config_map) == "/api/v1/namespaces/ns/configmaps/cfg"


def test_resource_path_requires_identity() -> None:
    """Test manifests without a namespace are rejected."""
    with pytest.raises(ValueError, match="metadata.namespace"):
        resource_path({"apiVersion": "batch/v1", "kind": "Job", "metadata": {}})


def test_client_requires_url() -> None:
    """Test an empty API server URL is a configuration error."""
    with pytest.raises(ConfigurationError):
        KubernetesClient("")


@pytest.mark.asyncio
async def test_apply_sends_server_side_apply_patch() -> None:
    """Test apply PATCHes the object with apply-patch content and force."""
    client = KubernetesClient(API_URL, token="sa-token")
    with respx.mock:
        route = respx.patch(f"{API_URL}{JOB_PATH}").mock(
            return_value=Response(200, json=MANIFEST)
        )
        result = await client.apply(MANIFEST, field_manager="glooscap-operator")

    assert result == MANIFEST
    sent = route.calls.last.request
    assert sent.url.params["fieldManager"] == "glooscap-operator"
    assert sent.url.params["force"] == "true"
    assert sent.headers["Content-Type"] == "application/apply-patch+yaml"
    assert sent.headers["Authorization"] == "Bearer sa-token"
    assert json.loads(sent.content) == MANIFEST
    await client.aclose()


@pytest.mark.asyncio
async def test_apply_without_force() -> None:
    """Test the force parameter is omitted when not requested."""
    client = KubernetesClient(API_URL)
    with respx.mock:
        route = respx.patch(f"{API_URL}{JOB_PATH}").mock(
            return_value=Response(201, json=MANIFEST)
        )
        await client.apply(MANIFEST, field_manager="glooscap-operator", force=False)

    assert "force" not in route.calls.last.request.url.params
    await client.aclose()


@pytest.mark.asyncio
async def test_apply_error_status() -> None:
    """Test non-success answers become transport errors with the status code."""
    client = KubernetesClient(API_URL)
    with respx.mock:
        respx.patch(f"{API_URL}{JOB_PATH}").mock(
            return_value=Response(409, json={"reason": "Conflict"})
        )
        with pytest.raises(TransportError) as exc_info:
            await client.apply(MANIFEST, field_manager="glooscap-operator")

    assert exc_info.value.status_code == 409
    assert "409" in str(exc_info.value)
    await client.aclose()


@pytest.mark.asyncio
async def test_apply_network_failure() -> None:
    """Test connection failures become transport errors."""
    client = KubernetesClient(API_URL)
    with respx.mock:
        respx.patch(f"{API_URL}{JOB_PATH}").mock(
            side_effect=ConnectError("connection refused")
        )
        with pytest.raises(TransportError, match="request failed"):
            await client.apply(MANIFEST, field_manager="glooscap-operator")
    await client.aclose()


@pytest.mark.asyncio
async def test_apply_invalid_json() -> None:
    """Test a non-JSON answer is a decode error."""
    client = KubernetesClient(API_URL)
    with respx.mock:
        respx.patch(f"{API_URL}{JOB_PATH}").mock(
            return_value=Response(200, content=b"not json")
        )
        with pytest.raises(DecodeError):
            await client.apply(MANIFEST, field_manager="glooscap-operator")
    await client.aclose()


def test_in_cluster_reads_service_account(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test the in-cluster client uses the mounted token and service host."""
    token = tmp_path / "token"
    token.write_text("mounted-token\n")
    monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.0.0.1")
    monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "8443")
    settings = Settings(
        KUBERNETES_TOKEN_PATH=str(token),
        KUBERNETES_CA_PATH=str(tmp_path / "missing-ca.crt"),
    )

    client = KubernetesClient.in_cluster(settings)

    assert client.base_url == "https://10.0.0.1:8443"


def test_in_cluster_without_token(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test a missing service account token is a configuration error."""
    monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
    settings = Settings(KUBERNETES_TOKEN_PATH=str(tmp_path / "missing"))

    with pytest.raises(ConfigurationError, match="service account token"):
        KubernetesClient.in_cluster(settings)
