"""Minimal Kubernetes API client for server-side apply."""

import json
import os
from pathlib import Path
from typing import Any, Protocol

import httpx

from glooscap.core.config import Settings
from glooscap.core.errors import ConfigurationError, DecodeError, TransportError
from glooscap.core.logging import get_logger

logger = get_logger().bind(module="kubernetes_client")

APPLY_CONTENT_TYPE = "application/apply-patch+yaml"


class ApplyClient(Protocol):
    """Anything that can server-side apply a manifest."""

    async def apply(
        self, manifest: dict[str, Any], *, field_manager: str, force: bool = True
    ) -> dict[str, Any]: ...


def resource_path(manifest: dict[str, Any]) -> str:
    """Build the REST path of a namespaced object from its manifest.

    ``batch/v1`` ``Job`` named ``x`` in ``ns`` maps to
    ``/apis/batch/v1/namespaces/ns/jobs/x``; core ``v1`` objects live under
    ``/api/v1``.

    Raises:
        ValueError: If apiVersion, kind, name or namespace is missing
    """
    api_version = manifest.get("apiVersion")
    kind = manifest.get("kind")
    metadata = manifest.get("metadata") or {}
    name = metadata.get("name")
    namespace = metadata.get("namespace")
    if not (api_version and kind and name and namespace):
        raise ValueError(
            "manifest needs apiVersion, kind, metadata.name and metadata.namespace"
        )

    prefix = "/api" if "/" not in api_version else "/apis"
    plural = kind.lower() + "s"
    return f"{prefix}/{api_version}/namespaces/{namespace}/{plural}/{name}"


class KubernetesClient:
    """Applies manifests against the Kubernetes API server over HTTPS."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        verify: bool | str = True,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API server URL
            token: Bearer token
            verify: TLS verification flag or CA bundle path
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)

        Raises:
            ConfigurationError: If no API server URL is given
        """
        if not base_url:
            raise ConfigurationError("kubernetes: API server URL is required")

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token.strip()}"

        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            verify=verify,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def in_cluster(cls, settings: Settings) -> "KubernetesClient":
        """Build a client from the pod's service account mount.

        Raises:
            ConfigurationError: If the service account token cannot be read
        """
        token_path = Path(settings.KUBERNETES_TOKEN_PATH)
        try:
            token = token_path.read_text().strip()
        except OSError as e:
            raise ConfigurationError(
                f"kubernetes: read service account token {token_path}: {e}"
            ) from e

        base_url = settings.KUBERNETES_API_URL
        host = os.environ.get("KUBERNETES_SERVICE_HOST")
        port = os.environ.get("KUBERNETES_SERVICE_PORT", "443")
        if host:
            base_url = f"https://{host}:{port}"

        ca_path = settings.KUBERNETES_CA_PATH
        verify: bool | str = ca_path if Path(ca_path).exists() else True
        return cls(
            base_url,
            token=token,
            verify=verify,
            timeout=settings.KUBERNETES_TIMEOUT,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def apply(
        self, manifest: dict[str, Any], *, field_manager: str, force: bool = True
    ) -> dict[str, Any]:
        """Create or patch an object with server-side apply.

        Applying the same manifest twice converges on one object.

        Returns:
            The object as stored by the API server

        Raises:
            TransportError: On network failures or non-2xx answers
            DecodeError: If the answer is not JSON
        """
        path = resource_path(manifest)
        operation = f"kubernetes: apply {path}"
        params = {"fieldManager": field_manager}
        if force:
            params["force"] = "true"

        try:
            response = await self._client.patch(
                path,
                params=params,
                content=json.dumps(manifest),
                headers={"Content-Type": APPLY_CONTENT_TYPE},
            )
        except httpx.HTTPError as e:
            raise TransportError(operation, f"request failed: {e}") from e

        if not response.is_success:
            raise TransportError(
                operation,
                f"unexpected status code {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(operation, str(e)) from e

        logger.debug("manifest_applied", path=path, field_manager=field_manager)
        return body
