"""Dispatcher that submits Kubernetes Jobs running the translation runner."""

import hashlib
import re
from typing import Any

from glooscap.core.errors import ConfigurationError
from glooscap.core.logging import get_logger
from glooscap.core.metrics import DISPATCH_TOTAL
from glooscap.dispatch.base import DispatchMode, DispatchRequest, Dispatcher
from glooscap.dispatch.kubernetes import ApplyClient

logger = get_logger().bind(module="job_dispatcher")

JOB_NAME_PREFIX = "vllm-"
MAX_NAME_LENGTH = 63
CONTAINER_NAME = "inference"
JOB_LABEL = "glooscap.dasmlab.org/translation-job"

# Runner environment variable -> key in the shared ConfigMap. All optional.
RUNNER_CONFIG_ENV: dict[str, str] = {
    "WIKI_BASE_URL": "wiki-base-url",
    "INFERENCE_ADDRESS": "inference-address",
    "LOG_LEVEL": "log-level",
}

_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9-]+")


def job_resource_name(job_name: str) -> str:
    """Deterministic Kubernetes name for a logical translation job.

    The result is a valid DNS-1123 label. Names that are already valid are
    used as-is. Names that had to be rewritten (case folded, characters
    replaced or truncated to 63 characters) get a short hash of the original
    name appended, so ``doc_A`` and ``doc-a`` never share a Job.
    """
    name = JOB_NAME_PREFIX + _INVALID_NAME_CHARS.sub("-", job_name.lower())
    name = name.strip("-")
    if name == JOB_NAME_PREFIX + job_name and len(name) <= MAX_NAME_LENGTH:
        return name
    digest = hashlib.sha256(job_name.encode()).hexdigest()[:8]
    return f"{name[: MAX_NAME_LENGTH - len(digest) - 1].rstrip('-')}-{digest}"


class JobDispatcher(Dispatcher):
    """Submits one Kubernetes Job per logical translation job.

    Each dispatch is a forced server-side apply of a deterministically named
    Job, so calling it again for the same job name patches the existing
    object instead of creating another one. The Job never restarts its pod
    and is garbage collected ``ttl_seconds_after_finished`` after it ends.
    """

    mode = DispatchMode.TEKTON_JOB

    def __init__(
        self,
        client: ApplyClient | None,
        namespace: str,
        image: str,
        api_server_url: str = "",
        field_manager: str = "glooscap-operator",
        ttl_seconds_after_finished: int = 3600,
        config_map: str | None = "glooscap-config",
        token_secret: str | None = "glooscap-wiki-token",
    ) -> None:
        self.client = client
        self.namespace = namespace
        self.image = image
        self.api_server_url = api_server_url
        self.field_manager = field_manager
        self.ttl_seconds_after_finished = ttl_seconds_after_finished
        self.config_map = config_map
        self.token_secret = token_secret

    def build_job(self, request: DispatchRequest) -> dict[str, Any]:
        """Render the Job manifest for ``request``."""
        namespace = request.namespace or self.namespace
        name = job_resource_name(request.job_name)

        env: list[dict[str, Any]] = []
        if self.config_map:
            for env_name, key in RUNNER_CONFIG_ENV.items():
                env.append(
                    {
                        "name": env_name,
                        "valueFrom": {
                            "configMapKeyRef": {
                                "name": self.config_map,
                                "key": key,
                                "optional": True,
                            }
                        },
                    }
                )
        if self.token_secret:
            env.append(
                {
                    "name": "WIKI_TOKEN",
                    "valueFrom": {
                        "secretKeyRef": {
                            "name": self.token_secret,
                            "key": "token",
                            "optional": True,
                        }
                    },
                }
            )

        labels = {
            "app.kubernetes.io/managed-by": self.field_manager,
            JOB_LABEL: _label_value(request.job_name),
        }

        return {
            "apiVersion": "batch/v1",
            "kind": "Job",
            "metadata": {"name": name, "namespace": namespace, "labels": labels},
            "spec": {
                "backoffLimit": 0,
                "ttlSecondsAfterFinished": self.ttl_seconds_after_finished,
                "template": {
                    "metadata": {"labels": labels},
                    "spec": {
                        "restartPolicy": "Never",
                        "containers": [
                            {
                                "name": CONTAINER_NAME,
                                "image": self.image,
                                "command": ["python", "-m", "glooscap.runner"],
                                "args": [
                                    "--job-id", request.job_name,
                                    "--page-id", request.page_id,
                                    "--target", request.source_target,
                                    "--language", request.language_tag,
                                    "--vllm-url", self.api_server_url,
                                ],
                                "env": env,
                            }
                        ],
                    },
                },
            },
        }

    async def dispatch(self, request: DispatchRequest) -> None:
        """Create or patch the Job for ``request``.

        Raises:
            ConfigurationError: If no Kubernetes client is configured
        """
        if self.client is None:
            raise ConfigurationError("job dispatcher: client is nil")

        manifest = self.build_job(request)
        metadata = manifest["metadata"]
        try:
            await self.client.apply(
                manifest, field_manager=self.field_manager, force=True
            )
        except Exception:
            DISPATCH_TOTAL.labels(mode=self.mode.value, status="error").inc()
            raise

        DISPATCH_TOTAL.labels(mode=self.mode.value, status="success").inc()
        logger.info(
            "translation_job_applied",
            job=request.job_name,
            resource=metadata["name"],
            namespace=metadata["namespace"],
            page_id=request.page_id,
        )


def _label_value(value: str) -> str:
    # Label values: 63 chars max, alphanumeric at both ends
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "-", value)[:MAX_NAME_LENGTH]
    return cleaned.strip("-._")
