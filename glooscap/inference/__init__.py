"""Inference backend contract."""

from glooscap.inference.client import (
    InferenceClient,
    InferenceConfig,
    RemoteInferenceClient,
    check_readiness,
)
from glooscap.inference.types import (
    CheckTitleResult,
    DocumentContent,
    Primitive,
    Readiness,
    TranslateRequest,
    TranslateResponse,
)

__all__ = [
    "CheckTitleResult",
    "DocumentContent",
    "InferenceClient",
    "InferenceConfig",
    "Primitive",
    "Readiness",
    "RemoteInferenceClient",
    "TranslateRequest",
    "TranslateResponse",
    "check_readiness",
]
