"""Inference request and response models."""

from enum import Enum

from pydantic import BaseModel, Field


class Primitive(str, Enum):
    """What kind of translation the backend should perform."""

    TITLE = "title"
    DOC_TRANSLATE = "doc-translate"


class Readiness(str, Enum):
    """Outcome of a readiness probe."""

    READY = "ready"
    NOT_READY = "not_ready"
    UNIMPLEMENTED = "unimplemented"
    UNAVAILABLE = "unavailable"


class CheckTitleResult(BaseModel):
    """Backend answer to a title pre-check."""

    ready: bool
    message: str = ""
    estimated_time_seconds: int = 0


class DocumentContent(BaseModel):
    """Full document payload for doc-translate."""

    title: str
    markdown: str
    slug: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)


class TranslateRequest(BaseModel):
    """A translation request."""

    job_id: str
    primitive: Primitive = Primitive.DOC_TRANSLATE
    title: str = ""
    document: DocumentContent | None = None
    source_language: str = "EN"
    target_language: str
    source_wiki_uri: str = ""
    page_id: str = ""
    page_slug: str = ""


class TranslateResponse(BaseModel):
    """Backend answer to a translation request."""

    job_id: str
    success: bool
    translated_title: str = ""
    translated_markdown: str = ""
    error_message: str = ""
    tokens_used: int = 0
    inference_time_seconds: float = 0.0
