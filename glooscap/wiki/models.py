"""Wiki page and collection models."""

import re
from datetime import datetime

from pydantic import BaseModel

# Trailing "(EN)" style marker; 2-3 uppercase ASCII letters only.
_LANGUAGE_SUFFIX = re.compile(r"^[A-Z]{2,3}$")

TEMPLATE_MARKER = "Template"


class PageSummary(BaseModel):
    """Minimal metadata for a wiki page as returned by a listing."""

    id: str
    title: str
    slug: str
    updated_at: datetime | None = None
    language: str = ""
    has_assets: bool = False
    collection: str | None = None
    template: str | None = None
    is_template: bool = False
    is_draft: bool = False


class PageContent(BaseModel):
    """Full content of a page."""

    id: str
    title: str = ""
    slug: str = ""
    markdown: str


class Collection(BaseModel):
    """A wiki collection."""

    id: str
    name: str
    description: str = ""


class CreatePageRequest(BaseModel):
    """Request to create a new page."""

    title: str
    text: str
    collection_id: str | None = None
    parent_document_id: str | None = None
    publish: bool = False


class CreatedPage(BaseModel):
    """Identifiers of a freshly created page."""

    id: str
    title: str
    slug: str


class PublishedPage(CreatedPage):
    """A page that was published, with its public URL when known."""

    url: str = ""


def extract_language_from_title(title: str) -> str:
    """Extract a language code from a page title.

    "Feature Completion Template (EN)" -> "EN". Anything that is not a
    trailing parenthetical of 2-3 uppercase letters yields "".
    """
    if "(" not in title:
        return ""
    candidate = title.rsplit("(", 1)[1].strip()
    candidate = candidate.removesuffix(")").strip()
    if _LANGUAGE_SUFFIX.match(candidate):
        return candidate
    return ""


def detect_template(title: str) -> str | None:
    """Return the template name when the title looks like a template.

    This is a title heuristic; Outline does not expose a template flag on
    listed documents.
    """
    if TEMPLATE_MARKER not in title:
        return None
    return title.split("(", 1)[0].strip()
