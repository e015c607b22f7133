"""
Selection of the rendering strategy for a document card.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from doc_preview.models.document import (
    ContentEncoding,
    DocumentKind,
    DocumentRecord,
    ResourceHandle,
    SummarizationState
)
from doc_preview.utils import codec
from doc_preview.models.errors import CorruptPayload

NO_SUMMARY_MESSAGE = "No summary available yet. Use the AI button to generate one."
PENDING_SUMMARY_MESSAGE = "Analyzing document..."
PRESENTATION_MESSAGE = (
    "Presentations can be managed and summarized, but slides are not rendered inline. "
    "Download the file or convert it to PDF to view it."
)
UNSUPPORTED_MESSAGE = "Preview not available for this format."
MISSING_CONTENT_MESSAGE = "Preview not available: the document content could not be restored."


class ViewMode(str, Enum):
    PREVIEW = "preview"
    SUMMARY = "summary"


class RenderStrategy(str, Enum):
    SUMMARY = "summary"
    PDF_VIEWER = "pdf_viewer"
    MARKDOWN = "markdown"
    TEXT_BLOCK = "text_block"
    PRESENTATION_PLACEHOLDER = "presentation_placeholder"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class RenderPlan:
    """What to render for a document and the inputs the renderer needs."""
    strategy: RenderStrategy
    document_id: str
    text: Optional[str] = None
    resource: Optional[ResourceHandle] = None
    state: Optional[SummarizationState] = None
    pending: bool = False
    message: Optional[str] = None


def _decoded_text(record: DocumentRecord) -> Optional[str]:
    if record.encoded_content is None:
        return None
    if record.content_encoding is ContentEncoding.TEXT:
        return record.encoded_content
    try:
        blob = codec.decode(record.encoded_content, record.mime_type, record.content_encoding)
    except CorruptPayload:
        return None
    return blob.data.decode("utf-8", errors="replace")


def _unsupported(record: DocumentRecord, message: str = UNSUPPORTED_MESSAGE) -> RenderPlan:
    return RenderPlan(RenderStrategy.UNSUPPORTED, record.id, message=message)


def dispatch(record: DocumentRecord, view_mode: ViewMode) -> RenderPlan:
    """
    Map a document and view mode to exactly one rendering strategy.

    Summary mode wins over the document type. Types whose renderer input
    is missing fall back to the unsupported placeholder.
    """
    if view_mode is ViewMode.SUMMARY:
        state = record.summarization_state
        if state is SummarizationState.IN_FLIGHT:
            return RenderPlan(
                RenderStrategy.SUMMARY, record.id,
                state=state, pending=True, message=PENDING_SUMMARY_MESSAGE
            )
        return RenderPlan(
            RenderStrategy.SUMMARY, record.id,
            text=record.summary, state=state,
            message=None if record.summary else NO_SUMMARY_MESSAGE
        )

    kind = record.kind
    if kind is DocumentKind.PDF:
        if record.resource_handle is None:
            return _unsupported(record, MISSING_CONTENT_MESSAGE)
        return RenderPlan(RenderStrategy.PDF_VIEWER, record.id, resource=record.resource_handle)

    if kind in (DocumentKind.MARKDOWN, DocumentKind.XML, DocumentKind.TEXT):
        text = _decoded_text(record)
        if text is None:
            return _unsupported(record, MISSING_CONTENT_MESSAGE)
        strategy = RenderStrategy.MARKDOWN if kind is DocumentKind.MARKDOWN else RenderStrategy.TEXT_BLOCK
        return RenderPlan(strategy, record.id, text=text)

    if kind is DocumentKind.PRESENTATION:
        return RenderPlan(
            RenderStrategy.PRESENTATION_PLACEHOLDER, record.id,
            resource=record.resource_handle, message=PRESENTATION_MESSAGE
        )

    return _unsupported(record)
