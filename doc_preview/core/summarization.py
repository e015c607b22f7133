"""
Per-document summarization lifecycle.

Each document moves through ``idle -> in_flight -> done | failed`` and can
be re-summarized from ``done`` or ``failed``. The remote call runs in a
worker thread; every state change is applied on the event loop through
``DocumentRegistry.update_summarization``.
"""
import asyncio
import logging
from typing import Dict, Optional, Protocol

from doc_preview.config.settings import SUMMARY_MAX_CHARS
from doc_preview.core.registry import DocumentRegistry
from doc_preview.models.document import DocumentKind, DocumentRecord, SummarizationState

logger = logging.getLogger(__name__)

SUMMARY_EMPTY_FALLBACK = "Could not generate a summary for this document."
SUMMARY_ERROR_FALLBACK = "An error occurred while summarizing this document with the AI service."


class Summarizer(Protocol):
    def summarize(self, file_name: str, content: str) -> str:
        ...


def select_summary_input(record: DocumentRecord, max_chars: int = SUMMARY_MAX_CHARS) -> str:
    """
    Choose the text sent to the summarizer for a document.

    PDFs are described by name only since their bytes are not usable as
    prompt text. Other documents send their decoded text, or their name
    when they have none. The result is cut to ``max_chars``.
    """
    if record.kind is DocumentKind.PDF:
        text = f"PDF document: {record.name}"
    else:
        text = record.text_content or record.name
    return text[:max_chars]


class SummarizationLifecycle:
    """Drives summarization requests for documents held in a registry."""

    def __init__(
        self,
        registry: DocumentRegistry,
        summarizer: Summarizer,
        max_chars: int = SUMMARY_MAX_CHARS
    ):
        self.registry = registry
        self.summarizer = summarizer
        self.max_chars = max_chars
        self._tasks: Dict[str, asyncio.Task] = {}

    def request(self, document_id: str) -> Optional[asyncio.Task]:
        """
        Start summarizing a document.

        The record moves to ``in_flight`` before this method returns. Must
        be called from a running event loop.

        Args:
            document_id: Id of the document to summarize

        Returns:
            The task resolving to the final state, or None if the document
            is unknown or already being summarized
        """
        record = self.registry.get(document_id)
        if record is None:
            logger.debug("Ignoring summary request for unknown document %s", document_id)
            return None
        if record.summarization_state is SummarizationState.IN_FLIGHT:
            logger.debug("Summary already in flight for %s", record.name)
            return None

        content = select_summary_input(record, self.max_chars)
        self.registry.update_summarization(document_id, SummarizationState.IN_FLIGHT, None)

        task = asyncio.get_running_loop().create_task(self._run(document_id, record.name, content))
        self._tasks[document_id] = task
        task.add_done_callback(lambda done: self._forget(document_id, done))
        return task

    def _forget(self, document_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(document_id) is task:
            del self._tasks[document_id]

    async def summarize(self, document_id: str) -> Optional[SummarizationState]:
        """
        Request a summary and wait for it.

        Joins the pending task when one is already running.

        Returns:
            The resulting state, or None if the document does not exist
        """
        task = self.request(document_id) or self._tasks.get(document_id)
        if task is not None:
            return await task
        record = self.registry.get(document_id)
        return record.summarization_state if record is not None else None

    def is_pending(self, document_id: str) -> bool:
        return document_id in self._tasks

    async def _run(self, document_id: str, file_name: str, content: str) -> SummarizationState:
        try:
            summary = await asyncio.to_thread(self.summarizer.summarize, file_name, content)
        except Exception as e:
            logger.warning("Summarization failed for %s: %s", file_name, e)
            state, summary = SummarizationState.FAILED, SUMMARY_ERROR_FALLBACK
        else:
            if summary and summary.strip():
                state, summary = SummarizationState.DONE, summary.strip()
            else:
                logger.warning("Summarizer returned no text for %s", file_name)
                state, summary = SummarizationState.FAILED, SUMMARY_EMPTY_FALLBACK

        if not self.registry.update_summarization(document_id, state, summary):
            logger.info("Discarding summary for removed document %s", file_name)
        return state
