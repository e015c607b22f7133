"""
In-memory registry of ingested documents.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from doc_preview.config.settings import DEFAULT_MIME_TYPE
from doc_preview.models.document import (
    DocumentRecord,
    IncomingFile,
    SummarizationState
)
from doc_preview.models.errors import CorruptPayload
from doc_preview.services.resource_service import ResourceService
from doc_preview.utils import codec
from doc_preview.utils.file_types import classify

logger = logging.getLogger(__name__)


class RegistryEvent(str, Enum):
    """Kinds of change the registry reports to its listeners."""
    INGESTED = "ingested"
    REMOVED = "removed"
    CLEARED = "cleared"
    UPDATED = "updated"
    RESTORED = "restored"


@dataclass(frozen=True)
class RegistryChange:
    """A single change notification."""
    event: RegistryEvent
    document_ids: Tuple[str, ...]


Listener = Callable[[RegistryChange], None]


class DocumentRegistry:
    """
    Ordered collection of document records and owner of their resource handles.

    All mutations go through the methods below and are announced to
    subscribers. Mutations are expected to run on a single event loop.
    """

    def __init__(self, resources: Optional[ResourceService] = None):
        """
        Initialize an empty registry.

        Args:
            resources: Service issuing resource handles; a private one is
                created when omitted
        """
        self.resources = resources or ResourceService()
        self._records: List[DocumentRecord] = []
        self._index: Dict[str, DocumentRecord] = {}
        self._listeners: List[Listener] = []

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, document_id: str) -> bool:
        return document_id in self._index

    def records(self) -> List[DocumentRecord]:
        """Return the records in display order."""
        return list(self._records)

    def get(self, document_id: str) -> Optional[DocumentRecord]:
        return self._index.get(document_id)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            A callable that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def ingest(self, files: Sequence[IncomingFile]) -> List[DocumentRecord]:
        """
        Ingest a batch of files.

        Files are read and encoded concurrently; the successful ones are
        appended after the existing records, in input order, in a single
        step. A file that cannot be read is skipped and logged.

        Args:
            files: Files to ingest

        Returns:
            The newly created records, in input order
        """
        results = await asyncio.gather(
            *(self._prepare(file) for file in files),
            return_exceptions=True
        )

        new_records = []
        for file, result in zip(files, results):
            if isinstance(result, BaseException):
                logger.warning("Skipping %s: %s", file.name, result)
                continue
            result.id = self._new_id()
            self._append(result)
            new_records.append(result)

        if new_records:
            logger.info("Ingested %d document(s)", len(new_records))
            self._notify(RegistryEvent.INGESTED, [record.id for record in new_records])
        return new_records

    async def _prepare(self, file: IncomingFile) -> DocumentRecord:
        raw_bytes = await asyncio.to_thread(file.read)
        mime_type = file.mime_type or DEFAULT_MIME_TYPE
        payload = codec.encode(raw_bytes, mime_type, file.name)
        handle = self.resources.create(codec.Blob(raw_bytes, mime_type))
        return DocumentRecord(
            id="",
            name=file.name,
            mime_type=mime_type,
            size_bytes=file.size_bytes or len(raw_bytes),
            kind=classify(file.name, mime_type),
            content_encoding=payload.encoding,
            encoded_content=payload.content,
            resource_handle=handle
        )

    def remove(self, document_id: str) -> bool:
        """
        Remove a record and release its resource handle.

        Returns:
            bool: True if a record was removed, False if the id was unknown
        """
        record = self._index.pop(document_id, None)
        if record is None:
            return False

        self._records.remove(record)
        self._release(record)
        self._notify(RegistryEvent.REMOVED, [document_id])
        return True

    def clear(self) -> None:
        """Remove every record and release all resource handles."""
        removed = [record.id for record in self._records]
        for record in self._records:
            self._release(record)
        self._records = []
        self._index = {}
        self._notify(RegistryEvent.CLEARED, removed)

    def rehydrate(self, records: Iterable[DocumentRecord]) -> List[DocumentRecord]:
        """
        Recreate resource handles for records loaded from a saved session.

        Records without content, or whose content cannot be decoded, are
        passed through without a handle.
        """
        rehydrated = []
        for record in records:
            if record.resource_handle is None and record.encoded_content is not None:
                try:
                    blob = codec.decode(record.encoded_content, record.mime_type, record.content_encoding)
                    record.resource_handle = self.resources.create(blob)
                except CorruptPayload as e:
                    logger.warning("Cannot restore preview for %s: %s", record.name, e)
            rehydrated.append(record)
        return rehydrated

    def restore(self, records: Iterable[DocumentRecord]) -> List[DocumentRecord]:
        """
        Replace the collection with records from a saved session.

        Interrupted summaries are reset to idle and duplicate ids are
        dropped. Listeners receive a RESTORED change.
        """
        for record in self._records:
            self._release(record)
        self._records = []
        self._index = {}

        for record in self.rehydrate(records):
            if record.id in self._index:
                logger.warning("Dropping duplicate session record %s (%s)", record.id, record.name)
                self._release(record)
                continue
            if record.summarization_state is SummarizationState.IN_FLIGHT or (
                record.summarization_state is SummarizationState.DONE and not record.summary
            ):
                record.summarization_state = SummarizationState.IDLE
                record.summary = None
            self._append(record)

        logger.info("Restored %d document(s) from saved session", len(self._records))
        self._notify(RegistryEvent.RESTORED, [record.id for record in self._records])
        return self.records()

    def update_summarization(
        self,
        document_id: str,
        state: SummarizationState,
        summary: Optional[str]
    ) -> bool:
        """
        Apply a summarization lifecycle transition to a record.

        Returns:
            bool: False if the record no longer exists
        """
        record = self._index.get(document_id)
        if record is None:
            return False

        record.summarization_state = state
        record.summary = summary
        self._notify(RegistryEvent.UPDATED, [document_id])
        return True

    def _new_id(self) -> str:
        while True:
            document_id = str(uuid.uuid4())
            if document_id not in self._index:
                return document_id

    def _append(self, record: DocumentRecord) -> None:
        self._records.append(record)
        self._index[record.id] = record

    def _release(self, record: DocumentRecord) -> None:
        if record.resource_handle is not None:
            self.resources.release(record.resource_handle)
            record.resource_handle = None

    def _notify(self, event: RegistryEvent, document_ids: Iterable[str]) -> None:
        change = RegistryChange(event, tuple(document_ids))
        for listener in list(self._listeners):
            listener(change)
