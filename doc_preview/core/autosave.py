"""
Wiring between the document registry and the session store.
"""
import logging
from typing import Callable, List, Optional

from doc_preview.core.registry import DocumentRegistry, RegistryChange, RegistryEvent
from doc_preview.models.document import DocumentRecord
from doc_preview.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class SessionAutosaver:
    """
    Saves the registry to the session store after every change.

    Restores do not trigger a save of what was just loaded.
    """

    def __init__(self, registry: DocumentRegistry, store: SessionStore):
        self.registry = registry
        self.store = store
        self._unsubscribe: Optional[Callable[[], None]] = None

    def start(self) -> 'SessionAutosaver':
        """Begin listening for registry changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.registry.subscribe(self._on_change)
        return self

    def stop(self) -> None:
        """Stop listening for registry changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def restore(self) -> Optional[List[DocumentRecord]]:
        """
        Load the saved session into the registry.

        Returns:
            The restored records, or None on first run (no usable session),
            in which case the registry is left untouched
        """
        records = self.store.load()
        if records is None:
            logger.info("No saved session found")
            return None
        return self.registry.restore(records)

    @property
    def last_save_failed(self) -> bool:
        return self.store.last_error is not None

    def _on_change(self, change: RegistryChange) -> None:
        if change.event is RegistryEvent.RESTORED:
            return
        self.store.save(self.registry.records())
