"""
Service for persisting the document session to local storage.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

from doc_preview.config.settings import (
    SESSION_DIR,
    STORAGE_KEY,
    SESSION_SCHEMA_VERSION,
    SESSION_QUOTA_BYTES
)
from doc_preview.models.document import DocumentRecord
from doc_preview.models.errors import QuotaExceeded, RestoreParseError

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Persists document records as a single keyed JSON entry.

    The entry holds ``{"version": ..., "documents": [...]}``. Resource
    handles are never written. Writes replace the entry atomically so a
    failed save leaves the previous session untouched.
    """

    def __init__(
        self,
        session_dir: Union[str, Path] = SESSION_DIR,
        key: str = STORAGE_KEY,
        quota_bytes: int = SESSION_QUOTA_BYTES
    ):
        """
        Initialize the session store.

        Args:
            session_dir: Directory holding the session entry
            key: Name of the entry
            quota_bytes: Largest serialized payload accepted by ``save``
        """
        self.session_dir = Path(session_dir)
        self.session_dir.mkdir(parents=True, exist_ok=True)
        self.key = key
        self.quota_bytes = quota_bytes
        self.last_error: Optional[Exception] = None

    @property
    def path(self) -> Path:
        return self.session_dir / f"{self.key}.json"

    def save(self, records: Sequence[DocumentRecord]) -> bool:
        """
        Persist the given records, replacing any previous session.

        Overflow and I/O failures are logged and reported through
        ``last_error`` instead of being raised.

        Args:
            records: Records to persist, in order

        Returns:
            bool: True if the session was written
        """
        payload = json.dumps(
            {
                "version": SESSION_SCHEMA_VERSION,
                "documents": [record.to_dict() for record in records]
            },
            ensure_ascii=False
        ).encode("utf-8")

        try:
            if len(payload) > self.quota_bytes:
                raise QuotaExceeded(len(payload), self.quota_bytes)
            self._write_atomic(payload)
        except QuotaExceeded as e:
            logger.warning("Storage limit reached, session not saved: %s", e)
            self.last_error = e
            return False
        except OSError as e:
            logger.warning("Failed to write session to %s: %s", self.path, e)
            self.last_error = e
            return False

        self.last_error = None
        logger.debug("Saved %d document(s) to %s", len(records), self.path)
        return True

    def load(self) -> Optional[List[DocumentRecord]]:
        """
        Load the persisted session.

        Returns:
            The saved records (possibly empty), or None when there is no
            usable session: nothing was ever saved, or the saved data could
            not be parsed. Loaded records carry no resource handle.
        """
        if not self.path.exists():
            return None

        try:
            documents = self._parse(self.path.read_bytes())
        except (OSError, RestoreParseError) as e:
            logger.error("Failed to restore session from %s: %s", self.path, e)
            return None

        records = []
        for index, data in enumerate(documents):
            try:
                records.append(DocumentRecord.from_dict(data))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed session record #%d: %s", index, e)
        return records

    def clear(self) -> None:
        """Remove the persisted session entirely."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def _parse(self, raw: bytes) -> list:
        try:
            data = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise RestoreParseError(f"Session is not valid UTF-8: {str(e)}") from e
        except json.JSONDecodeError as e:
            raise RestoreParseError(f"Session is not valid JSON: {str(e)}") from e

        if not isinstance(data, dict) or not isinstance(data.get("documents"), list):
            raise RestoreParseError("Session has an unexpected layout")
        if data.get("version") != SESSION_SCHEMA_VERSION:
            raise RestoreParseError(
                f"Unsupported session version {data.get('version')!r}, expected {SESSION_SCHEMA_VERSION}"
            )
        return data["documents"]

    def _write_atomic(self, payload: bytes) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.session_dir, prefix=f".{self.key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(payload)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_path, self.path)
        except OSError:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise
