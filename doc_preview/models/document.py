"""
Document model for ingested files and their session metadata.
"""
import mimetypes
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from doc_preview.config.settings import DEFAULT_MIME_TYPE


class DocumentKind(str, Enum):
    """Closed classification of a document, computed once at ingestion."""
    PDF = "pdf"
    MARKDOWN = "markdown"
    XML = "xml"
    TEXT = "text"
    PRESENTATION = "presentation"
    UNKNOWN = "unknown"


class ContentEncoding(str, Enum):
    """How ``DocumentRecord.encoded_content`` is stored."""
    TEXT = "text"
    BASE64 = "base64"


class SummarizationState(str, Enum):
    """Per-document summarization lifecycle state."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ResourceHandle:
    """Process-local reference to renderable bytes, issued by a ResourceService."""
    url: str
    mime_type: str
    size: int


@dataclass
class IncomingFile:
    """A file handed to the registry for ingestion."""
    name: str
    mime_type: str
    size_bytes: int
    raw_bytes: Optional[bytes] = None
    path: Optional[Path] = None

    def read(self) -> bytes:
        """Return the file's raw bytes, reading from disk when needed."""
        if self.raw_bytes is not None:
            return self.raw_bytes
        if self.path is None:
            raise ValueError(f"File {self.name} has neither raw bytes nor a path")
        return Path(self.path).read_bytes()

    @classmethod
    def from_bytes(cls, name: str, raw_bytes: bytes, mime_type: Optional[str] = None) -> 'IncomingFile':
        """Create an incoming file from in-memory bytes, guessing the type from the name."""
        return cls(
            name=name,
            mime_type=mime_type or mimetypes.guess_type(name)[0] or "",
            size_bytes=len(raw_bytes),
            raw_bytes=raw_bytes
        )

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'IncomingFile':
        """Create an incoming file backed by a file on disk."""
        path = Path(path)
        return cls(
            name=path.name,
            mime_type=mimetypes.guess_type(path.name)[0] or "",
            size_bytes=path.stat().st_size,
            path=path
        )


@dataclass
class DocumentRecord:
    """One ingested file. Everything except ``resource_handle`` is persisted."""
    id: str
    name: str
    mime_type: str
    size_bytes: int
    kind: DocumentKind
    content_encoding: ContentEncoding
    encoded_content: Optional[str] = None
    summary: Optional[str] = None
    summarization_state: SummarizationState = SummarizationState.IDLE
    created_at: datetime = field(default_factory=datetime.now)
    resource_handle: Optional[ResourceHandle] = field(default=None, compare=False, repr=False)

    @property
    def has_preview(self) -> bool:
        """Whether the record currently holds a usable resource handle."""
        return self.resource_handle is not None

    @property
    def text_content(self) -> Optional[str]:
        """The decoded text of text-like documents, None for binary ones."""
        if self.content_encoding is ContentEncoding.TEXT:
            return self.encoded_content
        return None

    def to_dict(self) -> dict:
        """Convert the record to its persisted dictionary format."""
        return {
            "id": self.id,
            "name": self.name,
            "mime_type": self.mime_type,
            "size_bytes": self.size_bytes,
            "kind": self.kind.value,
            "content_encoding": self.content_encoding.value,
            "encoded_content": self.encoded_content,
            "summary": self.summary,
            "summarization_state": self.summarization_state.value,
            "created_at": self.created_at.isoformat()
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DocumentRecord':
        """
        Create a record from its persisted dictionary format.

        Raises:
            KeyError: If a required field is missing
            TypeError: If a text field holds a non-string value
            ValueError: If an enum or timestamp field holds an unknown value
        """
        for key in ("name", "encoded_content", "summary"):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise TypeError(f"Field {key!r} must be a string, got {type(data[key]).__name__}")

        return cls(
            id=str(data["id"]),
            name=data["name"],
            mime_type=data.get("mime_type") or DEFAULT_MIME_TYPE,
            size_bytes=int(data["size_bytes"]),
            kind=DocumentKind(data["kind"]),
            content_encoding=ContentEncoding(data["content_encoding"]),
            encoded_content=data.get("encoded_content"),
            summary=data.get("summary"),
            summarization_state=SummarizationState(data.get("summarization_state", "idle")),
            created_at=datetime.fromisoformat(data["created_at"])
        )
