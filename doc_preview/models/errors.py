"""
Exceptions raised by the doc-preview core.
"""


class DocPreviewError(Exception):
    """Base class for all doc-preview errors."""


class CorruptPayload(DocPreviewError):
    """Persisted binary content could not be decoded."""


class QuotaExceeded(DocPreviewError):
    """A session payload is larger than the configured storage quota."""

    def __init__(self, size: int, quota: int):
        super().__init__(f"Session payload of {size} bytes exceeds quota of {quota} bytes")
        self.size = size
        self.quota = quota


class RestoreParseError(DocPreviewError):
    """A saved session could not be parsed."""


class RemoteError(DocPreviewError):
    """The remote summarization call failed."""


class InvalidResourceHandle(DocPreviewError):
    """A resource handle was used after release or was never issued."""
