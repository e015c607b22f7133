"""
Service for issuing and releasing in-memory resource handles.
"""
import logging
import uuid
from typing import Dict

from doc_preview.models.document import ResourceHandle
from doc_preview.models.errors import InvalidResourceHandle
from doc_preview.utils.codec import Blob

logger = logging.getLogger(__name__)


class ResourceService:
    """
    Holds the bytes behind every live resource handle.

    Handles are only valid for the lifetime of this service and must be
    released explicitly; dropping a handle does not free its bytes.
    """

    URL_PREFIX = "blob:doc-preview/"

    def __init__(self):
        """Initialize an empty resource table."""
        self._blobs: Dict[str, bytes] = {}

    def create(self, blob: Blob) -> ResourceHandle:
        """
        Register a blob and return a handle to it.

        Args:
            blob: The bytes and media type to expose

        Returns:
            ResourceHandle: A new handle, unique within this service
        """
        url = f"{self.URL_PREFIX}{uuid.uuid4()}"
        self._blobs[url] = blob.data
        return ResourceHandle(url=url, mime_type=blob.mime_type, size=len(blob.data))

    def read(self, handle: ResourceHandle) -> bytes:
        """
        Resolve a handle to its bytes.

        Raises:
            InvalidResourceHandle: If the handle was released or never issued here
        """
        try:
            return self._blobs[handle.url]
        except KeyError:
            raise InvalidResourceHandle(f"Resource {handle.url} is not available") from None

    def is_valid(self, handle: ResourceHandle) -> bool:
        return handle.url in self._blobs

    def release(self, handle: ResourceHandle) -> bool:
        """
        Release a handle's bytes.

        Returns:
            bool: True if the handle was live, False if it was already released
        """
        if self._blobs.pop(handle.url, None) is None:
            logger.debug("Resource %s already released", handle.url)
            return False
        return True

    def __len__(self) -> int:
        return len(self._blobs)
