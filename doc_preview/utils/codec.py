"""
Conversion between raw file bytes and their persistable string form.
"""
import base64
import binascii
from dataclasses import dataclass

from doc_preview.models.document import ContentEncoding
from doc_preview.models.errors import CorruptPayload
from doc_preview.utils.file_types import is_text_like


@dataclass(frozen=True)
class EncodedPayload:
    """Persistable form of a file's bytes."""
    content: str
    encoding: ContentEncoding


@dataclass(frozen=True)
class Blob:
    """Raw bytes typed with a media type, ready to become a resource handle."""
    data: bytes
    mime_type: str


def encode(raw_bytes: bytes, mime_type: str, file_name: str) -> EncodedPayload:
    """
    Encode raw file bytes for a string-only persistence layer.

    Text-like files are stored verbatim as UTF-8 text; everything else is
    stored as base64.

    Args:
        raw_bytes: The file content
        mime_type: Declared media type
        file_name: Original file name

    Returns:
        EncodedPayload: The content and how it was encoded
    """
    if is_text_like(file_name, mime_type):
        return EncodedPayload(raw_bytes.decode("utf-8", errors="replace"), ContentEncoding.TEXT)
    return EncodedPayload(base64.b64encode(raw_bytes).decode("ascii"), ContentEncoding.BASE64)


def decode(content: str, mime_type: str, encoding: ContentEncoding) -> Blob:
    """
    Turn persisted content back into renderable bytes.

    Args:
        content: The persisted string
        mime_type: Media type the resulting blob is typed with
        encoding: How ``content`` was encoded

    Returns:
        Blob: The decoded bytes

    Raises:
        CorruptPayload: If base64 content is malformed
    """
    if encoding is ContentEncoding.TEXT:
        return Blob(content.encode("utf-8"), mime_type)

    # Browser data URLs carry a "data:<type>;base64," prefix
    payload = content.split(",", 1)[1] if content.startswith("data:") and "," in content else content
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CorruptPayload(f"Invalid base64 payload: {str(e)}") from e
    return Blob(data, mime_type)
