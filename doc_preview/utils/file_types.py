"""
Filename and media type classification.
"""
from pathlib import Path

from doc_preview.config.settings import TEXT_EXTENSIONS
from doc_preview.models.document import DocumentKind


def _extension(file_name: str) -> str:
    return Path(file_name).suffix.lower()


def is_text_like(file_name: str, mime_type: str) -> bool:
    """
    Decide whether a file's bytes should be stored as UTF-8 text.

    Args:
        file_name: Original file name
        mime_type: Declared media type, possibly empty

    Returns:
        bool: True for text extensions or text/markdown media types
    """
    mime = (mime_type or "").lower()
    return _extension(file_name) in TEXT_EXTENSIONS or "text" in mime or "markdown" in mime


def classify(file_name: str, mime_type: str) -> DocumentKind:
    """
    Map a file name and media type to a DocumentKind.

    Presentation types are checked before XML because the OOXML
    presentation media type contains "xml".
    """
    ext = _extension(file_name)
    mime = (mime_type or "").lower()

    if "pdf" in mime or ext == ".pdf":
        return DocumentKind.PDF
    if "markdown" in mime or ext == ".md":
        return DocumentKind.MARKDOWN
    if "presentation" in mime or ext in (".pptx", ".ppt"):
        return DocumentKind.PRESENTATION
    if "xml" in mime or ext == ".xml":
        return DocumentKind.XML
    if "text" in mime or ext == ".txt":
        return DocumentKind.TEXT
    return DocumentKind.UNKNOWN
