"""
Test configuration and fixtures for the doc-preview application.
"""
import base64
from typing import List
from unittest.mock import patch, MagicMock

import pytest
from langchain_core.messages import AIMessage

from doc_preview.core.registry import DocumentRegistry
from doc_preview.models.document import IncomingFile
from doc_preview.services.resource_service import ResourceService
from doc_preview.services.session_store import SessionStore
from doc_preview.services.summarizer_service import SummarizerService

# Smallest byte sequence that still looks like a PDF to a viewer
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"
PPTX_BYTES = b"PK\x03\x04\x14\x00\x06\x00\x08\x00\x00\x00!\x00\xff\xfe\x00\x01binary-slide-data"


@pytest.fixture
def resources():
    """Fixture to provide an empty ResourceService."""
    return ResourceService()


@pytest.fixture
def registry(resources):
    """Fixture to provide an empty DocumentRegistry."""
    return DocumentRegistry(resources)


@pytest.fixture
def session_store(tmp_path):
    """Fixture to provide a SessionStore writing to a temporary directory."""
    return SessionStore(session_dir=tmp_path / "session", key="test_session")


@pytest.fixture
def stub_summarizer():
    """Fixture to provide a remote summarizer stub returning a fixed summary."""
    summarizer = MagicMock()
    summarizer.summarize.return_value = "Short summary."
    return summarizer


@pytest.fixture
def summarizer_service():
    """Fixture to provide a SummarizerService instance."""
    # Patch the ChatLiteLLM class so no request leaves the test
    with patch('doc_preview.services.summarizer_service.ChatLiteLLM') as mock_cls:
        mock_instance = MagicMock()
        mock_instance.invoke.return_value = AIMessage(content="  Summary text\n")
        mock_cls.return_value = mock_instance
        return SummarizerService()


@pytest.fixture
def markdown_file() -> IncomingFile:
    """Fixture to provide a small Markdown document."""
    raw = "# Title\nBody".encode("utf-8")
    return IncomingFile(name="report.md", mime_type="text/markdown", size_bytes=len(raw), raw_bytes=raw)


@pytest.fixture
def pdf_file() -> IncomingFile:
    """Fixture to provide a minimal PDF document."""
    return IncomingFile(name="invoice.pdf", mime_type="application/pdf", size_bytes=len(PDF_BYTES), raw_bytes=PDF_BYTES)


@pytest.fixture
def pptx_file() -> IncomingFile:
    """Fixture to provide a presentation with non-UTF-8 bytes."""
    return IncomingFile(
        name="slide.pptx",
        mime_type="application/vnd.openxmlformats-officedocument.presentationml.presentation",
        size_bytes=len(PPTX_BYTES),
        raw_bytes=PPTX_BYTES
    )


@pytest.fixture
def sample_files(markdown_file, pdf_file, pptx_file) -> List[IncomingFile]:
    """Fixture to provide a mixed batch of documents."""
    xml = b'<?xml version="1.0"?><freight id="42"/>'
    return [
        markdown_file,
        pdf_file,
        IncomingFile(name="manifest.xml", mime_type="application/xml", size_bytes=len(xml), raw_bytes=xml),
        pptx_file,
    ]


@pytest.fixture
def pptx_base64() -> str:
    return base64.b64encode(PPTX_BYTES).decode("ascii")
