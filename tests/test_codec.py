"""
Tests for the codec and file type classification.
"""
import base64
import os

import pytest

from doc_preview.models.document import ContentEncoding, DocumentKind
from doc_preview.models.errors import CorruptPayload
from doc_preview.utils.codec import decode, encode
from doc_preview.utils.file_types import classify, is_text_like

PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


@pytest.mark.parametrize("raw", [b"", b"\x00\x01\x02\xff", os.urandom(4096), bytes(range(256))])
def test_binary_round_trip(raw):
    """Binary content survives encode/decode byte for byte."""
    payload = encode(raw, "application/pdf", "file.pdf")
    assert payload.encoding is ContentEncoding.BASE64

    blob = decode(payload.content, "application/pdf", payload.encoding)
    assert blob.data == raw
    assert blob.mime_type == "application/pdf"


def test_text_is_stored_verbatim():
    """Text files are stored as-is, without re-encoding artifacts."""
    text = "# Título\r\n\n<tag attr=\"1\">ção ✓</tag>\n"
    payload = encode(text.encode("utf-8"), "", "notes.txt")

    assert payload.encoding is ContentEncoding.TEXT
    assert payload.content == text
    assert decode(payload.content, "text/plain", payload.encoding).data == text.encode("utf-8")


def test_text_policy_uses_mime_type():
    """A text media type is enough to store a file as text."""
    payload = encode(b"a,b\n1,2\n", "text/csv", "table")
    assert payload.encoding is ContentEncoding.TEXT
    assert payload.content == "a,b\n1,2\n"


def test_decode_accepts_data_url():
    """Base64 stored as a browser data URL is still decoded."""
    data_url = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.7").decode("ascii")
    assert decode(data_url, "application/pdf", ContentEncoding.BASE64).data == b"%PDF-1.7"


@pytest.mark.parametrize("content", ["not base64 at all!", "QUJD*", "ção"])
def test_decode_rejects_malformed_base64(content):
    with pytest.raises(CorruptPayload):
        decode(content, "application/pdf", ContentEncoding.BASE64)


@pytest.mark.parametrize("name,mime,expected", [
    ("invoice.pdf", "application/pdf", DocumentKind.PDF),
    ("scan", "application/pdf", DocumentKind.PDF),
    ("README.MD", "", DocumentKind.MARKDOWN),
    ("notes", "text/markdown", DocumentKind.MARKDOWN),
    ("deck.pptx", PPTX_MIME, DocumentKind.PRESENTATION),
    ("deck.pptx", "", DocumentKind.PRESENTATION),
    ("manifest.xml", "application/xml", DocumentKind.XML),
    ("feed", "application/atom+xml", DocumentKind.XML),
    ("log.txt", "", DocumentKind.TEXT),
    ("page.html", "text/html", DocumentKind.TEXT),
    ("photo.png", "image/png", DocumentKind.UNKNOWN),
    ("blob", "application/octet-stream", DocumentKind.UNKNOWN),
])
def test_classify(name, mime, expected):
    assert classify(name, mime) is expected


def test_presentation_mime_is_not_text_like():
    """The OOXML presentation type must be stored as binary."""
    assert not is_text_like("deck.pptx", PPTX_MIME)
    assert is_text_like("manifest.XML", "")
