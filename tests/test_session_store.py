"""
Tests for the SessionStore class.
"""
import json
from datetime import datetime

from doc_preview.models.document import (
    ContentEncoding,
    DocumentKind,
    DocumentRecord,
    ResourceHandle,
    SummarizationState
)
from doc_preview.models.errors import QuotaExceeded
from doc_preview.services.session_store import SessionStore


def make_record(record_id: str, content: str = "hello", **kwargs) -> DocumentRecord:
    fields = dict(
        id=record_id,
        name=f"{record_id}.txt",
        mime_type="text/plain",
        size_bytes=len(content),
        kind=DocumentKind.TEXT,
        content_encoding=ContentEncoding.TEXT,
        encoded_content=content,
        created_at=datetime(2024, 5, 1, 12, 30, 15, 123456)
    )
    fields.update(kwargs)
    return DocumentRecord(**fields)


def test_load_without_session_returns_none(session_store):
    """First run is distinguishable from an empty session."""
    assert session_store.load() is None

    assert session_store.save([]) is True
    assert session_store.load() == []


def test_save_and_load(session_store):
    records = [
        make_record("a", summary="Done already.", summarization_state=SummarizationState.DONE),
        make_record("b", resource_handle=ResourceHandle("blob:doc-preview/x", "text/plain", 5)),
    ]
    assert session_store.save(records) is True

    loaded = session_store.load()
    assert loaded == records
    assert [record.id for record in loaded] == ["a", "b"]
    assert all(record.resource_handle is None for record in loaded)


def test_resource_handle_is_not_persisted(session_store):
    record = make_record("a", resource_handle=ResourceHandle("blob:doc-preview/x", "text/plain", 5))
    session_store.save([record])

    data = json.loads(session_store.path.read_text(encoding="utf-8"))
    assert data["version"] == 1
    assert "resource_handle" not in data["documents"][0]
    assert "blob:doc-preview/x" not in session_store.path.read_text(encoding="utf-8")


def test_quota_overflow_keeps_previous_session(tmp_path):
    """A save over quota leaves the last good session intact."""
    store = SessionStore(session_dir=tmp_path, key="quota", quota_bytes=2048)
    small = [make_record("a")]
    assert store.save(small) is True
    before = store.path.read_bytes()

    big = small + [make_record("b", content="x" * 4096)]
    assert store.save(big) is False
    assert isinstance(store.last_error, QuotaExceeded)

    assert store.path.read_bytes() == before
    assert store.load() == small
    assert not list(tmp_path.glob("*.tmp"))


def test_successful_save_clears_last_error(tmp_path):
    store = SessionStore(session_dir=tmp_path, key="quota", quota_bytes=2048)
    store.save([make_record("b", content="x" * 4096)])
    assert store.last_error is not None

    assert store.save([make_record("a")]) is True
    assert store.last_error is None


def test_corrupt_session_is_treated_as_no_session(session_store, caplog):
    session_store.path.write_text("{not json", encoding="utf-8")

    assert session_store.load() is None
    assert "Failed to restore session" in caplog.text


def test_unknown_version_is_treated_as_no_session(session_store):
    session_store.path.write_text(json.dumps({"version": 99, "documents": []}), encoding="utf-8")
    assert session_store.load() is None


def test_legacy_unversioned_array_is_treated_as_no_session(session_store):
    session_store.path.write_text(json.dumps([{"id": "a", "name": "a.txt"}]), encoding="utf-8")
    assert session_store.load() is None


def test_malformed_record_does_not_block_others(session_store):
    session_store.save([make_record("a"), make_record("b")])
    data = json.loads(session_store.path.read_text(encoding="utf-8"))
    data["documents"].insert(1, {"id": "broken"})
    data["documents"].append({"id": "bad-kind", **{k: v for k, v in data["documents"][0].items() if k != "id"}, "kind": "spreadsheet"})
    session_store.path.write_text(json.dumps(data), encoding="utf-8")

    loaded = session_store.load()
    assert [record.id for record in loaded] == ["a", "b"]


def test_non_string_fields_are_skipped(session_store):
    session_store.save([make_record("a"), make_record("b"), make_record("c")])
    data = json.loads(session_store.path.read_text(encoding="utf-8"))
    data["documents"][0]["encoded_content"] = 123
    data["documents"][2]["summary"] = ["not", "text"]
    session_store.path.write_text(json.dumps(data), encoding="utf-8")

    loaded = session_store.load()
    assert [record.id for record in loaded] == ["b"]


def test_invalid_utf8_session_is_treated_as_no_session(session_store, caplog):
    session_store.path.write_bytes(b'{"version": 1, "documents": [\xff\xfe]}')

    assert session_store.load() is None
    assert "not valid UTF-8" in caplog.text


def test_clear(session_store):
    session_store.save([make_record("a")])
    session_store.clear()
    assert session_store.load() is None
    session_store.clear()
