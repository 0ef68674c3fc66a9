"""Tests for tabby.content.meta: change detection against the stored document."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import pytest

from tabby._errors import ContentError, MetaDocumentError
from tabby.content import meta
from tests.conftest import FIXED_NOW, SHA_DATA, SHA_EMPTY, SHA_HTML, make_item

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write(path: Path, document: dict[str, Any]) -> None:
    path.write_text(json.dumps(document), encoding="utf-8")


@pytest.fixture
def doc_path(tmp_path: Path) -> Path:
    return tmp_path / "meta.json"


# ---------------------------------------------------------------------------
# Digests and timestamps
# ---------------------------------------------------------------------------


class TestDigest:
    """Digests match git blob hashes."""

    def test_empty(self) -> None:
        assert meta.digest("") == SHA_EMPTY

    def test_html(self) -> None:
        assert meta.digest("<html/>") == SHA_HTML

    def test_text(self) -> None:
        assert meta.digest('{"some":"data"}') == SHA_DATA

    def test_lowercase_hex(self) -> None:
        assert re.fullmatch(r"[0-9a-f]{40}", meta.digest("Grüße"))


class TestTimestamp:
    def test_iso_with_offset(self) -> None:
        assert re.fullmatch(
            r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}", meta.timestamp()
        )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_missing_file_is_empty_and_not_read(
        self, doc_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail(self: Path) -> bytes:
            raise AssertionError("read_bytes must not be called")

        monkeypatch.setattr(Path, "read_bytes", fail)
        assert meta.load(doc_path) == {}

    def test_reads_document(self, doc_path: Path) -> None:
        _write(doc_path, {"a": {"content": "x"}})
        assert meta.load(doc_path) == {"a": {"content": "x"}}

    def test_read_error_propagates_unchanged(
        self, doc_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write(doc_path, {})
        error = PermissionError("denied")

        def fail(self: Path) -> bytes:
            raise error

        monkeypatch.setattr(Path, "read_bytes", fail)
        with pytest.raises(PermissionError) as info:
            meta.update(doc_path, [make_item("x")])
        assert info.value is error

    def test_invalid_json(self, doc_path: Path) -> None:
        doc_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(MetaDocumentError):
            meta.load(doc_path)

    def test_non_object_document(self, doc_path: Path) -> None:
        doc_path.write_text("[]", encoding="utf-8")
        with pytest.raises(MetaDocumentError, match="must be a JSON object"):
            meta.load(doc_path)

    def test_non_object_entry(self, doc_path: Path) -> None:
        _write(doc_path, {"x": "bogus"})
        with pytest.raises(MetaDocumentError, match="entry 'x' must be a JSON object"):
            meta.update(doc_path, [make_item("x")])


# ---------------------------------------------------------------------------
# Diffing
# ---------------------------------------------------------------------------


class TestUpdate:
    """update(): created / updated / deleted classification."""

    def _update(self, doc_path: Path, stored: dict[str, Any] | None, *items: Any) -> Any:
        if stored is not None:
            _write(doc_path, stored)
        return meta.update(doc_path, list(items), now=lambda: FIXED_NOW)

    def test_no_document_no_items_is_empty(self, doc_path: Path) -> None:
        result = self._update(doc_path, None)
        assert result.meta == {}
        assert (result.created, result.updated, result.deleted) == ([], [], [])

    def test_new_file_timestamps(self, doc_path: Path) -> None:
        item = make_item("x")
        record = self._update(doc_path, None, item).meta["x"]
        assert record["created"] == FIXED_NOW
        assert record["modified"] == FIXED_NOW
        assert record["rendered"] == FIXED_NOW

    def test_new_file_empty_digests(self, doc_path: Path) -> None:
        record = self._update(doc_path, None, make_item("x")).meta["x"]
        assert record["content"] == SHA_EMPTY
        assert record["html"] == SHA_EMPTY

    def test_new_file_is_created_not_updated(self, doc_path: Path) -> None:
        item = make_item("p", content="data")
        result = self._update(doc_path, {"old": {"content": SHA_EMPTY, "html": SHA_EMPTY}}, item)
        assert result.created == [item]
        assert result.updated == []

    def test_adds_new_entry_next_to_existing(self, doc_path: Path) -> None:
        result = self._update(
            doc_path,
            {"existing/item": {"content": SHA_EMPTY, "html": SHA_EMPTY}},
            make_item("existing/item"),
            make_item("new/item"),
        )
        assert list(result.meta) == ["existing/item", "new/item"]

    def test_keeps_created_updates_modified_and_rendered(self, doc_path: Path) -> None:
        stored = {"x": {"created": "created", "modified": "modified", "rendered": "rendered"}}
        record = self._update(doc_path, stored, make_item("x")).meta["x"]
        assert record["created"] == "created"
        assert record["modified"] == FIXED_NOW
        assert record["rendered"] == FIXED_NOW

    def test_updates_content_digest(self, doc_path: Path) -> None:
        stored = {"x": {"content": SHA_EMPTY}}
        record = self._update(doc_path, stored, make_item("x", content='{"some":"data"}')).meta["x"]
        assert record["content"] == SHA_DATA

    def test_updates_html_digest(self, doc_path: Path) -> None:
        stored = {"x": {"content": SHA_EMPTY}}
        record = self._update(doc_path, stored, make_item("x", html="<html/>")).meta["x"]
        assert record["html"] == SHA_HTML

    def test_unchanged_content_keeps_timestamps(self, doc_path: Path) -> None:
        stored = {
            "x": {
                "created": "created",
                "modified": "modified",
                "rendered": "rendered",
                "content": SHA_DATA,
                "html": SHA_EMPTY,
            }
        }
        item = make_item("x", content='{"some":"data"}')
        result = self._update(doc_path, stored, item)
        assert result.meta["x"] == stored["x"]
        assert result.created == []
        assert result.updated == []

    def test_unchanged_html_keeps_rendered(self, doc_path: Path) -> None:
        stored = {"x": {"rendered": "rendered", "content": SHA_EMPTY, "html": SHA_HTML}}
        record = self._update(doc_path, stored, make_item("x", html="<html/>")).meta["x"]
        assert record["rendered"] == "rendered"

    def test_content_change_updates_modified_and_rendered(self, doc_path: Path) -> None:
        stored = {
            "x": {"modified": "modified", "rendered": "rendered", "content": SHA_DATA, "html": SHA_EMPTY}
        }
        record = self._update(doc_path, stored, make_item("x", content="change")).meta["x"]
        assert record["modified"] == FIXED_NOW
        assert record["rendered"] == FIXED_NOW

    def test_html_change_updates_rendered_only(self, doc_path: Path) -> None:
        stored = {
            "x": {"modified": "modified", "rendered": "rendered", "content": SHA_EMPTY, "html": SHA_HTML}
        }
        record = self._update(doc_path, stored, make_item("x", html="<change/>")).meta["x"]
        assert record["modified"] == "modified"
        assert record["rendered"] == FIXED_NOW

    def test_content_change_reports_updated(self, doc_path: Path) -> None:
        item = make_item("p", content="change")
        result = self._update(doc_path, {"p": {"content": SHA_DATA, "html": SHA_EMPTY}}, item)
        assert result.updated == [item]
        assert result.created == []

    def test_html_change_reports_updated(self, doc_path: Path) -> None:
        item = make_item("p", html="<change/>")
        result = self._update(doc_path, {"p": {"content": SHA_EMPTY, "html": SHA_HTML}}, item)
        assert result.updated == [item]

    def test_unchanged_html_not_updated(self, doc_path: Path) -> None:
        item = make_item("p", html="<html/>")
        result = self._update(doc_path, {"p": {"content": SHA_EMPTY, "html": SHA_HTML}}, item)
        assert result.updated == []

    def test_both_changed_reported_once(self, doc_path: Path) -> None:
        item = make_item("p", content="change", html="<change/>")
        result = self._update(doc_path, {"p": {"content": SHA_DATA, "html": SHA_HTML}}, item)
        assert result.updated == [item]

    def test_missing_path_reported_deleted(self, doc_path: Path) -> None:
        result = self._update(doc_path, {"some/path": {"content": SHA_DATA, "html": SHA_HTML}})
        assert result.deleted == ["some/path"]
        assert "some/path" not in result.meta

    def test_stamps_item_meta_in_place(self, doc_path: Path) -> None:
        item = make_item("x", meta={"file_name": "x.md"})
        self._update(doc_path, None, item)
        assert item["meta"]["file_name"] == "x.md"
        assert item["meta"]["created"] == FIXED_NOW
        assert item["meta"]["content"] == SHA_EMPTY

    def test_item_without_path(self, doc_path: Path) -> None:
        with pytest.raises(ContentError, match="no file path"):
            self._update(doc_path, None, {"content": "x"})

    @pytest.mark.parametrize(("content", "text"), [(42, "42"), ([1, "a"], '[1, "a"]')])
    def test_non_string_content_digested_as_json(
        self, doc_path: Path, content: Any, text: str
    ) -> None:
        item = make_item("x", content=content)
        assert self._update(doc_path, None, item).meta["x"]["content"] == meta.digest(text)

    def test_undigestable_content(self, doc_path: Path) -> None:
        loop: list[Any] = []
        loop.append(loop)
        with pytest.raises(ContentError, match="Cannot digest content of x"):
            self._update(doc_path, None, make_item("x", content=loop))

    def test_changed_flag(self, doc_path: Path) -> None:
        assert self._update(doc_path, None, make_item("x")).changed is True
        assert self._update(doc_path, None).changed is False

    def test_default_clock(self, doc_path: Path) -> None:
        record = meta.update(doc_path, [make_item("x")]).meta["x"]
        assert record["created"] == record["modified"] == record["rendered"]


# ---------------------------------------------------------------------------
# Persisting
# ---------------------------------------------------------------------------


class TestPersist:
    def test_writes_formatted_json(self, doc_path: Path) -> None:
        document = {"any": {"content": "to persist"}}
        meta.persist(doc_path, document)
        assert doc_path.read_text(encoding="utf-8") == json.dumps(document, indent=2)

    def test_returns_none(self, doc_path: Path) -> None:
        assert meta.persist(doc_path, {}) is None

    def test_write_error_propagates_unchanged(self, tmp_path: Path) -> None:
        missing_dir = tmp_path / "missing" / "meta.json"
        with pytest.raises(FileNotFoundError):
            meta.persist(missing_dir, {})

    def test_non_ascii_written_as_utf8(self, doc_path: Path) -> None:
        meta.persist(doc_path, {"Grüße.md": {}})
        assert "Grüße.md" in doc_path.read_text(encoding="utf-8")


class TestRoundTrip:
    """Persist then update on unchanged items."""

    def test_second_update_is_idle(self, doc_path: Path) -> None:
        items = [make_item("a", content="A", html="<p>A</p>"), make_item("b", content="B")]
        first = meta.update(doc_path, items, now=lambda: "t1")
        meta.persist(doc_path, first.meta)

        fresh = [make_item("a", content="A", html="<p>A</p>"), make_item("b", content="B")]
        second = meta.update(doc_path, fresh, now=lambda: "t2")

        assert second.created == []
        assert second.updated == []
        assert second.deleted == []
        assert second.meta == first.meta

    def test_removed_item_reported_after_persist(self, doc_path: Path) -> None:
        first = meta.update(doc_path, [make_item("a"), make_item("b")], now=lambda: "t1")
        meta.persist(doc_path, first.meta)

        second = meta.update(doc_path, [make_item("a")], now=lambda: "t2")
        assert second.deleted == ["b"]
        assert list(second.meta) == ["a"]
