"""Tests for epictrack.db.storage module."""

import json

import pytest

from epictrack.db import (
    Document,
    Epic,
    JSONFileDatabase,
    MemoryDatabase,
    ReadFailure,
    Status,
    Story,
    WriteFailure,
)


def _sample_document() -> Document:
    return Document(
        last_item_id=3,
        epics={1: Epic("Checkout", "Payment flow", Status.IN_PROGRESS, [2, 3])},
        stories={
            2: Story("Card form", "", Status.RESOLVED),
            3: Story("Receipt", "Email receipt", Status.OPEN),
        },
    )


class TestJSONFileDatabaseRead:
    """Test JSONFileDatabase.read."""

    def test_missing_file(self, tmp_path):
        db = JSONFileDatabase(tmp_path / "missing.json")
        with pytest.raises(ReadFailure) as exc_info:
            db.read()
        assert exc_info.value.path == tmp_path / "missing.json"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text('{ "last_item_id": 0 epics: {} stories {} }')
        with pytest.raises(ReadFailure, match="Invalid JSON"):
            JSONFileDatabase(path).read()

    def test_parses_empty_document(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text('{ "last_item_id": 0, "epics": {}, "stories": {} }')
        assert JSONFileDatabase(path).read() == Document.empty()

    def test_parses_entities(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({
            "last_item_id": 2,
            "epics": {"1": {"name": "E", "description": "d", "status": "Closed", "stories": [2]}},
            "stories": {"2": {"name": "S", "description": "", "status": "InProgress"}},
        }))

        document = JSONFileDatabase(path).read()

        assert document.last_item_id == 2
        assert document.epics[1] == Epic("E", "d", Status.CLOSED, [2])
        assert document.stories[2] == Story("S", "", Status.IN_PROGRESS)

    @pytest.mark.parametrize("content", [
        '{"epics": {}, "stories": {}}',
        '{"last_item_id": -1, "epics": {}, "stories": {}}',
        '{"last_item_id": "3", "epics": {}, "stories": {}}',
        '{"last_item_id": 0, "epics": {}, "stories": {}, "extra": 1}',
        '{"last_item_id": 1, "epics": {"abc": {"name": "", "description": "", "status": "Open", "stories": []}}, "stories": {}}',
        '{"last_item_id": 1, "epics": {"1": {"name": "", "description": "", "status": "\\"Open\\"", "stories": []}}, "stories": {}}',
        '{"last_item_id": 1, "epics": {"1": {"name": "", "description": "", "status": "Open"}}, "stories": {}}',
        '{"last_item_id": 1, "epics": {}, "stories": {"1": {"name": 5, "description": "", "status": "Open"}}}',
        '[]',
    ])
    def test_schema_mismatch(self, tmp_path, content):
        path = tmp_path / "db.json"
        path.write_text(content)
        with pytest.raises(ReadFailure):
            JSONFileDatabase(path).read()

    def test_undecodable_bytes(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_bytes(b"\xff\xfe garbage")
        with pytest.raises(ReadFailure, match="Not valid UTF-8"):
            JSONFileDatabase(path).read()

    @pytest.mark.parametrize("key", ["0", "01", "007"])
    def test_rejects_non_canonical_ids(self, tmp_path, key):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({
            "last_item_id": 7,
            "epics": {},
            "stories": {key: {"name": "S", "description": "", "status": "Open"}},
        }))
        with pytest.raises(ReadFailure):
            JSONFileDatabase(path).read()

    def test_same_id_spelled_twice(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({
            "last_item_id": 1,
            "epics": {},
            "stories": {
                "1": {"name": "first", "description": "", "status": "Open"},
                "01": {"name": "second", "description": "", "status": "Open"},
            },
        }))
        with pytest.raises(ReadFailure):
            JSONFileDatabase(path).read()


class TestJSONFileDatabaseWrite:
    """Test JSONFileDatabase.write."""

    def test_round_trip(self, tmp_path):
        db = JSONFileDatabase(tmp_path / "db.json")
        document = _sample_document()

        db.write(document)

        assert db.read() == document

    def test_encoding_shape(self, tmp_path):
        path = tmp_path / "db.json"
        JSONFileDatabase(path).write(_sample_document())

        data = json.loads(path.read_text())
        assert set(data) == {"last_item_id", "epics", "stories"}
        assert data["epics"]["1"]["status"] == "InProgress"
        assert data["epics"]["1"]["stories"] == [2, 3]
        assert data["stories"]["2"] == {"name": "Card form", "description": "", "status": "Resolved"}

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "data" / "nested" / "db.json"
        JSONFileDatabase(path).write(Document.empty())
        assert path.exists()

    def test_overwrites_existing(self, tmp_path):
        db = JSONFileDatabase(tmp_path / "db.json")
        db.write(_sample_document())
        db.write(Document.empty())
        assert db.read() == Document.empty()

    def test_leaves_no_temp_files(self, tmp_path):
        JSONFileDatabase(tmp_path / "db.json").write(_sample_document())
        assert [p.name for p in tmp_path.iterdir()] == ["db.json"]

    def test_unwritable_target(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        db = JSONFileDatabase(blocker / "db.json")
        with pytest.raises(WriteFailure):
            db.write(Document.empty())

    def test_refuses_invalid_document(self, tmp_path):
        path = tmp_path / "db.json"
        document = Document(last_item_id=-5)
        with pytest.raises(WriteFailure, match="Refusing to write"):
            JSONFileDatabase(path).write(document)
        assert not path.exists()

    def test_exists(self, tmp_path):
        db = JSONFileDatabase(tmp_path / "db.json")
        assert not db.exists()
        db.write(Document.empty())
        assert db.exists()


class TestMemoryDatabase:
    """Test MemoryDatabase test double."""

    def test_starts_empty(self):
        assert MemoryDatabase().read() == Document.empty()

    def test_returns_last_written(self):
        db = MemoryDatabase()
        db.write(_sample_document())
        assert db.read() == _sample_document()

    def test_reads_are_independent_copies(self):
        db = MemoryDatabase(_sample_document())
        first = db.read()
        first.epics.clear()
        assert db.read() == _sample_document()

    def test_counts_calls(self):
        db = MemoryDatabase()
        db.read()
        db.read()
        db.write(Document.empty())
        assert db.reads == 2
        assert db.writes == 1
