"""
Tests for JSON export.
"""

import base64
import json

import pytest

from conftest import EXPECTED_ORDER, PNG_BYTES
from sunlitsparrow.export import ExportError, JSONExporter, dumps_records
from sunlitsparrow.history import ContentBlock, HistoryRecord, HistoryRepository


@pytest.fixture
def records(primary_db) -> list[HistoryRecord]:
    return HistoryRepository(primary_db).fetch_all()


class TestDumpsRecords:
    """Tests for dumps_records."""

    def test_empty(self):
        assert json.loads(dumps_records([])) == []

    def test_indented(self):
        """Test that output is indented by two spaces."""
        text = dumps_records([HistoryRecord(id=1)])
        assert text.startswith("[\n  {\n    \"id\": 1")

    def test_store_round_trip(self, records):
        """Test the exported document for a real store."""
        data = json.loads(dumps_records(records))
        assert [item["id"] for item in data] == EXPECTED_ORDER
        by_id = {item["id"]: item for item in data}

        assert "pin" not in by_id[1]
        assert "pin" not in by_id[3]
        assert by_id[2]["pin"] == "b"
        assert "application" not in by_id[4]
        assert "contents" not in by_id[3]
        assert by_id[4]["numberOfCopies"] == 0

        assert by_id[1]["contents"] == [
            {"type": "public.utf8-plain-text", "value": "hello world"}
        ]
        png = by_id[5]["contents"][0]
        assert png["type"] == "public.png"
        assert base64.b64decode(png["value"]) == PNG_BYTES

    def test_non_ascii_text(self):
        record = HistoryRecord(
            id=1, contents=(ContentBlock(type="public.utf8-plain-text", value="naïve ☕"),)
        )
        assert json.loads(dumps_records([record]))[0]["contents"][0]["value"] == "naïve ☕"


class TestJSONExporter:
    """Tests for JSONExporter."""

    def test_writes_file(self, tmp_path, records):
        output = tmp_path / "export.json"
        written = JSONExporter(output).export(records)
        assert written == output
        text = output.read_text(encoding="utf-8")
        assert text.endswith("]\n")
        assert len(json.loads(text)) == len(records)

    def test_overwrites(self, tmp_path):
        output = tmp_path / "export.json"
        output.write_text("old")
        JSONExporter(str(output)).export([])
        assert json.loads(output.read_text()) == []

    def test_unwritable_destination(self, tmp_path):
        """Test that a bad destination is reported as ExportError."""
        with pytest.raises(ExportError):
            JSONExporter(tmp_path / "missing" / "export.json").export([])
