"""
Tests for table rendering of history records.
"""

from datetime import datetime, timezone

import pytest
from rich.console import Console

from sunlitsparrow.history import HistoryPrinter, HistoryRecord
from sunlitsparrow.history.printer import NEVER, format_time, is_never, truncate_title
from sunlitsparrow.history.timestamps import ZERO_TIME, decode_timestamp


def _render(records) -> str:
    console = Console(record=True, width=200, color_system=None)
    HistoryPrinter(records, console=console).print_items()
    return console.export_text()


class TestHelpers:
    """Tests for the formatting helpers."""

    @pytest.mark.parametrize(
        "dt",
        [ZERO_TIME, datetime(1970, 1, 1, 23, 59, tzinfo=timezone.utc), decode_timestamp(-978307200)],
    )
    def test_never(self, dt):
        """Test that the zero value and the Unix epoch day mean never."""
        assert is_never(dt)
        assert format_time(dt) == NEVER

    def test_real_time(self):
        dt = datetime(2024, 1, 5, 9, 0, tzinfo=timezone.utc)
        assert not is_never(dt)
        assert format_time(dt) == dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("short", "short"),
            ("exactly twenty chars", "exactly twenty chars"),
            ("this title is far too long", "this title is far..."),
            ("", ""),
        ],
    )
    def test_truncate_title(self, title, expected):
        assert truncate_title(title) == expected


class TestHistoryPrinter:
    """Tests for HistoryPrinter."""

    def test_empty(self):
        assert _render([]).strip() == "No items found."

    def test_headers_and_placeholders(self):
        """Test column headers and the empty pin/application placeholders."""
        output = _render([HistoryRecord(id=9, title="note")])
        for header in ["ID", "Title", "Pin", "First Copied", "Last Copied", "Count", "Application"]:
            assert header in output
        assert "<unknown>" in output
        assert NEVER in output
        row = next(line for line in output.splitlines() if "note" in line)
        assert " - " in row

    def test_row_values(self):
        record = HistoryRecord(
            id=12,
            title="https://example.com/a/very/long/path",
            pin="b",
            first_copied_at=datetime(2024, 1, 1, 9, tzinfo=timezone.utc),
            last_copied_at=datetime(2024, 1, 5, 9, tzinfo=timezone.utc),
            number_of_copies=4,
            application="com.google.Chrome",
        )
        output = _render([record])
        assert "https://example.c..." in output
        assert "com.google.Chrome" in output
        assert format_time(record.last_copied_at) in output

    def test_markup_is_not_interpreted(self):
        """Test that titles containing rich markup are printed literally."""
        assert "[bold]x[/bold]" in _render([HistoryRecord(id=1, title="[bold]x[/bold]")])
