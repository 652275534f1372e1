"""
sunlitsparrow.history.printer

Column-aligned table output for history records, rendered with rich.
"""

# region Imports
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import HistoryRecord

# endregion
# region Helpers
TITLE_WIDTH: int = 20
NEVER: str = "<never>"
UNKNOWN_APPLICATION: str = "<unknown>"
_UNIX_EPOCH_DAY = date(1970, 1, 1)


def is_never(dt: datetime) -> bool:
    """
    True when a timestamp means "never copied".

    Maccy leaves unset dates as NULL or 0, which decode to the zero value or
    land on 1970-01-01; both are treated as never.
    """
    return dt.astimezone(timezone.utc).date() == _UNIX_EPOCH_DAY


def format_time(dt: datetime) -> str:
    """Format a timestamp in local time, or `<never>`."""
    if is_never(dt):
        return NEVER
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def truncate_title(title: str, width: int = TITLE_WIDTH) -> str:
    if len(title) > width:
        return title[: width - 3] + "..."
    return title


# endregion
# region HistoryPrinter
class HistoryPrinter:
    """Prints history records as a table."""

    def __init__(
        self, records: Sequence[HistoryRecord], console: Optional[Console] = None
    ) -> None:
        self.records = list(records)
        self.console = console or Console()

    def build_table(self) -> Table:
        table = Table(show_lines=False, header_style="bold")
        table.add_column("ID", justify="right")
        table.add_column("Title", max_width=TITLE_WIDTH, no_wrap=True)
        table.add_column("Pin")
        table.add_column("First Copied")
        table.add_column("Last Copied")
        table.add_column("Count", justify="right")
        table.add_column("Application")

        for record in self.records:
            table.add_row(
                str(record.id),
                escape(truncate_title(record.title)),
                escape(record.pin or "-"),
                format_time(record.first_copied_at),
                format_time(record.last_copied_at),
                str(record.number_of_copies),
                escape(record.application or UNKNOWN_APPLICATION),
            )
        return table

    def print_items(self) -> None:
        if not self.records:
            self.console.print("No items found.")
            return
        self.console.print(self.build_table())


# endregion

__all__ = ["HistoryPrinter", "format_time", "is_never", "truncate_title"]
