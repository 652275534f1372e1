# region Docstring
"""
sunlitsparrow.export

JSON export of clipboard history records.

Overview:
- `dumps_records` renders records in the export format: camelCase keys, empty
    pin/application/contents omitted, text payloads verbatim and every other
    payload base64-encoded.
- `JSONExporter` writes the same document to a file.
"""
# endregion
# region Imports
from pathlib import Path
from typing import Sequence, Union

from pydantic import TypeAdapter

from sunlitsparrow.history.models import HistoryRecord

# endregion
# region Exceptions


class ExportError(Exception):
    """Raised when an export file cannot be written."""

    pass


# endregion
# region Functions
_records_adapter = TypeAdapter(list[HistoryRecord])


def dumps_records(records: Sequence[HistoryRecord], indent: int = 2) -> str:
    """Serialize records to a JSON array string."""
    return _records_adapter.dump_json(list(records), indent=indent).decode("utf-8")


# endregion
# region JSONExporter
class JSONExporter:
    """
    Writes history records to a JSON file.

    Attributes:
        output_file (Path): Destination file; overwritten if it exists.
    """

    def __init__(self, output_file: Union[str, Path]) -> None:
        self.output_file = Path(output_file)

    def export(self, records: Sequence[HistoryRecord]) -> Path:
        """
        Write `records` to the output file.

        Returns:
            Path: The file written.

        Raises:
            ExportError: If the file cannot be written.
        """
        try:
            self.output_file.write_text(dumps_records(records) + "\n", encoding="utf-8")
        except OSError as e:
            raise ExportError(f"error creating output file {self.output_file}: {e}") from e
        return self.output_file


# endregion

__all__ = ["ExportError", "JSONExporter", "dumps_records"]
