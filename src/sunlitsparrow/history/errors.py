"""
sunlitsparrow.history.errors

Exceptions raised by the history repository.

Only call-scoped failures cross the repository boundary. Per-row decode errors
and per-record content errors are logged and absorbed by the repository.
"""


class HistoryError(Exception):
    """Base exception for clipboard history retrieval errors."""

    pass


class SchemaNotRecognizedError(HistoryError):
    """Raised when no known table/column layout could be read from the store."""

    pass


class ContentsUnavailableError(HistoryError):
    """Raised when the contents of a history item could not be read."""

    def __init__(self, item_id: int, message: str) -> None:
        super().__init__(f"contents for item {item_id}: {message}")
        self.item_id = item_id


class StoreConnectionError(HistoryError):
    """Raised when the store handle itself is unusable (closed, not a database)."""

    pass


__all__ = [
    "HistoryError",
    "SchemaNotRecognizedError",
    "ContentsUnavailableError",
    "StoreConnectionError",
]
