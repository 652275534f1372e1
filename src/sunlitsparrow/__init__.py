"""
sunlitsparrow
Read-only explorer for the Maccy clipboard history database.

Reads Maccy's SQLite store across its known schema layouts and exposes the
history as immutable records, with JSON, table, and schema output for the CLI.
"""

from .history import (  # noqa: F401
    ContentBlock,
    HistoryRecord,
    HistoryRepository,
    SchemaNotRecognizedError,
)

__version__ = "0.1.0"

__all__ = [
    "ContentBlock",
    "HistoryRecord",
    "HistoryRepository",
    "SchemaNotRecognizedError",
    "__version__",
]
