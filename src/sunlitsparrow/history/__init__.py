"""
sunlitsparrow.history
Clipboard history models, retrieval, and table rendering.
Overview:
- Provides the schema-tolerant HistoryRepository used to read Maccy stores.
- Provides the immutable HistoryRecord/ContentBlock models and the timestamp
    codec for Core Data reference-date values.
Contents:
- Models: HistoryRecord, ContentBlock, NullableRecord
- Retrieval: HistoryRepository, TierResult
- Rendering: HistoryPrinter
- Errors: HistoryError, SchemaNotRecognizedError, ContentsUnavailableError,
    StoreConnectionError
"""

from .errors import (  # noqa: F401
    ContentsUnavailableError,
    HistoryError,
    SchemaNotRecognizedError,
    StoreConnectionError,
)
from .models import (  # noqa: F401
    PLAIN_TEXT_TYPE,
    ContentBlock,
    HistoryRecord,
    NullableRecord,
    to_history_record,
)
from .printer import HistoryPrinter  # noqa: F401
from .repository import HistoryRepository, TierResult  # noqa: F401
from .timestamps import REFERENCE_DATE, ZERO_TIME, decode_timestamp  # noqa: F401


__models__ = ["HistoryRecord", "ContentBlock", "NullableRecord"]
__errors__ = [
    "HistoryError",
    "SchemaNotRecognizedError",
    "ContentsUnavailableError",
    "StoreConnectionError",
]
__all__ = [
    *__models__,
    *__errors__,
    "PLAIN_TEXT_TYPE",
    "to_history_record",
    "HistoryPrinter",
    "HistoryRepository",
    "TierResult",
    "REFERENCE_DATE",
    "ZERO_TIME",
    "decode_timestamp",
]
