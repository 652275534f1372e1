# region Docstring
"""
sunlitsparrow.history.models

Domain models for Maccy clipboard history entries.

Overview:
- Provides frozen Pydantic models for history items and their content blocks,
    with JSON serialization matching the export format.
- Provides a nullable staging model used while decoding result rows, and a
    single pure conversion to the required-fields record.

Contents:
- Constants:
    - PLAIN_TEXT_TYPE: Pasteboard type whose payload is UTF-8 text.
- Pydantic models:
    - ContentBlock:
        One pasteboard payload (type tag + raw bytes). JSON output renders the
        value verbatim for plain text and as base64 for every other type.
    - HistoryRecord:
        One clipboard history entry with its ordered content blocks. JSON output
        uses camelCase keys and omits an empty pin, application, or contents.
    - NullableRecord:
        Staging form for one result row. Every column except `id` is nullable,
        and values that cannot be coerced are treated as NULL.
- Functions:
    - to_history_record(staged) -> HistoryRecord

Design notes:
- NULL or invalid columns degrade to the zero value (empty string, 0,
    ZERO_TIME) and never raise. A row whose `id` is missing or non-integer,
    or whose text is not valid UTF-8, fails validation and is skipped by the
    repository.
- Records are immutable; attaching contents returns a copy (`with_contents`).
- `last_copied_at < first_copied_at` is passed through as read.
"""
# endregion
# region Imports
import base64
import math
from datetime import datetime
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

from .timestamps import ZERO_TIME, decode_timestamp

# endregion
# region Constants
PLAIN_TEXT_TYPE: str = "public.utf8-plain-text"
"""[str] Pasteboard type rendered as text instead of base64."""


# endregion
# region Coercion helpers
def _utf8_text(v: Any) -> Any:
    # Raises UnicodeDecodeError (a ValueError) for text that is not UTF-8.
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v).decode("utf-8")
    return v


def _nullable_text(v: Any) -> Optional[str]:
    v = _utf8_text(v)
    if v is None or isinstance(v, str):
        return v
    if isinstance(v, (int, float)):
        return str(v)
    return None


def _nullable_float(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v) if math.isfinite(v) else None
    if isinstance(v, (str, bytes)):
        try:
            parsed = float(v)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _nullable_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if math.isfinite(v) else None
    if isinstance(v, (str, bytes)):
        try:
            return int(v)
        except ValueError:
            return None
    return None


def _timestamp_or_zero(raw: Optional[float]) -> datetime:
    if raw is None:
        return ZERO_TIME
    try:
        return decode_timestamp(raw)
    except OverflowError:
        # Outside the range datetime can represent.
        return ZERO_TIME


# endregion
# region Pydantic Models
class ContentBlock(BaseModel):
    """
    A single pasteboard payload attached to a history item.

    Attributes:
        type (str): Pasteboard type tag (e.g. public.utf8-plain-text, public.png).
        value (bytes): Raw payload bytes.
    """

    type: str = Field(..., description="Pasteboard type tag of the payload")
    value: bytes = Field(b"", description="Raw payload bytes")

    model_config = ConfigDict(frozen=True)

    @field_validator("type", mode="before")
    def validate_type(cls, v: Any) -> Any:
        return _utf8_text(v)

    @field_validator("value", mode="before")
    def validate_value(cls, v: Any) -> Any:
        if v is None:
            return b""
        if isinstance(v, str):
            return v.encode("utf-8")
        if isinstance(v, (bytearray, memoryview)):
            return bytes(v)
        return v

    @property
    def is_text(self) -> bool:
        """True when the payload is plain UTF-8 text."""
        return self.type == PLAIN_TEXT_TYPE

    @property
    def rendered_value(self) -> str:
        """The payload as text for plain text, base64 for everything else."""
        if self.is_text:
            return self.value.decode("utf-8", errors="replace")
        return base64.b64encode(self.value).decode("ascii")

    @model_serializer(when_used="json")
    def serialize_model(self) -> dict:
        return {"type": self.type, "value": self.rendered_value}


class HistoryRecord(BaseModel):
    """
    A clipboard history entry read from the Maccy store.

    Attributes:
        id (int): Identifier assigned by the store.
        title (str): Display title, possibly empty.
        pin (str): Pin key; empty when the item is not pinned.
        first_copied_at (datetime): First copy time, or ZERO_TIME when unknown.
        last_copied_at (datetime): Last copy time, or ZERO_TIME when unknown.
        number_of_copies (int): How many times the item was copied.
        application (str): Bundle identifier of the source application.
        contents (tuple[ContentBlock, ...]): Payloads in storage order.
    """

    id: int = Field(..., description="Identifier assigned by the store")
    title: str = Field("", description="Display title of the item")
    pin: str = Field("", description="Pin key, empty when not pinned")
    first_copied_at: datetime = Field(ZERO_TIME, description="First copy time")
    last_copied_at: datetime = Field(ZERO_TIME, description="Last copy time")
    number_of_copies: int = Field(0, ge=0, description="Copy counter")
    application: str = Field("", description="Source application identifier")
    contents: tuple[ContentBlock, ...] = Field(
        (), description="Pasteboard payloads in storage order"
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 42,
                    "title": "Sample clipboard text",
                    "firstCopiedAt": "2024-01-01T12:00:00+00:00",
                    "lastCopiedAt": "2024-01-02T08:30:00+00:00",
                    "numberOfCopies": 3,
                    "application": "com.apple.Terminal",
                    "contents": [
                        {
                            "type": "public.utf8-plain-text",
                            "value": "Sample clipboard text",
                        }
                    ],
                }
            ]
        },
    )

    @property
    def is_pinned(self) -> bool:
        return bool(self.pin)

    def with_contents(self, contents: Iterable[ContentBlock]) -> "HistoryRecord":
        """Return a copy of this record carrying `contents`."""
        return self.model_copy(update={"contents": tuple(contents)})

    @model_serializer(when_used="json")
    def serialize_model(self) -> dict:
        data: dict[str, Any] = {"id": self.id, "title": self.title}
        if self.pin:
            data["pin"] = self.pin
        data["firstCopiedAt"] = self.first_copied_at.isoformat()
        data["lastCopiedAt"] = self.last_copied_at.isoformat()
        data["numberOfCopies"] = self.number_of_copies
        if self.application:
            data["application"] = self.application
        if self.contents:
            data["contents"] = [c.serialize_model() for c in self.contents]
        return data


class NullableRecord(BaseModel):
    """Staging form of one history row; every column but `id` may be NULL."""

    id: int
    title: Optional[str] = None
    pin: Optional[str] = None
    first_copied_at: Optional[float] = None
    last_copied_at: Optional[float] = None
    number_of_copies: Optional[int] = None
    application: Optional[str] = None

    @field_validator("title", "pin", "application", mode="before")
    def validate_text(cls, v: Any) -> Optional[str]:
        return _nullable_text(v)

    @field_validator("first_copied_at", "last_copied_at", mode="before")
    def validate_timestamp(cls, v: Any) -> Optional[float]:
        return _nullable_float(v)

    @field_validator("number_of_copies", mode="before")
    def validate_count(cls, v: Any) -> Optional[int]:
        return _nullable_int(v)

    def to_history_record(self) -> HistoryRecord:
        return to_history_record(self)


# endregion
# region Conversion
def to_history_record(staged: NullableRecord) -> HistoryRecord:
    """
    Promote a staged row to a HistoryRecord, mapping NULL to zero values.

    Args:
        staged (NullableRecord): The decoded row.

    Returns:
        HistoryRecord: The record, without contents.
    """
    count = staged.number_of_copies or 0
    return HistoryRecord(
        id=staged.id,
        title=staged.title or "",
        pin=staged.pin or "",
        first_copied_at=_timestamp_or_zero(staged.first_copied_at),
        last_copied_at=_timestamp_or_zero(staged.last_copied_at),
        number_of_copies=count if count > 0 else 0,
        application=staged.application or "",
    )


# endregion

__all__ = [
    "PLAIN_TEXT_TYPE",
    "ContentBlock",
    "HistoryRecord",
    "NullableRecord",
    "to_history_record",
]
