# region Docstring
"""
sunlitsparrow.history.timestamps

Conversion between Core Data reference-date timestamps and `datetime`.

Overview:
- Maccy stores every timestamp as fractional seconds since the Core Data
    reference date (2001-01-01T00:00:00 UTC), not as Unix time.
- `decode_timestamp` performs the arithmetic only. Deciding whether a value
    means "never copied" is left to the presentation layer.

Contents:
- REFERENCE_DATE: The Core Data reference instant.
- ZERO_TIME: The zero value used when a timestamp column is NULL or invalid.
- decode_timestamp(raw) -> datetime
- encode_timestamp(dt) -> float
"""
# endregion
# region Imports
from datetime import datetime, timedelta, timezone

# endregion
# region Constants
REFERENCE_DATE: datetime = datetime(2001, 1, 1, tzinfo=timezone.utc)
"""[datetime] Core Data reference date, 2001-01-01T00:00:00 UTC."""
ZERO_TIME: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)
"""[datetime] Zero value for timestamps that were never recorded."""


# endregion
# region Functions
def decode_timestamp(raw: float) -> datetime:
    """
    Convert a Core Data timestamp into an aware UTC datetime.

    Args:
        raw (float): Seconds since 2001-01-01T00:00:00 UTC.

    Returns:
        datetime: The decoded instant in UTC.

    Example:
        >>> decode_timestamp(0.0)
        datetime.datetime(2001, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    """
    return REFERENCE_DATE + timedelta(seconds=raw)


def encode_timestamp(dt: datetime) -> float:
    """Inverse of `decode_timestamp`. Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - REFERENCE_DATE).total_seconds()


# endregion

__all__ = ["REFERENCE_DATE", "ZERO_TIME", "decode_timestamp", "encode_timestamp"]
