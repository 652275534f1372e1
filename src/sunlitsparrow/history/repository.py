# region Docstring
"""
sunlitsparrow.history.repository

Schema-tolerant retrieval of clipboard history from a Maccy store.

Overview:
- `HistoryRepository` reads history items and their contents from an open
    store without the caller knowing which Maccy schema is on disk.
- Each top-level call tries, in fixed order, the primary layout, the Core Data
    layout and (for full listings) column discovery. The first tier whose query
    executes is authoritative for that call. Nothing is memoized between calls.

Contents:
- Models:
    - TierResult: Outcome of one tier attempt (records or the error it hit).
- Classes:
    - HistoryRepository:
        - fetch_recent(limit) -> list[HistoryRecord]
        - fetch_all() -> list[HistoryRecord]
        - fetch_pinned() -> list[HistoryRecord]
        - fetch_contents(record_id) -> list[ContentBlock]

Design notes:
- Tier fallback is an ordered list of attempts returning TierResult values.
    Driver exceptions are captured at `_execute` and checked explicitly.
- A connection-level failure (closed handle, file is not a database) raises
    StoreConnectionError immediately instead of falling through the tiers.
- Contents are fetched with one query per item while the item rows are being
    decoded (N+1). History stores are local and small.
- Rows that fail to decode are skipped; a content failure leaves that item's
    contents empty. Both are logged at debug level.
- Every cursor is closed before the method that opened it returns.
- While a fetch runs, TEXT values that are not valid UTF-8 are returned as raw
    bytes instead of failing inside the driver, so the row decoder can reject
    just that row (or that item's contents). The connection's previous
    text_factory is restored afterwards.
"""
# endregion
# region Imports
import sqlite3
from contextlib import closing, contextmanager
from logging import Logger as T_Logger
from typing import Callable, Iterator, NamedTuple, Optional, Sequence, Union

from pydantic import ValidationError
from sqlite_utils import Database

from sunlitsparrow.logger import TRACE, get_logger

from .errors import (
    ContentsUnavailableError,
    SchemaNotRecognizedError,
    StoreConnectionError,
)
from .layouts import (
    ALTERNATE_LAYOUT,
    PRIMARY_LAYOUT,
    HistoryLayout,
    choose_table,
    discovery_select_sql,
    resolve_columns,
    sample_row_sql,
    select_contents_sql,
    select_items_sql,
)
from .models import ContentBlock, HistoryRecord, NullableRecord

# endregion
# region Types
DISCOVERY_TIER: str = "discovery"
FIXED_LAYOUTS: tuple[HistoryLayout, ...] = (PRIMARY_LAYOUT, ALTERNATE_LAYOUT)


class TierResult(NamedTuple):
    """Outcome of one tier attempt."""

    tier: str
    records: Optional[list[HistoryRecord]] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_connection_failure(exc: sqlite3.Error) -> bool:
    # OperationalError covers missing tables/columns; other DatabaseErrors mean
    # the handle or file itself is unusable.
    if isinstance(exc, sqlite3.ProgrammingError):
        return True
    return isinstance(exc, sqlite3.DatabaseError) and not isinstance(
        exc, sqlite3.OperationalError
    )


def _raise_if_connection_failure(exc: sqlite3.Error) -> None:
    if _is_connection_failure(exc):
        raise StoreConnectionError(f"store is not readable: {exc}") from exc


def _text_or_bytes(raw: bytes) -> Union[str, bytes]:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw


@contextmanager
def _tolerant_text(conn: sqlite3.Connection) -> Iterator[None]:
    previous = conn.text_factory
    conn.text_factory = _text_or_bytes
    try:
        yield
    finally:
        conn.text_factory = previous


# endregion
# region HistoryRepository
class HistoryRepository:
    """
    Reads clipboard history from an open Maccy store.

    Attributes:
        db (Database): The open store.
        logger (Logger): Receives diagnostics; silent unless configured.
    """

    def __init__(
        self,
        db: Union[Database, sqlite3.Connection],
        logger: Optional[T_Logger] = None,
    ) -> None:
        if isinstance(db, sqlite3.Connection):
            db = Database(db)
        if db is None or not isinstance(db, Database):
            raise ValueError("A valid sqlite_utils.Database instance is required.")
        self.db = db
        self.logger = logger or get_logger("history")

    # region Public API
    def fetch_recent(self, limit: int) -> list[HistoryRecord]:
        """
        Return the most recently copied items, newest first.

        Args:
            limit (int): Maximum number of items; 0 returns every item.

        Returns:
            list[HistoryRecord]: Items with their contents attached.

        Raises:
            ValueError: If `limit` is negative.
            SchemaNotRecognizedError: If no layout could be read.
            StoreConnectionError: If the store handle is unusable.
        """
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        attempts: list[Callable[[], TierResult]] = [
            *(self._layout_attempt(layout, limit) for layout in FIXED_LAYOUTS),
            lambda: self._attempt_discovery(limit),
        ]
        with _tolerant_text(self.db.conn):
            return self._first_successful("items", attempts)

    def fetch_all(self) -> list[HistoryRecord]:
        """Return every item, newest first."""
        return self.fetch_recent(0)

    def fetch_pinned(self) -> list[HistoryRecord]:
        """Return items with a non-empty pin, newest first."""
        attempts = [
            self._layout_attempt(layout, 0, pinned_only=True)
            for layout in FIXED_LAYOUTS
        ]
        with _tolerant_text(self.db.conn):
            return self._first_successful("pinned items", attempts)

    def fetch_contents(self, record_id: int) -> list[ContentBlock]:
        """
        Return the content blocks of one item in storage order.

        Raises:
            ContentsUnavailableError: If neither content layout could be read,
                or a content row could not be decoded.
            StoreConnectionError: If the store handle is unusable.
        """
        last_error: Optional[sqlite3.Error] = None
        with _tolerant_text(self.db.conn):
            for layout in FIXED_LAYOUTS:
                cursor, error = self._execute(
                    select_contents_sql(layout), (record_id,)
                )
                if cursor is None:
                    self.logger.log(
                        TRACE, "%s content query failed: %s", layout.name, error
                    )
                    last_error = error
                    continue
                with closing(cursor):
                    return self._decode_contents(record_id, cursor)
        raise ContentsUnavailableError(record_id, str(last_error)) from last_error

    # endregion
    # region Tier attempts
    def _first_successful(
        self, what: str, attempts: Sequence[Callable[[], TierResult]]
    ) -> list[HistoryRecord]:
        last: Optional[TierResult] = None
        for attempt in attempts:
            result = attempt()
            if result.ok:
                self.logger.info(
                    "Read %d %s using the %s layout",
                    len(result.records),
                    what,
                    result.tier,
                )
                return result.records
            self.logger.debug(
                "%s layout query for %s failed: %s", result.tier, what, result.error
            )
            last = result
        raise SchemaNotRecognizedError(
            f"could not read {what}: no known schema layout matched ({last.error})"
        ) from last.error

    def _layout_attempt(
        self, layout: HistoryLayout, limit: int, pinned_only: bool = False
    ) -> Callable[[], TierResult]:
        sql, params = select_items_sql(layout, limit, pinned_only=pinned_only)
        return lambda: self._run(layout.name, sql, params)

    def _attempt_discovery(self, limit: int) -> TierResult:
        cursor, error = self._execute(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        )
        if cursor is None:
            return TierResult(DISCOVERY_TIER, error=error)
        with closing(cursor):
            table = choose_table([row[0] for row in cursor])
        if table is None:
            return TierResult(
                DISCOVERY_TIER,
                error=SchemaNotRecognizedError("no history table found in store"),
            )

        cursor, error = self._execute(sample_row_sql(table))
        if cursor is None:
            return TierResult(DISCOVERY_TIER, error=error)
        with closing(cursor):
            observed = [column[0] for column in cursor.description]
        self.logger.debug("%s columns: %s", table, ", ".join(observed))

        resolved = resolve_columns(observed)
        if not resolved:
            return TierResult(
                DISCOVERY_TIER,
                error=SchemaNotRecognizedError(
                    f"couldn't identify required columns in {table} table"
                ),
            )
        sql, params = discovery_select_sql(table, resolved, limit)
        return self._run(DISCOVERY_TIER, sql, params)

    # endregion
    # region Query helpers
    def _execute(
        self, sql: str, params: tuple = ()
    ) -> tuple[Optional[sqlite3.Cursor], Optional[sqlite3.Error]]:
        """Run one query, returning either its cursor or the error it raised."""
        self.logger.log(TRACE, "SQL: %s %r", sql, params)
        try:
            return self.db.execute(sql, params), None
        except sqlite3.Error as exc:
            _raise_if_connection_failure(exc)
            return None, exc

    def _run(self, tier: str, sql: str, params: tuple) -> TierResult:
        cursor, error = self._execute(sql, params)
        if cursor is None:
            return TierResult(tier, error=error)
        with closing(cursor):
            try:
                return TierResult(tier, records=self._decode_items(cursor))
            except sqlite3.Error as exc:
                _raise_if_connection_failure(exc)
                return TierResult(tier, error=exc)

    def _decode_items(self, cursor: sqlite3.Cursor) -> list[HistoryRecord]:
        names = [column[0] for column in cursor.description]
        records: list[HistoryRecord] = []
        for row in cursor:
            values = dict(zip(names, row))
            try:
                staged = NullableRecord.model_validate(values)
            except ValidationError as exc:
                self.logger.debug(
                    "Error scanning row (id=%r), skipping: %s",
                    values.get("id"),
                    exc.errors(include_url=False),
                )
                continue
            record = staged.to_history_record()
            try:
                contents = self.fetch_contents(record.id)
            except ContentsUnavailableError as exc:
                self.logger.debug("Error getting contents for item %d: %s", record.id, exc)
            else:
                record = record.with_contents(contents)
            records.append(record)
        return records

    def _decode_contents(
        self, record_id: int, cursor: sqlite3.Cursor
    ) -> list[ContentBlock]:
        contents: list[ContentBlock] = []
        try:
            for content_type, value in cursor:
                contents.append(ContentBlock(type=content_type, value=value))
        except ValidationError as exc:
            raise ContentsUnavailableError(
                record_id, f"undecodable content row: {exc}"
            ) from exc
        except sqlite3.Error as exc:
            _raise_if_connection_failure(exc)
            raise ContentsUnavailableError(
                record_id, f"error reading content rows: {exc}"
            ) from exc
        return contents

    # endregion


# endregion

__all__ = ["HistoryRepository", "TierResult"]
