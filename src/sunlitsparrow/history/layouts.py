# region Docstring
"""
sunlitsparrow.history.layouts

Known Maccy table layouts and the pure SQL builders used to read them.

Overview:
- Maccy has shipped its history under different table/column names. Two fixed
    layouts are known: a readable one (HistoryItem / HistoryItemContent) and the
    Core Data one (ZHISTORYITEM / ZHISTORYITEMCONTENT, Z-prefixed columns).
- When neither fixed layout can be queried, the repository inspects the columns
    of the best-guess table and resolves them against the canonical field names
    with `resolve_columns`.

Contents:
- Constants:
    - RECORD_FIELDS: Canonical column name -> NullableRecord attribute.
    - ALTERNATE_PREFIX: Prefix Core Data applies to every attribute column.
    - PRIMARY_LAYOUT, ALTERNATE_LAYOUT: The two fixed layouts.
    - HISTORY_TABLE_CANDIDATES: Table names tried by column discovery.
- Models:
    - HistoryLayout: Table and column names for items and their contents.
    - ResolvedColumn: One observed column matched to a canonical field.
- Functions:
    - quote_identifier(name) -> str
    - select_items_sql(layout, limit, pinned_only) -> (sql, params)
    - select_contents_sql(layout) -> sql
    - choose_table(table_names) -> Optional[str]
    - sample_row_sql(table) -> sql
    - resolve_columns(observed, fields) -> list[ResolvedColumn]
    - discovery_select_sql(table, resolved, limit) -> (sql, params)

Design notes:
- Every function here is pure; nothing touches a connection.
- Selected columns are aliased to NullableRecord attribute names so rows from
    every tier decode the same way.
"""
# endregion
# region Imports
from typing import Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict

# endregion
# region Constants
RECORD_FIELDS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "pin": "pin",
    "firstCopiedAt": "first_copied_at",
    "lastCopiedAt": "last_copied_at",
    "numberOfCopies": "number_of_copies",
    "application": "application",
}
"""[dict] Canonical column name -> NullableRecord attribute, in select order."""

ALTERNATE_PREFIX: str = "Z"
"""[str] Prefix Core Data applies to attribute columns."""

EXTRA_FIELD_NAMES: dict[str, tuple[str, ...]] = {"id": ("Z_PK",)}
"""[dict] Additional column names accepted for a canonical field."""

HISTORY_TABLE_CANDIDATES: tuple[str, ...] = ("HistoryItem", "ZHISTORYITEM")
"""[tuple] Table names column discovery will inspect, in priority order."""


# endregion
# region Models
class HistoryLayout(BaseModel):
    """
    Table and column names of one known Maccy schema.

    Attributes:
        name (str): Label used in log messages.
        item_table (str): Table holding history items.
        item_columns (dict[str, str]): Canonical field -> column name.
        content_table (str): Table holding item contents.
        content_type_column (str): Column holding the pasteboard type.
        content_value_column (str): Column holding the payload.
        content_item_column (str): Column referencing the owning item.
    """

    name: str
    item_table: str
    item_columns: dict[str, str]
    content_table: str
    content_type_column: str
    content_value_column: str
    content_item_column: str

    model_config = ConfigDict(frozen=True)


class ResolvedColumn(BaseModel):
    """An observed column name matched to a canonical field."""

    column: str
    field: str

    model_config = ConfigDict(frozen=True)

    @property
    def attribute(self) -> str:
        return RECORD_FIELDS[self.field]


PRIMARY_LAYOUT = HistoryLayout(
    name="primary",
    item_table="HistoryItem",
    item_columns={field: field for field in RECORD_FIELDS},
    content_table="HistoryItemContent",
    content_type_column="type",
    content_value_column="value",
    content_item_column="item_id",
)

ALTERNATE_LAYOUT = HistoryLayout(
    name="alternate",
    item_table="ZHISTORYITEM",
    item_columns={
        "id": "Z_PK",
        "title": "ZTITLE",
        "pin": "ZPIN",
        "firstCopiedAt": "ZFIRSTCOPIEDAT",
        "lastCopiedAt": "ZLASTCOPIEDAT",
        "numberOfCopies": "ZNUMBEROFCOPIES",
        "application": "ZAPPLICATION",
    },
    content_table="ZHISTORYITEMCONTENT",
    content_type_column="ZTYPE",
    content_value_column="ZVALUE",
    content_item_column="ZITEM",
)


# endregion
# region SQL builders
def quote_identifier(name: str) -> str:
    """
    Quote a table or column name.

    Backticks are used because SQLite may read an unknown double-quoted name as
    a string literal instead of failing.
    """
    return "`" + name.replace("`", "``") + "`"


def _select_list(columns: Sequence[tuple[str, str]]) -> str:
    return ", ".join(
        f"{quote_identifier(column)} AS {attribute}" for column, attribute in columns
    )


def _limit_clause(limit: int) -> tuple[str, tuple]:
    if limit > 0:
        return " LIMIT ?", (limit,)
    return "", ()


def select_items_sql(
    layout: HistoryLayout, limit: int = 0, pinned_only: bool = False
) -> tuple[str, tuple]:
    """
    Build the item query for a fixed layout.

    Args:
        layout (HistoryLayout): The layout to query.
        limit (int): Maximum rows; 0 means no limit.
        pinned_only (bool): Restrict to items with a non-empty pin.

    Returns:
        tuple[str, tuple]: SQL text and its parameters.
    """
    cols = layout.item_columns
    sql = "SELECT {} FROM {}".format(
        _select_list([(cols[f], RECORD_FIELDS[f]) for f in RECORD_FIELDS]),
        quote_identifier(layout.item_table),
    )
    if pinned_only:
        pin = quote_identifier(cols["pin"])
        sql += f" WHERE {pin} IS NOT NULL AND {pin} != ''"
    sql += f" ORDER BY {quote_identifier(cols['lastCopiedAt'])} DESC"
    limit_sql, params = _limit_clause(limit)
    return sql + limit_sql, params


def select_contents_sql(layout: HistoryLayout) -> str:
    """Build the contents query for a fixed layout; takes the item id as parameter."""
    return "SELECT {} FROM {} WHERE {} = ?".format(
        _select_list(
            [
                (layout.content_type_column, "type"),
                (layout.content_value_column, "value"),
            ]
        ),
        quote_identifier(layout.content_table),
        quote_identifier(layout.content_item_column),
    )


def choose_table(
    table_names: Sequence[str],
    candidates: Sequence[str] = HISTORY_TABLE_CANDIDATES,
) -> Optional[str]:
    """
    Pick the best-guess history table from the tables present in the store.

    Matching is case-insensitive; the actual stored name is returned.

    Example:
        >>> choose_table(["ZHISTORYITEMCONTENT", "zhistoryitem"])
        'zhistoryitem'
    """
    by_lower = {name.lower(): name for name in table_names}
    for candidate in candidates:
        if candidate.lower() in by_lower:
            return by_lower[candidate.lower()]
    return None


def sample_row_sql(table: str) -> str:
    return f"SELECT * FROM {quote_identifier(table)} LIMIT 1"


def _accepted_names(field: str) -> set[str]:
    names = {field, ALTERNATE_PREFIX + field, *EXTRA_FIELD_NAMES.get(field, ())}
    return {name.lower() for name in names}


def resolve_columns(
    observed: Sequence[str],
    fields: Mapping[str, str] = RECORD_FIELDS,
) -> list[ResolvedColumn]:
    """
    Match observed column names against canonical field names.

    A column matches a field when it equals, case-insensitively, the field name
    or the field name with the Core Data prefix. Each field is claimed by the
    first observed column that matches it; unmatched columns are ignored.

    Args:
        observed (Sequence[str]): Column names reported by the store.
        fields (Mapping[str, str]): Canonical field names to resolve.

    Returns:
        list[ResolvedColumn]: Matches in observed-column order; empty when
            nothing matched.

    Example:
        >>> [r.column for r in resolve_columns(["ZTITLE", "Extra", "ID"])]
        ['ZTITLE', 'ID']
    """
    resolved: list[ResolvedColumn] = []
    claimed: set[str] = set()
    for column in observed:
        lowered = column.lower()
        for field in fields:
            if field not in claimed and lowered in _accepted_names(field):
                resolved.append(ResolvedColumn(column=column, field=field))
                claimed.add(field)
                break
    return resolved


def discovery_select_sql(
    table: str, resolved: Sequence[ResolvedColumn], limit: int = 0
) -> tuple[str, tuple]:
    """Build a SELECT naming only resolved columns, newest first when possible."""
    sql = "SELECT {} FROM {}".format(
        _select_list([(r.column, r.attribute) for r in resolved]),
        quote_identifier(table),
    )
    by_field = {r.field: r.column for r in resolved}
    order = [
        f"{quote_identifier(by_field[field])} DESC"
        for field in ("lastCopiedAt", "firstCopiedAt")
        if field in by_field
    ]
    if order:
        sql += " ORDER BY " + ", ".join(order)
    limit_sql, params = _limit_clause(limit)
    return sql + limit_sql, params


# endregion

__all__ = [
    "RECORD_FIELDS",
    "ALTERNATE_PREFIX",
    "HISTORY_TABLE_CANDIDATES",
    "HistoryLayout",
    "ResolvedColumn",
    "PRIMARY_LAYOUT",
    "ALTERNATE_LAYOUT",
    "quote_identifier",
    "select_items_sql",
    "select_contents_sql",
    "choose_table",
    "sample_row_sql",
    "resolve_columns",
    "discovery_select_sql",
]
