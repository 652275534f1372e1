# region Docstring
"""
sunlitsparrow.schema

Schema inspection and DDL export for a Maccy store.

Overview:
- `SchemaExplorer.describe` lists every user table with its columns, foreign
    keys and indexes, using sqlite-utils table introspection.
- `SchemaExplorer.ddl` produces a SQLite script that recreates the tables and
    indexes, wrapped in a transaction; `export_to_file` writes it to disk.

Contents:
- Pydantic models:
    - ColumnDescription, ForeignKeyDescription, IndexDescription,
        TableDescription
- Classes:
    - SchemaExplorer
"""
# endregion
# region Imports
import sqlite3
from contextlib import closing
from logging import Logger as T_Logger
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field
from sqlite_utils import Database

from sunlitsparrow.export import ExportError
from sunlitsparrow.logger import TRACE, get_logger

# endregion
# region Pydantic Models


class ColumnDescription(BaseModel):
    """One column as reported by PRAGMA table_info."""

    name: str
    type: str = ""
    not_null: bool = False
    primary_key: bool = False
    default: Optional[Any] = None

    def describe(self) -> str:
        """
        Example:
            >>> ColumnDescription(name="Z_PK", type="INTEGER", primary_key=True).describe()
            'Z_PK (INTEGER) PRIMARY KEY'
        """
        text = f"{self.name} ({self.type})"
        if self.not_null:
            text += " NOT NULL"
        if self.primary_key:
            text += " PRIMARY KEY"
        if self.default is not None:
            text += f" DEFAULT {self.default}"
        return text


class ForeignKeyDescription(BaseModel):
    column: str
    other_table: str
    other_column: Optional[str] = None

    def describe(self) -> str:
        return f"Foreign Key: {self.column} -> {self.other_table}.{self.other_column}"


class IndexDescription(BaseModel):
    name: str
    unique: bool = False
    columns: list[str] = Field(default_factory=list)

    def describe(self) -> str:
        text = f"Index: {self.name}"
        if self.unique:
            text += " (UNIQUE)"
        return text


class TableDescription(BaseModel):
    """A table with its columns, foreign keys and indexes."""

    name: str
    columns: list[ColumnDescription] = Field(default_factory=list)
    foreign_keys: list[ForeignKeyDescription] = Field(default_factory=list)
    indexes: list[IndexDescription] = Field(default_factory=list)


# endregion
# region SchemaExplorer
class SchemaExplorer:
    """
    Inspects the schema of an open store.

    Attributes:
        db (Database): The open store.
        logger (Logger): Receives diagnostics.
    """

    def __init__(
        self,
        db: Union[Database, sqlite3.Connection],
        logger: Optional[T_Logger] = None,
    ) -> None:
        if isinstance(db, sqlite3.Connection):
            db = Database(db)
        self.db = db
        self.logger = logger or get_logger("schema")

    def table_names(self) -> list[str]:
        return [n for n in self.db.table_names() if not n.startswith("sqlite_")]

    def describe(self) -> list[TableDescription]:
        """Describe every non-internal table in the store."""
        tables = []
        for name in self.table_names():
            self.logger.info("Table: %s", name)
            try:
                tables.append(self._describe_table(name))
            except sqlite3.Error as e:
                self.logger.debug("Error reading schema for table %s: %s", name, e)
        return tables

    def _describe_table(self, name: str) -> TableDescription:
        table = self.db.table(name)
        columns = [
            ColumnDescription(
                name=c.name,
                type=c.type or "",
                not_null=bool(c.notnull),
                primary_key=bool(c.is_pk),
                default=c.default_value,
            )
            for c in table.columns
        ]
        foreign_keys = [
            ForeignKeyDescription(
                column=fk.column, other_table=fk.other_table, other_column=fk.other_column
            )
            for fk in table.foreign_keys
        ]
        indexes = [
            IndexDescription(name=i.name, unique=bool(i.unique), columns=list(i.columns))
            for i in table.indexes
        ]
        self.logger.log(
            TRACE, "%s: %d columns, %d indexes", name, len(columns), len(indexes)
        )
        return TableDescription(
            name=name, columns=columns, foreign_keys=foreign_keys, indexes=indexes
        )

    def _statements(self, kind: str) -> list[str]:
        sql = (
            "SELECT sql FROM sqlite_master "
            "WHERE type = ? AND name NOT LIKE 'sqlite_%' AND sql IS NOT NULL"
        )
        with closing(self.db.execute(sql, (kind,))) as cursor:
            return [row[0] + ";" for row in cursor]

    def ddl(self) -> str:
        """Return a script that recreates every table and index."""
        parts = ["BEGIN TRANSACTION;\n\n"]
        for statement in self._statements("table") + self._statements("index"):
            parts.append(statement + "\n\n")
        parts.append("COMMIT;\n")
        return "".join(parts)

    def export_to_file(self, filename: Union[str, Path]) -> Path:
        """
        Write the DDL script to `filename`.

        Raises:
            ExportError: If the file cannot be written.
        """
        path = Path(filename)
        script = self.ddl()
        try:
            path.write_text(script, encoding="utf-8")
        except OSError as e:
            raise ExportError(f"error creating output file {path}: {e}") from e
        return path


# endregion

__all__ = [
    "ColumnDescription",
    "ForeignKeyDescription",
    "IndexDescription",
    "TableDescription",
    "SchemaExplorer",
]
