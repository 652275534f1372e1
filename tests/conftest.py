import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from sqlite_utils import Database

# Add the src directory to the path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from sunlitsparrow.config import get_settings  # noqa: E402
from sunlitsparrow.history.timestamps import encode_timestamp  # noqa: E402
from sunlitsparrow.logger import LOGGER_NAME  # noqa: E402

# region Fixture data

TEXT = "public.utf8-plain-text"


def ts(*args) -> float:
    """Core Data timestamp for a UTC datetime."""
    return encode_timestamp(datetime(*args, tzinfo=timezone.utc))


ITEMS = [
    {
        "id": 1,
        "title": "hello world",
        "pin": None,
        "firstCopiedAt": ts(2024, 1, 1, 9, 0, 0),
        "lastCopiedAt": ts(2024, 1, 5, 9, 0, 0),
        "numberOfCopies": 3,
        "application": "com.apple.Terminal",
    },
    {
        "id": 2,
        "title": "https://example.com",
        "pin": "b",
        "firstCopiedAt": ts(2024, 1, 2, 10, 30, 0),
        "lastCopiedAt": ts(2024, 1, 7, 18, 15, 30),
        "numberOfCopies": 1,
        "application": "com.google.Chrome",
    },
    {
        "id": 3,
        "title": "secret",
        "pin": "",
        "firstCopiedAt": ts(2024, 1, 3, 8, 0, 0),
        "lastCopiedAt": ts(2024, 1, 3, 8, 0, 0),
        "numberOfCopies": 2,
        "application": None,
    },
    {
        "id": 4,
        "title": "pinned note",
        "pin": "c",
        "firstCopiedAt": None,
        "lastCopiedAt": ts(2024, 1, 9, 12, 0, 0),
        "numberOfCopies": None,
        "application": None,
    },
    {
        "id": 5,
        "title": "image",
        "pin": None,
        "firstCopiedAt": ts(2024, 1, 6, 7, 0, 0),
        "lastCopiedAt": ts(2024, 1, 6, 7, 0, 0),
        "numberOfCopies": 1,
        "application": "com.apple.Preview",
    },
]
"""Five history items; newest first by lastCopiedAt is 4, 2, 5, 1, 3."""

EXPECTED_ORDER = [4, 2, 5, 1, 3]
EXPECTED_PINNED = [4, 2]

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"

CONTENTS = [
    (1, TEXT, b"hello world"),
    (2, TEXT, b"https://example.com"),
    (2, "public.html", b"<a href='https://example.com'>example</a>"),
    (4, TEXT, b"pinned note"),
    (5, "public.png", PNG_BYTES),
    (5, "public.tiff", b"\x00\x01\x02"),
]
"""(item id, type, value) rows; item 3 has no contents."""

ALTERNATE_COLUMNS = {
    "id": "Z_PK",
    "title": "ZTITLE",
    "pin": "ZPIN",
    "firstCopiedAt": "ZFIRSTCOPIEDAT",
    "lastCopiedAt": "ZLASTCOPIEDAT",
    "numberOfCopies": "ZNUMBEROFCOPIES",
    "application": "ZAPPLICATION",
}

DISCOVERY_COLUMNS = {
    "id": "ID",
    "title": "Title",
    "pin": "zpin",
    "firstCopiedAt": "FIRSTCOPIEDAT",
    "lastCopiedAt": "ZLastCopiedAt",
    "numberOfCopies": "numberofcopies",
    "application": "ZApplication",
}
"""Only resolvable by column discovery: `pin` is not a column name."""


def _rename(item: dict, columns: dict) -> dict:
    return {columns[key]: value for key, value in item.items()}


# endregion
# region Store builders


def build_primary_store(path: Path, extra_contents=()) -> Path:
    db = Database(path)
    db.create_table(
        "HistoryItem",
        {
            "id": int,
            "title": str,
            "pin": str,
            "firstCopiedAt": float,
            "lastCopiedAt": float,
            "numberOfCopies": int,
            "application": str,
        },
        pk="id",
    )
    db.create_table(
        "HistoryItemContent",
        {"id": int, "type": str, "value": bytes, "item_id": int},
        pk="id",
        foreign_keys=[("item_id", "HistoryItem", "id")],
    )
    db["HistoryItem"].insert_all(ITEMS)
    db["HistoryItemContent"].insert_all(
        {"item_id": item_id, "type": type_, "value": value}
        for item_id, type_, value in [*CONTENTS, *extra_contents]
    )
    db["HistoryItemContent"].create_index(["item_id"])
    db.conn.close()
    return path


def build_alternate_store(path: Path) -> Path:
    db = Database(path)
    db.create_table(
        "ZHISTORYITEM",
        {
            "Z_PK": int,
            "Z_ENT": int,
            "Z_OPT": int,
            "ZNUMBEROFCOPIES": int,
            "ZFIRSTCOPIEDAT": float,
            "ZLASTCOPIEDAT": float,
            "ZAPPLICATION": str,
            "ZPIN": str,
            "ZTITLE": str,
        },
        pk="Z_PK",
    )
    db.create_table(
        "ZHISTORYITEMCONTENT",
        {"Z_PK": int, "Z_ENT": int, "Z_OPT": int, "ZITEM": int, "ZTYPE": str, "ZVALUE": bytes},
        pk="Z_PK",
    )
    db["ZHISTORYITEM"].insert_all(
        {**_rename(item, ALTERNATE_COLUMNS), "Z_ENT": 1, "Z_OPT": 1} for item in ITEMS
    )
    db["ZHISTORYITEMCONTENT"].insert_all(
        {"ZITEM": item_id, "ZTYPE": type_, "ZVALUE": value, "Z_ENT": 2, "Z_OPT": 1}
        for item_id, type_, value in CONTENTS
    )
    db.conn.close()
    return path


def build_discovery_store(path: Path) -> Path:
    db = Database(path)
    db.create_table(
        "HistoryItem",
        {
            "ID": int,
            "Title": str,
            "zpin": str,
            "FIRSTCOPIEDAT": float,
            "ZLastCopiedAt": float,
            "numberofcopies": int,
            "ZApplication": str,
            "extraColumn": str,
        },
        pk="ID",
    )
    db.create_table(
        "HistoryItemContent",
        {"id": int, "type": str, "value": bytes, "item_id": int},
        pk="id",
    )
    db["HistoryItem"].insert_all(
        {**_rename(item, DISCOVERY_COLUMNS), "extraColumn": "ignored"} for item in ITEMS
    )
    db["HistoryItemContent"].insert_all(
        {"item_id": item_id, "type": type_, "value": value}
        for item_id, type_, value in CONTENTS
    )
    db.conn.close()
    return path


def build_unrecognized_store(path: Path) -> Path:
    db = Database(path)
    db["clips"].insert_all(
        [{"content": "hello", "created": "2024-01-01"}, {"content": "bye", "created": "2024-01-02"}]
    )
    db.conn.close()
    return path


# endregion
# region Fixtures


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Clear SUNLITSPARROW_* env vars and the settings cache for each test."""
    for key in list(os.environ):
        if key.startswith("SUNLITSPARROW_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the package logger after configure_logging replaced its handlers."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def primary_path(tmp_path) -> Path:
    return build_primary_store(tmp_path / "primary.sqlite")


@pytest.fixture
def alternate_path(tmp_path) -> Path:
    return build_alternate_store(tmp_path / "alternate.sqlite")


@pytest.fixture
def discovery_path(tmp_path) -> Path:
    return build_discovery_store(tmp_path / "discovery.sqlite")


@pytest.fixture
def unrecognized_path(tmp_path) -> Path:
    return build_unrecognized_store(tmp_path / "unrecognized.sqlite")


@pytest.fixture
def primary_db(primary_path):
    db = Database(primary_path)
    yield db
    db.conn.close()


@pytest.fixture(params=["primary", "alternate", "discovery"])
def any_layout_db(request, tmp_path):
    """An open store in each supported layout."""
    builders = {
        "primary": build_primary_store,
        "alternate": build_alternate_store,
        "discovery": build_discovery_store,
    }
    path = builders[request.param](tmp_path / f"{request.param}.sqlite")
    db = Database(path)
    yield db
    db.conn.close()


# endregion
