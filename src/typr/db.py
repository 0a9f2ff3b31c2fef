# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import datetime
import logging
import pathlib
import typing

from dateutil.tz import tzlocal
from sqlalchemy import (
    Column,
    ForeignKey,
    MetaData,
    Table,
    event,
    select,
)
from sqlalchemy.dialects.sqlite import DATETIME, insert
from sqlalchemy.engine import URL as EngineURL
from sqlalchemy.engine import Connection, Engine, create_engine
from sqlalchemy.sql import column, text
from sqlalchemy.types import Float, Integer, String, TypeDecorator, UnicodeText

from .commontypes import SessionNotFound, UnknownOwner
from .session.record import SessionRecord, SessionMode, decode_record, encode_record
from .util import now

logger = logging.getLogger(__name__)

GUEST_OWNER_ID = "guest"


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


class AwareDateTime(TypeDecorator):
    """
    A DateTime type which can only store tz-aware DateTimes
    """

    impl = DATETIME
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if isinstance(value, datetime.datetime):
            if value.tzinfo is None:
                raise ValueError("{!r} must be TZ-aware".format(value))
            else:
                value = value.astimezone(datetime.timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if isinstance(value, datetime.datetime):
            value = value.replace(tzinfo=datetime.timezone.utc).astimezone(tzlocal())
        return value

    def __repr__(self):
        return "AwareDateTime()"


metadata = MetaData()

owner_table = Table(
    "owners",
    metadata,
    Column("id", String, primary_key=True),
    Column("username", String, nullable=False, unique=True),
    Column("created_at", AwareDateTime, nullable=False),
)

session_table = Table(
    "sessions",
    metadata,
    Column("id", String, primary_key=True),
    Column("owner_id", ForeignKey("owners.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("mode", String, nullable=True),
    Column("mode_value", Integer, nullable=True),
    Column("created_at", AwareDateTime, nullable=False, index=True),
    Column("session_duration", Integer, nullable=False),
    Column("accuracy", Float, nullable=True),
    Column("max_index_reached", Integer, nullable=True),
    Column("mechanical_cpm", Float, nullable=True),
    Column("productive_cpm", Float, nullable=True),
    # the whole record, exactly as it would be exported
    Column("payload", UnicodeText, nullable=False),
)

DB_VERSION = 1


class DbVersionError(Exception):
    pass


class SessionListing(typing.NamedTuple):
    session_id: str
    owner_id: str
    mode: typing.Optional[SessionMode]
    mode_value: typing.Optional[int]
    created_at: datetime.datetime
    session_duration_ms: int
    accuracy_percent: typing.Optional[float]
    productive_cpm: typing.Optional[float]


def check_version(conn: Connection, path: pathlib.Path, expected_version: int):
    found_version = conn.scalar(text("PRAGMA user_version").columns(column("version", Integer)))
    if found_version != expected_version:
        raise DbVersionError(f"Expected DB version {expected_version} in {path}, but found {found_version}.")


def set_version(conn: Connection, version: int):
    # looks like pragma does not support bindparams, hence the f-string
    conn.execute(text(f"PRAGMA user_version = {version}"))


def make_db(sqlite_path: pathlib.Path):
    exists = sqlite_path.is_file()
    sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    engine_url = EngineURL.create(drivername="sqlite", database=sqlite_path.__fspath__())
    engine = create_engine(engine_url)
    with engine.begin() as conn:
        if exists:
            check_version(conn, sqlite_path, DB_VERSION)
        else:
            metadata.create_all(conn)
            set_version(conn, DB_VERSION)
    store = SessionStore(engine)
    store.ensure_owner(GUEST_OWNER_ID, "Guest")
    return store


class SessionStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def ensure_owner(self, owner_id: str, username: str):
        stmt = insert(owner_table).values(id=owner_id, username=username, created_at=now())
        with self.engine.begin() as conn:
            conn.execute(stmt.on_conflict_do_nothing(index_elements=["id"]))

    def create(self, record: SessionRecord) -> SessionRecord:
        if record.session_id is None or record.owner_id is None:
            raise ValueError("Only finalized records with a session id and owner can be stored")
        with self.engine.begin() as conn:
            owner = conn.scalar(select(owner_table.c.id).where(owner_table.c.id == record.owner_id))
            if owner is None:
                raise UnknownOwner(record.owner_id)
            conn.execute(
                session_table.insert().values(
                    id=record.session_id,
                    owner_id=record.owner_id,
                    mode=record.mode.value if record.mode is not None else None,
                    mode_value=record.mode_value,
                    created_at=record.created_at if record.created_at is not None else now(),
                    session_duration=record.session_duration_ms,
                    accuracy=record.accuracy_percent,
                    max_index_reached=record.max_index_reached,
                    mechanical_cpm=record.mechanical_cpm,
                    productive_cpm=record.productive_cpm,
                    payload=encode_record(record).decode("utf-8"),
                )
            )
        logger.debug("stored session %s for %s", record.session_id, record.owner_id)
        return record

    def fetch(self, session_id: str) -> SessionRecord:
        with self.engine.begin() as conn:
            payload = conn.scalar(select(session_table.c.payload).where(session_table.c.id == session_id))
        if payload is None:
            raise SessionNotFound(session_id)
        return decode_record(payload)

    def list_for_owner(self, owner_id: str, limit=None, offset=None) -> list[SessionListing]:
        s = (
            select(
                session_table.c.id,
                session_table.c.owner_id,
                session_table.c.mode,
                session_table.c.mode_value,
                session_table.c.created_at,
                session_table.c.session_duration,
                session_table.c.accuracy,
                session_table.c.productive_cpm,
            )
            .where(session_table.c.owner_id == owner_id)
            .order_by(session_table.c.created_at.desc())
        )
        if limit is not None:
            s = s.limit(limit)
            if offset is not None:
                s = s.offset(offset)
        with self.engine.begin() as conn:
            result = conn.execute(s)
            return [
                SessionListing(
                    session_id=row.id,
                    owner_id=row.owner_id,
                    mode=SessionMode(row.mode) if row.mode is not None else None,
                    mode_value=row.mode_value,
                    created_at=row.created_at,
                    session_duration_ms=row.session_duration,
                    accuracy_percent=row.accuracy,
                    productive_cpm=row.productive_cpm,
                )
                for row in result
            ]

    def delete(self, session_id: str) -> bool:
        with self.engine.begin() as conn:
            result = conn.execute(session_table.delete().where(session_table.c.id == session_id))
        return result.rowcount > 0
