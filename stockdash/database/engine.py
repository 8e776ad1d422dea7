import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from stockdash.config import Settings, get_settings

app_settings: Settings = get_settings()

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


def _is_sqlite_memory(url) -> bool:
    sqlite_db = url.database
    if sqlite_db in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def build_engine(database_url: str):
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    is_memory = is_sqlite and _is_sqlite_memory(url)

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if is_memory:
            engine_kwargs.update(poolclass=StaticPool)

    new_engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
                if not is_memory:
                    try:
                        cursor.execute("PRAGMA journal_mode=WAL")
                        cursor.execute("PRAGMA synchronous=NORMAL")
                    except sqlite3.DatabaseError:
                        pass
            finally:
                cursor.close()

    return new_engine


engine = build_engine(app_settings.DATABASE_URL)
