"""Engine construction and table reflection shared by the SQL connectors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import MetaData, Table, create_engine, event

from recordsync.config.env import require_env_var

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

DATABASE_URL_ENV_VAR = "RECORDSYNC_DATABASE_URL"


def create_database_engine(url: str | None = None) -> Engine:
    """Create an engine for ``url`` (or ``RECORDSYNC_DATABASE_URL``).

    pysqlite does not emit BEGIN itself, which breaks SAVEPOINT handling;
    for SQLite the transaction start is therefore issued explicitly.
    """

    resolved_url = url or require_env_var(DATABASE_URL_ENV_VAR)
    engine = create_engine(resolved_url, future=True)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(engine)
    return engine


def _enable_sqlite_savepoints(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection: object, _record: object) -> None:
        dbapi_connection.isolation_level = None  # type: ignore[attr-defined]

    @event.listens_for(engine, "begin")
    def _emit_begin(connection: Connection) -> None:
        connection.exec_driver_sql("BEGIN")


def reflect_table(engine: Engine, name: str) -> Table:
    return Table(name, MetaData(), autoload_with=engine)
