"""SQLAlchemy connectors: a table source and a table target."""

from __future__ import annotations

from .engine import DATABASE_URL_ENV_VAR, create_database_engine, reflect_table
from .source import SqlAlchemySource, SqlAlchemySourceFactory, SqlSourceOptions
from .target import SqlAlchemyTarget, SqlAlchemyTargetFactory, SqlTargetOptions

__all__ = [
    "DATABASE_URL_ENV_VAR",
    "SqlAlchemySource",
    "SqlAlchemySourceFactory",
    "SqlAlchemyTarget",
    "SqlAlchemyTargetFactory",
    "SqlSourceOptions",
    "SqlTargetOptions",
    "create_database_engine",
    "reflect_table",
]
