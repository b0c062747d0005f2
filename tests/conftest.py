from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import Boolean, Column, Integer, MetaData, String, Table, text
from sqlalchemy.engine import Engine  # noqa: TC002

from recordsync.adapters.sqlalchemy import create_database_engine

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RECORDSYNC_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("RECORDSYNC_DATABASE_URL", raising=False)
    monkeypatch.delenv("RECORDSYNC_BATCH_SIZE", raising=False)
    monkeypatch.delenv("RECORDSYNC_PRESETS_FILE", raising=False)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+pysqlite:///{tmp_path / 'records.db'}"


@pytest.fixture
def sqlite_engine(database_url: str) -> Iterator[Engine]:
    engine = create_database_engine(database_url)
    metadata = MetaData()
    Table(
        "people",
        metadata,
        Column("id", String, primary_key=True),
        Column("name", String, nullable=False),
        Column("email", String, unique=True),
        Column("updated", Integer),
    )
    Table(
        "contacts",
        metadata,
        Column("id", String, primary_key=True),
        Column("full_name", String, nullable=False),
        Column("email", String, unique=True),
        Column("version", Integer),
        Column("hidden", Boolean, nullable=False, server_default=text("0")),
    )
    metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def records_file(tmp_path: Path) -> Path:
    path = tmp_path / "people.json"
    path.write_text(
        json.dumps(
            [
                {"id": "1", "name": "Ada", "email": "ada@example.com", "updated": 10},
                {"id": "2", "name": "Grace", "email": "grace@example.com", "updated": 20},
            ]
        )
    )
    return path
