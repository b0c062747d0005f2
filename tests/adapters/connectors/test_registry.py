from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from recordsync.adapters import registry
from recordsync.adapters.file import FileSource
from recordsync.adapters.sqlalchemy import SqlAlchemyTarget
from recordsync.config.errors import ConfigurationError, InvalidOptionsError
from recordsync.config.options import OptionsModel
from recordsync.domain.mapping import Mapper
from tests.helpers.records import FakeSource

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine


def test_create_source_validates_options(records_file: Path) -> None:
    source = registry.create_source("file", {"file_path": str(records_file)})

    assert isinstance(source, FileSource)


def test_unknown_options_are_rejected(records_file: Path) -> None:
    with pytest.raises(InvalidOptionsError, match='option "colour" is not supported'):
        registry.create_source("file", {"file_path": str(records_file), "colour": "red"})


def test_missing_options_are_reported() -> None:
    with pytest.raises(InvalidOptionsError, match='missing required option "endpoint"'):
        registry.create_source("http", {})


def test_unknown_factory_names_are_rejected() -> None:
    with pytest.raises(ConfigurationError, match='Unknown source factory "ftp"'):
        registry.create_source("ftp", {})
    with pytest.raises(ConfigurationError, match='Unknown target factory "cms"'):
        registry.create_target("cms", Mapper({}), {})


def test_create_target(sqlite_engine: Engine, database_url: str) -> None:
    target = registry.create_target(
        "sql", Mapper({"name": "name"}), {"url": database_url, "table": "people"}
    )

    assert isinstance(target, SqlAlchemyTarget)
    assert target.table_name == "people"


def test_custom_source_factories_can_be_registered(monkeypatch: pytest.MonkeyPatch) -> None:
    class StaticOptions(OptionsModel):
        label: str

    class StaticFactory:
        options_model = StaticOptions

        def create(self, options: StaticOptions) -> FakeSource:
            assert options.label == "demo"
            return FakeSource()

    monkeypatch.setattr(registry, "_SOURCE_FACTORIES", dict(registry._SOURCE_FACTORIES))  # noqa: SLF001
    registry.register_source_factory("static", StaticFactory())

    assert isinstance(registry.create_source("static", {"label": "demo"}), FakeSource)
    assert "static" in registry.source_factory_names()
