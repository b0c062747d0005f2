from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import insert, select

from recordsync.adapters.sqlalchemy import (
    SqlAlchemyTarget,
    SqlAlchemyTargetFactory,
    SqlTargetOptions,
    reflect_table,
)
from recordsync.domain.errors import RecordError
from recordsync.domain.mapping import Mapper
from recordsync.domain.model import RecordId, RecordSet
from recordsync.domain.preset import Preset
from recordsync.domain.reconciliation.engine import ImportService
from tests.helpers.records import FakeSource, make_record

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

MAPPING = {"full_name": "name", "email": "email"}


def _rows(engine: Engine) -> dict[str, dict[str, object]]:
    table = reflect_table(engine, "contacts")
    with engine.connect() as connection:
        return {row.id: dict(row._mapping) for row in connection.execute(select(table))}


def _target(engine: Engine, **kwargs: object) -> SqlAlchemyTarget:
    return SqlAlchemyTarget(
        Mapper(MAPPING),
        engine,
        "contacts",
        version_column="version",
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.fixture
def contacts(sqlite_engine: Engine) -> Engine:
    table = reflect_table(sqlite_engine, "contacts")
    with sqlite_engine.begin() as connection:
        connection.execute(
            insert(table),
            [
                {"id": "A", "full_name": "Ada", "email": "a@x", "version": 1, "hidden": False},
                {"id": "B", "full_name": "Bob", "email": "b@x", "version": 5, "hidden": False},
                {"id": "C", "full_name": "Cy", "email": "c@x", "version": 1, "hidden": False},
                {"id": "H", "full_name": "Hal", "email": "h@x", "version": 1, "hidden": True},
            ],
        )
    return sqlite_engine


def test_import_adds_updates_and_removes_rows(contacts: Engine) -> None:
    source = FakeSource(
        RecordSet(
            [
                make_record("A", 1, name="Ada", email="a@x"),
                make_record("B", 6, name="Bobby", email="b@x"),
                make_record("D", 1, name="Dee", email="d@x"),
                make_record("H", 1, name="Hal", email="h@x"),
            ]
        )
    )
    service = ImportService(Preset(source, _target(contacts)))

    result = service.import_data()

    rows = _rows(contacts)
    assert (result.added, result.updated, result.removed) == (1, 1, 1)
    assert set(rows) == {"A", "B", "D", "H"}
    assert rows["B"]["full_name"] == "Bobby"
    assert rows["B"]["version"] == 6
    assert rows["D"]["full_name"] == "Dee"


def test_rejected_row_does_not_spoil_batch(contacts: Engine) -> None:
    source = FakeSource(
        RecordSet(
            [
                make_record("X", 1, name="Dup", email="a@x"),
                make_record("Y", 1, name="Yves", email="y@x"),
            ]
        )
    )
    target = _target(contacts)
    preset = Preset(source, target)
    service = ImportService(preset)

    result = service.import_data()

    rows = _rows(contacts)
    assert result.added == 1
    assert len(result.errors) == 1
    assert result.errors[0].startswith('Error while adding record "X"')
    assert "X" not in rows
    assert rows["Y"]["full_name"] == "Yves"


def test_batches_are_committed(contacts: Engine) -> None:
    target = _target(contacts, batch_size=2)
    target.compute_changes(RecordSet(), False, False, False)

    target.add_record(make_record("P", 1, name="P", email="p@x"))
    target.add_record(make_record("Q", 1, name="Q", email="q@x"))
    target.add_record(make_record("R", 1, name="R", email="r@x"))

    committed = _rows(contacts)
    assert "P" in committed
    assert "Q" in committed
    assert "R" not in committed

    target.finalize()
    assert "R" in _rows(contacts)



def test_next_run_rolls_back_writes_of_an_aborted_run(contacts: Engine) -> None:
    target = _target(contacts)
    target.compute_changes(RecordSet(), False, False, False)
    target.add_record(make_record("P", 1, name="P", email="p@x"))

    change_set = target.compute_changes(
        RecordSet([make_record("A", 1, name="Ada", email="a@x")]), False, False, False
    )
    target.finalize()

    assert set(change_set.removed_ids) == {RecordId("B"), RecordId("C"), RecordId("H")}
    assert "P" not in _rows(contacts)


def test_soft_delete_hides_and_revives_rows(contacts: Engine) -> None:
    target = _target(contacts, soft_delete_column="hidden")
    source = FakeSource(
        RecordSet(
            [
                make_record("A", 1, name="Ada", email="a@x"),
                make_record("B", 5, name="Bob", email="b@x"),
                make_record("H", 2, name="Hal", email="h@x"),
            ]
        )
    )

    result = ImportService(Preset(source, target)).import_data()

    rows = _rows(contacts)
    assert result.change_set.added.is_empty()
    assert list(result.change_set.removed_ids) == [RecordId("C")]
    assert rows["C"]["hidden"] is True
    assert rows["H"]["hidden"] is False


def test_update_of_missing_row_is_rejected(contacts: Engine) -> None:
    target = _target(contacts)

    with pytest.raises(RecordError, match="does not exist"):
        target.update_record(make_record("missing", 1, name="N", email="n@x"))
    target.finalize()


def test_remove_all_deletes_every_row(contacts: Engine) -> None:
    assert _target(contacts).remove_all() == 4
    assert _rows(contacts) == {}


def test_setup_checks_table_and_columns(contacts: Engine) -> None:
    ready = _target(contacts, soft_delete_column="hidden").setup()
    assert not ready.has_errors()
    assert ready.notices == ['Target table "contacts" exists']

    target = SqlAlchemyTarget(Mapper({"nickname": "name"}), contacts, "contacts")
    assert target.setup().errors == ['Column "nickname" does not exist in "contacts"']

    missing = SqlAlchemyTarget(Mapper(MAPPING), contacts, "nope").setup()
    assert missing.errors == ['Target table "nope" does not exist']


def test_factory_uses_configured_batch_size(
    monkeypatch: pytest.MonkeyPatch, contacts: Engine, database_url: str
) -> None:
    monkeypatch.setenv("RECORDSYNC_BATCH_SIZE", "7")
    factory = SqlAlchemyTargetFactory()

    default = factory.create(Mapper(MAPPING), SqlTargetOptions(url=database_url, table="contacts"))
    explicit = factory.create(
        Mapper(MAPPING), SqlTargetOptions(url=database_url, table="contacts", batch_size=3)
    )

    assert default.batch_size == 7
    assert explicit.batch_size == 3
    assert len(default.snapshot.ids) == 4
    default.finalize()
