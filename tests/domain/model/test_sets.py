from __future__ import annotations

import pytest

from recordsync.domain.model import IdSet, Record, RecordId, RecordSet, RecordVersion
from tests.helpers.records import make_record


@pytest.fixture
def records() -> RecordSet:
    return RecordSet(
        [
            make_record("a", 1, kind="x"),
            make_record("b", 2, kind="y"),
            make_record("c", 3, kind="x"),
        ]
    )


def test_record_set_keeps_insertion_order(records: RecordSet) -> None:
    assert [record.id.value for record in records] == ["a", "b", "c"]
    assert len(records) == 3
    assert not records.is_empty()
    assert RecordSet.empty().is_empty()


def test_record_set_first_record_wins_for_duplicate_ids() -> None:
    first = make_record("a", name="first")
    second = make_record("a", name="second")

    records = RecordSet([first, second])

    assert len(records) == 1
    assert records.get(RecordId("a")) is first


def test_with_record_is_idempotent(records: RecordSet) -> None:
    duplicate = make_record("a", name="other")

    assert records.with_record(duplicate) is records
    extended = records.with_record(make_record("d"))
    assert extended.has_record_with_id(RecordId("d"))
    assert not records.has_record_with_id(RecordId("d"))


def test_has_record_checks_identity(records: RecordSet) -> None:
    stored = records.get(RecordId("a"))
    assert stored is not None

    assert records.has_record(stored)
    assert not records.has_record(make_record("a", 1, kind="x"))
    assert RecordId("b") in records


def test_filter_identities(records: RecordSet) -> None:
    assert records.filter(lambda _record: True).as_list() == records.as_list()
    assert records.filter(lambda _record: False).is_empty()
    assert [record.id.value for record in records.filter(lambda r: r["kind"] == "x")] == [
        "a",
        "c",
    ]


def test_map_rekeys_by_new_id(records: RecordSet) -> None:
    mapped = records.map(lambda record: record.with_id(RecordId(f"new-{record.id}")))

    assert [record_id.value for record_id in mapped.ids()] == ["new-a", "new-b", "new-c"]


def test_map_keeps_first_result_on_collision(records: RecordSet) -> None:
    mapped = records.map(lambda record: record.with_id(RecordId("same")))

    assert len(mapped) == 1
    only = mapped.get(RecordId("same"))
    assert only is not None
    assert only.version == RecordVersion.from_number(1)


def test_from_records_rejects_non_records() -> None:
    with pytest.raises(TypeError, match="Expected a record"):
        RecordSet.from_records([make_record("a"), {"id": "b"}])


def test_from_raw_rows_round_trips_ids() -> None:
    rows = [
        {"id": 1, "name": "first", "updated": 10},
        {"id": "2", "name": "second", "updated": "20"},
        {"id": 1, "name": "duplicate", "updated": 30},
    ]

    records = RecordSet.from_raw_rows(rows, "id", "updated")

    assert [record_id.value for record_id in records.ids()] == ["1", "2"]
    first = records.get(RecordId("1"))
    assert first is not None
    assert first["name"] == "first"
    assert first.version == RecordVersion.from_number(10)
    assert isinstance(first, Record)


def test_from_raw_rows_without_version_attribute_leaves_version_unset() -> None:
    records = RecordSet.from_raw_rows([{"id": "a"}], "id")

    record = records.get(RecordId("a"))
    assert record is not None
    assert record.version.is_not_set()


@pytest.mark.parametrize("row", [{"name": "no id"}, {"id": None}])
def test_from_raw_rows_requires_id(row: dict[str, object]) -> None:
    with pytest.raises(ValueError, match="no id attribute"):
        RecordSet.from_raw_rows([row], "id")


def test_from_raw_rows_requires_named_version() -> None:
    with pytest.raises(ValueError, match="no version attribute"):
        RecordSet.from_raw_rows([{"id": "a", "updated": None}], "id", "updated")


def test_id_set_diff_laws() -> None:
    left = IdSet.from_strings(["a", "b", "c"])
    right = IdSet.from_strings(["b", "d"])

    assert list(left.diff(right)) == [RecordId("a"), RecordId("c")]
    assert left.diff(left).is_empty()
    assert left.diff(IdSet.empty()) == left
    assert all(record_id not in right for record_id in left.diff(right))


def test_id_set_membership_and_growth() -> None:
    ids = IdSet.from_strings(["a", 2])

    assert ids.has(RecordId("2"))
    assert RecordId("a") in ids
    assert ids.with_id(RecordId("a")) is ids
    assert len(ids.with_id(RecordId("z"))) == 3
    assert len(ids) == 2
