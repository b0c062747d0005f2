from __future__ import annotations

from typing import TYPE_CHECKING

from recordsync.adapters.callable import (
    CallableSource,
    CallableSourceFactory,
    CallableSourceOptions,
)
from recordsync.domain.model import RecordId, RecordSet
from tests.helpers.records import make_record

if TYPE_CHECKING:
    from collections.abc import Mapping


def load_rows(options: Mapping[str, object]) -> list[dict[str, object]]:
    return [{"key": "k1", "region": options["region"]}]


def test_loader_receives_options_and_may_return_rows() -> None:
    source = CallableSource(load_rows, {"region": "eu", "id_attribute": "key"})

    records = source.load()

    record = records.get(RecordId("k1"))
    assert record is not None
    assert record["region"] == "eu"


def test_loader_may_return_record_set_and_be_replaced() -> None:
    expected = RecordSet([make_record("a")])
    source = CallableSource(lambda _options: RecordSet.empty())

    source.replace_loader(lambda _options: expected)

    assert source.load() is expected
    assert not source.setup().has_errors()


def test_factory_imports_loader_and_passes_extra_options() -> None:
    options = CallableSourceOptions.model_validate(
        {
            "loader": "tests.adapters.connectors.test_callable_source:load_rows",
            "region": "us",
            "id_attribute": "key",
        }
    )

    source = CallableSourceFactory().create(options)

    assert source.options == {"region": "us", "id_attribute": "key"}
    assert [record["region"] for record in source.load()] == ["us"]
