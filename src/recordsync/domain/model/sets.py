"""Immutable, insertion-ordered collections of records and identifiers."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from .identity import RecordId, RecordVersion
from .records import DataRecord, Record

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping


class IdSet:
    """Ordered set of record identifiers."""

    __slots__ = ("_ids",)

    def __init__(self, ids: Iterable[RecordId] = ()) -> None:
        self._ids: dict[RecordId, None] = dict.fromkeys(ids)

    @classmethod
    def empty(cls) -> IdSet:
        return cls()

    @classmethod
    def from_strings(cls, values: Iterable[object]) -> IdSet:
        return cls(_record_id(value) for value in values)

    def has(self, record_id: RecordId) -> bool:
        return record_id in self._ids

    def diff(self, other: IdSet) -> IdSet:
        """Return the ids of this set that are not in ``other``."""

        return IdSet(record_id for record_id in self._ids if record_id not in other._ids)

    def with_id(self, record_id: RecordId) -> IdSet:
        if record_id in self._ids:
            return self
        return IdSet((*self._ids, record_id))

    def is_empty(self) -> bool:
        return not self._ids

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    def __iter__(self) -> Iterator[RecordId]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdSet):
            return NotImplemented
        return self._ids.keys() == other._ids.keys()

    def __hash__(self) -> int:
        return hash(frozenset(self._ids))

    def __repr__(self) -> str:
        return f"IdSet([{', '.join(repr(str(record_id)) for record_id in self._ids)}])"


class RecordSet:
    """Ordered collection of records keyed by id; the first record for an id wins."""

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[DataRecord] = ()) -> None:
        keyed: dict[RecordId, DataRecord] = {}
        for record in records:
            keyed.setdefault(record.id, record)
        self._records: Mapping[RecordId, DataRecord] = MappingProxyType(keyed)

    @classmethod
    def empty(cls) -> RecordSet:
        return cls()

    @classmethod
    def from_records(cls, records: Iterable[object]) -> RecordSet:
        checked: list[DataRecord] = []
        for record in records:
            if not isinstance(record, DataRecord):
                raise TypeError(
                    f"Expected a record, got {type(record).__name__}"
                )
            checked.append(record)
        return cls(checked)

    @classmethod
    def from_raw_rows(
        cls,
        rows: Iterable[Mapping[str, object]],
        id_attribute: str,
        version_attribute: str | None = None,
    ) -> RecordSet:
        """Build eager records from plain rows.

        Raises ``ValueError`` when a row has no id, or no version while a
        version attribute is named. ``None`` counts as missing.
        """

        records: list[DataRecord] = []
        for position, row in enumerate(rows):
            raw_id = row.get(id_attribute)
            if raw_id is None:
                raise ValueError(f'Row {position} has no id attribute "{id_attribute}"')
            version = RecordVersion.none()
            if version_attribute is not None:
                raw_version = row.get(version_attribute)
                if raw_version is None:
                    raise ValueError(
                        f'Row {position} has no version attribute "{version_attribute}"'
                    )
                version = RecordVersion.parse(raw_version)
            records.append(Record.create(_record_id(raw_id), row, version))
        return cls(records)

    def with_record(self, record: DataRecord) -> RecordSet:
        if record.id in self._records:
            return self
        return RecordSet((*self._records.values(), record))

    def has_record(self, record: DataRecord) -> bool:
        return self._records.get(record.id) is record

    def has_record_with_id(self, record_id: RecordId) -> bool:
        return record_id in self._records

    def get(self, record_id: RecordId) -> DataRecord | None:
        return self._records.get(record_id)

    def ids(self) -> IdSet:
        return IdSet(self._records)

    def filter(self, predicate: Callable[[DataRecord], bool]) -> RecordSet:
        return RecordSet(record for record in self._records.values() if predicate(record))

    def map(self, transform: Callable[[DataRecord], DataRecord]) -> RecordSet:
        """Apply ``transform`` to each record; results are keyed by their new id."""

        return RecordSet(transform(record) for record in self._records.values())

    def is_empty(self) -> bool:
        return not self._records

    def as_list(self) -> list[DataRecord]:
        return list(self._records.values())

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __iter__(self) -> Iterator[DataRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"RecordSet(<{len(self._records)} records>)"


def _record_id(raw: object) -> RecordId:
    if isinstance(raw, RecordId):
        return raw
    if isinstance(raw, str | int):
        return RecordId.of(raw)
    return RecordId(str(raw))
