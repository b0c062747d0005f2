"""A preset ties one source and one target together with import options."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from recordsync.domain.model import RecordSet
from recordsync.domain.reconciliation.outcome import attempt

if TYPE_CHECKING:
    from collections.abc import Callable

    from recordsync.domain.model import (
        ChangeSet,
        DataRecord,
        ReadinessResult,
        RecordId,
    )
    from recordsync.domain.ports import Source, Target
    from recordsync.domain.reconciliation.outcome import ApplyOutcome

type DataProcessor = Callable[[RecordSet], RecordSet]


@dataclass(frozen=True, slots=True, kw_only=True)
class PresetOptions:
    skip_added_records: bool = False
    skip_removed_records: bool = False
    data_processor: DataProcessor | None = None


@dataclass(frozen=True, slots=True)
class Preset:
    source: Source
    target: Target
    options: PresetOptions = field(default_factory=PresetOptions)

    def with_source(self, source: Source) -> Preset:
        return replace(self, source=source)

    def load(self) -> RecordSet:
        """Load candidates from the source and run the data processor over them."""

        records = self.source.load()
        processor = self.options.data_processor
        if processor is None:
            return records
        processed = processor(records)
        if not isinstance(processed, RecordSet):
            raise TypeError(
                f"Data processor must return a RecordSet, got {type(processed).__name__}"
            )
        return processed

    def compute_changes(self, candidates: RecordSet, force_updates: bool) -> ChangeSet:
        return self.target.compute_changes(
            candidates,
            force_updates,
            self.options.skip_added_records,
            self.options.skip_removed_records,
        )

    def add_record(self, record: DataRecord) -> ApplyOutcome:
        return attempt(lambda: self.target.add_record(record))

    def update_record(self, record: DataRecord) -> ApplyOutcome:
        return attempt(lambda: self.target.update_record(record))

    def remove_record(self, record_id: RecordId) -> ApplyOutcome:
        return attempt(lambda: self.target.remove_record(record_id))

    def remove_all(self) -> int:
        return self.target.remove_all()

    def finalize(self) -> None:
        self.target.finalize()

    def setup(self) -> ReadinessResult:
        return self.source.setup().merge(self.target.setup())
