"""Ports for the two ends of an import: where records come from and where they go."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from recordsync.domain.model import (
        ChangeSet,
        DataRecord,
        ReadinessResult,
        RecordId,
        RecordSet,
    )


@runtime_checkable
class Source(Protocol):
    """Produces the candidate record set of a run."""

    def load(self) -> RecordSet: ...

    def setup(self) -> ReadinessResult: ...


@runtime_checkable
class Target(Protocol):
    """Local store that computes and applies changes.

    ``add_record``, ``update_record`` and ``remove_record`` raise
    :class:`~recordsync.domain.errors.RecordError` for problems caused by a
    single record's data; any other exception is fatal for the run.
    """

    def compute_changes(
        self,
        candidates: RecordSet,
        force_updates: bool,
        skip_added: bool,
        skip_removed: bool,
    ) -> ChangeSet: ...

    def add_record(self, record: DataRecord) -> None: ...

    def update_record(self, record: DataRecord) -> None: ...

    def remove_record(self, record_id: RecordId) -> None: ...

    def remove_all(self) -> int: ...

    def finalize(self) -> None: ...

    def setup(self) -> ReadinessResult: ...


__all__ = ["Source", "Target"]
