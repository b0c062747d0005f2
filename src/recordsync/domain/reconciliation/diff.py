"""Computation of the minimal change set between candidates and a local snapshot."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from recordsync.domain.model import ChangeSet, IdSet, RecordSet

if TYPE_CHECKING:
    from collections.abc import Mapping

    from recordsync.domain.model import (
        DataRecord,
        ReadinessResult,
        RecordId,
        RecordVersion,
    )

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocalSnapshot:
    """What a target already holds.

    ``ids`` are all known local ids; ``active_ids`` are the ids that may be
    removed (soft-deleted rows are known but inactive). ``active_ids``
    defaults to ``ids``.
    """

    ids: IdSet = field(default_factory=IdSet.empty)
    versions: Mapping[RecordId, RecordVersion] = field(default_factory=dict)
    active_ids: IdSet | None = None

    @property
    def removable_ids(self) -> IdSet:
        return self.ids if self.active_ids is None else self.active_ids


def compute_changes(
    candidates: RecordSet,
    snapshot: LocalSnapshot,
    *,
    force_updates: bool,
    skip_added: bool,
    skip_removed: bool,
) -> ChangeSet:
    """Split ``candidates`` into added and updated records and find removed ids.

    A known record is updated when updates are forced, when either side has
    no version, or when the candidate version is strictly higher.
    """

    added: list[DataRecord] = []
    updated: list[DataRecord] = []
    for record in candidates:
        if not snapshot.ids.has(record.id):
            if not skip_added:
                added.append(record)
            continue
        if force_updates or _is_newer(record, snapshot.versions.get(record.id)):
            updated.append(record)

    removed_ids = IdSet.empty() if skip_removed else snapshot.removable_ids.diff(candidates.ids())
    return ChangeSet(added=RecordSet(added), updated=RecordSet(updated), removed_ids=removed_ids)


def _is_newer(record: DataRecord, local_version: RecordVersion | None) -> bool:
    if record.version.is_not_set() or local_version is None or local_version.is_not_set():
        return True
    return record.version.is_higher_than(local_version)


class SnapshotTarget(ABC):
    """Base class for targets that diff against a snapshot fetched once per run.

    Every call to :meth:`compute_changes` starts a run and reads a fresh
    snapshot, so a target reused after an aborted run never diffs against
    stale ids.
    """

    def __init__(self) -> None:
        self._snapshot: LocalSnapshot | None = None

    @abstractmethod
    def fetch_snapshot(self) -> LocalSnapshot:
        """Read ids and versions of the locally stored records."""

    @property
    def snapshot(self) -> LocalSnapshot:
        if self._snapshot is None:
            return self.refresh_snapshot()
        return self._snapshot

    def refresh_snapshot(self) -> LocalSnapshot:
        self._snapshot = self.fetch_snapshot()
        log.debug("Fetched local snapshot with %d ids", len(self._snapshot.ids))
        return self._snapshot

    def compute_changes(
        self,
        candidates: RecordSet,
        force_updates: bool,
        skip_added: bool,
        skip_removed: bool,
    ) -> ChangeSet:
        return compute_changes(
            candidates,
            self.refresh_snapshot(),
            force_updates=force_updates,
            skip_added=skip_added,
            skip_removed=skip_removed,
        )

    def finalize(self) -> None:
        self._snapshot = None

    @abstractmethod
    def add_record(self, record: DataRecord) -> None: ...

    @abstractmethod
    def update_record(self, record: DataRecord) -> None: ...

    @abstractmethod
    def remove_record(self, record_id: RecordId) -> None: ...

    @abstractmethod
    def remove_all(self) -> int: ...

    @abstractmethod
    def setup(self) -> ReadinessResult: ...
