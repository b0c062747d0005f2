"""Import engine: load, diff, check policy, apply, finalize.

The engine owns the order of stages and the error policy. Records rejected
by the target (``RecordError``) are reported through the ``error`` event and
skipped; every other failure aborts the run and propagates to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from recordsync.domain.errors import (
    ApplyError,
    ImportServiceError,
    LoadError,
    PolicyViolationError,
)

from .events import ImportEvents
from .outcome import FatalFailure, RecoverableFailure

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from recordsync.domain.model import ChangeSet, ReadinessResult, RecordSet
    from recordsync.domain.preset import Preset

    from .outcome import ApplyOutcome

log = getLogger(__name__)


class ImportStage(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    COMPUTING_CHANGES = "computing_changes"
    VALIDATING_POLICY = "validating_policy"
    ADDING = "adding"
    UPDATING = "updating"
    REMOVING = "removing"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True, kw_only=True)
class ImportResult:
    """Counts of an import run."""

    change_set: ChangeSet
    added: int = 0
    updated: int = 0
    removed: int = 0
    errors: list[str] = field(default_factory=list)


class ImportService:
    """Run imports for one preset."""

    def __init__(self, preset: Preset, *, events: ImportEvents | None = None) -> None:
        self.preset = preset
        self.events = events or ImportEvents()
        self._stage = ImportStage.IDLE

    @property
    def stage(self) -> ImportStage:
        return self._stage

    def setup(self) -> ReadinessResult:
        return self.preset.setup()

    def import_data(self, *, force_updates: bool = False) -> ImportResult:
        try:
            return self._run(force_updates=force_updates)
        except BaseException:
            self._enter(ImportStage.FAILED)
            raise

    def remove_all_data(self) -> int:
        """Delete every record of the target."""

        options = self.preset.options
        if options.skip_added_records or options.skip_removed_records:
            raise PolicyViolationError(
                "This preset is configured to skip added or removed records, "
                "removing all data is not allowed"
            )
        try:
            removed = self.preset.remove_all()
        except Exception as exc:
            raise ApplyError(f"Error while removing all records: {exc}") from exc
        log.info("Removed %d records", removed)
        return removed

    def _enter(self, stage: ImportStage) -> None:
        log.debug("Import stage %s -> %s", self._stage, stage)
        self._stage = stage

    def _run(self, *, force_updates: bool) -> ImportResult:
        records = self._load()

        self._enter(ImportStage.COMPUTING_CHANGES)
        try:
            change_set = self.preset.compute_changes(records, force_updates)
        except Exception as exc:
            raise ImportServiceError(f"Error while computing changes: {exc}") from exc
        counts = change_set.summary()
        log.info(
            "Computed changes: %d added, %d updated, %d removed",
            counts["added"],
            counts["updated"],
            counts["removed"],
        )
        self.events.changes_computed.emit(change_set)

        self._enter(ImportStage.VALIDATING_POLICY)
        self._check_policy(change_set)

        result = ImportResult(change_set=change_set)
        events = self.events

        if change_set.has_additions():
            self._enter(ImportStage.ADDING)
            events.add_started.emit(change_set.added)
            result.added = self._apply(
                change_set.added,
                announce=events.record_adding.emit,
                operation=self.preset.add_record,
                describe=lambda record: f'Error while adding record "{record.id}"',
                errors=result.errors,
            )
            events.add_finished.emit()

        if change_set.has_updates():
            self._enter(ImportStage.UPDATING)
            events.update_started.emit(change_set.updated, force_updates)
            result.updated = self._apply(
                change_set.updated,
                announce=events.record_updating.emit,
                operation=self.preset.update_record,
                describe=lambda record: f'Error while updating record "{record.id}"',
                errors=result.errors,
            )
            events.update_finished.emit()

        if change_set.has_removals():
            self._enter(ImportStage.REMOVING)
            events.remove_started.emit(change_set.removed_ids)
            result.removed = self._apply(
                change_set.removed_ids,
                announce=events.record_removing.emit,
                operation=self.preset.remove_record,
                describe=lambda record_id: f'Error while removing record "{record_id}"',
                errors=result.errors,
            )
            events.remove_finished.emit()

        self._enter(ImportStage.FINALIZING)
        try:
            self.preset.finalize()
        except Exception as exc:
            raise ApplyError(f"Error while finalizing import: {exc}") from exc

        self._enter(ImportStage.DONE)
        return result

    def _load(self) -> RecordSet:
        self._enter(ImportStage.LOADING)
        self.events.load_started.emit()
        try:
            records = self.preset.load()
        except Exception as exc:
            raise LoadError(f"Error while loading data: {exc}") from exc
        log.debug("Loaded %d records", len(records))
        self.events.load_finished.emit(records)
        return records

    def _check_policy(self, change_set: ChangeSet) -> None:
        options = self.preset.options
        counts = change_set.summary()
        if options.skip_added_records and change_set.has_additions():
            raise PolicyViolationError(
                "This preset is configured to skip added records, but the data target "
                f"returned new records (added: {counts['added']}, "
                f"updated: {counts['updated']}, removed: {counts['removed']})"
            )
        if options.skip_removed_records and change_set.has_removals():
            raise PolicyViolationError(
                "This preset is configured to skip removed records, but the data target "
                f"returned removed records (added: {counts['added']}, "
                f"updated: {counts['updated']}, removed: {counts['removed']})"
            )

    def _apply[T](
        self,
        items: Iterable[T],
        *,
        announce: Callable[[T], None],
        operation: Callable[[T], ApplyOutcome],
        describe: Callable[[T], str],
        errors: list[str],
    ) -> int:
        applied = 0
        for item in items:
            announce(item)
            outcome = operation(item)
            match outcome:
                case RecoverableFailure(reason=reason):
                    message = f"{describe(item)}: {reason}"
                    log.warning("%s", message)
                    errors.append(message)
                    self.events.error.emit(message)
                case FatalFailure(reason=reason, error=error):
                    raise ApplyError(f"{describe(item)}: {reason}") from error
                case _:
                    applied += 1
        return applied
