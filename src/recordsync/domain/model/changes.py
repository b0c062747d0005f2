"""The delta between candidate records and a local snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field

from .sets import IdSet, RecordSet


@dataclass(frozen=True, slots=True)
class ChangeSet:
    added: RecordSet = field(default_factory=RecordSet.empty)
    updated: RecordSet = field(default_factory=RecordSet.empty)
    removed_ids: IdSet = field(default_factory=IdSet.empty)

    def has_additions(self) -> bool:
        return not self.added.is_empty()

    def has_updates(self) -> bool:
        return not self.updated.is_empty()

    def has_removals(self) -> bool:
        return not self.removed_ids.is_empty()

    def is_empty(self) -> bool:
        return not (self.has_additions() or self.has_updates() or self.has_removals())

    def summary(self) -> dict[str, int]:
        return {
            "added": len(self.added),
            "updated": len(self.updated),
            "removed": len(self.removed_ids),
        }
