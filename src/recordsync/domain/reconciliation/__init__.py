"""Change computation and the import engine."""

from __future__ import annotations

from .diff import LocalSnapshot, SnapshotTarget, compute_changes
from .engine import ImportResult, ImportService, ImportStage
from .events import Channel, ImportEvents
from .outcome import (
    Applied,
    ApplyOutcome,
    FatalFailure,
    OutcomeStatus,
    RecoverableFailure,
    attempt,
)

__all__ = [
    "Applied",
    "ApplyOutcome",
    "Channel",
    "FatalFailure",
    "ImportEvents",
    "ImportResult",
    "ImportService",
    "ImportStage",
    "LocalSnapshot",
    "OutcomeStatus",
    "RecoverableFailure",
    "SnapshotTarget",
    "attempt",
    "compute_changes",
]
