"""Value model of records, record collections and change sets."""

from __future__ import annotations

from .changes import ChangeSet
from .sets import IdSet, RecordSet
from .identity import RecordId, RecordVersion
from .readiness import ReadinessMessage, ReadinessResult, Severity
from .records import DataRecord, LazyRecord, Record, RecordLoader

__all__ = [
    "ChangeSet",
    "DataRecord",
    "IdSet",
    "LazyRecord",
    "ReadinessMessage",
    "ReadinessResult",
    "Record",
    "RecordId",
    "RecordLoader",
    "RecordSet",
    "RecordVersion",
    "Severity",
]
