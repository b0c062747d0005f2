"""Error taxonomy of an import run.

Only :class:`RecordError` is absorbed by the engine (reported through the
error event, record skipped). Every other error aborts the run and reaches
the caller with its cause chain intact.
"""

from __future__ import annotations


class ImportServiceError(RuntimeError):
    """Fatal failure of an import run."""


class LoadError(ImportServiceError):
    """The source failed to produce a record set."""


class PolicyViolationError(ImportServiceError):
    """The computed changes contradict the preset's skip policy.

    This is a configuration problem: the preset claims records are never
    added (or removed) but the data says otherwise.
    """


class ApplyError(ImportServiceError):
    """A target operation failed in a way not attributable to a single record."""


class RecordError(Exception):
    """A single record was rejected because of its own data.

    Connectors and mappers raise this for validation problems; the engine
    skips the record and continues with the next one.
    """


class RecordLoadError(RuntimeError):
    """Deferred materialization of a lazy record failed."""
