"""Per-record results of applying a change to a target."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from recordsync.domain.errors import RecordError

if TYPE_CHECKING:
    from collections.abc import Callable


class OutcomeStatus(StrEnum):
    APPLIED = "applied"
    RECOVERABLE = "recoverable"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class Applied:
    status: Literal[OutcomeStatus.APPLIED] = OutcomeStatus.APPLIED


@dataclass(frozen=True, slots=True, kw_only=True)
class RecoverableFailure:
    """The record was rejected; the run continues with the next record."""

    reason: str
    error: Exception
    status: Literal[OutcomeStatus.RECOVERABLE] = OutcomeStatus.RECOVERABLE


@dataclass(frozen=True, slots=True, kw_only=True)
class FatalFailure:
    """The target can no longer be trusted; the run aborts."""

    reason: str
    error: Exception
    status: Literal[OutcomeStatus.FATAL] = OutcomeStatus.FATAL


type ApplyOutcome = Applied | RecoverableFailure | FatalFailure


def attempt(operation: Callable[[], object]) -> ApplyOutcome:
    """Run ``operation`` and classify how it ended."""

    try:
        operation()
    except RecordError as exc:
        return RecoverableFailure(reason=str(exc), error=exc)
    except Exception as exc:  # noqa: BLE001
        return FatalFailure(reason=str(exc) or type(exc).__name__, error=exc)
    return Applied()
