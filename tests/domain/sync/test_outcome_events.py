from __future__ import annotations

import pytest

from recordsync.domain.errors import RecordError
from recordsync.domain.reconciliation.events import Channel, ImportEvents
from recordsync.domain.reconciliation.outcome import (
    Applied,
    FatalFailure,
    OutcomeStatus,
    RecoverableFailure,
    attempt,
)


def test_attempt_classifies_outcomes() -> None:
    def reject() -> None:
        raise RecordError("bad email")

    def explode() -> None:
        raise OSError("disk full")

    applied = attempt(lambda: None)
    recoverable = attempt(reject)
    fatal = attempt(explode)

    assert isinstance(applied, Applied)
    assert applied.status is OutcomeStatus.APPLIED
    assert isinstance(recoverable, RecoverableFailure)
    assert recoverable.reason == "bad email"
    assert recoverable.status is OutcomeStatus.RECOVERABLE
    assert isinstance(fatal, FatalFailure)
    assert isinstance(fatal.error, OSError)
    assert fatal.status is OutcomeStatus.FATAL


def test_attempt_does_not_absorb_base_exceptions() -> None:
    def interrupt() -> None:
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        attempt(interrupt)


def test_channel_calls_observers_in_order() -> None:
    channel: Channel[[str]] = Channel("error")
    seen: list[str] = []

    channel.subscribe(lambda message: seen.append(f"first:{message}"))
    channel.subscribe(lambda message: seen.append(f"second:{message}"))
    channel.emit("boom")

    assert seen == ["first:boom", "second:boom"]
    assert len(channel) == 2


def test_channel_unsubscribe() -> None:
    channel: Channel[[]] = Channel("load_started")
    seen: list[str] = []

    def observer() -> None:
        seen.append("called")

    channel.subscribe(observer)
    channel.unsubscribe(observer)
    channel.emit()

    assert seen == []


def test_import_events_have_independent_channels() -> None:
    first = ImportEvents()
    second = ImportEvents()

    first.error.subscribe(lambda _message: None)

    assert len(first.error) == 1
    assert len(second.error) == 0
    assert first.error.name == "error"
