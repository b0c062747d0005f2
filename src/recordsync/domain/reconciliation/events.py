"""Observer channels raised while an import runs.

Observers are called synchronously in subscription order. An exception
raised by an observer propagates and aborts the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from recordsync.domain.model import ChangeSet, DataRecord, IdSet, RecordId, RecordSet


class Channel[**P]:
    """A single event type with any number of observers."""

    __slots__ = ("_name", "_observers")

    def __init__(self, name: str) -> None:
        self._name = name
        self._observers: list[Callable[P, object]] = []

    @property
    def name(self) -> str:
        return self._name

    def subscribe(self, observer: Callable[P, object]) -> Callable[P, object]:
        """Register ``observer``; returns it so this can be used as a decorator."""

        self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: Callable[P, object]) -> None:
        self._observers.remove(observer)

    def emit(self, *args: P.args, **kwargs: P.kwargs) -> None:
        for observer in tuple(self._observers):
            observer(*args, **kwargs)

    def __len__(self) -> int:
        return len(self._observers)

    def __repr__(self) -> str:
        return f"Channel({self._name!r}, observers={len(self._observers)})"


def _channel(name: str) -> Any:
    return field(default_factory=lambda: Channel(name))


@dataclass(slots=True, frozen=True)
class ImportEvents:
    load_started: Channel[[]] = _channel("load_started")
    load_finished: Channel[[RecordSet]] = _channel("load_finished")
    changes_computed: Channel[[ChangeSet]] = _channel("changes_computed")
    add_started: Channel[[RecordSet]] = _channel("add_started")
    record_adding: Channel[[DataRecord]] = _channel("record_adding")
    add_finished: Channel[[]] = _channel("add_finished")
    update_started: Channel[[RecordSet, bool]] = _channel("update_started")
    record_updating: Channel[[DataRecord]] = _channel("record_updating")
    update_finished: Channel[[]] = _channel("update_finished")
    remove_started: Channel[[IdSet]] = _channel("remove_started")
    record_removing: Channel[[RecordId]] = _channel("record_removing")
    remove_finished: Channel[[]] = _channel("remove_finished")
    error: Channel[[str]] = _channel("error")
