"""Record variants: eager records and lazily materialized records."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from recordsync.domain.errors import RecordError, RecordLoadError

from .identity import RecordVersion

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .identity import RecordId

type RecordLoader = Callable[[], Mapping[str, object]]


@runtime_checkable
class DataRecord(Protocol):
    """Read contract shared by every record variant."""

    @property
    def id(self) -> RecordId: ...

    @property
    def version(self) -> RecordVersion: ...

    @property
    def attributes(self) -> Mapping[str, object]: ...

    def has_attribute(self, name: str) -> bool: ...

    def attribute(self, name: str) -> object: ...

    def as_dict(self) -> dict[str, object]: ...


class _AttributeAccess:
    """Mapping-style helpers built on top of ``attributes``."""

    __slots__ = ()

    attributes: Mapping[str, object]

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def attribute(self, name: str) -> object:
        try:
            return self.attributes[name]
        except KeyError:
            raise KeyError(f'Record has no attribute "{name}"') from None

    def as_dict(self) -> dict[str, object]:
        return dict(self.attributes)

    def __getitem__(self, name: str) -> object:
        return self.attribute(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_attribute(name)


@dataclass(frozen=True, slots=True)
class Record(_AttributeAccess):
    """Fully materialized record."""

    id: RecordId
    attributes: Mapping[str, object]
    version: RecordVersion = field(default_factory=RecordVersion.none)

    def __post_init__(self) -> None:
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @classmethod
    def create(
        cls,
        id: RecordId,  # noqa: A002
        attributes: Mapping[str, object],
        version: RecordVersion | None = None,
    ) -> Record:
        return cls(
            id=id,
            attributes=MappingProxyType(dict(attributes)),
            version=version or RecordVersion.none(),
        )

    def with_id(self, new_id: RecordId) -> Record:
        return Record.create(new_id, self.attributes, self.version)

    def with_attribute(self, name: str, value: object) -> Record:
        attributes = dict(self.attributes)
        attributes[name] = value
        return Record.create(self.id, attributes, self.version)


@dataclass(frozen=True, slots=True)
class _Unloaded:
    loader: RecordLoader


@dataclass(frozen=True, slots=True)
class _Loaded:
    attributes: Mapping[str, object]


class LazyRecord(_AttributeAccess):
    """Record whose attributes are fetched on first access.

    Identity and version are known up front, so change computation never
    triggers a load. The loader runs at most once; a failed load leaves the
    record unloaded so a later read retries.
    """

    __slots__ = ("_id", "_lock", "_state", "_version")

    def __init__(
        self,
        id: RecordId,  # noqa: A002
        loader: RecordLoader,
        version: RecordVersion | None = None,
    ) -> None:
        self._id = id
        self._version = version or RecordVersion.none()
        self._state: _Unloaded | _Loaded = _Unloaded(loader)
        self._lock = threading.Lock()

    @property
    def id(self) -> RecordId:
        return self._id

    @property
    def version(self) -> RecordVersion:
        return self._version

    @property
    def is_loaded(self) -> bool:
        return isinstance(self._state, _Loaded)

    @property
    def attributes(self) -> Mapping[str, object]:
        state = self._state
        if isinstance(state, _Loaded):
            return state.attributes
        with self._lock:
            state = self._state
            if isinstance(state, _Unloaded):
                state = _Loaded(MappingProxyType(dict(self._load(state.loader))))
                self._state = state
            return state.attributes

    def _load(self, loader: RecordLoader) -> Mapping[str, object]:
        try:
            return loader()
        except RecordError:
            raise
        except Exception as exc:
            raise RecordLoadError(f'Failed to load record "{self._id}"') from exc

    def with_id(self, new_id: RecordId) -> Record:
        return Record.create(new_id, self.attributes, self._version)

    def with_attribute(self, name: str, value: object) -> Record:
        attributes = dict(self.attributes)
        attributes[name] = value
        return Record.create(self._id, attributes, self._version)

    def __repr__(self) -> str:
        state = "loaded" if self.is_loaded else "unloaded"
        return f"LazyRecord(id={self._id!r}, version={self._version!r}, {state})"
