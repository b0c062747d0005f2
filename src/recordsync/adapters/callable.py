"""Source backed by an in-process loader function."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, ImportString

from recordsync.config.options import OptionsModel
from recordsync.domain.model import ReadinessResult, RecordSet

if TYPE_CHECKING:
    from recordsync.domain.ports import Source, SourceFactory

type RecordLoaderFunction = Callable[
    [Mapping[str, Any]], RecordSet | Iterable[Mapping[str, object]]
]


@dataclass(slots=True)
class CallableSource:
    """Source delegating to ``loader(options)``.

    The loader may return a :class:`RecordSet` or an iterable of plain rows
    (converted with ``id_attribute``/``version_attribute`` from the options).
    """

    loader: RecordLoaderFunction
    options: Mapping[str, Any] = field(default_factory=dict)

    def load(self) -> RecordSet:
        loaded = self.loader(self.options)
        if isinstance(loaded, RecordSet):
            return loaded
        return RecordSet.from_raw_rows(
            loaded,
            str(self.options.get("id_attribute", "id")),
            self.options.get("version_attribute"),
        )

    def replace_loader(self, loader: RecordLoaderFunction) -> None:
        self.loader = loader

    def setup(self) -> ReadinessResult:
        return ReadinessResult()


class CallableSourceOptions(OptionsModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    loader: ImportString[Callable[..., Any]]


class CallableSourceFactory:
    """Builds a :class:`CallableSource` from a dotted ``loader`` path.

    Every option besides ``loader`` is passed through to the loader.
    """

    options_model = CallableSourceOptions

    def create(self, options: CallableSourceOptions) -> CallableSource:
        return CallableSource(loader=options.loader, options=dict(options.model_extra or {}))


if TYPE_CHECKING:
    _source_check: Source = CallableSource(loader=lambda _options: RecordSet.empty())
    _factory_check: SourceFactory[CallableSourceOptions] = CallableSourceFactory()
