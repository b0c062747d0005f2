"""Ports for building connectors from validated options."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pydantic import BaseModel

    from .connectors import Source, Target
    from .mapping import FieldMapper


@runtime_checkable
class SourceFactory[TOptions: BaseModel](Protocol):
    @property
    def options_model(self) -> type[TOptions]: ...

    def create(self, options: TOptions) -> Source: ...


@runtime_checkable
class TargetFactory[TOptions: BaseModel](Protocol):
    @property
    def options_model(self) -> type[TOptions]: ...

    def create(self, mapper: FieldMapper, options: TOptions) -> Target: ...


__all__ = ["SourceFactory", "TargetFactory"]
