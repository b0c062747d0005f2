"""Lookup of connector factories by the names used in preset configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from recordsync.config.errors import ConfigurationError
from recordsync.config.options import validate_options

from .callable import CallableSourceFactory
from .file import FileSourceFactory
from .http import HttpSourceFactory
from .sqlalchemy import SqlAlchemySourceFactory, SqlAlchemyTargetFactory

if TYPE_CHECKING:
    from collections.abc import Mapping

    from recordsync.domain.ports import (
        FieldMapper,
        Source,
        SourceFactory,
        Target,
        TargetFactory,
    )

_SOURCE_FACTORIES: dict[str, SourceFactory[Any]] = {
    "callable": CallableSourceFactory(),
    "file": FileSourceFactory(),
    "http": HttpSourceFactory(),
    "sql": SqlAlchemySourceFactory(),
}

_TARGET_FACTORIES: dict[str, TargetFactory[Any]] = {
    "sql": SqlAlchemyTargetFactory(),
}


def register_source_factory(name: str, factory: SourceFactory[Any]) -> None:
    _SOURCE_FACTORIES[name] = factory


def register_target_factory(name: str, factory: TargetFactory[Any]) -> None:
    _TARGET_FACTORIES[name] = factory


def source_factory_names() -> list[str]:
    return sorted(_SOURCE_FACTORIES)


def target_factory_names() -> list[str]:
    return sorted(_TARGET_FACTORIES)


def create_source(name: str, options: Mapping[str, object]) -> Source:
    factory = _SOURCE_FACTORIES.get(name)
    if factory is None:
        raise ConfigurationError(
            f'Unknown source factory "{name}", available: {", ".join(source_factory_names())}'
        )
    validated = validate_options(factory.options_model, options, context=f'source "{name}"')
    return factory.create(validated)


def create_target(name: str, mapper: FieldMapper, options: Mapping[str, object]) -> Target:
    factory = _TARGET_FACTORIES.get(name)
    if factory is None:
        raise ConfigurationError(
            f'Unknown target factory "{name}", available: {", ".join(target_factory_names())}'
        )
    validated = validate_options(factory.options_model, options, context=f'target "{name}"')
    return factory.create(mapper, validated)
