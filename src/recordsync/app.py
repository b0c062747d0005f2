"""Application entry points: building import services from preset configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from recordsync.adapters.file import FileSource
from recordsync.adapters.registry import create_source, create_target
from recordsync.config.errors import ConfigurationError
from recordsync.config.presets import load_presets_config, merge_recursive
from recordsync.domain.mapping import Mapper
from recordsync.domain.preset import Preset, PresetOptions
from recordsync.domain.reconciliation.engine import ImportService

if TYPE_CHECKING:
    from collections.abc import Mapping

    from recordsync.config.presets import PresetConfig, PresetOptionsConfig, PresetsConfig
    from recordsync.domain.ports import ExpressionEvaluator, Source
    from recordsync.domain.reconciliation.events import ImportEvents

log = getLogger(__name__)


def _to_preset_options(config: PresetOptionsConfig) -> PresetOptions:
    return PresetOptions(
        skip_added_records=config.skip_added_records,
        skip_removed_records=config.skip_removed_records,
        data_processor=config.data_processor,
    )


@dataclass(slots=True)
class ImportServiceFactory:
    """Create :class:`ImportService` instances for configured presets.

    Source and target options passed to :meth:`create` are merged over the
    configured ones, so a caller can point a preset at another endpoint or
    table for a single run.
    """

    presets: PresetsConfig = field(default_factory=load_presets_config)
    evaluator: ExpressionEvaluator | None = None
    events: ImportEvents | None = None

    def preset_names(self) -> list[str]:
        return self.presets.names()

    def preset_configuration(self, name: str) -> PresetConfig:
        return self.presets.resolve(name)

    def create(
        self,
        name: str,
        source_options: Mapping[str, object] | None = None,
        target_options: Mapping[str, object] | None = None,
    ) -> ImportService:
        configuration = self.preset_configuration(name)
        source = create_source(
            configuration.source.factory,
            merge_recursive(configuration.source.options, source_options or {}),
        )
        return self._build(name, configuration, source, target_options)

    def create_from_preset(self, preset: Preset) -> ImportService:
        return ImportService(preset, events=self.events)

    def create_with_fixture(
        self,
        name: str,
        target_options: Mapping[str, object] | None = None,
    ) -> ImportService:
        """Create a service that reads the preset's fixture file instead of its source."""

        configuration = self.preset_configuration(name)
        fixture = configuration.source.fixture
        if fixture is None:
            raise ConfigurationError(
                f'Preset "{name}" has no fixture configured (source.fixture.file)'
            )
        source = FileSource(
            path=Path(fixture.file),
            id_attribute=fixture.id_attribute,
            version_attribute=fixture.version_attribute,
        )
        return self._build(name, configuration, source, target_options)

    def create_with_source(
        self,
        name: str,
        source: Source,
        target_options: Mapping[str, object] | None = None,
    ) -> ImportService:
        return self._build(name, self.preset_configuration(name), source, target_options)

    def _build(
        self,
        name: str,
        configuration: PresetConfig,
        source: Source,
        target_options: Mapping[str, object] | None,
    ) -> ImportService:
        mapper = Mapper(configuration.mapping, self.evaluator)
        target = create_target(
            configuration.target.factory,
            mapper,
            merge_recursive(configuration.target.options, target_options or {}),
        )
        log.debug(
            "Created import service for preset %s (source=%s, target=%s)",
            name,
            type(source).__name__,
            configuration.target.factory,
        )
        preset = Preset(source, target, _to_preset_options(configuration.options))
        return self.create_from_preset(preset)
