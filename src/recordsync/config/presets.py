"""Preset configuration: presets and templates loaded from a TOML file.

A preset wires one source connector, one target connector and a field
mapping together::

    [templates.products_db]
    target = { factory = "sql", options = { url = "sqlite:///shop.db", table = "products" } }

    [presets.products]
    template = "products_db"
    mapping = { sku = "sku", title = "name" }

    [presets.products.source]
    factory = "http"
    options = { endpoint = "https://example.com/products.json", version_attribute = "updated" }
    fixture = { file = "fixtures/products.json" }

Template values are merged underneath the preset (preset values win).
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from pydantic import Field, ImportString, StrictBool, StrictStr

from .errors import ConfigurationError, MissingConfigurationError, UnknownPresetError
from .options import OptionsModel, validate_options

DEFAULT_PRESETS_FILENAME: Final[str] = "recordsync.toml"


class FixtureConfig(OptionsModel):
    file: StrictStr
    id_attribute: StrictStr = "id"
    version_attribute: StrictStr | None = None


class ConnectorConfig(OptionsModel):
    factory: StrictStr
    options: dict[str, Any] = Field(default_factory=dict)
    fixture: FixtureConfig | None = None


class PresetOptionsConfig(OptionsModel):
    skip_added_records: StrictBool = False
    skip_removed_records: StrictBool = False
    data_processor: ImportString[Callable[..., Any]] | None = None


class PresetConfig(OptionsModel):
    source: ConnectorConfig
    target: ConnectorConfig
    mapping: dict[str, StrictStr]
    options: PresetOptionsConfig = Field(default_factory=PresetOptionsConfig)
    template: StrictStr | None = None
    description: StrictStr | None = None


def merge_recursive(
    base: Mapping[str, object], override: Mapping[str, object]
) -> dict[str, object]:
    """Return ``base`` overlaid with ``override``; nested mappings are merged."""

    merged: dict[str, object] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_recursive(current, value)  # type: ignore[arg-type]
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True, slots=True)
class PresetsConfig:
    """Raw preset and template tables, resolved on demand."""

    presets: Mapping[str, Mapping[str, object]] = field(default_factory=dict)
    templates: Mapping[str, Mapping[str, object]] = field(default_factory=dict)

    def names(self) -> list[str]:
        return list(self.presets)

    def raw(self, name: str) -> dict[str, object]:
        """Return the preset table for ``name`` with its template merged in."""

        if name not in self.presets:
            raise UnknownPresetError(f'Preset "{name}" is not configured')
        configuration = dict(self.presets[name])
        template_name = configuration.get("template")
        if template_name is None:
            return configuration
        if not isinstance(template_name, str) or template_name not in self.templates:
            raise ConfigurationError(
                f'Preset "{name}" refers to a non-existing preset template "{template_name}"'
            )
        return merge_recursive(self.templates[template_name], configuration)

    def resolve(self, name: str) -> PresetConfig:
        return validate_options(PresetConfig, self.raw(name), context=f'preset "{name}"')


def get_presets_path() -> Path:
    env_path = os.getenv("RECORDSYNC_PRESETS_FILE")
    return Path(env_path) if env_path else Path(DEFAULT_PRESETS_FILENAME)


def load_presets_config(path: Path | None = None) -> PresetsConfig:
    """Read presets and templates from the TOML file at ``path``."""

    presets_path = path or get_presets_path()
    try:
        with presets_path.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise MissingConfigurationError(f"Presets file not found: {presets_path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Presets file {presets_path} is not valid TOML: {exc}") from exc
    return presets_config_from_mapping(document)


def presets_config_from_mapping(document: Mapping[str, object]) -> PresetsConfig:
    presets = document.get("presets", {})
    templates = document.get("templates", {})
    if not isinstance(presets, Mapping) or not isinstance(templates, Mapping):
        raise ConfigurationError('"presets" and "templates" must be tables')
    return PresetsConfig(presets=dict(presets), templates=dict(templates))  # type: ignore[arg-type]
