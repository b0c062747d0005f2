from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from recordsync.config import (
    ConfigurationError,
    InvalidOptionsError,
    MissingConfigurationError,
    UnknownPresetError,
    load_presets_config,
    presets_config_from_mapping,
)
from recordsync.config.presets import merge_recursive
from recordsync.domain.model import RecordSet

if TYPE_CHECKING:
    from pathlib import Path

PRESETS_TOML = """
[templates.people_db]
target = { factory = "sql", options = { table = "people", id_column = "id" } }
mapping = { name = "name" }

[presets.people]
template = "people_db"
description = "People from the HR feed"
mapping = { email = "email" }

[presets.people.source]
factory = "http"
options = { endpoint = "https://hr.example.com/people.json" }
fixture = { file = "fixtures/people.json" }

[presets.people.target.options]
version_column = "updated"

[presets.plain]
source = { factory = "file", options = { file_path = "people.json" } }
target = { factory = "sql", options = { table = "people" } }
mapping = { name = "name" }
options = { skip_removed_records = true }
"""


def keep_all(records: RecordSet) -> RecordSet:
    return records


@pytest.fixture
def presets_file(tmp_path: Path) -> Path:
    path = tmp_path / "recordsync.toml"
    path.write_text(PRESETS_TOML)
    return path


def test_merge_recursive_overrides_nested_values() -> None:
    merged = merge_recursive(
        {"a": 1, "nested": {"x": 1, "y": 2}},
        {"b": 2, "nested": {"y": 3}},
    )

    assert merged == {"a": 1, "b": 2, "nested": {"x": 1, "y": 3}}


def test_template_is_merged_under_preset(presets_file: Path) -> None:
    presets = load_presets_config(presets_file)

    configuration = presets.resolve("people")

    assert presets.names() == ["people", "plain"]
    assert configuration.description == "People from the HR feed"
    assert configuration.mapping == {"name": "name", "email": "email"}
    assert configuration.target.factory == "sql"
    assert configuration.target.options == {
        "table": "people",
        "id_column": "id",
        "version_column": "updated",
    }
    assert configuration.source.fixture is not None
    assert configuration.source.fixture.file == "fixtures/people.json"
    assert configuration.source.fixture.id_attribute == "id"


def test_preset_options_are_parsed(presets_file: Path) -> None:
    configuration = load_presets_config(presets_file).resolve("plain")

    assert configuration.options.skip_removed_records is True
    assert configuration.options.skip_added_records is False
    assert configuration.options.data_processor is None


def test_data_processor_is_imported_from_dotted_path() -> None:
    presets = presets_config_from_mapping(
        {
            "presets": {
                "processed": {
                    "source": {"factory": "file", "options": {}},
                    "target": {"factory": "sql", "options": {}},
                    "mapping": {},
                    "options": {
                        "data_processor": "tests.config.test_presets:keep_all",
                    },
                }
            }
        }
    )

    processor = presets.resolve("processed").options.data_processor

    assert processor is not None
    assert processor(RecordSet.empty()).is_empty()


def test_unknown_preset(presets_file: Path) -> None:
    with pytest.raises(UnknownPresetError, match='"missing"'):
        load_presets_config(presets_file).resolve("missing")


def test_missing_template_is_a_configuration_error() -> None:
    presets = presets_config_from_mapping(
        {"presets": {"broken": {"template": "nope", "mapping": {}}}}
    )

    with pytest.raises(ConfigurationError, match="non-existing preset template"):
        presets.resolve("broken")


def test_invalid_preset_is_rejected() -> None:
    presets = presets_config_from_mapping(
        {"presets": {"broken": {"source": {"factory": "file"}, "mapping": {"a": 1}}}}
    )

    with pytest.raises(InvalidOptionsError, match='preset "broken"'):
        presets.resolve("broken")


def test_presets_file_from_environment(
    monkeypatch: pytest.MonkeyPatch, presets_file: Path
) -> None:
    monkeypatch.setenv("RECORDSYNC_PRESETS_FILE", str(presets_file))

    assert load_presets_config().names() == ["people", "plain"]


def test_missing_presets_file(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigurationError):
        load_presets_config(tmp_path / "absent.toml")


def test_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[presets\n")

    with pytest.raises(ConfigurationError, match="not valid TOML"):
        load_presets_config(path)
