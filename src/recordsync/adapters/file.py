"""Source reading records from a JSON file."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import StrictStr

from recordsync.config.options import OptionsModel
from recordsync.domain.model import ReadinessResult

from ._payload import records_from_json

if TYPE_CHECKING:
    from recordsync.domain.model import RecordSet
    from recordsync.domain.ports import Source, SourceFactory

log = getLogger(__name__)


class FileSourceOptions(OptionsModel):
    file_path: Path
    id_attribute: StrictStr = "id"
    version_attribute: StrictStr | None = None


@dataclass(slots=True, frozen=True)
class FileSource:
    """Load a JSON array of objects from ``path``."""

    path: Path
    id_attribute: str = "id"
    version_attribute: str | None = None

    def load(self) -> RecordSet:
        log.debug("Reading records from %s", self.path)
        return records_from_json(
            self.path.read_bytes(),
            id_attribute=self.id_attribute,
            version_attribute=self.version_attribute,
        )

    def setup(self) -> ReadinessResult:
        result = ReadinessResult()
        if self.path.is_file():
            result.add_notice(f"File {self.path} is readable")
        else:
            result.add_error(f"File {self.path} does not exist")
        return result


class FileSourceFactory:
    options_model = FileSourceOptions

    def create(self, options: FileSourceOptions) -> FileSource:
        return FileSource(
            path=options.file_path,
            id_attribute=options.id_attribute,
            version_attribute=options.version_attribute,
        )


if TYPE_CHECKING:
    _source_check: Source = FileSource(path=Path("records.json"))
    _factory_check: SourceFactory[FileSourceOptions] = FileSourceFactory()
