"""Source reading records from a database table."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import StrictBool, StrictStr
from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError

from recordsync.config.options import OptionsModel
from recordsync.domain.errors import RecordError
from recordsync.domain.model import (
    LazyRecord,
    ReadinessResult,
    RecordId,
    RecordSet,
    RecordVersion,
)

from .engine import create_database_engine, reflect_table

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import Table
    from sqlalchemy.engine import Engine

    from recordsync.domain.model import RecordLoader
    from recordsync.domain.ports import Source, SourceFactory

log = getLogger(__name__)


class SqlSourceOptions(OptionsModel):
    url: StrictStr | None = None
    table: StrictStr
    id_column: StrictStr = "id"
    version_column: StrictStr | None = None
    lazy_loading: StrictBool = False


@dataclass(slots=True)
class SqlAlchemySource:
    """Read every row of ``table_name``.

    With ``lazy_loading`` only the id and version columns are selected up
    front; the full row is fetched when a record's attributes are first read.
    """

    engine: Engine
    table_name: str
    id_column: str = "id"
    version_column: str | None = None
    lazy_loading: bool = False
    _table: Table | None = field(default=None, init=False, repr=False)

    @property
    def table(self) -> Table:
        if self._table is None:
            self._table = reflect_table(self.engine, self.table_name)
        return self._table

    def load(self) -> RecordSet:
        if self.lazy_loading:
            return self._load_lazy()
        with self.engine.connect() as connection:
            rows = [dict(row._mapping) for row in connection.execute(select(self.table))]
        log.debug("Read %d rows from %s", len(rows), self.table_name)
        return RecordSet.from_raw_rows(rows, self.id_column, self.version_column)

    def _load_lazy(self) -> RecordSet:
        table = self.table
        columns = [table.c[self.id_column]]
        if self.version_column is not None:
            columns.append(table.c[self.version_column])
        with self.engine.connect() as connection:
            rows = connection.execute(select(*columns)).all()
        records = []
        for row in rows:
            raw_id = row[0]
            version = (
                RecordVersion.parse(row[1])
                if self.version_column is not None and row[1] is not None
                else RecordVersion.none()
            )
            records.append(LazyRecord(RecordId(str(raw_id)), self._row_loader(raw_id), version))
        log.debug("Read %d ids from %s", len(records), self.table_name)
        return RecordSet(records)

    def _row_loader(self, raw_id: object) -> RecordLoader:
        def load_row() -> Mapping[str, object]:
            table = self.table
            with self.engine.connect() as connection:
                row = connection.execute(
                    select(table).where(table.c[self.id_column] == raw_id)
                ).first()
            if row is None:
                raise RecordError(f'Row "{raw_id}" no longer exists in {self.table_name}')
            return dict(row._mapping)

        return load_row

    def setup(self) -> ReadinessResult:
        result = ReadinessResult()
        try:
            has_table = inspect(self.engine).has_table(self.table_name)
        except SQLAlchemyError as exc:
            result.add_error(f"Could not connect to the source database: {exc}")
            return result
        if has_table:
            result.add_notice(f'Source table "{self.table_name}" exists')
        else:
            result.add_error(f'Source table "{self.table_name}" does not exist')
        return result


class SqlAlchemySourceFactory:
    options_model = SqlSourceOptions

    def create(self, options: SqlSourceOptions) -> SqlAlchemySource:
        return SqlAlchemySource(
            engine=create_database_engine(options.url),
            table_name=options.table,
            id_column=options.id_column,
            version_column=options.version_column,
            lazy_loading=options.lazy_loading,
        )


if TYPE_CHECKING:
    _source_check: Source = SqlAlchemySource(engine=create_database_engine(), table_name="t")
    _factory_check: SourceFactory[SqlSourceOptions] = SqlAlchemySourceFactory()
