"""Target writing mapped records into a database table."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import Field, StrictStr
from sqlalchemy import delete, insert, inspect, select, update
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError

from recordsync.config.options import OptionsModel
from recordsync.config.sync import get_sync_config
from recordsync.domain.errors import RecordError
from recordsync.domain.model import IdSet, ReadinessResult, RecordId, RecordVersion
from recordsync.domain.reconciliation.diff import LocalSnapshot, SnapshotTarget

from .engine import create_database_engine, reflect_table

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Executable, Table
    from sqlalchemy.engine import Connection, CursorResult, Engine

    from recordsync.domain.model import DataRecord
    from recordsync.domain.ports import FieldMapper, TargetFactory

log = getLogger(__name__)


class SqlTargetOptions(OptionsModel):
    url: StrictStr | None = None
    table: StrictStr
    id_column: StrictStr = "id"
    version_column: StrictStr | None = None
    soft_delete_column: StrictStr | None = None
    batch_size: int | None = Field(default=None, gt=0)


class SqlAlchemyTarget(SnapshotTarget):
    """Write records into ``table_name`` through one connection per run.

    Every write runs in a savepoint, so a rejected row does not spoil the
    batch; the transaction is committed every ``batch_size`` writes and in
    :meth:`finalize`. With a ``soft_delete_column`` removed rows are flagged
    instead of deleted; flagged rows are still known and get revived by an
    update.
    """

    def __init__(
        self,
        mapper: FieldMapper,
        engine: Engine,
        table_name: str,
        *,
        id_column: str = "id",
        version_column: str | None = None,
        soft_delete_column: str | None = None,
        batch_size: int | None = None,
    ) -> None:
        super().__init__()
        self.mapper = mapper
        self.engine = engine
        self.table_name = table_name
        self.id_column = id_column
        self.version_column = version_column
        self.soft_delete_column = soft_delete_column
        self.batch_size = batch_size or get_sync_config().batch_size
        self._table: Table | None = None
        self._connection: Connection | None = None
        self._pending = 0

    @property
    def table(self) -> Table:
        if self._table is None:
            self._table = reflect_table(self.engine, self.table_name)
        return self._table

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            self._connection = self.engine.connect()
        return self._connection

    def fetch_snapshot(self) -> LocalSnapshot:
        self._discard_connection()
        table = self.table
        columns = [table.c[self.id_column]]
        if self.version_column is not None:
            columns.append(table.c[self.version_column])
        if self.soft_delete_column is not None:
            columns.append(table.c[self.soft_delete_column])

        ids: list[RecordId] = []
        active: list[RecordId] = []
        versions: dict[RecordId, RecordVersion] = {}
        for row in self.connection.execute(select(*columns)):
            record_id = RecordId(str(row[0]))
            ids.append(record_id)
            if self.version_column is not None and row[1] is not None:
                versions[record_id] = RecordVersion.parse(row[1])
            if self.soft_delete_column is None or not row[-1]:
                active.append(record_id)
        return LocalSnapshot(ids=IdSet(ids), versions=versions, active_ids=IdSet(active))

    def add_record(self, record: DataRecord) -> None:
        values = self._values(record)
        values[self.id_column] = record.id.value
        self._write(insert(self.table).values(values), record.id)

    def update_record(self, record: DataRecord) -> None:
        values = self._values(record)
        values.pop(self.id_column, None)
        result = self._write(
            update(self.table).where(self._matches(record.id)).values(values), record.id
        )
        if result.rowcount == 0:
            raise RecordError(f'Record "{record.id}" does not exist in {self.table_name}')

    def remove_record(self, record_id: RecordId) -> None:
        if self.soft_delete_column is None:
            statement = delete(self.table).where(self._matches(record_id))
        else:
            statement = (
                update(self.table)
                .where(self._matches(record_id))
                .values({self.soft_delete_column: True})
            )
        self._write(statement, record_id)

    def remove_all(self) -> int:
        with self.engine.begin() as connection:
            result = connection.execute(delete(self.table))
        return result.rowcount

    def finalize(self) -> None:
        if self._connection is not None:
            self._connection.commit()
            self._connection.close()
            log.debug("Committed %d pending writes to %s", self._pending, self.table_name)
        self._connection = None
        self._pending = 0
        super().finalize()

    def setup(self) -> ReadinessResult:
        result = ReadinessResult()
        try:
            inspector = inspect(self.engine)
            if not inspector.has_table(self.table_name):
                result.add_error(f'Target table "{self.table_name}" does not exist')
                return result
            existing = {column["name"] for column in inspector.get_columns(self.table_name)}
        except SQLAlchemyError as exc:
            result.add_error(f"Could not connect to the target database: {exc}")
            return result

        result.add_notice(f'Target table "{self.table_name}" exists')
        required = [self.id_column, self.version_column, self.soft_delete_column]
        fields = getattr(self.mapper, "fields", [])
        for column in [*required, *fields]:
            if column is not None and column not in existing:
                result.add_error(f'Column "{column}" does not exist in "{self.table_name}"')
        return result

    def _discard_connection(self) -> None:
        """Roll back writes left over from a run that never reached ``finalize``."""

        if self._connection is None:
            return
        if self._pending:
            log.warning(
                "Rolling back %d uncommitted writes to %s", self._pending, self.table_name
            )
        self._connection.rollback()
        self._connection.close()
        self._connection = None
        self._pending = 0

    def _values(self, record: DataRecord) -> dict[str, object]:
        values = self.mapper.map_record(record)
        if self.version_column is not None and self.version_column not in values:
            values[self.version_column] = (
                None if record.version.is_not_set() else record.version.value
            )
        if self.soft_delete_column is not None:
            values[self.soft_delete_column] = False
        return values

    def _matches(self, record_id: RecordId) -> ColumnElement[bool]:
        return self.table.c[self.id_column] == record_id.value

    def _write(self, statement: Executable, record_id: RecordId) -> CursorResult[object]:
        connection = self.connection
        try:
            with connection.begin_nested():
                result = connection.execute(statement)
        except (IntegrityError, DataError) as exc:
            raise RecordError(f"Database rejected record {record_id}: {exc.orig}") from exc
        self._pending += 1
        if self._pending >= self.batch_size:
            connection.commit()
            log.debug("Committed batch of %d writes to %s", self._pending, self.table_name)
            self._pending = 0
        return result


class SqlAlchemyTargetFactory:
    options_model = SqlTargetOptions

    def create(self, mapper: FieldMapper, options: SqlTargetOptions) -> SqlAlchemyTarget:
        return SqlAlchemyTarget(
            mapper,
            create_database_engine(options.url),
            options.table,
            id_column=options.id_column,
            version_column=options.version_column,
            soft_delete_column=options.soft_delete_column,
            batch_size=options.batch_size,
        )


if TYPE_CHECKING:
    _factory_check: TargetFactory[SqlTargetOptions] = SqlAlchemyTargetFactory()
