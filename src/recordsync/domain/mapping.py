"""Field mapping from source records to target fields."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from recordsync.domain.errors import RecordError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from recordsync.domain.model import DataRecord
    from recordsync.domain.ports import ExpressionEvaluator

log = getLogger(__name__)


class NoExpressions:
    """Evaluator for mappings made of plain attribute names only."""

    def is_expression(self, text: str) -> bool:  # noqa: ARG002
        return False

    def evaluate(self, text: str, variables: Mapping[str, object]) -> object:  # noqa: ARG002
        raise RecordError(f'Expressions are not supported: "{text}"')


class Mapper:
    """Map records to target fields according to ``{target_field: rule}`` rules.

    A rule is either the name of a record attribute (missing attributes map
    to ``None``) or an expression understood by ``evaluator``, which receives
    the caller's variables plus the record under ``"record"``.
    """

    def __init__(
        self,
        mapping: Mapping[str, object],
        evaluator: ExpressionEvaluator | None = None,
    ) -> None:
        for field_name, rule in mapping.items():
            if not isinstance(rule, str):
                raise TypeError(
                    f'Mapping rule for "{field_name}" must be a string, '
                    f"got {type(rule).__name__}"
                )
        self._mapping: dict[str, str] = dict(mapping)  # type: ignore[arg-type]
        self._evaluator = evaluator or NoExpressions()

    @property
    def fields(self) -> list[str]:
        return list(self._mapping)

    def map_record(
        self,
        record: DataRecord,
        variables: Mapping[str, object] | None = None,
    ) -> dict[str, object]:
        mapped: dict[str, object] = {}
        for field_name, rule in self._mapping.items():
            if self._evaluator.is_expression(rule):
                mapped[field_name] = self._evaluate(rule, record, variables)
            else:
                mapped[field_name] = record.attributes.get(rule)
        return mapped

    def _evaluate(
        self,
        rule: str,
        record: DataRecord,
        variables: Mapping[str, object] | None,
    ) -> object:
        scope = {**(variables or {}), "record": record}
        try:
            return self._evaluator.evaluate(rule, scope)
        except RecordError:
            raise
        except Exception as exc:
            log.debug("Evaluation of %r failed for record %s", rule, record.id)
            raise RecordError(f'Could not evaluate "{rule}": {exc}') from exc
