"""Ports for translating source records into target fields."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from recordsync.domain.model import DataRecord


@runtime_checkable
class ExpressionEvaluator(Protocol):
    def is_expression(self, text: str) -> bool: ...

    def evaluate(self, text: str, variables: Mapping[str, object]) -> object: ...


@runtime_checkable
class FieldMapper(Protocol):
    """Maps a record to a dictionary keyed by target field name."""

    def map_record(
        self,
        record: DataRecord,
        variables: Mapping[str, object] | None = None,
    ) -> dict[str, object]: ...


__all__ = ["ExpressionEvaluator", "FieldMapper"]
