"""Validation of decoded JSON payloads into record sets."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from recordsync.domain.model import RecordSet

_ROWS = TypeAdapter(list[dict[str, Any]])


class PayloadError(ValueError):
    """Decoded data does not have the shape of a list of rows."""


def records_from_json(
    raw: bytes | str,
    *,
    id_attribute: str,
    version_attribute: str | None,
) -> RecordSet:
    """Parse a JSON array of objects into a :class:`RecordSet`."""

    try:
        rows = _ROWS.validate_json(raw)
    except ValidationError as exc:
        if any(error["type"] == "json_invalid" for error in exc.errors()):
            raise PayloadError(f"Malformed JSON: {exc.errors()[0]['msg']}") from exc
        raise PayloadError("Expected a JSON array of objects") from exc
    return RecordSet.from_raw_rows(rows, id_attribute, version_attribute)
