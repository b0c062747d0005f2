"""Identity and version value objects."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import ClassVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass(frozen=True, slots=True)
class RecordId:
    """Opaque identifier joining source and target records."""

    value: str

    @classmethod
    def of(cls, value: str | int) -> RecordId:
        return cls(value if isinstance(value, str) else str(value))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True, order=True)
class RecordVersion:
    """Comparable version marker, usually a timestamp or a revision number.

    The unset version (``-1``) is treated as "always newer" by the change
    computation, forcing an update.
    """

    NONE: ClassVar[int] = -1

    value: int

    def __post_init__(self) -> None:
        if self.value < self.NONE:
            raise ValueError(f"version must not be less than {self.NONE}, given: {self.value}")

    @classmethod
    def none(cls) -> RecordVersion:
        return cls(cls.NONE)

    @classmethod
    def from_number(cls, value: int) -> RecordVersion:
        if value < 0:
            raise ValueError(f"version must not be less than 0, given: {value}")
        return cls(value)

    @classmethod
    def from_datetime(cls, value: datetime) -> RecordVersion:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return cls.from_number(int(value.timestamp()))

    @classmethod
    def from_date_string(cls, value: str, timezone: str | None = None) -> RecordVersion:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError as exc:
            raise ValueError(f'Could not parse "{value}" as date') from exc
        if parsed.tzinfo is None and timezone is not None:
            try:
                parsed = parsed.replace(tzinfo=ZoneInfo(timezone))
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f'Unknown timezone "{timezone}"') from exc
        return cls.from_datetime(parsed)

    @classmethod
    def parse(cls, value: object) -> RecordVersion:
        """Build a version from a raw value found in source or target data."""

        if isinstance(value, RecordVersion):
            return value
        if isinstance(value, Mapping):
            date = value.get("date")
            if not isinstance(date, str):
                raise ValueError("Could not extract date from mapping")
            timezone = value.get("timezone")
            return cls.from_date_string(date, timezone if isinstance(timezone, str) else None)
        if isinstance(value, datetime):
            return cls.from_datetime(value)
        if isinstance(value, bool):
            raise ValueError(f"Could not parse bool {value!r} as RecordVersion")
        if isinstance(value, int | float):
            return cls.from_number(int(value))
        if isinstance(value, str):
            if _is_numeric(value):
                return cls.from_number(int(float(value)))
            return cls.from_date_string(value)
        raise ValueError(f"Could not parse {type(value).__name__} {value!r} as RecordVersion")

    def is_higher_than(self, other: RecordVersion) -> bool:
        return self.value > other.value

    def is_not_set(self) -> bool:
        return self.value == self.NONE


def _is_numeric(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return value.strip().lower() not in {"nan", "inf", "-inf", "+inf", "infinity", "-infinity"}
