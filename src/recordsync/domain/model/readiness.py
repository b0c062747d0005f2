"""Setup reports produced by sources and targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"


@dataclass(frozen=True, slots=True)
class ReadinessMessage:
    severity: Severity
    text: str


@dataclass(slots=True)
class ReadinessResult:
    """Errors, warnings and notices collected while checking a connector."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)

    def add_error(self, text: str) -> None:
        self.errors.append(text)

    def add_warning(self, text: str) -> None:
        self.warnings.append(text)

    def add_notice(self, text: str) -> None:
        self.notices.append(text)

    def merge(self, other: ReadinessResult) -> ReadinessResult:
        return ReadinessResult(
            errors=[*self.errors, *other.errors],
            warnings=[*self.warnings, *other.warnings],
            notices=[*self.notices, *other.notices],
        )

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def messages(self) -> list[ReadinessMessage]:
        return [
            *(ReadinessMessage(Severity.ERROR, text) for text in self.errors),
            *(ReadinessMessage(Severity.WARNING, text) for text in self.warnings),
            *(ReadinessMessage(Severity.NOTICE, text) for text in self.notices),
        ]
