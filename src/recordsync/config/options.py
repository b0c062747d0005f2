"""Validation of connector and preset options against pydantic models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import InvalidOptionsError

if TYPE_CHECKING:
    from collections.abc import Mapping


class OptionsModel(BaseModel):
    """Base class for option schemas: unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)


def validate_options[TOptions: BaseModel](
    model: type[TOptions],
    options: Mapping[str, object],
    *,
    context: str,
) -> TOptions:
    """Validate ``options`` for ``context`` or raise :class:`InvalidOptionsError`."""

    try:
        return model.model_validate(dict(options))
    except ValidationError as exc:
        problems = "; ".join(_describe(error) for error in exc.errors())
        raise InvalidOptionsError(f"Invalid options for {context}: {problems}") from exc


def _describe(error: Mapping[str, object]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))  # type: ignore[union-attr]
    message = error.get("msg", "invalid value")
    if error.get("type") == "extra_forbidden":
        return f'option "{location}" is not supported'
    if error.get("type") == "missing":
        return f'missing required option "{location}"'
    return f'option "{location}": {message}'
