"""Domain ports describing the connectors an import run depends on."""

from __future__ import annotations

from .connectors import Source, Target
from .factories import SourceFactory, TargetFactory
from .mapping import ExpressionEvaluator, FieldMapper

__all__ = [
    "ExpressionEvaluator",
    "FieldMapper",
    "Source",
    "SourceFactory",
    "Target",
    "TargetFactory",
]
