"""Type mapping rules and override hooks."""

from __future__ import annotations

from .mapper import TypeMapper, declaration_name
from .overrides import (
    CompositeOverride,
    MappingContext,
    NullOverride,
    OverrideResult,
    PathOverride,
    TypeOverride,
    discover_overrides,
)

__all__ = [
    "CompositeOverride",
    "MappingContext",
    "NullOverride",
    "OverrideResult",
    "PathOverride",
    "TypeMapper",
    "TypeOverride",
    "declaration_name",
    "discover_overrides",
]
