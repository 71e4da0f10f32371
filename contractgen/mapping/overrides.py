"""Override hooks that can replace the default mapping of a host type."""

from __future__ import annotations

from importlib import metadata
from typing import Iterable, List, Mapping, Optional, Protocol, Sequence, Set, Union

from ..codedom.nodes import Declaration, ImportedTypeRef, TypeReference
from ..config import GenerationOptions
from ..errors import AmbiguousOverrideError
from ..models import HostType

_ENTRY_POINT_GROUP = "contractgen.overrides"

OverrideResult = Union[TypeReference, Declaration]


class MappingContext(Protocol):
    """Services the graph builder offers to the mapper and to overrides."""

    options: GenerationOptions

    def reference(self, host: HostType) -> TypeReference:
        """Return the reference a member of type ``host`` should use."""

    def require(self, host: HostType) -> TypeReference:
        """Queue ``host`` for declaration and return a reference to it."""

    def register(self, declaration: Declaration) -> TypeReference:
        """Add a synthesized declaration to the graph and return a reference to it."""


class TypeOverride(Protocol):
    """Contract for user-supplied rendering of specific host types."""

    name: str

    def try_map(self, host: HostType, context: MappingContext) -> Optional[OverrideResult]:
        """Return a replacement reference or declaration, or None to decline."""


class NullOverride:
    """Override that never claims a type."""

    name = "null"

    def try_map(self, host: HostType, context: MappingContext) -> Optional[OverrideResult]:
        return None


class PathOverride:
    """Points host types at hand-written TypeScript modules by fully-qualified name."""

    name = "paths"

    def __init__(self, targets: Mapping[str, ImportedTypeRef]) -> None:
        self._targets = dict(targets)

    @classmethod
    def from_config(cls, overrides: Mapping[str, Mapping[str, str]]) -> "PathOverride":
        return cls(
            {
                full_name: ImportedTypeRef(name=spec["name"], path=spec["path"])
                for full_name, spec in overrides.items()
            }
        )

    def try_map(self, host: HostType, context: MappingContext) -> Optional[OverrideResult]:
        return self._targets.get(host.full_name)


class CompositeOverride:
    """Asks every override in turn; more than one claim for a type is an error."""

    name = "composite"

    def __init__(self, overrides: Iterable[TypeOverride]) -> None:
        self.overrides: List[TypeOverride] = list(overrides)

    def try_map(self, host: HostType, context: MappingContext) -> Optional[OverrideResult]:
        claims: List[tuple[str, OverrideResult]] = []
        for override in self.overrides:
            result = override.try_map(host, context)
            if result is not None:
                claims.append((_override_name(override), result))
        if len(claims) > 1:
            raise AmbiguousOverrideError(str(host.identity), [name for name, _ in claims])
        if claims:
            return claims[0][1]
        return None


def discover_overrides(enabled: Sequence[str] | None = None) -> List[TypeOverride]:
    """Instantiate overrides registered under the ``contractgen.overrides`` entry point group."""
    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    overrides: List[TypeOverride] = []
    for entry in _iter_entry_points():
        key = entry.name.lower()
        if enabled_set is not None and key not in enabled_set:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load override entry point '{entry.name}': {exc}") from exc
        overrides.append(_coerce_override(entry.name, loaded))
        if enabled_set is not None:
            enabled_set.discard(key)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown overrides requested: {missing}")
    return overrides


def _coerce_override(name: str, obj: object) -> TypeOverride:
    instance = obj() if isinstance(obj, type) else obj
    if not callable(getattr(instance, "try_map", None)):
        raise TypeError(f"Override entry point '{name}' does not provide try_map()")
    return instance  # type: ignore[return-value]


def _override_name(override: object) -> str:
    return str(getattr(override, "name", None) or type(override).__name__)


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "CompositeOverride",
    "MappingContext",
    "NullOverride",
    "OverrideResult",
    "PathOverride",
    "TypeOverride",
    "discover_overrides",
]
