"""Graph construction: walk root types, deduplicate declarations, assign units and imports."""

from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Callable, Deque, Dict, Iterable, List, Optional, Sequence

from .codedom.nodes import (
    Declaration,
    DeclarationRef,
    ImportedTypeRef,
    ImportFromPath,
    ImportFromUnit,
    TypeReference,
    Unit,
    iter_references,
)
from .config import GenerationOptions
from .errors import UnmappableTypeError
from .layout import UnitPathPolicy, per_type
from .logging import get_logger
from .mapping.mapper import NULLABLE_IDENTITY, TypeMapper
from .mapping.overrides import TypeOverride
from .models import HostType, TypeIdentity
from .paths import normalise_unit_path
from .providers.base import TypeProvider


class GraphBuilder:
    """Builds the declaration graph for one generation run.

    The builder doubles as the mapping context handed to the mapper and to
    overrides: ``require`` queues named host types, ``register`` adds
    synthesized declarations. A fresh builder is used per run so no cache
    state leaks between runs.
    """

    def __init__(
        self,
        provider: TypeProvider,
        options: GenerationOptions,
        *,
        override: TypeOverride | None = None,
        unit_path: UnitPathPolicy | None = None,
    ) -> None:
        self.provider = provider
        self.options = options
        self.mapper = TypeMapper(options, override)
        self.unit_path: UnitPathPolicy = unit_path or per_type()
        self.logger = get_logger("graph")
        self._cache: Dict[TypeIdentity, Declaration] = {}
        self._pending: Dict[TypeIdentity, HostType] = {}
        self._queue: Deque[HostType] = deque()
        self._unit_of: Dict[TypeIdentity, Unit] = {}
        self._instantiation_names: Dict[str, TypeIdentity] = {}

    # ------------------------------------------------------------------
    # Mapping context

    def reference(self, host: HostType) -> TypeReference:
        return self.mapper.reference(host, self)

    def require(self, host: HostType) -> TypeReference:
        identity = host.identity
        if identity not in self._cache and identity not in self._pending:
            self._pending[identity] = host
            self._queue.append(host)
        return DeclarationRef(identity)

    def register(self, declaration: Declaration) -> TypeReference:
        if declaration.identity not in self._cache:
            self._cache[declaration.identity] = self._unique_instantiation(declaration)
        return DeclarationRef(declaration.identity)

    def _unique_instantiation(self, declaration: Declaration) -> Declaration:
        """Suffix a generic instantiation whose name another instantiation already took.

        Numbering follows discovery order, so ``Page[a.User]`` and
        ``Page[b.User]`` become ``PageOfUser`` and ``PageOfUser2`` on every run.
        """
        identity = declaration.identity
        if not identity.arguments:
            return declaration
        name = declaration.name
        suffix = 2
        while self._instantiation_names.setdefault(name, identity) != identity:
            name = f"{declaration.name}{suffix}"
            suffix += 1
        if name == declaration.name:
            return declaration
        self.logger.debug("Renamed instantiation %s to %s", identity, name)
        return replace(declaration, name=name)

    # ------------------------------------------------------------------
    # Build

    def build(self, root_types: Iterable[object]) -> List[Unit]:
        """Walk ``root_types`` breadth-first and return the resulting units sorted by path."""
        for handle in root_types:
            root = self.provider.describe(handle)
            if root.identity in self._cache or root.identity in self._pending:
                continue
            self._pending[root.identity] = root
            self._queue.append(root)

        while self._queue:
            host = self._queue.popleft()
            self._map(host)

        units = self._assign_units()
        self._resolve_imports(units)
        ordered = sorted(units.values(), key=lambda unit: unit.path)
        self.logger.info(
            "Built %d declarations across %d units", len(self._cache), len(ordered)
        )
        return ordered

    def _map(self, host: HostType) -> None:
        identity = host.identity
        self._pending.pop(identity, None)
        if identity in self._cache:
            return
        self.logger.debug("Mapping %s", identity)
        result = self.mapper.map_type(host, self)
        if not isinstance(result, list):
            # Root types that render inline (aliases of primitives, lists) declare nothing.
            self.logger.debug("%s maps to an inline reference; nothing declared", identity)
            return
        for declaration in result:
            self.register(declaration)
        if identity not in self._cache:
            raise UnmappableTypeError(
                str(identity), "mapping produced no declaration with the requested identity"
            )

    def _assign_units(self) -> Dict[str, Unit]:
        units: Dict[str, Unit] = {}
        self._unit_of = {}
        for identity, declaration in self._cache.items():
            if identity == NULLABLE_IDENTITY:
                path = normalise_unit_path(self.options.nullable_unit_path)
            else:
                path = normalise_unit_path(self.unit_path(declaration))
            unit = units.get(path)
            if unit is None:
                unit = Unit(path=path)
                units[path] = unit
            unit.add_declaration(declaration)
            self._unit_of[identity] = unit
        return units

    def _resolve_imports(self, units: Dict[str, Unit]) -> None:
        for unit in units.values():
            for declaration in unit.declarations:
                for reference in iter_references(declaration):
                    self._add_import(unit, reference)

    def _add_import(self, unit: Unit, reference: TypeReference) -> None:
        if isinstance(reference, DeclarationRef):
            target = self._unit_of.get(reference.identity)
            if target is None:
                raise UnmappableTypeError(str(reference.identity), "referenced but never declared")
            if target is unit:
                return
            name = self._cache[reference.identity].name
            unit.add_import(ImportFromUnit(name=name, target_path=target.path, current_path=unit.path))
        elif isinstance(reference, ImportedTypeRef):
            path = normalise_unit_path(reference.path)
            if path == unit.path:
                return
            unit.add_import(ImportFromPath(name=reference.name, path=path, current_path=unit.path))


def build(
    root_types: Sequence[object],
    provider: TypeProvider,
    options: GenerationOptions,
    *,
    override: TypeOverride | None = None,
    unit_path: Optional[Callable[[Declaration], str]] = None,
) -> List[Unit]:
    """Build the units for ``root_types`` in a fresh, self-contained run."""
    builder = GraphBuilder(provider, options, override=override, unit_path=unit_path)
    return builder.build(root_types)


__all__ = ["GraphBuilder", "build"]
