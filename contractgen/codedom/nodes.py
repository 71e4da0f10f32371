"""Declaration model for generated TypeScript units."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple, Union

from ..errors import DeclarationConflictError
from ..models import TypeIdentity


# ----------------------------------------------------------------------
# Type references


@dataclass(frozen=True)
class BuiltinType:
    """TypeScript built-in such as ``string`` or ``null``."""

    name: str


@dataclass(frozen=True)
class DeclarationRef:
    """Reference to a declaration held in the identity cache."""

    identity: TypeIdentity


@dataclass(frozen=True)
class ImportedTypeRef:
    """Reference to a hand-written type living at a logical path outside the graph."""

    name: str
    path: str


@dataclass(frozen=True)
class ArrayType:
    element: "TypeReference"


@dataclass(frozen=True)
class UnionType:
    options: Tuple["TypeReference", ...]


@dataclass(frozen=True)
class IntersectionType:
    parts: Tuple["TypeReference", ...]


@dataclass(frozen=True)
class LiteralType:
    value: Union[str, int]


@dataclass(frozen=True)
class GenericType:
    """Instantiation such as ``Nullable<string>``."""

    base: "TypeReference"
    arguments: Tuple["TypeReference", ...]


@dataclass(frozen=True)
class TypeParameter:
    name: str


@dataclass(frozen=True)
class ObjectType:
    """Inline type literal: ``{ [key: string]: number; }``."""

    members: Tuple["Member", ...]


TypeReference = Union[
    BuiltinType,
    DeclarationRef,
    ImportedTypeRef,
    ArrayType,
    UnionType,
    IntersectionType,
    LiteralType,
    GenericType,
    TypeParameter,
    ObjectType,
]


# ----------------------------------------------------------------------
# Members


@dataclass(frozen=True)
class PropertyMember:
    name: str
    type: TypeReference
    optional: bool = False
    readonly: bool = False


@dataclass(frozen=True)
class IndexSignatureDeclaration:
    """``[key: K]: V;`` for maps keyed by string or number."""

    key_type: TypeReference
    value_type: TypeReference
    key_name: str = "key"


@dataclass(frozen=True)
class GetterDeclaration:
    """Mapped-type member ``[key in K]: V;`` for maps keyed by anything else."""

    argument_type: TypeReference
    result_type: TypeReference
    optional: bool = False
    argument_name: str = "key"


Member = Union[PropertyMember, IndexSignatureDeclaration, GetterDeclaration]


# ----------------------------------------------------------------------
# Top-level declarations


@dataclass(frozen=True)
class InterfaceDeclaration:
    identity: TypeIdentity
    name: str
    members: Tuple[Member, ...] = ()


@dataclass(frozen=True)
class TypeAliasDeclaration:
    identity: TypeIdentity
    name: str
    aliased: TypeReference
    type_parameters: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EnumValue:
    name: str
    value: Union[int, str]


@dataclass(frozen=True)
class EnumDeclaration:
    identity: TypeIdentity
    name: str
    values: Tuple[EnumValue, ...] = ()


Declaration = Union[InterfaceDeclaration, TypeAliasDeclaration, EnumDeclaration]

DECLARATION_TYPES = (InterfaceDeclaration, TypeAliasDeclaration, EnumDeclaration)


# ----------------------------------------------------------------------
# Imports and units


@dataclass(frozen=True)
class ImportFromUnit:
    """Import of a generated declaration from another unit."""

    name: str
    target_path: str
    current_path: str


@dataclass(frozen=True)
class ImportFromPath:
    """Import of a hand-written type from a literal logical path."""

    name: str
    path: str
    current_path: str

    @property
    def target_path(self) -> str:
        return self.path


ImportStatement = Union[ImportFromUnit, ImportFromPath]


@dataclass
class Unit:
    """One output file: its logical path, declarations and imports."""

    path: str
    declarations: List[Declaration] = field(default_factory=list)
    _imports: Dict[Tuple[str, str], ImportStatement] = field(default_factory=dict, init=False, repr=False)

    @property
    def imports(self) -> List[ImportStatement]:
        return list(self._imports.values())

    def add_declaration(self, declaration: Declaration) -> None:
        if any(item.name == declaration.name for item in self.declarations):
            raise DeclarationConflictError(self.path, declaration.name)
        self.declarations.append(declaration)

    def add_import(self, statement: ImportStatement) -> None:
        """Add an import, collapsing repeats of the same name from the same target."""
        key = (statement.target_path, statement.name)
        if key in self._imports:
            return
        clashes_with_import = any(name == statement.name for _, name in self._imports)
        clashes_with_declaration = any(item.name == statement.name for item in self.declarations)
        if clashes_with_import or clashes_with_declaration:
            raise DeclarationConflictError(self.path, statement.name)
        self._imports[key] = statement


def iter_references(node: object) -> Iterator[TypeReference]:
    """Yield every type reference reachable from a declaration, member or reference."""
    if isinstance(node, InterfaceDeclaration):
        for member in node.members:
            yield from iter_references(member)
    elif isinstance(node, TypeAliasDeclaration):
        yield from iter_references(node.aliased)
    elif isinstance(node, EnumDeclaration):
        return
    elif isinstance(node, PropertyMember):
        yield from iter_references(node.type)
    elif isinstance(node, IndexSignatureDeclaration):
        yield from iter_references(node.key_type)
        yield from iter_references(node.value_type)
    elif isinstance(node, GetterDeclaration):
        yield from iter_references(node.argument_type)
        yield from iter_references(node.result_type)
    else:
        yield node  # type: ignore[misc]
        if isinstance(node, ArrayType):
            yield from iter_references(node.element)
        elif isinstance(node, UnionType):
            for option in node.options:
                yield from iter_references(option)
        elif isinstance(node, IntersectionType):
            for part in node.parts:
                yield from iter_references(part)
        elif isinstance(node, GenericType):
            yield from iter_references(node.base)
            for argument in node.arguments:
                yield from iter_references(argument)
        elif isinstance(node, ObjectType):
            for member in node.members:
                yield from iter_references(member)


__all__ = [
    "ArrayType",
    "BuiltinType",
    "DECLARATION_TYPES",
    "Declaration",
    "DeclarationRef",
    "EnumDeclaration",
    "EnumValue",
    "GenericType",
    "GetterDeclaration",
    "ImportFromPath",
    "ImportFromUnit",
    "ImportStatement",
    "ImportedTypeRef",
    "IndexSignatureDeclaration",
    "InterfaceDeclaration",
    "IntersectionType",
    "LiteralType",
    "Member",
    "ObjectType",
    "PropertyMember",
    "TypeAliasDeclaration",
    "TypeParameter",
    "TypeReference",
    "Unit",
    "UnionType",
    "iter_references",
]
