"""Declaration model and TypeScript serialization."""

from .nodes import (
    ArrayType,
    BuiltinType,
    Declaration,
    DeclarationRef,
    EnumDeclaration,
    EnumValue,
    GenericType,
    GetterDeclaration,
    ImportedTypeRef,
    ImportFromPath,
    ImportFromUnit,
    ImportStatement,
    IndexSignatureDeclaration,
    InterfaceDeclaration,
    IntersectionType,
    LiteralType,
    Member,
    ObjectType,
    PropertyMember,
    TypeAliasDeclaration,
    TypeParameter,
    TypeReference,
    Unit,
    UnionType,
    iter_references,
)
from .render import RenderContext, render_declaration, render_import, render_member, render_reference

__all__ = [
    "ArrayType",
    "BuiltinType",
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
    "RenderContext",
    "TypeAliasDeclaration",
    "TypeParameter",
    "TypeReference",
    "Unit",
    "UnionType",
    "iter_references",
    "render_declaration",
    "render_import",
    "render_member",
    "render_reference",
]
