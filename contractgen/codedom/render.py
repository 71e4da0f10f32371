"""Serialization of declaration model nodes to TypeScript source text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Mapping

from ..models import TypeIdentity
from ..paths import resolve_import_path
from .nodes import (
    ArrayType,
    BuiltinType,
    DeclarationRef,
    EnumDeclaration,
    GenericType,
    GetterDeclaration,
    ImportedTypeRef,
    ImportFromPath,
    ImportFromUnit,
    IndexSignatureDeclaration,
    InterfaceDeclaration,
    IntersectionType,
    LiteralType,
    ObjectType,
    PropertyMember,
    TypeAliasDeclaration,
    TypeParameter,
    UnionType,
)

INDENT = "    "

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_PRIMITIVE_KEYS = {"string", "number"}


@dataclass(frozen=True)
class RenderContext:
    """Resolves declaration names while rendering a unit."""

    names: Mapping[TypeIdentity, str]

    def name_of(self, identity: TypeIdentity) -> str:
        try:
            return self.names[identity]
        except KeyError:
            raise KeyError(f"No declaration registered for '{identity}'") from None


def render_reference(reference: object, context: RenderContext) -> str:
    """Render a type reference as it appears in a member or alias."""
    renderer = _REFERENCE_RENDERERS.get(type(reference))
    if renderer is None:
        raise TypeError(f"Unsupported type reference: {type(reference).__name__}")
    return renderer(reference, context)


def render_member(member: object, context: RenderContext) -> str:
    """Render a member line including its trailing semicolon."""
    renderer = _MEMBER_RENDERERS.get(type(member))
    if renderer is None:
        raise TypeError(f"Unsupported member: {type(member).__name__}")
    return renderer(member, context)


def render_declaration(declaration: object, context: RenderContext) -> str:
    """Render an exported top-level declaration."""
    renderer = _DECLARATION_RENDERERS.get(type(declaration))
    if renderer is None:
        raise TypeError(f"Unsupported declaration: {type(declaration).__name__}")
    return renderer(declaration, context)


def render_import(statement: ImportFromUnit | ImportFromPath) -> str:
    specifier = resolve_import_path(statement.current_path, statement.target_path)
    return f"import type {{ {statement.name} }} from '{specifier}';"


def quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def property_name(name: str) -> str:
    return name if _IDENTIFIER.match(name) else quote(name)


# ----------------------------------------------------------------------
# Type references


def _builtin(reference: BuiltinType, context: RenderContext) -> str:
    return reference.name


def _declaration_ref(reference: DeclarationRef, context: RenderContext) -> str:
    return context.name_of(reference.identity)


def _imported(reference: ImportedTypeRef, context: RenderContext) -> str:
    return reference.name


def _array(reference: ArrayType, context: RenderContext) -> str:
    element = render_reference(reference.element, context)
    if isinstance(reference.element, (UnionType, IntersectionType)):
        element = f"({element})"
    return f"{element}[]"


def _union(reference: UnionType, context: RenderContext) -> str:
    return " | ".join(render_reference(option, context) for option in reference.options)


def _intersection(reference: IntersectionType, context: RenderContext) -> str:
    parts = []
    for part in reference.parts:
        text = render_reference(part, context)
        parts.append(f"({text})" if isinstance(part, UnionType) else text)
    return " & ".join(parts)


def _literal(reference: LiteralType, context: RenderContext) -> str:
    if isinstance(reference.value, str):
        return quote(reference.value)
    return str(reference.value)


def _generic(reference: GenericType, context: RenderContext) -> str:
    arguments = ", ".join(render_reference(argument, context) for argument in reference.arguments)
    return f"{render_reference(reference.base, context)}<{arguments}>"


def _type_parameter(reference: TypeParameter, context: RenderContext) -> str:
    return reference.name


def _object(reference: ObjectType, context: RenderContext) -> str:
    if not reference.members:
        return "{}"
    inner = " ".join(render_member(member, context) for member in reference.members)
    return f"{{ {inner} }}"


_REFERENCE_RENDERERS: Dict[type, Callable[..., str]] = {
    BuiltinType: _builtin,
    DeclarationRef: _declaration_ref,
    ImportedTypeRef: _imported,
    ArrayType: _array,
    UnionType: _union,
    IntersectionType: _intersection,
    LiteralType: _literal,
    GenericType: _generic,
    TypeParameter: _type_parameter,
    ObjectType: _object,
}


# ----------------------------------------------------------------------
# Members


def _property(member: PropertyMember, context: RenderContext) -> str:
    prefix = "readonly " if member.readonly else ""
    marker = "?" if member.optional else ""
    value = render_reference(member.type, context)
    return f"{prefix}{property_name(member.name)}{marker}: {value};"


def _index_signature(member: IndexSignatureDeclaration, context: RenderContext) -> str:
    key = render_reference(member.key_type, context)
    value = render_reference(member.value_type, context)
    return f"[{member.key_name}: {key}]: {value};"


def _getter(member: GetterDeclaration, context: RenderContext) -> str:
    argument = render_reference(member.argument_type, context)
    result = render_reference(member.result_type, context)
    if argument in _PRIMITIVE_KEYS:
        # string and number keys take the index-signature form.
        return f"[{member.argument_name}: {argument}]: {result};"
    marker = "?" if member.optional else ""
    return f"[{member.argument_name} in {argument}]{marker}: {result};"


_MEMBER_RENDERERS: Dict[type, Callable[..., str]] = {
    PropertyMember: _property,
    IndexSignatureDeclaration: _index_signature,
    GetterDeclaration: _getter,
}


# ----------------------------------------------------------------------
# Declarations


def _interface(declaration: InterfaceDeclaration, context: RenderContext) -> str:
    if not declaration.members:
        return f"export type {declaration.name} = {{}};"
    lines = [f"export type {declaration.name} = {{"]
    lines.extend(f"{INDENT}{render_member(member, context)}" for member in declaration.members)
    lines.append("};")
    return "\n".join(lines)


def _type_alias(declaration: TypeAliasDeclaration, context: RenderContext) -> str:
    parameters = ""
    if declaration.type_parameters:
        parameters = "<" + ", ".join(declaration.type_parameters) + ">"
    aliased = render_reference(declaration.aliased, context)
    return f"export type {declaration.name}{parameters} = {aliased};"


def _enum(declaration: EnumDeclaration, context: RenderContext) -> str:
    lines = [f"export enum {declaration.name} {{"]
    for value in declaration.values:
        rendered = quote(value.value) if isinstance(value.value, str) else str(value.value)
        lines.append(f"{INDENT}{property_name(value.name)} = {rendered},")
    lines.append("}")
    return "\n".join(lines)


_DECLARATION_RENDERERS: Dict[type, Callable[..., str]] = {
    InterfaceDeclaration: _interface,
    TypeAliasDeclaration: _type_alias,
    EnumDeclaration: _enum,
}


__all__ = [
    "INDENT",
    "RenderContext",
    "property_name",
    "quote",
    "render_declaration",
    "render_import",
    "render_member",
    "render_reference",
]
