"""Translation of host types into TypeScript declarations and references."""

from __future__ import annotations

from typing import Dict, List, Union

from ..codedom.nodes import (
    DECLARATION_TYPES,
    ArrayType,
    BuiltinType,
    Declaration,
    EnumDeclaration,
    EnumValue,
    GenericType,
    GetterDeclaration,
    IndexSignatureDeclaration,
    InterfaceDeclaration,
    IntersectionType,
    LiteralType,
    ObjectType,
    PropertyMember,
    TypeAliasDeclaration,
    TypeParameter,
    TypeReference,
    UnionType,
)
from ..config import DateTimeMode, EnumGenerationMode, GenerationOptions, NullabilityMode
from ..errors import UnmappableTypeError
from ..logging import get_logger
from ..models import HostType, TypeIdentity, TypeKind
from .overrides import MappingContext, NullOverride, TypeOverride

STRING = BuiltinType("string")
NUMBER = BuiltinType("number")
BOOLEAN = BuiltinType("boolean")
NULL = BuiltinType("null")

PRIMITIVES: Dict[str, BuiltinType] = {
    "builtins.int": NUMBER,
    "builtins.float": NUMBER,
    "builtins.complex": NUMBER,
    "decimal.Decimal": NUMBER,
    "builtins.str": STRING,
    "builtins.bytes": STRING,
    "uuid.UUID": STRING,
    "builtins.bool": BOOLEAN,
    "typing.Any": BuiltinType("any"),
    "builtins.object": BuiltinType("unknown"),
    "builtins.NoneType": NULL,
}

BRANDED_DATE_NAMES: Dict[str, str] = {
    "datetime.datetime": "DateTimeString",
    "datetime.date": "DateString",
    "datetime.time": "TimeString",
}

NULLABLE_IDENTITY = TypeIdentity("contractgen.Nullable")

_DECLARED_KINDS = {TypeKind.OBJECT, TypeKind.ENUM}

MappingResult = Union[List[Declaration], TypeReference]


class TypeMapper:
    """Maps one host type at a time; the graph builder handles recursion and caching."""

    def __init__(self, options: GenerationOptions, override: TypeOverride | None = None) -> None:
        self.options = options
        self.override: TypeOverride = override or NullOverride()
        self.logger = get_logger("mapper")

    def map_type(self, host: HostType, context: MappingContext) -> MappingResult:
        """Return the declarations for a named type, or the inline reference for a leaf type."""
        claimed = self.override.try_map(host, context)
        if claimed is not None:
            self.logger.debug("Override claimed %s", host.identity)
            if isinstance(claimed, DECLARATION_TYPES):
                return [claimed]
            return claimed

        if host.kind is TypeKind.OBJECT:
            return [self._map_object(host, context)]
        if host.kind is TypeKind.ENUM:
            return [self._map_enum(host)]
        if host.kind is TypeKind.DATE:
            if self.options.date_time_mode is DateTimeMode.BRANDED:
                return [self._branded_date(host)]
            return STRING
        if host.kind is TypeKind.PRIMITIVE:
            primitive = PRIMITIVES.get(host.full_name)
            if primitive is None:
                raise UnmappableTypeError(str(host.identity), "unknown primitive")
            return primitive
        if host.kind is TypeKind.SEQUENCE:
            if host.element is None:
                raise UnmappableTypeError(str(host.identity), "sequence without element type")
            return ArrayType(self.reference(host.element, context))
        if host.kind is TypeKind.MAPPING:
            return self._map_mapping(host, context)
        if host.kind is TypeKind.UNION:
            if not host.options:
                raise UnmappableTypeError(str(host.identity), "empty union")
            return UnionType(tuple(self.reference(option, context) for option in host.options))
        raise UnmappableTypeError(str(host.identity), f"unsupported kind '{host.kind.value}'")

    def reference(self, host: HostType, context: MappingContext) -> TypeReference:
        """Return the reference a member of type ``host`` uses, including nullability."""
        return self._apply_nullability(self._plain_reference(host, context), host, context)

    # ------------------------------------------------------------------
    # Internal helpers

    def _plain_reference(self, host: HostType, context: MappingContext) -> TypeReference:
        claimed = self.override.try_map(host, context)
        if claimed is not None:
            if isinstance(claimed, DECLARATION_TYPES):
                return context.require(host)
            return claimed
        if host.kind in _DECLARED_KINDS:
            return context.require(host)
        if host.kind is TypeKind.DATE and self.options.date_time_mode is DateTimeMode.BRANDED:
            return context.register(self._branded_date(host))

        mapped = self.map_type(host, context)
        if isinstance(mapped, list):
            raise UnmappableTypeError(str(host.identity), "produced declarations for an inline type")
        return mapped

    def _apply_nullability(
        self, reference: TypeReference, host: HostType, context: MappingContext
    ) -> TypeReference:
        if not host.nullable or reference == NULL:
            return reference
        mode = self.options.nullability
        if mode is NullabilityMode.NONE:
            return reference
        if mode is NullabilityMode.EXPLICIT:
            return UnionType((reference, NULL))
        nullable = context.register(self._nullable_alias())
        return GenericType(nullable, (reference,))

    def _map_object(self, host: HostType, context: MappingContext) -> InterfaceDeclaration:
        members = []
        for member in host.members:
            optional = self.options.enable_optional_properties and member.type.nullable
            members.append(
                PropertyMember(
                    name=member.name,
                    type=self.reference(member.type, context),
                    optional=optional,
                )
            )
        return InterfaceDeclaration(
            identity=host.identity,
            name=declaration_name(host),
            members=tuple(members),
        )

    def _map_enum(self, host: HostType) -> Declaration:
        name = declaration_name(host)
        if self.options.enum_generation_mode is EnumGenerationMode.STRING_UNION:
            literals = tuple(LiteralType(member.name) for member in host.enum_members)
            if not literals:
                return TypeAliasDeclaration(identity=host.identity, name=name, aliased=BuiltinType("never"))
            aliased: TypeReference = literals[0] if len(literals) == 1 else UnionType(literals)
            return TypeAliasDeclaration(identity=host.identity, name=name, aliased=aliased)
        values = []
        for index, member in enumerate(host.enum_members):
            value = member.value
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                value = index
            values.append(EnumValue(name=member.name, value=value))
        return EnumDeclaration(identity=host.identity, name=name, values=tuple(values))

    def _map_mapping(self, host: HostType, context: MappingContext) -> TypeReference:
        if host.key is None or host.value is None:
            raise UnmappableTypeError(str(host.identity), "mapping without key or value type")
        key = self.reference(host.key.as_nullable(False), context)
        value = self.reference(host.value, context)
        if key in (STRING, NUMBER):
            return ObjectType((IndexSignatureDeclaration(key_type=key, value_type=value),))
        return ObjectType((GetterDeclaration(argument_type=key, result_type=value),))

    def _branded_date(self, host: HostType) -> TypeAliasDeclaration:
        name = BRANDED_DATE_NAMES.get(host.full_name) or f"{_pascal(host.name)}String"
        brand = ObjectType((PropertyMember(name="__brand", type=LiteralType(name), readonly=True),))
        return TypeAliasDeclaration(
            identity=TypeIdentity(host.full_name),
            name=name,
            aliased=IntersectionType((STRING, brand)),
        )

    def _nullable_alias(self) -> TypeAliasDeclaration:
        parameter = TypeParameter("T")
        return TypeAliasDeclaration(
            identity=NULLABLE_IDENTITY,
            name="Nullable",
            aliased=UnionType((parameter, NULL)),
            type_parameters=("T",),
        )


def declaration_name(host: HostType) -> str:
    """Name of the declaration generated for ``host``.

    Generic instantiations get ``BaseOfArgAndArg``. Argument names are built
    from host names rather than the TypeScript they map to, so ``Page[int]``
    and ``Page[Decimal]`` stay apart (``PageOfInt``, ``PageOfDecimal``).
    Nullable arguments carry a ``Nullable`` prefix.
    """
    base = _pascal(host.name)
    if not host.arguments:
        return base
    return f"{base}Of" + "And".join(_display_name(argument) for argument in host.arguments)


def _display_name(host: HostType) -> str:
    prefix = "Nullable" if host.nullable else ""
    return prefix + _argument_name(host)


def _argument_name(host: HostType) -> str:
    if host.kind in _DECLARED_KINDS:
        return declaration_name(host)
    if host.kind is TypeKind.SEQUENCE and host.element is not None:
        return f"{_display_name(host.element)}{_pascal(host.name)}"
    if host.kind is TypeKind.MAPPING and host.key is not None and host.value is not None:
        return f"{_display_name(host.key)}To{_display_name(host.value)}{_pascal(host.name)}"
    if host.kind is TypeKind.UNION:
        return "Or".join(_display_name(option) for option in host.options)
    return _pascal(host.name)


def _pascal(name: str) -> str:
    if not name:
        return name
    return name[0].upper() + name[1:]


__all__ = [
    "BOOLEAN",
    "NULL",
    "NULLABLE_IDENTITY",
    "NUMBER",
    "PRIMITIVES",
    "STRING",
    "MappingResult",
    "TypeMapper",
    "declaration_name",
]
