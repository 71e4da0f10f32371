"""Host type model produced by type providers and consumed by the mapper."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from functools import cached_property
from typing import Callable, Optional, Sequence, Tuple, Union


class TypeKind(str, Enum):
    """Structural shape of a host type."""

    PRIMITIVE = "primitive"
    DATE = "date"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    ENUM = "enum"
    OBJECT = "object"
    UNION = "union"


@dataclass(frozen=True)
class TypeIdentity:
    """Dedup key: fully-qualified name plus resolved generic arguments.

    ``nullable`` is only set on argument identities: ``Page[Optional[User]]``
    and ``Page[User]`` are distinct instantiations, while a nullable
    reference to ``User`` still resolves to the one ``User`` declaration.
    """

    full_name: str
    arguments: Tuple["TypeIdentity", ...] = ()
    nullable: bool = False

    @property
    def namespace(self) -> str:
        head, _, _ = self.full_name.rpartition(".")
        return head

    def __str__(self) -> str:
        text = self.full_name
        if self.arguments:
            inner = ", ".join(str(argument) for argument in self.arguments)
            text = f"{text}[{inner}]"
        return f"Optional[{text}]" if self.nullable else text


@dataclass(frozen=True)
class EnumMember:
    """Single enumeration entry."""

    name: str
    value: Union[int, str]


@dataclass(frozen=True)
class HostMember:
    """Named member of an object host type."""

    name: str
    type: "HostType"


@dataclass(frozen=True)
class HostType:
    """Provider-neutral description of one host type occurrence."""

    kind: TypeKind
    full_name: str
    name: str
    arguments: Tuple["HostType", ...] = ()
    nullable: bool = False
    element: Optional["HostType"] = None
    key: Optional["HostType"] = None
    value: Optional["HostType"] = None
    options: Tuple["HostType", ...] = ()
    enum_members: Tuple[EnumMember, ...] = ()
    # Object members are loaded on first access so cyclic graphs can be described.
    loader: Optional[Callable[[], Sequence[HostMember]]] = field(
        default=None, compare=False, repr=False
    )

    @property
    def identity(self) -> TypeIdentity:
        arguments = tuple(
            replace(argument.identity, nullable=argument.nullable) for argument in self.arguments
        )
        return TypeIdentity(self.full_name, arguments)

    @property
    def namespace(self) -> str:
        return self.identity.namespace

    @cached_property
    def members(self) -> Tuple[HostMember, ...]:
        if self.loader is None:
            return ()
        return tuple(self.loader())

    def as_nullable(self, nullable: bool = True) -> "HostType":
        """Return a copy of this type with the given nullability."""
        if self.nullable == nullable:
            return self
        return replace(self, nullable=nullable)


__all__ = ["EnumMember", "HostMember", "HostType", "TypeIdentity", "TypeKind"]
