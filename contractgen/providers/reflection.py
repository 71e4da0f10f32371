"""Type provider that reflects over Python classes and ``typing`` annotations."""

from __future__ import annotations

import collections
import collections.abc
import dataclasses
import datetime
import decimal
import importlib
import inspect
import types
import typing
import uuid
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Sequence, Tuple, TypeVar, Union

from ..errors import ProviderError
from ..logging import get_logger
from ..models import EnumMember, HostMember, HostType, TypeKind
from .base import TypeProvider

_PRIMITIVE_TYPES = (
    int,
    float,
    complex,
    str,
    bytes,
    bool,
    object,
    decimal.Decimal,
    uuid.UUID,
)

_DATE_TYPES = (datetime.datetime, datetime.date, datetime.time)

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

_MAPPING_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)

_NONE_TYPE = type(None)

Bindings = Dict[Any, HostType]


class PythonTypeProvider(TypeProvider):
    """Describes dataclasses, annotated classes, enums and generic aliases.

    Root types are either given explicitly or collected from modules: every
    public enum or annotated class defined in a listed module, in definition
    order. Generic classes are only described when instantiated, since each
    instantiation becomes its own declaration.
    """

    def __init__(self, roots: Iterable[object] = (), modules: Iterable[str] = ()) -> None:
        self._roots = list(roots)
        self._modules = list(modules)
        self.logger = get_logger("providers.reflection")

    def root_types(self) -> Sequence[object]:
        roots: List[object] = list(self._roots)
        for module_name in self._modules:
            for candidate in _module_types(_import_module(module_name)):
                if candidate not in roots:
                    roots.append(candidate)
        self.logger.debug("Collected %d root types", len(roots))
        return roots

    def describe(self, handle: object) -> HostType:
        return self._describe(handle, {})

    # ------------------------------------------------------------------
    # Internal helpers

    def _describe(self, annotation: Any, bindings: Bindings) -> HostType:
        if isinstance(annotation, TypeVar):
            bound = bindings.get(annotation)
            if bound is None:
                raise ProviderError(str(annotation), "unbound type variable")
            return bound

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)

        if origin is typing.Annotated:
            return self._describe(args[0], bindings)
        if origin is Union or origin is types.UnionType:
            return self._describe_union(args, bindings)
        if annotation is Any:
            return HostType(TypeKind.PRIMITIVE, "typing.Any", "Any")
        if annotation is None or annotation is _NONE_TYPE:
            return HostType(TypeKind.PRIMITIVE, "builtins.NoneType", "NoneType")

        if origin is not None:
            if origin in _SEQUENCE_ORIGINS:
                return self._describe_sequence(origin, args, bindings)
            if origin in _MAPPING_ORIGINS:
                return self._describe_mapping(origin, args, bindings)
            if inspect.isclass(origin) and getattr(origin, "__parameters__", ()):
                return self._describe_generic(origin, args, bindings)
            raise ProviderError(_type_name(annotation), "unsupported generic form")

        if not inspect.isclass(annotation):
            raise ProviderError(_type_name(annotation), "not a class or typing annotation")
        if annotation in _SEQUENCE_ORIGINS:
            return self._describe_sequence(annotation, (), bindings)
        if annotation in _MAPPING_ORIGINS:
            return self._describe_mapping(annotation, (), bindings)
        if issubclass(annotation, Enum):
            return _describe_enum(annotation)
        if annotation in _DATE_TYPES:
            return HostType(TypeKind.DATE, _full_name(annotation), annotation.__name__)
        if annotation in _PRIMITIVE_TYPES:
            return HostType(TypeKind.PRIMITIVE, _full_name(annotation), annotation.__name__)
        if getattr(annotation, "__parameters__", ()):
            raise ProviderError(_full_name(annotation), "generic class used without type arguments")
        if _is_structured(annotation):
            return self._describe_object(annotation, (), {})
        raise ProviderError(_full_name(annotation), "class has no annotated fields")

    def _describe_union(self, args: Tuple[Any, ...], bindings: Bindings) -> HostType:
        present = [arg for arg in args if arg is not _NONE_TYPE and arg is not None]
        nullable = len(present) != len(args)
        if len(present) == 1:
            described = self._describe(present[0], bindings)
            return described.as_nullable(True) if nullable else described
        options = tuple(self._describe(arg, bindings) for arg in present)
        return HostType(
            TypeKind.UNION,
            "typing.Union",
            "Union",
            arguments=options,
            options=options,
            nullable=nullable,
        )

    def _describe_sequence(self, origin: Any, args: Tuple[Any, ...], bindings: Bindings) -> HostType:
        if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
            element = self._describe(args[0], bindings)
        elif origin is tuple and len(args) > 1:
            element = self._describe_union(tuple(dict.fromkeys(args)), bindings)
        elif args:
            element = self._describe(args[0], bindings)
        else:
            element = HostType(TypeKind.PRIMITIVE, "typing.Any", "Any")
        return HostType(
            TypeKind.SEQUENCE,
            _full_name(origin),
            origin.__name__,
            arguments=(element,),
            element=element,
        )

    def _describe_mapping(self, origin: Any, args: Tuple[Any, ...], bindings: Bindings) -> HostType:
        if len(args) == 2:
            key = self._describe(args[0], bindings)
            value = self._describe(args[1], bindings)
        else:
            key = HostType(TypeKind.PRIMITIVE, "builtins.str", "str")
            value = HostType(TypeKind.PRIMITIVE, "typing.Any", "Any")
        return HostType(
            TypeKind.MAPPING,
            _full_name(origin),
            origin.__name__,
            arguments=(key, value),
            key=key,
            value=value,
        )

    def _describe_generic(self, origin: type, args: Tuple[Any, ...], bindings: Bindings) -> HostType:
        parameters = origin.__parameters__
        if len(parameters) != len(args):
            raise ProviderError(_full_name(origin), "wrong number of type arguments")
        arguments = tuple(self._describe(arg, bindings) for arg in args)
        return self._describe_object(origin, arguments, dict(zip(parameters, arguments)))

    def _describe_object(
        self, cls: type, arguments: Tuple[HostType, ...], bindings: Bindings
    ) -> HostType:
        def _load() -> List[HostMember]:
            return self._members(cls, bindings)

        return HostType(
            TypeKind.OBJECT,
            _full_name(cls),
            cls.__name__,
            arguments=arguments,
            loader=_load,
        )

    def _members(self, cls: type, bindings: Bindings) -> List[HostMember]:
        try:
            hints = typing.get_type_hints(cls)
        except Exception as exc:
            raise ProviderError(_full_name(cls), f"cannot resolve annotations: {exc}") from exc

        scope = dict(bindings)
        self._collect_base_bindings(cls, scope)

        if dataclasses.is_dataclass(cls):
            names = [item.name for item in dataclasses.fields(cls)]
        else:
            names = [name for name, hint in hints.items() if typing.get_origin(hint) is not ClassVar]

        members: List[HostMember] = []
        for name in names:
            if name.startswith("_") or name not in hints:
                continue
            members.append(HostMember(name=name, type=self._describe(hints[name], scope)))
        return members

    def _collect_base_bindings(self, cls: type, scope: Bindings) -> None:
        for base in getattr(cls, "__orig_bases__", ()):
            origin = typing.get_origin(base)
            if origin is None or origin is typing.Generic:
                continue
            parameters = getattr(origin, "__parameters__", ())
            for parameter, argument in zip(parameters, typing.get_args(base)):
                if parameter not in scope:
                    scope[parameter] = self._describe(argument, scope)
            self._collect_base_bindings(origin, scope)


def _describe_enum(cls: type) -> HostType:
    members = tuple(
        EnumMember(name=member.name, value=member.value)
        for member in cls  # type: ignore[attr-defined]
    )
    return HostType(TypeKind.ENUM, _full_name(cls), cls.__name__, enum_members=members)


def _is_structured(cls: type) -> bool:
    if dataclasses.is_dataclass(cls):
        return True
    return any(inspect.get_annotations(base) for base in cls.__mro__ if base is not object)


def _module_types(module: types.ModuleType) -> List[type]:
    found: List[type] = []
    for name, value in vars(module).items():
        if name.startswith("_") or not inspect.isclass(value):
            continue
        if value.__module__ != module.__name__:
            continue
        if getattr(value, "__parameters__", ()):
            continue
        if issubclass(value, Enum) or _is_structured(value):
            found.append(value)
    return found


def _import_module(module_name: str) -> types.ModuleType:
    try:
        return importlib.import_module(module_name)
    except ImportError as exc:
        raise ProviderError(module_name, f"cannot import module: {exc}") from exc


def _full_name(cls: Any) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _type_name(annotation: Any) -> str:
    if inspect.isclass(annotation):
        return _full_name(annotation)
    return repr(annotation)


__all__ = ["PythonTypeProvider"]
