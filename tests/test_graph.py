"""Tests for contractgen.graph."""

from __future__ import annotations

import pytest

from contractgen.codedom.nodes import (
    ArrayType,
    DeclarationRef,
    ImportFromPath,
    ImportFromUnit,
    InterfaceDeclaration,
    UnionType,
)
from contractgen.config import GenerationOptions
from contractgen.errors import DeclarationConflictError, ProviderError, UnmappableTypeError
from contractgen.graph import GraphBuilder, build
from contractgen.layout import per_namespace, per_type
from contractgen.mapping.mapper import NULL, NULLABLE_IDENTITY
from contractgen.mapping.overrides import PathOverride
from tests._fixtures.host_types import (
    INT,
    STR,
    StaticTypeProvider,
    enum,
    nullable,
    obj,
    primitive,
    seq,
)

OPTIONS = GenerationOptions(enable_optional_properties=False)


def _build(*roots, options: GenerationOptions = OPTIONS, **kwargs):
    kwargs.setdefault("unit_path", per_type("app"))
    return build(list(roots), StaticTypeProvider(*roots), options, **kwargs)


def _by_path(units):
    return {unit.path: unit for unit in units}


def test_shared_dependency_is_declared_once() -> None:
    leaf = obj("app.Leaf", [("id", INT)])
    left = obj("app.Left", [("leaf", leaf)])
    right = obj("app.Right", [("leaf", leaf)])
    top = obj("app.Top", [("left", left), ("right", right)])

    units = _build(top)

    assert [unit.path for unit in units] == ["Leaf", "Left", "Right", "Top"]
    names = [declaration.name for unit in units for declaration in unit.declarations]
    assert names.count("Leaf") == 1
    by_path = _by_path(units)
    assert by_path["Left"].imports == [
        ImportFromUnit(name="Leaf", target_path="Leaf", current_path="Left")
    ]
    assert by_path["Right"].imports == [
        ImportFromUnit(name="Leaf", target_path="Leaf", current_path="Right")
    ]


def test_self_reference_needs_no_import() -> None:
    node = obj("app.Node", lambda: [("value", INT), ("children", seq(node))])

    [unit] = _build(node)

    assert unit.path == "Node"
    assert unit.imports == []


def test_mutual_references_import_each_other() -> None:
    order = obj("app.Order", lambda: [("customer", customer)])
    customer = obj("app.Customer", lambda: [("last_order", nullable(order))])

    units = _by_path(_build(order))

    assert units["Order"].imports == [
        ImportFromUnit(name="Customer", target_path="Customer", current_path="Order")
    ]
    assert units["Customer"].imports == [
        ImportFromUnit(name="Order", target_path="Order", current_path="Customer")
    ]


def test_declarations_follow_breadth_first_order() -> None:
    role = enum("app.Role", ("Admin", 1))
    profile = obj("app.Profile", [("role", role)])
    user = obj("app.User", [("profile", profile), ("tags", seq(STR))])

    [unit] = _build(user, unit_path=per_namespace("app"))

    assert unit.path == "index"
    assert [declaration.name for declaration in unit.declarations] == ["User", "Profile", "Role"]
    assert unit.imports == []


def test_builds_are_deterministic() -> None:
    role = enum("app.enums.Role", ("Admin", 1))
    user = obj("app.models.User", [("role", role), ("tags", seq(STR))])
    group = obj("app.models.Group", [("owner", user), ("role", role)])

    assert _build(group, user) == _build(group, user)
    assert _build(group, user) == _build(user, group)


def test_per_namespace_groups_and_imports_across_namespaces() -> None:
    role = enum("app.enums.Role", ("Admin", 1))
    user = obj("app.models.User", [("role", role)])
    group = obj("app.models.Group", [("members", seq(user))])

    units = _by_path(_build(group, unit_path=per_namespace("app")))

    assert sorted(units) == ["enums", "models"]
    assert [declaration.name for declaration in units["models"].declarations] == ["Group", "User"]
    assert units["models"].imports == [
        ImportFromUnit(name="Role", target_path="enums", current_path="models")
    ]


def test_per_type_mirrors_namespace_directories() -> None:
    role = enum("app.enums.Role", ("Admin", 1))
    user = obj("app.models.User", [("role", role)])

    units = _by_path(_build(user))

    assert sorted(units) == ["enums/Role", "models/User"]
    assert units["models/User"].imports == [
        ImportFromUnit(name="Role", target_path="enums/Role", current_path="models/User")
    ]


def test_global_nullable_alias_lives_in_its_own_unit() -> None:
    options = GenerationOptions(
        use_global_nullable=True,
        enable_optional_properties=False,
        nullable_unit_path="shared/Nullable",
    )
    user = obj("app.models.User", [("email", nullable(STR)), ("phone", nullable(STR))])

    units = _by_path(_build(user, options=options))

    assert sorted(units) == ["models/User", "shared/Nullable"]
    [alias] = units["shared/Nullable"].declarations
    assert alias.identity == NULLABLE_IDENTITY
    assert units["models/User"].imports == [
        ImportFromUnit(name="Nullable", target_path="shared/Nullable", current_path="models/User")
    ]


def test_path_override_adds_import_from_literal_path() -> None:
    override = PathOverride.from_config({"decimal.Decimal": {"name": "Money", "path": "shared/Money.ts"}})
    user = obj("app.models.User", [("balance", primitive("decimal.Decimal"))])

    [unit] = _build(user, override=override)

    assert unit.imports == [ImportFromPath(name="Money", path="shared/Money", current_path="models/User")]


def test_generic_instantiations_become_separate_declarations() -> None:
    user = obj("app.User", [("id", INT)])
    role = enum("app.Role", ("Admin", 1))
    user_page = obj("app.Page", lambda: [("items", seq(user))], arguments=(user,))
    role_page = obj("app.Page", lambda: [("items", seq(role))], arguments=(role,))
    listing = obj("app.Listing", [("users", user_page), ("roles", role_page)])

    units = _by_path(_build(listing))

    assert sorted(units) == ["Listing", "PageOfRole", "PageOfUser", "Role", "User"]
    page = units["PageOfUser"].declarations[0]
    assert isinstance(page, InterfaceDeclaration)
    assert page.members[0].type.element == DeclarationRef(user.identity)



def test_nullable_argument_is_a_separate_instantiation() -> None:
    user = obj("app.User", [("id", INT)])
    page = obj("app.Page", lambda: [("items", seq(user))], arguments=(user,))
    maybe_page = obj(
        "app.Page", lambda: [("items", seq(nullable(user)))], arguments=(nullable(user),)
    )
    listing = obj("app.Listing", [("users", page), ("maybe", maybe_page)])

    units = _by_path(_build(listing))

    assert sorted(units) == ["Listing", "PageOfNullableUser", "PageOfUser", "User"]
    [maybe] = units["PageOfNullableUser"].declarations
    assert maybe.members[0].type == ArrayType(UnionType((DeclarationRef(user.identity), NULL)))
    [plain] = units["PageOfUser"].declarations
    assert plain.members[0].type == ArrayType(DeclarationRef(user.identity))


def test_instantiations_sharing_a_name_are_numbered_in_discovery_order() -> None:
    first_user = obj("app.a.User", [("id", INT)])
    second_user = obj("app.b.User", [("id", STR)])
    first_page = obj("app.Page", lambda: [("items", seq(first_user))], arguments=(first_user,))
    second_page = obj("app.Page", lambda: [("items", seq(second_user))], arguments=(second_user,))
    listing = obj("app.Listing", [("first", first_page), ("second", second_page)])

    units = _by_path(_build(listing))

    assert sorted(units) == ["Listing", "PageOfUser", "PageOfUser2", "a/User", "b/User"]
    assert units["Listing"].imports == [
        ImportFromUnit(name="PageOfUser", target_path="PageOfUser", current_path="Listing"),
        ImportFromUnit(name="PageOfUser2", target_path="PageOfUser2", current_path="Listing"),
    ]
    assert _build(listing) == _build(listing)


def test_inline_roots_declare_nothing() -> None:
    assert _build(STR, seq(INT)) == []


def test_unmappable_member_aborts_build() -> None:
    user = obj("app.User", [("count", primitive("numpy.int64"))])

    with pytest.raises(UnmappableTypeError) as excinfo:
        _build(user)

    assert excinfo.value.type_name == "numpy.int64"


def test_name_collision_in_one_unit_raises() -> None:
    first = obj("app.a.User", [("id", INT)])
    second = obj("app.b.User", [("id", INT)])

    with pytest.raises(DeclarationConflictError):
        _build(first, second, unit_path=lambda declaration: "all")


def test_provider_errors_propagate() -> None:
    builder = GraphBuilder(StaticTypeProvider(), OPTIONS)

    with pytest.raises(ProviderError):
        builder.build(["not-a-host-type"])


def test_fresh_builder_per_run_does_not_share_cache() -> None:
    user = obj("app.User", [("id", INT)])
    provider = StaticTypeProvider(user)

    first = GraphBuilder(provider, OPTIONS).build([user])
    second = GraphBuilder(provider, OPTIONS).build([])

    assert len(first) == 1
    assert second == []
