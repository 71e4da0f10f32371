"""Tests for contractgen.codedom.nodes."""

from __future__ import annotations

import pytest

from contractgen.codedom.nodes import (
    ArrayType,
    BuiltinType,
    DeclarationRef,
    GenericType,
    GetterDeclaration,
    ImportedTypeRef,
    ImportFromPath,
    ImportFromUnit,
    InterfaceDeclaration,
    ObjectType,
    PropertyMember,
    TypeAliasDeclaration,
    Unit,
    UnionType,
    iter_references,
)
from contractgen.errors import DeclarationConflictError
from contractgen.models import TypeIdentity

STRING = BuiltinType("string")


def _interface(full_name: str, name: str) -> InterfaceDeclaration:
    return InterfaceDeclaration(identity=TypeIdentity(full_name), name=name)


def test_unit_rejects_duplicate_declaration_names() -> None:
    unit = Unit(path="models")
    unit.add_declaration(_interface("a.User", "User"))

    with pytest.raises(DeclarationConflictError) as excinfo:
        unit.add_declaration(_interface("b.User", "User"))

    assert excinfo.value.unit_path == "models"
    assert excinfo.value.name == "User"


def test_repeated_imports_collapse_to_one() -> None:
    unit = Unit(path="a/User")
    unit.add_import(ImportFromUnit(name="Role", target_path="a/Role", current_path="a/User"))
    unit.add_import(ImportFromUnit(name="Role", target_path="a/Role", current_path="a/User"))

    assert len(unit.imports) == 1


def test_import_clashing_with_other_import_or_declaration_raises() -> None:
    unit = Unit(path="a/User")
    unit.add_declaration(_interface("a.User", "User"))
    unit.add_import(ImportFromUnit(name="Role", target_path="a/Role", current_path="a/User"))

    with pytest.raises(DeclarationConflictError):
        unit.add_import(ImportFromUnit(name="Role", target_path="b/Role", current_path="a/User"))
    with pytest.raises(DeclarationConflictError):
        unit.add_import(ImportFromPath(name="User", path="shared/User", current_path="a/User"))


def test_import_from_path_exposes_target_path() -> None:
    statement = ImportFromPath(name="Money", path="shared/Money", current_path="a/User")
    assert statement.target_path == "shared/Money"


def test_iter_references_walks_nested_nodes() -> None:
    role = DeclarationRef(TypeIdentity("a.Role"))
    money = ImportedTypeRef("Money", "shared/Money")
    nullable = DeclarationRef(TypeIdentity("contractgen.Nullable"))
    declaration = InterfaceDeclaration(
        identity=TypeIdentity("a.User"),
        name="User",
        members=(
            PropertyMember("roles", ArrayType(role)),
            PropertyMember("balance", GenericType(nullable, (money,))),
            PropertyMember(
                "limits",
                ObjectType((GetterDeclaration(argument_type=role, result_type=UnionType((STRING, money))),)),
            ),
        ),
    )

    found = list(iter_references(declaration))

    assert role in found
    assert money in found
    assert nullable in found
    assert STRING in found


def test_iter_references_covers_alias_targets() -> None:
    alias = TypeAliasDeclaration(identity=TypeIdentity("a.Id"), name="Id", aliased=STRING)
    assert list(iter_references(alias)) == [STRING]
