"""Unit path policies: which output file a declaration lands in."""

from __future__ import annotations

from typing import Callable, Optional

from .codedom.nodes import Declaration
from .config import Layout

UnitPathPolicy = Callable[[Declaration], str]


def per_type(root_namespace: Optional[str] = None) -> UnitPathPolicy:
    """One file per declaration, nested in directories mirroring its namespace."""

    def _policy(declaration: Declaration) -> str:
        directory = _relative_namespace(declaration.identity.namespace, root_namespace)
        return f"{directory}/{declaration.name}" if directory else declaration.name

    return _policy


def per_namespace(root_namespace: Optional[str] = None, *, default: str = "index") -> UnitPathPolicy:
    """One file per namespace; declarations outside any namespace go to ``default``."""

    def _policy(declaration: Declaration) -> str:
        return _relative_namespace(declaration.identity.namespace, root_namespace) or default

    return _policy


def policy_for(layout: Layout, root_namespace: Optional[str] = None) -> UnitPathPolicy:
    if layout is Layout.PER_NAMESPACE:
        return per_namespace(root_namespace)
    return per_type(root_namespace)


def _relative_namespace(namespace: str, root_namespace: Optional[str]) -> str:
    if root_namespace:
        if namespace == root_namespace:
            namespace = ""
        elif namespace.startswith(f"{root_namespace}."):
            namespace = namespace[len(root_namespace) + 1 :]
    return namespace.replace(".", "/")


__all__ = ["UnitPathPolicy", "per_namespace", "per_type", "policy_for"]
