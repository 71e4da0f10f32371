"""Sample contract types for reflection and end-to-end generation tests."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class Role(Enum):
    ADMIN = 1
    USER = 2


class Status(Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


@dataclass
class Address:
    street: str
    zip_code: Optional[str] = None


@dataclass
class User:
    id: int
    name: str
    role: Role
    address: Optional[Address] = None
    tags: List[str] = field(default_factory=list)
    created: Optional[datetime.datetime] = None
    _secret: str = ""
    registry: ClassVar[int] = 0


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int


@dataclass
class UserPage:
    page: Page[User]
    labels: Dict[str, int]
    by_status: Dict[Status, User]


@dataclass
class TreeNode:
    value: int
    children: List[TreeNode] = field(default_factory=list)
    parent: Optional[TreeNode] = None


class Plain:
    title: str
    count: int


class NoFields:
    pass
