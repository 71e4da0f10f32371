"""Type-information providers."""

from __future__ import annotations

from .base import TypeProvider
from .reflection import PythonTypeProvider

__all__ = ["PythonTypeProvider", "TypeProvider"]
