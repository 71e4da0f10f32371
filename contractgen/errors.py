"""Error taxonomy shared by the graph builder, mapper, providers and emitter."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class ContractGenError(RuntimeError):
    """Base class for every error raised by a generation run."""


class UnmappableTypeError(ContractGenError):
    """Raised when neither an override nor a default rule can map a host type."""

    def __init__(self, type_name: str, reason: str | None = None) -> None:
        message = f"Cannot map type '{type_name}' to TypeScript"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.type_name = type_name
        self.reason = reason


class AmbiguousOverrideError(ContractGenError):
    """Raised when more than one override claims the same host type."""

    def __init__(self, type_name: str, candidates: Sequence[str]) -> None:
        joined = ", ".join(candidates)
        super().__init__(f"Type '{type_name}' is claimed by several overrides: {joined}")
        self.type_name = type_name
        self.candidates = list(candidates)


class ProviderError(ContractGenError):
    """Raised when a type provider cannot describe a root or member type."""

    def __init__(self, type_name: str, reason: str | None = None) -> None:
        message = f"Type provider cannot resolve '{type_name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.type_name = type_name
        self.reason = reason


class DeclarationConflictError(ContractGenError):
    """Raised when two different declarations would share a name inside one unit."""

    def __init__(self, unit_path: str, name: str) -> None:
        super().__init__(f"Name '{name}' is declared or imported twice in unit '{unit_path}'")
        self.unit_path = unit_path
        self.name = name


class ConflictingCustomFileError(ContractGenError):
    """Raised when a target file exists but carries no generated-content marker."""

    def __init__(self, path: Path, marker: str) -> None:
        super().__init__(
            f"{path} exists without the marker '{marker}'; treating it as hand-written and skipping it"
        )
        self.path = path
        self.marker = marker


__all__ = [
    "AmbiguousOverrideError",
    "ConflictingCustomFileError",
    "ContractGenError",
    "DeclarationConflictError",
    "ProviderError",
    "UnmappableTypeError",
]
