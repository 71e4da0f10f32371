"""Generate TypeScript declaration files from Python data contracts."""

from __future__ import annotations

from .config import GenerationOptions, load_config
from .emitter import UnitEmitter, WriteStatus
from .errors import (
    AmbiguousOverrideError,
    ConflictingCustomFileError,
    ContractGenError,
    DeclarationConflictError,
    ProviderError,
    UnmappableTypeError,
)
from .generator import GenerationReport, Generator
from .graph import GraphBuilder, build
from .paths import resolve_import_path
from .providers import PythonTypeProvider, TypeProvider

__all__ = [
    "AmbiguousOverrideError",
    "ConflictingCustomFileError",
    "ContractGenError",
    "DeclarationConflictError",
    "GenerationOptions",
    "GenerationReport",
    "Generator",
    "GraphBuilder",
    "ProviderError",
    "PythonTypeProvider",
    "TypeProvider",
    "UnitEmitter",
    "UnmappableTypeError",
    "WriteStatus",
    "build",
    "load_config",
    "resolve_import_path",
]
