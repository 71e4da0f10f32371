"""Pipeline orchestration: build the graph, emit every unit, then write files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .codedom.nodes import Unit
from .config import ContractGenConfig, GenerationOptions
from .emitter import UnitEmitter, WriteStatus
from .errors import ConflictingCustomFileError
from .graph import GraphBuilder
from .layout import UnitPathPolicy, policy_for
from .logging import get_logger
from .mapping.overrides import CompositeOverride, PathOverride, TypeOverride, discover_overrides
from .providers.base import TypeProvider
from .providers.reflection import PythonTypeProvider


@dataclass
class GenerationReport:
    """Outcome of writing one run's units to disk."""

    output_dir: Path
    created: List[Path] = field(default_factory=list)
    updated: List[Path] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)
    conflicts: List[ConflictingCustomFileError] = field(default_factory=list)

    @property
    def written(self) -> List[Path]:
        return self.created + self.updated


class Generator:
    """Coordinates a generation run over one provider."""

    def __init__(
        self,
        provider: TypeProvider,
        options: GenerationOptions | None = None,
        *,
        override: TypeOverride | None = None,
        unit_path: UnitPathPolicy | None = None,
        emitter: UnitEmitter | None = None,
    ) -> None:
        self.provider = provider
        self.options = options or GenerationOptions()
        self.override = override
        self.unit_path = unit_path
        self.emitter = emitter or UnitEmitter(self.options)
        self.logger = get_logger("generator")

    @classmethod
    def from_config(
        cls,
        config: ContractGenConfig,
        *,
        modules: Sequence[str] | None = None,
        overrides: Iterable[TypeOverride] | None = None,
    ) -> "Generator":
        """Create a generator wired from .contractgen.yml settings."""
        provider = PythonTypeProvider(modules=list(modules) if modules else config.modules)
        hooks: List[TypeOverride] = []
        if config.overrides:
            hooks.append(PathOverride.from_config(config.overrides))
        hooks.extend(overrides if overrides is not None else discover_overrides())
        return cls(
            provider,
            config.options,
            override=CompositeOverride(hooks) if hooks else None,
            unit_path=policy_for(config.layout, config.root_namespace),
            emitter=UnitEmitter(config.options, templates_dir=config.templates_dir),
        )

    def build(self, root_types: Optional[Sequence[object]] = None) -> List[Unit]:
        roots = list(root_types) if root_types is not None else list(self.provider.root_types())
        builder = GraphBuilder(
            self.provider,
            self.options,
            override=self.override,
            unit_path=self.unit_path,
        )
        return builder.build(roots)

    def generate(self, root_types: Optional[Sequence[object]] = None) -> Dict[str, str]:
        """Return ``unit path -> text`` for every unit; raises before any output on graph errors."""
        units = self.build(root_types)
        return {unit.path: self.emitter.emit(unit, units) for unit in units}

    def generate_files(
        self, output_dir: Path, root_types: Optional[Sequence[object]] = None
    ) -> GenerationReport:
        """Generate every unit and merge-write it below ``output_dir``."""
        texts = self.generate(root_types)
        report = GenerationReport(output_dir=output_dir)
        for unit_path, text in texts.items():
            target = output_dir / f"{unit_path}.ts"
            try:
                status = self.emitter.write(target, text)
            except ConflictingCustomFileError as exc:
                self.logger.warning("%s", exc)
                report.conflicts.append(exc)
                continue
            if status is WriteStatus.CREATED:
                report.created.append(target)
            elif status is WriteStatus.UPDATED:
                report.updated.append(target)
            else:
                report.unchanged.append(target)
        self.logger.info(
            "Wrote %d files (%d unchanged, %d conflicts) to %s",
            len(report.written),
            len(report.unchanged),
            len(report.conflicts),
            output_dir,
        )
        return report


__all__ = ["GenerationReport", "Generator"]
