"""Unit serialization and marker-preserving file writes."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader

from .codedom.nodes import Unit
from .codedom.render import RenderContext, render_declaration, render_import
from .config import GenerationOptions, LinterDisableMode
from .errors import ConflictingCustomFileError
from .logging import get_logger
from .models import TypeIdentity

GENERATED_HEADER = "// This file was generated by contractgen. Changes above the marker are overwritten."


class WriteStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class UnitEmitter:
    """Renders units through the unit template and merge-writes them to disk."""

    TEMPLATE_NAME = "unit.ts.j2"

    def __init__(self, options: GenerationOptions, templates_dir: Path | None = None) -> None:
        self.options = options
        self.templates_dir = templates_dir
        self.logger = get_logger("emitter")
        self._env = self._create_env(templates_dir)
        self._marker_pattern = re.compile(
            r"^" + re.escape(self.marker_line) + r"[ \t]*(?:\r?\n|\Z)", re.MULTILINE
        )

    @property
    def marker_line(self) -> str:
        return f"// {self.options.content_marker}"

    def emit(self, unit: Unit, all_units: Iterable[Unit]) -> str:
        """Return the generated text of ``unit``, ending with the marker line."""
        names: Dict[TypeIdentity, str] = {}
        for other in all_units:
            for declaration in other.declarations:
                names[declaration.identity] = declaration.name
        context = RenderContext(names=names)

        imports = sorted(unit.imports, key=lambda statement: (statement.target_path, statement.name))
        mode = self.options.linter_disable_mode
        template = self._env.get_template(self.TEMPLATE_NAME)
        return template.render(
            header=GENERATED_HEADER,
            disable_per_file=mode is LinterDisableMode.PER_FILE,
            disable_per_line=mode is LinterDisableMode.PER_LINE,
            imports=[render_import(statement) for statement in imports],
            declarations=[render_declaration(declaration, context) for declaration in unit.declarations],
            marker=self.options.content_marker,
        )

    def write(self, path: Path, text: str) -> WriteStatus:
        """Write ``text`` to ``path``, keeping any hand-written section after the marker."""
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8", newline="\n")
            return WriteStatus.CREATED

        existing = path.read_text(encoding="utf-8")
        custom = self.custom_section(existing)
        if custom is None:
            raise ConflictingCustomFileError(path, self.options.content_marker)

        merged = text + custom
        if merged == existing:
            return WriteStatus.UNCHANGED
        path.write_text(merged, encoding="utf-8", newline="\n")
        return WriteStatus.UPDATED

    def custom_section(self, existing: str) -> Optional[str]:
        """Return everything after the marker line, or None when the marker is absent."""
        match = self._marker_pattern.search(existing)
        if match is None:
            return None
        return existing[match.end():]

    def _create_env(self, templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


__all__ = ["GENERATED_HEADER", "UnitEmitter", "WriteStatus"]
