"""Relative import paths between logical unit paths."""

from __future__ import annotations

from typing import List


def normalise_unit_path(path: str) -> str:
    """Return a slash-separated logical path without leading/trailing separators or ``.ts``."""
    cleaned = path.replace("\\", "/").strip()
    if cleaned.endswith(".ts"):
        cleaned = cleaned[: -len(".ts")]
    parts = [part for part in cleaned.split("/") if part and part != "."]
    return "/".join(parts)


def resolve_import_path(from_unit_path: str, to_unit_path: str) -> str:
    """Return the module specifier that ``from_unit_path`` uses to import ``to_unit_path``."""
    source = normalise_unit_path(from_unit_path)
    target = normalise_unit_path(to_unit_path)
    if not target:
        raise ValueError("Import target path must not be empty")
    if source == target:
        raise ValueError(f"Unit '{source}' cannot import itself")

    source_dir: List[str] = source.split("/")[:-1] if source else []
    target_parts = target.split("/")

    common = 0
    while (
        common < len(source_dir)
        and common < len(target_parts) - 1
        and source_dir[common] == target_parts[common]
    ):
        common += 1

    ascent = len(source_dir) - common
    descent = "/".join(target_parts[common:])
    if ascent == 0:
        return f"./{descent}"
    return "../" * ascent + descent


__all__ = ["normalise_unit_path", "resolve_import_path"]
