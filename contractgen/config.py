"""Configuration loading for contractgen (.contractgen.yml) and generation options."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import yaml

CONFIG_FILENAME = ".contractgen.yml"
DEFAULT_CONTENT_MARKER = "contractgen's generated content"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


class NullabilityMode(str, Enum):
    NONE = "none"
    EXPLICIT = "explicit"
    USE_GLOBAL_NULLABLE = "use_global_nullable"


class EnumGenerationMode(str, Enum):
    NUMERIC = "numeric"
    STRING_UNION = "string_union"


class LinterDisableMode(str, Enum):
    NONE = "none"
    PER_FILE = "per_file"
    PER_LINE = "per_line"


class DateTimeMode(str, Enum):
    STRING = "string"
    BRANDED = "branded"


class Layout(str, Enum):
    PER_TYPE = "per_type"
    PER_NAMESPACE = "per_namespace"


@dataclass(frozen=True)
class GenerationOptions:
    """Options resolved once per run and passed explicitly to mapping and emitting."""

    enable_explicit_nullability: bool = True
    enable_optional_properties: bool = True
    enum_generation_mode: EnumGenerationMode = EnumGenerationMode.NUMERIC
    use_global_nullable: bool = False
    nullability_mode: Optional[NullabilityMode] = None
    linter_disable_mode: LinterDisableMode = LinterDisableMode.NONE
    custom_content_marker: Optional[str] = None
    date_time_mode: DateTimeMode = DateTimeMode.STRING
    nullable_unit_path: str = "Nullable"

    @property
    def nullability(self) -> NullabilityMode:
        """Effective nullability; an explicit mode wins over the legacy flags."""
        if self.nullability_mode is not None:
            return self.nullability_mode
        if self.use_global_nullable:
            return NullabilityMode.USE_GLOBAL_NULLABLE
        if self.enable_explicit_nullability:
            return NullabilityMode.EXPLICIT
        return NullabilityMode.NONE

    @property
    def content_marker(self) -> str:
        return self.custom_content_marker or DEFAULT_CONTENT_MARKER


@dataclass
class ContractGenConfig:
    """Represents the settings defined in .contractgen.yml."""

    root: Path
    output_dir: Optional[Path] = None
    modules: List[str] = field(default_factory=list)
    layout: Layout = Layout.PER_TYPE
    root_namespace: Optional[str] = None
    options: GenerationOptions = field(default_factory=GenerationOptions)
    overrides: Dict[str, Dict[str, str]] = field(default_factory=dict)
    templates_dir: Optional[Path] = None


def load_config(config_path: Path) -> ContractGenConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ContractGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output = _as_str(data.get("output"))
    templates_dir = _as_str(data.get("templates_dir"))

    return ContractGenConfig(
        root=root,
        output_dir=root / output if output else None,
        modules=_as_str_list(data.get("modules")),
        layout=_as_enum(Layout, data.get("layout"), "layout") or Layout.PER_TYPE,
        root_namespace=_as_str(data.get("root_namespace")),
        options=_parse_options(_as_dict(data.get("generation"))),
        overrides=_parse_overrides(data.get("overrides")),
        templates_dir=root / templates_dir if templates_dir else None,
    )


def _parse_options(data: Dict[str, Any]) -> GenerationOptions:
    defaults = GenerationOptions()
    if not data:
        return defaults

    def _flag(key: str, default: bool) -> bool:
        value = _as_bool(data.get(key))
        return default if value is None else value

    return GenerationOptions(
        enable_explicit_nullability=_flag(
            "enable_explicit_nullability", defaults.enable_explicit_nullability
        ),
        enable_optional_properties=_flag(
            "enable_optional_properties", defaults.enable_optional_properties
        ),
        enum_generation_mode=_as_enum(
            EnumGenerationMode, data.get("enum_generation_mode"), "enum_generation_mode"
        )
        or defaults.enum_generation_mode,
        use_global_nullable=_flag("use_global_nullable", defaults.use_global_nullable),
        nullability_mode=_as_enum(NullabilityMode, data.get("nullability_mode"), "nullability_mode"),
        linter_disable_mode=_as_enum(
            LinterDisableMode, data.get("linter_disable_mode"), "linter_disable_mode"
        )
        or defaults.linter_disable_mode,
        custom_content_marker=_as_str(data.get("custom_content_marker")),
        date_time_mode=_as_enum(DateTimeMode, data.get("date_time_mode"), "date_time_mode")
        or defaults.date_time_mode,
        nullable_unit_path=_as_str(data.get("nullable_unit_path")) or defaults.nullable_unit_path,
    )


def _parse_overrides(value: Any) -> Dict[str, Dict[str, str]]:
    overrides: Dict[str, Dict[str, str]] = {}
    for full_name, spec in _as_dict(value).items():
        spec_map = _as_dict(spec)
        name = _as_str(spec_map.get("name"))
        path = _as_str(spec_map.get("path"))
        if not name or not path:
            raise ConfigError(f"Override for '{full_name}' needs both 'name' and 'path'")
        overrides[str(full_name)] = {"name": name, "path": path}
    return overrides


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


_E = TypeVar("_E", bound=Enum)


def _as_enum(enum_type: Type[_E], value: Any, key: str) -> Optional[_E]:
    if value is None:
        return None
    text = str(value).strip().lower().replace("-", "_")
    for member in enum_type:
        if member.value == text:
            return member
    allowed = ", ".join(member.value for member in enum_type)
    raise ConfigError(f"Invalid value '{value}' for '{key}'; expected one of: {allowed}")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ContractGenConfig",
    "DEFAULT_CONTENT_MARKER",
    "DateTimeMode",
    "EnumGenerationMode",
    "GenerationOptions",
    "Layout",
    "LinterDisableMode",
    "NullabilityMode",
    "load_config",
]
