"""Configuration loading for typedump (.typedump.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .backends import DEFAULT_BACKEND
from .errors import ConfigError
from .models import DumpOptions, LayoutSchema, SortOrder, parse_excluded_namespaces
from .paths.planner import RECOGNISED_EXTENSIONS

CONFIG_FILENAME = ".typedump.yml"

DEFAULT_TOOLCHAIN_ROOT = r"C:\Program Files\Unity\Hub\Editor\*"
DEFAULT_TOOLCHAIN_ASSEMBLIES_ROOT = (
    r"C:\Program Files\Unity\Hub\Editor\*\Editor\Data\Resources\PackageManager"
    r"\ProjectTemplates\libcache\com.unity.template.3d-*\ScriptAssemblies"
)
DEFAULT_ROOT_MARKER = "Editor/Data/Managed/UnityEditor.dll"
DEFAULT_ASSEMBLIES_MARKER = "UnityEngine.UI.dll"


@dataclass
class ToolchainConfig:
    """Marker files that identify a usable toolchain install."""

    root_marker: str = DEFAULT_ROOT_MARKER
    assemblies_marker: str = DEFAULT_ASSEMBLIES_MARKER


@dataclass
class DumpConfig:
    """Represents the settings defined in .typedump.yml."""

    root: Path
    options: DumpOptions = field(
        default_factory=lambda: DumpOptions(
            toolchain_root=DEFAULT_TOOLCHAIN_ROOT,
            toolchain_assemblies_root=DEFAULT_TOOLCHAIN_ASSEMBLIES_ROOT,
        )
    )
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)
    backend: str = DEFAULT_BACKEND
    extensions: List[str] = field(default_factory=lambda: list(RECOGNISED_EXTENSIONS))


def load_config(config_path: Path) -> DumpConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    config = DumpConfig(root=root)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    output = _as_dict(data.get("output"))
    toolchain_data = _as_dict(data.get("toolchain"))
    overrides: Dict[str, Any] = {}

    if "exclude_namespaces" in data:
        overrides["excluded_namespaces"] = parse_excluded_namespaces(
            _as_str_list(data.get("exclude_namespaces"))
        )
    if _as_str(output.get("layout")):
        overrides["layout"] = LayoutSchema.parse(str(output["layout"]))
    if _as_str(output.get("sort")):
        overrides["sort_order"] = SortOrder.parse(str(output["sort"]))
    for key, option in (
        ("flatten", "flatten_hierarchy"),
        ("suppress_metadata", "suppress_metadata"),
        ("must_compile", "must_compile"),
        ("separate_attributes", "separate_assembly_attributes"),
    ):
        value = _as_bool(output.get(key))
        if value is not None:
            overrides[option] = value
    for key, option in (("source", "output_base_path"), ("script", "script_output_path")):
        value = _as_str(output.get(key))
        if value:
            overrides[option] = value

    project = _as_bool(data.get("project"))
    if project is not None:
        overrides["create_solution"] = project
    for key, option in (("root", "toolchain_root"), ("assemblies", "toolchain_assemblies_root")):
        value = _as_str(toolchain_data.get(key))
        if value:
            overrides[option] = value

    config.options = replace(config.options, **overrides)
    config.toolchain = ToolchainConfig(
        root_marker=_as_str(toolchain_data.get("root_marker")) or DEFAULT_ROOT_MARKER,
        assemblies_marker=_as_str(toolchain_data.get("assemblies_marker"))
        or DEFAULT_ASSEMBLIES_MARKER,
    )
    config.backend = _as_str(data.get("backend")) or DEFAULT_BACKEND
    extensions = _as_str_list(output.get("extensions"))
    if extensions:
        config.extensions = [ext if ext.startswith(".") else f".{ext}" for ext in extensions]
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
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
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DumpConfig",
    "ToolchainConfig",
    "load_config",
]
