"""Core data models shared across typedump components."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .errors import ConfigError

DEFAULT_EXCLUDED_NAMESPACES: Tuple[str, ...] = (
    "System",
    "Mono",
    "Microsoft.Win32",
    "Unity",
    "UnityEditor",
    "UnityEngine",
    "UnityEngineInternal",
    "AOT",
    "JetBrains.Annotations",
)

# Literal accepted in place of a namespace list to disable exclusion entirely.
NO_EXCLUSIONS = "none"


class LayoutSchema(str, Enum):
    """Partitioning of source output into files."""

    SINGLE = "single"
    NAMESPACE = "namespace"
    ASSEMBLY = "assembly"
    CLASS = "class"
    TREE = "tree"

    @classmethod
    def parse(cls, value: str) -> "LayoutSchema":
        return _parse_enum(cls, value, "layout")


class SortOrder(str, Enum):
    """Ordering of type definitions inside a single artifact."""

    INDEX = "index"
    NAME = "name"

    @classmethod
    def parse(cls, value: str) -> "SortOrder":
        return _parse_enum(cls, value, "sort order")


@dataclass(frozen=True)
class MethodEntry:
    """A method of a reconstructed type with its virtual address, if known."""

    name: str
    address: Optional[int] = None


@dataclass(frozen=True)
class TypeEntry:
    """A single type definition exposed by a type model."""

    index: int
    name: str
    namespace: str = ""
    assembly: str = ""
    declaration: str = ""
    compiler_generated: bool = False
    methods: Tuple[MethodEntry, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name


@dataclass
class TypeModel:
    """Reconstructed type model of one image."""

    image_name: str
    types: List[TypeEntry]
    assembly_attributes: Dict[str, List[str]] = field(default_factory=dict)

    def assemblies(self) -> List[str]:
        """Return assembly names in first-seen order."""
        seen: Dict[str, None] = {}
        for entry in self.types:
            seen.setdefault(entry.assembly, None)
        for name in self.assembly_attributes:
            seen.setdefault(name, None)
        return list(seen)


@dataclass
class Image:
    """One analysed module discovered in a binary/metadata pair."""

    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DumpOptions:
    """Immutable settings for one dump run."""

    excluded_namespaces: FrozenSet[str] = frozenset(DEFAULT_EXCLUDED_NAMESPACES)
    layout: LayoutSchema = LayoutSchema.SINGLE
    sort_order: SortOrder = SortOrder.INDEX
    flatten_hierarchy: bool = False
    suppress_metadata: bool = False
    must_compile: bool = False
    separate_assembly_attributes: bool = False
    create_solution: bool = False
    toolchain_root: str = ""
    toolchain_assemblies_root: str = ""
    output_base_path: str = "types.cs"
    script_output_path: str = "ida.py"

    def effective(self) -> "DumpOptions":
        """Return the options dispatch should act on.

        Solution mode implies tree layout, compile tidying and separate
        assembly attribute files. The configured instance is left untouched.
        """
        if not self.create_solution:
            return self
        return replace(
            self,
            layout=LayoutSchema.TREE,
            must_compile=True,
            separate_assembly_attributes=True,
        )


def parse_excluded_namespaces(values: Iterable[str] | None) -> FrozenSet[str]:
    """Normalise a namespace list, honouring the ``none`` literal."""
    if values is None:
        return frozenset(DEFAULT_EXCLUDED_NAMESPACES)
    cleaned = [value.strip() for value in values if value and value.strip()]
    if len(cleaned) == 1 and cleaned[0].lower() == NO_EXCLUSIONS:
        return frozenset()
    return frozenset(cleaned)


def _parse_enum(enum_cls: Any, value: str, label: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"Unknown {label} '{value}' (expected one of: {choices})") from exc


def is_excluded(namespace: str, excluded: Iterable[str]) -> bool:
    """Return True when ``namespace`` is an excluded namespace or nested in one."""
    for prefix in excluded:
        if namespace == prefix or namespace.startswith(f"{prefix}."):
            return True
    return False


def select_types(model: TypeModel, excluded: Iterable[str]) -> List[TypeEntry]:
    """Return the model's types minus those in excluded namespaces, in model order."""
    excluded_set = frozenset(excluded)
    if not excluded_set:
        return list(model.types)
    return [entry for entry in model.types if not is_excluded(entry.namespace, excluded_set)]


@dataclass(frozen=True)
class ToolchainPaths:
    """Resolved toolchain locations referenced by generated project files."""

    root: str
    assemblies_root: str
