"""Contracts for the renderers that turn a type model into files."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Protocol

from ..models import TypeEntry, TypeModel

SortKey = Callable[[TypeEntry], Any]


class SourceRenderer(Protocol):
    """Writes source declarations of one model using a given file layout."""

    def write_single_file(self, path: str, sort_key: SortKey) -> None:
        """Write every type into one file."""

    def write_files_by_namespace(self, path: str, sort_key: SortKey, flatten: bool) -> None:
        """Write one file per namespace below ``path``."""

    def write_files_by_assembly(
        self, path: str, sort_key: SortKey, separate_attributes: bool
    ) -> None:
        """Write one file per assembly below ``path``."""

    def write_files_by_class(self, path: str, flatten: bool) -> None:
        """Write one file per type in namespace folders below ``path``."""

    def write_files_by_class_tree(self, path: str, separate_attributes: bool) -> None:
        """Write one file per type in assembly and namespace folders below ``path``."""

    def write_solution(
        self, path: str, toolchain_root: str, toolchain_assemblies_root: str
    ) -> None:
        """Write a class tree plus solution and project descriptors."""


class SourceRendererFactory(Protocol):
    """Builds a source renderer bound to one model and its output switches."""

    def __call__(
        self,
        model: TypeModel,
        *,
        excluded_namespaces: Iterable[str],
        suppress_metadata: bool,
        must_compile: bool,
    ) -> SourceRenderer:
        ...


class ScriptRenderer(Protocol):
    """Writes a disassembler integration script for one model."""

    def write_script(self, model: TypeModel, path: str) -> None:
        """Write the script for ``model`` to ``path``."""


__all__ = ["ScriptRenderer", "SortKey", "SourceRenderer", "SourceRendererFactory"]
