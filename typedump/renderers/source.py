"""Plain source-text renderer for reconstructed type models."""

from __future__ import annotations

import re
import uuid
from collections import defaultdict
from itertools import groupby
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from ..logging import get_logger
from ..models import TypeEntry, TypeModel, select_types
from .base import SortKey

GLOBAL_NAMESPACE = "global"
ASSEMBLY_INFO_FILE = "AssemblyInfo.cs"
SOURCE_SUFFIX = ".cs"

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
_INDENT = "\t"

# GUID namespace for stable project identifiers across runs.
_PROJECT_GUID_NAMESPACE = uuid.UUID("3e1c5b2a-7d4f-4b9e-9a57-2f0e6c8d1a43")
_CSHARP_PROJECT_TYPE = "FAE04EC0-301F-11D3-BF4B-00C04F79EFBC"


class SourceTextRenderer:
    """Writes declarations of one model using the requested file layout."""

    def __init__(
        self,
        model: TypeModel,
        *,
        excluded_namespaces: Iterable[str] = (),
        suppress_metadata: bool = False,
        must_compile: bool = False,
    ) -> None:
        self.model = model
        self.excluded_namespaces = frozenset(excluded_namespaces)
        self.suppress_metadata = suppress_metadata
        self.must_compile = must_compile
        self.logger = get_logger("renderers.source")

    # ------------------------------------------------------------------
    # Layouts

    def write_single_file(self, path: str, sort_key: SortKey) -> None:
        types = sorted(self._types(), key=sort_key)
        attributes = [
            line
            for assembly in self.model.assemblies()
            for line in self.model.assembly_attributes.get(assembly, [])
        ]
        self._write(Path(path), types, attributes)

    def write_files_by_namespace(self, path: str, sort_key: SortKey, flatten: bool) -> None:
        root = Path(path)
        grouped: Dict[str, List[TypeEntry]] = defaultdict(list)
        for entry in self._types():
            grouped[entry.namespace].append(entry)
        for namespace, entries in grouped.items():
            target = root / (self._namespace_path(namespace, flatten) + SOURCE_SUFFIX)
            self._write(target, sorted(entries, key=sort_key))

    def write_files_by_assembly(
        self, path: str, sort_key: SortKey, separate_attributes: bool
    ) -> None:
        root = Path(path)
        grouped = self._group_by_assembly()
        for assembly in self.model.assemblies():
            name = _assembly_stem(assembly)
            attributes = self.model.assembly_attributes.get(assembly, [])
            entries = sorted(grouped.get(assembly, []), key=sort_key)
            if separate_attributes:
                if attributes:
                    self._write(root / f"{name}.{ASSEMBLY_INFO_FILE}", [], attributes)
                attributes = []
            if entries or attributes:
                self._write(root / (name + SOURCE_SUFFIX), entries, attributes)

    def write_files_by_class(self, path: str, flatten: bool) -> None:
        root = Path(path)
        files: Dict[Path, List[TypeEntry]] = defaultdict(list)
        for entry in self._types():
            folder = root / self._namespace_path(entry.namespace, flatten)
            files[folder / _type_file_name(entry)].append(entry)
        for target, entries in files.items():
            self._write(target, entries)

    def write_files_by_class_tree(self, path: str, separate_attributes: bool) -> None:
        root = Path(path)
        grouped = self._group_by_assembly()
        for assembly in self.model.assemblies():
            assembly_root = root / _assembly_stem(assembly)
            attributes = list(self.model.assembly_attributes.get(assembly, []))
            if separate_attributes and attributes:
                self._write(assembly_root / ASSEMBLY_INFO_FILE, [], attributes)
                attributes = []

            files: Dict[Path, List[TypeEntry]] = defaultdict(list)
            for entry in grouped.get(assembly, []):
                folder = assembly_root / self._namespace_path(entry.namespace, flatten=False)
                files[folder / _type_file_name(entry)].append(entry)
            for target, entries in files.items():
                # Without a separate file the attributes go with the first type written.
                self._write(target, entries, attributes)
                attributes = []
            if attributes:
                self._write(assembly_root / ASSEMBLY_INFO_FILE, [], attributes)

    def write_solution(
        self, path: str, toolchain_root: str, toolchain_assemblies_root: str
    ) -> None:
        root = Path(path)
        self.write_files_by_class_tree(path, separate_attributes=True)

        grouped = self._group_by_assembly()
        projects: List[tuple[str, str]] = []
        for assembly in self.model.assemblies():
            if not grouped.get(assembly) and not self.model.assembly_attributes.get(assembly):
                continue
            name = _assembly_stem(assembly)
            guid = _project_guid(self.model.image_name, name)
            project_file = root / name / f"{name}.csproj"
            project_file.parent.mkdir(parents=True, exist_ok=True)
            project_file.write_text(
                _render_project(name, toolchain_root, toolchain_assemblies_root),
                encoding="utf-8",
            )
            projects.append((name, guid))

        solution_name = _assembly_stem(self.model.image_name) or "Solution"
        solution_file = root / f"{solution_name}.sln"
        solution_file.write_text(_render_solution(projects), encoding="utf-8")
        self.logger.debug("Solution with %d projects written to %s", len(projects), solution_file)

    # ------------------------------------------------------------------
    # Internal helpers

    def _types(self) -> List[TypeEntry]:
        types = select_types(self.model, self.excluded_namespaces)
        if self.must_compile:
            types = [entry for entry in types if not entry.compiler_generated]
        return types

    def _group_by_assembly(self) -> Dict[str, List[TypeEntry]]:
        grouped: Dict[str, List[TypeEntry]] = defaultdict(list)
        for entry in self._types():
            grouped[entry.assembly].append(entry)
        return grouped

    @staticmethod
    def _namespace_path(namespace: str, flatten: bool) -> str:
        if not namespace:
            return GLOBAL_NAMESPACE
        if flatten:
            return _safe_file_name(namespace)
        return str(Path(*(_safe_file_name(part) for part in namespace.split("."))))

    def _write(
        self, target: Path, entries: Sequence[TypeEntry], attributes: Sequence[str] = ()
    ) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self._render(entries, attributes), encoding="utf-8")

    def _render(self, entries: Sequence[TypeEntry], attributes: Sequence[str]) -> str:
        lines: List[str] = [f"// Image: {self.model.image_name}", ""]
        if attributes:
            lines.extend(f"[assembly: {attribute}]" for attribute in attributes)
            lines.append("")

        for namespace, run in groupby(entries, key=lambda entry: entry.namespace):
            declarations = [self._render_type(entry) for entry in run]
            if namespace:
                lines.append(f"namespace {namespace}")
                lines.append("{")
                for block in declarations:
                    lines.extend(f"{_INDENT}{line}" if line else "" for line in block)
                    lines.append("")
                if lines[-1] == "":
                    lines.pop()
                lines.append("}")
                lines.append("")
            else:
                for block in declarations:
                    lines.extend(block)
                    lines.append("")
        return "\n".join(lines).rstrip() + "\n"

    def _render_type(self, entry: TypeEntry) -> List[str]:
        lines: List[str] = []
        if not self.suppress_metadata:
            lines.append(f"// TypeDefIndex: {entry.index}")
        body = entry.declaration.strip("\n")
        if body:
            lines.extend(body.splitlines())
        else:
            lines.append(f"public class {entry.name}")
            lines.append("{")
            for method in entry.methods:
                if not self.suppress_metadata and method.address is not None:
                    lines.append(f"{_INDENT}// RVA: 0x{method.address:08X}")
                lines.append(f"{_INDENT}// {method.name}")
            lines.append("}")
        return lines


def _assembly_stem(assembly: str) -> str:
    name = assembly[:-4] if assembly.lower().endswith(".dll") else assembly
    return _safe_file_name(name) if name else GLOBAL_NAMESPACE


def _type_file_name(entry: TypeEntry) -> str:
    return _safe_file_name(entry.name) + SOURCE_SUFFIX


def _safe_file_name(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def _project_guid(image_name: str, project: str) -> str:
    return str(uuid.uuid5(_PROJECT_GUID_NAMESPACE, f"{image_name}/{project}")).upper()


def _render_project(name: str, toolchain_root: str, assemblies_root: str) -> str:
    managed = str(Path(toolchain_root) / "Editor" / "Data" / "Managed")
    return "\n".join(
        [
            '<Project Sdk="Microsoft.NET.Sdk">',
            "  <PropertyGroup>",
            "    <TargetFramework>netstandard2.0</TargetFramework>",
            f"    <AssemblyName>{name}</AssemblyName>",
            "    <GenerateAssemblyInfo>false</GenerateAssemblyInfo>",
            "  </PropertyGroup>",
            "  <ItemGroup>",
            '    <Reference Include="UnityEngine">',
            f"      <HintPath>{managed}/UnityEngine.dll</HintPath>",
            "    </Reference>",
            '    <Reference Include="UnityEditor">',
            f"      <HintPath>{managed}/UnityEditor.dll</HintPath>",
            "    </Reference>",
            '    <Reference Include="UnityEngine.UI">',
            f"      <HintPath>{assemblies_root}/UnityEngine.UI.dll</HintPath>",
            "    </Reference>",
            "  </ItemGroup>",
            "</Project>",
            "",
        ]
    )


def _render_solution(projects: Sequence[tuple[str, str]]) -> str:
    lines = [
        "Microsoft Visual Studio Solution File, Format Version 12.00",
        "# Visual Studio Version 16",
    ]
    for name, guid in projects:
        lines.append(
            f'Project("{{{_CSHARP_PROJECT_TYPE}}}") = "{name}", "{name}\\{name}.csproj", "{{{guid}}}"'
        )
        lines.append("EndProject")
    lines.append("Global")
    lines.append("EndGlobal")
    return "\n".join(lines) + "\n"


__all__ = ["SourceTextRenderer"]
