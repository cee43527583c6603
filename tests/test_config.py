"""Tests for typedump.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from typedump.config import (
    DEFAULT_ASSEMBLIES_MARKER,
    DEFAULT_ROOT_MARKER,
    DEFAULT_TOOLCHAIN_ROOT,
    DumpConfig,
    load_config,
)
from typedump.errors import ConfigError
from typedump.models import DEFAULT_EXCLUDED_NAMESPACES, LayoutSchema, SortOrder


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, DumpConfig)
    assert config.root == tmp_path.resolve()
    assert config.options.layout is LayoutSchema.SINGLE
    assert config.options.sort_order is SortOrder.INDEX
    assert config.options.excluded_namespaces == frozenset(DEFAULT_EXCLUDED_NAMESPACES)
    assert config.options.toolchain_root == DEFAULT_TOOLCHAIN_ROOT
    assert config.options.output_base_path == "types.cs"
    assert config.toolchain.root_marker == DEFAULT_ROOT_MARKER
    assert config.toolchain.assemblies_marker == DEFAULT_ASSEMBLIES_MARKER
    assert config.backend == "json"
    assert config.extensions == [".cs", ".py"]


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".typedump.yml"
    config_file.write_text(
        """
backend: json
project: true
exclude_namespaces:
  - System
  - Game.Debug
output:
  source: out/cs
  script: out/ida.py
  layout: Namespace
  sort: name
  flatten: true
  suppress_metadata: "yes"
  must_compile: false
  separate_attributes: true
  extensions: [cs, .txt]
toolchain:
  root: /opt/unity/*
  assemblies: /opt/unity/*/ScriptAssemblies
  root_marker: Editor/UnityEditor.dll
  assemblies_marker: UnityEngine.dll
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    options = config.options

    assert options.create_solution is True
    assert options.excluded_namespaces == frozenset({"System", "Game.Debug"})
    assert options.output_base_path == "out/cs"
    assert options.script_output_path == "out/ida.py"
    assert options.layout is LayoutSchema.NAMESPACE
    assert options.sort_order is SortOrder.NAME
    assert options.flatten_hierarchy is True
    assert options.suppress_metadata is True
    assert options.must_compile is False
    assert options.separate_assembly_attributes is True
    assert options.toolchain_root == "/opt/unity/*"
    assert options.toolchain_assemblies_root == "/opt/unity/*/ScriptAssemblies"
    assert config.toolchain.root_marker == "Editor/UnityEditor.dll"
    assert config.toolchain.assemblies_marker == "UnityEngine.dll"
    assert config.extensions == [".cs", ".txt"]


def test_none_literal_disables_namespace_exclusion(tmp_path: Path) -> None:
    (tmp_path / ".typedump.yml").write_text("exclude_namespaces: none\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.options.excluded_namespaces == frozenset()


def test_unknown_layout_is_a_config_error(tmp_path: Path) -> None:
    (tmp_path / ".typedump.yml").write_text("output:\n  layout: columns\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Unknown layout 'columns'"):
        load_config(tmp_path)


def test_invalid_yaml_is_a_config_error(tmp_path: Path) -> None:
    (tmp_path / ".typedump.yml").write_text("output: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_mapping_root_is_a_config_error(tmp_path: Path) -> None:
    (tmp_path / ".typedump.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".typedump.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.options.layout is LayoutSchema.SINGLE
