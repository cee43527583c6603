"""Tests for shared model helpers."""

from __future__ import annotations

import pytest

from typedump.errors import ConfigError
from typedump.models import (
    DEFAULT_EXCLUDED_NAMESPACES,
    LayoutSchema,
    SortOrder,
    TypeEntry,
    TypeModel,
    is_excluded,
    parse_excluded_namespaces,
    select_types,
)


def test_exclusion_covers_nested_namespaces_only() -> None:
    excluded = {"System", "Unity"}

    assert is_excluded("System", excluded)
    assert is_excluded("System.Collections.Generic", excluded)
    assert not is_excluded("SystemX", excluded)
    assert not is_excluded("UnityStandardAssets", excluded)
    assert not is_excluded("", excluded)


def test_select_types_keeps_model_order() -> None:
    model = TypeModel(
        image_name="img",
        types=[
            TypeEntry(index=2, name="B", namespace="Game"),
            TypeEntry(index=0, name="Object", namespace="System"),
            TypeEntry(index=1, name="A", namespace="Game"),
        ],
    )

    assert [entry.name for entry in select_types(model, {"System"})] == ["B", "A"]
    assert len(select_types(model, ())) == 3


def test_parse_excluded_namespaces_handles_none_literal() -> None:
    assert parse_excluded_namespaces(None) == frozenset(DEFAULT_EXCLUDED_NAMESPACES)
    assert parse_excluded_namespaces(["None"]) == frozenset()
    assert parse_excluded_namespaces([" Game ", "", "Tools"]) == frozenset({"Game", "Tools"})
    assert parse_excluded_namespaces(["none", "System"]) == frozenset({"none", "System"})


def test_enum_parsing_is_case_insensitive() -> None:
    assert LayoutSchema.parse("TREE") is LayoutSchema.TREE
    assert SortOrder.parse(" Name ") is SortOrder.NAME
    with pytest.raises(ConfigError):
        SortOrder.parse("size")
