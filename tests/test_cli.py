"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests._fixtures.metadata_builder import MetadataBuilder, sample_types
from typedump.cli import _build_parser, _option_overrides, main
from typedump.models import LayoutSchema, SortOrder


def test_cli_defaults_match_conventional_input_names() -> None:
    parser = _build_parser()
    args = parser.parse_args([])
    assert args.binary_file == "libil2cpp.so"
    assert args.metadata_file == "global-metadata.dat"
    assert args.project is None
    assert _option_overrides(args) == {}


def test_cli_maps_short_flags_to_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["-l", "namespace", "-s", "name", "-f", "-n", "-k", "-e", "Game, Tools", "-c", "out"]
    )
    overrides = _option_overrides(args)
    assert overrides["layout"] is LayoutSchema.NAMESPACE
    assert overrides["sort_order"] is SortOrder.NAME
    assert overrides["flatten_hierarchy"] is True
    assert overrides["suppress_metadata"] is True
    assert overrides["must_compile"] is True
    assert overrides["excluded_namespaces"] == frozenset({"Game", "Tools"})
    assert overrides["output_base_path"] == "out"


def test_cli_rejects_unknown_layout(capsys: pytest.CaptureFixture[str]) -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--layout", "columns"])
    assert "invalid choice" in capsys.readouterr().err


def test_cli_exits_when_binary_missing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["-i", "missing.so", "-m", "missing.dat"])

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "File missing.so does not exist" in captured.err
    assert "Version" in captured.out


def test_cli_writes_artifacts_and_report(
    metadata_builder: MetadataBuilder, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    metadata_builder.add_image("GameAssembly.dll", sample_types()).write()
    monkeypatch.chdir(tmp_path)

    main(
        [
            "-i", str(metadata_builder.binary),
            "-m", str(metadata_builder.metadata),
            "-c", "out/types.cs",
            "-p", "out/ida.py",
            "--report", "report.json",
        ]
    )

    source = (tmp_path / "out" / "types.cs").read_text(encoding="utf-8")
    assert "List`1" not in source
    assert (tmp_path / "out" / "ida.py").exists()
    report = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert report["succeeded"] is True
    assert report["images"][0]["strategy"] == "single/index"


def test_cli_none_disables_exclusions(
    metadata_builder: MetadataBuilder, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    metadata_builder.add_image("GameAssembly.dll", sample_types()).write()
    monkeypatch.chdir(tmp_path)

    main(["-i", str(metadata_builder.binary), "-m", str(metadata_builder.metadata), "-e", "none"])

    assert "List`1" in (tmp_path / "types.cs").read_text(encoding="utf-8")


def test_cli_reads_layout_from_config(
    metadata_builder: MetadataBuilder, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    metadata_builder.add_image("GameAssembly.dll", sample_types()).write()
    (tmp_path / ".typedump.yml").write_text(
        "output:\n  layout: class\n  source: classes\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)

    main(["-i", str(metadata_builder.binary), "-m", str(metadata_builder.metadata)])

    assert (tmp_path / "classes" / "Game" / "Player.cs").exists()


def test_cli_reports_config_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / ".typedump.yml").write_text("output:\n  sort: size\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 1
    assert "Unknown sort order 'size'" in capsys.readouterr().err
