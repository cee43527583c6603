"""CLI entrypoint for typedump."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict

from . import COPYRIGHT, PRODUCT_NAME, __version__
from .backends import load_backend
from .config import CONFIG_FILENAME, load_config
from .errors import DumpError, InputNotFound, UnsupportedPathError
from .logging import configure_logging
from .models import LayoutSchema, SortOrder, parse_excluded_namespaces
from .orchestrator import Orchestrator, RunOutcome
from .report import save_report


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typedump",
        description="Write source declarations and a disassembler script from a binary's type model.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-i",
        "--bin",
        dest="binary_file",
        default="libil2cpp.so",
        help="Binary file input (default: %(default)s).",
    )
    parser.add_argument(
        "-m",
        "--metadata",
        dest="metadata_file",
        default="global-metadata.dat",
        help="Metadata file input (default: %(default)s).",
    )
    parser.add_argument(
        "-c",
        "--cs-out",
        dest="cs_out",
        help="Source output file (single-file layout) or folder (other layouts). Default: types.cs.",
    )
    parser.add_argument(
        "-p",
        "--py-out",
        dest="py_out",
        help="Disassembler script output file. Default: ida.py.",
    )
    parser.add_argument(
        "-e",
        "--exclude-namespaces",
        dest="exclude_namespaces",
        help="Comma-separated namespaces to leave out of source output, or 'none' to include all.",
    )
    parser.add_argument(
        "-l",
        "--layout",
        choices=[layout.value for layout in LayoutSchema],
        help=(
            "Partitioning of source output: 'single' file, one file per 'namespace', per "
            "'assembly', per 'class' in namespace folders, or per class in an assembly/namespace 'tree'."
        ),
    )
    parser.add_argument(
        "-s",
        "--sort",
        choices=[order.value for order in SortOrder],
        help="Order type definitions by definition 'index' or by 'name'. Ignored by class and tree layouts.",
    )
    parser.add_argument(
        "-f",
        "--flatten",
        action="store_true",
        default=None,
        help="Use one folder per namespace instead of nested folders (namespace and class layouts).",
    )
    parser.add_argument(
        "-n",
        "--suppress-metadata",
        action="store_true",
        default=None,
        help="Leave out method pointers, field offsets and type indices to ease diffing two versions.",
    )
    parser.add_argument(
        "-k",
        "--must-compile",
        action="store_true",
        default=None,
        help="Tidy output so it compiles; compiler-generated types are skipped.",
    )
    parser.add_argument(
        "--separate-attributes",
        action="store_true",
        default=None,
        help="Place assembly-level attributes in their own AssemblyInfo.cs files (assembly and tree layouts).",
    )
    parser.add_argument(
        "-j",
        "--project",
        action="store_true",
        default=None,
        help="Create a solution and projects. Implies --layout tree, --must-compile and --separate-attributes.",
    )
    parser.add_argument(
        "--unity-path",
        dest="toolchain_root",
        help="Toolchain install path used with --project. Wildcards select the last matching folder.",
    )
    parser.add_argument(
        "--unity-assemblies",
        dest="toolchain_assemblies_root",
        help="Toolchain script assemblies path used with --project. Wildcards select the last matching folder.",
    )
    parser.add_argument(
        "--backend",
        help="Analysis backend used to read the inputs (default: json).",
    )
    parser.add_argument(
        "--config",
        default=".",
        help=f"Path to a {CONFIG_FILENAME} file or the folder holding one (default: current directory).",
    )
    parser.add_argument(
        "--report",
        help="Write a JSON summary of the run to this path.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for typedump."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logger = configure_logging(verbose=bool(args.verbose))
    _print_banner()

    try:
        config = load_config(Path(args.config))
        options = replace(config.options, **_option_overrides(args))
        orchestrator = Orchestrator(
            backend=load_backend(args.backend or config.backend),
            toolchain_config=config.toolchain,
            extensions=config.extensions,
        )
    except (RuntimeError, TypeError, ValueError) as exc:
        parser.exit(1, f"{exc}\n")

    try:
        outcome = orchestrator.run(args.binary_file, args.metadata_file, options)
    except (InputNotFound, UnsupportedPathError) as exc:
        parser.exit(1, f"{exc}\n")
    except DumpError as exc:
        parser.exit(1, f"typedump failed: {exc}\n")
    except Exception as exc:  # pragma: no cover - defensive guard
        logger.debug("Unhandled error", exc_info=True)
        parser.exit(1, f"typedump failed: {exc}\nRun with --verbose for more details.\n")

    if args.report:
        save_report(outcome, Path(args.report))
    _print_summary(outcome)
    if not outcome.succeeded:
        failed = next(image for image in outcome.images if not image.succeeded)
        parser.exit(1, f"typedump failed on image {failed.index} ({failed.name}): {failed.error}\n")


def _option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.exclude_namespaces is not None:
        overrides["excluded_namespaces"] = parse_excluded_namespaces(
            args.exclude_namespaces.split(",")
        )
    if args.layout:
        overrides["layout"] = LayoutSchema.parse(args.layout)
    if args.sort:
        overrides["sort_order"] = SortOrder.parse(args.sort)
    for flag, option in (
        ("flatten", "flatten_hierarchy"),
        ("suppress_metadata", "suppress_metadata"),
        ("must_compile", "must_compile"),
        ("separate_attributes", "separate_assembly_attributes"),
        ("project", "create_solution"),
    ):
        value = getattr(args, flag)
        if value is not None:
            overrides[option] = bool(value)
    for flag, option in (
        ("cs_out", "output_base_path"),
        ("py_out", "script_output_path"),
        ("toolchain_root", "toolchain_root"),
        ("toolchain_assemblies_root", "toolchain_assemblies_root"),
    ):
        value = getattr(args, flag)
        if value:
            overrides[option] = value
    return overrides


def _print_banner() -> None:
    print(PRODUCT_NAME)
    print(f"Version {__version__}")
    print(COPYRIGHT)
    print("")


def _print_summary(outcome: RunOutcome) -> None:
    for image in outcome.images:
        if image.succeeded:
            print(f"Image {image.index} ({image.name}): {_relativize(Path(image.source_path))}, "
                  f"{_relativize(Path(image.script_path))}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
