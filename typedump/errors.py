"""Error taxonomy shared across typedump components."""

from __future__ import annotations

from pathlib import Path


class DumpError(RuntimeError):
    """Base class for failures that abort a dump run."""


class ConfigError(DumpError):
    """Raised when configuration or option values cannot be interpreted."""


class InputNotFound(DumpError):
    """Raised when an input file, toolchain directory or marker file is missing."""

    def __init__(self, path: Path | str, description: str = "File") -> None:
        self.path = str(path)
        self.description = description
        super().__init__(f"{description} {self.path} does not exist")


class AnalysisFailure(DumpError):
    """Raised when the analysis backend yields no images."""

    def __init__(self, binary_file: Path | str, metadata_file: Path | str) -> None:
        self.binary_file = str(binary_file)
        self.metadata_file = str(metadata_file)
        super().__init__(
            f"Analysis of {self.binary_file} with {self.metadata_file} produced no images"
        )


class UnsupportedCombination(DumpError):
    """Raised when no output strategy exists for a layout/sort pair."""

    def __init__(self, layout: object, sort_order: object) -> None:
        self.layout = layout
        self.sort_order = sort_order
        super().__init__(
            f"No output strategy for layout {_label(layout)!r} with sort order {_label(sort_order)!r}"
        )


class UnsupportedPathError(ValueError):
    """Raised for wildcard paths whose shape the resolver does not handle."""


def _label(value: object) -> str:
    return str(getattr(value, "value", value))


__all__ = [
    "AnalysisFailure",
    "ConfigError",
    "DumpError",
    "InputNotFound",
    "UnsupportedCombination",
    "UnsupportedPathError",
]
