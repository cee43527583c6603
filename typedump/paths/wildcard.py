"""Resolution of paths containing ``*`` wildcard segments.

Toolchains are usually installed under version-named folders
(``Editor/2019.4.1f1``, ``Editor/2020.1.0f1``...). A wildcard segment picks
the ordinal-greatest matching directory, which selects the newest install for
the naming schemes in use without parsing versions. Segments are matched one
at a time against the directory listing of the path resolved so far.
"""

from __future__ import annotations

import os
import re
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import List, Protocol, Sequence, Type

from ..errors import UnsupportedPathError
from ..logging import get_logger

WILDCARD = "*"

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:[\\/]")
_NETWORK_PREFIXES = ("\\\\", "//")


class FilesystemProbe(Protocol):
    """Read-only view of the filesystem used during resolution."""

    def list_directories(self, path: str) -> Sequence[str]:
        """Return the names of the immediate child directories of ``path``."""


class LocalFilesystemProbe:
    """Probe backed by the local filesystem."""

    def list_directories(self, path: str) -> List[str]:
        try:
            with os.scandir(path) as entries:
                return [entry.name for entry in entries if entry.is_dir()]
        except OSError:
            # Missing or unreadable prefixes have no children.
            return []


class WildcardPathResolver:
    """Turns a glob-bearing path into a concrete path."""

    def __init__(self, probe: FilesystemProbe | None = None) -> None:
        self.probe = probe or LocalFilesystemProbe()
        self.logger = get_logger("paths.wildcard")

    def resolve(self, path: str) -> str:
        """Resolve every wildcard segment of ``path``.

        Paths without ``*`` are returned untouched. A wildcard segment with no
        matching directory is kept literally so the caller's existence check
        reports the miss.
        """
        if WILDCARD not in path:
            return path
        if path.startswith(_NETWORK_PREFIXES):
            raise UnsupportedPathError(f"Wildcards are not supported in network paths: {path}")

        flavour = _path_flavour(path)
        pure = flavour(path)
        if not pure.anchor:
            if WILDCARD in pure.parts[0]:
                raise UnsupportedPathError(
                    f"Wildcard in the first component of a relative path is not supported: {path}"
                )
            pure = flavour(os.getcwd()) / pure

        resolved: PurePath = flavour(pure.anchor)
        for segment in pure.parts[1:]:
            if WILDCARD in segment:
                segment = self._select(resolved, segment)
            resolved = resolved / segment

        self.logger.debug("Resolved %s to %s", path, resolved)
        return str(resolved)

    def _select(self, parent: PurePath, pattern: str) -> str:
        matches = [
            name
            for name in self.probe.list_directories(str(parent))
            if segment_matches(name, pattern)
        ]
        if not matches:
            self.logger.debug("No directory under %s matches %s", parent, pattern)
            return pattern
        return max(matches)


def segment_matches(name: str, pattern: str) -> bool:
    """Return True when ``name`` matches a single-segment ``*`` pattern."""
    expression = ".*".join(re.escape(part) for part in pattern.split(WILDCARD))
    return re.fullmatch(expression, name, flags=re.DOTALL) is not None


def resolve_wildcard_path(path: str, probe: FilesystemProbe | None = None) -> str:
    """Convenience wrapper around :class:`WildcardPathResolver`."""
    return WildcardPathResolver(probe).resolve(path)


def _path_flavour(path: str) -> Type[PurePath]:
    if os.name == "nt" or _DRIVE_PATTERN.match(path):
        return PureWindowsPath
    return PurePosixPath


__all__ = [
    "FilesystemProbe",
    "LocalFilesystemProbe",
    "WildcardPathResolver",
    "resolve_wildcard_path",
    "segment_matches",
]
