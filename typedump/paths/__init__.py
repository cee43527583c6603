"""Path helpers: wildcard resolution and per-image output planning."""

from .planner import RECOGNISED_EXTENSIONS, plan_path
from .wildcard import (
    FilesystemProbe,
    LocalFilesystemProbe,
    WildcardPathResolver,
    resolve_wildcard_path,
)

__all__ = [
    "FilesystemProbe",
    "LocalFilesystemProbe",
    "RECOGNISED_EXTENSIONS",
    "WildcardPathResolver",
    "plan_path",
    "resolve_wildcard_path",
]
