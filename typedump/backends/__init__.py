"""Analysis backend implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, List

from .base import AnalysisBackend
from .json_model import JsonModelBackend

_ENTRY_POINT_GROUP = "typedump.backends"

DEFAULT_BACKEND = "json"

_BUILTIN_FACTORIES: dict[str, Callable[[], AnalysisBackend]] = {
    "json": JsonModelBackend,
}


def available_backends() -> List[str]:
    """Return the names of built-in and installed backends."""
    names: Dict[str, None] = {name: None for name in _BUILTIN_FACTORIES}
    for entry in _iter_entry_points():
        names.setdefault(entry.name.lower(), None)
    return list(names)


def load_backend(name: str = DEFAULT_BACKEND) -> AnalysisBackend:
    """Instantiate the backend registered under ``name``."""
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory()

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load backend entry point '{entry.name}': {exc}") from exc
        return _coerce_backend(loaded)

    known = ", ".join(available_backends())
    raise ValueError(f"Unknown backend '{name}' (available: {known})")


def _coerce_backend(obj: object) -> AnalysisBackend:
    if isinstance(obj, AnalysisBackend):
        return obj
    if isinstance(obj, type) and issubclass(obj, AnalysisBackend):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, AnalysisBackend):
            return instance
    raise TypeError("Backend entry point must be an AnalysisBackend subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "AnalysisBackend",
    "DEFAULT_BACKEND",
    "JsonModelBackend",
    "available_backends",
    "load_backend",
]
