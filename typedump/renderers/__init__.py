"""Renderers that write type models to disk."""

from .base import ScriptRenderer, SortKey, SourceRenderer, SourceRendererFactory
from .script import IdaScriptRenderer
from .source import SourceTextRenderer

__all__ = [
    "IdaScriptRenderer",
    "ScriptRenderer",
    "SortKey",
    "SourceRenderer",
    "SourceRendererFactory",
    "SourceTextRenderer",
]
