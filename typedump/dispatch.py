"""Selection of the output layout strategy for each image."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

from .errors import UnsupportedCombination
from .logging import get_logger
from .models import DumpOptions, Image, LayoutSchema, SortOrder, ToolchainPaths, TypeEntry, TypeModel
from .renderers.base import SortKey, SourceRenderer, SourceRendererFactory

Strategy = Callable[[SourceRenderer, str, DumpOptions], None]

SOLUTION_STRATEGY = "solution"


def sort_by_index(entry: TypeEntry) -> Any:
    return entry.index


def sort_by_name(entry: TypeEntry) -> Any:
    return entry.name


def _single_file(sort_key: SortKey) -> Strategy:
    def _write(renderer: SourceRenderer, path: str, options: DumpOptions) -> None:
        renderer.write_single_file(path, sort_key)

    return _write


def _by_namespace(sort_key: SortKey) -> Strategy:
    def _write(renderer: SourceRenderer, path: str, options: DumpOptions) -> None:
        renderer.write_files_by_namespace(path, sort_key, options.flatten_hierarchy)

    return _write


def _by_assembly(sort_key: SortKey) -> Strategy:
    def _write(renderer: SourceRenderer, path: str, options: DumpOptions) -> None:
        renderer.write_files_by_assembly(path, sort_key, options.separate_assembly_attributes)

    return _write


def _by_class(renderer: SourceRenderer, path: str, options: DumpOptions) -> None:
    renderer.write_files_by_class(path, options.flatten_hierarchy)


def _by_class_tree(renderer: SourceRenderer, path: str, options: DumpOptions) -> None:
    renderer.write_files_by_class_tree(path, options.separate_assembly_attributes)


# A ``None`` sort order marks layouts whose file-per-type output ignores sorting.
STRATEGIES: Dict[Tuple[LayoutSchema, Optional[SortOrder]], Strategy] = {
    (LayoutSchema.SINGLE, SortOrder.INDEX): _single_file(sort_by_index),
    (LayoutSchema.SINGLE, SortOrder.NAME): _single_file(sort_by_name),
    (LayoutSchema.NAMESPACE, SortOrder.INDEX): _by_namespace(sort_by_index),
    (LayoutSchema.NAMESPACE, SortOrder.NAME): _by_namespace(sort_by_name),
    (LayoutSchema.ASSEMBLY, SortOrder.INDEX): _by_assembly(sort_by_index),
    (LayoutSchema.ASSEMBLY, SortOrder.NAME): _by_assembly(sort_by_name),
    (LayoutSchema.CLASS, None): _by_class,
    (LayoutSchema.TREE, None): _by_class_tree,
}


def select_strategy(layout: object, sort_order: object) -> Strategy:
    """Return the strategy for a layout/sort pair or raise ``UnsupportedCombination``."""
    strategy = STRATEGIES.get((layout, sort_order)) or STRATEGIES.get((layout, None))  # type: ignore[arg-type]
    if strategy is None:
        raise UnsupportedCombination(layout, sort_order)
    return strategy


class LayoutDispatchEngine:
    """Builds a renderer for each model and hands it the selected layout."""

    def __init__(self, renderer_factory: SourceRendererFactory) -> None:
        self.renderer_factory = renderer_factory
        self.logger = get_logger("dispatch")

    def dispatch(
        self,
        image: Image,
        model: TypeModel,
        options: DumpOptions,
        artifact_path: str,
        *,
        toolchain: ToolchainPaths | None = None,
    ) -> str:
        """Render ``model`` to ``artifact_path`` and return the strategy label.

        Raises ``UnsupportedCombination`` before anything is written when no
        strategy exists for the effective layout and sort order.
        """
        effective = options.effective()
        if effective.create_solution:
            if toolchain is None:
                raise ValueError("Solution output requires resolved toolchain paths")
            label = SOLUTION_STRATEGY
            strategy: Strategy = _solution(toolchain)
        else:
            strategy = select_strategy(effective.layout, effective.sort_order)
            label = _strategy_label(effective)

        renderer = self.renderer_factory(
            model,
            excluded_namespaces=effective.excluded_namespaces,
            suppress_metadata=effective.suppress_metadata,
            must_compile=effective.must_compile,
        )
        self.logger.debug("Writing image %s with %s layout to %s", image.name, label, artifact_path)
        strategy(renderer, artifact_path, effective)
        return label


def _solution(toolchain: ToolchainPaths) -> Strategy:
    def _write(renderer: SourceRenderer, path: str, options: DumpOptions) -> None:
        renderer.write_solution(path, toolchain.root, toolchain.assemblies_root)

    return _write


def _strategy_label(options: DumpOptions) -> str:
    layout = LayoutSchema(options.layout)
    if (layout, None) in STRATEGIES:
        return layout.value
    return f"{layout.value}/{SortOrder(options.sort_order).value}"


__all__ = [
    "LayoutDispatchEngine",
    "SOLUTION_STRATEGY",
    "STRATEGIES",
    "select_strategy",
    "sort_by_index",
    "sort_by_name",
]
