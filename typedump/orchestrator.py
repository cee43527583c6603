"""Run orchestration: input checks, analysis and per-image output."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .backends import AnalysisBackend, JsonModelBackend
from .config import ToolchainConfig
from .dispatch import LayoutDispatchEngine
from .errors import AnalysisFailure, InputNotFound, UnsupportedCombination
from .logging import get_logger
from .models import DumpOptions, Image, ToolchainPaths
from .paths import RECOGNISED_EXTENSIONS, WildcardPathResolver, plan_path
from .renderers import IdaScriptRenderer, ScriptRenderer, SourceRendererFactory, SourceTextRenderer
from .timing import Timing, benchmark, log_timing


@dataclass
class ImageOutcome:
    """Result of writing the artifacts of one image."""

    index: int
    name: str
    source_path: str
    script_path: str
    strategy: Optional[str] = None
    error: Optional[str] = None
    timings: List[Timing] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class RunOutcome:
    """Result of a complete dump run."""

    images: List[ImageOutcome] = field(default_factory=list)
    toolchain: Optional[ToolchainPaths] = None
    timings: List[Timing] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return bool(self.images) and all(image.succeeded for image in self.images)

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "exit_code": self.exit_code,
            "toolchain": (
                {"root": self.toolchain.root, "assemblies_root": self.toolchain.assemblies_root}
                if self.toolchain
                else None
            ),
            "timings": [_timing_to_dict(timing) for timing in self.timings],
            "images": [
                {
                    "index": image.index,
                    "name": image.name,
                    "source_path": image.source_path,
                    "script_path": image.script_path,
                    "strategy": image.strategy,
                    "error": image.error,
                    "timings": [_timing_to_dict(timing) for timing in image.timings],
                }
                for image in self.images
            ],
        }


class Orchestrator:
    """Coordinates analysis, layout dispatch and script output for a run."""

    def __init__(
        self,
        backend: AnalysisBackend | None = None,
        renderer_factory: SourceRendererFactory | None = None,
        script_renderer: ScriptRenderer | None = None,
        resolver: WildcardPathResolver | None = None,
        toolchain_config: ToolchainConfig | None = None,
        extensions: Sequence[str] = RECOGNISED_EXTENSIONS,
    ) -> None:
        self.backend = backend or JsonModelBackend()
        self.engine = LayoutDispatchEngine(renderer_factory or SourceTextRenderer)
        self.script_renderer = script_renderer or IdaScriptRenderer()
        self.resolver = resolver or WildcardPathResolver()
        self.toolchain_config = toolchain_config or ToolchainConfig()
        self.extensions = tuple(extensions)
        self.logger = get_logger("orchestrator")

    def run(self, binary_file: str, metadata_file: str, options: DumpOptions) -> RunOutcome:
        """Dump every image found in the binary/metadata pair.

        Missing inputs, an unusable toolchain in solution mode and an empty
        analysis result raise before anything is written. A dispatch failure
        stops the run at the failing image; artifacts of earlier images stay
        on disk and the outcome reports the failure.
        """
        if not Path(binary_file).is_file():
            raise InputNotFound(binary_file)
        if not Path(metadata_file).is_file():
            raise InputNotFound(metadata_file)

        outcome = RunOutcome()
        if options.create_solution:
            outcome.toolchain = self._resolve_toolchain(options)
            self.logger.info("Using toolchain at %s", outcome.toolchain.root)
            self.logger.info("Using toolchain assemblies at %s", outcome.toolchain.assemblies_root)

        with benchmark("Analyze binary data", self._recorder(outcome.timings)):
            images = self.backend.load_from_file(binary_file, metadata_file)
        if not images:
            raise AnalysisFailure(binary_file, metadata_file)

        for index, image in enumerate(images):
            result = self._process_image(index, image, options, outcome.toolchain)
            outcome.images.append(result)
            if not result.succeeded:
                self.logger.error("Stopping after image %d (%s): %s", index, image.name, result.error)
                break
        return outcome

    def _process_image(
        self,
        index: int,
        image: Image,
        options: DumpOptions,
        toolchain: ToolchainPaths | None,
    ) -> ImageOutcome:
        result = ImageOutcome(
            index=index,
            name=image.name,
            source_path=plan_path(options.output_base_path, index, extensions=self.extensions),
            script_path=plan_path(options.script_output_path, index, extensions=self.extensions),
        )
        record = self._recorder(result.timings)

        with benchmark("Create type model", record):
            model = self.backend.build_model(image)

        try:
            with benchmark("Generate source code", record):
                result.strategy = self.engine.dispatch(
                    image, model, options, result.source_path, toolchain=toolchain
                )
        except UnsupportedCombination as exc:
            result.error = str(exc)
            return result

        with benchmark("Generate disassembler script", record):
            self.script_renderer.write_script(model, result.script_path)
        return result

    def _resolve_toolchain(self, options: DumpOptions) -> ToolchainPaths:
        root = self.resolver.resolve(options.toolchain_root)
        assemblies_root = self.resolver.resolve(options.toolchain_assemblies_root)
        _probe_install(root, self.toolchain_config.root_marker, "Toolchain path")
        _probe_install(
            assemblies_root, self.toolchain_config.assemblies_marker, "Toolchain assemblies path"
        )
        return ToolchainPaths(root=root, assemblies_root=assemblies_root)

    @staticmethod
    def _recorder(timings: List[Timing]) -> Callable[[Timing], None]:
        def _record(timing: Timing) -> None:
            timings.append(timing)
            log_timing(timing)

        return _record


def _probe_install(directory: str, marker: str, description: str) -> None:
    path = Path(directory)
    if not path.is_dir():
        raise InputNotFound(directory, description)
    marker_path = path.joinpath(*_marker_parts(marker))
    if not marker_path.is_file():
        raise InputNotFound(marker_path, f"{description} marker file")


def _marker_parts(marker: str) -> Iterable[str]:
    return [part for part in marker.replace("\\", "/").split("/") if part]


def _timing_to_dict(timing: Timing) -> Dict[str, Any]:
    return {"label": timing.label, "seconds": round(timing.seconds, 4), "failed": timing.failed}


__all__ = ["ImageOutcome", "Orchestrator", "RunOutcome"]
