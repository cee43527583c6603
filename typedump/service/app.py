"""FastAPI application entrypoint for typedump service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..config import DEFAULT_TOOLCHAIN_ASSEMBLIES_ROOT, DEFAULT_TOOLCHAIN_ROOT
from ..errors import DumpError, InputNotFound, UnsupportedPathError
from ..models import DumpOptions, LayoutSchema, SortOrder, parse_excluded_namespaces
from ..orchestrator import Orchestrator, RunOutcome


class DumpRequest(BaseModel):
    binary_file: str
    metadata_file: str
    output_base_path: str = "types.cs"
    script_output_path: str = "ida.py"
    excluded_namespaces: Optional[List[str]] = None
    layout: LayoutSchema = LayoutSchema.SINGLE
    sort_order: SortOrder = SortOrder.INDEX
    flatten_hierarchy: bool = False
    suppress_metadata: bool = False
    must_compile: bool = False
    separate_assembly_attributes: bool = False
    create_solution: bool = False
    toolchain_root: str = DEFAULT_TOOLCHAIN_ROOT
    toolchain_assemblies_root: str = DEFAULT_TOOLCHAIN_ASSEMBLIES_ROOT

    def to_options(self) -> DumpOptions:
        return DumpOptions(
            excluded_namespaces=parse_excluded_namespaces(self.excluded_namespaces),
            layout=self.layout,
            sort_order=self.sort_order,
            flatten_hierarchy=self.flatten_hierarchy,
            suppress_metadata=self.suppress_metadata,
            must_compile=self.must_compile,
            separate_assembly_attributes=self.separate_assembly_attributes,
            create_solution=self.create_solution,
            toolchain_root=self.toolchain_root,
            toolchain_assemblies_root=self.toolchain_assemblies_root,
            output_base_path=self.output_base_path,
            script_output_path=self.script_output_path,
        )


class ImageResponse(BaseModel):
    index: int
    name: str
    source_path: str
    script_path: str
    strategy: Optional[str] = None
    error: Optional[str] = None


class DumpResponse(BaseModel):
    status: str
    exit_code: int
    images: List[ImageResponse]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing typedump runs."""

    app = FastAPI(title="typedump service", version=__version__)

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request to keep state predictable.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/dump", response_model=DumpResponse)
    async def dump(
        payload: DumpRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> DumpResponse:
        def _run() -> RunOutcome:
            return orchestrator.run(payload.binary_file, payload.metadata_file, payload.to_options())

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run)
        return DumpResponse(
            status="ok" if outcome.succeeded else "failed",
            exit_code=outcome.exit_code,
            images=[
                ImageResponse(
                    index=image.index,
                    name=image.name,
                    source_path=image.source_path,
                    script_path=image.script_path,
                    strategy=image.strategy,
                    error=image.error,
                )
                for image in outcome.images
            ],
        )

    @app.exception_handler(InputNotFound)
    async def input_not_found_handler(_: Any, exc: InputNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc), "path": exc.path})

    @app.exception_handler(DumpError)
    async def dump_error_handler(_: Any, exc: DumpError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(UnsupportedPathError)
    async def unsupported_path_handler(_: Any, exc: UnsupportedPathError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
