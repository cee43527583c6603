"""Backend reading pre-reconstructed type models from JSON metadata files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..logging import get_logger
from ..models import Image, MethodEntry, TypeEntry, TypeModel
from .base import AnalysisBackend


class JsonModelBackend(AnalysisBackend):
    """Loads images from a JSON document of the form ``{"images": [...]}``.

    Each image carries a ``name``, a ``types`` list and optional
    ``assembly_attributes`` keyed by assembly. The binary file is only
    checked for presence; all type information comes from the metadata file.
    """

    def __init__(self) -> None:
        self.logger = get_logger("backends.json")

    def load_from_file(self, binary_path: str, metadata_path: str) -> Optional[List[Image]]:
        if not Path(binary_path).is_file():
            self.logger.error("Binary %s is not a file", binary_path)
            return None
        try:
            data = json.loads(Path(metadata_path).read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            self.logger.error("Could not read metadata %s: %s", metadata_path, exc)
            return None

        raw_images = data.get("images") if isinstance(data, dict) else None
        if not isinstance(raw_images, list):
            self.logger.error("Metadata %s has no image list", metadata_path)
            return None

        images: List[Image] = []
        for position, raw in enumerate(raw_images):
            if not isinstance(raw, dict):
                self.logger.warning("Skipping malformed image entry %d", position)
                continue
            name = _as_str(raw.get("name")) or f"image{position}"
            images.append(Image(name=name, payload=raw))
        self.logger.debug("Discovered %d images in %s", len(images), metadata_path)
        return images

    def build_model(self, image: Image) -> TypeModel:
        types: List[TypeEntry] = []
        for position, raw in enumerate(_as_list(image.payload.get("types"))):
            entry = _type_from_dict(raw, position)
            if entry is not None:
                types.append(entry)

        attributes: Dict[str, List[str]] = {}
        for assembly, values in _as_dict(image.payload.get("assembly_attributes")).items():
            attributes[str(assembly)] = [str(value) for value in _as_list(values)]

        return TypeModel(image_name=image.name, types=types, assembly_attributes=attributes)


def _type_from_dict(payload: object, position: int) -> Optional[TypeEntry]:
    if not isinstance(payload, dict):
        return None
    name = _as_str(payload.get("name"))
    if not name:
        return None
    index = _as_int(payload.get("index"))
    methods = tuple(
        method
        for method in (_method_from_dict(raw) for raw in _as_list(payload.get("methods")))
        if method is not None
    )
    return TypeEntry(
        index=position if index is None else index,
        name=name,
        namespace=_as_str(payload.get("namespace")) or "",
        assembly=_as_str(payload.get("assembly")) or "",
        declaration=_as_str(payload.get("declaration")) or "",
        compiler_generated=payload.get("compiler_generated") is True,
        methods=methods,
    )


def _method_from_dict(payload: object) -> Optional[MethodEntry]:
    if not isinstance(payload, dict):
        return None
    name = _as_str(payload.get("name"))
    if not name:
        return None
    return MethodEntry(name=name, address=_as_int(payload.get("address")))


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            return None
    return None


__all__ = ["JsonModelBackend"]
