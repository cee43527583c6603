"""Helper utilities for writing binary/metadata input pairs in tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence


class MetadataBuilder:
    """Writes a placeholder binary and a JSON type model describing its images."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "inputs"
        self.root.mkdir()
        self.binary = self.root / "libgame.so"
        self.metadata = self.root / "global-metadata.json"
        self._images: List[Dict[str, Any]] = []

    def add_image(
        self,
        name: str,
        types: Sequence[Mapping[str, Any]],
        *,
        assembly_attributes: Mapping[str, Sequence[str]] | None = None,
    ) -> "MetadataBuilder":
        """Queue an image made of ``types`` (dicts in the JSON backend format)."""
        image: Dict[str, Any] = {"name": name, "types": [dict(entry) for entry in types]}
        if assembly_attributes:
            image["assembly_attributes"] = {key: list(value) for key, value in assembly_attributes.items()}
        self._images.append(image)
        return self

    def write(self, *, binary: bool = True, metadata: bool = True) -> None:
        """Write the queued images; either file can be left out to simulate a missing input."""
        if binary:
            self.binary.write_bytes(b"\x7fELF")
        if metadata:
            self.metadata.write_text(json.dumps({"images": self._images}), encoding="utf-8")


def sample_types() -> List[Dict[str, Any]]:
    """A small model spanning two assemblies, a nested excluded namespace and a global type."""
    return [
        {"index": 3, "name": "Player", "namespace": "Game", "assembly": "Assembly-CSharp.dll",
         "methods": [{"name": "Update", "address": "0x1A2B"}]},
        {"index": 1, "name": "Enemy", "namespace": "Game", "assembly": "Assembly-CSharp.dll"},
        {"index": 0, "name": "List`1", "namespace": "System.Collections.Generic", "assembly": "mscorlib.dll"},
        {"index": 2, "name": "Boot", "namespace": "", "assembly": "Assembly-CSharp.dll"},
        {"index": 4, "name": "Hud", "namespace": "Game.UI", "assembly": "Assembly-CSharp.dll",
         "compiler_generated": True},
    ]


__all__ = ["MetadataBuilder", "sample_types"]
