"""Per-image output path planning."""

from __future__ import annotations

import re
from typing import Iterable

RECOGNISED_EXTENSIONS = (".cs", ".py")

_SEPARATORS = re.compile(r"[\\/]")


def plan_path(
    base_path: str,
    image_index: int,
    *,
    extensions: Iterable[str] = RECOGNISED_EXTENSIONS,
) -> str:
    """Return the output path for the image at ``image_index``.

    The first image writes to ``base_path`` itself. Later images get a ``-n``
    suffix, placed before the extension of the final path segment when that
    extension is recognised and appended otherwise.
    """
    if image_index < 0:
        raise ValueError(f"Image index must not be negative: {image_index}")
    if image_index == 0:
        return base_path

    suffix = f"-{image_index}"
    final_segment = _SEPARATORS.split(base_path)[-1]
    stem, dot, extension = final_segment.rpartition(".")
    if dot and stem and f".{extension}".lower() in {ext.lower() for ext in extensions}:
        cut = len(base_path) - len(extension) - 1
        return f"{base_path[:cut]}{suffix}{base_path[cut:]}"
    return f"{base_path}{suffix}"


__all__ = ["RECOGNISED_EXTENSIONS", "plan_path"]
