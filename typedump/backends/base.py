"""Base classes for analysis backends."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..models import Image, TypeModel


class AnalysisBackend(ABC):
    """Contract for backends that discover images and reconstruct their types."""

    @abstractmethod
    def load_from_file(self, binary_path: str, metadata_path: str) -> Optional[Sequence[Image]]:
        """Return the images found in the binary/metadata pair, or None on failure."""

    @abstractmethod
    def build_model(self, image: Image) -> TypeModel:
        """Reconstruct the type model of a single image."""
