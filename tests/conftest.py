from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.metadata_builder import MetadataBuilder


@pytest.fixture
def metadata_builder(tmp_path: Path) -> MetadataBuilder:
    """Provide a reusable input builder rooted at the pytest tmp_path."""
    return MetadataBuilder(tmp_path)
