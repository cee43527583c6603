"""JSON run reports."""

from __future__ import annotations

import json
from pathlib import Path

from .orchestrator import RunOutcome


def save_report(outcome: RunOutcome, path: Path) -> None:
    """Write a machine-readable summary of ``outcome`` to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(outcome.to_dict(), indent=2, sort_keys=True), encoding="utf-8")


__all__ = ["save_report"]
