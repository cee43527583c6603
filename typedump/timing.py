"""Scoped timing helpers used to report per-step durations."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .logging import get_logger

_LOGGER = get_logger("timing")


@dataclass
class Timing:
    """Elapsed time of one measured block."""

    label: str
    seconds: float = 0.0
    failed: bool = False


def log_timing(timing: Timing) -> None:
    suffix = " (failed)" if timing.failed else ""
    _LOGGER.info("%s: %.2f sec%s", timing.label, timing.seconds, suffix)


@contextmanager
def benchmark(
    label: str, on_complete: Optional[Callable[[Timing], None]] = None
) -> Iterator[Timing]:
    """Measure the enclosed block and report its duration on every exit path.

    The yielded ``Timing`` is filled in once the block exits, so callers can
    keep it for reporting after the ``with`` statement.
    """
    report = on_complete or log_timing
    timing = Timing(label=label)
    start = time.perf_counter()
    try:
        yield timing
    except BaseException:
        timing.failed = True
        raise
    finally:
        timing.seconds = time.perf_counter() - start
        report(timing)


__all__ = ["Timing", "benchmark", "log_timing"]
