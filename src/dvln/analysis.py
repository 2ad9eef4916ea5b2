# src/dvln/analysis.py
"""Timing and memory checkpoints for `--analysis`."""

import time
import tracemalloc
from dataclasses import dataclass, field

from .logs import getAppLogger


@dataclass
class Step:
    label: str
    elapsed_ms: float
    current_kib: float
    peak_kib: float


@dataclass
class StepTimer:
    """Records named checkpoints; prints them while enabled.

    Memory figures come from tracemalloc, started by `enable()`, so steps
    taken before analysis was switched on carry timing only.
    """

    started: float = field(default_factory=time.perf_counter)
    enabled: bool = False
    steps: list[Step] = field(default_factory=list)
    _owns_tracemalloc: bool = False

    def enable(self) -> None:
        if self.enabled:
            return
        self.enabled = True
        if not tracemalloc.is_tracing():
            tracemalloc.start()
            self._owns_tracemalloc = True

    def stop(self) -> None:
        if self._owns_tracemalloc:
            tracemalloc.stop()
            self._owns_tracemalloc = False
        self.enabled = False

    def step(self, label: str) -> Step:
        elapsed = (time.perf_counter() - self.started) * 1000
        current = peak = 0
        if tracemalloc.is_tracing():
            current, peak = tracemalloc.get_traced_memory()
        entry = Step(label, elapsed, current / 1024, peak / 1024)
        self.steps.append(entry)
        if self.enabled:
            getAppLogger().info(
                "%s: %.3fms, Allocs: %.1f KiB (peak %.1f KiB)",
                label,
                entry.elapsed_ms,
                entry.current_kib,
                entry.peak_kib,
            )
        return entry
