"""Immutable per-run state threaded through the batch runner."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable


class BatchState(str, Enum):
    """Lifecycle of a batch run."""

    IDLE = "idle"
    PROCESSING = "processing"
    FAILED = "failed"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchState.FAILED, BatchState.COMPLETED)


@dataclass(frozen=True)
class RunContext:
    """Snapshot of a batch run.

    Every transition returns a new context; nothing is mutated in place.

    Attributes:
        total: Number of images in the batch.
        started_at: Clock reading when the run was created.
        state: Current lifecycle state.
        output_paths: Paths written so far, in input order.
        clock: Time source for elapsed time and ETA. Must be the clock that
               produced started_at.
    """

    total: int
    started_at: float = field(default_factory=time.monotonic)
    state: BatchState = BatchState.IDLE
    output_paths: tuple[Path, ...] = ()
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    @property
    def completed(self) -> int:
        return len(self.output_paths)

    @property
    def progress(self) -> float:
        """Fraction of the batch completed, in [0, 1]."""
        if self.total == 0:
            return 1.0 if self.state is BatchState.COMPLETED else 0.0
        return self.completed / self.total

    def elapsed(self, now: float | None = None) -> float:
        if now is None:
            now = self.clock()
        return max(0.0, now - self.started_at)

    def eta(self, now: float | None = None) -> float | None:
        """Estimated seconds remaining, or None before the first image."""
        if self.completed == 0:
            return None
        per_image = self.elapsed(now) / self.completed
        return per_image * (self.total - self.completed)

    def start(self) -> RunContext:
        return replace(self, state=BatchState.PROCESSING)

    def advance(self, output_path: Path) -> RunContext:
        """Record a successfully written image."""
        return replace(self, output_paths=self.output_paths + (output_path,))

    def finish(self, state: BatchState) -> RunContext:
        if not state.is_terminal:
            raise ValueError(f"finish() needs a terminal state, got {state.value}")
        return replace(self, state=state)
