"""
Progress reporting for batch runs.

The runner hands an immutable RunContext to a reporter after every state
change. Reporters are plain callables, so tests can collect contexts in a
list while the CLI draws a tqdm bar.
"""

from __future__ import annotations

import logging
from typing import Callable

from tqdm import tqdm

from .context import RunContext

logger = logging.getLogger(__name__)

ProgressReporter = Callable[[RunContext], None]


def log_progress(context: RunContext) -> None:
    """Report progress through the module logger."""
    eta = context.eta()
    logger.info(
        "Progress: %5.1f%% (%d/%d)%s",
        context.progress * 100,
        context.completed,
        context.total,
        f", ETA {eta:.0f}s" if eta is not None else "",
    )


class TqdmProgress:
    """Progress bar driven by RunContext updates.

    Use as a context manager so the bar is closed when the batch ends:

        with TqdmProgress() as progress:
            run_batch(descriptors, options, progress=progress)
    """

    def __init__(self, desc: str = "Processing", disable: bool = False):
        self.desc = desc
        self.disable = disable
        self._bar: tqdm | None = None

    def __call__(self, context: RunContext) -> None:
        if self._bar is None:
            self._bar = tqdm(total=context.total, desc=self.desc, unit="img", disable=self.disable)
        self._bar.n = context.completed
        self._bar.refresh()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def __enter__(self) -> TqdmProgress:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
