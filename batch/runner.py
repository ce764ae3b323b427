"""
Sequential batch runner.

Applies the preprocessing pipeline to every input image in order, writes
each result next to its siblings in the output directory, and persists a
manifest of the written files once the whole batch has succeeded.

The run is fail-fast: the first read or write failure stops the batch.
Images written before the failure stay on disk and no manifest is written,
so an existing manifest always describes a complete run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from config import OUTPUT_SUFFIX, MANIFEST_FILENAME
from preprocessing import PipelineConfig, build_pipeline

from .context import BatchState, RunContext
from .descriptors import ImageDescriptor
from .errors import ConfigurationError, ImageReadError, ImageWriteError
from .images import read_image, write_image
from .manifest import write_manifest
from .progress import ProgressReporter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchOptions:
    """Settings for one batch run.

    Attributes:
        output_dir: Directory receiving the processed images. Required.
        manifest_path: Where to write the manifest. Defaults to
                       output_dir / "images.txt".
        pipeline: Stage configuration applied to every image.
    """

    output_dir: Path | None
    manifest_path: Path | None = None
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)

    def validate(self) -> None:
        """Validate batch settings.

        Raises:
            ConfigurationError: If the output directory is missing.
            ValueError: If the pipeline configuration is invalid.
        """
        if self.output_dir is None or str(self.output_dir) == "":
            raise ConfigurationError("An output directory is required")
        self.pipeline.validate()

    @property
    def resolved_manifest_path(self) -> Path:
        if self.manifest_path is not None:
            return Path(self.manifest_path)
        return Path(self.output_dir) / MANIFEST_FILENAME


@dataclass
class BatchResult:
    """Outcome of a batch run.

    Attributes:
        context: Final run context (state, written paths, timing).
        stages: Names of the pipeline steps applied to each image, in order.
        manifest_path: Manifest location, set only on success.
        failed_path: Path whose read or write failed, set only on failure.
        error: The exception that stopped the batch.
    """

    context: RunContext
    stages: tuple[str, ...] = ()
    manifest_path: Path | None = None
    failed_path: Path | None = None
    error: Exception | None = None

    @property
    def state(self) -> BatchState:
        return self.context.state

    @property
    def ok(self) -> bool:
        return self.context.state is BatchState.COMPLETED

    @property
    def output_paths(self) -> list[Path]:
        return list(self.context.output_paths)


def output_path_for(input_path: Path | str, output_dir: Path | str) -> Path:
    """Derive the output path for an input image.

    Only the file name of the input is kept: `dir/a/img.png` becomes
    `output_dir/img_wb.png`.
    """
    input_path = Path(input_path)
    return Path(output_dir) / f"{input_path.stem}{OUTPUT_SUFFIX}{input_path.suffix}"


def _report(progress: ProgressReporter | None, context: RunContext) -> None:
    if progress is not None:
        progress(context)


def run_batch(
    descriptors: Sequence[ImageDescriptor],
    options: BatchOptions,
    progress: ProgressReporter | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> BatchResult:
    """Process every descriptor in order and write the manifest.

    Args:
        descriptors: Input images, in the order they must be processed.
        options: Output locations and pipeline configuration.
        progress: Optional callable receiving a RunContext after each step.
        clock: Time source for progress and ETA.

    Returns:
        BatchResult in state COMPLETED or FAILED.

    Raises:
        ConfigurationError: If required options are missing.
        ValueError: If the pipeline configuration is invalid.
    """
    options.validate()
    output_dir = Path(options.output_dir)
    pipeline = build_pipeline(options.pipeline)

    stages = tuple(step.name for step in pipeline)
    context = RunContext(total=len(descriptors), started_at=clock(), clock=clock)
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(
        "Processing %d images into %s (stages: %s)",
        context.total,
        output_dir,
        ", ".join(stages) or "none",
    )
    context = context.start()
    _report(progress, context)

    for desc in descriptors:
        output_path = output_path_for(desc.filename, output_dir)
        try:
            img = read_image(desc.filename)
            processed = pipeline.run(img).final
            write_image(processed, output_path)
        except ImageReadError as exc:
            logger.error("Failed to read image: %s", exc.path)
            return BatchResult(
                context=context.finish(BatchState.FAILED),
                stages=stages,
                failed_path=exc.path,
                error=exc,
            )
        except ImageWriteError as exc:
            logger.error("Failed to write image: %s", exc.path)
            return BatchResult(
                context=context.finish(BatchState.FAILED),
                stages=stages,
                failed_path=exc.path,
                error=exc,
            )

        context = context.advance(output_path)
        _report(progress, context)

    context = context.finish(BatchState.COMPLETED)
    manifest_path = write_manifest(
        options.resolved_manifest_path, context.output_paths
    )
    logger.info(
        "Processed %d images in %.1fs. Saved output paths to %s",
        context.completed,
        context.elapsed(),
        manifest_path,
    )
    return BatchResult(context=context, stages=stages, manifest_path=manifest_path)
