"""Batch processing of image lists through the preprocessing pipeline."""

from .context import BatchState, RunContext
from .descriptors import ImageDescriptor
from .errors import ConfigurationError, ImageReadError, ImageWriteError
from .images import read_image, write_image
from .manifest import write_manifest, read_manifest
from .progress import ProgressReporter, TqdmProgress, log_progress
from .runner import BatchOptions, BatchResult, output_path_for, run_batch

__all__ = [
    "BatchState",
    "RunContext",
    "ImageDescriptor",
    "ConfigurationError",
    "ImageReadError",
    "ImageWriteError",
    "read_image",
    "write_image",
    "write_manifest",
    "read_manifest",
    "ProgressReporter",
    "TqdmProgress",
    "log_progress",
    "BatchOptions",
    "BatchResult",
    "output_path_for",
    "run_batch",
]
