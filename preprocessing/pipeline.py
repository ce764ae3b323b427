"""
Preprocessing pipeline that applies all enabled stages in order.

The pipeline is the main entry point for transforming one image buffer.
The stage order is fixed: Border → Contrast normalization → Threshold.
Which stages run is decided once, when the step list is built from a
PipelineConfig; callers never branch on individual flags.

This module provides two APIs:
1. run_pipeline() - Function API that builds and runs the standard pipeline
2. Pipeline class - Class-based API for composable step sequences
"""

import numpy as np

from .config import PipelineConfig
from .steps import (
    Pipeline,
    PreprocessStep,
    BorderStep,
    ContrastNormStep,
    ThresholdStep,
)


def build_pipeline(config: PipelineConfig) -> Pipeline:
    """Build a Pipeline from a PipelineConfig.

    Creates the ordered list of enabled steps:
    1. BorderStep - Pad by half a tag (if apply_border)
    2. ContrastNormStep - Tiled CLAHE (if apply_contrast_norm)
    3. ThresholdStep - Adaptive threshold, mask or blend (if apply_threshold)

    Args:
        config: Preprocessing configuration.

    Returns:
        Pipeline configured according to the config.
    """
    steps: list[PreprocessStep] = []

    if config.apply_border:
        steps.append(BorderStep(tag_size=config.tag_size))

    if config.apply_contrast_norm:
        steps.append(
            ContrastNormStep(
                tile_size=config.tag_size,
                clip_limit=config.clip_limit,
            )
        )

    if config.apply_threshold:
        steps.append(
            ThresholdStep(
                binary_output=config.binary_output,
                block_size=config.block_size,
                weight_original=config.weight_original,
                weight_threshold=config.weight_threshold,
            )
        )

    return Pipeline(steps=steps)


def run_pipeline(
    img: np.ndarray,
    config: PipelineConfig | None = None,
) -> np.ndarray:
    """Apply the preprocessing pipeline to an image.

    The input array is left untouched.

    Args:
        img: Grayscale image as a 2D uint8 array.
        config: Preprocessing configuration. If None, uses default settings.

    Returns:
        The processed image.

    Raises:
        ValueError: If the configuration is invalid.

    Examples:
        >>> img = np.zeros((100, 200), dtype=np.uint8)
        >>> run_pipeline(img).shape  # Border only by default
        (164, 264)
    """
    if config is None:
        config = PipelineConfig()

    config.validate()

    return build_pipeline(config).run(img).final
