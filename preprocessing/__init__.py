"""
Image preprocessing module for tag localization.

This module provides pure, deterministic functions that normalize grayscale
images before they are handed to the tagger. All functions follow the
pattern: input -> output with no mutation of the original arrays.

Key components:
- config: PipelineConfig dataclass for parameterizing all stages
- border: pad_border() edge-replicated margin of half a tag
- contrast: equalize_tiles() CLAHE over tag-sized tiles
- threshold: adaptive_threshold() local binarization with optional blend
- steps: Class-based steps with a common PreprocessStep interface
- pipeline: build_pipeline()/run_pipeline() applying stages in fixed order
"""

from .config import PipelineConfig
from .pipeline import run_pipeline, build_pipeline
from .border import pad_border
from .contrast import equalize_tiles, tile_grid_for
from .threshold import adaptive_threshold, adaptive_threshold_mask, blend_with_mask
from .steps import (
    PreprocessStep,
    BorderStep,
    ContrastNormStep,
    ThresholdStep,
    Pipeline,
    PipelineStepResults,
    StepResult,
)

__all__ = [
    # Config
    "PipelineConfig",
    # Function API
    "run_pipeline",
    "build_pipeline",
    "pad_border",
    "equalize_tiles",
    "tile_grid_for",
    "adaptive_threshold",
    "adaptive_threshold_mask",
    "blend_with_mask",
    # Class-based API
    "PreprocessStep",
    "BorderStep",
    "ContrastNormStep",
    "ThresholdStep",
    "Pipeline",
    "PipelineStepResults",
    "StepResult",
]
