"""
Stage objects and the step list that runs them.

Every stage is a small frozen dataclass exposing `apply(img) -> img` and a
`name`. A Pipeline is an ordered list of such stages; adding or reordering
stages only changes the list, never the code that runs it.

Usage:
    from preprocessing.steps import BorderStep, ThresholdStep, Pipeline

    pipeline = Pipeline(steps=[BorderStep(), ThresholdStep(binary_output=True)])
    mask = pipeline.run(image).final
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import numpy as np

from config import (
    TAG_SIZE,
    CLAHE_CLIP_LIMIT,
    THRESHOLD_BLOCK_SIZE,
    BLEND_WEIGHT_ORIGINAL,
    BLEND_WEIGHT_THRESHOLD,
)
from .border import pad_border
from .contrast import equalize_tiles
from .threshold import adaptive_threshold


class PreprocessStep(ABC):
    """Interface shared by all stages.

    Implementations must not modify the array they are given; they return
    a new one (possibly with a different shape).
    """

    @abstractmethod
    def apply(self, img: np.ndarray) -> np.ndarray:
        """Transform a grayscale buffer and return the result."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label such as "border(64x64)", used in logs and lookups."""


def _require_grayscale(step: PreprocessStep, img: np.ndarray) -> None:
    if img.ndim != 2:
        raise ValueError(
            f"{type(step).__name__} requires grayscale input (2D array), "
            f"got {img.ndim}D array with shape {img.shape}"
        )


@dataclass(frozen=True)
class BorderStep(PreprocessStep):
    """Edge-replicated margin of half a tag on each side."""

    tag_size: tuple[int, int] = TAG_SIZE

    def apply(self, img: np.ndarray) -> np.ndarray:
        return pad_border(img, self.tag_size)

    @property
    def name(self) -> str:
        width, height = self.tag_size
        return f"border({width}x{height})"


@dataclass(frozen=True)
class ContrastNormStep(PreprocessStep):
    """CLAHE with one tile per tag-sized block of the image."""

    tile_size: tuple[int, int] = TAG_SIZE
    clip_limit: float = CLAHE_CLIP_LIMIT

    def apply(self, img: np.ndarray) -> np.ndarray:
        _require_grayscale(self, img)
        return equalize_tiles(img, self.tile_size, self.clip_limit)

    @property
    def name(self) -> str:
        return f"contrast(clip={self.clip_limit})"


@dataclass(frozen=True)
class ThresholdStep(PreprocessStep):
    """Gaussian adaptive threshold.

    With `binary_output` the stage emits the {0, 255} mask itself, otherwise
    the mask blended into the input with the configured weights.
    """

    binary_output: bool = False
    block_size: int = THRESHOLD_BLOCK_SIZE
    weight_original: float = BLEND_WEIGHT_ORIGINAL
    weight_threshold: float = BLEND_WEIGHT_THRESHOLD

    def apply(self, img: np.ndarray) -> np.ndarray:
        _require_grayscale(self, img)
        return adaptive_threshold(
            img,
            binary_output=self.binary_output,
            block_size=self.block_size,
            weight_original=self.weight_original,
            weight_threshold=self.weight_threshold,
        )

    @property
    def name(self) -> str:
        return "threshold(binary)" if self.binary_output else "threshold(blend)"


@dataclass
class StepResult:
    """Output of one stage, kept for debugging and tests."""

    name: str
    image: np.ndarray


@dataclass
class PipelineStepResults:
    """Input copy plus every stage output, in execution order."""

    original: np.ndarray
    steps: list[StepResult] = field(default_factory=list)

    @property
    def final(self) -> np.ndarray:
        """Output of the last stage, or the input copy when no stage ran."""
        return self.steps[-1].image if self.steps else self.original

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]

    def get_intermediate(self, step_name: str) -> np.ndarray | None:
        """Look up a stage output by full name or by kind ("threshold")."""
        for step in self.steps:
            if step_name in (step.name, step.name.split("(")[0]):
                return step.image
        return None


@dataclass
class Pipeline:
    """Ordered stages applied one after the other.

    Attributes:
        steps: Stages to apply; each receives the previous stage's output.
    """

    steps: list[PreprocessStep]

    def run(self, img: np.ndarray) -> PipelineStepResults:
        """Apply every stage to a copy of img and collect the outputs."""
        results = PipelineStepResults(original=img.copy())
        current = results.original
        for step in self.steps:
            current = step.apply(current)
            results.steps.append(StepResult(name=step.name, image=current))
        return results

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
