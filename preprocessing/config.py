"""
Configuration for the preprocessing pipeline.

Every stage is parameterized through PipelineConfig so that a batch run is
fully described by a single immutable value.
"""

from dataclasses import dataclass

from config import (
    TAG_SIZE,
    CLAHE_CLIP_LIMIT,
    THRESHOLD_BLOCK_SIZE,
    BLEND_WEIGHT_ORIGINAL,
    BLEND_WEIGHT_THRESHOLD,
    APPLY_BORDER,
    APPLY_CONTRAST_NORM,
    APPLY_THRESHOLD,
    BINARY_OUTPUT,
)


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration for all preprocessing stages.

    Build instances with `from_flags()` when starting from user-facing flags:
    it applies the rule that binary output implies thresholding. Constructing
    the dataclass directly keeps the flags exactly as given.

    Attributes:
        apply_border: Pad the image by half a tag on every side.
        apply_contrast_norm: Apply tiled local histogram equalization (CLAHE).
        apply_threshold: Apply adaptive thresholding.
        binary_output: Emit the raw binary mask instead of the blend.
        tag_size: (width, height) of a tag patch. Used as border margin
                  basis and as the CLAHE tile size.
        clip_limit: CLAHE contrast limit.
        block_size: Neighborhood size for the adaptive threshold (odd).
        weight_original: Blend weight of the original intensity.
        weight_threshold: Blend weight of the threshold mask.
    """

    apply_border: bool = APPLY_BORDER
    apply_contrast_norm: bool = APPLY_CONTRAST_NORM
    apply_threshold: bool = APPLY_THRESHOLD
    binary_output: bool = BINARY_OUTPUT

    tag_size: tuple[int, int] = TAG_SIZE
    clip_limit: float = CLAHE_CLIP_LIMIT
    block_size: int = THRESHOLD_BLOCK_SIZE
    weight_original: float = BLEND_WEIGHT_ORIGINAL
    weight_threshold: float = BLEND_WEIGHT_THRESHOLD

    @classmethod
    def from_flags(
        cls,
        border: bool = APPLY_BORDER,
        contrast_norm: bool = APPLY_CONTRAST_NORM,
        threshold: bool = APPLY_THRESHOLD,
        binary_output: bool = BINARY_OUTPUT,
        **tunables,
    ) -> "PipelineConfig":
        """Build a config from stage flags, forcing thresholding for binary output."""
        return cls(
            apply_border=border,
            apply_contrast_norm=contrast_norm,
            apply_threshold=threshold or binary_output,
            binary_output=binary_output,
            **tunables,
        )

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if (
            not isinstance(self.tag_size, tuple)
            or len(self.tag_size) != 2
            or any(size <= 0 for size in self.tag_size)
        ):
            raise ValueError(
                "tag_size must be a tuple of two positive integers, "
                f"got {self.tag_size}"
            )

        # Half a tag goes on each side, so odd sizes would lose a pixel
        if any(size % 2 for size in self.tag_size):
            raise ValueError(f"tag_size must be even in both dimensions, got {self.tag_size}")

        if self.clip_limit <= 0:
            raise ValueError(f"clip_limit must be positive, got {self.clip_limit}")

        if self.block_size < 3 or self.block_size % 2 == 0:
            raise ValueError(
                f"block_size must be an odd integer >= 3, got {self.block_size}"
            )

        if self.weight_original < 0 or self.weight_threshold < 0:
            raise ValueError(
                "blend weights must be non-negative, got "
                f"({self.weight_original}, {self.weight_threshold})"
            )
