"""
Unit tests for the preprocessing module: behavioral tests only.

Covers: border geometry and replication, tiled contrast normalization,
adaptive thresholding and blending, stage ordering, and configuration
validation.
"""

import cv2
import numpy as np
import pytest

from config import TAG_WIDTH, TAG_HEIGHT
from preprocessing import (
    PipelineConfig,
    run_pipeline,
    build_pipeline,
    pad_border,
    equalize_tiles,
    tile_grid_for,
    adaptive_threshold,
    adaptive_threshold_mask,
    blend_with_mask,
    BorderStep,
    ContrastNormStep,
    ThresholdStep,
    Pipeline,
)


def _random_gray(rows: int, cols: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, (rows, cols), dtype=np.uint8)


class TestPadBorder:
    """Tests for the pad_border function."""

    def test_output_dimensions_default_tag(self):
        img = np.zeros((20, 30), dtype=np.uint8)
        result = pad_border(img)
        assert result.shape == (20 + TAG_HEIGHT, 30 + TAG_WIDTH)

    def test_output_dimensions_custom_tag(self):
        img = np.zeros((10, 12), dtype=np.uint8)
        result = pad_border(img, (8, 6))
        assert result.shape == (16, 20)

    def test_interior_is_original(self):
        img = _random_gray(10, 12)
        result = pad_border(img, (8, 6))
        assert np.array_equal(result[3:13, 4:16], img)

    def test_sides_replicate_nearest_edge(self):
        img = _random_gray(10, 12)
        result = pad_border(img, (8, 6))
        # top and bottom margins repeat the first and last rows
        assert np.all(result[:3, 4:16] == img[0])
        assert np.all(result[13:, 4:16] == img[-1])
        # left and right margins repeat the first and last columns
        assert np.all(result[3:13, :4] == img[:, :1])
        assert np.all(result[3:13, 16:] == img[:, -1:])

    def test_corners_take_corner_pixel_only(self):
        img = _random_gray(10, 12)
        result = pad_border(img, (8, 6))
        assert np.all(result[:3, :4] == img[0, 0])
        assert np.all(result[:3, 16:] == img[0, -1])
        assert np.all(result[13:, :4] == img[-1, 0])
        assert np.all(result[13:, 16:] == img[-1, -1])

    def test_pure_function_no_mutation(self):
        img = _random_gray(10, 12)
        original = img.copy()
        _ = pad_border(img)
        assert np.array_equal(img, original)


class TestEqualizeTiles:
    """Tests for tiled CLAHE."""

    def test_tile_grid_counts_partial_tiles(self):
        assert tile_grid_for((100, 200), (64, 64)) == (4, 2)

    def test_tile_grid_exact_fit(self):
        assert tile_grid_for((128, 64), (64, 64)) == (1, 2)

    def test_tile_grid_small_image(self):
        assert tile_grid_for((10, 10), (64, 64)) == (1, 1)

    def test_preserves_shape_and_dtype(self):
        img = _random_gray(100, 150)
        result = equalize_tiles(img)
        assert result.shape == img.shape
        assert result.dtype == np.uint8

    def test_uniform_image_stays_uniform(self):
        img = np.full((100, 150), 128, dtype=np.uint8)
        result = equalize_tiles(img)
        assert len(np.unique(result)) == 1

    def test_low_contrast_is_stretched(self):
        rng = np.random.default_rng(1)
        img = rng.integers(120, 131, (128, 128), dtype=np.uint8)
        result = equalize_tiles(img)
        assert result.std() > img.std()

    def test_whole_tiles_match_opencv_grid(self):
        img = _random_gray(128, 192, seed=3)
        clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(3, 2))
        assert np.array_equal(equalize_tiles(img), clahe.apply(img))

    def test_partial_tiles_are_full_tag_sized(self):
        img = _random_gray(164, 264, seed=4)
        # 264x164 extends to 320x192: a 5x3 grid of 64x64 tiles
        extended = cv2.copyMakeBorder(img, 0, 28, 0, 56, cv2.BORDER_REFLECT_101)
        clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(5, 3))
        expected = clahe.apply(extended)[:164, :264]
        assert np.array_equal(equalize_tiles(img), expected)

    def test_result_is_independent_of_reflected_extension(self):
        img = _random_gray(100, 150, seed=5)
        extended = cv2.copyMakeBorder(img, 0, 28, 0, 42, cv2.BORDER_REFLECT_101)
        assert np.array_equal(equalize_tiles(extended)[:100, :150], equalize_tiles(img))

    def test_custom_tile_size(self):
        img = _random_gray(40, 40, seed=6)
        clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(5, 5))
        assert np.array_equal(equalize_tiles(img, tile_size=(8, 8)), clahe.apply(img))

    def test_pure_function_no_mutation(self):
        img = _random_gray(64, 64)
        original = img.copy()
        _ = equalize_tiles(img)
        assert np.array_equal(img, original)


class TestAdaptiveThreshold:
    """Tests for adaptive thresholding and blending."""

    def test_mask_is_binary(self):
        img = _random_gray(80, 80)
        mask = adaptive_threshold_mask(img)
        assert mask.shape == img.shape
        assert set(np.unique(mask)) <= {0, 255}

    def test_uniform_image_gives_empty_mask(self):
        img = np.full((60, 60), 100, dtype=np.uint8)
        mask = adaptive_threshold_mask(img)
        assert np.all(mask == 0)

    def test_bright_spot_is_foreground(self):
        img = np.zeros((101, 101), dtype=np.uint8)
        img[45:56, 45:56] = 200
        mask = adaptive_threshold_mask(img)
        assert mask[50, 50] == 255
        assert mask[0, 0] == 0

    def test_blend_known_values(self):
        img = np.array([[1, 200]], dtype=np.uint8)
        mask = np.array([[255, 0]], dtype=np.uint8)
        result = blend_with_mask(img, mask)
        assert result.dtype == np.uint8
        assert result.tolist() == [[77, 140]]

    def test_binary_output_is_raw_mask(self):
        img = _random_gray(80, 80)
        result = adaptive_threshold(img, binary_output=True)
        assert np.array_equal(result, adaptive_threshold_mask(img))

    def test_blend_rounds_exact_halves(self):
        img = np.array([[45, 85, 165]], dtype=np.uint8)
        mask = np.zeros_like(img)
        # 31.5, 59.5 and 115.5 exactly
        assert blend_with_mask(img, mask).tolist() == [[32, 60, 116]]

    def test_blend_matches_integer_reference_for_mask_values(self):
        img = np.tile(np.arange(256, dtype=np.uint8), (2, 1))
        mask = np.zeros_like(img)
        mask[1] = 255
        expected = np.rint(
            (7 * img.astype(np.int32) + 3 * mask.astype(np.int32)) / 10
        ).astype(np.uint8)
        assert np.array_equal(blend_with_mask(img, mask), expected)

    def test_blend_agrees_with_add_weighted(self):
        img = np.tile(np.arange(256, dtype=np.uint8), (2, 1))
        mask = np.zeros_like(img)
        mask[1] = 255
        expected = cv2.addWeighted(img, 0.7, mask, 0.3, 0)
        assert np.array_equal(blend_with_mask(img, mask), expected)

    def test_blend_output_matches_weighted_formula(self):
        img = _random_gray(80, 80)
        mask = adaptive_threshold_mask(img)
        result = adaptive_threshold(img, binary_output=False)
        expected = np.rint(
            (7 * img.astype(np.int32) + 3 * mask.astype(np.int32)) / 10
        ).astype(np.uint8)
        assert np.array_equal(result, expected)

    def test_uniform_image_blend_is_scaled_original(self):
        img = np.full((60, 60), 100, dtype=np.uint8)
        result = adaptive_threshold(img)
        assert np.all(result == 70)


class TestPipelineConfig:
    """Tests for PipelineConfig construction and validation."""

    def test_defaults_border_only(self):
        config = PipelineConfig()
        assert config.apply_border is True
        assert config.apply_contrast_norm is False
        assert config.apply_threshold is False
        assert config.binary_output is False

    def test_binary_output_forces_threshold(self):
        config = PipelineConfig.from_flags(threshold=False, binary_output=True)
        assert config.apply_threshold is True
        assert config.binary_output is True

    def test_threshold_flag_kept_without_binary(self):
        config = PipelineConfig.from_flags(threshold=False, binary_output=False)
        assert config.apply_threshold is False

    def test_odd_tag_size_raises(self):
        config = PipelineConfig(tag_size=(63, 64))
        with pytest.raises(ValueError, match="even"):
            config.validate()

    def test_non_positive_tag_size_raises(self):
        config = PipelineConfig(tag_size=(0, 64))
        with pytest.raises(ValueError, match="positive"):
            config.validate()

    def test_clip_limit_must_be_positive(self):
        config = PipelineConfig(clip_limit=0)
        with pytest.raises(ValueError, match="clip_limit"):
            config.validate()

    def test_even_block_size_raises(self):
        config = PipelineConfig(block_size=50)
        with pytest.raises(ValueError, match="block_size"):
            config.validate()

    def test_negative_weight_raises(self):
        config = PipelineConfig(weight_original=-0.1)
        with pytest.raises(ValueError, match="weights"):
            config.validate()


class TestSteps:
    """Tests for the step classes."""

    def test_border_step_name_and_shape(self):
        step = BorderStep(tag_size=(8, 6))
        result = step.apply(np.zeros((10, 10), dtype=np.uint8))
        assert step.name == "border(8x6)"
        assert result.shape == (16, 18)

    def test_contrast_step_requires_grayscale(self):
        step = ContrastNormStep()
        with pytest.raises(ValueError, match="grayscale input"):
            step.apply(np.zeros((10, 10, 3), dtype=np.uint8))

    def test_threshold_step_requires_grayscale(self):
        step = ThresholdStep()
        with pytest.raises(ValueError, match="grayscale input"):
            step.apply(np.zeros((10, 10, 3), dtype=np.uint8))

    def test_threshold_step_names(self):
        assert ThresholdStep(binary_output=True).name == "threshold(binary)"
        assert ThresholdStep(binary_output=False).name == "threshold(blend)"

    def test_steps_are_pure(self):
        img = _random_gray(70, 70)
        original = img.copy()
        for step in (BorderStep(), ContrastNormStep(), ThresholdStep()):
            _ = step.apply(img)
        assert np.array_equal(img, original)


class TestBuildPipeline:
    """Tests for building the step list from configuration."""

    def test_default_is_border_only(self):
        pipeline = build_pipeline(PipelineConfig())
        assert [type(step) for step in pipeline] == [BorderStep]

    def test_all_stages_in_fixed_order(self):
        config = PipelineConfig.from_flags(
            border=True, contrast_norm=True, threshold=True
        )
        pipeline = build_pipeline(config)
        assert [type(step) for step in pipeline] == [
            BorderStep,
            ContrastNormStep,
            ThresholdStep,
        ]

    def test_binary_output_adds_threshold_step(self):
        config = PipelineConfig.from_flags(
            border=False, threshold=False, binary_output=True
        )
        pipeline = build_pipeline(config)
        assert len(pipeline) == 1
        step = pipeline.steps[0]
        assert isinstance(step, ThresholdStep)
        assert step.binary_output is True

    def test_no_stages(self):
        config = PipelineConfig.from_flags(border=False)
        assert len(build_pipeline(config)) == 0


class TestPipeline:
    """Tests for the Pipeline class."""

    def test_empty_pipeline_returns_copy_of_original(self):
        pipeline = Pipeline(steps=[])
        img = _random_gray(20, 20)
        result = pipeline.run(img)
        assert np.array_equal(result.final, img)
        assert result.final is not img

    def test_tracks_intermediates(self):
        pipeline = Pipeline(steps=[
            BorderStep(tag_size=(4, 4)),
            ThresholdStep(binary_output=True),
        ])
        result = pipeline.run(_random_gray(20, 20))
        assert result.step_names == ["border(4x4)", "threshold(binary)"]
        assert result.get_intermediate("border").shape == (24, 24)
        assert result.get_intermediate("threshold(binary)") is result.final
        assert result.get_intermediate("contrast") is None


class TestRunPipeline:
    """Tests for the run_pipeline function."""

    def test_default_config_pads(self):
        img = np.zeros((100, 200), dtype=np.uint8)
        result = run_pipeline(img)
        assert result.shape == (100 + TAG_HEIGHT, 200 + TAG_WIDTH)

    def test_deterministic(self):
        img = _random_gray(90, 120)
        config = PipelineConfig.from_flags(
            border=True, contrast_norm=True, threshold=True
        )
        first = run_pipeline(img, config)
        second = run_pipeline(img, config)
        assert first.tobytes() == second.tobytes()

    def test_binary_vs_blend_after_contrast(self):
        img = _random_gray(90, 120)
        normalized = equalize_tiles(img)
        mask = adaptive_threshold_mask(normalized)

        binary = run_pipeline(
            img,
            PipelineConfig.from_flags(border=False, contrast_norm=True, binary_output=True),
        )
        blended = run_pipeline(
            img,
            PipelineConfig.from_flags(border=False, contrast_norm=True, threshold=True),
        )

        assert np.array_equal(binary, mask)
        expected = np.rint(
            (7 * normalized.astype(np.int32) + 3 * mask.astype(np.int32)) / 10
        ).astype(np.uint8)
        assert np.array_equal(blended, expected)

    def test_preserves_input(self):
        img = _random_gray(50, 50)
        original = img.copy()
        _ = run_pipeline(img, PipelineConfig.from_flags(contrast_norm=True, threshold=True))
        assert np.array_equal(img, original)

    def test_invalid_config_raises(self):
        img = np.zeros((10, 10), dtype=np.uint8)
        with pytest.raises(ValueError):
            run_pipeline(img, PipelineConfig(block_size=4))
