"""
Unit tests for the preprocessing module: behavioral tests only.

Covers: error handling, algorithm correctness, side-effect validation,
and the named method registry.
"""

import numpy as np
import pytest

from errors import ConfigurationError, PreprocessingError
from images import ImageFrame
from preprocessing import (
    PREPROCESSING_METHODS,
    EqualizeHistogramStep,
    OtsuThresholdStep,
    Pipeline,
    PreprocessStep,
    describe_method,
    equalize_histogram,
    get_preprocessor,
    otsu_threshold,
    to_grayscale,
)


def gradient(height=20, width=64):
    """Low-contrast horizontal gradient (values 100..131)."""
    row = (100 + np.arange(width) // 2).astype(np.uint8)
    return np.tile(row, (height, 1))


class TestToGrayscale:
    """Tests for the to_grayscale function."""

    def test_pure_function_no_mutation(self):
        """Input should not be modified."""
        rgb = np.full((10, 10, 3), 128, dtype=np.uint8)
        original_data = rgb.copy()
        _ = to_grayscale(rgb)
        assert np.array_equal(rgb, original_data)

    def test_white_image_produces_white_gray(self):
        white = np.full((10, 10, 3), 255, dtype=np.uint8)
        gray = to_grayscale(white)
        assert np.all(gray == 255)

    def test_black_image_produces_black_gray(self):
        black = np.zeros((10, 10, 4), dtype=np.uint8)
        gray = to_grayscale(black, "RGBA")
        assert gray.shape == (10, 10)
        assert np.all(gray == 0)

    def test_rgb_and_bgr_weight_channels_differently(self):
        red = np.zeros((2, 2, 3), dtype=np.uint8)
        red[:, :, 0] = 255
        assert to_grayscale(red, "RGB")[0, 0] != to_grayscale(red, "BGR")[0, 0]

    def test_gray_input_copied(self):
        gray = np.full((4, 4), 7, dtype=np.uint8)
        result = to_grayscale(gray)
        assert result is not gray
        assert np.array_equal(result, gray)

    def test_invalid_type_raises(self):
        with pytest.raises(TypeError, match="Expected numpy.ndarray"):
            to_grayscale([[1, 2], [3, 4]])

    def test_empty_array_raises(self):
        with pytest.raises(PreprocessingError):
            to_grayscale(np.zeros((0, 0), dtype=np.uint8))

    def test_1d_array_raises(self):
        with pytest.raises(PreprocessingError, match="2D or 3D"):
            to_grayscale(np.array([1, 2, 3]))

    def test_unsupported_channels_raises(self):
        with pytest.raises(PreprocessingError, match="Unsupported channel layout"):
            to_grayscale(np.zeros((10, 10, 5), dtype=np.uint8))

    def test_layout_mismatch_raises(self):
        with pytest.raises(PreprocessingError, match="Unsupported channel layout"):
            to_grayscale(np.zeros((10, 10, 3), dtype=np.uint8), "RGBA")


class TestEqualizeHistogram:
    def test_stretches_contrast(self):
        result = equalize_histogram(gradient())
        assert int(result.max()) - int(result.min()) > 200

    def test_no_mutation(self):
        gray = gradient()
        before = gray.copy()
        equalize_histogram(gray)
        assert np.array_equal(gray, before)

    def test_requires_grayscale(self):
        with pytest.raises(PreprocessingError, match="requires grayscale"):
            equalize_histogram(np.zeros((4, 4, 3), dtype=np.uint8))


class TestOtsuThreshold:
    def test_output_is_binary(self):
        result = otsu_threshold(gradient())
        assert set(np.unique(result)) <= {0, 255}

    def test_custom_max_value(self):
        result = otsu_threshold(gradient(), 1)
        assert set(np.unique(result)) <= {0, 1}

    def test_separates_two_levels(self):
        gray = np.full((10, 10), 40, dtype=np.uint8)
        gray[:, 5:] = 200
        result = otsu_threshold(gray)
        assert np.all(result[:, :5] == 0)
        assert np.all(result[:, 5:] == 255)


class TestPipeline:
    def frame(self):
        rgb = np.stack([gradient()] * 3, axis=2)
        return ImageFrame(pixels=rgb, color_space="RGB")

    def test_original_is_grayscale_only(self):
        result = get_preprocessor("original").run(self.frame())
        assert result.steps == []
        assert result.final.shape == (20, 64)
        assert np.array_equal(result.final, result.grayscale)

    def test_histogram_runs_equalization(self):
        result = get_preprocessor("histogram").run(self.frame())
        assert [s.name for s in result.steps] == ["equalize_histogram"]
        assert np.array_equal(result.final, equalize_histogram(result.grayscale))

    def test_otsu_equalizes_then_thresholds(self):
        result = get_preprocessor("otsu").run(self.frame())
        assert [s.name for s in result.steps] == ["equalize_histogram", "otsu_threshold(255)"]
        assert set(np.unique(result.final)) <= {0, 255}
        assert result.get_intermediate("equalize_histogram") is not None
        assert result.get_intermediate("blur") is None

    def test_frame_not_modified(self):
        frame = self.frame()
        before = frame.pixels.copy()
        get_preprocessor("otsu").run(frame)
        assert np.array_equal(frame.pixels, before)

    def test_shape_changing_step_rejected(self):
        class CropStep(PreprocessStep):
            def apply(self, gray):
                return gray[1:, :]

            @property
            def name(self):
                return "crop"

        with pytest.raises(PreprocessingError, match="changed image shape"):
            Pipeline("crop", (CropStep(),)).run(self.frame())

    def test_pipeline_is_iterable(self):
        pipeline = get_preprocessor("otsu")
        assert len(pipeline) == 2
        assert [type(s) for s in pipeline] == [EqualizeHistogramStep, OtsuThresholdStep]


class TestRegistry:
    def test_methods(self):
        assert PREPROCESSING_METHODS == ("original", "histogram", "otsu")

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError, match="Unknown preprocessing method"):
            get_preprocessor("sharpen")

    def test_describe(self):
        assert describe_method("histogram") == {
            "method": "histogram",
            "steps": ["grayscale", "equalize_histogram"],
        }
