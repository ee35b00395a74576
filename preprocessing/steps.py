"""
Preprocessing step classes with a common interface.

Each step is a frozen dataclass implementing PreprocessStep. A Pipeline
converts an ImageFrame to grayscale and then runs its steps in order, so
every named preprocessing method is just a different step list:

    original  = []
    histogram = [EqualizeHistogramStep()]
    otsu      = [EqualizeHistogramStep(), OtsuThresholdStep()]

Usage:
    from preprocessing.steps import get_preprocessor

    gray = get_preprocessor("otsu").run(frame).final
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import numpy as np

import config
from errors import ConfigurationError, PreprocessingError
from images import ImageFrame

from .normalization import equalize_histogram, otsu_threshold, to_grayscale


class PreprocessStep(ABC):
    """Base class for grayscale preprocessing steps.

    Steps must be pure: they take a 2D grayscale image and return a new
    2D image of the same shape without mutating the input.
    """

    @abstractmethod
    def apply(self, gray: np.ndarray) -> np.ndarray:
        """Apply this step to a grayscale image."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and debugging."""


@dataclass(frozen=True)
class EqualizeHistogramStep(PreprocessStep):
    """Global histogram equalization."""

    def apply(self, gray: np.ndarray) -> np.ndarray:
        return equalize_histogram(gray)

    @property
    def name(self) -> str:
        return "equalize_histogram"


@dataclass(frozen=True)
class OtsuThresholdStep(PreprocessStep):
    """Binary threshold at the Otsu-optimal level.

    Attributes:
        max_value: Value assigned to foreground pixels.
    """

    max_value: int = config.OTSU_MAX_VALUE

    def apply(self, gray: np.ndarray) -> np.ndarray:
        return otsu_threshold(gray, self.max_value)

    @property
    def name(self) -> str:
        return f"otsu_threshold({self.max_value})"


@dataclass
class StepResult:
    """Output of a single step."""

    name: str
    image: np.ndarray


@dataclass
class PipelineStepResults:
    """Results from running a preprocessing pipeline.

    Attributes:
        grayscale: The frame converted to grayscale, before any step.
        steps: StepResult for each step in order.
    """

    grayscale: np.ndarray
    steps: list[StepResult] = field(default_factory=list)

    @property
    def final(self) -> np.ndarray:
        """Get the final processed image."""
        if not self.steps:
            return self.grayscale
        return self.steps[-1].image

    def get_intermediate(self, step_name: str) -> np.ndarray | None:
        for step in self.steps:
            if step.name == step_name:
                return step.image
        return None


@dataclass(frozen=True)
class Pipeline:
    """A named preprocessing method: grayscale conversion followed by steps.

    Attributes:
        method: Preprocessing method name (e.g. "histogram").
        steps: Steps applied in order after grayscale conversion.
    """

    method: str
    steps: tuple[PreprocessStep, ...] = ()

    def run(self, frame: ImageFrame) -> PipelineStepResults:
        """Run the pipeline on a frame.

        Raises:
            PreprocessingError: If the frame's channel layout is unsupported
                or a step changes the image dimensions.
        """
        gray = to_grayscale(frame.pixels, frame.color_space)
        result = PipelineStepResults(grayscale=gray)
        current = gray

        for step in self.steps:
            output = step.apply(current)
            if output.shape != current.shape:
                raise PreprocessingError(
                    f"Step {step.name} changed image shape "
                    f"from {current.shape} to {output.shape}"
                )
            result.steps.append(StepResult(name=step.name, image=output))
            current = output

        return result

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)


_METHODS: dict[str, tuple[PreprocessStep, ...]] = {
    "original": (),
    "histogram": (EqualizeHistogramStep(),),
    "otsu": (EqualizeHistogramStep(), OtsuThresholdStep()),
}

PREPROCESSING_METHODS: tuple[str, ...] = tuple(_METHODS)


def get_preprocessor(method: str) -> Pipeline:
    """Return the pipeline for a named preprocessing method.

    Raises:
        ConfigurationError: If the method is unknown.
    """
    steps = _METHODS.get(method)
    if steps is None:
        raise ConfigurationError(f"Unknown preprocessing method: {method}")
    return Pipeline(method=method, steps=steps)


def describe_method(method: str) -> dict[str, Any]:
    """Summarize a preprocessing method for listings."""
    pipeline = get_preprocessor(method)
    return {
        "method": method,
        "steps": ["grayscale", *(step.name for step in pipeline)],
    }
