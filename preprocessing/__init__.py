"""
Image preprocessing module for barcode decoding.

This module turns a loaded ImageFrame into the grayscale image a decoder
reads. All functions follow the pattern: input -> output with no mutation
of the original arrays.

Key components:
- normalization: pure grayscale/enhancement functions
- steps: PreprocessStep interface, Pipeline, and the named method registry

Each block names one method ("original", "histogram", "otsu"); resolve it
with get_preprocessor(name) and call .run(frame).final.
"""

from .normalization import to_grayscale, equalize_histogram, otsu_threshold
from .steps import (
    PreprocessStep,
    EqualizeHistogramStep,
    OtsuThresholdStep,
    Pipeline,
    PipelineStepResults,
    StepResult,
    PREPROCESSING_METHODS,
    get_preprocessor,
    describe_method,
)

__all__ = [
    # Functions
    "to_grayscale",
    "equalize_histogram",
    "otsu_threshold",
    # Class-based API
    "PreprocessStep",
    "EqualizeHistogramStep",
    "OtsuThresholdStep",
    "Pipeline",
    "PipelineStepResults",
    "StepResult",
    # Registry
    "PREPROCESSING_METHODS",
    "get_preprocessor",
    "describe_method",
]
