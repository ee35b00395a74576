"""
Decoder adapter interface and registry.

Each decoder kind is one adapter class in its own module. Adapter modules
import their third-party library at import time, so the registry imports
them lazily: a missing library only fails the blocks that use it.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

import numpy as np

import config
from errors import ConfigurationError, DecoderError

from .types import DecodedSymbol

logger = logging.getLogger(__name__)


class DecoderAdapter(Protocol):
    """Interface for decoder backends.

    Implementations must treat ``gray`` as read-only and raise DecoderError
    (or let any other exception escape) on failure.
    """

    name: str

    def decode(self, gray: np.ndarray, options: Mapping[str, Any]) -> list[DecodedSymbol]:
        """Decode every code found in a grayscale image."""


@dataclass(frozen=True)
class DecoderSpec:
    """Registry entry describing one decoder kind.

    Attributes:
        name: Decoder kind used in block configuration.
        module: Module defining the adapter class.
        class_name: Adapter class name inside ``module``.
        requirement: Distribution to install when the import fails.
        options: Accepted option names mapped to their expected type.
        choices: Allowed values for list-valued options.
    """

    name: str
    module: str
    class_name: str
    requirement: str
    options: Mapping[str, type | tuple[type, ...]] = field(default_factory=dict)
    choices: Mapping[str, tuple[str, ...]] = field(default_factory=dict)


# List-valued options may come from YAML (list) or Python callers (tuple)
_SEQUENCE = (list, tuple)

_DECODERS: dict[str, DecoderSpec] = {
    "zbar": DecoderSpec(
        name="zbar",
        module="decoders.zbar",
        class_name="ZBarDecoder",
        requirement="pyzbar",
        options={"symbols": _SEQUENCE},
    ),
    "zxing": DecoderSpec(
        name="zxing",
        module="decoders.zxing",
        class_name="ZXingDecoder",
        requirement="zxing-cpp",
        options={"try_harder": bool, "formats": _SEQUENCE},
    ),
    "opencv": DecoderSpec(
        name="opencv",
        module="decoders.opencv",
        class_name="OpenCVDecoder",
        requirement="opencv-python",
        options={"readers": _SEQUENCE},
        choices={"readers": config.OPENCV_READERS},
    ),
}

DECODER_NAMES: tuple[str, ...] = tuple(_DECODERS)


def get_decoder_spec(decoder_name: str) -> DecoderSpec:
    """Look up a decoder kind.

    Raises:
        ConfigurationError: If the decoder is unknown.
    """
    spec = _DECODERS.get(decoder_name)
    if spec is None:
        raise ConfigurationError(f"Unknown decoder: {decoder_name}")
    return spec


def validate_decoder_options(decoder_name: str, options: Mapping[str, Any]) -> None:
    """Check block options against what the decoder accepts.

    Raises:
        ConfigurationError: On unknown decoders, unknown option names,
            wrongly typed values, or values outside the allowed choices.
    """
    spec = get_decoder_spec(decoder_name)
    unknown = set(options) - set(spec.options)
    if unknown:
        raise ConfigurationError(
            f"Unknown options for decoder {decoder_name!r}: {sorted(unknown)}"
        )
    for key, value in options.items():
        expected = spec.options[key]
        if value is None:
            continue
        if not isinstance(value, expected):
            raise ConfigurationError(
                f"Option {key!r} for decoder {decoder_name!r} must be "
                f"{_type_names(expected)}, got {type(value).__name__}"
            )
        allowed = spec.choices.get(key)
        if allowed is not None:
            invalid = [v for v in value if v not in allowed]
            if invalid:
                raise ConfigurationError(
                    f"Invalid {key} for decoder {decoder_name!r}: {invalid}. "
                    f"Allowed: {list(allowed)}"
                )


def get_decoder_by_name(decoder_name: str) -> DecoderAdapter:
    """Instantiate a decoder adapter by name.

    Raises:
        ConfigurationError: If the decoder is unknown.
        DecoderError: If the decoder's library cannot be imported.
    """
    spec = get_decoder_spec(decoder_name)
    try:
        module = importlib.import_module(spec.module)
    except ImportError as e:
        raise DecoderError(
            f"Decoder {decoder_name!r} is not available: {e}. "
            f"Install {spec.requirement} to use it."
        ) from e
    adapter_cls = getattr(module, spec.class_name)
    logger.debug("Loaded decoder %s (%s.%s)", decoder_name, spec.module, spec.class_name)
    return adapter_cls()


def _type_names(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__
