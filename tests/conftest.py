"""Pytest configuration: fast-by-default TDD setup.

Slow tests (real decoder libraries on generated images) are skipped unless
--slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)

Fast tests swap the real decoder backends for StubDecoder instances through
the decoder_provider argument that run_blocks() and read_codes() accept.
"""
import threading
import time

import numpy as np
import pytest

from decoders import DecodedSymbol
from geometry import Corners, Point, rect_to_corners
from images import ImageFrame


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that use the real decoder libraries (pyzbar, zxing-cpp, OpenCV)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: needs real decoder libraries")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def symbol(payload, symbology="QRCODE", corners=None):
    """A DecodedSymbol with a default 100x50 box at (10, 20)."""
    if corners is None:
        corners = rect_to_corners(10, 20, 100, 50)
    return DecodedSymbol(symbology=symbology, payload=payload, corners=corners)


class StubDecoder:
    """Decoder double returning canned symbols and counting calls."""

    def __init__(self, name, symbols=(), error=None, delay=0.0):
        self.name = name
        self.symbols = list(symbols)
        self.error = error
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()

    def decode(self, gray, options):
        with self._lock:
            self.calls.append((gray.shape, dict(options)))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.symbols)


class StubProvider:
    """decoder_provider that hands out registered StubDecoders by name."""

    def __init__(self, *decoders):
        self.decoders = {d.name: d for d in decoders}

    def __call__(self, name):
        return self.decoders[name]


@pytest.fixture
def gray_frame():
    return ImageFrame(pixels=np.full((480, 640), 200, dtype=np.uint8), color_space="GRAY")


@pytest.fixture
def axis_corners():
    """Corners of an upright 240x200 code in a 640x480 image."""
    return Corners(
        top_right=Point(440, 100),
        top_left=Point(200, 100),
        bottom_left=Point(200, 300),
        bottom_right=Point(440, 300),
    )
