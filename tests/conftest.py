"""
Pytest fixtures for termreel tests
"""

import numpy as np
import pytest

from termreel.palette import Palette, load_palette
from termreel.rendering import FrameRenderer


def make_gradient(height: int = 24, width: int = 48, offset: int = 0) -> np.ndarray:
    """Create an RGB gradient frame, shifted by offset so frames differ."""
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            pixels[y, x] = [(x * 5 + offset) % 256, (y * 10 + offset) % 256, 128]
    return pixels


@pytest.fixture
def gradient() -> np.ndarray:
    """A single 48x24 gradient frame."""
    return make_gradient()


@pytest.fixture
def gradient_frames() -> list[np.ndarray]:
    """23 distinct gradient frames (two full chunks of 10 and a partial chunk)."""
    return [make_gradient(offset=i * 7) for i in range(23)]


@pytest.fixture
def dots_palette() -> Palette:
    """Four glyph palette ' .:#'."""
    return Palette("dots", [" ", ".", ":", "#"])


@pytest.fixture
def ascii_palette() -> Palette:
    """The bundled 92 glyph ascii palette."""
    return load_palette("ascii")


@pytest.fixture
def renderer(dots_palette) -> FrameRenderer:
    """Monochrome renderer, 16 columns wide."""
    return FrameRenderer(dots_palette, width=16, color=False)


@pytest.fixture
def palette_file(tmp_path):
    """A small palette file in the on-disk format."""
    path = tmp_path / "palettes.txt"
    path.write_text("mini:\n#:. \nbars:\n|-\n", encoding="utf-8")
    return path
