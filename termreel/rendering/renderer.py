"""
Frame Renderer - Convert decoded video frames to (colored) text art.

Each frame is scaled to a fixed number of columns, every pixel's luminosity is
mapped to a palette glyph and, with color enabled, the glyph is wrapped in a
24-bit ANSI foreground escape carrying the pixel's RGB value.

Example:
    from termreel.palette import load_palette
    from termreel.rendering import FrameRenderer, RawFrame

    renderer = FrameRenderer(load_palette("ascii"), width=80, color=True)
    print(renderer.render(RawFrame(pixels)))
"""

from __future__ import annotations

import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import cv2
import numpy as np

from ..errors import ConfigurationError, RenderError

if TYPE_CHECKING:
    from ..palette import Palette
    from .frame import RawFrame

# ANSI escape codes
ESC = "\033"
RESET = f"{ESC}[0m"

# Terminal glyph cells are roughly twice as tall as they are wide
DEFAULT_ASPECT_CORRECTION = 2.0


@dataclass
class RenderMetrics:
    """Counters describing the renderer's work.

    :param frames_rendered: Number of frames scaled and converted
    :param cache_hits: Number of text requests served from a frame cache
    :param total_time_ms: Time spent rendering in milliseconds
    """

    frames_rendered: int = 0
    cache_hits: int = 0
    total_time_ms: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def avg_time_ms(self) -> float:
        """Average render time per frame in milliseconds."""
        if self.frames_rendered == 0:
            return 0.0
        return self.total_time_ms / self.frames_rendered

    def record_render(self, elapsed_ms: float) -> None:
        """Count one rendered frame."""
        with self._lock:
            self.frames_rendered += 1
            self.total_time_ms += elapsed_ms

    def record_hit(self) -> None:
        """Count one cache hit."""
        with self._lock:
            self.cache_hits += 1


class FrameRenderer:
    """
    Converts raw RGB frames to text blocks.

    Features:
    - Deterministic area resampling to a fixed column count
    - Luminosity ``(R + G + B) // 3`` mapped through a palette lookup table
    - Optional true color (24-bit) ANSI escape codes
    - Optional row-parallel text assembly (output is always in row order)
    """

    def __init__(
        self,
        palette: "Palette",
        width: int,
        color: bool = True,
        *,
        aspect_correction: float = DEFAULT_ASPECT_CORRECTION,
        interpolation: int = cv2.INTER_AREA,
        row_workers: int = 1,
    ):
        """
        Initialize the renderer.

        :param palette: Glyphs from emptiest to densest
        :param width: Output width in characters
        :param color: Wrap glyphs in true color escape codes
        :param aspect_correction: Height/width ratio of a terminal glyph cell
        :param interpolation: OpenCV interpolation flag used for scaling
        :param row_workers: Threads used to assemble rows (1 = sequential)
        :raises ConfigurationError: For an empty palette or non-positive sizes
        """
        if len(palette) == 0:
            raise ConfigurationError(f"Palette '{palette.name}' has no glyphs")
        if width <= 0:
            raise ConfigurationError(f"Width must be positive, got {width}")
        if aspect_correction <= 0:
            raise ConfigurationError(
                f"Aspect correction must be positive, got {aspect_correction}"
            )
        if row_workers < 1:
            raise ConfigurationError(f"Row workers must be at least 1, got {row_workers}")

        self.palette = palette
        self.width = width
        self.color = color
        self.aspect_correction = aspect_correction
        self.interpolation = interpolation
        self.row_workers = row_workers
        self.metrics = RenderMetrics()

        self._table = palette.lookup_table()

    @property
    def cache_key(self) -> tuple:
        """Identifies the render configuration for frame text caches."""
        return (
            self.width,
            self.color,
            self.palette.glyphs,
            self.aspect_correction,
            self.interpolation,
        )

    def target_size(self, source_width: int, source_height: int) -> tuple[int, int]:
        """Calculate the output size in characters.

        :param source_width: Frame width in pixels
        :param source_height: Frame height in pixels
        :return: ``(columns, rows)``
        """
        rows = self.width * (source_height / source_width) / self.aspect_correction
        # Round half up
        return self.width, max(1, math.floor(rows + 0.5))

    def scale(self, frame: "RawFrame") -> np.ndarray:
        """Resize a frame to the output size.

        :param frame: Frame to scale
        :return: ``(rows, columns, 3)`` uint8 array
        :raises RenderError: If the buffer has an unusable shape or resizing fails
        """
        pixels = frame.pixels
        if pixels.ndim == 2:
            # Grayscale - expand to RGB
            pixels = np.stack([pixels, pixels, pixels], axis=-1)
        elif pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise RenderError(f"Frame {frame.index} has unsupported shape {pixels.shape}")
        elif pixels.shape[2] == 4:
            # RGBA - drop alpha
            pixels = pixels[:, :, :3]

        width, height = frame.width, frame.height
        if width == 0 or height == 0:
            raise RenderError(f"Frame {frame.index} is empty ({width}x{height})")

        size = self.target_size(width, height)
        try:
            resized = cv2.resize(
                np.ascontiguousarray(pixels, dtype=np.uint8),
                size,
                interpolation=self.interpolation,
            )
        except cv2.error as exc:
            raise RenderError(f"Could not resize frame {frame.index} to {size}: {exc}") from exc

        return resized

    def render(self, frame: "RawFrame") -> str:
        """
        Render a frame as text.

        :param frame: Frame to render
        :return: Text block, every row terminated by a newline
        :raises RenderError: If the frame cannot be scaled
        """
        start = time.perf_counter()
        text = self.render_pixels(self.scale(frame))
        self.metrics.record_render((time.perf_counter() - start) * 1000)
        return text

    def render_pixels(self, pixels: np.ndarray) -> str:
        """Map already scaled pixels to glyphs.

        :param pixels: ``(rows, columns, 3)`` uint8 array
        :return: Text block
        """
        luminosity = pixels.astype(np.uint16).sum(axis=2) // 3
        glyphs = self._table[luminosity]

        if self.row_workers > 1 and len(glyphs) > 1:
            with ThreadPoolExecutor(max_workers=self.row_workers) as executor:
                # map() yields results in submission order
                rows = list(executor.map(self._render_row, glyphs, pixels))
        else:
            rows = [self._render_row(g, p) for g, p in zip(glyphs, pixels)]

        return "".join(rows)

    def _render_row(self, glyphs: np.ndarray, pixels: np.ndarray) -> str:
        """Render one row of glyphs, colorized if enabled."""
        if not self.color:
            return "".join(glyphs) + "\n"

        chars = []
        for glyph, (r, g, b) in zip(glyphs, pixels.tolist()):
            chars.append(f"{ESC}[38;2;{r};{g};{b}m{glyph}")
        chars.append(RESET)
        chars.append("\n")
        return "".join(chars)


__all__ = ["FrameRenderer", "RenderMetrics", "DEFAULT_ASPECT_CORRECTION", "ESC", "RESET"]
