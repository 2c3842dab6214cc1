"""Frame containers.

- :class:`RawFrame`: one decoded RGB pixel buffer.
- :class:`LazyFrame`: wraps a raw frame, renders it on first request and
  memoizes the text per render configuration.
- :class:`TextFrame`: holds only already rendered text (the raw buffer is
  dropped after conversion, used by preprocessing).

Both rendered variants satisfy the :class:`RenderedFrame` protocol.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from collections.abc import Hashable
from typing import TYPE_CHECKING, Protocol

import numpy as np

if TYPE_CHECKING:
    from .renderer import FrameRenderer


@dataclass(eq=False)
class RawFrame:
    """A decoded pixel buffer.

    :param pixels: ``(height, width, 3)`` uint8 array in RGB order
    :param index: Zero-based position of the frame in its source
    """

    pixels: np.ndarray
    index: int = 0

    @property
    def width(self) -> int:
        """Width in pixels."""
        return int(self.pixels.shape[1]) if self.pixels.ndim >= 2 else 0

    @property
    def height(self) -> int:
        """Height in pixels."""
        return int(self.pixels.shape[0]) if self.pixels.ndim >= 1 else 0


class RenderedFrame(Protocol):
    """A frame that can produce its text representation."""

    @property
    def index(self) -> int: ...

    def as_text(self, renderer: "FrameRenderer") -> str: ...


class LazyFrame:
    """A raw frame rendered on demand.

    The text is computed on the first :meth:`as_text` call for a given render
    configuration and returned from the cache afterwards. The cache admits one
    writer at a time; concurrent readers see either no entry or the complete
    text.
    """

    __slots__ = ("_raw", "_texts", "_lock")

    def __init__(self, raw: RawFrame):
        self._raw = raw
        self._texts: dict[Hashable, str] = {}
        self._lock = threading.Lock()

    @property
    def index(self) -> int:
        """Position of the frame in its source."""
        return self._raw.index

    @property
    def raw(self) -> RawFrame:
        """The wrapped pixel buffer."""
        return self._raw

    def is_cached(self, renderer: "FrameRenderer") -> bool:
        """Whether text for this renderer's configuration is already stored."""
        return renderer.cache_key in self._texts

    def as_text(self, renderer: "FrameRenderer") -> str:
        """Get the frame text, rendering it if not cached yet.

        :param renderer: Renderer providing the configuration
        :return: Text block, one line per row
        :raises RenderError: If the frame cannot be rendered
        """
        key = renderer.cache_key
        text = self._texts.get(key)
        if text is not None:
            renderer.metrics.record_hit()
            return text

        with self._lock:
            text = self._texts.get(key)
            if text is None:
                text = renderer.render(self._raw)
                self._texts[key] = text
                return text

        renderer.metrics.record_hit()
        return text


class TextFrame:
    """An already rendered frame holding only its text."""

    __slots__ = ("_index", "_text")

    def __init__(self, text: str, index: int = 0):
        self._text = text
        self._index = index

    @classmethod
    def from_raw(cls, raw: RawFrame, renderer: "FrameRenderer") -> "TextFrame":
        """Render a raw frame and keep only the resulting text."""
        return cls(renderer.render(raw), raw.index)

    @property
    def index(self) -> int:
        """Position of the frame in its source."""
        return self._index

    @property
    def text(self) -> str:
        """The rendered text."""
        return self._text

    def as_text(self, renderer: "FrameRenderer | None" = None) -> str:
        """Return the stored text (the renderer is not consulted)."""
        return self._text


__all__ = ["RawFrame", "RenderedFrame", "LazyFrame", "TextFrame"]
