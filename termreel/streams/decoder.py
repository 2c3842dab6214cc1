"""Decoder-based frame sources.

This module defines the FrameDecoder abstract base class, the pull interface
to whatever decodes raw pixel buffers (OpenCV for video files, in-memory
sequences for generated content and tests).
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Iterable, Iterator

import numpy as np

from ..errors import ConfigurationError
from ..rendering.frame import RawFrame


class FrameDecoder(ABC):
    """Base class for raw frame producers.

    Provides:
    - Thread-safe decoder access via ``self._lock``
    - Sequential frame indices
    - Iteration and context manager support

    Subclasses implement :attr:`fps` and :meth:`read`.

    Example:
        class MyDecoder(FrameDecoder):
            @property
            def fps(self) -> float:
                return 25.0

            def read(self) -> RawFrame | None:
                with self._lock:
                    pixels = self._produce()
                    if pixels is None:
                        return None
                    return RawFrame(pixels, self._take_index())
    """

    def __init__(self) -> None:
        """Initialize the decoder with thread safety primitives."""
        self._lock = threading.Lock()
        self._next_index: int = 0

    # -------------------------------------------------------------------------
    # Abstract Interface
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def fps(self) -> float:
        """Nominal source frame rate in frames per second."""
        ...

    @abstractmethod
    def read(self) -> RawFrame | None:
        """Decode the next frame.

        :return: The frame, or None at the end of the stream
        :raises DecodeError: If the decoder fails
        """
        ...

    # -------------------------------------------------------------------------
    # Optional Overrides
    # -------------------------------------------------------------------------

    @property
    def frame_count(self) -> int:
        """Total number of frames, 0 if unknown."""
        return 0

    def release(self) -> None:
        """Free decoder resources. Safe to call more than once."""

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @property
    def frames_read(self) -> int:
        """Number of frames produced so far."""
        return self._next_index

    def _take_index(self) -> int:
        """Return the index for the next produced frame (call under lock)."""
        index = self._next_index
        self._next_index += 1
        return index

    def __iter__(self) -> Iterator[RawFrame]:
        while True:
            frame = self.read()
            if frame is None:
                return
            yield frame

    def __enter__(self) -> "FrameDecoder":
        return self

    def __exit__(self, *args) -> None:
        self.release()


class SequenceDecoder(FrameDecoder):
    """Replays in-memory pixel arrays as a frame stream.

    Example:
        frames = [np.zeros((48, 64, 3), dtype=np.uint8) for _ in range(30)]
        decoder = SequenceDecoder(frames, fps=30.0)
    """

    def __init__(self, frames: Iterable[np.ndarray], fps: float = 30.0) -> None:
        """
        :param frames: ``(height, width, 3)`` RGB uint8 arrays
        :param fps: Nominal frame rate
        :raises ConfigurationError: If fps is not positive
        """
        super().__init__()
        if fps <= 0:
            raise ConfigurationError(f"Frame rate must be positive, got {fps}")
        self._fps = float(fps)
        self._frames = iter(frames)

    @property
    def fps(self) -> float:
        return self._fps

    def read(self) -> RawFrame | None:
        with self._lock:
            pixels = next(self._frames, None)
            if pixels is None:
                return None
            return RawFrame(pixels, self._take_index())


__all__ = ["FrameDecoder", "SequenceDecoder"]
