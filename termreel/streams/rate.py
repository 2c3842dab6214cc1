"""Frame rate conversion.

RateConverter adapts a source frame rate to a lower target rate by dropping
source frames. Dropped frames are spread as evenly as possible: an error term
accumulates the fraction of a frame each output tick falls behind, and one
source frame is skipped every time it reaches a whole frame. The long-run
output rate converges to the target without drift.

Example:
    converter = RateConverter(source, source_fps=30, target_fps=15)
    frame = converter.next_frame()  # every other source frame
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..rendering.frame import RenderedFrame
    from .source import FrameSource


class RateConverter:
    """Drops source frames to match a target frame rate.

    A target of 0 means "no limit" and, like any target above the source
    rate, resolves to the source rate. Frames are never invented.
    """

    def __init__(self, source: "FrameSource", source_fps: float, target_fps: float = 0):
        """
        :param source: Frame source to draw from
        :param source_fps: Nominal source frame rate
        :param target_fps: Requested output frame rate (0 = source rate)
        :raises ConfigurationError: For a non-positive source rate or negative target
        """
        if source_fps <= 0:
            raise ConfigurationError(f"Source frame rate must be positive, got {source_fps}")
        if target_fps < 0:
            raise ConfigurationError(f"Target frame rate must not be negative, got {target_fps}")

        if target_fps == 0 or target_fps > source_fps:
            target_fps = source_fps

        self._source = source
        self._source_fps = float(source_fps)
        self._target_fps = float(target_fps)
        self._error_per_frame = self._source_fps / self._target_fps - 1.0
        self._error = 0.0
        self._dropped = 0

    def next_frame(self) -> "RenderedFrame | None":
        """Get the next output frame, skipping source frames as needed.

        :return: The frame, or None once the source is exhausted
        """
        self._error += self._error_per_frame

        while self._error >= 1.0:
            self._error -= 1.0
            if self._source.next() is None:
                return None
            self._dropped += 1

        return self._source.next()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def fps(self) -> float:
        """Effective output frame rate."""
        return self._target_fps

    @property
    def source_fps(self) -> float:
        """Source frame rate."""
        return self._source_fps

    @property
    def error_per_frame(self) -> float:
        """Source frames to skip per output frame, as a fraction."""
        return self._error_per_frame

    @property
    def error(self) -> float:
        """Currently accumulated error (always below 1.0 between calls)."""
        return self._error

    @property
    def dropped(self) -> int:
        """Number of source frames skipped so far."""
        return self._dropped

    @property
    def source(self) -> "FrameSource":
        """The wrapped frame source."""
        return self._source


__all__ = ["RateConverter"]
