"""Video file decoder.

This module provides VideoFileDecoder, which reads frames sequentially from a
video container through OpenCV.
"""

from __future__ import annotations

import logging
from pathlib import Path

import cv2

from ..errors import DecodeError
from ..rendering.frame import RawFrame
from .decoder import FrameDecoder

logger = logging.getLogger(__name__)

# Used when the container does not report a frame rate
FALLBACK_FPS = 30.0


class VideoFileDecoder(FrameDecoder):
    """Sequential video file decoding with OpenCV.

    Frames are converted from OpenCV's BGR order to RGB.

    Example:
        with VideoFileDecoder("movie.mp4") as decoder:
            print(decoder.fps, decoder.frame_count)
            for frame in decoder:
                process(frame)

    Attributes:
        path: Path of the video file
    """

    def __init__(self, path: str | Path) -> None:
        """Open the video file.

        :param path: Path to the video file
        :raises DecodeError: If the file cannot be opened
        """
        super().__init__()
        self.path = Path(path)
        self._cap = cv2.VideoCapture(str(self.path))
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise DecodeError(f"Failed to open video source: {self.path}")

        # Get source properties
        self._source_fps = self._cap.get(cv2.CAP_PROP_FPS) or FALLBACK_FPS
        self._frame_count = int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT))
        self._width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self._height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.debug(
            f"Opened {self.path}: {self._width}x{self._height} "
            f"@ {self._source_fps:.2f}fps, {self._frame_count} frames"
        )

    def read(self) -> RawFrame | None:
        """Read the next frame.

        :return: RGB frame, or None at the end of the video
        :raises DecodeError: If OpenCV fails while decoding
        """
        with self._lock:
            if self._cap is None:
                return None
            try:
                ret, frame = self._cap.read()
            except cv2.error as exc:
                raise DecodeError(f"Failed to read frame {self._next_index}: {exc}") from exc

            if not ret or frame is None or frame.size == 0:
                return None

            # Convert BGR (OpenCV default) to RGB
            frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            return RawFrame(frame_rgb, self._take_index())

    def release(self) -> None:
        """Release the video capture."""
        with self._lock:
            if self._cap is not None:
                self._cap.release()
                self._cap = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def fps(self) -> float:
        """Frame rate reported by the container."""
        return self._source_fps

    @property
    def frame_count(self) -> int:
        """Total number of frames reported by the container."""
        return self._frame_count

    @property
    def width(self) -> int:
        """Video frame width in pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Video frame height in pixels."""
        return self._height

    @property
    def duration(self) -> float:
        """Total video duration in seconds."""
        if self._frame_count > 0 and self._source_fps > 0:
            return self._frame_count / self._source_fps
        return 0.0


__all__ = ["VideoFileDecoder", "FALLBACK_FPS"]
