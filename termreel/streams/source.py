"""Frame sources - streamed or preprocessed.

A FrameSource hands out rendered frames one at a time. It has exactly two
strategies:

- ``SourceMode.STREAMED``: every call decodes one raw frame and wraps it in a
  LazyFrame that renders on demand. Minimal memory, decode cost paid per tick.
- ``SourceMode.PREPROCESSED``: all frames are decoded and rendered before
  playback, in parallel chunks. Only the text is kept.

Example:
    source = FrameSource.streamed(VideoFileDecoder("movie.mp4"))
    while (frame := source.next()) is not None:
        print(frame.as_text(renderer))
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import TYPE_CHECKING, Iterator

from ..errors import DecodeError, PreprocessingError, RenderError
from ..rendering.frame import LazyFrame, RenderedFrame, TextFrame
from .executor import DEFAULT_CHUNK_SIZE, PreprocessExecutor

if TYPE_CHECKING:
    from ..rendering.renderer import FrameRenderer
    from .decoder import FrameDecoder

logger = logging.getLogger(__name__)


class SourceMode(Enum):
    """Frame source strategy."""

    STREAMED = "streamed"
    PREPROCESSED = "preprocessed"


class FrameSource:
    """Produces rendered frames until the input is exhausted.

    Use :meth:`streamed` or :meth:`preprocessed` to create one. Once
    :meth:`next` has returned None it keeps returning None.
    """

    def __init__(
        self,
        mode: SourceMode,
        *,
        decoder: "FrameDecoder | None" = None,
        frames: list[TextFrame] | None = None,
    ) -> None:
        """
        :param mode: Strategy
        :param decoder: Raw frame decoder (streamed mode)
        :param frames: Already rendered frames (preprocessed mode)
        """
        if mode is SourceMode.STREAMED and decoder is None:
            raise ValueError("A streamed source needs a decoder")
        if mode is SourceMode.PREPROCESSED and frames is None:
            raise ValueError("A preprocessed source needs its frames")

        self._mode = mode
        self._decoder = decoder
        self._frames: deque[TextFrame] = deque(frames or ())
        self._exhausted = False

    @classmethod
    def streamed(cls, decoder: "FrameDecoder") -> "FrameSource":
        """Create a source that decodes one frame per call."""
        return cls(SourceMode.STREAMED, decoder=decoder)

    @classmethod
    def preprocessed(
        cls,
        decoder: "FrameDecoder",
        renderer: "FrameRenderer",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        num_workers: int | None = None,
    ) -> "FrameSource":
        """Decode and render every frame up front.

        Blocks until all chunks are rendered. The decoder is released
        afterwards.

        :param decoder: Raw frame decoder, read to its end
        :param renderer: Renderer applied to every frame
        :param chunk_size: Frames rendered in parallel per chunk
        :param num_workers: Worker threads (None = CPU count)
        :raises PreprocessingError: If any frame fails to decode or render
        """
        try:
            with PreprocessExecutor(renderer, chunk_size, num_workers) as executor:
                frames = executor.process_all(decoder)
        except (DecodeError, RenderError) as exc:
            raise PreprocessingError(f"Preprocessing aborted: {exc}") from exc
        finally:
            decoder.release()

        logger.info(f"Preprocessed {executor.get_metrics().summary()}")
        return cls(SourceMode.PREPROCESSED, frames=frames)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def mode(self) -> SourceMode:
        """Strategy of this source."""
        return self._mode

    @property
    def is_exhausted(self) -> bool:
        """Whether the end of the input has been reached."""
        return self._exhausted

    @property
    def remaining(self) -> int:
        """Frames still buffered (always 0 in streamed mode)."""
        return len(self._frames)

    # -------------------------------------------------------------------------
    # Frame Access
    # -------------------------------------------------------------------------

    def next(self) -> RenderedFrame | None:
        """Get the next frame.

        :return: The frame, or None once the input is exhausted
        """
        if self._exhausted:
            return None

        if self._mode is SourceMode.STREAMED:
            frame = self._next_streamed()
        else:
            frame = self._frames.popleft() if self._frames else None

        if frame is None:
            self._exhausted = True
            self.close()
        return frame

    def _next_streamed(self) -> LazyFrame | None:
        try:
            raw = self._decoder.read()
        except DecodeError as exc:
            # A failing read at the end of a file is expected, stop gracefully
            logger.debug(f"Decoder stopped: {exc}")
            return None
        if raw is None:
            return None
        return LazyFrame(raw)

    def close(self) -> None:
        """Release the decoder and drop buffered frames."""
        self._exhausted = True
        if self._decoder is not None:
            self._decoder.release()
        self._frames.clear()

    def __iter__(self) -> Iterator[RenderedFrame]:
        return self

    def __next__(self) -> RenderedFrame:
        frame = self.next()
        if frame is None:
            raise StopIteration
        return frame


__all__ = ["FrameSource", "SourceMode"]
