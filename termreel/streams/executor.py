"""
Chunked parallel preprocessing of frames.

Renders a stream of raw frames to text ahead of playback:
- Frames are grouped in fixed-size chunks
- Each chunk is rendered in parallel on a bounded thread pool
- Results are collected in submission order and chunks run strictly one
  after another, so the output order always matches the source order
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from ..errors import ConfigurationError
from ..rendering.frame import TextFrame

if TYPE_CHECKING:
    from ..rendering.frame import RawFrame
    from ..rendering.renderer import FrameRenderer

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10


@dataclass
class PreprocessMetrics:
    """Preprocessing performance metrics.

    :param chunks_processed: Number of chunks rendered
    :param frames_submitted: Number of frames handed to the pool
    :param frames_completed: Number of frames whose text was collected
    :param start_time: Start timestamp (perf_counter)
    :param end_time: End timestamp (perf_counter)
    """

    chunks_processed: int = 0
    frames_submitted: int = 0
    frames_completed: int = 0
    start_time: float = 0.0
    end_time: float = 0.0

    @property
    def total_time_s(self) -> float:
        """Total execution time in seconds."""
        return self.end_time - self.start_time

    @property
    def fps(self) -> float:
        """Frames per second throughput."""
        if self.total_time_s <= 0:
            return 0.0
        return self.frames_completed / self.total_time_s

    def summary(self) -> str:
        """Generate a one-line summary."""
        return (
            f"{self.frames_completed} frames in {self.chunks_processed} chunks, "
            f"{self.total_time_s:.2f}s ({self.fps:.1f} fps)"
        )


class PreprocessExecutor:
    """Data-parallel chunk renderer using ThreadPoolExecutor.

    Example::

        with PreprocessExecutor(renderer, chunk_size=10) as executor:
            text_frames = executor.process_all(decoder)

    :param renderer: Renderer used for every frame
    :param chunk_size: Frames per chunk
    :param num_workers: Number of parallel workers (auto-detect if None)
    """

    def __init__(
        self,
        renderer: "FrameRenderer",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        num_workers: int | None = None,
    ):
        if chunk_size < 1:
            raise ConfigurationError(f"Chunk size must be at least 1, got {chunk_size}")
        if num_workers is not None and num_workers < 1:
            raise ConfigurationError(f"Worker count must be at least 1, got {num_workers}")
        self._renderer = renderer
        self._chunk_size = chunk_size
        self._num_workers = num_workers or os.cpu_count() or 4
        self._executor: ThreadPoolExecutor | None = None
        self._metrics = PreprocessMetrics()

    @property
    def chunk_size(self) -> int:
        """Frames per chunk."""
        return self._chunk_size

    def _process_one(self, frame: "RawFrame") -> TextFrame:
        """Render a single frame, keeping only its text."""
        return TextFrame.from_raw(frame, self._renderer)

    def process_chunk(self, chunk: list["RawFrame"]) -> list[TextFrame]:
        """Render one chunk in parallel, preserving order.

        :param chunk: Frames to render
        :returns: Text frames in the same order as the input
        :raises RenderError: If any frame of the chunk fails to render
        """
        if self._executor is None:
            raise RuntimeError("PreprocessExecutor must be used as a context manager")

        futures: list[Future] = []
        for frame in chunk:
            futures.append(self._executor.submit(self._process_one, frame))
            self._metrics.frames_submitted += 1

        try:
            results = [future.result() for future in futures]
        except BaseException:
            for future in futures:
                future.cancel()
            raise

        self._metrics.frames_completed += len(results)
        self._metrics.chunks_processed += 1
        return results

    def process_all(self, frames: Iterable["RawFrame"]) -> list[TextFrame]:
        """Render every frame of an iterable, chunk by chunk.

        The iterable is consumed lazily, one chunk at a time. A final partial
        chunk is rendered the same way as a full one.

        :param frames: Raw frames in source order
        :returns: Text frames in source order
        """
        self._metrics.start_time = time.perf_counter()
        rendered: list[TextFrame] = []
        chunk: list["RawFrame"] = []

        for frame in frames:
            chunk.append(frame)
            if len(chunk) == self._chunk_size:
                rendered.extend(self.process_chunk(chunk))
                chunk = []
                logger.debug(f"Preprocessed {len(rendered)} frames")

        # Process the chunk that was not complete
        if chunk:
            rendered.extend(self.process_chunk(chunk))

        self._metrics.end_time = time.perf_counter()
        return rendered

    def get_metrics(self) -> PreprocessMetrics:
        """Get execution metrics."""
        return self._metrics

    def __enter__(self) -> "PreprocessExecutor":
        self._executor = ThreadPoolExecutor(
            max_workers=self._num_workers,
            thread_name_prefix="termreel_preprocess",
        )
        return self

    def __exit__(self, *args) -> None:
        if self._executor:
            self._executor.shutdown(wait=True)
            self._executor = None


__all__ = ["PreprocessExecutor", "PreprocessMetrics", "DEFAULT_CHUNK_SIZE"]
