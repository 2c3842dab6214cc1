"""Unit tests for decoders, frame sources and preprocessing.

- SequenceDecoder: In-memory frame replay
- FrameSource: Streamed and preprocessed strategies
- PreprocessExecutor: Chunked parallel rendering
"""

from unittest.mock import patch

import numpy as np
import pytest

from termreel.errors import ConfigurationError, DecodeError, PreprocessingError
from termreel.rendering import LazyFrame, RawFrame, TextFrame
from termreel.streams import (
    FrameDecoder,
    FrameSource,
    PreprocessExecutor,
    SequenceDecoder,
    SourceMode,
)


class FailingDecoder(FrameDecoder):
    """Produces a few frames, then fails to decode."""

    def __init__(self, frames, fail_at: int):
        super().__init__()
        self._frames = list(frames)
        self._fail_at = fail_at
        self.released = 0

    @property
    def fps(self) -> float:
        return 30.0

    def read(self):
        with self._lock:
            if self._next_index == self._fail_at:
                raise DecodeError(f"corrupt packet at frame {self._fail_at}")
            if self._next_index >= len(self._frames):
                return None
            return RawFrame(self._frames[self._next_index], self._take_index())

    def release(self) -> None:
        self.released += 1


# =============================================================================
# Decoder Tests
# =============================================================================


class TestSequenceDecoder:
    """Test the in-memory decoder."""

    def test_reads_in_order(self, gradient_frames):
        decoder = SequenceDecoder(gradient_frames[:3], fps=25)
        frames = list(decoder)
        assert [f.index for f in frames] == [0, 1, 2]
        assert frames[1].pixels is gradient_frames[1]
        assert decoder.read() is None
        assert decoder.frames_read == 3
        assert decoder.fps == 25.0

    def test_invalid_fps(self):
        with pytest.raises(ConfigurationError):
            SequenceDecoder([], fps=0)


# =============================================================================
# Streamed Source Tests
# =============================================================================


class TestStreamedSource:
    """Test decoding one frame per call."""

    def test_yields_lazy_frames(self, gradient_frames):
        source = FrameSource.streamed(SequenceDecoder(gradient_frames[:3]))
        assert source.mode is SourceMode.STREAMED
        frames = [source.next() for _ in range(3)]
        assert all(isinstance(f, LazyFrame) for f in frames)
        assert [f.index for f in frames] == [0, 1, 2]

    def test_none_is_terminal(self, gradient_frames):
        """After the first None every call returns None."""
        decoder = SequenceDecoder(gradient_frames[:2])
        source = FrameSource.streamed(decoder)
        with patch.object(decoder, "release", wraps=decoder.release) as release:
            assert source.next() is not None
            assert source.next() is not None
            assert source.next() is None
            assert source.next() is None
            assert source.is_exhausted
            release.assert_called()

    def test_decode_error_ends_stream(self, gradient_frames):
        """A failing read is treated as the end of the stream."""
        decoder = FailingDecoder(gradient_frames[:5], fail_at=2)
        source = FrameSource.streamed(decoder)
        assert len(list(source)) == 2
        assert source.next() is None
        assert decoder.released >= 1

    def test_empty_input(self):
        source = FrameSource.streamed(SequenceDecoder([]))
        assert source.next() is None


# =============================================================================
# Preprocessed Source Tests
# =============================================================================


class TestPreprocessedSource:
    """Test rendering every frame ahead of playback."""

    def test_matches_lazy_rendering(self, renderer, gradient_frames):
        """23 frames in chunks of 10 equal their lazily rendered text, in order."""
        source = FrameSource.preprocessed(
            SequenceDecoder(gradient_frames), renderer, chunk_size=10, num_workers=4
        )
        assert source.mode is SourceMode.PREPROCESSED
        assert source.remaining == 23

        expected = [LazyFrame(RawFrame(p, i)).as_text(renderer) for i, p in enumerate(gradient_frames)]
        frames = list(source)
        assert all(isinstance(f, TextFrame) for f in frames)
        assert [f.index for f in frames] == list(range(23))
        assert [f.as_text(renderer) for f in frames] == expected
        assert source.next() is None

    def test_decoder_released(self, renderer, gradient_frames):
        decoder = FailingDecoder(gradient_frames[:4], fail_at=-1)
        FrameSource.preprocessed(decoder, renderer)
        assert decoder.released == 1

    def test_decode_error_aborts(self, renderer, gradient_frames):
        decoder = FailingDecoder(gradient_frames, fail_at=12)
        with pytest.raises(PreprocessingError):
            FrameSource.preprocessed(decoder, renderer, chunk_size=10)
        assert decoder.released == 1

    def test_render_error_aborts(self, renderer, gradient_frames):
        frames = gradient_frames[:5] + [np.zeros((4, 4, 2), dtype=np.uint8)]
        with pytest.raises(PreprocessingError):
            FrameSource.preprocessed(SequenceDecoder(frames), renderer, chunk_size=4)

    def test_close_drops_frames(self, renderer, gradient_frames):
        source = FrameSource.preprocessed(SequenceDecoder(gradient_frames[:3]), renderer)
        source.close()
        assert source.remaining == 0
        assert source.next() is None


class TestPreprocessExecutor:
    """Test chunked parallel rendering."""

    def test_chunk_counts(self, renderer, gradient_frames):
        raws = [RawFrame(p, i) for i, p in enumerate(gradient_frames)]
        with PreprocessExecutor(renderer, chunk_size=10, num_workers=3) as executor:
            frames = executor.process_all(raws)
        metrics = executor.get_metrics()
        assert len(frames) == 23
        assert metrics.chunks_processed == 3
        assert metrics.frames_submitted == metrics.frames_completed == 23
        assert "23 frames in 3 chunks" in metrics.summary()

    def test_chunk_order(self, renderer, gradient_frames):
        raws = [RawFrame(p, i) for i, p in enumerate(gradient_frames[:6])]
        with PreprocessExecutor(renderer, chunk_size=6, num_workers=6) as executor:
            frames = executor.process_chunk(raws)
        assert [f.index for f in frames] == list(range(6))

    def test_requires_context(self, renderer, gradient):
        executor = PreprocessExecutor(renderer)
        with pytest.raises(RuntimeError):
            executor.process_chunk([RawFrame(gradient)])

    def test_invalid_chunk_size(self, renderer):
        with pytest.raises(ConfigurationError):
            PreprocessExecutor(renderer, chunk_size=0)

    def test_invalid_worker_count(self, renderer):
        with pytest.raises(ConfigurationError):
            PreprocessExecutor(renderer, num_workers=0)
