"""
Tests for the Pipeline boundary.
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from termreel.errors import AudioError, ConfigurationError, PreprocessingError
from termreel.pipeline import Pipeline
from termreel.rendering import LazyFrame, RawFrame
from termreel.streams import SequenceDecoder, SourceMode


def drain(pipeline: Pipeline) -> list[str]:
    texts = []
    while (text := pipeline.next_frame_text()) is not None:
        texts.append(text)
    return texts


class TestFromDecoder:
    """Tests for pipelines built on a decoder."""

    @pytest.mark.parametrize("preprocess", [True, False])
    def test_frames(self, preprocess, dots_palette, gradient_frames):
        """Both strategies produce the same text."""
        pipeline = Pipeline.from_decoder(
            SequenceDecoder(gradient_frames, fps=30),
            16,
            30,
            False,
            preprocess,
            dots_palette,
        )
        expected_mode = SourceMode.PREPROCESSED if preprocess else SourceMode.STREAMED
        assert pipeline.converter.source.mode is expected_mode

        texts = drain(pipeline)
        expected = [
            LazyFrame(RawFrame(p, i)).as_text(pipeline.renderer)
            for i, p in enumerate(gradient_frames)
        ]
        assert texts == expected
        assert pipeline.next_frame_text() is None

    def test_rate_limit(self, dots_palette, gradient_frames):
        pipeline = Pipeline.from_decoder(
            SequenceDecoder(gradient_frames[:20], fps=30), 16, 15, False, False, dots_palette
        )
        assert pipeline.fps() == 15
        assert len(drain(pipeline)) == 10

    def test_fps_rounding(self, dots_palette):
        pipeline = Pipeline.from_decoder(SequenceDecoder([], fps=29.97), 16, 0, True, False, dots_palette)
        assert pipeline.fps() == 30
        assert pipeline.frame_rate == pytest.approx(29.97)

    def test_default_palette(self, gradient_frames):
        pipeline = Pipeline.from_decoder(SequenceDecoder(gradient_frames[:1]), 16, 0, False, False)
        assert pipeline.renderer.palette.name == "ascii"

    def test_decoder_released_on_invalid_width(self, dots_palette):
        decoder = SequenceDecoder([])
        with patch.object(decoder, "release") as release:
            with pytest.raises(ConfigurationError):
                Pipeline.from_decoder(decoder, 0, 30, True, True, dots_palette)
        release.assert_called_once()

    def test_explicit_zero_chunk_size(self, dots_palette, gradient_frames):
        """An explicit chunk size of 0 is rejected, not replaced by the default."""
        decoder = SequenceDecoder(gradient_frames[:3])
        with patch.object(decoder, "release") as release:
            with pytest.raises(ConfigurationError):
                Pipeline.from_decoder(decoder, 16, 30, True, True, dots_palette, chunk_size=0)
        release.assert_called()

    def test_preprocessing_failure(self, dots_palette, gradient_frames):
        frames = gradient_frames[:3] + [np.zeros((2, 2, 2), dtype=np.uint8)]
        with pytest.raises(PreprocessingError):
            Pipeline.from_decoder(SequenceDecoder(frames), 16, 30, True, True, dots_palette)


class TestBuild:
    """Tests for pipelines built from a video file."""

    def test_extracts_audio(self, tmp_path, dots_palette, gradient_frames):
        audio = tmp_path / "temp_audio.wav"
        audio.write_bytes(b"RIFF")
        with patch("termreel.pipeline.VideoFileDecoder", return_value=SequenceDecoder(gradient_frames[:2])), \
                patch("termreel.pipeline.extract_audio_track", return_value=audio) as extract:
            pipeline = Pipeline.build("movie.mp4", 16, 30, True, True, dots_palette)

        extract.assert_called_once()
        assert extract.call_args.args[0] == "movie.mp4"
        assert pipeline.has_audio
        assert pipeline.audio_path == audio

        pipeline.close()
        assert not audio.exists()

    def test_audio_failure_plays_silently(self, dots_palette, gradient_frames):
        with patch("termreel.pipeline.VideoFileDecoder", return_value=SequenceDecoder(gradient_frames[:2])), \
                patch("termreel.pipeline.extract_audio_track", side_effect=AudioError("no audio stream")):
            pipeline = Pipeline.build("movie.mp4", 16, 30, True, False, dots_palette)

        assert not pipeline.has_audio
        assert len(drain(pipeline)) == 2

    def test_skip_audio(self, dots_palette, gradient_frames):
        with patch("termreel.pipeline.VideoFileDecoder", return_value=SequenceDecoder(gradient_frames[:1])), \
                patch("termreel.pipeline.extract_audio_track") as extract:
            pipeline = Pipeline.build("movie.mp4", 16, 30, True, False, dots_palette, extract_audio=False)
        extract.assert_not_called()
        assert not pipeline.has_audio


class TestAudioControl:
    """Tests for audio start, volume and stop."""

    @pytest.fixture
    def pipeline(self, tmp_path, dots_palette):
        audio = tmp_path / "track.wav"
        audio.write_bytes(b"RIFF")
        return Pipeline.from_decoder(
            SequenceDecoder([]), 16, 30, True, False, dots_palette, audio_path=audio
        )

    def test_start_audio(self, pipeline):
        with patch("termreel.pipeline.AudioManager") as manager_cls:
            pipeline.set_volume(1.5)
            pipeline.start_audio()
            manager = manager_cls.return_value
            manager.set_volume.assert_called_with(1.5)
            manager.play.assert_called_once_with(pipeline.audio_path)

            pipeline.set_volume(0.5)
            manager.set_volume.assert_called_with(0.5)

            pipeline.stop_audio()
            manager.close.assert_called_once()

    def test_start_without_audio(self, dots_palette):
        pipeline = Pipeline.from_decoder(SequenceDecoder([]), 16, 30, True, False, dots_palette)
        with pytest.raises(AudioError):
            pipeline.start_audio()

    def test_negative_volume(self, pipeline):
        with pytest.raises(ValueError):
            pipeline.set_volume(-0.1)

    def test_close_keeps_foreign_audio_file(self, pipeline):
        """Audio files the pipeline did not extract are left alone."""
        with patch("termreel.pipeline.AudioManager", MagicMock()):
            pipeline.start_audio()
            pipeline.close()
        assert pipeline.audio_path.exists()
