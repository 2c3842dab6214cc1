"""Rendering pipeline - the boundary between the core and its callers.

A Pipeline ties together a frame source, the rate converter, the renderer and
the session's audio. Callers pull one text frame per tick and control audio:

Example:
    with Pipeline.build("movie.mp4", 100, 30, color_enabled=True, preprocess=True) as pipeline:
        pipeline.set_volume(0.8)
        pipeline.start_audio()
        while (text := pipeline.next_frame_text()) is not None:
            print(text)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .audio import AudioManager, extract_audio as extract_audio_track
from .config import settings
from .errors import AudioError
from .palette import load_palette
from .rendering.renderer import FrameRenderer
from .streams.source import FrameSource
from .streams.rate import RateConverter
from .streams.video import VideoFileDecoder

if TYPE_CHECKING:
    from .palette import Palette
    from .streams.decoder import FrameDecoder

logger = logging.getLogger(__name__)


class Pipeline:
    """Produces paced text frames and owns the session's audio.

    Create one with :meth:`build` (video file) or :meth:`from_decoder`.
    """

    def __init__(
        self,
        converter: RateConverter,
        renderer: FrameRenderer,
        audio_path: Path | None = None,
        *,
        owns_audio_file: bool = False,
    ):
        """
        :param converter: Rate converter wrapping the frame source
        :param renderer: Renderer used for lazily rendered frames
        :param audio_path: Playable audio file (None = silent)
        :param owns_audio_file: Delete ``audio_path`` on :meth:`close`
        """
        self._converter = converter
        self._renderer = renderer
        self._audio_path = audio_path
        self._owns_audio_file = owns_audio_file
        self._audio: AudioManager | None = None
        self._volume: float = 1.0

    @classmethod
    def from_decoder(
        cls,
        decoder: "FrameDecoder",
        target_width: int,
        target_fps: float,
        color_enabled: bool,
        preprocess: bool,
        palette: "Palette | None" = None,
        *,
        audio_path: Path | None = None,
        chunk_size: int | None = None,
        num_workers: int | None = None,
    ) -> "Pipeline":
        """Build a pipeline on top of any frame decoder.

        :param decoder: Raw frame decoder (owned by the pipeline afterwards)
        :param target_width: Characters per row
        :param target_fps: Frame rate limit (0 = source rate)
        :param color_enabled: Colorize glyphs
        :param preprocess: Render every frame before returning
        :param palette: Glyph palette (None = ``settings.DEFAULT_PALETTE``)
        :param audio_path: Playable audio file for this video
        :param chunk_size: Preprocessing chunk size (None = ``settings.CHUNK_SIZE``)
        :param num_workers: Preprocessing threads (None = ``settings.PREPROCESS_WORKERS``)
        :raises ConfigurationError: For invalid sizes, rates or palettes
        :raises PreprocessingError: If preprocessing fails
        """
        try:
            if palette is None:
                palette = load_palette(settings.DEFAULT_PALETTE, settings.PALETTE_FILE)
            renderer = FrameRenderer(
                palette,
                target_width,
                color_enabled,
                aspect_correction=settings.ASPECT_CORRECTION,
            )
            source_fps = decoder.fps

            if preprocess:
                source = FrameSource.preprocessed(
                    decoder,
                    renderer,
                    chunk_size=settings.CHUNK_SIZE if chunk_size is None else chunk_size,
                    num_workers=settings.PREPROCESS_WORKERS if num_workers is None else num_workers,
                )
            else:
                source = FrameSource.streamed(decoder)

            converter = RateConverter(source, source_fps, target_fps)
        except BaseException:
            decoder.release()
            raise

        logger.debug(
            f"Pipeline ready: {source.mode.value}, {source_fps:.2f} -> {converter.fps:.2f} fps, "
            f"width {target_width}, color {'on' if color_enabled else 'off'}"
        )
        return cls(converter, renderer, audio_path)

    @classmethod
    def build(
        cls,
        source_path: str | Path,
        target_width: int,
        target_fps: float,
        color_enabled: bool,
        preprocess: bool,
        palette: "Palette | None" = None,
        extract_audio: bool = True,
    ) -> "Pipeline":
        """Build a pipeline for a video file.

        The audio track is extracted to ``settings.TEMP_AUDIO_PATH``; if that
        fails the pipeline plays without sound.

        :param source_path: Local video file
        :param target_width: Characters per row
        :param target_fps: Frame rate limit (0 = source rate)
        :param color_enabled: Colorize glyphs
        :param preprocess: Render every frame before returning
        :param palette: Glyph palette (None = ``settings.DEFAULT_PALETTE``)
        :param extract_audio: Extract the audio track for playback
        :raises DecodeError: If the video cannot be opened
        """
        decoder = VideoFileDecoder(source_path)
        pipeline = cls.from_decoder(
            decoder,
            target_width,
            target_fps,
            color_enabled,
            preprocess,
            palette,
        )

        if extract_audio:
            try:
                pipeline._audio_path = extract_audio_track(
                    source_path,
                    settings.TEMP_AUDIO_PATH,
                    settings.FFMPEG_BINARY,
                )
                pipeline._owns_audio_file = True
            except AudioError as exc:
                logger.warning(f"Playing without sound: {exc}")

        return pipeline

    # -------------------------------------------------------------------------
    # Frames
    # -------------------------------------------------------------------------

    def fps(self) -> int:
        """Effective playback frame rate, rounded to whole frames."""
        return round(self._converter.fps)

    @property
    def frame_rate(self) -> float:
        """Effective playback frame rate."""
        return self._converter.fps

    def next_frame_text(self) -> str | None:
        """Text of the next frame to show.

        :return: Text block, or None once the video is exhausted
        :raises RenderError: If a streamed frame cannot be rendered
        """
        frame = self._converter.next_frame()
        if frame is None:
            return None
        return frame.as_text(self._renderer)

    # -------------------------------------------------------------------------
    # Audio
    # -------------------------------------------------------------------------

    @property
    def has_audio(self) -> bool:
        """Whether an audio file is available for this video."""
        return self._audio_path is not None

    @property
    def audio_path(self) -> Path | None:
        """The playable audio file, if any."""
        return self._audio_path

    def start_audio(self) -> None:
        """Start audio playback on a fresh mixer channel.

        :raises AudioError: If there is no audio or the device fails
        """
        if self._audio_path is None:
            raise AudioError("No audio track available")
        if self._audio is None:
            self._audio = AudioManager()
        self._audio.set_volume(self._volume)
        self._audio.play(self._audio_path)

    def set_volume(self, volume: float) -> None:
        """Set the audio gain (values above 1.0 amplify).

        Set the gain before :meth:`start_audio`. While audio is playing, gains
        above 1.0 are capped at 1.0 until audio is started again.

        :raises ValueError: For a negative volume
        """
        if volume < 0:
            raise ValueError(f"Volume must not be negative, got {volume}")
        self._volume = float(volume)
        if self._audio is not None:
            self._audio.set_volume(self._volume)

    def stop_audio(self) -> None:
        """Stop audio and release the output device."""
        if self._audio is not None:
            self._audio.close()
            self._audio = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def renderer(self) -> FrameRenderer:
        """The frame renderer."""
        return self._renderer

    @property
    def converter(self) -> RateConverter:
        """The rate converter."""
        return self._converter

    def close(self) -> None:
        """Stop audio, release the decoder and remove the transient audio file."""
        self.stop_audio()
        self._converter.source.close()
        if self._owns_audio_file and self._audio_path is not None:
            try:
                self._audio_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning(f"Could not remove {self._audio_path}: {exc}")
            self._owns_audio_file = False

    def __enter__(self) -> "Pipeline":
        return self

    def __exit__(self, *args) -> None:
        self.close()


__all__ = ["Pipeline"]
