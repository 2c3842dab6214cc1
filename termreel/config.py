"""Application configuration.

Two layers:

- :class:`Settings` holds process-wide defaults, overridable through
  ``TERMREEL_*`` environment variables (e.g. ``TERMREEL_DOWNLOAD_DIR``).
- :class:`PlayerConfig` is the validated configuration of one playback
  session, usually built from command-line arguments.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings

from .errors import ConfigurationError
from .palette import DEFAULT_PALETTE_FILE, Palette, load_palette


class Settings(BaseSettings):
    """Process-wide defaults."""

    # Palettes
    PALETTE_FILE: Path = DEFAULT_PALETTE_FILE
    DEFAULT_PALETTE: str = "ascii"

    # Transient files
    DOWNLOAD_DIR: Path = Path("downloaded-videos")
    TEMP_AUDIO_PATH: Path = Path("temp_audio.wav")
    FFMPEG_BINARY: str = "ffmpeg"

    # Rendering
    ASPECT_CORRECTION: float = 2.0  # Terminal cells are about twice as tall as wide

    # Preprocessing
    CHUNK_SIZE: int = 10
    PREPROCESS_WORKERS: int | None = None  # None = os.cpu_count()

    model_config = {"env_prefix": "TERMREEL_"}


settings = Settings()


class PlayerConfig(BaseModel):
    """Configuration of a single playback session.

    :param query: Path or URL of the video
    :param palette: Glyph palette used for rendering
    :param width: Number of characters per row
    :param frame_limit: Maximum frame rate (0 = source frame rate)
    :param volume: Audio gain (values above 1.0 amplify)
    :param color: Colorize glyphs with 24-bit ANSI escapes
    :param preprocessing: Render every frame before playback starts
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    query: str = Field(min_length=1)
    palette: Palette
    width: int = Field(default=100, gt=0)
    frame_limit: int = Field(default=30, ge=0)
    volume: float = Field(default=1.0, ge=0.0)
    color: bool = True
    preprocessing: bool = True

    @model_validator(mode="after")
    def _check_palette(self) -> "PlayerConfig":
        if len(self.palette) == 0:
            raise ValueError(f"palette '{self.palette.name}' has no glyphs")
        return self

    @classmethod
    def build(
        cls,
        query: str,
        palette: str | None = None,
        width: int = 100,
        frame_limit: int = 30,
        volume: float = 1.0,
        color: bool = True,
        preprocessing: bool = True,
        palette_file: str | Path | None = None,
    ) -> "PlayerConfig":
        """Build a configuration, resolving the palette by name.

        :param palette: Palette name (None = ``settings.DEFAULT_PALETTE``)
        :param palette_file: Palette file (None = ``settings.PALETTE_FILE``)
        :raises ConfigurationError: If the palette is unknown or a value is invalid
        """
        resolved = load_palette(
            palette or settings.DEFAULT_PALETTE,
            palette_file or settings.PALETTE_FILE,
        )
        try:
            return cls(
                query=query,
                palette=resolved,
                width=width,
                frame_limit=frame_limit,
                volume=volume,
                color=color,
                preprocessing=preprocessing,
            )
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc


__all__ = ["Settings", "settings", "PlayerConfig"]
