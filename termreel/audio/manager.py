"""Audio playback through the pygame mixer.

AudioManager owns the mixer device for one playback session: it is opened on
the first :meth:`AudioManager.play` and must stay open for the whole session,
then released with :meth:`AudioManager.close`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from ..errors import AudioError

logger = logging.getLogger(__name__)


def _amplify(sound: "pygame.mixer.Sound", gain: float) -> "pygame.mixer.Sound":
    """Return a copy of a sound with its samples multiplied by gain (clipped)."""
    samples = pygame.sndarray.array(sound)
    if np.issubdtype(samples.dtype, np.integer):
        info = np.iinfo(samples.dtype)
        low, high = info.min, info.max
    else:
        low, high = -1.0, 1.0
    amplified = np.clip(samples.astype(np.float64) * gain, low, high).astype(samples.dtype)
    return pygame.sndarray.make_sound(amplified)


class AudioManager:
    """Plays an audio file on the default output device.

    Volume is a linear gain. Values up to 1.0 use the channel volume; values
    above 1.0 amplify the decoded samples when playback starts.

    Example:
        with AudioManager() as audio:
            audio.set_volume(0.8)
            audio.play("temp_audio.wav")
            ...
            audio.stop()
    """

    def __init__(self) -> None:
        self._opened = False
        self._sound: "pygame.mixer.Sound | None" = None
        self._channel: "pygame.mixer.Channel | None" = None
        self._volume: float = 1.0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def open(self) -> None:
        """Open the output device.

        :raises AudioError: If no output device is available
        """
        if self._opened:
            return
        try:
            pygame.mixer.init()
        except pygame.error as exc:
            raise AudioError(f"Could not open audio output: {exc}") from exc
        self._opened = True

    def close(self) -> None:
        """Stop playback and release the output device."""
        self.stop()
        if self._opened:
            pygame.mixer.quit()
            self._opened = False

    def __enter__(self) -> "AudioManager":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Playback
    # -------------------------------------------------------------------------

    def play(self, path: str | Path) -> None:
        """Start playing an audio file, replacing any current playback.

        :param path: Decodable audio file (WAV, OGG, MP3)
        :raises AudioError: If the file is missing or cannot be decoded
        """
        path = Path(path)
        if not path.is_file():
            raise AudioError(f"Audio file not found: {path}")

        self.open()
        self.stop()

        try:
            sound = pygame.mixer.Sound(str(path))
            if self._volume > 1.0:
                sound = _amplify(sound, self._volume)
            channel = sound.play()
        except pygame.error as exc:
            raise AudioError(f"Could not play {path}: {exc}") from exc

        if channel is None:
            raise AudioError("No free mixer channel")

        channel.set_volume(min(self._volume, 1.0))
        self._sound = sound
        self._channel = channel
        logger.debug(f"Playing audio {path} at volume {self._volume}")

    def stop(self) -> None:
        """Stop playback (no-op if nothing is playing)."""
        if self._channel is not None:
            self._channel.stop()
        self._channel = None
        self._sound = None

    def set_volume(self, volume: float) -> None:
        """Set the linear gain.

        Gains up to 1.0 apply immediately through the channel volume. The
        samples are amplified when playback starts, so during playback a gain
        above 1.0 is capped at 1.0 until the next :meth:`play`.

        :param volume: Gain, 0.0 = silent, 1.0 = unchanged, above 1.0 amplifies
        :raises ValueError: For a negative volume
        """
        if volume < 0:
            raise ValueError(f"Volume must not be negative, got {volume}")
        self._volume = float(volume)
        if self._channel is not None:
            self._channel.set_volume(min(self._volume, 1.0))
            if self._volume > 1.0:
                logger.debug("Amplification above 1.0 takes effect on the next play()")

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def volume(self) -> float:
        """Current linear gain."""
        return self._volume

    @property
    def is_open(self) -> bool:
        """Whether the output device is open."""
        return self._opened

    @property
    def is_playing(self) -> bool:
        """Whether audio is currently playing."""
        return self._channel is not None and bool(self._channel.get_busy())


__all__ = ["AudioManager"]
