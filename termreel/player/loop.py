"""
Playback Loop - Write text frames to the terminal at a fixed rate.

The loop pulls one frame per tick, writes it, and sleeps off whatever is left
of the frame interval. Overrunning ticks accumulate lag credit; too much lag
aborts playback with :class:`~termreel.errors.TooMuchLagError`.

States::

    IDLE -> PLAYING -> DRAINING  (frames exhausted)
                    -> ABORTED   (sustained lag)

Example:
    from termreel.player import PlaybackSession

    with Pipeline.build("movie.mp4", 100, 30, True, True) as pipeline:
        stats = PlaybackSession(pipeline, volume=0.8).run()
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..errors import AudioError, TooMuchLagError
from .clock import PlaybackClock

if TYPE_CHECKING:
    from ..pipeline import Pipeline

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    """Playback state machine."""

    IDLE = "idle"
    PLAYING = "playing"
    DRAINING = "draining"
    ABORTED = "aborted"


@dataclass
class PlaybackStats:
    """Summary of a finished playback.

    :param ticks: Frames written
    :param overruns: Ticks that exceeded the frame interval
    :param max_credit: Highest lag credit reached
    :param state: Terminal state
    """

    ticks: int = 0
    overruns: int = 0
    max_credit: int = 0
    state: PlaybackState = PlaybackState.IDLE


def write_stdout(text: str) -> None:
    """Write a frame to standard output."""
    sys.stdout.write(text)
    sys.stdout.flush()


class PlaybackLoop:
    """Single-threaded, tick-by-tick frame pacing.

    :param next_frame_text: Returns the next frame's text, None at the end
    :param fps: Target frame rate
    :param write: Output function for frame text
    :param clock: Monotonic time source in seconds
    :param sleep: Sleep function
    """

    def __init__(
        self,
        next_frame_text: Callable[[], str | None],
        fps: float,
        write: Callable[[str], None] = write_stdout,
        *,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._next_frame_text = next_frame_text
        self._pacing = PlaybackClock(fps)
        self._write = write
        self._clock = clock
        self._sleep = sleep
        self._state = PlaybackState.IDLE
        self._ticks = 0

    @property
    def state(self) -> PlaybackState:
        """Current playback state."""
        return self._state

    @property
    def pacing(self) -> PlaybackClock:
        """Frame budget and lag credit."""
        return self._pacing

    @property
    def stats(self) -> PlaybackStats:
        """Statistics so far."""
        return PlaybackStats(
            ticks=self._ticks,
            overruns=self._pacing.overruns,
            max_credit=self._pacing.max_credit,
            state=self._state,
        )

    def run(self) -> PlaybackStats:
        """Play until the frames are exhausted.

        :return: Playback statistics
        :raises TooMuchLagError: If frames cannot be produced fast enough
        """
        if self._state is not PlaybackState.IDLE:
            raise RuntimeError(f"Playback already ran (state: {self._state.value})")

        self._state = PlaybackState.PLAYING
        while self._state is PlaybackState.PLAYING:
            self.tick()

        if self._state is PlaybackState.ABORTED:
            raise TooMuchLagError(self._ticks, self._pacing.credit)
        return self.stats

    def tick(self) -> PlaybackState:
        """Produce, write and pace a single frame.

        :return: State after the tick
        """
        start = self._clock()

        text = self._next_frame_text()
        if text is None:
            self._state = PlaybackState.DRAINING
            logger.debug(f"Playback finished after {self._ticks} frames")
            return self._state

        self._write(text)
        self._ticks += 1

        remaining = self._pacing.record(self._clock() - start)
        if remaining is not None:
            self._sleep(remaining)
        elif self._pacing.exhausted:
            self._state = PlaybackState.ABORTED
            logger.debug(f"Aborting at frame {self._ticks}, lag credit {self._pacing.credit}")

        return self._state


class PlaybackSession:
    """Plays a pipeline's frames and owns its audio for the session.

    Audio is started when playback begins (a failure only silences playback)
    and released when playback ends, whichever way it ends.

    :param pipeline: Frame and audio provider
    :param volume: Audio gain (values above 1.0 amplify)
    :param write: Output function for frame text
    :param clock: Monotonic time source in seconds
    :param sleep: Sleep function
    """

    def __init__(
        self,
        pipeline: "Pipeline",
        volume: float = 1.0,
        write: Callable[[str], None] = write_stdout,
        *,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._pipeline = pipeline
        self._volume = volume
        self._loop = PlaybackLoop(
            pipeline.next_frame_text,
            pipeline.frame_rate,
            write,
            clock=clock,
            sleep=sleep,
        )

    @property
    def state(self) -> PlaybackState:
        """Current playback state."""
        return self._loop.state

    @property
    def loop(self) -> PlaybackLoop:
        """The underlying playback loop."""
        return self._loop

    def run(self) -> PlaybackStats:
        """Play the whole video.

        :return: Playback statistics
        :raises TooMuchLagError: If frames cannot be produced fast enough
        """
        self._start_audio()
        try:
            return self._loop.run()
        finally:
            self._pipeline.stop_audio()

    def _start_audio(self) -> None:
        if not self._pipeline.has_audio:
            logger.info("No audio track, playing silently")
            return
        try:
            self._pipeline.set_volume(self._volume)
            self._pipeline.start_audio()
        except AudioError as exc:
            logger.warning(f"Playing without sound: {exc}")


__all__ = [
    "PlaybackLoop",
    "PlaybackSession",
    "PlaybackState",
    "PlaybackStats",
    "write_stdout",
]
