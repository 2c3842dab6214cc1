"""Frame pacing and lag tracking.

Every tick has a budget of one frame interval. A tick that finishes early
sleeps off the rest and pays back one lag credit; a tick that overruns adds
LAG_PENALTY credits. Reaching LAG_CEILING means playback cannot keep up.

Single slow frames (e.g. the first render of a cold cache) are tolerated,
a sustained overrun aborts after ``ceil(LAG_CEILING / LAG_PENALTY)`` ticks.
"""

from __future__ import annotations

from ..errors import ConfigurationError

LAG_PENALTY = 4
LAG_RECOVERY = 1
LAG_CEILING = 25


class PlaybackClock:
    """Tracks the per-tick budget and the accumulated lag credit.

    :param fps: Target frame rate
    """

    def __init__(self, fps: float):
        if fps <= 0:
            raise ConfigurationError(f"Frame rate must be positive, got {fps}")
        self._interval = 1.0 / fps
        self._credit = 0
        self._overruns = 0
        self._max_credit = 0

    @property
    def interval(self) -> float:
        """Target frame interval in seconds."""
        return self._interval

    @property
    def credit(self) -> int:
        """Current lag credit (never negative)."""
        return self._credit

    @property
    def max_credit(self) -> int:
        """Highest lag credit reached so far."""
        return self._max_credit

    @property
    def overruns(self) -> int:
        """Number of ticks that exceeded the frame interval."""
        return self._overruns

    @property
    def exhausted(self) -> bool:
        """Whether the lag credit reached the ceiling."""
        return self._credit >= LAG_CEILING

    def record(self, elapsed: float) -> float | None:
        """Account for one tick.

        :param elapsed: Seconds spent producing and writing the frame
        :return: Seconds left to sleep, or None if the tick overran its budget
        """
        remaining = self._interval - elapsed
        if remaining >= 0:
            self._credit = max(0, self._credit - LAG_RECOVERY)
            return remaining

        self._credit += LAG_PENALTY
        self._overruns += 1
        self._max_credit = max(self._max_credit, self._credit)
        return None


__all__ = ["PlaybackClock", "LAG_PENALTY", "LAG_RECOVERY", "LAG_CEILING"]
