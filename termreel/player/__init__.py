"""Terminal playback.

- PlaybackLoop: Paced frame output with lag detection
- PlaybackSession: Playback loop plus the pipeline's audio
- PlaybackClock: Frame budget and lag credit accounting
- WaitingAnimation: Dots shown during blocking steps
"""

from .clock import LAG_CEILING, LAG_PENALTY, LAG_RECOVERY, PlaybackClock
from .loop import PlaybackLoop, PlaybackSession, PlaybackState, PlaybackStats, write_stdout
from .waiting import WaitingAnimation

__all__ = [
    "PlaybackClock",
    "LAG_PENALTY",
    "LAG_RECOVERY",
    "LAG_CEILING",
    "PlaybackLoop",
    "PlaybackSession",
    "PlaybackState",
    "PlaybackStats",
    "write_stdout",
    "WaitingAnimation",
]
