"""Audio support.

- extract_audio: Copy a video's audio track into a transient file (ffmpeg)
- AudioManager: Play, stop and set the volume of that file (pygame mixer)
"""

from .extract import extract_audio
from .manager import AudioManager

__all__ = ["extract_audio", "AudioManager"]
