"""Audio track extraction.

The audio track of a video is copied into a transient WAV file with the
``ffmpeg`` executable so the mixer can play it next to the text frames.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..errors import AudioError

logger = logging.getLogger(__name__)


def extract_audio(
    video_path: str | Path,
    output_path: str | Path,
    ffmpeg: str = "ffmpeg",
) -> Path:
    """Extract the audio track of a video into a file.

    A stale file at ``output_path`` is removed first.

    :param video_path: Source video
    :param output_path: Destination, the extension selects the format (e.g. ``.wav``)
    :param ffmpeg: ffmpeg executable name or path
    :return: The output path
    :raises AudioError: If ffmpeg is missing, fails or produces no file
    """
    output = Path(output_path)
    try:
        output.unlink(missing_ok=True)
    except OSError as exc:
        raise AudioError(f"Could not remove stale audio file {output}: {exc}") from exc

    command = [
        ffmpeg,
        "-nostdin",
        "-loglevel", "error",
        "-y",
        "-i", str(video_path),
        "-vn",
        str(output),
    ]
    logger.debug(f"Extracting audio: {' '.join(command)}")

    try:
        subprocess.run(command, capture_output=True, check=True)
    except FileNotFoundError as exc:
        raise AudioError(f"ffmpeg executable not found: {ffmpeg}") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode(errors="replace").strip()
        raise AudioError(f"ffmpeg failed to extract audio from {video_path}: {stderr}") from exc

    if not output.exists():
        raise AudioError(f"No audio track extracted from {video_path}")

    return output


__all__ = ["extract_audio"]
