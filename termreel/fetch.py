"""Media retrieval.

Resolves the user's locator to a local video file, downloading it with
yt-dlp when it is a URL.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import yt_dlp

from .errors import FetchError

logger = logging.getLogger(__name__)

# A single file holding both tracks, so the audio can be extracted from it
YDL_FORMAT = "best[ext=mp4]/best"


def is_url(locator: str) -> bool:
    """Whether a locator looks like an http(s) URL."""
    parsed = urlparse(locator)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def download_media(url: str, download_dir: str | Path) -> Path:
    """Download a video into a directory.

    :param url: Page or media URL understood by yt-dlp
    :param download_dir: Target directory, created if missing
    :return: Path of the downloaded file
    :raises FetchError: If the download fails
    """
    download_dir = Path(download_dir)
    download_dir.mkdir(parents=True, exist_ok=True)

    ydl_opts = {
        "format": YDL_FORMAT,
        "outtmpl": str(download_dir / "%(id)s.%(ext)s"),
        "quiet": True,
        "noprogress": True,
        "noplaylist": True,
    }

    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(url, download=True)
            path = Path(ydl.prepare_filename(info))
    except yt_dlp.utils.DownloadError as exc:
        raise FetchError(f"Could not download {url}: {exc}") from exc

    if not path.is_file():
        raise FetchError(f"Download of {url} produced no file at {path}")

    logger.info(f"Downloaded {url} to {path}")
    return path


def resolve_media(url_or_path: str, download_dir: str | Path) -> Path:
    """Resolve a path or URL to a local video file.

    :param url_or_path: Existing file path or http(s) URL
    :param download_dir: Where downloads are stored
    :return: Local file path
    :raises FetchError: If the locator is neither an existing file nor a URL
    """
    path = Path(url_or_path).expanduser()
    if path.is_file():
        return path
    if is_url(url_or_path):
        return download_media(url_or_path, download_dir)
    raise FetchError(f"No such file or URL: {url_or_path}")


__all__ = ["is_url", "download_media", "resolve_media"]
