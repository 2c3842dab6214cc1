"""
Tests for media resolution and downloads (yt-dlp is mocked).
"""

from unittest.mock import patch

import pytest
import yt_dlp

from termreel.errors import FetchError
from termreel.fetch import download_media, is_url, resolve_media


class TestIsUrl:
    @pytest.mark.parametrize(
        "locator, expected",
        [
            ("https://www.youtube.com/watch?v=FtutLA63Cp8", True),
            ("http://example.com/clip.mp4", True),
            ("clip.mp4", False),
            ("/videos/clip.mp4", False),
            ("ftp://example.com/clip.mp4", False),
            ("https://", False),
        ],
    )
    def test_is_url(self, locator, expected):
        assert is_url(locator) is expected


class TestDownloadMedia:
    """Tests for download_media."""

    def test_download(self, tmp_path):
        target = tmp_path / "abc123.mp4"

        def fake_extract(url, download):
            target.write_bytes(b"video")
            return {"id": "abc123"}

        with patch("termreel.fetch.yt_dlp.YoutubeDL") as ydl_cls:
            ydl = ydl_cls.return_value.__enter__.return_value
            ydl.extract_info.side_effect = fake_extract
            ydl.prepare_filename.return_value = str(target)

            path = download_media("https://example.com/v", tmp_path / "downloads")

        assert path == target
        opts = ydl_cls.call_args.args[0]
        assert opts["outtmpl"].startswith(str(tmp_path / "downloads"))
        assert opts["noplaylist"]
        ydl.extract_info.assert_called_once_with("https://example.com/v", download=True)
        assert (tmp_path / "downloads").is_dir()

    def test_download_error(self, tmp_path):
        with patch("termreel.fetch.yt_dlp.YoutubeDL") as ydl_cls:
            ydl = ydl_cls.return_value.__enter__.return_value
            ydl.extract_info.side_effect = yt_dlp.utils.DownloadError("HTTP Error 404")
            with pytest.raises(FetchError, match="404"):
                download_media("https://example.com/v", tmp_path)

    def test_no_file(self, tmp_path):
        with patch("termreel.fetch.yt_dlp.YoutubeDL") as ydl_cls:
            ydl = ydl_cls.return_value.__enter__.return_value
            ydl.extract_info.return_value = {"id": "x"}
            ydl.prepare_filename.return_value = str(tmp_path / "x.mp4")
            with pytest.raises(FetchError):
                download_media("https://example.com/v", tmp_path)


class TestResolveMedia:
    """Tests for resolve_media."""

    def test_local_file(self, tmp_path):
        video = tmp_path / "clip.mp4"
        video.write_bytes(b"video")
        with patch("termreel.fetch.download_media") as download:
            assert resolve_media(str(video), tmp_path) == video
        download.assert_not_called()

    def test_url(self, tmp_path):
        with patch("termreel.fetch.download_media", return_value=tmp_path / "v.mp4") as download:
            path = resolve_media("https://example.com/v", tmp_path)
        download.assert_called_once_with("https://example.com/v", tmp_path)
        assert path == tmp_path / "v.mp4"

    def test_unknown_locator(self, tmp_path):
        with pytest.raises(FetchError):
            resolve_media(str(tmp_path / "missing.mp4"), tmp_path)
