"""
termreel - Play videos as colored text art in the terminal.

Usage:
    termreel video.mp4
    termreel https://www.youtube.com/watch?v=FtutLA63Cp8 --width 160 --frame-limit 24
    termreel video.mp4 --palette blocks --no-color --no-preprocess

Palettes are read from the palette file (``TERMREEL_PALETTE_FILE``); the
bundled file provides ascii, standard, detailed, simple and blocks.
"""

from __future__ import annotations

import argparse
import logging
import sys

from blessed import Terminal

from .config import PlayerConfig, settings
from .errors import TermreelError, TooMuchLagError
from .fetch import is_url, resolve_media
from .pipeline import Pipeline
from .player import PlaybackSession, WaitingAnimation

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termreel",
        description="Play videos as colored text art in the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  termreel video.mp4                          # Play a local file
  termreel -u https://example.com/clip.mp4    # Download and play
  termreel video.mp4 -w 160 -f 0              # Wide, at the source frame rate
  termreel video.mp4 -p blocks --no-color     # Monochrome block glyphs
        """,
    )
    parser.add_argument(
        "url_or_path",
        nargs="?",
        help="Path or URL of the video",
    )
    parser.add_argument(
        "--url-or-path",
        "-u",
        dest="url_or_path_option",
        metavar="URL_OR_PATH",
        help="Path or URL of the video (alternative to the positional argument)",
    )
    parser.add_argument(
        "--palette",
        "-p",
        default=settings.DEFAULT_PALETTE,
        help=f"Glyph palette name (default: {settings.DEFAULT_PALETTE})",
    )
    parser.add_argument(
        "--width",
        "-w",
        type=int,
        default=100,
        help="Characters per row (default: 100)",
    )
    parser.add_argument(
        "--frame-limit",
        "-f",
        type=int,
        default=30,
        help="Maximum frame rate, 0 for the video's own rate (default: 30)",
    )
    parser.add_argument(
        "--volume",
        "-v",
        type=float,
        default=1.0,
        help="Audio volume, values above 1.0 amplify (default: 1.0)",
    )
    parser.add_argument(
        "--no-preprocess",
        action="store_true",
        help="Render frames while playing instead of up front",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Monochrome output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging",
    )
    return parser


def play(config: PlayerConfig, terminal: Terminal | None = None) -> int:
    """Resolve, prepare and play a video.

    :param config: Validated session configuration
    :param terminal: Output terminal (default: a new ``blessed.Terminal``)
    :return: Process exit code
    """
    if is_url(config.query):
        with WaitingAnimation("Downloading"):
            path = resolve_media(config.query, settings.DOWNLOAD_DIR)
    else:
        path = resolve_media(config.query, settings.DOWNLOAD_DIR)

    build_args = (path, config.width, config.frame_limit, config.color, config.preprocessing)
    if config.preprocessing:
        with WaitingAnimation("Preprocessing frames"):
            pipeline = Pipeline.build(*build_args, palette=config.palette)
    else:
        pipeline = Pipeline.build(*build_args, palette=config.palette)

    term = terminal if terminal is not None else Terminal()

    def write_frame(text: str) -> None:
        sys.stdout.write(term.home + text)
        sys.stdout.flush()

    with pipeline:
        logger.debug(f"Playing {path} at {pipeline.frame_rate:.2f} fps")
        with term.fullscreen(), term.hidden_cursor():
            stats = PlaybackSession(pipeline, config.volume, write_frame).run()

    logger.info(f"Played {stats.ticks} frames ({stats.overruns} late)")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    query = args.url_or_path_option or args.url_or_path
    if not query:
        parser.error("a video path or URL is required")

    try:
        config = PlayerConfig.build(
            query,
            palette=args.palette,
            width=args.width,
            frame_limit=args.frame_limit,
            volume=args.volume,
            color=not args.no_color,
            preprocessing=not args.no_preprocess,
        )
        return play(config)
    except TooMuchLagError as exc:
        logger.error(f"{exc}. Try a smaller --width or a lower --frame-limit.")
        return 1
    except TermreelError as exc:
        logger.error(str(exc))
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
