"""termreel streams package.

This package turns decoded video into a paced sequence of rendered frames:

- FrameDecoder: Abstract pull interface to a raw frame decoder
- VideoFileDecoder: OpenCV-based video file decoding
- SequenceDecoder: Replays in-memory pixel arrays
- FrameSource: Streamed or preprocessed rendered frames
- PreprocessExecutor: Chunked parallel rendering ahead of playback
- RateConverter: Drops frames to reach a lower target frame rate

Example:
    from termreel.streams import FrameSource, RateConverter, VideoFileDecoder

    decoder = VideoFileDecoder("movie.mp4")
    source = FrameSource.preprocessed(decoder, renderer)
    converter = RateConverter(source, decoder.fps, target_fps=24)

    while (frame := converter.next_frame()) is not None:
        print(frame.as_text(renderer))
"""

from .decoder import FrameDecoder, SequenceDecoder
from .executor import DEFAULT_CHUNK_SIZE, PreprocessExecutor, PreprocessMetrics
from .rate import RateConverter
from .source import FrameSource, SourceMode
from .video import VideoFileDecoder

__all__ = [
    "FrameDecoder",
    "SequenceDecoder",
    "VideoFileDecoder",
    "FrameSource",
    "SourceMode",
    "PreprocessExecutor",
    "PreprocessMetrics",
    "DEFAULT_CHUNK_SIZE",
    "RateConverter",
]
