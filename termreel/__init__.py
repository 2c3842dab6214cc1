"""
termreel - Watch videos as colored text art in the terminal
"""

from .errors import (
    TermreelError,
    ConfigurationError,
    PaletteParsingError,
    PaletteNotFoundError,
    DecodeError,
    RenderError,
    PreprocessingError,
    AudioError,
    FetchError,
    TooMuchLagError,
)
from .palette import Palette, load_palette, parse_palettes
from .config import PlayerConfig, Settings, settings
from .rendering import FrameRenderer, LazyFrame, RawFrame, TextFrame
from .streams import FrameSource, RateConverter, SequenceDecoder, VideoFileDecoder
from .pipeline import Pipeline
from .player import PlaybackLoop, PlaybackSession, PlaybackState

__all__ = [
    # Errors
    "TermreelError",
    "ConfigurationError",
    "PaletteParsingError",
    "PaletteNotFoundError",
    "DecodeError",
    "RenderError",
    "PreprocessingError",
    "AudioError",
    "FetchError",
    "TooMuchLagError",
    # Palette & configuration
    "Palette",
    "load_palette",
    "parse_palettes",
    "PlayerConfig",
    "Settings",
    "settings",
    # Rendering
    "FrameRenderer",
    "RawFrame",
    "LazyFrame",
    "TextFrame",
    # Frame sources
    "FrameSource",
    "RateConverter",
    "SequenceDecoder",
    "VideoFileDecoder",
    # Boundary
    "Pipeline",
    "PlaybackLoop",
    "PlaybackSession",
    "PlaybackState",
]

__version__ = "0.1.0"
