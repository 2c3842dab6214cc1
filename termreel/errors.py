"""Exception hierarchy for termreel.

All errors raised by the package derive from :class:`TermreelError`, so callers
such as the CLI can report any failure uniformly. Third-party exceptions are
wrapped at the adapter that calls the library (``raise ... from exc``).
"""

from __future__ import annotations


class TermreelError(Exception):
    """Base class for all termreel errors."""


class ConfigurationError(TermreelError):
    """Invalid configuration, reported when an object is constructed."""


class PaletteParsingError(ConfigurationError):
    """A palette file could not be read or is badly formatted."""


class PaletteNotFoundError(ConfigurationError):
    """The requested palette is not defined in the palette file."""

    def __init__(self, name: str):
        super().__init__(f"The palette '{name}' is not in the list of available palettes")
        self.name = name


class DecodeError(TermreelError):
    """The video source could not be opened or a frame could not be read."""


class RenderError(TermreelError):
    """A frame could not be scaled or converted to text."""


class PreprocessingError(TermreelError):
    """Preprocessing was aborted because a frame failed to decode or render."""


class AudioError(TermreelError):
    """Audio extraction or playback failed."""


class FetchError(TermreelError):
    """Remote media could not be retrieved."""


class TooMuchLagError(TermreelError):
    """Frames take too much time to render to sustain the target frame rate."""

    def __init__(self, ticks: int, credit: int):
        super().__init__(
            f"Frames take too much time to render (lag credit {credit} after {ticks} frames)"
        )
        self.ticks = ticks
        self.credit = credit


__all__ = [
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
]
