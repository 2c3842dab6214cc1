"""Glyph palettes - ordered character sets from emptiest to densest.

A palette maps a luminosity value (0-255) to the glyph whose visual density
best matches it. Palettes are usually loaded by name from a palette file:

Example:
    from termreel.palette import Palette, load_palette

    palette = load_palette("ascii")
    palette.glyph_for(0)    # ' '
    palette.glyph_for(255)  # '@'

    custom = Palette("dots", " .:#")
    custom.glyph_for(170)   # ':'

Palette file format (see ``palettes.txt``)::

    name:
    <glyphs from densest to emptiest>

A line ending in ``:`` names a palette and the following line lists its
glyphs. Glyphs are stored densest first in the file and reversed on load.
Trailing spaces are significant (the emptiest glyph is usually a space).
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .errors import PaletteNotFoundError, PaletteParsingError

# Bundled palette file
DEFAULT_PALETTE_FILE = Path(__file__).parent / "palettes.txt"

# Character sets ordered from dark to bright
ASCII_CHARS_10 = " .:-=+*#%@"
ASCII_CHARS_92 = " `.-':_,^=;><+!rc*/z?sLTv)J7(|Fi{C}fI31tlu[neoZ5Yxjya]2ESwqkP6h9d4VpOGbUAKXHm8RD#$Bg0MNWQ%&@"

MAX_LUMINOSITY = 255


class Palette:
    """An immutable, ordered set of glyphs.

    Index 0 is the emptiest glyph, index N-1 the densest. With N glyphs the
    luminosity range is split into N-1 slices of equal width and a value maps
    to the slice it falls in, the lower slice winning at a boundary.
    """

    __slots__ = ("_name", "_glyphs")

    def __init__(self, name: str, glyphs: str | list[str] | tuple[str, ...]):
        """
        :param name: Palette name (as used in the palette file)
        :param glyphs: Glyphs ordered from emptiest to densest
        """
        self._name = name
        self._glyphs = tuple(glyphs)

    @property
    def name(self) -> str:
        """Palette name."""
        return self._name

    @property
    def glyphs(self) -> tuple[str, ...]:
        """Glyphs from emptiest to densest."""
        return self._glyphs

    def __len__(self) -> int:
        return len(self._glyphs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self._name == other._name and self._glyphs == other._glyphs

    def __hash__(self) -> int:
        return hash((self._name, self._glyphs))

    def __repr__(self) -> str:
        return f"Palette({self._name!r}, {''.join(self._glyphs)!r})"

    def index_for(self, luminosity: int) -> int | None:
        """Index of the glyph for a luminosity value.

        Computes ``floor(luminosity / (255 / (N - 1)))`` with integer
        arithmetic, which is exact and reaches the last index at 255.

        :param luminosity: Value between 0 and 255
        :return: Glyph index, or None for an empty palette
        """
        if not 0 <= luminosity <= MAX_LUMINOSITY:
            raise ValueError(f"Luminosity must be between 0 and 255, got {luminosity}")
        divisions = len(self._glyphs) - 1
        if divisions < 0:
            return None
        return int(luminosity) * divisions // MAX_LUMINOSITY

    def glyph_for(self, luminosity: int) -> str | None:
        """Glyph that best matches a luminosity value.

        :param luminosity: Value between 0 and 255
        :return: Glyph, or None for an empty palette
        """
        index = self.index_for(luminosity)
        if index is None:
            return None
        return self._glyphs[index]

    def lookup_table(self) -> np.ndarray:
        """Glyph for every luminosity value 0-255.

        Used by the renderer to map a whole frame at once.

        :return: Array of 256 single-character strings
        :raises ValueError: If the palette is empty
        """
        if not self._glyphs:
            raise ValueError(f"Palette '{self._name}' has no glyphs")
        divisions = len(self._glyphs) - 1
        indices = np.arange(MAX_LUMINOSITY + 1, dtype=np.int64) * divisions // MAX_LUMINOSITY
        return np.array(self._glyphs, dtype=object)[indices]


def parse_palettes(path: str | Path = DEFAULT_PALETTE_FILE) -> dict[str, Palette]:
    """Parse all palettes defined in a palette file.

    :param path: Palette file path
    :return: Mapping of palette name to palette
    :raises PaletteParsingError: If the file cannot be read or a name has no glyph line
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise PaletteParsingError(f"Could not read palette file {path}: {exc}") from exc

    lines = text.splitlines()
    palettes: dict[str, Palette] = {}
    i = 0
    while i < len(lines):
        line = lines[i]
        if not line.endswith(":"):
            i += 1
            continue
        name = line[:-1]
        if i + 1 >= len(lines):
            raise PaletteParsingError(
                f"There was an error in the formatting of {path}: palette '{name}' has no glyphs"
            )
        # The file lists glyphs densest first
        glyphs = list(lines[i + 1])
        glyphs.reverse()
        palettes[name] = Palette(name, glyphs)
        i += 2

    return palettes


def load_palette(name: str, path: str | Path | None = None) -> Palette:
    """Load a single palette by name.

    :param name: Palette name
    :param path: Palette file (None = bundled palettes)
    :return: The palette
    :raises PaletteNotFoundError: If the file defines no palette with that name
    """
    palettes = parse_palettes(path or DEFAULT_PALETTE_FILE)
    try:
        return palettes[name]
    except KeyError:
        raise PaletteNotFoundError(name) from None


__all__ = [
    "Palette",
    "parse_palettes",
    "load_palette",
    "DEFAULT_PALETTE_FILE",
    "ASCII_CHARS_10",
    "ASCII_CHARS_92",
]
