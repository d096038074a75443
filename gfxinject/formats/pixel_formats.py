"""
gfxinject - Pixel and Color Formats

Lookup tables for the bitmap formats (tile data layout) and color formats
(palette entry layout) recognized in project files, plus conversion of
RGBA pixels into a color format's native value.

Both tables are built once at import time and are read-only.
"""

from enum import Enum
from types import MappingProxyType


class BitmapFormat(Enum):
    """Tile data layout: tag used in project files and bits per palette index."""

    GBA_4BPP = ("GBA-4BPP", 4)
    GBA_8BPP = ("GBA-8BPP", 8)
    GB = ("GB", 2)
    NDSTEX5 = ("NDSTEX5", 2)

    def __init__(self, tag: str, bits: int):
        self.tag = tag
        self.bits = bits


class ColorFormat(Enum):
    """Palette entry layout: tag used in project files and bits per color."""

    RGB555 = ("RGB555", 15)
    BGR888 = ("BGR888", 24)
    RGBA5551 = ("RGBA5551", 16)
    BGRA8888 = ("BGRA8888", 32)
    GRAYSCALE_2BPP = ("Grayscale2BPP", 2)
    GRAYSCALE_4BPP = ("Grayscale4BPP", 4)
    GRAYSCALE_8BPP = ("Grayscale8BPP", 8)
    GAMEBOY = ("Gameboy", 2)

    def __init__(self, tag: str, bits: int):
        self.tag = tag
        self.bits = bits

    @property
    def bytes_per_color(self) -> int:
        return (self.bits + 7) // 8


BITMAP_FORMATS = MappingProxyType({fmt.tag: fmt for fmt in BitmapFormat})
COLOR_FORMATS = MappingProxyType({fmt.tag: fmt for fmt in ColorFormat})


def parse_bitmap_format(tag: str) -> BitmapFormat | None:
    """Look up a bitmap format by its project-file tag (exact match)."""
    return BITMAP_FORMATS.get(tag)


def parse_color_format(tag: str) -> ColorFormat | None:
    """Look up a color format by its project-file tag (exact match)."""
    return COLOR_FORMATS.get(tag)


def luma(r: int, g: int, b: int) -> int:
    """ITU-R 601 luma, 0-255 (same weights Pillow uses for mode "L")."""
    return (r * 299 + g * 587 + b * 114) // 1000


def convert_color(rgba: tuple[int, int, int, int], fmt: ColorFormat) -> int:
    """
    Convert an 8-bit-per-channel RGBA pixel to a native color value.

    Channel order in the format name runs from the low bits upward, so
    RGB555 keeps red in bits 0-4 and BGR888 keeps blue in bits 0-7.

    Args:
        rgba: (r, g, b, a) tuple with 0-255 channels
        fmt: Target color format

    Returns:
        Integer color value that fits in fmt.bits bits
    """
    r, g, b, a = rgba

    if fmt is ColorFormat.RGB555:
        return (r >> 3) | ((g >> 3) << 5) | ((b >> 3) << 10)
    if fmt is ColorFormat.RGBA5551:
        alpha_bit = 1 if a >= 0x80 else 0
        return (r >> 3) | ((g >> 3) << 5) | ((b >> 3) << 10) | (alpha_bit << 15)
    if fmt is ColorFormat.BGR888:
        return b | (g << 8) | (r << 16)
    if fmt is ColorFormat.BGRA8888:
        return b | (g << 8) | (r << 16) | (a << 24)
    if fmt is ColorFormat.GAMEBOY:
        # Shade 0 is the lightest on DMG hardware
        return 3 - (luma(r, g, b) >> 6)

    # Grayscale formats
    return luma(r, g, b) >> (8 - fmt.bits)
