"""
gfxinject - Bitmap Tiling

Cuts a bitmap into 8x8 tiles, collects its palette and maps tiles to
palette indices. This is the image side of the pipeline; the packing and
ROM patching code only sees the resulting index lists and color values.
"""

from dataclasses import dataclass, field
from pathlib import Path

try:
    from PIL import Image
except ImportError:
    raise ImportError("Pillow library required. Install with: pip install Pillow")

from ..formats.pixel_formats import ColorFormat, convert_color

TILE_SIZE = 8  # 8x8 pixels per tile


class PaletteOverflowError(ValueError):
    """Raised when a bitmap uses more colors than the palette holds."""

    pass


@dataclass(frozen=True)
class Tile:
    """One 8x8 tile, pixels in row-major order."""

    pixels: tuple

    def distinct(self) -> list:
        """Distinct pixel values in first-seen order."""
        return list(dict.fromkeys(self.pixels))


@dataclass
class Palette:
    """Ordered, de-duplicated native colors in one color format."""

    format: ColorFormat
    max_size: int
    colors: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.colors)

    def add(self, color: int) -> int:
        """
        Add a color if not present.

        Returns:
            Index of the color

        Raises:
            PaletteOverflowError: If the palette is already full
        """
        if color in self.colors:
            return self.colors.index(color)
        if len(self.colors) >= self.max_size:
            raise PaletteOverflowError(
                f"Palette full: more than {self.max_size} colors "
                f"in {self.format.tag} format"
            )
        self.colors.append(color)
        return len(self.colors) - 1

    def index(self, color: int) -> int:
        return self.colors.index(color)


def load_bitmap(path: str | Path) -> Image.Image:
    """
    Load a bitmap as RGBA.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the dimensions are not multiples of 8
    """
    with Image.open(path) as img:
        bitmap = img.convert("RGBA")

    width, height = bitmap.size
    if width % TILE_SIZE != 0 or height % TILE_SIZE != 0:
        raise ValueError(
            f"Image dimensions must be multiples of {TILE_SIZE}. "
            f"Got {width}x{height} for {path}"
        )
    return bitmap


def cut_tiles(bitmap: Image.Image) -> list[Tile]:
    """
    Cut a bitmap into 8x8 tiles of RGBA pixels.

    Tiles are ordered left to right, top to bottom. Partial tiles at the
    right and bottom edges are dropped.
    """
    width, height = bitmap.size
    rgba = bitmap.convert("RGBA")
    pixels = rgba.load()

    tiles = []
    for ty in range(height // TILE_SIZE):
        for tx in range(width // TILE_SIZE):
            tile_pixels = tuple(
                pixels[tx * TILE_SIZE + x, ty * TILE_SIZE + y]
                for y in range(TILE_SIZE)
                for x in range(TILE_SIZE)
            )
            tiles.append(Tile(tile_pixels))
    return tiles


def build_palette(tiles: list[Tile], color_format: ColorFormat, max_size: int) -> Palette:
    """
    Collect the distinct colors used by a tile list.

    Scans tiles in order, converting each distinct pixel to color_format
    and adding colors not yet present.

    Raises:
        PaletteOverflowError: If more than max_size distinct colors are used
    """
    palette = Palette(color_format, max_size)
    for tile in tiles:
        for rgba in tile.distinct():
            palette.add(convert_color(rgba, color_format))
    return palette


def build_tileset(
    tiles: list[Tile],
    palette: Palette,
    deduplicate: bool = False,
) -> list[Tile]:
    """
    Map RGBA tiles to palette indices.

    Args:
        tiles: Tiles from cut_tiles()
        palette: Palette from build_palette()
        deduplicate: Drop tiles identical to an earlier tile

    Returns:
        Tiles in source order (minus duplicates if requested)
    """
    tileset = []
    seen = set()

    for tile in tiles:
        mapped = Tile(
            tuple(palette.index(convert_color(rgba, palette.format)) for rgba in tile.pixels)
        )

        if deduplicate:
            if mapped.pixels in seen:
                continue
            seen.add(mapped.pixels)
        tileset.append(mapped)

    return tileset
