"""Shared pytest fixtures for packing and ROM patching tests."""

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

# RGB555 values: red 0x001F, green 0x03E0, blue 0x7C00, black 0x0000
TEST_COLORS = [
    (0, 0, 0),
    (248, 0, 0),
    (0, 248, 0),
    (0, 0, 248),
]
TEST_COLORS_RGB555 = [0x0000, 0x001F, 0x03E0, 0x7C00]


def diagonal_index(x: int, y: int) -> int:
    """Index pattern whose first tile sees colors in order 0, 1, 2, 3."""
    return (x + y) % 4


def expected_tiles(
    tiles_wide: int, tiles_high: int, index_fn: Callable[[int, int], int]
) -> list[list[int]]:
    """Per-tile palette indices, tiles left to right, top to bottom."""
    tiles = []
    for ty in range(tiles_high):
        for tx in range(tiles_wide):
            tiles.append(
                [
                    index_fn(tx * 8 + x, ty * 8 + y)
                    for y in range(8)
                    for x in range(8)
                ]
            )
    return tiles


def write_indexed_bitmap(
    path: Path,
    tiles_wide: int,
    tiles_high: int,
    index_fn: Callable[[int, int], int] = diagonal_index,
    colors: list[tuple[int, int, int]] = TEST_COLORS,
) -> Path:
    """Render an index pattern to a PNG using the given colors."""
    img = Image.new("RGB", (tiles_wide * 8, tiles_high * 8))
    pixels = img.load()
    for y in range(tiles_high * 8):
        for x in range(tiles_wide * 8):
            pixels[x, y] = colors[index_fn(x, y)]
    img.save(path)
    return path


@pytest.fixture
def make_bitmap(tmp_path) -> Callable[..., Path]:
    """Factory writing an indexed-pattern PNG into tmp_path."""

    def _make(name: str = "image.png", tiles_wide: int = 2, tiles_high: int = 1, **kwargs):
        return write_indexed_bitmap(tmp_path / name, tiles_wide, tiles_high, **kwargs)

    return _make


@pytest.fixture
def make_rom(tmp_path) -> Callable[..., Path]:
    """Factory writing a source ROM with a recognizable byte pattern."""

    def _make(size: int = 0x1000, name: str = "source.gba") -> Path:
        path = tmp_path / name
        path.write_bytes(bytes((i * 7 + 3) & 0xFF for i in range(size)))
        return path

    return _make


@pytest.fixture
def write_project(tmp_path) -> Callable[[str], Path]:
    """Factory writing TOML project text to tmp_path/project.toml."""

    def _write(text: str, name: str = "project.toml") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write
