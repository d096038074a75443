"""
Unit tests for pixel and palette packing functions.
"""

import math

import pytest

from gfxinject.core.packing import (
    decode_palette,
    encode_palette,
    pack_pixels,
    pack_tiles,
    unpack_pixels,
)


class TestPackPixels:
    """Test pack_pixels() function."""

    def test_4bpp_low_nibble_first(self):
        """First pixel occupies the low nibble."""
        assert pack_pixels([1, 2], 4) == bytes([0x21])

    def test_2bpp_layout(self):
        """2bpp packs four pixels per byte, first pixel in bits 0-1."""
        # 3 | 0 << 2 | 1 << 4 | 2 << 6
        assert pack_pixels([3, 0, 1, 2], 2) == bytes([0x93])

    def test_1bpp_layout(self):
        """1bpp packs eight pixels per byte, first pixel in bit 0."""
        pixels = [1, 0, 1, 1, 0, 0, 0, 1]
        assert pack_pixels(pixels, 1) == bytes([0b10001101])

    def test_8bpp_is_identity(self):
        assert pack_pixels([5, 255, 0], 8) == bytes([5, 255, 0])

    def test_partial_byte_emitted(self):
        """A trailing partial byte keeps its unused high bits zero."""
        assert pack_pixels([1, 0, 1, 1, 0, 0, 0, 1, 1], 1) == bytes([0x8D, 0x01])
        assert pack_pixels([0xA, 0xB, 0xC], 4) == bytes([0xBA, 0x0C])

    def test_offset_added_to_every_pixel(self):
        assert pack_pixels([0, 1], 4, offset=1) == bytes([0x21])

    def test_oversized_index_bleeds_into_next_pixel(self):
        """Indices wider than the depth are not checked; high bits spill over."""
        packed = pack_pixels([0x1F, 0], 4)

        assert packed == bytes([0x1F])
        assert unpack_pixels(packed, 4) == [0xF, 0x1]

    def test_oversized_byte_is_truncated(self):
        assert pack_pixels([0x1FF], 8) == bytes([0xFF])

    def test_empty(self):
        assert pack_pixels([], 4) == b""

    def test_invalid_depth_raises_error(self):
        with pytest.raises(ValueError, match="Invalid bit depth"):
            pack_pixels([0, 1], 3)


class TestUnpackPixels:
    """Test unpack_pixels() inverse."""

    @pytest.mark.parametrize("depth", [1, 2, 4, 8])
    def test_roundtrip(self, depth):
        """Tile-like data survives pack/unpack at every depth."""
        max_value = (1 << depth) - 1
        original = [(i * 5 + i // 3) & max_value for i in range(64)]

        packed = pack_pixels(original, depth)

        assert unpack_pixels(packed, depth, len(original)) == original

    @pytest.mark.parametrize("depth", [1, 2, 4, 8])
    @pytest.mark.parametrize("count", [1, 7, 64, 65])
    def test_packed_length(self, depth, count):
        """Packed length is ceil(count / pixels_per_byte)."""
        packed = pack_pixels([0] * count, depth)

        assert len(packed) == math.ceil(count / (8 // depth))

    def test_count_truncates(self):
        assert unpack_pixels(bytes([0xBA, 0x0C]), 4, 3) == [0xA, 0xB, 0xC]


class TestPackTiles:
    """Test pack_tiles() tile-by-tile packing."""

    def test_tiles_concatenated(self):
        tiles = [[1] * 64, [2] * 64]

        packed = pack_tiles(tiles, 4)

        assert packed == bytes([0x11] * 32 + [0x22] * 32)

    def test_each_tile_starts_on_byte_boundary(self):
        """Odd pixel counts per tile are padded per tile, not across tiles."""
        packed = pack_tiles([[1], [2]], 4)

        assert packed == bytes([0x01, 0x02])


class TestEncodePalette:
    """Test encode_palette() function."""

    def test_rgb555_little_endian(self):
        packed = encode_palette([0x7C00, 0x001F], 2, 15)

        assert packed == bytes([0x00, 0x7C, 0x1F, 0x00])

    def test_pads_to_declared_size(self):
        """Unused slots encode as zero so the palette keeps its size."""
        packed = encode_palette([0x1234], 16, 15)

        assert len(packed) == 32
        assert packed[:2] == bytes([0x34, 0x12])
        assert packed[2:] == bytes(30)

    @pytest.mark.parametrize(
        "bits,width", [(2, 1), (4, 1), (8, 1), (15, 2), (16, 2), (24, 3), (32, 4)]
    )
    def test_length_is_declared_size_times_width(self, bits, width):
        assert len(encode_palette([1, 2, 3], 16, bits)) == 16 * width

    def test_24bit_colors(self):
        assert encode_palette([0x123456], 1, 24) == bytes([0x56, 0x34, 0x12])

    def test_color_truncated_to_width(self):
        assert encode_palette([0x1FF], 1, 8) == bytes([0xFF])

    def test_extra_colors_dropped(self):
        assert encode_palette([1, 2, 3], 2, 8) == bytes([1, 2])

    def test_zero_size(self):
        assert encode_palette([1, 2], 0, 15) == b""


class TestDecodePalette:
    """Test decode_palette() inverse."""

    def test_roundtrip_and_zero_fill(self):
        colors = [0x7FFF, 0x001F, 0x03E0]

        decoded = decode_palette(encode_palette(colors, 16, 15), 15)

        assert decoded[:3] == colors
        assert decoded[3:] == [0] * 13

    def test_32bit(self):
        colors = [0x80123456, 0xFF000000]

        assert decode_palette(encode_palette(colors, 2, 32), 32) == colors
