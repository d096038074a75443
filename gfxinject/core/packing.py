"""
gfxinject - Data Packing

Serializes tile pixel indices and palette colors into the byte layouts the
target hardware reads, plus the inverse operations used for verification.
"""

from typing import Iterable, Sequence

VALID_DEPTHS = (1, 2, 4, 8)


def _check_depth(bits_per_pixel: int):
    if bits_per_pixel not in VALID_DEPTHS:
        raise ValueError(
            f"Invalid bit depth {bits_per_pixel}. Must be one of {VALID_DEPTHS}"
        )


def pack_pixels(pixels: Iterable[int], bits_per_pixel: int, offset: int = 0) -> bytes:
    """
    Pack palette indices into a bit-packed byte stream.

    Pixels are packed least-significant-bits first: with 4bpp, the first
    pixel lands in bits 0-3 and the second in bits 4-7. A trailing partial
    byte is emitted with its unused high bits zero.

    Indices are not range-checked. An index + offset wider than the bit
    depth spills into the neighbouring pixel's bits.

    Args:
        pixels: Palette indices in display order
        bits_per_pixel: 1, 2, 4 or 8
        offset: Constant added to every index before packing

    Returns:
        ceil(len(pixels) * bits_per_pixel / 8) bytes

    Raises:
        ValueError: If bits_per_pixel is not a supported depth
    """
    _check_depth(bits_per_pixel)
    pixels_per_byte = 8 // bits_per_pixel

    output = bytearray()
    position = 0
    accumulator = 0

    for index in pixels:
        accumulator |= (index + offset) << (position * bits_per_pixel)
        position += 1

        if position >= pixels_per_byte:
            output.append(accumulator & 0xFF)
            position = 0
            accumulator = 0

    if position > 0:
        output.append(accumulator & 0xFF)

    return bytes(output)


def unpack_pixels(
    data: bytes, bits_per_pixel: int, count: int | None = None
) -> list[int]:
    """
    Inverse of pack_pixels() for a zero offset.

    Args:
        data: Packed bytes
        bits_per_pixel: 1, 2, 4 or 8
        count: Number of pixels to return (default: every slot in data)

    Returns:
        List of palette indices
    """
    _check_depth(bits_per_pixel)
    pixels_per_byte = 8 // bits_per_pixel
    mask = (1 << bits_per_pixel) - 1

    pixels = []
    for byte in data:
        for position in range(pixels_per_byte):
            pixels.append((byte >> (position * bits_per_pixel)) & mask)

    if count is not None:
        pixels = pixels[:count]
    return pixels


def pack_tiles(
    tiles: Iterable[Sequence[int]], bits_per_pixel: int, offset: int = 0
) -> bytes:
    """
    Pack a tile set, one tile after another.

    Each tile starts on a byte boundary.

    Args:
        tiles: Iterable of per-tile palette index sequences
        bits_per_pixel: 1, 2, 4 or 8
        offset: Constant added to every index

    Returns:
        Concatenated packed tile data
    """
    return b"".join(pack_pixels(tile, bits_per_pixel, offset) for tile in tiles)


def bytes_per_color(bits_per_color: int) -> int:
    return (bits_per_color + 7) // 8


def encode_palette(
    colors: Sequence[int], declared_size: int, bits_per_color: int
) -> bytes:
    """
    Encode palette colors as fixed-width little-endian entries.

    Always emits declared_size entries so hardware palette slots keep a
    fixed size. Slots past the end of colors are zero; colors past
    declared_size are dropped.

    Args:
        colors: Native color values
        declared_size: Number of palette slots to emit
        bits_per_color: Color format width in bits

    Returns:
        declared_size * ceil(bits_per_color / 8) bytes
    """
    width = bytes_per_color(bits_per_color)
    output = bytearray()

    for i in range(declared_size):
        color = colors[i] if i < len(colors) else 0
        for _ in range(width):
            output.append(color & 0xFF)
            color >>= 8

    return bytes(output)


def decode_palette(data: bytes, bits_per_color: int) -> list[int]:
    """
    Inverse of encode_palette().

    Args:
        data: Encoded palette bytes
        bits_per_color: Color format width in bits

    Returns:
        One color value per complete entry in data
    """
    width = bytes_per_color(bits_per_color)
    return [
        int.from_bytes(data[i : i + width], "little")
        for i in range(0, len(data) - width + 1, width)
    ]
