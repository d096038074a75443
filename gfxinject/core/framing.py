"""
gfxinject - Compression Framing

Wraps packed tile data for the project's compression mode.

On the Game Boy Advance, LZ77 graphics are preceded by an 8-byte header
(magic 1, then a tile count) inside the compressed stream. The tile count
formula below is kept exactly as existing ROM hacks expect it, integer
rounding included.
"""

import struct
from typing import Callable

from .compressor import lz77_compress
from ..formats.project import Compression, Platform

HEADER_MAGIC = 1
HEADER_SIZE = 8


class FramingError(ValueError):
    """Raised when the compressed-graphics header cannot be computed."""

    pass


def popcount(n: int) -> int:
    """Count set bits; non-positive values count as 0."""
    if n <= 0:
        return 0
    return bin(n).count("1")


def header_tile_count(payload_length: int, palette_size: int) -> int:
    """
    Tile count field of the GBA compressed-graphics header.

    Computed over the payload length plus the reserved header bytes:
        (len + 8) // (64 // (popcount(palette_size - 1) // 8))

    Raises:
        FramingError: If the divisor rounds down to zero, which happens for
            any palette size whose popcount(palette_size - 1) is below 8
    """
    index_bytes = popcount(palette_size - 1) // 8
    if index_bytes == 0:
        raise FramingError(
            f"Cannot compute LZ77 header for palette size {palette_size}: "
            f"popcount({palette_size - 1}) // 8 is 0"
        )

    return (payload_length + HEADER_SIZE) // ((8 * 8) // index_bytes)


def build_header(payload_length: int, palette_size: int) -> bytes:
    """Build the 8-byte header: uint32le magic, uint32le tile count."""
    tile_count = header_tile_count(payload_length, palette_size)
    return struct.pack("<II", HEADER_MAGIC, tile_count & 0xFFFFFFFF)


def frame_payload(
    payload: bytes,
    compression: Compression,
    platform: Platform,
    palette_size: int,
    compress: Callable[[bytes], bytes] = lz77_compress,
) -> bytes:
    """
    Frame and compress a packed payload.

    Args:
        payload: Packed tile data
        compression: Project compression mode
        platform: Project target platform
        palette_size: Declared palette size of the image (header math only)
        compress: Compressor applied to the framed buffer

    Returns:
        payload unchanged for Compression.NONE, otherwise the compressed
        (header +) payload

    Raises:
        FramingError: If the GBA header cannot be computed
    """
    if compression is Compression.NONE:
        return payload

    buffer = payload
    if platform is Platform.GAMEBOY_ADVANCE:
        buffer = build_header(len(payload), palette_size) + payload

    return compress(buffer)
