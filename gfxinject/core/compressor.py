"""
gfxinject - LZ77 Compression

GBA BIOS-compatible LZ77 (type 0x10) encoder and decoder.

Container layout:
- 4-byte header: 0x10, then the decompressed size as 24-bit little-endian
- Blocks of one flag byte (bit 7 first) followed by up to 8 tokens:
  - flag bit 0: one literal byte
  - flag bit 1: two-byte back-reference
      byte 0 = (length - 3) << 4 | (displacement - 1) >> 8
      byte 1 = (displacement - 1) & 0xFF
- Output is zero-padded to a multiple of 4 bytes
"""

LZ77_TYPE = 0x10
HEADER_SIZE = 4
WINDOW_SIZE = 0x1000  # 12-bit displacement
MIN_MATCH = 3
MAX_MATCH = 0x12  # 4-bit length + 3
MAX_SIZE = 0xFFFFFF


class CompressionError(ValueError):
    """Raised when data cannot be LZ77 compressed or decompressed."""

    pass


def _find_match(data: bytes, pos: int, min_disp: int) -> tuple[int, int]:
    """
    Find the longest back-reference for data[pos:].

    Args:
        data: Full input buffer
        pos: Current position
        min_disp: Smallest displacement allowed

    Returns:
        Tuple of (length, displacement); length is 0 if no usable match
    """
    size = len(data)
    max_len = min(MAX_MATCH, size - pos)
    if max_len < MIN_MATCH:
        return (0, 0)

    window_start = max(0, pos - WINDOW_SIZE)
    # Only match starts at least min_disp back are usable
    search_end = pos - min_disp + MIN_MATCH
    if search_end - window_start < MIN_MATCH:
        return (0, 0)

    seed = data[pos : pos + MIN_MATCH]
    best_len = 0
    best_disp = 0

    found = data.rfind(seed, window_start, search_end)
    while found != -1:
        disp = pos - found
        match_len = MIN_MATCH
        # Overlapping matches are fine: the decoder copies byte by byte
        while match_len < max_len and data[found + match_len] == data[pos + match_len]:
            match_len += 1

        if match_len > best_len:
            best_len = match_len
            best_disp = disp
            if best_len >= max_len:
                break

        found = data.rfind(seed, window_start, found + MIN_MATCH - 1)

    return (best_len, best_disp)


def lz77_compress(data: bytes, vram_safe: bool = True) -> bytes:
    """
    Compress data into a GBA LZ77 (type 0x10) container.

    Args:
        data: Uncompressed bytes (at most 16 MiB - 1)
        vram_safe: Never emit displacement 1, which the BIOS VRAM
            decompressor (16-bit writes) cannot reproduce

    Returns:
        Compressed bytes, padded to a multiple of 4

    Raises:
        CompressionError: If data is too large for the 24-bit size field
    """
    data = bytes(data)
    size = len(data)
    if size > MAX_SIZE:
        raise CompressionError(
            f"Data ({size} bytes) exceeds LZ77 size limit ({MAX_SIZE} bytes)"
        )

    min_disp = 2 if vram_safe else 1
    output = bytearray(
        [LZ77_TYPE, size & 0xFF, (size >> 8) & 0xFF, (size >> 16) & 0xFF]
    )

    pos = 0
    while pos < size:
        flags_pos = len(output)
        output.append(0)  # Flag byte placeholder
        flags = 0

        for bit in range(8):
            if pos >= size:
                break

            match_len, disp = _find_match(data, pos, min_disp)
            if match_len >= MIN_MATCH:
                flags |= 0x80 >> bit
                disp_m1 = disp - 1
                output.append(((match_len - MIN_MATCH) << 4) | ((disp_m1 >> 8) & 0x0F))
                output.append(disp_m1 & 0xFF)
                pos += match_len
            else:
                output.append(data[pos])
                pos += 1

        output[flags_pos] = flags

    while len(output) % 4:
        output.append(0)

    return bytes(output)


def lz77_decompress(data: bytes) -> bytes:
    """
    Decompress a GBA LZ77 (type 0x10) container.

    Args:
        data: Compressed bytes starting with the 4-byte header

    Returns:
        Decompressed bytes

    Raises:
        CompressionError: If the header is wrong or the stream is truncated
    """
    if len(data) < HEADER_SIZE or data[0] != LZ77_TYPE:
        raise CompressionError("Not an LZ77 (type 0x10) stream")

    size = data[1] | (data[2] << 8) | (data[3] << 16)
    output = bytearray()
    pos = HEADER_SIZE

    while len(output) < size:
        if pos >= len(data):
            raise CompressionError(
                f"Truncated LZ77 stream: {len(output)} of {size} bytes decoded"
            )
        flags = data[pos]
        pos += 1

        for bit in range(8):
            if len(output) >= size:
                break

            if flags & (0x80 >> bit):
                if pos + 2 > len(data):
                    raise CompressionError("Truncated LZ77 back-reference")
                length = (data[pos] >> 4) + MIN_MATCH
                disp = (((data[pos] & 0x0F) << 8) | data[pos + 1]) + 1
                pos += 2

                if disp > len(output):
                    raise CompressionError(
                        f"Back-reference displacement {disp} exceeds "
                        f"{len(output)} decoded bytes"
                    )
                for _ in range(length):
                    output.append(output[-disp])
            else:
                if pos >= len(data):
                    raise CompressionError("Truncated LZ77 literal")
                output.append(data[pos])
                pos += 1

    return bytes(output[:size])
