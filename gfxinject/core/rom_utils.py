"""
gfxinject - ROM address utilities

This module provides:
- Seek resolution for signed injection targets (negative = from end of file)
- 24-bit little-endian pointer encoding used by the pointer tables

Used by RomWriter and Patcher.
"""

from enum import Enum

POINTER_SIZE = 3  # Pointers are 24-bit, little-endian


class SeekOrigin(Enum):
    START = "start"
    END = "end"


def resolve_seek(target: int) -> tuple[SeekOrigin, int]:
    """
    Convert a signed target offset into a seek origin and offset.

    Non-negative targets are absolute offsets from the start of the file.
    Negative targets count back from the end: -1 is the last byte, -10 is
    nine bytes before it.

    Examples:
        >>> resolve_seek(5)
        (<SeekOrigin.START: 'start'>, 5)
        >>> resolve_seek(-10)
        (<SeekOrigin.END: 'end'>, 9)
    """
    if target < 0:
        return (SeekOrigin.END, abs(target) - 1)
    return (SeekOrigin.START, target)


def seek_position(origin: SeekOrigin, offset: int, file_length: int) -> int:
    """
    Turn a seek origin/offset pair into an absolute file position.

    For END, offset 0 is the last byte of the file.

    Args:
        origin: SeekOrigin from resolve_seek()
        offset: Non-negative offset from that origin
        file_length: Current length of the file in bytes

    Returns:
        Absolute file position

    Raises:
        ValueError: If the position falls before the start of the file
    """
    if origin is SeekOrigin.START:
        position = offset
    else:
        position = file_length - 1 - offset

    if position < 0:
        raise ValueError(
            f"Seek of {offset} from {origin.value} lands before the start of a "
            f"{file_length}-byte file"
        )
    return position


def encode_pointer(position: int) -> bytes:
    """
    Encode an absolute position as a 3-byte little-endian pointer.

    Positions wider than 24 bits are truncated without error.
    """
    return bytes(
        [
            position & 0xFF,  # Low byte
            (position >> 8) & 0xFF,  # Mid byte
            (position >> 16) & 0xFF,  # High byte
        ]
    )


def decode_pointer(data: bytes) -> int:
    """Decode a 3-byte little-endian pointer."""
    if len(data) < POINTER_SIZE:
        raise ValueError(f"Pointer needs {POINTER_SIZE} bytes, got {len(data)}")
    return data[0] | (data[1] << 8) | (data[2] << 16)
