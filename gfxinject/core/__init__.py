"""
Core injection functionality.

This package contains tile/palette packing, LZ77 framing, address
resolution and the ROM writer used to patch graphics into a ROM.
"""

from .framing import FramingError, frame_payload
from .instrumented_io import InstrumentedRomWriter
from .patcher import Patcher
from .rom_utils import SeekOrigin, encode_pointer, resolve_seek
from .rom_writer import RomWriter
from .tiling import PaletteOverflowError

__all__ = [
    "Patcher",
    "RomWriter",
    "InstrumentedRomWriter",
    "SeekOrigin",
    "resolve_seek",
    "encode_pointer",
    "frame_payload",
    "FramingError",
    "PaletteOverflowError",
]
