"""
gfxinject - ROM Writer

Creates the output ROM as a copy of the source ROM and applies seek+write
patches to it in place.

Writes go straight to the output file. There is no rollback: if a run
fails part way, the output keeps every write made before the failure.
"""

import logging
import os

from .rom_utils import SeekOrigin, seek_position

log = logging.getLogger(__name__)


class RomWriter:
    """
    Writes patches into a copy of a ROM file.

    Usage:
        with RomWriter("game.gba", "hack.gba") as rom:
            position = rom.seek(SeekOrigin.START, 0x100)
            rom.write_at(position, data)
    """

    def __init__(self, rom_path: str, output_path: str):
        """
        Load source ROM for patching.

        Args:
            rom_path: Source ROM file (read-only)
            output_path: Output ROM file path (will be created/overwritten)

        Raises:
            FileNotFoundError: If the source ROM does not exist
        """
        with open(rom_path, "rb") as f:
            self.rom_data = f.read()

        self.rom_path = str(rom_path)
        self.output_path = str(output_path)
        self._file = None

    def open(self):
        """Create/truncate the output and copy the source ROM into it."""
        if self._file is not None:
            return
        self._file = open(self.output_path, "w+b")
        self._file.write(self.rom_data)
        self._file.flush()
        log.debug(
            "Copied %d bytes from %s to %s",
            len(self.rom_data),
            self.rom_path,
            self.output_path,
        )

    def close(self):
        """Flush and close the output file."""
        if self._file is None:
            return
        self._file.flush()
        self._file.close()
        self._file = None

    def __enter__(self) -> "RomWriter":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _require_open(self):
        if self._file is None:
            raise RuntimeError("RomWriter is not open; use open() or a with block")
        return self._file

    @property
    def length(self) -> int:
        """Current length of the output file in bytes."""
        f = self._require_open()
        return f.seek(0, os.SEEK_END)

    def seek(self, origin: SeekOrigin, offset: int) -> int:
        """
        Resolve a seek against the output's current length.

        Args:
            origin: START or END (END offset 0 is the last byte)
            offset: Non-negative offset from origin

        Returns:
            Absolute position in the output file
        """
        return seek_position(origin, offset, self.length)

    def write_at(self, position: int, data: bytes):
        """
        Write bytes at an absolute position.

        Writing past the end extends the file; any gap is zero-filled.

        Args:
            position: Absolute file position
            data: Bytes to write
        """
        f = self._require_open()
        f.seek(position)
        f.write(data)
        f.flush()

    def read_at(self, position: int, length: int) -> bytes:
        """
        Read bytes back from the output file.

        Args:
            position: Absolute file position
            length: Number of bytes to read

        Returns:
            Requested bytes (shorter if the file ends first)
        """
        f = self._require_open()
        f.seek(position)
        return f.read(length)
