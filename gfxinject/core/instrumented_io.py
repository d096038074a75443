"""
gfxinject - Instrumented ROM I/O

RomWriter subclass that logs every write with an annotation, so a run can
produce a "ROM map" of which bytes were patched and why.
"""

import json

from .rom_writer import RomWriter


def _format_value(data: bytes) -> str:
    if len(data) <= 32:
        return data.hex(" ").upper()
    return f"{data[:32].hex(' ').upper()}... ({len(data)} bytes)"


class InstrumentedRomWriter(RomWriter):
    """
    RomWriter that records all write operations with annotations.

    Usage:
        rom = InstrumentedRomWriter("game.gba", "hack.gba")
        rom.open()
        rom.annotate("title graphic pointer").write_at(0x1234, pointer)
        rom.close()
        rom.write_trace("write_trace.json")
    """

    def __init__(self, rom_path: str, output_path: str):
        """
        Load source ROM with instrumentation.

        Args:
            rom_path: Source ROM file
            output_path: Output ROM file
        """
        super().__init__(rom_path, output_path)
        self._pending_annotation: str | None = None
        self._trace: list[dict] = []

    def annotate(self, description: str) -> "InstrumentedRomWriter":
        """
        Annotate the next write operation.

        Args:
            description: Human-readable description of the operation

        Returns:
            self (for method chaining)
        """
        self._pending_annotation = description
        return self

    def _log_write(self, position: int, data: bytes):
        """Log a write operation to the trace."""
        self._trace.append(
            {
                "type": "write",
                "annotation": self._pending_annotation or "[no annotation]",
                "offset": position,
                "offset_hex": f"${position:06X}",
                "length": len(data),
                "value_hex": _format_value(data),
            }
        )
        self._pending_annotation = None

    def write_at(self, position: int, data: bytes):
        """Write bytes at an absolute position with logging."""
        self._log_write(position, data)
        super().write_at(position, data)

    def get_trace(self) -> list[dict]:
        """Get the list of logged operations."""
        return self._trace

    def write_trace(self, path: str):
        """
        Write trace to JSON file.

        Args:
            path: Output file path
        """
        with open(path, "w") as f:
            json.dump({"entries": self._trace}, f, indent=2)
