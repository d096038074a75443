"""
gfxinject - Patcher

Runs a project: copies the source ROM to the output, then for each image
in declaration order packs its tiles and palette, frames/compresses the
tile data, writes it at the image's target and patches the graphic
pointer and palette.

Images are processed strictly in order and overlapping writes are not
detected; a later image overwrites bytes written by an earlier one.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .compressor import lz77_compress
from .framing import frame_payload
from .instrumented_io import InstrumentedRomWriter
from .packing import encode_palette, pack_tiles
from .rom_utils import encode_pointer, resolve_seek
from .rom_writer import RomWriter
from .tiling import build_palette, build_tileset, cut_tiles, load_bitmap
from ..formats.project import ImageDescriptor, ProjectDescriptor

log = logging.getLogger(__name__)

PIXEL_INDEX_OFFSET = 0


@dataclass(frozen=True)
class PreparedImage:
    """Serialized data for one image, ready to write."""

    payload: bytes
    raw_size: int
    palette_data: bytes
    tiles: int
    colors: int


class Patcher:
    """
    Injects every image of a project into a copy of a ROM.

    Usage:
        project = load_project("project.toml")
        stats = Patcher(project).process("game.gba")
    """

    def __init__(
        self,
        project: ProjectDescriptor,
        compress: Callable[[bytes], bytes] = lz77_compress,
    ):
        """
        Args:
            project: Fully resolved project
            compress: Compressor used when the project asks for LZ77
        """
        self.project = project
        self.compress = compress
        self.rom_writer: RomWriter | None = None

    def prepare_image(self, image: ImageDescriptor) -> PreparedImage:
        """
        Extract, pack and frame one image.

        Raises:
            FileNotFoundError: If the bitmap does not exist
            PaletteOverflowError: If the bitmap has too many colors
            FramingError: If the LZ77 header cannot be computed
        """
        bitmap = load_bitmap(image.filename)
        tiles = cut_tiles(bitmap)
        palette = build_palette(tiles, image.palette_format, image.palette_size)
        # No tile deduplication: output keeps one tile per grid cell
        tileset = build_tileset(tiles, palette, deduplicate=False)

        raw = pack_tiles(
            (tile.pixels for tile in tileset), image.format.bits, PIXEL_INDEX_OFFSET
        )
        palette_data = encode_palette(
            palette.colors, image.palette_size, image.palette_format.bits
        )
        payload = frame_payload(
            raw,
            self.project.compression,
            self.project.platform,
            image.palette_size,
            compress=self.compress,
        )

        if 0 < image.graphic_size < len(payload):
            log.warning(
                "%s: graphic data is %d bytes, larger than declared graphic_size %d",
                image.name,
                len(payload),
                image.graphic_size,
            )

        return PreparedImage(
            payload=payload,
            raw_size=len(raw),
            palette_data=palette_data,
            tiles=len(tileset),
            colors=len(palette),
        )

    def _annotate(self, rom: RomWriter, description: str):
        if isinstance(rom, InstrumentedRomWriter):
            rom.annotate(description)

    def inject_image(self, rom: RomWriter, image: ImageDescriptor) -> dict | None:
        """
        Write one image's graphic data, graphic pointer and palette.

        Args:
            rom: Open RomWriter
            image: Image to inject

        Returns:
            Per-image statistics, or None if the image was skipped
        """
        if image.format is None or image.palette_format is None:
            log.warning(
                "%s: skipped, target format or palette format not recognized",
                image.name,
            )
            return None

        prepared = self.prepare_image(image)

        origin, offset = resolve_seek(image.target)
        position = rom.seek(origin, offset)

        self._annotate(rom, f"{image.name} graphic data")
        rom.write_at(position, prepared.payload)

        self._annotate(rom, f"{image.name} graphic pointer")
        rom.write_at(image.graphic, encode_pointer(position))

        self._annotate(rom, f"{image.name} palette")
        rom.write_at(image.palette, prepared.palette_data)

        log.debug(
            "%s: %d bytes at 0x%06X, pointer at 0x%06X, palette at 0x%06X",
            image.name,
            len(prepared.payload),
            position,
            image.graphic,
            image.palette,
        )

        return {
            "name": image.name,
            "position": position,
            "payload_bytes": len(prepared.payload),
            "raw_bytes": prepared.raw_size,
            "palette_bytes": len(prepared.palette_data),
            "tiles": prepared.tiles,
            "colors": prepared.colors,
        }

    def process(
        self,
        rom_path: str | Path,
        output_path: str | Path | None = None,
        trace_io: bool = False,
    ) -> dict:
        """
        Run the whole project against a source ROM.

        Args:
            rom_path: Source ROM file (never modified)
            output_path: Output ROM (default: the project's target)
            trace_io: Record every write (see InstrumentedRomWriter)

        Returns:
            Statistics dictionary with per-image write info

        Raises:
            FileNotFoundError: If the ROM or a bitmap is missing
            OSError: If writing the output fails
        """
        if output_path is None:
            output_path = self.project.target

        writer_class = InstrumentedRomWriter if trace_io else RomWriter
        self.rom_writer = writer_class(str(rom_path), str(output_path))

        images = []
        with self.rom_writer as rom:
            for image in self.project.images:
                stats = self.inject_image(rom, image)
                if stats is not None:
                    images.append(stats)

        return {
            "project": self.project.name,
            "target": str(output_path),
            "images": images,
        }
