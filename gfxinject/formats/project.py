"""
gfxinject - Project Configuration

Loads a TOML project file into immutable descriptors.

A project names the output ROM, the compression mode, the target system
and an ordered list of [[image]] tables. Any image key missing from an
image table is inherited from the top-level key of the same name; that
resolution happens here, once.
"""

import logging
import re
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from .pixel_formats import (
    BitmapFormat,
    ColorFormat,
    parse_bitmap_format,
    parse_color_format,
)

log = logging.getLogger(__name__)


class Compression(Enum):
    NONE = "none"
    LZ77 = "lz77"


class Platform(Enum):
    GAMEBOY = "gb"
    GAMEBOY_ADVANCE = "gba"


# Names accepted for the "system" key, compared case-insensitively
PLATFORM_NAMES = {
    "gba": Platform.GAMEBOY_ADVANCE,
    "gameboy advance": Platform.GAMEBOY_ADVANCE,
    "game boy advance": Platform.GAMEBOY_ADVANCE,
    "gameboyadvance": Platform.GAMEBOY_ADVANCE,
    "gb": Platform.GAMEBOY,
    "gameboy": Platform.GAMEBOY,
    "game boy": Platform.GAMEBOY,
}

IMAGE_KEYS = (
    "name",
    "filename",
    "format",
    "palette_format",
    "graphic",
    "graphic_size",
    "palette",
    "palette_size",
    "target",
)
# "name" and "target" mean something else at the top level
INHERITED_KEYS = tuple(key for key in IMAGE_KEYS if key not in ("name", "target"))
INTEGER_KEYS = ("graphic", "graphic_size", "palette", "palette_size", "target")


class ConfigError(Exception):
    """Raised when a project file cannot be turned into a project."""

    pass


@dataclass(frozen=True)
class ConfigSyntaxError:
    """A single syntax error with its position in the project file."""

    line: int
    column: int
    message: str


class ConfigParseError(ConfigError):
    """Raised when the project file is not valid TOML."""

    def __init__(self, path: str, errors: list[ConfigSyntaxError]):
        self.path = path
        self.errors = errors
        super().__init__(f"Error parsing {path}")


class ConfigValueError(ConfigError):
    """Raised in strict mode for an unrecognized format or system tag."""

    pass


@dataclass(frozen=True)
class ImageDescriptor:
    """One image to inject, with every field resolved."""

    name: str
    filename: Path
    format: BitmapFormat | None
    palette_format: ColorFormat | None
    graphic: int
    graphic_size: int
    palette: int
    palette_size: int
    target: int


@dataclass(frozen=True)
class ProjectDescriptor:
    """A set of image insertions into one output ROM."""

    name: str
    target: Path
    compression: Compression
    platform: Platform
    images: tuple[ImageDescriptor, ...]


_TOML_POSITION = re.compile(r"\(at line (\d+), column (\d+)\)")


def _syntax_error(exc: tomllib.TOMLDecodeError) -> ConfigSyntaxError:
    """Extract line/column from a TOML decode error."""
    line = getattr(exc, "lineno", None)
    column = getattr(exc, "colno", None)
    message = getattr(exc, "msg", None) or str(exc)

    if line is None or column is None:
        match = _TOML_POSITION.search(str(exc))
        if match:
            line, column = int(match.group(1)), int(match.group(2))
        else:
            line, column = 0, 0
    message = _TOML_POSITION.sub("", message).strip()

    return ConfigSyntaxError(line, column, message)


def _unrecognized(message: str, strict: bool):
    if strict:
        raise ConfigValueError(message)
    log.warning(message)


def _parse_compression(value: Any, strict: bool) -> Compression:
    if value is None:
        return Compression.NONE
    if str(value).lower() == "lz77":
        return Compression.LZ77
    _unrecognized(f"unrecognized compression {value!r}; writing uncompressed", strict)
    return Compression.NONE


def _parse_platform(value: Any, strict: bool) -> Platform:
    if value is None:
        return Platform.GAMEBOY
    platform = PLATFORM_NAMES.get(str(value).strip().lower())
    if platform is None:
        _unrecognized(f"unrecognized system {value!r}; assuming Game Boy", strict)
        return Platform.GAMEBOY
    return platform


def _resolve_image(
    index: int, image: dict, defaults: dict, base_dir: Path, strict: bool
) -> ImageDescriptor:
    """Merge one [[image]] table with the project defaults."""
    if not isinstance(image, dict):
        raise ConfigError(f"image #{index + 1} is not a table")

    merged = {
        key: image.get(key, defaults.get(key) if key in INHERITED_KEYS else None)
        for key in IMAGE_KEYS
    }
    label = merged["name"] or f"image #{index + 1}"

    if merged["filename"] is None:
        raise ConfigError(f"{label}: missing required key 'filename'")
    filename = base_dir / str(merged["filename"])

    if merged["name"] is None:
        merged["name"] = filename.stem
    if merged["graphic_size"] is None:
        merged["graphic_size"] = 0

    for key in INTEGER_KEYS:
        value = merged[key]
        if value is None:
            raise ConfigError(f"{label}: missing required key '{key}'")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{label}: '{key}' must be an integer, got {value!r}")

    bitmap_format = None
    if merged["format"] is not None:
        bitmap_format = parse_bitmap_format(str(merged["format"]))
    if bitmap_format is None:
        _unrecognized(
            f"{label}: unrecognized target format {merged['format']!r}; ignoring",
            strict,
        )

    color_format = None
    if merged["palette_format"] is not None:
        color_format = parse_color_format(str(merged["palette_format"]))
    if color_format is None:
        _unrecognized(
            f"{label}: unrecognized palette format "
            f"{merged['palette_format']!r}; ignoring",
            strict,
        )

    return ImageDescriptor(
        name=str(merged["name"]),
        filename=filename,
        format=bitmap_format,
        palette_format=color_format,
        graphic=merged["graphic"],
        graphic_size=merged["graphic_size"],
        palette=merged["palette"],
        palette_size=merged["palette_size"],
        target=merged["target"],
    )


def parse_project(
    cfg: dict, base_dir: str | Path = ".", strict: bool = False
) -> ProjectDescriptor:
    """
    Build a ProjectDescriptor from an already-parsed TOML document.

    Args:
        cfg: Parsed TOML document
        base_dir: Directory relative paths are resolved against
        strict: Raise ConfigValueError for unrecognized tags instead of
            logging a warning

    Returns:
        Fully resolved ProjectDescriptor

    Raises:
        ConfigError: If a required key is missing or has the wrong type
        ConfigValueError: In strict mode, for unrecognized tags
    """
    base_dir = Path(base_dir)

    if "target" not in cfg:
        raise ConfigError("missing required key 'target'")

    images = cfg.get("image", [])
    if not isinstance(images, list):
        raise ConfigError("'image' must be an array of tables ([[image]])")
    if not images:
        log.warning("project defines no [[image]] tables; output will equal the source")

    return ProjectDescriptor(
        name=str(cfg.get("name", "")),
        target=base_dir / str(cfg["target"]),
        compression=_parse_compression(cfg.get("compress"), strict),
        platform=_parse_platform(cfg.get("system"), strict),
        images=tuple(
            _resolve_image(i, image, cfg, base_dir, strict)
            for i, image in enumerate(images)
        ),
    )


def load_project(path: str | Path, strict: bool = False) -> ProjectDescriptor:
    """
    Load a project file.

    Relative bitmap and output paths are resolved against the directory
    containing the project file.

    Raises:
        FileNotFoundError: If the project file does not exist
        ConfigParseError: If the file is not valid TOML
        ConfigError: If the document is missing required keys
    """
    path = Path(path)
    with open(path, "rb") as f:
        try:
            cfg = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(str(path), [_syntax_error(e)]) from e

    return parse_project(cfg, base_dir=path.parent, strict=strict)
