"""
Project file and pixel format definitions.
"""

from .pixel_formats import BitmapFormat, ColorFormat
from .project import (
    Compression,
    ConfigError,
    ConfigParseError,
    ConfigValueError,
    ImageDescriptor,
    Platform,
    ProjectDescriptor,
    load_project,
    parse_project,
)

__all__ = [
    "BitmapFormat",
    "ColorFormat",
    "Compression",
    "Platform",
    "ImageDescriptor",
    "ProjectDescriptor",
    "ConfigError",
    "ConfigParseError",
    "ConfigValueError",
    "load_project",
    "parse_project",
]
