#!/usr/bin/env python3
"""
gfxinject - command line interface

Injects the images listed in a project file into a copy of a ROM.

  gfxinject project.toml game.gba
  gfxinject project.toml game.gba -o hack.gba --trace-io --verbose
"""

import argparse
import logging
import sys
from pathlib import Path

from .core.patcher import Patcher
from .formats.project import ConfigError, ConfigParseError, load_project


class UsageParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageParser(
        prog="gfxinject",
        description="Inject tile graphics and palettes into a ROM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Patch game.gba using the images listed in project.toml
  gfxinject project.toml game.gba

  # Write to a different file and dump a write trace next to it
  gfxinject project.toml game.gba -o hack.gba --trace-io
""",
    )
    parser.add_argument("project", help="Project file (TOML)")
    parser.add_argument("rom_file", help="Source ROM file (read-only)")
    parser.add_argument(
        "-o",
        "--output",
        help="Output ROM file (default: the project's target)",
        default=None,
    )
    parser.add_argument(
        "--trace-io",
        action="store_true",
        help="Output ROM write trace to write_trace.json",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show per-image statistics"
    )
    return parser


def print_stats(stats: dict):
    print("Per-image statistics:")
    for image in stats["images"]:
        print(
            f"  {image['name']}: {image['tiles']} tiles, {image['colors']} colors, "
            f"{image['raw_bytes']} -> {image['payload_bytes']} bytes "
            f"at 0x{image['position']:06X}, palette {image['palette_bytes']} bytes"
        )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        project = load_project(args.project)
    except ConfigParseError as e:
        print(f"Error parsing {args.project}:")
        for error in e.errors:
            print(f"{error.line}:{error.column}: {error.message}")
        return 1
    except FileNotFoundError as e:
        print(f"Error: project file not found: {e.filename}")
        return 1
    except ConfigError as e:
        print(f"Error: {args.project}: {e}")
        return 1

    rom_path = Path(args.rom_file)
    if not rom_path.exists():
        print(f"Error: ROM file not found: {rom_path}")
        return 1

    output_path = args.output if args.output else project.target

    print(f"Loading ROM: {rom_path}")
    print(f"Project: {project.name or args.project} ({len(project.images)} images)")

    patcher = Patcher(project)
    try:
        stats = patcher.process(rom_path, output_path, trace_io=args.trace_io)
    except FileNotFoundError as e:
        print(f"Error: file not found: {e.filename}")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    except OSError as e:
        print(f"Error: {e.filename or output_path}: {e.strerror or e}")
        return 1

    if args.verbose:
        print()
        print_stats(stats)

    print(f"Wrote modified ROM to: {output_path}")

    if args.trace_io and patcher.rom_writer is not None:
        trace_path = str(Path(output_path).parent / "write_trace.json")
        patcher.rom_writer.write_trace(trace_path)
        print(f"Wrote write trace ({len(patcher.rom_writer.get_trace())} entries) to: {trace_path}")

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
