"""
LBX CLI — inspect and unpack LBX archives.

Commands:
  lbx info     - Show archive type and entry count
  lbx list     - List entries with names, comments and offsets
  lbx check    - Validate entry offsets against the file size
  lbx extract  - Write raw entry payloads to a directory
  lbx text     - Print the text of the first entry
  lbx palette  - Load the external palette, optionally render it as PNG
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lbx import LBX_EXTENSION, __version__
from lbx.config import load_config


def _load(args: argparse.Namespace):
    """Load the archive named on the command line or exit with status 1."""
    from lbx.archive import LBXFile

    lbx = LBXFile(max_size=args.config["max_file_size"])
    ok, reason = lbx.load(args.path)
    if not ok:
        print(f"Error: {reason}", file=sys.stderr)
        sys.exit(1)
    return lbx


def _safe_name(name: str) -> str:
    """Filesystem-safe version of a sanitized entry name."""
    cleaned = "_".join(name.split())
    return cleaned.replace(".", "_").replace(",", "_") or "entry"


def cmd_info(args: argparse.Namespace) -> None:
    """Show archive type and entry count."""
    lbx = _load(args)
    print(f"{args.path}")
    print(f"  type:    {lbx.file_type.name}")
    print(f"  entries: {len(lbx.entries)}")
    print(f"  size:    {len(lbx.raw)} bytes")


def cmd_list(args: argparse.Namespace) -> None:
    """List entries in table order."""
    lbx = _load(args)
    if not lbx.entries:
        print("Archive is empty.")
        return

    print(f"{len(lbx.entries)} entr{'y' if len(lbx.entries) == 1 else 'ies'}\n")
    for entry in lbx.entries:
        line = f"  {entry.index:4d}  {entry.name:<8}"
        if entry.comment.strip():
            line += f"  {entry.comment:<24}"
        line += f"  {entry.start:>10}  {entry.end:>10}  {entry.size:>8}"
        print(line)


def cmd_check(args: argparse.Namespace) -> None:
    """Validate entry offsets. Exit 1 if any entry is out of bounds."""
    lbx = _load(args)
    problems = lbx.container.check_bounds()
    if not problems:
        print(f"OK: {args.path} ({len(lbx.entries)} entries within bounds)")
        return
    for problem in problems:
        print(f"FAIL: {problem}")
    sys.exit(1)


def cmd_extract(args: argparse.Namespace) -> None:
    """Write raw entry payloads to files."""
    lbx = _load(args)
    outdir = Path(args.output)
    if ".." in outdir.parts:
        print("Error: Output path must not contain '..' (path traversal)", file=sys.stderr)
        sys.exit(1)

    if args.index is not None:
        entry = lbx.container.get_entry(args.index)
        if entry is None:
            print(f"Error: No entry {args.index} (archive has {len(lbx.entries)})", file=sys.stderr)
            sys.exit(1)
        selected = [entry]
    else:
        selected = lbx.entries

    outdir.mkdir(parents=True, exist_ok=True)
    for entry in selected:
        data = entry.payload(lbx.container)
        dest = outdir / f"{entry.index:03d}_{_safe_name(entry.name)}.bin"
        dest.write_bytes(data)
        print(f"  {dest} ({len(data)} bytes)")
    print(f"Extracted {len(selected)} entr{'y' if len(selected) == 1 else 'ies'} -> {outdir}")


def cmd_text(args: argparse.Namespace) -> None:
    """Print the text of the first entry."""
    lbx = _load(args)
    print(lbx.get_text())


def cmd_palette(args: argparse.Namespace) -> None:
    """Load the external palette and show or render it."""
    from lbx.archive import LBXFile

    source = args.source or args.config.get("palette_file")
    if not source:
        print(
            "Error: No palette source. Pass a file or set palette_file / LBX_PALETTE.",
            file=sys.stderr,
        )
        sys.exit(1)

    ok, reason = LBXFile.load_external_palette(source)
    if not ok:
        print(f"Error: {reason}", file=sys.stderr)
        sys.exit(1)

    palette = LBXFile.external_palette()
    print(f"Loaded palette from {source} ({len(palette)} colours)")
    for i in range(0, min(len(palette), args.show)):
        r, g, b = palette[i]
        print(f"  {i:3d}  #{r:02x}{g:02x}{b:02x}")

    if args.png:
        try:
            path = palette.render(args.png)
        except ImportError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Rendered swatch -> {path}")


def _setup_logging(verbose: bool, level_name: str) -> None:
    level = logging.DEBUG if verbose else getattr(logging, str(level_name).upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="lbx",
        description="Inspect and unpack LBX archives",
    )
    parser.add_argument("--version", action="version", version=f"lbx {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", dest="config_path", help="Path to config.toml")
    sub = parser.add_subparsers(dest="command")

    p_info = sub.add_parser("info", help="Show archive type and entry count")
    p_info.add_argument("path", help=f"Path to {LBX_EXTENSION} file")

    p_list = sub.add_parser("list", help="List entries")
    p_list.add_argument("path", help=f"Path to {LBX_EXTENSION} file")

    p_check = sub.add_parser("check", help="Validate entry offsets")
    p_check.add_argument("path", help=f"Path to {LBX_EXTENSION} file")

    p_extract = sub.add_parser("extract", help="Write raw entry payloads to files")
    p_extract.add_argument("path", help=f"Path to {LBX_EXTENSION} file")
    p_extract.add_argument("-o", "--output", default=".", help="Output directory")
    p_extract.add_argument("--index", type=int, help="Only extract this entry")

    p_text = sub.add_parser("text", help="Print the first entry's text")
    p_text.add_argument("path", help=f"Path to {LBX_EXTENSION} file")

    p_pal = sub.add_parser("palette", help="Load the external palette")
    p_pal.add_argument("source", nargs="?", help="Palette source file (default: config palette_file)")
    p_pal.add_argument("--png", help="Render a swatch image to this path")
    p_pal.add_argument("--show", type=int, default=16, help="Number of colours to print")

    args = parser.parse_args(argv)

    if not args.command:
        print("LBX toolkit — inspect and unpack LBX archives")
        print()
        print("Usage:")
        print("  lbx info FILE.LBX")
        print("  lbx list FILE.LBX")
        print("  lbx check FILE.LBX")
        print("  lbx extract FILE.LBX -o DIR [--index N]")
        print("  lbx text FILE.LBX")
        print("  lbx palette [FONTS.LBX] [--png swatch.png]")
        print()
        print("Run 'lbx <command> --help' for details on any command.")
        sys.exit(0)

    args.config = load_config(Path(args.config_path) if args.config_path else None)
    _setup_logging(args.verbose, args.config["log_level"])

    commands = {
        "info": cmd_info,
        "list": cmd_list,
        "check": cmd_check,
        "extract": cmd_extract,
        "text": cmd_text,
        "palette": cmd_palette,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
