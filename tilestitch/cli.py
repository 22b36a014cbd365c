#!/usr/bin/env python3
"""
Atlas stitcher.

Combines every PNG (or TARGA) file in a folder into a single PNG atlas laid out
on a grid. TARGA inputs are first converted to PNG in a scratch directory.

Usage:
    tilestitch path/to/tiles -o seamless-background.png
    tilestitch path/to/Background --format tga -o black-mesa-background.png

Layouts:
    fixed-grid   uniform cells the size of the first image, --columns per row
    packed-grid  ceil(sqrt(n)) columns, rows as tall as their tallest image
"""

from __future__ import annotations

import argparse
import locale
import sys
from pathlib import Path
from typing import List, Optional

from tilestitch import console
from tilestitch.config import (
    DEFAULT_BACKGROUND,
    DEFAULT_COLUMNS,
    DEFAULT_PADDING,
    DEFAULT_SCRATCH_DIR,
    INPUT_FORMATS,
    LAYOUTS,
    StitchConfig,
)
from tilestitch.errors import StitchError
from tilestitch.pipeline import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tilestitch",
        description="Combine a folder of PNG or TARGA images into one grid atlas.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("source_dir", type=Path, help="Folder holding the source images (not searched recursively).")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("combined.png"),
        help="PNG file to write; replaced if it already exists.",
    )
    parser.add_argument(
        "--format",
        dest="input_format",
        choices=sorted(INPUT_FORMATS),
        default="png",
        help="Source image format. 'tga' converts to PNG before stitching.",
    )
    parser.add_argument(
        "--layout",
        choices=LAYOUTS,
        default=None,
        help="Layout strategy (default: fixed-grid for png, packed-grid for tga).",
    )
    parser.add_argument("--columns", type=int, default=DEFAULT_COLUMNS, help="Columns for the fixed-grid layout.")
    parser.add_argument("--padding", type=int, default=DEFAULT_PADDING, help="Pixels between packed-grid cells.")
    parser.add_argument(
        "--background",
        default=DEFAULT_BACKGROUND,
        help="Canvas colour, any Pillow colour string (e.g. '#000000', 'white', '#00000000').",
    )
    parser.add_argument(
        "--scratch-dir",
        type=Path,
        default=DEFAULT_SCRATCH_DIR,
        help="Where converted TARGA files are written. Never cleaned automatically.",
    )
    parser.add_argument("--metadata", type=Path, default=None, help="Also write tile positions to this JSON file.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail the run on the first unreadable image instead of skipping it.",
    )
    parser.add_argument("--workers", type=int, default=None, help="Thread count for per-file work.")
    parser.add_argument("--quiet", action="store_true", help="Only print warnings and errors.")
    return parser


def config_from_args(args: argparse.Namespace) -> StitchConfig:
    return StitchConfig(
        source_dir=args.source_dir,
        output_path=args.output,
        input_format=args.input_format,
        layout=args.layout,
        columns=args.columns,
        padding=args.padding,
        background=args.background,
        scratch_dir=args.scratch_dir,
        metadata_path=args.metadata,
        strict=args.strict,
        workers=args.workers,
        quiet=args.quiet,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    # Sort file names the way the user's locale orders them.
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        console.warn(f"Unsupported locale, sorting names with the C collation: {exc}")

    try:
        run(config)
    except StitchError as exc:
        console.fail(f"{exc.stage.capitalize()} failed: {exc}")
        return 1

    console.info("✓ Process completed successfully!", config.quiet)
    return 0


if __name__ == "__main__":
    sys.exit(main())
