"""
Command-line entry point.

Usage:
    tile-booklet -t 4                       # input/ -> output/booklet_4.pdf
    tile-booklet -t 9 --input scans --name saint_seiya
    tile-booklet -t 1 --no-compress         # skip the Ghostscript pass
    tile-booklet -t 4 --force               # ignore the extraction manifest
    tile-booklet -t 4 --crop 2232x3117+124+129 --min-fragment-bytes 100000

Exit codes:
    0 success
    1 build failure (no fragments, no pages, tool failure)
    2 invalid configuration (reported before any I/O)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tile_booklet import __version__
from tile_booklet.builder import BuilderConfig, BuildError, build_booklet, clean_build
from tile_booklet.builder.layout import SUPPORTED_TILES
from tile_booklet.builder.output import COMPRESSION_TIERS
from tile_booklet.core.models import CropBox
from tile_booklet.extractor import ExtractionConfig
from tile_booklet.extractor.config import DEFAULT_CROP_BOX, DEFAULT_MIN_FRAGMENT_BYTES

logger = logging.getLogger("tile_booklet")

EXIT_OK = 0
EXIT_BUILD_FAILED = 1
EXIT_USAGE = 2


def _crop_geometry(value: str) -> CropBox:
    try:
        return CropBox.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tile-booklet",
        description="Crop scanned pages, split them into tiles, and assemble a tiled PDF booklet.",
    )
    p.add_argument(
        "-t", "--tiles",
        type=int,
        choices=SUPPORTED_TILES,
        required=True,
        help="Tiles per PDF page: 1 (1x1), 4 (2x2) or 9 (3x3).",
    )
    p.add_argument("--input", type=Path, default=Path("input"), help="Directory of source .jpg/.png scans.")
    p.add_argument("--build-dir", type=Path, default=Path("build"), help="Staging directory.")
    p.add_argument("--output-dir", type=Path, default=Path("output"), help="Directory for the final PDF.")
    p.add_argument("--name", default="booklet", help="Base name of the PDF (<name>_<tiles>.pdf).")
    p.add_argument("--quality", type=int, default=85, help="JPEG quality of PDF pages (1-95).")
    p.add_argument(
        "--no-compress",
        dest="compress",
        action="store_false",
        help="Skip the Ghostscript compression pass.",
    )
    p.add_argument(
        "--compress-tier",
        choices=COMPRESSION_TIERS,
        default="screen",
        help="Ghostscript PDFSETTINGS tier for compression.",
    )
    p.add_argument(
        "--crop",
        type=_crop_geometry,
        default=DEFAULT_CROP_BOX,
        metavar="WxH+X+Y",
        help=f"Content region of each scan (default {DEFAULT_CROP_BOX.to_geometry()}).",
    )
    p.add_argument(
        "--min-fragment-bytes",
        type=_non_negative_int,
        default=DEFAULT_MIN_FRAGMENT_BYTES,
        help="Discard fragments whose PNG is smaller than this.",
    )
    p.add_argument(
        "--force",
        action="store_true",
        help="Extract every source again, ignoring the manifest.",
    )
    p.add_argument(
        "--clean",
        action="store_true",
        help="Remove the build directory before running.",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug-level logging.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def config_from_args(args: argparse.Namespace) -> BuilderConfig:
    """
    Build the BuilderConfig for parsed arguments.

    Raises:
        ValueError: If the combination of options is invalid
    """
    extraction = ExtractionConfig(
        crop_box=args.crop,
        min_fragment_bytes=args.min_fragment_bytes,
    )
    return BuilderConfig(
        input_dir=args.input,
        tiles_per_page=args.tiles,
        build_dir=args.build_dir,
        output_dir=args.output_dir,
        name=args.name,
        quality=args.quality,
        compress=args.compress,
        compress_tier=args.compress_tier,
        force_extract=args.force,
        extraction=extraction,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.clean:
        clean_build(config)

    try:
        result = build_booklet(config)
    except BuildError as e:
        logger.error(f"Build failed: {e}")
        return EXIT_BUILD_FAILED

    logger.info(
        f"Generated {result.page_count} pages from {result.fragment_count} fragments: "
        f"{result.output_pdf}"
    )
    logger.info(f'Remove the "{config.build_dir}" folder to clear the cropped images, fragments and pages.')
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
