"""Command line interface converting an SVG file into Desmos conic equations."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from svgconic.common import (
    DEFAULT_INPUT_FILE,
    DEFAULT_MAX_SUBDIVISIONS,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_SCALE,
    DEFAULT_TOLERANCE,
    ConversionError,
    InvalidSegmentPolicy,
)
from svgconic.converter import SvgConicConverter
from svgconic.settings import ConversionSettings

logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the svg-conic argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="svg-conic",
        description="Convert the paths of an SVG file into restricted conic equations for Desmos.",
    )
    parser.add_argument(
        "input", nargs="?", default=DEFAULT_INPUT_FILE, help=f"SVG input file (default: {DEFAULT_INPUT_FILE})"
    )
    parser.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT_FILE, help=f"Equations output file (default: {DEFAULT_OUTPUT_FILE})"
    )
    parser.add_argument(
        "--scale", type=float, default=DEFAULT_SCALE, help=f"Uniform scale factor (default: {DEFAULT_SCALE:g})"
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=DEFAULT_TOLERANCE,
        help=f"Maximum deviation when replacing cubic by quadratic curves (default: {DEFAULT_TOLERANCE:g})",
    )
    parser.add_argument(
        "--max-subdivisions",
        type=int,
        default=DEFAULT_MAX_SUBDIVISIONS,
        help=f"Maximum number of quadratic pieces per cubic curve (default: {DEFAULT_MAX_SUBDIVISIONS})",
    )
    parser.add_argument("--no-flip", action="store_true", help="Keep the SVG y-axis orientation (pointing down)")
    parser.add_argument(
        "--strict", action="store_true", help="Fail on malformed paths and segments instead of skipping them"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    return parser


def settings_from_args(args: argparse.Namespace) -> ConversionSettings:
    """Create validated ConversionSettings from parsed arguments.

    Raises:
        ValueError: If an argument is out of range.
    """
    settings = ConversionSettings(
        scale=args.scale,
        flip_y=not args.no_flip,
        tolerance=args.tolerance,
        max_subdivisions=args.max_subdivisions,
        invalid_segment_policy=InvalidSegmentPolicy.RAISE if args.strict else InvalidSegmentPolicy.SKIP,
    )
    settings.validate()
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    """Main"""
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = settings_from_args(args)
    except ValueError as e:
        parser.error(str(e))
    logger.debug("Converting %s to %s with %s", args.input, args.output, settings)

    converter = SvgConicConverter(settings, strict_tokenize=args.strict)
    try:
        result = converter.convert_file_to_file(args.input, args.output)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ConversionError as e:
        print(f"Error: conversion failed: {e}", file=sys.stderr)
        return 1

    print(f"Generated {len(result.equations)} equations.")
    print(f"Took {result.elapsed:.3f}s.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
