#!/usr/bin/env python3
"""
bmpfilter command line.

Usage:
    bmpfilter <image> [--filter NAME] [--strength N] [--width N] [--output PATH]

Anything not given on the command line (filter, strength, ascii width) is
asked for on the prompt until a valid answer is entered.
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional

from .config import CONVERTERS, DEFAULT_CONVERTER, MAX_STRENGTH, MIN_STRENGTH
from .errors import BmpFilterError, InvalidFilterSelection
from .filter_spec import FilterKind, FilterSpec, check_ascii_width, check_strength
from .pipeline import FilterPipeline
from .pixel_grid import PixelGrid
from .setup_logging import setup_logging

logger = logging.getLogger(__name__)

Prompt = Callable[[str], str]


# ------------------ Interactive prompts ------------------

def ask_filter(prompt: Prompt = input) -> FilterKind:
    kinds = list(FilterKind)
    while True:
        print(f"Select a filter type (0 - {len(kinds) - 1}):")
        for i, kind in enumerate(kinds):
            print(f"{i}: {kind.label}")
        try:
            return FilterKind.parse(prompt("> "))
        except InvalidFilterSelection as exc:
            print(f"Error: {exc}", file=sys.stderr)


def ask_int(question: str, check: Callable[[int], int], prompt: Prompt = input) -> int:
    while True:
        answer = prompt(question).strip()
        try:
            return check(int(answer))
        except ValueError as exc:
            # InvalidFilterSelection is a ValueError too
            message = str(exc) if isinstance(exc, InvalidFilterSelection) else f"Not a number: {answer!r}"
            print(f"Error: {message}", file=sys.stderr)


def ask_strength(prompt: Prompt = input) -> int:
    return ask_int(f"Enter the filter strength ({MIN_STRENGTH} - {MAX_STRENGTH}): ",
                   check_strength, prompt)


def ask_width(grid: PixelGrid, prompt: Prompt = input) -> int:
    limit = min(grid.width, grid.height)
    return ask_int(f"Enter image size (1 - {limit}): ",
                   lambda w: check_ascii_width(w, grid), prompt)


# ------------------ Command line ------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bmpfilter",
        description="Apply a filter to a 24-bit bitmap (other formats are converted first).",
    )
    parser.add_argument("input", help="Image file to filter")
    parser.add_argument("-f", "--filter", dest="filter_name",
                        help="Filter name or menu number: "
                             + ", ".join(f"{i}={k.key}" for i, k in enumerate(FilterKind)))
    parser.add_argument("-s", "--strength", type=int,
                        help=f"Strength {MIN_STRENGTH}-{MAX_STRENGTH} for sepia, blur, sharpen, noise-reduction")
    parser.add_argument("-w", "--width", type=int, help="Text width for ascii-art")
    parser.add_argument("-o", "--output", help="Output path (default: <name>_<Filter>.bmp/.txt)")
    parser.add_argument("--converter", choices=CONVERTERS, default=DEFAULT_CONVERTER,
                        help="Backend used when the input is not a 24-bit bitmap")
    parser.add_argument("--saturating-sharpen", action="store_true",
                        help="Use signed, saturating arithmetic for the sharpen mask")
    parser.add_argument("--preview", help="Save a before/after comparison PNG here")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", help="Also log to this rotating file")
    return parser


def build_spec(args, grid: PixelGrid, prompt: Prompt = input) -> FilterSpec:
    kind = FilterKind.parse(args.filter_name) if args.filter_name is not None else ask_filter(prompt)

    strength = None
    if kind.has_strength:
        strength = check_strength(args.strength) if args.strength is not None else ask_strength(prompt)

    width = None
    if kind is FilterKind.ASCII_ART:
        width = check_ascii_width(args.width, grid) if args.width is not None else ask_width(grid, prompt)

    return FilterSpec(kind, strength=strength, ascii_width=width,
                      wraparound_sharpen=not args.saturating_sharpen)


def main(argv: Optional[List[str]] = None, prompt: Prompt = input) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging(args.log_level, args.log_file)
    except ValueError as exc:
        print(f"Error: {exc}: {args.log_level}", file=sys.stderr)
        return 1

    pipeline = FilterPipeline(converter=args.converter)
    try:
        image = pipeline.load(args.input)
        spec = build_spec(args, image.grid, prompt)
        out_path = pipeline.process(image, spec, args.output, args.preview)
    except BmpFilterError as exc:
        logger.error(f"{type(exc).__name__}: {exc}")
        return 1
    except OSError as exc:
        logger.error(f"Could not write output: {exc}")
        return 1
    except EOFError:
        logger.error("Input ended before a selection was made")
        return 1

    print(f"Output file created: {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
