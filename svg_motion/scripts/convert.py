#!/usr/bin/env python3
"""
Convert Script.

Convert an SVG drawing into a G-code motion program for the board robot.

Usage:
    svg-motion drawing.svg drawing.gcode
    svg-motion drawing.svg --config my_robot.yaml > drawing.gcode
    svg-motion drawing.svg --dry-run --log-level DEBUG
    python -m svg_motion.scripts.convert drawing.svg out.gcode --json-logs

Without OUT the program is printed to stdout.  ``--dry-run`` runs the
whole pipeline and prints a summary instead of the program.
"""

from __future__ import annotations

import argparse
import logging
import sys

from svg_motion.configs.loader import ConfigError, load_config
from svg_motion.svg.document import DocumentError
from svg_motion.translator import Converter
from svg_motion.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svg-motion",
        description="Convert an SVG drawing into a robot motion program",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("svg", type=str, help="Input SVG file")
    parser.add_argument(
        "out",
        type=str,
        nargs="?",
        help="Output G-code file (default: stdout)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Configuration file path (default: bundled converter.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the pipeline and print a summary, write nothing",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file, json=args.json_logs)

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        logger.error("Error loading config: %s", e)
        return 1

    converter = Converter(config)

    if args.dry_run:
        try:
            result = converter.convert(converter.load(args.svg))
        except DocumentError as e:
            logger.error("%s", e)
            return 1
        ops = converter.to_operations(result)
        n_fill = sum(1 for p in result.primitives if p.fill)
        print(f"Viewport:    {result.viewport.width:.3f} x {result.viewport.height:.3f}")
        print(f"Tolerance:   {result.tolerance:.4g} (viewport units)")
        print(f"Primitives:  {len(result.primitives)} ({n_fill} filled)")
        print(f"Fill passes: {len(result.fills)}")
        print(f"Operations:  {len(ops)}")
        return 0

    try:
        program = converter.convert_file(args.svg, args.out)
    except DocumentError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Cannot write %s: %s", args.out, e)
        return 1

    if args.out is None:
        sys.stdout.write(program)
    return 0


if __name__ == "__main__":
    sys.exit(main())
