"""
Itinerary CLI: Command-line interface for document conversion.

    itinerary ./input.txt ./output.txt ./airport-lookup.csv
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from itinerary import __version__
from itinerary.core.context import TransformRequest
from itinerary.core.engine import get_engine
from itinerary.core.errors import LookupMalformedError
from itinerary.ir.enums import TransformStatus
from itinerary.ir.serialization import save
from itinerary.reference.airports import load_airport_lookup

USAGE_BANNER = (
    "itinerary usage:\n"
    "itinerary ./input.txt ./output.txt ./airport-lookup.csv"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="itinerary",
        description="Itinerary Prettifier",
        add_help=False,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"itinerary {__version__}",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="INPUT OUTPUT LOOKUP",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=int(os.environ.get("ITINERARY_WORKERS", "1")),
        help="Threads used for per-line work (default: 1, or ITINERARY_WORKERS env var)",
    )
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Write the JSON conversion result to this path",
    )

    # Logging configuration
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or ITINERARY_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show (pipeline,scan,rewrite,lookup,system). Default: all",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    argv = sys.argv[1:] if argv is None else argv

    if argv and argv[0] in ("-h", "--help"):
        print(USAGE_BANNER)
        return 0

    args = build_parser().parse_args(argv)
    if len(args.paths) != 3:
        print(USAGE_BANNER)
        return 0

    return run_convert(args)


def run_convert(args: argparse.Namespace) -> int:
    """Run the conversion command."""
    from itinerary.core.logging import configure_logging

    channels = None
    if args.log_channel:
        channels = [ch.strip() for ch in args.log_channel.split(",")]

    configure_logging(
        level=args.log_level,
        channels=channels,
        force=True,
    )

    input_path, output_path, lookup_path = (Path(p) for p in args.paths)

    if not input_path.exists():
        print("Input not found")
        return 1

    if not lookup_path.exists():
        print("Airport lookup not found")
        return 1

    try:
        lookup = load_airport_lookup(lookup_path)
    except (LookupMalformedError, OSError) as e:
        print(f"Error reading airport lookup file: {e}")
        return 1

    try:
        # newline="" keeps \r for the whitespace normalizer
        with open(input_path, encoding="utf-8", newline="") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError):
        print("Error reading input file.")
        return 1

    request = TransformRequest(text=text, lookup=lookup, workers=args.workers)
    ctx = get_engine().run(request)

    if args.report:
        save(ctx.to_result(), args.report)

    if ctx.status == TransformStatus.ERROR:
        print(f"Error processing input data: {ctx.error}")
        return 1

    try:
        with open(output_path, "w", encoding="utf-8", newline="") as fh:
            fh.write(ctx.rendered_text)
    except OSError as e:
        print(f"Error writing to output file. {e}")
        return 1

    print("Output file created successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
