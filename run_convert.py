#!/usr/bin/env python3
# run_convert.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Command-line interface for converting X-Trace dumps into ShiViz logs

import sys
import argparse
from pathlib import Path
from typing import List, Optional

from xtrace_shiviz.core import SORT_STRATEGIES, write_trace_log
from xtrace_shiviz.exceptions import (
    LogWriteError,
    TraceFormatError,
    TraceReadError,
    UnresolvedParentsError,
)
from xtrace_shiviz.utils.logger import configure_logging, get_logger
from xtrace_shiviz.utils.trace_reader import describe_events, read_trace

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_READ_ERROR = 3
EXIT_FORMAT_ERROR = 4
EXIT_WRITE_ERROR = 5
EXIT_DROPPED = 6


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser for command line interface.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="xtrace-shiviz",
        description="Convert an X-Trace JSON dump into a ShiViz log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_convert.py trace.json trace.shiviz
  python run_convert.py trace.json trace.shiviz -v
  python run_convert.py trace.json trace.shiviz --strategy kahn
  python run_convert.py trace.json trace.shiviz --validate-only

Only the first trace of the input file is converted. Events whose parents
are missing from the trace are dropped with a warning unless
--fail-on-dropped is given.
        """,
    )

    parser.add_argument("trace", type=Path, help="Path to the X-Trace JSON file")
    parser.add_argument("output", type=Path, help="Path of the ShiViz log to write")

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output (overrides --verbose)"
    )

    parser.add_argument(
        "--strategy",
        choices=SORT_STRATEGIES,
        default="scan",
        help="Causal sort strategy (default: scan)",
    )

    parser.add_argument(
        "--fail-on-dropped",
        action="store_true",
        help="Treat events with unresolvable parents as an error",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only decode the trace file, write nothing",
    )

    parser.add_argument(
        "--list-events",
        action="store_true",
        help="Print the decoded events before converting",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the converter.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, debug=args.debug)
    logger = get_logger()

    try:
        trace = read_trace(args.trace)

        if args.list_events:
            print(describe_events(trace))

        if args.validate_only:
            logger.validation_result(
                True, f"Trace {trace.trace_id!r} decoded: {len(trace)} events"
            )
            return EXIT_OK

        write_trace_log(
            trace,
            args.output,
            strategy=args.strategy,
            fail_on_dropped=args.fail_on_dropped,
        )
        return EXIT_OK

    except TraceReadError as e:
        logger.error(f"Trace file error: {e}")
        return EXIT_READ_ERROR

    except TraceFormatError as e:
        logger.error(f"Trace format error: {e}")
        return EXIT_FORMAT_ERROR

    except LogWriteError as e:
        logger.error(f"Output error: {e}")
        return EXIT_WRITE_ERROR

    except UnresolvedParentsError as e:
        logger.error(f"Unresolved parents: {e}")
        return EXIT_DROPPED

    except KeyboardInterrupt:
        logger.error("Conversion interrupted by user")
        return EXIT_UNEXPECTED

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        import traceback

        traceback.print_exc()
        return EXIT_UNEXPECTED


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
