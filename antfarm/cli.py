"""
antfarm/cli.py
──────────────
Command-line entry point.

    antfarm colony.txt
    antfarm colony.txt --log-level DEBUG
    python -m antfarm colony.txt --lenient

Output contract
────────────────
stdout:
  • invalid input    → one "ERROR: invalid data format. <reason>" line, exit 1.
  • no schedule      → the input echoed, a blank line, then one
                       "<strategy> strategy failed" line per failed strategy,
                       exit 1.
  • success          → the input echoed, a blank line, then one line per turn,
                       exit 0.

stderr: log records only. Nothing but the contract above goes to stdout.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from antfarm.control_plane.planner import ScheduleUnavailableError, plan_moves
from antfarm.control_plane.validator import InvalidFormatError, load_colony

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV: str = "ANTFARM_LOG_LEVEL"
"""Environment variable read when --log-level is not given."""

DEFAULT_LOG_LEVEL: str = "WARNING"

LOG_FORMAT: str = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="antfarm",
        description="Plan the fewest-turn movement of ants from ##start to ##end.",
    )
    parser.add_argument("path", metavar="FILE", help="Colony description file")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Log verbosity on stderr (default: ${LOG_LEVEL_ENV} or {DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Print the surviving strategy's schedule when only one strategy fails",
    )
    return parser


def configure_logging(level: Optional[str] = None) -> None:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        spec = load_colony(args.path)
    except OSError as e:
        print(f"ERROR: cannot read {args.path}: {e.strerror or e}")
        return 1
    except InvalidFormatError as e:
        print(e.diagnostic)
        return 1

    print("\n".join(spec.source_lines))
    print()

    try:
        result = plan_moves(spec, require_both=not args.lenient)
    except ScheduleUnavailableError as e:
        for message in e.messages:
            print(message)
        return 1

    for line in result.lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
