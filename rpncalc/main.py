# Command-line entry point for rpncalc.
#
# With no arguments this starts the interactive calculator. --expr evaluates a
# single expression, --serve runs the HTTP service.

import argparse
import logging
import sys
from typing import List, Optional

from .config import configure_logging, load_settings
from .expression import CalculatorError, format_number, parse, render
from .repl import REPL

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rpncalc",
        description="Evaluate arithmetic expressions written with single-space-separated tokens.",
    )
    parser.add_argument(
        "--expr",
        type=str,
        help="Evaluate one expression and exit, e.g. --expr \"( 1 + 2 ) * 3\".",
    )
    parser.add_argument(
        "--rpn",
        action="store_true",
        help="With --expr, print the postfix (RPN) form instead of the value.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP evaluation service.",
    )
    parser.add_argument(
        "--host",
        type=str,
        help="Host for --serve (default: RPNCALC_HOST or 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for --serve (default: RPNCALC_PORT or 8000).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (default: RPNCALC_LOG_LEVEL or WARNING).",
    )
    return parser


def run_once(text: str, show_rpn: bool = False) -> int:
    try:
        expression = parse(text)
        if show_rpn:
            print(render(expression.to_rpn()))
        else:
            print(format_number(expression.evaluate()))
    except CalculatorError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as e:
        parser.error(str(e))
    if args.log_level:
        settings.log_level = args.log_level.upper()
    if args.host:
        settings.host = args.host
    if args.port is not None:
        if not 0 < args.port < 65536:
            parser.error(f"--port must be between 1 and 65535, got {args.port}")
        settings.port = args.port
    configure_logging(settings.log_level)

    if args.expr is not None:
        return run_once(args.expr, show_rpn=args.rpn)

    if args.serve:
        from .api import serve
        logger.info(f"Starting rpncalc service on {settings.host}:{settings.port}")
        serve(settings.host, settings.port, settings.log_level)
        return 0

    REPL(settings).repl_loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
