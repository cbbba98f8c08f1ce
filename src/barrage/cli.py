#!/usr/bin/env python3
# cli.py — command-line entry point for barrage

import argparse
import asyncio
import logging
import os
import sys

from barrage.core import LoadRunner
from barrage.logging_config import resolve_level, setup_logging
from barrage.report import log_report
from barrage.template import ConfigurationError, build_template
from barrage.utils import parse_duration

logger = logging.getLogger("barrage")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {text!r}")
    return value


def _duration(text: str) -> float:
    try:
        return parse_duration(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="barrage",
        description="Send a fixed number of HTTP requests and report latency percentiles",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("count", type=_positive_int, help="Number of requests to send")
    parser.add_argument("url", help="Target URL")

    # Request
    parser.add_argument(
        "-X",
        "--request",
        dest="method",
        default="GET",
        help="HTTP method",
    )
    parser.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        default=[],
        metavar="K:V",
        help="Extra request header (repeatable)",
    )
    parser.add_argument(
        "-T",
        "--timeout",
        type=_duration,
        default="5s",
        help="Timeout for each request",
    )
    parser.add_argument(
        "-d",
        "--data",
        default=None,
        help="Request body",
    )

    # Concurrency & Output
    parser.add_argument(
        "-P",
        "--tasks",
        type=_positive_int,
        default=None,
        help="Number of tasks to spawn (defaults to ncpus * 4)",
    )
    parser.add_argument(
        "-s",
        "--silent",
        action="store_true",
        help="Suppress output of requests, including errors which then will only be printed at the end",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while sending",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., barrage.log)",
    )

    return parser


async def run(args: argparse.Namespace) -> int:
    try:
        template = build_template(
            args.method,
            args.url,
            args.headers,
            os.fsencode(args.data) if args.data is not None else None,
        )
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    runner = LoadRunner(
        template,
        args.count,
        tasks=args.tasks,
        timeout_s=args.timeout,
        silent=args.silent,
        use_progress_bar=args.progress,
    )
    report = await runner.run()
    log_report(report)
    return report.exit_code


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        level = resolve_level()
    except ValueError as e:
        setup_logging(logging.INFO, args.log_file)
        logger.error(str(e))
        return 1
    setup_logging(level, args.log_file)
    logger.debug(f"Args: {args}")

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
