# main.py

"""Entry point for the product catalog CLI."""

import argparse
import asyncio
import logging
import sys

from catalog.config.logging_config import setup_logging

logger = logging.getLogger("catalog.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="catalog",
        description="Fetch the product catalog, with a local TTL cache.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--no-cache",
        action="store_false",
        dest="use_cache",
        help="Remote only: neither read nor write the local cache.",
    )
    parser.add_argument(
        "--no-probe",
        action="store_false",
        dest="use_probe",
        help="Skip the connectivity probe before fetching.",
    )
    parser.add_argument(
        "--cache-info",
        action="store_true",
        default=False,
        dest="cache_info",
        help="Show what the local cache holds and exit.",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        default=False,
        dest="clear_cache",
        help="Drop the cached product list and exit.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check network connectivity and cache state.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Route to the requested command and exit with its status."""
    log_file = setup_logging()
    logger.info("catalog starting, log file: %s", log_file)

    args = _build_parser().parse_args(argv)

    from catalog.cli import runner

    if args.cache_info:
        exit_code = asyncio.run(runner.run_cache_info())
    elif args.clear_cache:
        exit_code = asyncio.run(runner.run_clear_cache())
    elif args.health:
        exit_code = asyncio.run(runner.run_health_check())
    else:
        exit_code = asyncio.run(
            runner.cli_list(
                output_format=args.output_format,
                use_cache=args.use_cache,
                use_probe=args.use_probe,
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
