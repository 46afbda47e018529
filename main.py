# main.py

"""Entry point for the watch_signal CLI."""

import argparse
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("watch_signal.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="watch_signal",
        description=(
            "Extract the current price and stock status of a "
            "changedetection.io watch."
        ),
        epilog=(
            "Live mode reads CHANGEDETECTION_URL and "
            "CHANGEDETECTION_API_KEY from the environment or .env."
        ),
    )
    parser.add_argument(
        "uuid",
        nargs="?",
        default=None,
        help="Watch UUID to fetch. Omit when using --details/--history.",
    )
    parser.add_argument(
        "-u",
        "--url",
        default=None,
        dest="watch_url",
        help="Product URL (used for the title and icon fallbacks).",
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
        "-n",
        "--history-limit",
        type=int,
        default=Settings.HISTORY_LIMIT,
        dest="history_limit",
        help=(
            "History entries to scan "
            f"(default: {Settings.HISTORY_LIMIT})."
        ),
    )
    parser.add_argument(
        "--details",
        default=None,
        dest="details_path",
        help="Offline mode: JSON file holding a watch details payload.",
    )
    parser.add_argument(
        "--history",
        default=None,
        dest="history_path",
        help="Offline mode: JSON file holding a watch history payload.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO logs to stderr.",
    )
    return parser


def main() -> None:
    """Route to offline extraction or a live changedetection.io fetch."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(verbose=args.verbose)
    logger.info("watch_signal starting, log file: %s", log_file)

    from src.cli.runner import run_latest, run_offline

    if args.details_path or args.history_path:
        exit_code = run_offline(
            args.details_path,
            args.history_path,
            args.watch_url,
            args.output_format,
        )
    elif args.uuid:
        exit_code = run_latest(
            args.uuid,
            args.watch_url,
            args.output_format,
            args.history_limit,
        )
    else:
        parser.error("a watch UUID or --details/--history is required")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
