"""
Command line interface: tail the output of every container on a docker host.
"""
import argparse
import asyncio
import logging
import platform
import sys
from typing import List, Optional

from . import __version__, create_tailer
from .models.settings import TailerSettings
from .services.colors import Colors

logger = logging.getLogger("docktails")


def configure_logging(level: str = "INFO") -> None:
    """
    Route the tailer's own messages to stderr and host events to stdout.

    Both carry a bold blue tag so they stand apart from container output.
    """
    root = logging.getLogger("docktails")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(Colors.colorize("docktails", Colors.BOLD_BLUE) + "  %(message)s")
    )
    root.addHandler(handler)
    root.propagate = False

    events = logging.getLogger("docktails.events")
    events.handlers.clear()
    events_handler = logging.StreamHandler(sys.stdout)
    events_handler.setFormatter(
        logging.Formatter(Colors.colorize("docker", Colors.BOLD_BLUE) + "  %(message)s")
    )
    events.addHandler(events_handler)
    events.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docktails",
        description="Tail logs of all running docker containers in one stream",
    )
    parser.add_argument(
        "--json",
        dest="pretty_json",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Pretty-print JSON found in log lines (default: on)",
    )
    parser.add_argument(
        "--prefix",
        default=None,
        help="Prefix to match for container names",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for docktails' own messages (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    return parser


def settings_from_args(args: argparse.Namespace, base: TailerSettings) -> TailerSettings:
    """Overlay command line flags on settings read from the environment."""
    overrides = {
        key: value
        for key, value in (
            ("pretty_json", args.pretty_json),
            ("prefix", args.prefix),
            ("log_level", args.log_level),
        )
        if value is not None
    }
    return TailerSettings.model_validate({**base.model_dump(), **overrides})


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"docktails {__version__} Python {platform.python_version()}")
        return 0

    settings = settings_from_args(args, TailerSettings.from_env())
    configure_logging(settings.log_level)
    logger.info(f"starting version {__version__}")

    tailer = create_tailer(settings)
    try:
        asyncio.run(tailer.run())
    except KeyboardInterrupt:
        tailer.stop()
        logger.info("interrupted, exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
