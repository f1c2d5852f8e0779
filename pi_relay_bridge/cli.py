"""Command-line interface for pi-relay-bridge."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .adapters import GpioPinDriver
from .app import RelayBridgeApp
from .config import default_settings_path, load_settings
from .logging import banner, configure_logging
from .relays import RelayController

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    default_config = default_settings_path(sys.argv[0])
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME, description="MQTT bridge for a 16-channel relay board"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=default_config,
        help=f"Path to settings file (default: {default_config})",
    )
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    parser.add_argument(
        "--log-network",
        action="store_true",
        help="Include paho-mqtt client diagnostics in the log",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("start", help="Start the relay bridge")
    subparsers.add_parser(
        "show-config", help="Print the resolved settings and exit"
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        args.log_level, log_path=args.log_file, log_network=args.log_network
    )

    if args.command == "start":
        for line in banner(constants.APP_TITLE):
            LOGGER.info(line)
        settings = load_settings(args.config)
        relays = RelayController(GpioPinDriver())
        return RelayBridgeApp.start(settings, relays=relays)

    if args.command == "show-config":
        settings = load_settings(args.config)
        source = settings.source or "built-in defaults"
        print(f"Settings loaded from {source!s}\n")
        print(settings.summary())
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
