"""Command-line interface for pi-remote."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .app import RemoteControlApp
from .config import RemoteConfig, load_config
from .core import CommandAction, CommandOutcome, SystemSnapshot, UserFacingError
from .logging import configure_logging

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pi-remote", description="Remote control for a Raspberry Pi home server"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    watch_parser = subparsers.add_parser("watch", help="Poll and print system metrics")
    watch_parser.add_argument(
        "--interval", type=float, default=None, help="Seconds between polls"
    )
    watch_parser.add_argument(
        "--count", type=int, default=None, help="Stop after this many reports"
    )

    send_parser = subparsers.add_parser("send", help="Trigger a remote action")
    send_parser.add_argument(
        "action", choices=[action.value for action in CommandAction]
    )

    volume_parser = subparsers.add_parser("volume", help="Adjust the volume")
    volume_parser.add_argument("direction", help="'up' or 'down'")

    open_parser = subparsers.add_parser("open", help="Open a share link")
    open_parser.add_argument("target", help="Configured link name or a URL")

    subparsers.add_parser("actions", help="List the available actions")
    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


def format_snapshot(snapshot: SystemSnapshot) -> str:
    return (
        f"CPU {snapshot.cpu_usage_percent:5.1f}% | "
        f"Memory {snapshot.memory_usage_percent:5.1f}% | "
        f"Disk {snapshot.disk_usage_percent:5.1f}%"
    )


def _report_error(error: Exception) -> None:
    notice = UserFacingError.from_error(error)
    print(f"{notice.title}: {notice.message}", file=sys.stderr)


def _report_outcome(outcome: Optional[CommandOutcome]) -> int:
    if outcome is None:
        return 0
    if outcome.succeeded:
        print(f"Success: {outcome.message}")
        return 0
    print(f"Error: {outcome.message}", file=sys.stderr)
    return 1


async def _watch(config: RemoteConfig, interval: Optional[float], count: Optional[int]) -> int:
    async with RemoteControlApp(config) as app:
        await app.watch(
            lambda snapshot: print(format_snapshot(snapshot)),
            _report_error,
            interval=interval,
            count=count,
        )
    return 0


async def _send(config: RemoteConfig, action: str) -> int:
    async with RemoteControlApp(config) as app:
        outcome = await app.dispatcher.dispatch(action)
    return _report_outcome(outcome)


async def _volume(config: RemoteConfig, direction: str) -> int:
    async with RemoteControlApp(config) as app:
        outcome = await app.dispatcher.adjust_volume(direction)
    return _report_outcome(outcome)


async def _open(config: RemoteConfig, target: str) -> int:
    async with RemoteControlApp(config) as app:
        outcome = await app.open_link(target)
    if outcome.succeeded:
        print(outcome.message)
        return 0
    print(f"Error: {outcome.message}", file=sys.stderr)
    return 1


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    configure_logging(
        config.logging.level,
        log_path=config.logging.path,
        log_network=config.logging.log_network,
    )

    if args.command == "watch":
        if args.interval is not None and args.interval <= 0:
            parser.error("--interval must be positive")
        try:
            return asyncio.run(_watch(config, args.interval, args.count))
        except KeyboardInterrupt:
            LOGGER.info("pi-remote received shutdown signal")
            return 0

    if args.command == "send":
        return asyncio.run(_send(config, args.action))

    if args.command == "volume":
        return asyncio.run(_volume(config, args.direction))

    if args.command == "open":
        return asyncio.run(_open(config, args.target))

    if args.command == "actions":
        for action in CommandAction:
            print(f"{action.value:<20} {action.label}")
        return 0

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
