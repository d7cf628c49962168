from __future__ import annotations

import argparse
import json
import logging
import time
from typing import Sequence

from rich.console import Console

from weni.collector import SystemCollector
from weni.config import AppConfig, load_config
from weni.logging_utils import DEFAULT_LEVEL, configure_logging, resolve_log_level
from weni.models import Selection
from weni.platform_info import PlatformProfile
from weni.render import OutputFormat, render, snapshot_to_dict
from weni.schema import validate_payload

WATCH_JSON_ERROR = "--watch cannot be combined with --json"

SUBSYSTEM_OPTIONS = (
    ("--cpu", "cpu", "Show CPU information"),
    ("--memory", "memory", "Show memory information"),
    ("--system", "system", "Show system information"),
    ("--battery", "battery", "Show battery information"),
    ("--disk", "disk", "Show disk information"),
    ("--network", "network", "Show network information"),
    ("--temp", "temp", "Show temperature information"),
    ("--processes", "processes", "Show process information"),
    ("--hosts", "hosts", "Show hosts file entries"),
)

EPILOG = """examples:
  weni                        show all information
  weni --cpu --memory         show only CPU and memory
  weni --processes --top 10   show the ten largest processes by memory
  weni --json                 output all info as JSON
  weni --watch --interval 5   monitor with a 5 second interval
"""


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weni",
        description="Lightweight cross-platform system information tool",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subsystems = parser.add_argument_group("subsystems (default: all)")
    for flag, dest, help_text in SUBSYSTEM_OPTIONS:
        subsystems.add_argument(flag, dest=dest, action="store_true", help=help_text)

    output = parser.add_argument_group("output")
    output.add_argument("--json", action="store_true", help="Output in JSON format")
    output.add_argument(
        "-w",
        "--watch",
        action="store_true",
        help="Enable watch mode (live updates)",
    )
    output.add_argument(
        "-i",
        "--interval",
        type=_positive_int,
        metavar="SEC",
        help="Update interval in seconds (default: 2)",
    )

    processes = parser.add_argument_group("processes")
    processes.add_argument(
        "--top",
        type=_positive_int,
        metavar="N",
        help="Only show the top N processes",
    )
    processes.add_argument(
        "--sort-cpu",
        action="store_true",
        help="Sort processes by CPU usage instead of memory",
    )

    hosts = parser.add_argument_group("hosts")
    hosts.add_argument(
        "--show-comments",
        action="store_true",
        help="Keep comments when parsing the hosts file",
    )

    parser.add_argument(
        "--config",
        help="Path to an optional CFG configuration file",
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LEVEL,
        help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Enable debug logging (-v) or trace logging (-vv)",
    )
    return parser


def parse_args(
    argv: Sequence[str] | None = None,
) -> tuple[argparse.Namespace, AppConfig]:
    """Parse and validate arguments; configuration errors exit before any collection."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.json and args.watch:
        parser.error(WATCH_JSON_ERROR)
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))
    return args, config


def build_selection(args: argparse.Namespace, config: AppConfig) -> Selection:
    selection = Selection(
        **{dest: getattr(args, dest) for _, dest, _ in SUBSYSTEM_OPTIONS},
        top_n=args.top if args.top is not None else config.process.top,
        sort_by_cpu=args.sort_cpu or config.process.sort_cpu,
        filter_comments=config.hosts.filter_comments and not args.show_comments,
    )
    return selection.resolved()


def run_once(
    collector: SystemCollector,
    selection: Selection,
    output_format: OutputFormat,
    console: Console,
) -> None:
    logger = logging.getLogger("weni")
    snapshot = collector.collect(selection)
    if output_format == OutputFormat.JSON:
        schema_errors = validate_payload(snapshot_to_dict(snapshot))
        if schema_errors:
            logger.warning("Schema validation failed with %s errors.", len(schema_errors))
            logger.debug("Schema errors: %s", json.dumps(schema_errors))
        else:
            logger.debug("Schema validation passed.")
    render(snapshot, output_format, console)


def run_watch(
    collector: SystemCollector,
    selection: Selection,
    interval: int,
    console: Console,
) -> None:
    """Collect, render and sleep until interrupted with Ctrl+C."""
    logger = logging.getLogger("weni")
    logger.info("Watch mode started. Refreshing every %s seconds.", interval)
    try:
        while True:
            snapshot = collector.collect(selection)
            console.clear()
            render(snapshot, OutputFormat.TABLE, console)
            console.print(
                f"Press Ctrl+C to exit | Refreshing every {interval} seconds",
                style="dim",
            )
            time.sleep(interval)
    except KeyboardInterrupt:
        logger.info("Watch mode stopped.")


def main(argv: Sequence[str] | None = None) -> None:
    args, config = parse_args(argv)

    level = resolve_log_level(args.verbose, args.log_level)
    configure_logging(level)

    profile = PlatformProfile.detect()
    collector = SystemCollector(config.collector, profile)
    selection = build_selection(args, config)
    console = Console()

    if args.watch:
        interval = args.interval if args.interval is not None else config.watch.interval_s
        run_watch(collector, selection, interval, console)
        return

    output_format = OutputFormat.JSON if args.json else OutputFormat.TABLE
    run_once(collector, selection, output_format, console)


if __name__ == "__main__":
    main()
