"""
Watchrun Command Line Interface.

Watches directories and re-runs a shell command whenever a file in them
is modified.

Usage:
    watchrun                          # guess from Cargo.toml / Makefile
    watchrun -c "ruff check ." -d src tests
"""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from watchrun.exceptions import WatchrunError
from watchrun.modes.resolver import profile_from_settings
from watchrun.runner.loop import WatchLoop
from watchrun.utils.config import LoggingSettings, load_settings
from watchrun.utils.logger import configure_logging


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="watchrun",
        description="Re-run a shell command every time a watched directory changes",
    )
    parser.add_argument(
        "-c",
        "--command",
        default=None,
        help="Shell command to run (default: guessed from Cargo.toml or Makefile)",
    )
    parser.add_argument(
        "-d",
        "--directories",
        nargs="+",
        default=None,
        metavar="DIR",
        help="Directories to watch, non-recursively",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="TOML config file (default: .watchrun.toml)",
    )
    parser.add_argument(
        "--shell",
        default=None,
        help="Command interpreter used to run the command (default: sh)",
    )
    parser.add_argument(
        "--no-clear",
        dest="clear_screen",
        action="store_false",
        default=None,
        help="Do not clear the terminal before each run",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for watchrun's own messages (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        default=None,
        help="Log renderer",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        _run(args)
    except KeyboardInterrupt:
        sys.exit(130)


def _run(args: argparse.Namespace) -> None:
    try:
        settings = load_settings(
            config_file=args.config,
            command=args.command,
            directories=args.directories,
            shell=args.shell,
            clear_screen=args.clear_screen,
        )
        log_overrides = {"level": args.log_level, "format": args.log_format}
        settings.logging = LoggingSettings.model_validate({
            **settings.logging.model_dump(),
            **{k: v for k, v in log_overrides.items() if v is not None},
        })
    except ValidationError as e:
        print(f"Error: invalid configuration\n{e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings)

    try:
        profile = profile_from_settings(settings)
        loop = WatchLoop(profile, settings)
        loop.start()
    except WatchrunError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    loop.run_forever()


if __name__ == "__main__":
    main()
