"""``entitychat logging``: persisted log level and log file location."""

import logging

from entitychat.logging import get_configured_level, get_logger, reset_logger
from entitychat.logging.config import save_log_level
from entitychat.logging.logging import log_file_path


LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def register_subcommands(subparsers):
    set_level_parser = subparsers.add_parser("set-level", help="Persist the logging level")
    set_level_parser.add_argument("level", choices=LEVELS, type=str.upper, help="Logging level to use")

    subparsers.add_parser("show-path", help="Show the log file location")
    subparsers.add_parser("show-level", help="Show the configured logging level")


def dispatch(args):
    if args.subcommand == "set-level":
        path = save_log_level(args.level)
        reset_logger()
        get_logger(level=getattr(logging, args.level))
        print(f"{args.level} saved to {path}")
    elif args.subcommand == "show-path":
        print(log_file_path().resolve())
    elif args.subcommand == "show-level":
        get_logger()
        print(get_configured_level())
    else:
        get_logger(__name__).error("No handler for subcommand: %s", args.subcommand)
        return 1
    return 0
