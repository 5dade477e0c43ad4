"""``entitychat tool``: run one assistant tool from the shell."""

import json

from rich.console import Console
from rich.markup import escape

from entitychat.assistant.tools import CORE_TOOL_NAMES, EntityTools
from entitychat.db import open_session_factory
from entitychat.logging import get_logger


def register_arguments(parser):
    """
    Examples
    --------
    >>> import argparse
    >>> parser = argparse.ArgumentParser(prog="entitychat tool")
    >>> register_arguments(parser)
    >>> parser.parse_args(["query_entity", "--arg", "entity_name=Product", "--arg", "limit=3"])
    Namespace(name='query_entity', arg=['entity_name=Product', 'limit=3'], db=None, json=False)
    """

    parser.add_argument("name", choices=CORE_TOOL_NAMES, help="Tool to run")
    parser.add_argument(
        "--arg",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Tool argument; repeat for several",
    )
    parser.add_argument("--db", required=False, help="Database file or sqlite URI")
    parser.add_argument("--json", action="store_true", help="Print the raw result object")


def parse_tool_args(raw_args):
    args = {}
    for item in raw_args or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got {item!r}")
        args[key.strip()] = value
    return args


def dispatch(args, console: Console | None = None):
    logger = get_logger(__name__)
    console = console or Console()

    try:
        tool_args = parse_tool_args(args.arg)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return 2

    tools = EntityTools(open_session_factory(args.db))
    payload = tools.run_tool(name=args.name, args=tool_args)
    logger.info("tool %s finished ok=%s", args.name, payload.get("ok"))

    if args.json:
        console.print(json.dumps(payload, ensure_ascii=False, indent=2), markup=False)
    elif payload.get("ok"):
        console.print(payload["result"].rstrip("\n"), markup=False)
    else:
        console.print(f"[red]{escape(payload['error'])}[/red]")
    return 0 if payload.get("ok") else 1
