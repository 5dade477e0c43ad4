# entitychat/cli/main.py
import argparse

from entitychat.cli import chat, logging as logging_cli, schema, tool


def main(argv=None):

    parser = argparse.ArgumentParser(prog="entitychat", description="Chat with your business data")
    subparsers = parser.add_subparsers(dest="command", required=True)

    schema_parser = subparsers.add_parser("schema", help="Inspect the discovered schema")
    schema_subparsers = schema_parser.add_subparsers(dest="subcommand", required=True)
    schema.register_subcommands(schema_subparsers)

    tool_parser = subparsers.add_parser("tool", help="Run one assistant tool")
    tool.register_arguments(tool_parser)

    chat_parser = subparsers.add_parser("chat", help="Interactive chat with the assistant")
    chat.register_arguments(chat_parser)

    logging_parser = subparsers.add_parser("logging", help="Logging utilities")
    logging_subparsers = logging_parser.add_subparsers(dest="subcommand", required=True)
    logging_cli.register_subcommands(logging_subparsers)

    args = parser.parse_args(argv)

    if args.command == "schema":
        return schema.dispatch(args)
    elif args.command == "tool":
        return tool.dispatch(args)
    elif args.command == "chat":
        return chat.dispatch(args)
    elif args.command == "logging":
        return logging_cli.dispatch(args)


if __name__ == "__main__":
    raise SystemExit(main())
