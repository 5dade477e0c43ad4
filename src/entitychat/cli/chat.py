"""``entitychat chat``: a minimal terminal front end for :class:`ChatSession`."""

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from entitychat.assistant import ChatSession, EntityTools
from entitychat.config import AssistantOptions
from entitychat.db import open_session_factory
from entitychat.logging import LogStore, attach_log_store, detach_log_store


EXIT_COMMANDS = {"exit", "quit", ":q"}
RECENT_LOG_ENTRIES = 20


def register_arguments(parser):
    parser.add_argument("--db", required=False, help="Database file or sqlite URI")


def print_recent_logs(store: LogStore, console: Console, limit: int = RECENT_LOG_ENTRIES) -> None:
    entries = store.entries()[-limit:]
    if not entries:
        console.print("[dim]no log entries[/dim]")
        return
    for entry in entries:
        stamp = entry.timestamp.strftime("%H:%M:%S")
        console.print(f"[dim]{stamp}[/dim] {entry.level:<7} [cyan]{entry.category}[/cyan] {escape(entry.message)}")


def run_loop(session: ChatSession, console: Console, read=input, log_store: LogStore | None = None) -> None:
    while True:
        try:
            text = read("you> ").strip()
        except EOFError:
            break
        if not text:
            continue
        if text.lower() in EXIT_COMMANDS:
            break
        if text.lower() == "/reset":
            session.reset()
            console.print("[dim]history cleared[/dim]")
            continue
        if text.lower() == "/logs" and log_store is not None:
            print_recent_logs(log_store, console)
            continue

        turn = session.send(text)
        for result in turn.tool_results:
            status = "ok" if result.get("ok") else "error"
            console.print(f"[dim]tool {result.get('tool')}: {status}[/dim]")
        if turn.ok:
            console.print(Markdown(turn.content))
        else:
            console.print(f"[red]{escape(turn.error or turn.content)}[/red]")


def dispatch(args, console: Console | None = None):
    console = console or Console()
    options = AssistantOptions.from_env()
    tools = EntityTools(open_session_factory(args.db))
    session = ChatSession(tools, options=options)
    store = LogStore()
    handlers = attach_log_store(store)
    console.print(f"[bold]entitychat[/bold] ({options.provider}); '/logs' shows diagnostics, 'exit' quits")
    try:
        run_loop(session, console, log_store=store)
    finally:
        detach_log_store(handlers)
    return 0
