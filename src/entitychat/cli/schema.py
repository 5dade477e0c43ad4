"""``entitychat schema``: print what the assistant can see."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from entitychat.schema import (
    NotFound,
    SchemaGraph,
    get_schema_service,
    render_detail,
    render_summary,
)


def register_subcommands(subparsers):
    """Attach schema subcommands to an ``argparse`` parser.

    Examples
    --------
    >>> import argparse
    >>> parser = argparse.ArgumentParser(prog="entitychat schema")
    >>> subparsers = parser.add_subparsers(dest="subcommand", required=True)
    >>> register_subcommands(subparsers)
    >>> parser.parse_args(["describe", "Product"])
    Namespace(subcommand='describe', entity='Product')
    """

    subparsers.add_parser("summary", help="Tier-1 entity summary")
    subparsers.add_parser("list", help="Entities, properties and relationships as a table")
    describe_parser = subparsers.add_parser("describe", help="Full detail for one entity")
    describe_parser.add_argument("entity")
    subparsers.add_parser("prompt", help="The system prompt sent with every turn")


def render_schema_table(graph: SchemaGraph, console: Console | None = None) -> None:
    if console is None:
        console = Console()

    table = Table(title="Discovered entities", show_lines=True)
    table.add_column("Entity", style="bold cyan")
    table.add_column("Property", style="magenta")
    table.add_column("Type", style="green")
    table.add_column("Required", justify="center", style="yellow")
    table.add_column("Relationships", style="bright_black")

    if not len(graph):
        table.add_row("[dim]No entities found[/dim]", "", "", "", "")
        console.print(table)
        return

    for entity in graph:
        rels = ", ".join(
            f"{rel.property_name} ({rel.cardinality_label} {rel.target_entity_name})" for rel in entity.relationships
        )
        if not entity.properties:
            table.add_row(entity.name, "[dim]-[/dim]", "", "", rels)
        for index, prop in enumerate(entity.properties):
            table.add_row(
                entity.name if index == 0 else "",
                prop.name,
                prop.type_name,
                "Yes" if prop.required else "No",
                rels if index == 0 else "",
            )
        table.add_section()

    console.print(table)


def dispatch(args, console: Console | None = None):
    console = console or Console()
    service = get_schema_service()

    if args.subcommand == "summary":
        console.print(render_summary(service.schema), markup=False, end="")
    elif args.subcommand == "list":
        render_schema_table(service.schema, console)
    elif args.subcommand == "describe":
        detail = render_detail(service.schema, args.entity)
        if isinstance(detail, NotFound):
            console.print(f"[red]{escape(detail.message)}[/red]")
            return 1
        console.print(detail, markup=False, end="")
    elif args.subcommand == "prompt":
        console.print(service.generate_system_prompt(), markup=False, end="")
    return 0
