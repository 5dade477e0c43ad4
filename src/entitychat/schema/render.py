"""Text renderings of the schema graph for prompts and tools.

Tier 1 (:func:`render_summary`) lists entity names and descriptions only and
is sent with every conversation turn. Tier 2 (:func:`render_detail`) renders a
single entity in full and is fetched on demand through ``describe_entity``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .metadata import EntityMetadata, SchemaGraph


@dataclass(frozen=True)
class NotFound:
    """An unknown entity name, with the names that would have been accepted."""

    name: str
    valid_names: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"Entity '{self.name}' not found. Available entities: {', '.join(self.valid_names)}"

    def __str__(self) -> str:
        return self.message


def _summary_line(entity: EntityMetadata) -> str:
    if entity.description:
        return f"- **{entity.name}** — {entity.description}"
    return f"- **{entity.name}**"


def render_summary(graph: SchemaGraph) -> str:
    return "\n".join(_summary_line(entity) for entity in graph) + ("\n" if len(graph) else "")


def render_detail(graph: SchemaGraph, entity_name: str | None) -> str | NotFound:
    entity = graph.find_entity(entity_name)
    if entity is None:
        return NotFound(name=(entity_name or "").strip(), valid_names=tuple(graph.entity_names()))

    lines = [f"**{entity.name}**"]
    if entity.description:
        lines.append(entity.description)
    lines.append("")
    lines.append("Properties:")
    for prop in entity.properties:
        required = " (required)" if prop.required else ""
        desc = f" — {prop.description}" if prop.description else ""
        lines.append(f"  - {prop.name}: {prop.type_name}{required}{desc}")
        if prop.enum_values:
            lines.append(f"    Values: {', '.join(prop.enum_values)}")

    if entity.relationships:
        lines.append("")
        lines.append("Relationships:")
        for rel in entity.relationships:
            lines.append(f"  - {rel.property_name}: {rel.cardinality_label} {rel.target_entity_name}")

    return "\n".join(lines) + "\n"


def render_entity_listing(graph: SchemaGraph) -> str:
    """Every entity with its property names and relationship summary."""

    lines = ["Available entities:"]
    for entity in graph:
        line = f"- {entity.name} ({', '.join(entity.property_names())})"
        if entity.relationships:
            rels = ", ".join(f"{rel.cardinality_label} {rel.target_entity_name}" for rel in entity.relationships)
            line += f" -> {rels}"
        lines.append(line)
        for prop in entity.properties:
            if prop.enum_values:
                lines.append(f"  - {prop.name} values: {', '.join(prop.enum_values)}")
    return "\n".join(lines) + "\n"


def _prompt_extra() -> str | None:
    extra = (os.getenv("ENTITYCHAT_ASSISTANT_SYSTEM_PROMPT_EXTRA") or "").strip()
    return extra or None


def generate_system_prompt(graph: SchemaGraph) -> str:
    """Tier-1 system prompt: entity summary plus assistant guidance."""

    lines = [
        "You are a helpful business assistant for an order management application.",
        "",
        "Available entities:",
        render_summary(graph).rstrip("\n"),
        "",
        "When answering:",
        "- Use `describe_entity` to see an entity's properties and relationships before querying or creating records.",
        "- Use `query_entity` to fetch data, `create_entity` to create records and `update_entity` to change them.",
        "- Use Markdown formatting for readability (tables, bold, lists).",
        "- Be concise but thorough.",
    ]
    extra = _prompt_extra()
    if extra:
        lines.extend(["", extra])
    return "\n".join(lines) + "\n"
