"""Generic entity tools exposed to the assistant.

Every tool is parameterized by an entity name resolved against the schema
graph, so new business objects become reachable without new tool code.
Recoverable failures (unknown names, bad values, missing arguments) raise a
:class:`~entitychat.assistant.errors.ToolError` internally and are reported
back to the model as text; database errors propagate.
"""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from entitychat.db.connect import SessionFactory
from entitychat.logging import get_logger
from entitychat.schema import (
    EntityMetadata,
    NotFound,
    RelationshipMetadata,
    SchemaDiscoveryService,
    SchemaGraph,
    get_schema_service,
    render_detail,
    render_entity_listing,
)
from entitychat.schema.discovery import column_python_type

from .context import ActiveViewContext
from .display import display_label, label_matches, text_contains
from .errors import ConversionError, NotFoundError, ToolError, ToolValidationError
from .navigation import NavigationService
from .pairs import coerce_value, format_value, parse_pairs


logger = get_logger(__name__)

TOOL_CALL_PREFIX = "TOOL_CALL"
TOOL_RESULT_PREFIX = "TOOL_RESULT"

DEFAULT_QUERY_LIMIT = 25
MAX_CANDIDATE_LABELS = 10

CORE_TOOL_NAMES = ("list_entities", "describe_entity", "query_entity", "create_entity", "update_entity")
NAVIGATION_TOOL_NAMES = ("navigate_to_list", "navigate_to_detail", "filter_active_list", "clear_active_list_filter")
ACTIVE_VIEW_TOOL_NAMES = ("get_active_view",)


def tool_prompt(*, tool_names: set[str] | None = None) -> str:
    """Short tool list for the system prompt.

    When ``tool_names`` is provided, only those tools are listed (in the normal
    order).
    """

    lines = ["Available tools:"]

    def add(tool_name: str, line: str) -> None:
        if tool_names is not None and tool_name not in tool_names:
            return
        lines.append(line)

    add("list_entities", "- list_entities()  # every entity with its properties and relationships")
    add("describe_entity", "- describe_entity(entity_name: str)  # call before querying an unfamiliar entity")
    add("query_entity", "- query_entity(entity_name: str, filter: str = '', limit: int = 25)  # filter: 'Key=value;Key2=value'")
    add("create_entity", "- create_entity(entity_name: str, properties: str)  # write: 'Key=value;Relation=search term'")
    add(
        "update_entity",
        "- update_entity(entity_name: str, properties: str, identifier: str | None = None)  # write: key or search term",
    )
    add("get_active_view", "- get_active_view()  # what the user currently has open")
    add("navigate_to_list", "- navigate_to_list(entity_name: str)")
    add("navigate_to_detail", "- navigate_to_detail(entity_name: str, identifier: str)")
    add("filter_active_list", "- filter_active_list(criteria: str)  # same 'Key=value' syntax as query_entity")
    add("clear_active_list_filter", "- clear_active_list_filter()")
    return "\n".join(lines) + "\n"


def _str_arg(args: dict[str, Any], *names: str) -> str:
    for name in names:
        value = args.get(name)
        if value is not None:
            return str(value).strip()
    return ""


def _pairs_arg(args: dict[str, Any], *names: str) -> Any:
    for name in names:
        if args.get(name) is not None:
            return args[name]
    return None


def _limit_arg(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_QUERY_LIMIT
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return DEFAULT_QUERY_LIMIT


def _matches_text(obj: Any, text_filters: list[tuple[str, str]]) -> bool:
    return all(text_contains(getattr(obj, name, None), term) for name, term in text_filters)


def _matches_labels(obj: Any, label_filters: list[tuple[str, str]]) -> bool:
    for name, term in label_filters:
        related = getattr(obj, name, None)
        if related is None or not label_matches(related, term):
            return False
    return True


def _record_key(obj: Any) -> str:
    identity = inspect(obj).identity
    if not identity:
        return "N/A"
    return ",".join(str(part) for part in identity)


def _parse_primary_key(entity_type: type, raw: str) -> Any | None:
    columns = inspect(entity_type).primary_key
    if len(columns) != 1:
        return None
    python_type = column_python_type(columns[0])
    try:
        if python_type is int:
            return int(raw)
        if python_type is uuid.UUID:
            return uuid.UUID(raw)
    except ValueError:
        return None
    return raw if python_type is str else None


class EntityTools:
    """Tool implementations bound to a session factory and schema service.

    Parameters
    ----------
    session_factory:
        Returns a context manager yielding one transactional session; each
        tool call opens its own.
    schema_service:
        Source of the schema graph (default: the process-wide service).
    navigation:
        Receives navigation and refresh signals. Navigation tools are only
        registered when it is supplied.
    active_view:
        The user's current view. ``get_active_view`` is only registered when
        it is supplied.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        schema_service: SchemaDiscoveryService | None = None,
        *,
        navigation: NavigationService | None = None,
        active_view: ActiveViewContext | None = None,
    ):
        self._session_factory = session_factory
        self._schema_service = schema_service or get_schema_service()
        self._navigation = navigation
        self._active_view = active_view

    @property
    def schema(self) -> SchemaGraph:
        return self._schema_service.schema

    def tool_names(self) -> list[str]:
        names = list(CORE_TOOL_NAMES)
        if self._active_view is not None:
            names.extend(ACTIVE_VIEW_TOOL_NAMES)
        if self._navigation is not None:
            names.extend(NAVIGATION_TOOL_NAMES)
        return names

    def openai_tools(self) -> list[dict[str, Any]]:
        return openai_tools(tool_names=set(self.tool_names()))

    def tool_prompt(self) -> str:
        return tool_prompt(tool_names=set(self.tool_names()))

    # -- helpers -------------------------------------------------------------

    def _entity_name_list(self) -> str:
        return ", ".join(self.schema.entity_names())

    def _require_entity(self, entity_name: str | None) -> EntityMetadata:
        name = (entity_name or "").strip()
        if not name:
            raise ToolValidationError(f"Entity name is required. Available entities: {self._entity_name_list()}")
        entity = self.schema.find_entity(name)
        if entity is None:
            raise NotFoundError(f"Entity '{name}' not found. Available entities: {self._entity_name_list()}")
        return entity

    @staticmethod
    def _unknown_property(entity: EntityMetadata, key: str) -> NotFoundError:
        available = ", ".join(entity.member_names())
        return NotFoundError(f"Property '{key}' not found on {entity.name}. Available: {available}")

    @staticmethod
    def _parse(value: Any) -> list[tuple[str, str]]:
        try:
            return parse_pairs(value)
        except ValueError as exc:
            raise ToolValidationError(str(exc)) from exc

    def _format_record(self, entity: EntityMetadata, obj: Any) -> str:
        parts = [f"key: {_record_key(obj)}"]
        for prop in entity.properties:
            parts.append(f"{prop.name}: {format_value(getattr(obj, prop.name, None))}")
        for rel in entity.to_one_relationships:
            related = getattr(obj, rel.property_name, None)
            if related is not None:
                parts.append(f"{rel.property_name}: {display_label(related)}")
        return " | ".join(parts)

    def _ordered(self, session: Session, entity_type: type) -> list[Any]:
        mapper = inspect(entity_type)
        return list(session.scalars(select(entity_type).order_by(*mapper.primary_key)).all())

    def _match_related(self, session: Session, rel: RelationshipMetadata, term: str) -> Any:
        candidates = self._ordered(session, rel.target_type)
        for candidate in candidates:
            if label_matches(candidate, term):
                return candidate
        available = ", ".join(display_label(c) for c in candidates[:MAX_CANDIDATE_LABELS])
        raise NotFoundError(
            f"{rel.property_name} '{term}' not found. Available {rel.target_entity_name} records: {available}"
        )

    def _find_record(self, session: Session, entity: EntityMetadata, identifier: str) -> Any | None:
        """Primary key lookup first, then display label search."""

        key = _parse_primary_key(entity.entity_type, identifier)
        if key is not None:
            obj = session.get(entity.entity_type, key)
            if obj is not None:
                return obj
        for candidate in self._ordered(session, entity.entity_type):
            if label_matches(candidate, identifier):
                return candidate
        return None

    def _apply_pairs(
        self,
        session: Session,
        entity: EntityMetadata,
        obj: Any,
        pairs: list[tuple[str, str]],
        *,
        show_old: bool,
    ) -> list[str]:
        changes: list[str] = []
        for key, value in pairs:
            prop = entity.find_property(key)
            if prop is not None:
                try:
                    converted = coerce_value(prop, value)
                except (ValueError, TypeError) as exc:
                    raise ConversionError(
                        key,
                        value,
                        prop.type_name,
                        f"Error setting {prop.name}: cannot convert '{value}' to {prop.type_name}. {exc}",
                    ) from exc
                old = getattr(obj, prop.name, None)
                setattr(obj, prop.name, converted)
                if show_old:
                    changes.append(f"{prop.name}: {format_value(old)} → {format_value(converted)}")
                else:
                    changes.append(f"{prop.name}: {format_value(converted)}")
                continue

            rel = entity.find_relationship(key)
            if rel is not None:
                matched = self._match_related(session, rel, value) if value.strip() else None
                old = getattr(obj, rel.property_name, None)
                setattr(obj, rel.property_name, matched)
                new_label = display_label(matched) if matched is not None else "N/A"
                if show_old:
                    old_label = display_label(old) if old is not None else "N/A"
                    changes.append(f"{rel.property_name}: {old_label} → {new_label}")
                else:
                    changes.append(f"{rel.property_name}: {new_label}")
                continue

            raise self._unknown_property(entity, key)
        return changes

    def _refresh_view(self, tool: str) -> None:
        if self._navigation is None:
            return
        try:
            self._navigation.refresh_active_view()
        except Exception as exc:
            logger.warning("[Tool:%s] View refresh failed: %s", tool, exc)

    def _active_detail_key(self, entity: EntityMetadata) -> str | None:
        if self._active_view is None:
            return None
        view = self._active_view.snapshot()
        if not view.is_detail_view or not view.current_object_key:
            return None
        if (view.entity_name or "").lower() != entity.name.lower():
            return None
        return view.current_object_key

    def _active_list_entity(self, message: str) -> str:
        view = self._active_view.snapshot() if self._active_view is not None else None
        if view is None or view.entity_name is None or not view.is_list_view:
            raise ToolValidationError(message)
        return view.entity_name

    # -- tool implementations ------------------------------------------------

    def _list_entities(self) -> str:
        logger.info("[Tool:list_entities] Called")
        return render_entity_listing(self.schema)

    def _describe_entity(self, entity_name: str) -> str:
        logger.info("[Tool:describe_entity] Called with entity=%s", entity_name)
        if not (entity_name or "").strip():
            raise ToolValidationError(f"Entity name is required. Available entities: {self._entity_name_list()}")
        detail = render_detail(self.schema, entity_name)
        if isinstance(detail, NotFound):
            raise NotFoundError(detail.message)
        return detail

    def _query_entity(self, entity_name: str, filter: Any = "", limit: int | None = DEFAULT_QUERY_LIMIT) -> str:
        logger.info("[Tool:query_entity] Called with entity=%s, filter=%s, limit=%s", entity_name, filter, limit)
        entity = self._require_entity(entity_name)
        if limit is None or limit <= 0:
            limit = DEFAULT_QUERY_LIMIT

        entity_type = entity.entity_type
        stmt = select(entity_type).order_by(*inspect(entity_type).primary_key)
        # text and relationship filters run in Python so matching folds Unicode case
        text_filters: list[tuple[str, str]] = []
        label_filters: list[tuple[str, str]] = []
        for key, value in self._parse(filter):
            prop = entity.find_property(key)
            if prop is not None:
                column = getattr(entity_type, prop.name)
                if prop.is_string:
                    stmt = stmt.where(column.is_not(None))
                    text_filters.append((prop.name, value))
                    continue
                try:
                    converted = coerce_value(prop, value)
                except (ValueError, TypeError) as exc:
                    raise ConversionError(
                        key,
                        value,
                        prop.type_name,
                        f"Cannot convert filter value '{value}' to type '{prop.type_name}' for property '{key}'.",
                    ) from exc
                stmt = stmt.where(column.is_(None) if converted is None else column == converted)
                continue

            rel = entity.find_relationship(key)
            if rel is not None:
                label_filters.append((rel.property_name, value))
                continue

            raise self._unknown_property(entity, key)

        with self._session_factory() as session:
            if text_filters or label_filters:
                rows = []
                for obj in session.scalars(stmt).all():
                    if _matches_text(obj, text_filters) and _matches_labels(obj, label_filters):
                        rows.append(obj)
                        if len(rows) >= limit:
                            break
            else:
                rows = list(session.scalars(stmt.limit(limit)).all())

            if not rows:
                return f"No {entity.name} records found matching the given criteria."
            lines = [f"Found {len(rows)} {entity.name} record(s):"]
            lines.extend(self._format_record(entity, obj) for obj in rows)

        logger.info("[Tool:query_entity] %d records", len(rows))
        return "\n".join(lines) + "\n"

    def _properties_required(self, entity: EntityMetadata) -> ToolValidationError:
        props = ", ".join(entity.property_names())
        rels = ", ".join(rel.property_name for rel in entity.to_one_relationships)
        message = f"Properties are required. {entity.name} properties: {props}"
        if rels:
            message += f". Relationships: {rels}"
        return ToolValidationError(message)

    def _create_entity(self, entity_name: str, properties: Any) -> str:
        logger.info("[Tool:create_entity] Called with entity=%s, properties=%s", entity_name, properties)
        entity = self._require_entity(entity_name)
        pairs = self._parse(properties)
        if not pairs:
            raise self._properties_required(entity)

        given = {key.lower() for key, _ in pairs}
        missing = [
            prop.name
            for prop in entity.properties
            if prop.required and not prop.has_default and prop.name.lower() not in given
        ]
        if missing:
            raise ToolValidationError(f"Missing required {entity.name} properties: {', '.join(missing)}")

        with self._session_factory() as session:
            with session.no_autoflush:
                obj = entity.entity_type()
                changes = self._apply_pairs(session, entity, obj, pairs, show_old=False)
            session.add(obj)
            session.flush()
            key = _record_key(obj)

        self._refresh_view("create_entity")
        result = f"{entity.name} created successfully! (key: {key}) {' | '.join(changes)}"
        logger.info("[Tool:create_entity] %s", result)
        return result

    def _update_entity(self, entity_name: str, identifier: str | None, properties: Any) -> str:
        logger.info(
            "[Tool:update_entity] Called with entity=%s, id=%s, properties=%s", entity_name, identifier, properties
        )
        entity = self._require_entity(entity_name)
        identifier = (identifier or "").strip() or (self._active_detail_key(entity) or "")
        if not identifier:
            raise ToolValidationError(
                "An identifier (key or search term) is required. "
                "Use get_active_view to get the key of the current record."
            )
        pairs = self._parse(properties)
        if not pairs:
            props = ", ".join(entity.property_names())
            raise ToolValidationError(f"Properties to update are required. {entity.name} properties: {props}")

        with self._session_factory() as session:
            with session.no_autoflush:
                obj = self._find_record(session, entity, identifier)
                if obj is None:
                    raise NotFoundError(f"No {entity.name} record found matching '{identifier}'.")
                changes = self._apply_pairs(session, entity, obj, pairs, show_old=True)
                label = display_label(obj)

        self._refresh_view("update_entity")
        result = f"{entity.name} '{label}' updated successfully! Changes: {' | '.join(changes)}"
        logger.info("[Tool:update_entity] %s", result)
        return result

    def _get_active_view(self) -> str:
        logger.info("[Tool:get_active_view] Called")
        view = self._active_view.snapshot() if self._active_view is not None else None
        if view is None or view.entity_name is None:
            return "No active view context available."

        entity = self.schema.find_entity(view.entity_name)
        kind = "List View" if view.is_list_view else "Detail View"
        lines = [
            f"The user is currently viewing: **{view.entity_name}** ({kind})",
            f"View ID: {view.view_id or 'N/A'}",
        ]

        if view.is_detail_view and view.current_object_display is not None:
            lines.append(f"Current record: **{view.current_object_display}** (key: {view.current_object_key})")
            key = None
            if entity is not None and view.current_object_key:
                key = _parse_primary_key(entity.entity_type, view.current_object_key)
            if key is not None:
                try:
                    with self._session_factory() as session:
                        obj = session.get(entity.entity_type, key)
                        if obj is not None:
                            lines.append(f"Fields: {self._format_record(entity, obj)}")
                except SQLAlchemyError as exc:
                    logger.warning("[Tool:get_active_view] Could not load current record: %s", exc)

        if entity is not None and view.is_list_view:
            lines.append(f"Available properties for filtering: {', '.join(entity.property_names())}")
            rels = [rel.property_name for rel in entity.to_one_relationships]
            if rels:
                lines.append(f"Relationships (can filter by): {', '.join(rels)}")

        if entity is not None and view.is_detail_view:
            lines.append(f"Editable properties: {', '.join(entity.property_names())}")
            lines.append("Use update_entity to modify this record's fields.")

        return "\n".join(lines) + "\n"

    def _navigate_to_list(self, entity_name: str) -> str:
        logger.info("[Tool:navigate_to_list] Called with entity=%s", entity_name)
        entity = self._require_entity(entity_name)
        self._navigation.navigate_to_list_view(entity.name)
        return f"Navigating to {entity.name} list view."

    def _navigate_to_detail(self, entity_name: str, identifier: str) -> str:
        logger.info("[Tool:navigate_to_detail] Called with entity=%s, id=%s", entity_name, identifier)
        entity = self._require_entity(entity_name)
        identifier = (identifier or "").strip()
        if not identifier:
            raise ToolValidationError("An identifier (key or search term) is required to find the record.")
        self._navigation.navigate_to_detail_view(entity.name, identifier)
        return f"Navigating to {entity.name} record matching '{identifier}'."

    def _filter_active_list(self, criteria: Any) -> str:
        logger.info("[Tool:filter_active_list] Called with criteria=%s", criteria)
        entity_name = self._active_list_entity(
            "No active list view to filter. Use navigate_to_list first to open a list view."
        )
        pairs = self._parse(criteria)
        if not pairs:
            raise ToolValidationError("A criteria expression is required. Example: category=Beverages;discontinued=false")
        entity = self.schema.find_entity(entity_name)
        if entity is not None:
            for key, _ in pairs:
                if entity.find_property(key) is None and entity.find_relationship(key) is None:
                    raise self._unknown_property(entity, key)
        normalized = ";".join(f"{key}={value}" for key, value in pairs)
        self._navigation.filter_active_list(normalized)
        return f"Filter applied to {entity_name} list: {normalized}"

    def _clear_active_list_filter(self) -> str:
        logger.info("[Tool:clear_active_list_filter] Called")
        entity_name = self._active_list_entity("No active list view to clear filter from.")
        self._navigation.clear_active_list_filter()
        return f"Filter cleared from {entity_name} list. All records are now visible."

    # -- text surface --------------------------------------------------------

    def _as_text(self, tool: str, call: Callable[[], str]) -> str:
        try:
            result = call()
        except ToolError as exc:
            logger.info("[Tool:%s] %s", tool, exc)
            return str(exc)
        logger.info("[Tool:%s] Returning %d chars", tool, len(result))
        return result

    def list_entities(self) -> str:
        return self._as_text("list_entities", self._list_entities)

    def describe_entity(self, entity_name: str) -> str:
        return self._as_text("describe_entity", lambda: self._describe_entity(entity_name))

    def query_entity(self, entity_name: str, filter: Any = "", limit: int = DEFAULT_QUERY_LIMIT) -> str:
        return self._as_text("query_entity", lambda: self._query_entity(entity_name, filter, limit))

    def create_entity(self, entity_name: str, properties: Any) -> str:
        return self._as_text("create_entity", lambda: self._create_entity(entity_name, properties))

    def update_entity(self, entity_name: str, identifier: str | None, properties: Any) -> str:
        return self._as_text("update_entity", lambda: self._update_entity(entity_name, identifier, properties))

    def get_active_view(self) -> str:
        return self._as_text("get_active_view", self._get_active_view)

    def navigate_to_list(self, entity_name: str) -> str:
        return self._as_text("navigate_to_list", lambda: self._navigate_to_list(entity_name))

    def navigate_to_detail(self, entity_name: str, identifier: str) -> str:
        return self._as_text("navigate_to_detail", lambda: self._navigate_to_detail(entity_name, identifier))

    def filter_active_list(self, criteria: Any) -> str:
        return self._as_text("filter_active_list", lambda: self._filter_active_list(criteria))

    def clear_active_list_filter(self) -> str:
        return self._as_text("clear_active_list_filter", self._clear_active_list_filter)

    # -- structured surface --------------------------------------------------

    def _dispatch(self, name: str, args: dict[str, Any]) -> str:
        entity = _str_arg(args, "entity_name", "entityName", "entity")
        if name == "list_entities":
            return self._list_entities()
        if name == "describe_entity":
            return self._describe_entity(entity)
        if name == "query_entity":
            limit = _limit_arg(args.get("limit", args.get("top")))
            return self._query_entity(entity, _pairs_arg(args, "filter", "filters"), limit)
        if name == "create_entity":
            return self._create_entity(entity, _pairs_arg(args, "properties", "values"))
        if name == "update_entity":
            return self._update_entity(
                entity,
                _str_arg(args, "identifier", "id", "key"),
                _pairs_arg(args, "properties", "values"),
            )
        if name == "get_active_view":
            return self._get_active_view()
        if name == "navigate_to_list":
            return self._navigate_to_list(entity)
        if name == "navigate_to_detail":
            return self._navigate_to_detail(entity, _str_arg(args, "identifier", "id", "key"))
        if name == "filter_active_list":
            return self._filter_active_list(_pairs_arg(args, "criteria", "filter"))
        return self._clear_active_list_filter()

    def run_tool(self, *, name: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run one tool and wrap its outcome as ``{"ok", "tool", "result" | "error"}``."""

        available = self.tool_names()
        if name not in available:
            return {"ok": False, "tool": name, "error": f"Unknown tool '{name}'.", "available": available}
        if args is not None and not isinstance(args, dict):
            return {"ok": False, "tool": name, "error": "Tool arguments must be a JSON object."}
        try:
            result = self._dispatch(name, args or {})
        except ToolError as exc:
            logger.info("[Tool:%s] %s", name, exc)
            return {"ok": False, "tool": name, "error": str(exc)}
        logger.info("[Tool:%s] Returning %d chars", name, len(result))
        return {"ok": True, "tool": name, "result": result}


_TOOL_CALL_FENCE_RE = re.compile(r"```(?:tool_calls?|json)?\s*\n(.*?)```", re.DOTALL)


def _tool_call_from_payload(payload: Any) -> tuple[str, dict[str, Any]] | None:
    if isinstance(payload, list) and payload:
        payload = payload[0]
    if not isinstance(payload, dict):
        return None
    name = payload.get("name") or payload.get("tool")
    args = payload.get("arguments") or payload.get("args") or {}
    if isinstance(args, str):
        try:
            args = json.loads(args)
        except json.JSONDecodeError:
            return None
    if not isinstance(name, str) or not name.strip() or not isinstance(args, dict):
        return None
    return name.strip(), args


def extract_tool_call_line(text: str) -> str | None:
    """Return the first TOOL_CALL line, if any.

    Tool calls may appear alongside extra text; some models do not reliably
    output "tool call only" despite being instructed to.
    """

    for raw_line in (text or "").splitlines():
        line = raw_line.strip()
        if line.startswith(TOOL_CALL_PREFIX):
            return line
    return None


def parse_tool_call(text: str) -> tuple[str, dict[str, Any]] | None:
    """Parse a TOOL_CALL request from assistant output.

    Expected format (single line, may appear anywhere in the response)::

      TOOL_CALL {"name":"...","arguments":{...}}

    A fenced ``tool_call`` JSON block is accepted as well.
    """

    line = extract_tool_call_line(text)
    if line is None:
        match = _TOOL_CALL_FENCE_RE.search(text or "")
        if not match:
            return None
        raw = match.group(1).strip()
    else:
        raw = line[len(TOOL_CALL_PREFIX) :].strip()
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return _tool_call_from_payload(payload)


def format_tool_result_message(tool_name: str, payload: dict[str, Any]) -> str:
    return f"{TOOL_RESULT_PREFIX} {tool_name} (JSON):\n" + json.dumps(
        payload, ensure_ascii=False, separators=(",", ":")
    )


_PAIRS_SCHEMA: dict[str, Any] = {
    "anyOf": [
        {"type": "string"},
        {"type": "object", "additionalProperties": {"type": ["string", "number", "boolean", "null"]}},
    ]
}

_ENTITY_NAME_PARAM = {
    "type": "string",
    "description": "Entity name (e.g. 'Customer', 'Order', 'Product'). Use list_entities to see available names.",
}


def _spec(name: str, description: str, properties: dict[str, Any] | None = None, required: list[str] | None = None) -> dict[str, Any]:
    parameters: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        parameters["required"] = required
    return {"type": "function", "function": {"name": name, "description": description, "parameters": parameters}}


_OPENAI_TOOL_SPECS: dict[str, dict[str, Any]] = {
    "list_entities": _spec(
        "list_entities",
        "List all available entities (tables) with their properties and relationships.",
    ),
    "describe_entity": _spec(
        "describe_entity",
        "Get full schema details for a single entity: properties, types, relationships and enum values. "
        "Call this before querying or creating records of an unfamiliar entity.",
        {"entity_name": _ENTITY_NAME_PARAM},
        ["entity_name"],
    ),
    "query_entity": _spec(
        "query_entity",
        "Query records of any entity. Call describe_entity first if you are unsure about property names or types.",
        {
            "entity_name": _ENTITY_NAME_PARAM,
            "filter": {
                **_PAIRS_SCHEMA,
                "description": "Optional filter as semicolon-separated 'Property=value' pairs, e.g. "
                "'status=New;ship_country=USA'. Text matches by substring; relationships match by name.",
            },
            "limit": {"type": "integer", "description": "Maximum number of records to return. Default 25."},
        },
        ["entity_name"],
    ),
    "create_entity": _spec(
        "create_entity",
        "Create a new record of any entity. Call describe_entity first to see required fields and relationships.",
        {
            "entity_name": _ENTITY_NAME_PARAM,
            "properties": {
                **_PAIRS_SCHEMA,
                "description": "Semicolon-separated 'Property=value' pairs (or an object). For relationships give a "
                "search term matched against the related record's name, e.g. 'customer=Acme;status=New'.",
            },
        },
        ["entity_name", "properties"],
    ),
    "update_entity": _spec(
        "update_entity",
        "Update an existing record. Use get_active_view to find the current record's key when the user says "
        "'this record'.",
        {
            "entity_name": _ENTITY_NAME_PARAM,
            "identifier": {
                "type": "string",
                "description": "Primary key or a search term matched by name. Defaults to the record open in the "
                "active detail view.",
            },
            "properties": {
                **_PAIRS_SCHEMA,
                "description": "Semicolon-separated 'Property=value' pairs for the fields to change.",
            },
        },
        ["entity_name", "properties"],
    ),
    "get_active_view": _spec(
        "get_active_view",
        "Describe what the user is currently viewing (entity, list or detail view, current record). "
        "Call this first when the user refers to 'this record' or 'this list'.",
    ),
    "navigate_to_list": _spec(
        "navigate_to_list",
        "Open the list view of an entity in the user's application.",
        {"entity_name": _ENTITY_NAME_PARAM},
        ["entity_name"],
    ),
    "navigate_to_detail": _spec(
        "navigate_to_detail",
        "Open a specific record's detail view in the user's application.",
        {
            "entity_name": _ENTITY_NAME_PARAM,
            "identifier": {"type": "string", "description": "Primary key or a search term matched by name."},
        },
        ["entity_name", "identifier"],
    ),
    "filter_active_list": _spec(
        "filter_active_list",
        "Filter the active list view. Use get_active_view first to know which entity is displayed.",
        {
            "criteria": {
                **_PAIRS_SCHEMA,
                "description": "Semicolon-separated 'Property=value' pairs, e.g. 'category=Beverages;discontinued=false'.",
            }
        },
        ["criteria"],
    ),
    "clear_active_list_filter": _spec(
        "clear_active_list_filter",
        "Remove the assistant-applied filter from the active list view.",
    ),
}


def openai_tools(*, tool_names: set[str] | None = None) -> list[dict[str, Any]]:
    """Return OpenAI-compatible tool schemas, optionally restricted to ``tool_names``."""

    return [spec for name, spec in _OPENAI_TOOL_SPECS.items() if tool_names is None or name in tool_names]
