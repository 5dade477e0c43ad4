"""Build a :class:`SchemaGraph` from SQLAlchemy mapped classes.

Discovery is a pure function of the class universe and its markers:

* **Mode** - opt-in when any class carries an entity level visibility marker,
  in which case only classes marked visible are included. Otherwise every
  non-abstract class under the recognised namespace is included.
* **Members** - each mapped attribute is classified as infrastructure,
  foreign-key shadow, hidden, collection navigation, reference navigation
  or scalar. The first three are dropped.
* **Order** - entities are sorted by name, members keep mapping order.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Iterable
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from sqlalchemy import Column, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import ColumnProperty, Mapper, RelationshipProperty
from sqlalchemy.sql import sqltypes as T

from entitychat.logging import get_logger

from .markers import (
    entity_description,
    entity_visibility,
    member_description,
    member_visibility,
)
from .metadata import EntityMetadata, PropertyMetadata, RelationshipMetadata, SchemaGraph


logger = get_logger(__name__)

DEFAULT_NAMESPACE = "entitychat.db.models"

INFRASTRUCTURE_FIELDS = frozenset({"id", "gc_record", "optimistic_lock_field"})

FOREIGN_KEY_ID_TYPES = (int, uuid.UUID)

_FRIENDLY_TYPE_NAMES: dict[type, str] = {
    str: "string",
    int: "int",
    float: "float",
    Decimal: "decimal",
    bool: "bool",
    datetime: "datetime",
    date: "date",
    time: "time",
    uuid.UUID: "uuid",
}


def registry_universe(base: Any) -> list[type]:
    """Every class mapped by the declarative ``base`` (abstract bases are unmapped)."""

    return [mapper.class_ for mapper in base.registry.mappers]


def column_python_type(column: Any) -> type | None:
    enum_class = getattr(column.type, "enum_class", None)
    if enum_class is not None:
        return enum_class
    try:
        return column.type.python_type
    except NotImplementedError:
        return None


def friendly_type_name(python_type: type | None, *, nullable: bool) -> str:
    if python_type is None:
        name = "object"
    elif isinstance(python_type, type) and issubclass(python_type, enum.Enum):
        name = python_type.__name__
    else:
        name = _FRIENDLY_TYPE_NAMES.get(python_type, getattr(python_type, "__name__", str(python_type)))
    return f"{name}?" if nullable else name


def is_infrastructure_column(key: str, column: Any, mapper: Mapper | None = None) -> bool:
    """Identity, concurrency-token and soft-delete columns are never exposed."""

    if key.lower() in INFRASTRUCTURE_FIELDS:
        return True
    if getattr(column, "primary_key", False):
        return True
    version_column = getattr(mapper, "version_id_col", None) if mapper is not None else None
    return version_column is not None and column is version_column


def _foreign_key_stem(key: str) -> str | None:
    if key.lower().endswith("_id") and len(key) > 3:
        return key[:-3]
    if key.endswith("Id") and len(key) > 2:
        return key[:-2]
    return None


def is_foreign_key_shadow(key: str, column: Any, to_one_relationships: Iterable[RelationshipProperty]) -> bool:
    """True for an id-typed ``*_id`` column superseded by a sibling navigation.

    The sibling is either a to-one relationship whose local columns include
    this (foreign key) column, or one named after the column stem.
    """

    stem = _foreign_key_stem(key)
    if stem is None:
        return False
    python_type = column_python_type(column)
    if python_type not in FOREIGN_KEY_ID_TYPES:
        return False
    has_foreign_key = bool(getattr(column, "foreign_keys", None))
    for rel in to_one_relationships:
        if has_foreign_key and column in rel.local_columns:
            return True
        if rel.key.lower() == stem.lower():
            return True
    return False


def _member_info(prop: Any) -> dict[str, Any]:
    info: dict[str, Any] = {}
    if isinstance(prop, ColumnProperty):
        for column in prop.columns:
            info.update(getattr(column, "info", None) or {})
    info.update(prop.info or {})
    return info


def is_hidden(prop: Any) -> bool:
    return member_visibility(_member_info(prop)) is False


def _is_abstract(cls: type) -> bool:
    return bool(cls.__dict__.get("__abstract__", False))


def _in_namespace(cls: type, namespace: str) -> bool:
    module = getattr(cls, "__module__", "") or ""
    return module == namespace or module.startswith(namespace + ".")


def _scalar_metadata(key: str, column: Column, info: dict[str, Any]) -> PropertyMetadata:
    python_type = column_python_type(column)
    nullable = bool(column.nullable)
    enum_class = python_type if isinstance(python_type, type) and issubclass(python_type, enum.Enum) else None
    if enum_class is not None:
        enum_values = tuple(member.name for member in enum_class)
    elif isinstance(column.type, T.Enum) and column.type.enums:
        enum_values = tuple(column.type.enums)
    else:
        enum_values = ()
    return PropertyMetadata(
        name=key,
        type_name=friendly_type_name(python_type, nullable=nullable),
        python_type=python_type,
        required=not nullable,
        storage_name=column.name or key,
        description=member_description(info),
        enum_values=enum_values,
        enum_class=enum_class,
        has_default=column.default is not None or column.server_default is not None,
    )


def build_entity(cls: type) -> EntityMetadata:
    """Reflect a single mapped class into :class:`EntityMetadata`."""

    mapper: Mapper = inspect(cls)
    to_one = [rel for rel in mapper.relationships if not rel.uselist]

    properties: list[PropertyMetadata] = []
    relationships: list[RelationshipMetadata] = []

    for prop in mapper.attrs:
        if isinstance(prop, RelationshipProperty):
            if is_hidden(prop):
                continue
            target = prop.mapper.class_
            relationships.append(
                RelationshipMetadata(
                    property_name=prop.key,
                    target_entity_name=target.__name__,
                    target_type=target,
                    is_collection=bool(prop.uselist),
                )
            )
            continue

        if not isinstance(prop, ColumnProperty):
            continue
        column = prop.columns[0]
        if not isinstance(column, Column):
            # SQL expression (column_property); not a stored field
            continue
        if is_infrastructure_column(prop.key, column, mapper):
            continue
        if is_foreign_key_shadow(prop.key, column, to_one):
            continue
        info = _member_info(prop)
        if member_visibility(info) is False:
            continue
        properties.append(_scalar_metadata(prop.key, column, info))

    local_table = getattr(mapper, "local_table", None)
    return EntityMetadata(
        name=cls.__name__,
        entity_type=cls,
        storage_name=getattr(local_table, "name", None) or cls.__name__,
        description=entity_description(cls),
        properties=tuple(properties),
        relationships=tuple(relationships),
    )


def discover(universe: Iterable[type], *, namespace: str = DEFAULT_NAMESPACE) -> SchemaGraph:
    """Build the metadata graph for ``universe``.

    Parameters
    ----------
    universe:
        Candidate entity classes. Failing to enumerate it is fatal and the
        error propagates.
    namespace:
        Module prefix of the business objects, used in fallback mode.
    """

    candidates = list(universe)
    opt_in = any(entity_visibility(cls) is not None for cls in candidates)

    entities: list[EntityMetadata] = []
    seen: set[str] = set()
    for cls in candidates:
        if _is_abstract(cls):
            continue
        if opt_in:
            if entity_visibility(cls) is not True:
                continue
        elif not _in_namespace(cls, namespace):
            continue

        try:
            entity = build_entity(cls)
        except SQLAlchemyError as exc:
            logger.warning("Skipping entity %s: %s", getattr(cls, "__name__", cls), exc)
            continue

        key = entity.name.lower()
        if key in seen:
            logger.warning("Skipping duplicate entity name %s (%s)", entity.name, cls.__module__)
            continue
        seen.add(key)
        entities.append(entity)

    entities.sort(key=lambda entity: entity.name)
    logger.info("Discovered %d entities (opt_in=%s)", len(entities), opt_in)
    return SchemaGraph(entities=tuple(entities), opt_in=opt_in)
