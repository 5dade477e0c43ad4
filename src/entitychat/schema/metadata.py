"""Immutable metadata graph produced by schema discovery."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class PropertyMetadata:
    """A scalar (non-navigation) member of an entity."""

    name: str
    type_name: str
    python_type: type | None
    required: bool
    storage_name: str
    description: str | None = None
    enum_values: tuple[str, ...] = ()
    enum_class: type[enum.Enum] | None = None
    has_default: bool = False

    @property
    def is_string(self) -> bool:
        return self.enum_class is None and self.python_type is str


@dataclass(frozen=True)
class RelationshipMetadata:
    """A navigation member pointing at another entity."""

    property_name: str
    target_entity_name: str
    target_type: type
    is_collection: bool

    @property
    def cardinality_label(self) -> str:
        return "has many" if self.is_collection else "belongs to"


@dataclass(frozen=True)
class EntityMetadata:
    name: str
    entity_type: type
    storage_name: str
    description: str | None = None
    properties: tuple[PropertyMetadata, ...] = ()
    relationships: tuple[RelationshipMetadata, ...] = ()

    def find_property(self, name: str) -> PropertyMetadata | None:
        needle = (name or "").strip().lower()
        return next((p for p in self.properties if p.name.lower() == needle), None)

    def find_relationship(self, name: str, *, to_one_only: bool = True) -> RelationshipMetadata | None:
        needle = (name or "").strip().lower()
        for rel in self.relationships:
            if to_one_only and rel.is_collection:
                continue
            if rel.property_name.lower() == needle:
                return rel
        return None

    @property
    def to_one_relationships(self) -> tuple[RelationshipMetadata, ...]:
        return tuple(rel for rel in self.relationships if not rel.is_collection)

    def property_names(self) -> list[str]:
        return [prop.name for prop in self.properties]

    def member_names(self) -> list[str]:
        """Names accepted as filter / assignment keys."""

        return self.property_names() + [rel.property_name for rel in self.to_one_relationships]


@dataclass(frozen=True)
class SchemaGraph:
    """All discovered entities, sorted by name, looked up case-insensitively."""

    entities: tuple[EntityMetadata, ...] = ()
    opt_in: bool = False
    _index: dict[str, EntityMetadata] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, EntityMetadata] = {}
        for entity in self.entities:
            index.setdefault(entity.name.lower(), entity)
        object.__setattr__(self, "_index", index)

    def __iter__(self) -> Iterator[EntityMetadata]:
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)

    def find_entity(self, name: str | None) -> EntityMetadata | None:
        return self._index.get((name or "").strip().lower())

    def entity_names(self) -> list[str]:
        return [entity.name for entity in self.entities]
