"""Runtime schema discovery over the mapped business objects."""

from .discovery import DEFAULT_NAMESPACE, discover, registry_universe
from .markers import ai_description, ai_info, ai_visible
from .metadata import EntityMetadata, PropertyMetadata, RelationshipMetadata, SchemaGraph
from .render import NotFound, generate_system_prompt, render_detail, render_entity_listing, render_summary
from .service import SchemaDiscoveryService, get_schema_service

__all__ = [
    "DEFAULT_NAMESPACE",
    "EntityMetadata",
    "NotFound",
    "PropertyMetadata",
    "RelationshipMetadata",
    "SchemaDiscoveryService",
    "SchemaGraph",
    "ai_description",
    "ai_info",
    "ai_visible",
    "discover",
    "generate_system_prompt",
    "get_schema_service",
    "registry_universe",
    "render_detail",
    "render_entity_listing",
    "render_summary",
]
