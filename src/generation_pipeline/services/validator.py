"""Structural validation of generated content.

Each content type has a ``ContentSchema``: narrative section types that must
carry ``content`` text, the name of the top-level items collection, and the
minimum number of items. ``is_valid`` accepts any Python object and never
raises, so the streaming loop can call it against half-built payloads. The
decision itself is strict: nothing is coerced or repaired.
"""

from dataclasses import dataclass
from typing import Any

from generation_pipeline.entities import ContentType


@dataclass(frozen=True)
class ContentSchema:
    """Required shape of the structured content for one content type."""

    items_field: str
    min_items: int
    narrative_types: frozenset[str]
    min_sections: int = 1


SCHEMAS: dict[ContentType, ContentSchema] = {
    ContentType.PLAN: ContentSchema(
        items_field="questions",
        min_items=10,
        narrative_types=frozenset({"timeline"}),
    ),
    ContentType.TRAINING_PLAN: ContentSchema(
        items_field="objectives",
        min_items=3,
        narrative_types=frozenset({"overview"}),
    ),
    ContentType.RESUME_REWRITE: ContentSchema(
        items_field="changes",
        min_items=3,
        narrative_types=frozenset({"summary"}),
    ),
}


def schema_for(content_type: ContentType) -> ContentSchema:
    return SCHEMAS[ContentType(content_type)]


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _string_list(value: Any, min_length: int = 1) -> bool:
    return (
        isinstance(value, list)
        and len(value) >= min_length
        and all(_non_empty_str(item) for item in value)
    )


def is_valid_section(section: Any, schema: ContentSchema) -> bool:
    """Check one section: type and title, then text or items by type."""
    if not isinstance(section, dict):
        return False
    if not (_non_empty_str(section.get("type")) and _non_empty_str(section.get("title"))):
        return False
    if section["type"] in schema.narrative_types:
        return _non_empty_str(section.get("content"))
    return _string_list(section.get("items"))


def is_valid(candidate: Any, content_type: ContentType) -> bool:
    """Return True when ``candidate`` satisfies the schema for ``content_type``."""
    schema = schema_for(content_type)
    if not isinstance(candidate, dict):
        return False

    sections = candidate.get("sections")
    if not isinstance(sections, list) or len(sections) < schema.min_sections:
        return False
    if not all(is_valid_section(section, schema) for section in sections):
        return False

    return _string_list(candidate.get(schema.items_field), schema.min_items)
