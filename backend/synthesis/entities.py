"""
Entity derivation.

Folds over the session's patterns with an explicit accumulator keyed by the
inferred entity name. Each pattern contributes at most one CRUD operation and
any form fields it observed; finalization injects the standard properties.
"""

import uuid
from typing import Optional

from models.app_model import Entity, EntityProperty
from models.pattern import RecognizedPattern
from synthesis.inference import extract_operation, infer_property_type
from synthesis.naming import entity_name_from_path, to_camel_case, to_display_name


EntityAccumulator = dict[str, Entity]


def infer_entity_name(pattern: RecognizedPattern) -> Optional[str]:
    metadata = pattern.metadata
    name = metadata.get("entityName")
    if isinstance(name, str) and name:
        return name
    path = metadata.get("path")
    if isinstance(path, str) and path:
        return entity_name_from_path(path)
    return None


def field_names(pattern: RecognizedPattern) -> list[str]:
    """metadata.fields as a list of names; anything that is not a list of strings is ignored."""
    fields = pattern.metadata.get("fields")
    if not isinstance(fields, list):
        return []
    return [f for f in fields if isinstance(f, str) and f]


def _standard(existing: Optional[EntityProperty], name: str, prop_type: str) -> EntityProperty:
    if existing is None:
        return EntityProperty(name=name, type=prop_type, required=True)
    # A merged form field of the same name keeps its default, not its type
    return existing.model_copy(update={"type": prop_type, "required": True})


def ensure_standard_properties(properties: list[EntityProperty]) -> list[EntityProperty]:
    """
    Return a property list with `id` first and `createdAt`/`updatedAt` last,
    each exactly once and required. `id` is a string, the timestamps are
    datetimes, whatever type an observed field of the same name was given.
    Running this twice changes nothing.
    """
    by_name = {p.name: p for p in properties}
    ident = _standard(by_name.get("id"), "id", "string")
    created = _standard(by_name.get("createdAt"), "createdAt", "datetime")
    updated = _standard(by_name.get("updatedAt"), "updatedAt", "datetime")

    middle: list[EntityProperty] = []
    seen: set[str] = set()
    for prop in properties:
        if prop.name in ("id", "createdAt", "updatedAt") or prop.name in seen:
            continue
        seen.add(prop.name)
        middle.append(prop)
    return [ident, *middle, created, updated]


def fold_entity(acc: EntityAccumulator, pattern: RecognizedPattern) -> EntityAccumulator:
    key = infer_entity_name(pattern)
    if not key:
        return acc

    entity = acc.get(key)
    if entity is None:
        entity = Entity(
            id=str(uuid.uuid4()),
            name=to_camel_case(key),
            display_name=to_display_name(key),
        )
        acc[key] = entity

    operation = extract_operation(pattern.type)
    if operation and operation not in entity.operations:
        entity.operations.append(operation)

    known = {p.name for p in entity.properties}
    for field_name in field_names(pattern):
        if field_name in known:
            continue
        entity.properties.append(
            EntityProperty(name=field_name, type=infer_property_type(field_name), required=False)
        )
        known.add(field_name)
    return acc


def derive_entities(patterns: list[RecognizedPattern]) -> list[Entity]:
    acc: EntityAccumulator = {}
    for pattern in patterns:
        acc = fold_entity(acc, pattern)

    for entity in acc.values():
        entity.properties = ensure_standard_properties(entity.properties)
    return list(acc.values())
