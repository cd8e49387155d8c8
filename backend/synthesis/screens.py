"""
Screen derivation.

Patterns that carry a navigation path are grouped by base path (the path
with its last segment stripped), one screen per group. A screen's type is
decided by the first pattern that creates it. Components are derived from
the union of what all contributing patterns show:

  DataTable    any pattern type mentioning "list"
               (sortable / filterable if any contributor mentions sort / filter)
  Form         any pattern type mentioning create / update
               (fields = union of every contributor's metadata.fields)
  FilterPanel  any pattern type mentioning "filter"
  SearchInput  any pattern type mentioning "search"
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from models.app_model import Entity, Screen, UIComponent
from models.pattern import RecognizedPattern
from synthesis.entities import field_names
from synthesis.inference import infer_screen_type
from synthesis.naming import base_path, path_to_name


@dataclass
class ScreenDraft:
    name: str
    path: str
    type: str
    actions: list[str] = field(default_factory=list)
    entity: Optional[str] = None
    components: list[str] = field(default_factory=list)    # component kinds, first-seen order
    fields: list[str] = field(default_factory=list)
    sortable: bool = False
    filterable: bool = False


ScreenAccumulator = dict[str, ScreenDraft]


def _add_kind(draft: ScreenDraft, kind: str) -> None:
    if kind not in draft.components:
        draft.components.append(kind)


def _find_entity(entities: list[Entity], name: str) -> Optional[Entity]:
    for entity in entities:
        if entity.name == name or entity.display_name == name:
            return entity
    return None


def fold_screen(
    acc: ScreenAccumulator,
    pattern: RecognizedPattern,
    entities: list[Entity],
) -> ScreenAccumulator:
    path = pattern.metadata.get("path")
    if not isinstance(path, str) or not path:
        return acc

    key = base_path(path)
    draft = acc.get(key)
    if draft is None:
        draft = ScreenDraft(
            name=path_to_name(key),
            path=key,
            type=infer_screen_type(pattern.type, path),
        )
        acc[key] = draft

    ptype = pattern.type
    if ptype not in draft.actions:
        draft.actions.append(ptype)

    entity_name = pattern.metadata.get("entityName")
    if isinstance(entity_name, str) and entity_name:
        entity = _find_entity(entities, entity_name)
        if entity is not None:
            draft.entity = entity.name

    for field_name in field_names(pattern):
        if field_name not in draft.fields:
            draft.fields.append(field_name)

    draft.sortable = draft.sortable or "sort" in ptype
    draft.filterable = draft.filterable or "filter" in ptype

    if "list" in ptype:
        _add_kind(draft, "DataTable")
    if "create" in ptype or "update" in ptype:
        _add_kind(draft, "Form")
    if "filter" in ptype:
        _add_kind(draft, "FilterPanel")
    if "search" in ptype:
        _add_kind(draft, "SearchInput")
    return acc


def _component(kind: str, draft: ScreenDraft) -> UIComponent:
    if kind == "DataTable":
        props = {"sortable": draft.sortable, "filterable": draft.filterable}
    elif kind == "Form":
        props = {"fields": list(draft.fields)}
    else:
        props = {}
    return UIComponent(id=str(uuid.uuid4()), type=kind, props=props)


def finalize_screen(draft: ScreenDraft) -> Screen:
    return Screen(
        id=str(uuid.uuid4()),
        name=draft.name,
        path=draft.path,
        type=draft.type,
        components=[_component(kind, draft) for kind in draft.components],
        actions=list(draft.actions),
        entity=draft.entity,
    )


def derive_screens(patterns: list[RecognizedPattern], entities: list[Entity]) -> list[Screen]:
    acc: ScreenAccumulator = {}
    for pattern in patterns:
        acc = fold_screen(acc, pattern, entities)
    return [finalize_screen(draft) for draft in acc.values()]
