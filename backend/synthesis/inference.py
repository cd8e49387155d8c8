"""
Heuristic classifiers: property types from field names, CRUD operations and
screen types from pattern types, workflow step types from step payloads.
Every table is ordered; the first matching rule wins.
"""

import re
from collections.abc import Mapping
from typing import Any, Optional


# ---------- Field name -> property type ----------

PROPERTY_TYPE_RULES = [
    (("email",), "email"),
    (("phone",), "phone"),
    (("date", "time"), "datetime"),
    (("price", "cost", "amount"), "currency"),
    (("count", "quantity", "number"), "number"),
    (("is", "has", "active"), "boolean"),
    (("description", "notes", "content"), "text"),
    (("url", "link"), "url"),
    (("image", "photo", "avatar"), "image"),
]

OPERATIONS = ("create", "read", "update", "delete", "list")

_TRAILING_ID = re.compile(r"/\d+$")


def infer_property_type(field_name: str) -> str:
    name = field_name.lower()
    for needles, prop_type in PROPERTY_TYPE_RULES:
        if any(n in name for n in needles):
            return prop_type
    return "string"


def extract_operation(pattern_type: str) -> Optional[str]:
    for op in OPERATIONS:
        if op in pattern_type:
            return op
    return None


def infer_screen_type(pattern_type: str, path: str) -> str:
    if "list" in pattern_type or path.endswith("/"):
        return "list"
    if "create" in pattern_type or "/new" in path:
        return "form"
    if "update" in pattern_type or "/edit" in path:
        return "form"
    if "read" in pattern_type or _TRAILING_ID.search(path):
        return "detail"
    if "dashboard" in path:
        return "dashboard"
    return "custom"


def infer_step_type(step: Any) -> str:
    if not isinstance(step, Mapping):
        return "action"
    if step.get("formId") or step.get("fields"):
        return "form"
    if step.get("condition"):
        return "decision"
    if step.get("path") or step.get("navigate"):
        return "navigation"
    return "action"
