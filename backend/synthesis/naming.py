"""
Naming helpers shared by the derivation passes: identifier casing, display
labels, path handling, singularization and navigation icons.
"""

import re
from typing import Optional


# Trailing path segments that name an action, not a resource
ACTION_SEGMENTS = {"new", "edit", "create"}

ICONS = {
    "dashboard": "LayoutDashboard",
    "home": "Home",
    "menu": "Menu",
    "order": "ShoppingCart",
    "orders": "ShoppingCart",
    "staff": "Users",
    "table": "Grid",
    "tables": "Grid",
    "reservation": "Calendar",
    "reservations": "Calendar",
    "inventory": "Package",
    "settings": "Settings",
    "report": "BarChart",
    "reports": "BarChart",
    "customer": "User",
    "customers": "Users",
}
DEFAULT_ICON = "Circle"

_NUMERIC_ID = re.compile(r"^\d+$")


def to_camel_case(text: str) -> str:
    """Identifier casing: "Menu Item" -> "menuItem", "order_line" -> "orderLine"."""
    return re.sub(r"[^a-zA-Z0-9]+(.)", lambda m: m.group(1).upper(), text.lower())


def to_display_name(text: str) -> str:
    """Label casing: "menu_item" / "menuItem" -> "Menu Item"."""
    spaced = re.sub(r"[-_]", " ", text)
    spaced = re.sub(r"([a-z])([A-Z])", r"\1 \2", spaced)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def singularize(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("es"):
        return word[:-2]
    if word.endswith("s"):
        return word[:-1]
    return word


def path_segments(path: str) -> list[str]:
    return [s for s in path.split("/") if s]


def path_to_name(path: str) -> str:
    return " - ".join(to_display_name(s) for s in path_segments(path))


def base_path(path: str) -> str:
    """Strip the final "/segment": "/orders/5" -> "/orders"; "/orders" stays "/orders"."""
    return re.sub(r"/[^/]+$", "", path) or path


def first_segment(path: str) -> str:
    parts = path.split("/")
    return parts[1] if len(parts) > 1 and parts[1] else path


def entity_name_from_path(path: str) -> Optional[str]:
    """Last segment that names a resource, singularized: "/orders/new" -> "order"."""
    for segment in reversed(path_segments(path)):
        if segment.lower() in ACTION_SEGMENTS or _NUMERIC_ID.match(segment):
            continue
        return singularize(segment)
    return None


def infer_icon(segment: str) -> str:
    return ICONS.get(segment.lower(), DEFAULT_ICON)
