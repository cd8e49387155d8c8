"""
Built-in pattern definitions.

Seeded into the definition store at start-up (unless SEED_DEFAULT_DEFINITIONS
is off). They describe the event shapes the instrumented front-ends emit for
CRUD flows, list browsing and multi-step workflows.
"""

from models.definition import PatternDefinition, PatternRules


# ---------- Raw definitions ----------

DEFAULT_DEFINITIONS = [
    {
        "id": "crud_create",
        "name": "CRUD Create",
        "description": "User creates a new entity",
        "type": "crud_create",
        "rules": {
            "sequence": [
                {"type": "navigation", "to": {"pattern": "*/new"}},
                {"type": "form", "formAction": "start"},
                {"type": "form", "formAction": "field_change", "minOccurrences": 1},
                {"type": "form", "formAction": "submit"},
                {"type": "state_change", "changeType": "set"},
            ],
            "timeout": 300_000,     # 5 minutes
        },
    },
    {
        "id": "crud_read",
        "name": "CRUD Read",
        "description": "User views entity details",
        "type": "crud_read",
        "rules": {
            "sequence": [
                {
                    "type": "interaction",
                    "interactionType": "click",
                    "metadata": {"semanticAction": {"pattern": "crud_read"}},
                },
            ],
            "timeout": 10_000,
        },
    },
    {
        "id": "crud_update",
        "name": "CRUD Update",
        "description": "User updates an existing entity",
        "type": "crud_update",
        "rules": {
            "sequence": [
                {"type": "navigation", "to": {"pattern": "*/edit"}},
                {"type": "form", "formAction": "start"},
                {"type": "form", "formAction": "field_change", "minOccurrences": 1},
                {"type": "form", "formAction": "submit"},
                {"type": "state_change", "changeType": "update"},
            ],
            "timeout": 300_000,
        },
    },
    {
        "id": "crud_delete",
        "name": "CRUD Delete",
        "description": "User deletes an entity",
        "type": "crud_delete",
        "rules": {
            "sequence": [
                {
                    "type": "interaction",
                    "interactionType": "click",
                    "metadata": {"semanticAction": {"pattern": "crud_delete"}},
                },
                {"type": "state_change", "changeType": "delete"},
            ],
            "timeout": 30_000,
        },
    },
    {
        "id": "list_view",
        "name": "List View",
        "description": "User views a list of entities",
        "type": "list_view",
        "rules": {
            "sequence": [
                {
                    "type": "interaction",
                    "interactionType": "scroll",
                    "metadata": {"semanticAction": {"pattern": "list_view"}},
                },
            ],
            "timeout": 60_000,
        },
    },
    {
        "id": "filter",
        "name": "Filter",
        "description": "User filters a list",
        "type": "filter",
        "rules": {
            "sequence": [
                {"type": "interaction", "metadata": {"semanticAction": {"pattern": "filter"}}},
            ],
            "timeout": 30_000,
        },
    },
    {
        "id": "sort",
        "name": "Sort",
        "description": "User sorts a list",
        "type": "sort",
        "rules": {
            "sequence": [
                {"type": "interaction", "metadata": {"semanticAction": {"pattern": "sort"}}},
            ],
            "timeout": 10_000,
        },
    },
    {
        "id": "workflow",
        "name": "Workflow",
        "description": "User completes a multi-step workflow",
        "type": "workflow_step",
        "rules": {
            "sequence": [
                {"type": "workflow", "action": "start"},
                {"type": "workflow", "action": "step", "minOccurrences": 1},
                {"type": "workflow", "action": "complete"},
            ],
            "timeout": 600_000,     # 10 minutes
        },
    },
]


def default_definitions() -> list[PatternDefinition]:
    """Fresh PatternDefinition objects for every built-in rule set."""
    return [
        PatternDefinition(
            id=raw["id"],
            name=raw["name"],
            type=raw["type"],
            description=raw["description"],
            rules=PatternRules(**raw["rules"]),
        )
        for raw in DEFAULT_DEFINITIONS
    ]


def get_default_definition(definition_id: str) -> PatternDefinition:
    for definition in default_definitions():
        if definition.id == definition_id:
            return definition
    raise KeyError(definition_id)
