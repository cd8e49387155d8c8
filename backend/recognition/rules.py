"""
Step-rule validation and event matching.

A step rule is an open mapping:

  {"type": "navigation", "to": {"pattern": "*/new"}}
  {"type": "form", "formAction": "field_change", "minOccurrences": 3}
  {"type": "interaction", "metadata": {"semanticAction": {"pattern": "crud_read"}}}

"type" (optional) must equal the event type. "minOccurrences" (optional,
integer >= 1) is consumed by the matcher. Every other key is a constraint on
event.data:
  - scalar expected value   -> exact equality
  - {"pattern": "<glob>"}   -> glob against the stringified actual value
  - any other mapping       -> recursive match against a nested mapping

validate_definition() runs when definitions are loaded; matches_rule() runs in
the scan loop and never raises.
"""

import logging
from collections.abc import Mapping
from typing import Any

from models.definition import PatternDefinition, StepRule
from models.event import Event
from recognition.errors import InvalidPatternDefinition, MalformedEventData
from recognition.glob import glob_match

logger = logging.getLogger(__name__)

RESERVED_KEYS = {"type", "minOccurrences"}

_SCALARS = (str, int, float, bool, type(None))
_MISSING = object()


# ---------- Load-time validation ----------

def _check_constraint(definition_id: str, path: str, expected: Any) -> None:
    if isinstance(expected, Mapping):
        if "pattern" in expected:
            if not isinstance(expected["pattern"], str):
                raise InvalidPatternDefinition(
                    definition_id, f"glob at {path!r} must be a string"
                )
            return
        for key, nested in expected.items():
            _check_constraint(definition_id, f"{path}.{key}", nested)
        return
    if not isinstance(expected, _SCALARS):
        raise InvalidPatternDefinition(
            definition_id,
            f"unrecognized constraint shape at {path!r}: {type(expected).__name__}",
        )


def validate_definition(definition: PatternDefinition) -> None:
    """Raise InvalidPatternDefinition if the definition cannot be matched."""
    sequence = definition.rules.sequence
    if not sequence:
        raise InvalidPatternDefinition(definition.id, "sequence is empty")
    if definition.rules.timeout < 0:
        raise InvalidPatternDefinition(definition.id, "timeout must be >= 0")

    for index, rule in enumerate(sequence):
        if not isinstance(rule, Mapping):
            raise InvalidPatternDefinition(definition.id, f"step {index} is not a mapping")

        rule_type = rule.get("type")
        if rule_type is not None and not isinstance(rule_type, str):
            raise InvalidPatternDefinition(definition.id, f"step {index} type must be a string")

        min_occ = rule.get("minOccurrences")
        if min_occ is not None and (
            isinstance(min_occ, bool) or not isinstance(min_occ, int) or min_occ < 1
        ):
            raise InvalidPatternDefinition(
                definition.id, f"step {index} minOccurrences must be an integer >= 1"
            )

        for key, expected in rule.items():
            if key not in RESERVED_KEYS:
                _check_constraint(definition.id, f"sequence[{index}].{key}", expected)


# ---------- Match-time evaluation ----------

def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _match_constraint(data: Mapping, key: str, expected: Any) -> bool:
    actual = data.get(key, _MISSING)

    if isinstance(expected, Mapping):
        if actual is _MISSING or actual is None:
            return False

        if "pattern" in expected:
            if not isinstance(actual, _SCALARS):
                raise MalformedEventData(
                    f"{key!r} is a {type(actual).__name__}, cannot glob-match it"
                )
            return glob_match(expected["pattern"], _stringify(actual))

        if not isinstance(actual, Mapping):
            raise MalformedEventData(
                f"{key!r} is a {type(actual).__name__}, expected a nested mapping"
            )
        return all(_match_constraint(actual, k, v) for k, v in expected.items())

    if actual is _MISSING:
        return False
    # True must not equal 1
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected


def matches_rule(event: Event, rule: StepRule) -> bool:
    """True when the event satisfies the rule's type and every key constraint."""
    expected_type = rule.get("type")
    if expected_type and event.type != expected_type:
        return False

    try:
        for key, expected in rule.items():
            if key in RESERVED_KEYS:
                continue
            if not _match_constraint(event.data, key, expected):
                return False
    except MalformedEventData as exc:
        logger.debug("Event %s treated as non-match: %s", event.id, exc)
        return False
    return True


def min_occurrences(rule: StepRule) -> int:
    return rule.get("minOccurrences") or 1
