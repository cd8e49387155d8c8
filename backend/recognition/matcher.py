"""
Sequence matcher: finds every non-overlapping occurrence of one pattern
definition in a session's ordered event list.

Scan (greedy, left to right):
  - try to match the rule sequence starting at event i
  - events that do not satisfy the current step are skipped (gaps allowed)
  - a step with minOccurrences > 1 keeps collecting events that satisfy the
    same step until the count is reached
  - any candidate event more than `timeout` ms after the starting event
    aborts the attempt
  - on success scanning resumes right after the last matched event, so no
    event is ever reused across matches; on failure it resumes at i + 1

Confidence (0.0 - 1.0):
  0.7  base
  +0.1 matched event count equals the sequence length
  +0.1 mean inter-event interval < 5s, or +0.05 if < 30s
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional

from models.definition import PatternDefinition, StepRule
from models.event import Event
from models.pattern import RecognizedPattern
from recognition.errors import InvalidPatternDefinition
from recognition.rules import matches_rule, min_occurrences


BASE_CONFIDENCE = 0.7
EXACT_LENGTH_BONUS = 0.1
TIGHT_INTERVAL_MS = 5_000
TIGHT_BONUS = 0.1
LOOSE_INTERVAL_MS = 30_000
LOOSE_BONUS = 0.05

# Pattern ids are uuid5(session, definition, matched event ids): same input, same id
_PATTERN_NAMESPACE = uuid.UUID("6f1c2d3e-8a4b-4c5d-9e6f-7a8b9c0d1e2f")


@dataclass
class SequenceMatch:
    events: list[Event]
    start_index: int
    end_index: int          # index of the last matched event


def match_at(
    events: list[Event],
    start: int,
    sequence: list[StepRule],
    timeout: int,
) -> Optional[SequenceMatch]:
    """Try to match the whole sequence beginning at events[start]."""
    t0 = events[start].timestamp
    matched: list[Event] = []
    last_index = start
    j = start
    s = 0

    while s < len(sequence) and j < len(events):
        event = events[j]
        rule = sequence[s]

        if event.timestamp - t0 > timeout:
            return None

        if not matches_rule(event, rule):
            j += 1
            continue

        matched.append(event)
        last_index = j
        j += 1

        required = min_occurrences(rule)
        if required > 1:
            occurrences = 1
            while j < len(events) and occurrences < required:
                candidate = events[j]
                if candidate.timestamp - t0 > timeout:
                    return None
                if matches_rule(candidate, rule):
                    matched.append(candidate)
                    last_index = j
                    occurrences += 1
                j += 1
            if occurrences < required:
                return None

        s += 1

    if s < len(sequence):
        return None
    return SequenceMatch(events=matched, start_index=start, end_index=last_index)


def calculate_confidence(matched: list[Event], sequence_length: int) -> float:
    confidence = BASE_CONFIDENCE

    if len(matched) == sequence_length:
        confidence += EXACT_LENGTH_BONUS

    if len(matched) > 1:
        duration = matched[-1].timestamp - matched[0].timestamp
        avg_interval = duration / (len(matched) - 1)
        if avg_interval < TIGHT_INTERVAL_MS:
            confidence += TIGHT_BONUS
        elif avg_interval < LOOSE_INTERVAL_MS:
            confidence += LOOSE_BONUS

    return round(min(confidence, 1.0), 4)


def extract_metadata(matched: list[Event], definition: PatternDefinition) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        "patternType": definition.type,
        "patternName": definition.name,
        "eventCount": len(matched),
        "duration": matched[-1].timestamp - matched[0].timestamp if len(matched) > 1 else 0,
    }
    fields: list[str] = []
    steps: list[Any] = []

    for event in matched:
        if event.entity_name:
            metadata["entityName"] = event.entity_name
        if event.entity_id:
            metadata["entityId"] = event.entity_id
        if event.navigation_path:
            metadata["path"] = event.navigation_path
        if event.field_name:
            fields.append(event.field_name)
        if event.workflow_name:
            metadata["workflowName"] = event.workflow_name
        if event.current_step is not None:
            steps.append(event.current_step)

    if fields:
        metadata["fields"] = list(dict.fromkeys(fields))
    if steps:
        metadata["steps"] = steps
    return metadata


def find_matches(events: list[Event], definition: PatternDefinition) -> list[RecognizedPattern]:
    """All non-overlapping matches of `definition` in `events` (ordered by timestamp)."""
    sequence = definition.rules.sequence
    timeout = definition.rules.timeout
    if not sequence:
        raise InvalidPatternDefinition(definition.id, "sequence is empty")
    matches: list[RecognizedPattern] = []

    i = 0
    while i < len(events):
        match = match_at(events, i, sequence, timeout)
        if match is None:
            i += 1
            continue

        matched = match.events
        event_ids = [e.id for e in matched]
        pattern_key = f"{matched[0].session_id}:{definition.id}:{','.join(event_ids)}"
        matches.append(
            RecognizedPattern(
                id=str(uuid.uuid5(_PATTERN_NAMESPACE, pattern_key)),
                session_id=matched[0].session_id,
                type=definition.type,
                confidence=calculate_confidence(matched, len(sequence)),
                start_time=matched[0].timestamp,
                end_time=matched[-1].timestamp,
                event_ids=event_ids,
                metadata=extract_metadata(matched, definition),
            )
        )
        i = match.end_index + 1

    return matches
