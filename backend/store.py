"""
In-memory stores backing the collaborator interfaces the engine and the
synthesizer consume. No DB: everything lives in plain dicts. Each store
holds a lock, so it can be shared with code running outside the event loop
(a thread-pool dependency, a background batch job).

  EventStore       list_events(session_id), append(event), list_sessions()
  DefinitionStore  list_active_definitions(), upsert(), delete()
  PatternStore     save_all(patterns), list_by_session(session_id), query()
  ModelStore       save(model, pattern_ids), get(model_id)
"""

import threading
import uuid
from dataclasses import dataclass, field
from typing import Optional

import config
from models.app_model import ApplicationModel
from models.definition import PatternDefinition
from models.event import Event
from models.pattern import PatternStats, PatternTypeStats, RecognizedPattern
from models.session import Session
from recognition.definitions import default_definitions


class EventStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}
        self._events: dict[str, list[Event]] = {}
        self._by_id: dict[str, Event] = {}

    def start_session(self, user_id: Optional[str] = None, session_id: Optional[str] = None) -> Session:
        session_id = session_id or f"session_{uuid.uuid4().hex[:12]}"
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(session_id=session_id, user_id=user_id)
                self._sessions[session_id] = session
                self._events[session_id] = []
            return session

    def append(self, event: Event) -> None:
        """Record an event; unknown sessions are created on first sight."""
        self.start_session(session_id=event.session_id)
        with self._lock:
            self._events[event.session_id].append(event)
            self._by_id[event.id] = event
            self._sessions[event.session_id].event_count += 1

    def list_events(self, session_id: str) -> list[Event]:
        """Events ordered by timestamp; ties keep insertion order."""
        with self._lock:
            events = list(self._events.get(session_id, []))
        return sorted(events, key=lambda e: e.timestamp)

    def get_events(self, event_ids: list[str]) -> list[Event]:
        with self._lock:
            found = [self._by_id[eid] for eid in event_ids if eid in self._by_id]
        return sorted(found, key=lambda e: e.timestamp)

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def list_sessions(self) -> list[Session]:
        with self._lock:
            return list(self._sessions.values())


class DefinitionStore:
    def __init__(self, definitions: Optional[list[PatternDefinition]] = None):
        self._lock = threading.Lock()
        self._definitions: dict[str, PatternDefinition] = {
            d.id: d for d in (definitions or [])
        }

    def list_definitions(self) -> list[PatternDefinition]:
        with self._lock:
            return list(self._definitions.values())

    def list_active_definitions(self) -> list[PatternDefinition]:
        return [d for d in self.list_definitions() if d.is_active]

    def get(self, definition_id: str) -> Optional[PatternDefinition]:
        with self._lock:
            return self._definitions.get(definition_id)

    def upsert(self, definition: PatternDefinition) -> None:
        with self._lock:
            self._definitions[definition.id] = definition

    def delete(self, definition_id: str) -> bool:
        with self._lock:
            return self._definitions.pop(definition_id, None) is not None


class PatternStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._patterns: dict[str, RecognizedPattern] = {}

    def save_all(self, patterns: list[RecognizedPattern]) -> None:
        with self._lock:
            for pattern in patterns:
                self._patterns[pattern.id] = pattern

    def get(self, pattern_id: str) -> Optional[RecognizedPattern]:
        with self._lock:
            return self._patterns.get(pattern_id)

    def list_by_session(self, session_id: str) -> list[RecognizedPattern]:
        with self._lock:
            found = [p for p in self._patterns.values() if p.session_id == session_id]
        return sorted(found, key=lambda p: p.start_time)

    def session_ids(self) -> set[str]:
        with self._lock:
            return {p.session_id for p in self._patterns.values()}

    def query(
        self,
        session_id: Optional[str] = None,
        type: Optional[str] = None,
        min_confidence: float = 0.0,
        limit: int = 100,
        offset: int = 0,
    ) -> list[RecognizedPattern]:
        with self._lock:
            found = list(self._patterns.values())
        found = [
            p for p in found
            if (session_id is None or p.session_id == session_id)
            and (type is None or p.type == type)
            and p.confidence >= min_confidence
        ]
        found.sort(key=lambda p: p.start_time, reverse=True)
        return found[offset:offset + limit]

    def stats(self) -> PatternStats:
        with self._lock:
            patterns = list(self._patterns.values())

        by_type: dict[str, list[float]] = {}
        for p in patterns:
            by_type.setdefault(p.type, []).append(p.confidence)

        rows = [
            PatternTypeStats(type=t, count=len(c), avg_confidence=round(sum(c) / len(c), 4))
            for t, c in by_type.items()
        ]
        rows.sort(key=lambda r: r.count, reverse=True)
        avg = sum(p.confidence for p in patterns) / len(patterns) if patterns else 0.0
        return PatternStats(
            total_patterns=len(patterns),
            patterns_by_type=rows,
            avg_confidence=round(avg, 4),
        )


class ModelStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._models: dict[str, ApplicationModel] = {}
        self._pattern_ids: dict[str, list[str]] = {}

    def save(self, model: ApplicationModel, pattern_ids: list[str]) -> None:
        with self._lock:
            self._models[model.id] = model
            self._pattern_ids[model.id] = list(pattern_ids)

    def get(self, model_id: str) -> Optional[ApplicationModel]:
        with self._lock:
            return self._models.get(model_id)

    def pattern_ids_for(self, model_id: str) -> list[str]:
        with self._lock:
            return list(self._pattern_ids.get(model_id, []))


@dataclass
class Stores:
    events: EventStore = field(default_factory=EventStore)
    definitions: DefinitionStore = field(default_factory=DefinitionStore)
    patterns: PatternStore = field(default_factory=PatternStore)
    models: ModelStore = field(default_factory=ModelStore)


def build_stores(seed_definitions: Optional[bool] = None) -> Stores:
    if seed_definitions is None:
        seed_definitions = config.SEED_DEFAULT_DEFINITIONS
    definitions = default_definitions() if seed_definitions else []
    return Stores(definitions=DefinitionStore(definitions))
