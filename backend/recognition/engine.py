"""
Pattern recognition engine.

Runs the sequence matcher for every active pattern definition over a
session's events and persists what it finds. The engine owns a cached,
validated tuple of definitions; reload_definitions() swaps it in one
assignment, so an analysis already running keeps the tuple it started with.
"""

import logging

from models.definition import PatternDefinition
from models.pattern import RecognizedPattern
from recognition.errors import InvalidPatternDefinition, PersistenceFailure
from recognition.matcher import find_matches
from recognition.rules import validate_definition

logger = logging.getLogger(__name__)


class PatternRecognitionEngine:
    def __init__(self, event_store, definition_store, pattern_sink):
        self.event_store = event_store
        self.definition_store = definition_store
        self.pattern_sink = pattern_sink
        self._definitions: tuple[PatternDefinition, ...] = ()
        self.reload_definitions()

    @property
    def definitions(self) -> tuple[PatternDefinition, ...]:
        return self._definitions

    def reload_definitions(self) -> int:
        """Re-read active definitions; invalid ones are skipped with a warning."""
        loaded: list[PatternDefinition] = []
        for definition in self.definition_store.list_active_definitions():
            try:
                validate_definition(definition)
            except InvalidPatternDefinition as exc:
                logger.warning("Skipping pattern definition: %s", exc)
                continue
            loaded.append(definition)

        self._definitions = tuple(loaded)
        logger.info("Loaded %d pattern definitions", len(loaded))
        return len(loaded)

    def analyze_session(self, session_id: str) -> list[RecognizedPattern]:
        """Match every active definition against the session and persist the results."""
        events = self.event_store.list_events(session_id)
        if not events:
            logger.info("No events recorded for session %s", session_id)
            return []

        definitions = self._definitions
        patterns: list[RecognizedPattern] = []
        for definition in definitions:
            patterns.extend(find_matches(events, definition))

        if patterns:
            try:
                self.pattern_sink.save_all(patterns)
            except Exception as exc:
                logger.error(
                    "Persisting %d patterns for session %s failed (may be partial): %s",
                    len(patterns), session_id, exc,
                )
                raise PersistenceFailure(f"patterns for session {session_id}", exc) from exc

        logger.info("Recognized %d patterns for session %s", len(patterns), session_id)
        return patterns

    def unprocessed_session_ids(self) -> list[str]:
        """Sessions that have events but no persisted patterns."""
        processed = self.pattern_sink.session_ids()
        return [
            s.session_id for s in self.event_store.list_sessions()
            if s.event_count > 0 and s.session_id not in processed
        ]

    def analyze_unprocessed_sessions(self) -> dict[str, int]:
        """
        Analyze every unprocessed session. One session failing never stops the
        others. Returns session_id -> number of patterns for the sessions that
        succeeded.
        """
        session_ids = self.unprocessed_session_ids()
        logger.info("Found %d unprocessed sessions", len(session_ids))

        results: dict[str, int] = {}
        for session_id in session_ids:
            try:
                results[session_id] = len(self.analyze_session(session_id))
            except Exception:
                logger.exception("Failed to analyze session %s", session_id)
        return results
