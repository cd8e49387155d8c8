"""
Application model synthesizer.

Turns the recognized patterns of one session into an ApplicationModel:

  entities    CRUD-ish patterns grouped by inferred entity name
  screens     patterns with a path, grouped by base path
  workflows   one per workflow pattern
  navigation  derived from the finalized screens

The model's confidence is the plain mean of the contributing patterns'
confidences. The model is persisted exactly once, together with the ids of
those patterns.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

import config
from models.app_model import ApplicationModel
from models.pattern import RecognizedPattern
from recognition.errors import NoPatternsForSession, PersistenceFailure
from synthesis.entities import derive_entities
from synthesis.navigation import derive_navigation
from synthesis.screens import derive_screens
from synthesis.workflows import derive_workflows

logger = logging.getLogger(__name__)


def mean_confidence(patterns: list[RecognizedPattern]) -> float:
    return sum(p.confidence for p in patterns) / len(patterns)


class ApplicationModelSynthesizer:
    def __init__(self, pattern_store, model_sink, version: Optional[str] = None):
        self.pattern_store = pattern_store
        self.model_sink = model_sink
        self.version = version or config.MODEL_SCHEMA_VERSION

    def _load_patterns(self, session_id: str) -> list[RecognizedPattern]:
        patterns = sorted(
            self.pattern_store.list_by_session(session_id),
            key=lambda p: p.start_time,
        )
        foreign = [p.id for p in patterns if p.session_id != session_id]
        if foreign:
            # A model only ever covers the requested session
            logger.error("Ignoring %d patterns not owned by session %s", len(foreign), session_id)
            patterns = [p for p in patterns if p.session_id == session_id]
        return patterns

    def build(
        self,
        session_id: str,
        patterns: list[RecognizedPattern],
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ApplicationModel:
        """Assemble a model from already-loaded patterns without persisting it."""
        if not patterns:
            raise NoPatternsForSession(session_id)

        entities = derive_entities(patterns)
        screens = derive_screens(patterns, entities)
        workflows = derive_workflows(patterns)
        navigation = derive_navigation(screens)

        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        return ApplicationModel(
            id=str(uuid.uuid4()),
            version=self.version,
            name=name or f"App_{today}",
            description=description or f"Generated from {len(patterns)} patterns",
            entities=entities,
            screens=screens,
            workflows=workflows,
            navigation=navigation,
            confidence=mean_confidence(patterns),
            metadata={
                "sessionId": session_id,
                "patternCount": len(patterns),
                "generatedAt": int(time.time() * 1000),
                "patternTypes": list(dict.fromkeys(p.type for p in patterns)),
            },
        )

    def synthesize(
        self,
        session_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ApplicationModel:
        """
        Build and persist the application model for a session.

        Raises NoPatternsForSession when the session has not been analyzed
        (or produced no patterns); nothing is persisted in that case.
        """
        patterns = self._load_patterns(session_id)
        model = self.build(session_id, patterns, name=name, description=description)

        try:
            self.model_sink.save(model, [p.id for p in patterns])
        except Exception as exc:
            logger.error("Persisting model %s for session %s failed: %s", model.id, session_id, exc)
            raise PersistenceFailure(f"model {model.id}", exc) from exc

        logger.info(
            "Synthesized model %s with %d entities, %d screens, %d workflows",
            model.id, len(model.entities), len(model.screens), len(model.workflows),
        )
        return model
