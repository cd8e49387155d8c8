"""
Error kinds raised at the engine / synthesizer boundary.

NoEventsForSession and MalformedEventData exist so callers can name them, but
the core never lets them escape: an empty session yields an empty analysis,
and malformed payloads are a local non-match inside constraint matching.
"""


class PatternMiningError(Exception):
    """Base class for every error this package raises."""


class NoEventsForSession(PatternMiningError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"No events recorded for session {session_id}")


class NoPatternsForSession(PatternMiningError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            f"No patterns found for session {session_id}; run analysis first"
        )


class InvalidPatternDefinition(PatternMiningError):
    def __init__(self, definition_id: str, reason: str):
        self.definition_id = definition_id
        self.reason = reason
        super().__init__(f"Invalid pattern definition {definition_id!r}: {reason}")


class PersistenceFailure(PatternMiningError):
    def __init__(self, what: str, cause: Exception):
        self.cause = cause
        super().__init__(f"Failed to persist {what}: {cause}")


class MalformedEventData(PatternMiningError):
    """Event payload shape does not fit a constraint (e.g. scalar where a mapping was expected)."""
