from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """One recorded interaction. Immutable once stored."""

    model_config = ConfigDict(frozen=True)

    id: str
    session_id: str
    type: str           # "navigation" | "form" | "interaction" | "state_change" | "workflow" | ...
    timestamp: int      # Unix timestamp in milliseconds
    data: dict[str, Any] = Field(default_factory=dict)

    # ---------- Typed accessors for the payload keys the matcher reads ----------

    def _text(self, key: str) -> Optional[str]:
        # Payloads are open; a list or mapping under a name key is ignored
        value = self.data.get(key)
        return value if isinstance(value, str) and value else None

    @property
    def entity_name(self) -> Optional[str]:
        return self._text("entityName")

    @property
    def entity_id(self) -> Optional[Any]:
        return self.data.get("entityId") or None

    @property
    def navigation_path(self) -> Optional[str]:
        # "path" wins over "to" when an event carries both
        return self._text("path") or self._text("to")

    @property
    def field_name(self) -> Optional[str]:
        return self._text("fieldName")

    @property
    def workflow_name(self) -> Optional[str]:
        return self._text("workflowName")

    @property
    def current_step(self) -> Optional[Any]:
        return self.data.get("currentStep")
