from typing import Any
from pydantic import BaseModel, ConfigDict, Field


class RecognizedPattern(BaseModel):
    """A successful match of one pattern definition. Written once, never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str
    session_id: str
    type: str
    confidence: float = Field(ge=0.0, le=1.0)
    start_time: int
    end_time: int
    event_ids: list[str]            # match order, not necessarily contiguous in the stream
    metadata: dict[str, Any] = Field(default_factory=dict)


class PatternTypeStats(BaseModel):
    type: str
    count: int
    avg_confidence: float


class PatternStats(BaseModel):
    total_patterns: int
    patterns_by_type: list[PatternTypeStats]
    avg_confidence: float
