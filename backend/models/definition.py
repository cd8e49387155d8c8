from typing import Any, Optional
from pydantic import BaseModel, Field


# A step rule is an open mapping: {"type"?, "minOccurrences"?, <key>: <expected>...}
StepRule = dict[str, Any]


class PatternRules(BaseModel):
    sequence: list[StepRule] = Field(default_factory=list)
    timeout: int            # milliseconds between first and last matched event


class PatternDefinition(BaseModel):
    id: str
    name: str
    type: str               # pattern category tag, e.g. "crud_create"
    description: Optional[str] = None
    is_active: bool = True
    rules: PatternRules
