from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field


class Session(BaseModel):
    session_id: str
    user_id: Optional[str] = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    event_count: int = 0
