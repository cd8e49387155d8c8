import uuid
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field

from models.event import Event
from models.session import Session
from routes.deps import get_stores
from store import Stores

router = APIRouter(tags=["session"])


# ---------- Request / Response schemas ----------

class StartSessionRequest(BaseModel):
    user_id: Optional[str] = None


class StartSessionResponse(BaseModel):
    session_id: str


class LogEventRequest(BaseModel):
    session_id: str
    type: str           # "navigation" | "form" | "interaction" | "state_change" | "workflow"
    timestamp: int      # Unix timestamp in milliseconds
    data: dict[str, Any] = Field(default_factory=dict)
    id: Optional[str] = None


class LogEventResponse(BaseModel):
    event_id: str


# ---------- Endpoints ----------

@router.post("/session/start", response_model=StartSessionResponse)
async def start_session(
    body: Optional[StartSessionRequest] = Body(default=None),
    stores: Stores = Depends(get_stores),
):
    """
    Creates a new session.
    Returns a unique session_id that the instrumented front-end uses for every event.
    """
    user_id = body.user_id if body else None
    session = stores.events.start_session(user_id=user_id)
    return StartSessionResponse(session_id=session.session_id)


@router.post("/session/event", response_model=LogEventResponse)
async def log_event(body: LogEventRequest, stores: Stores = Depends(get_stores)):
    """
    Records one interaction event. Events are write-once and are consumed
    later by pattern analysis.
    """
    if stores.events.get_session(body.session_id) is None:
        raise HTTPException(status_code=404, detail="Session not found")

    event = Event(
        id=body.id or f"evt_{uuid.uuid4().hex}",
        session_id=body.session_id,
        type=body.type,
        timestamp=body.timestamp,
        data=body.data,
    )
    stores.events.append(event)
    return LogEventResponse(event_id=event.id)


@router.get("/session/{session_id}", response_model=Session)
async def get_session(session_id: str, stores: Stores = Depends(get_stores)):
    session = stores.events.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session
