from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from models.definition import PatternDefinition, PatternRules
from models.event import Event
from models.pattern import PatternStats, RecognizedPattern
from recognition.engine import PatternRecognitionEngine
from recognition.errors import InvalidPatternDefinition, PersistenceFailure
from recognition.rules import validate_definition
from routes.deps import get_engine, get_stores
from store import Stores

router = APIRouter(prefix="/patterns", tags=["patterns"])


# ---------- Request / Response schemas ----------

class AnalyzeResponse(BaseModel):
    session_id: str
    patterns_found: int
    patterns: list[RecognizedPattern]


class AnalyzeUnprocessedResponse(BaseModel):
    sessions_analyzed: int
    results: dict[str, int]


class PatternListResponse(BaseModel):
    patterns: list[RecognizedPattern]
    count: int
    offset: int
    limit: int


class PatternDetail(RecognizedPattern):
    events: list[Event]


class ReloadResponse(BaseModel):
    definitions_loaded: int


class DefinitionUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    is_active: Optional[bool] = None
    rules: Optional[PatternRules] = None


# ---------- Analysis ----------

@router.post("/analyze/{session_id}", response_model=AnalyzeResponse)
async def analyze_session(session_id: str, engine: PatternRecognitionEngine = Depends(get_engine)):
    """
    Runs every active pattern definition over the session's events and
    persists the matches. A session without events yields an empty list.
    """
    try:
        patterns = engine.analyze_session(session_id)
    except PersistenceFailure as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return AnalyzeResponse(session_id=session_id, patterns_found=len(patterns), patterns=patterns)


@router.post("/analyze-unprocessed", response_model=AnalyzeUnprocessedResponse)
async def analyze_unprocessed(engine: PatternRecognitionEngine = Depends(get_engine)):
    """Analyzes every session that has events but no patterns yet."""
    results = engine.analyze_unprocessed_sessions()
    return AnalyzeUnprocessedResponse(sessions_analyzed=len(results), results=results)


# ---------- Definitions ----------

@router.get("/definitions", response_model=list[PatternDefinition])
async def list_definitions(stores: Stores = Depends(get_stores)):
    return stores.definitions.list_definitions()


@router.post("/definitions", response_model=PatternDefinition, status_code=201)
async def create_definition(body: PatternDefinition, stores: Stores = Depends(get_stores)):
    """
    Stores (or replaces) a definition. It only takes part in analysis after
    POST /patterns/definitions/reload.
    """
    try:
        validate_definition(body)
    except InvalidPatternDefinition as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    stores.definitions.upsert(body)
    return body


@router.put("/definitions/{definition_id}", response_model=PatternDefinition)
async def update_definition(
    definition_id: str,
    body: DefinitionUpdate,
    stores: Stores = Depends(get_stores),
):
    """
    Merges the supplied fields onto a stored definition (e.g. toggling
    is_active). Like POST, the change applies to analysis after a reload.
    """
    existing = stores.definitions.get(definition_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Pattern definition not found")

    # Only description may be cleared with an explicit null
    changes = {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if value is not None or key == "description"
    }
    updated = PatternDefinition(**{**existing.model_dump(), **changes})
    try:
        validate_definition(updated)
    except InvalidPatternDefinition as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    stores.definitions.upsert(updated)
    return updated


@router.delete("/definitions/{definition_id}", status_code=204)
async def delete_definition(definition_id: str, stores: Stores = Depends(get_stores)):
    if not stores.definitions.delete(definition_id):
        raise HTTPException(status_code=404, detail="Pattern definition not found")


@router.post("/definitions/reload", response_model=ReloadResponse)
async def reload_definitions(engine: PatternRecognitionEngine = Depends(get_engine)):
    return ReloadResponse(definitions_loaded=engine.reload_definitions())


# ---------- Browsing ----------

@router.get("", response_model=PatternListResponse)
async def list_patterns(
    session_id: Optional[str] = None,
    type: Optional[str] = None,
    min_confidence: float = Query(default=0.0, ge=0.0, le=1.0),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    stores: Stores = Depends(get_stores),
):
    patterns = stores.patterns.query(
        session_id=session_id,
        type=type,
        min_confidence=min_confidence,
        limit=limit,
        offset=offset,
    )
    return PatternListResponse(patterns=patterns, count=len(patterns), offset=offset, limit=limit)


@router.get("/stats/summary", response_model=PatternStats)
async def pattern_stats(stores: Stores = Depends(get_stores)):
    return stores.patterns.stats()


@router.get("/{pattern_id}", response_model=PatternDetail)
async def get_pattern(pattern_id: str, stores: Stores = Depends(get_stores)):
    """A single pattern together with the events it was matched from."""
    pattern = stores.patterns.get(pattern_id)
    if pattern is None:
        raise HTTPException(status_code=404, detail="Pattern not found")
    events = stores.events.get_events(pattern.event_ids)
    return PatternDetail(**pattern.model_dump(), events=events)
