from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from models.app_model import ApplicationModel
from recognition.errors import NoPatternsForSession, PersistenceFailure
from routes.deps import get_stores, get_synthesizer
from store import Stores
from synthesis.synthesizer import ApplicationModelSynthesizer

router = APIRouter(prefix="/models", tags=["models"])


# ---------- Request schema ----------

class SynthesizeRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


# ---------- Endpoints ----------

@router.post("/synthesize/{session_id}", response_model=ApplicationModel)
async def synthesize_model(
    session_id: str,
    body: Optional[SynthesizeRequest] = Body(default=None),
    synthesizer: ApplicationModelSynthesizer = Depends(get_synthesizer),
):
    """
    Builds an application model from the session's recognized patterns.
    409 when the session has not been analyzed yet.
    """
    body = body or SynthesizeRequest()
    try:
        return synthesizer.synthesize(session_id, name=body.name, description=body.description)
    except NoPatternsForSession as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except PersistenceFailure as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{model_id}", response_model=ApplicationModel)
async def get_model(model_id: str, stores: Stores = Depends(get_stores)):
    model = stores.models.get(model_id)
    if model is None:
        raise HTTPException(status_code=404, detail="Model not found")
    return model
