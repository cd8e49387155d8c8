from dotenv import load_dotenv
load_dotenv()

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from recognition.engine import PatternRecognitionEngine
from routes import app_models, patterns, session
from store import Stores, build_stores
from synthesis.synthesizer import ApplicationModelSynthesizer

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app(stores: Optional[Stores] = None) -> FastAPI:
    """Wire stores, engine and synthesizer onto a new FastAPI app."""
    stores = stores or build_stores()

    app = FastAPI(title="Pattern Mining API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.stores = stores
    app.state.engine = PatternRecognitionEngine(
        event_store=stores.events,
        definition_store=stores.definitions,
        pattern_sink=stores.patterns,
    )
    app.state.synthesizer = ApplicationModelSynthesizer(
        pattern_store=stores.patterns,
        model_sink=stores.models,
    )

    app.include_router(session.router)
    app.include_router(patterns.router)
    app.include_router(app_models.router)

    @app.get("/")
    def health():
        return {"status": "ok", "service": "pattern-mining"}

    return app


app = create_app()
