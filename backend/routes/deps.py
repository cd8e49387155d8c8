"""
Request-scoped access to the objects main.create_app() wires onto app.state.
"""

from fastapi import Request

from recognition.engine import PatternRecognitionEngine
from store import Stores
from synthesis.synthesizer import ApplicationModelSynthesizer


def get_stores(request: Request) -> Stores:
    return request.app.state.stores


def get_engine(request: Request) -> PatternRecognitionEngine:
    return request.app.state.engine


def get_synthesizer(request: Request) -> ApplicationModelSynthesizer:
    return request.app.state.synthesizer
