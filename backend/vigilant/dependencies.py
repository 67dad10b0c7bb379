"""FastAPI dependencies resolving the services attached to the app."""
from fastapi import Request

from .services.engine import MonitorEngine
from .services.store import MonitorStore


def get_store(request: Request) -> MonitorStore:
    return request.app.state.store


def get_engine(request: Request) -> MonitorEngine:
    return request.app.state.engine
