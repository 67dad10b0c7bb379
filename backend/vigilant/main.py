"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from . import database
from .config import Settings, settings as default_settings
from .routers import monitors_router, reports_router
from .services import (
    FailureClassifier,
    HistoryRecorder,
    MonitorEngine,
    MonitorStore,
    Prober,
    SchedulerService,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting Vigilant")

    await database.init_db(app.state.db_engine)
    logger.info("Database initialized")

    if app.state.settings.scheduler_enabled:
        app.state.scheduler.start()

    yield

    app.state.scheduler.stop()
    await database.close_db(app.state.db_engine)
    logger.info("Shutdown complete")


def create_app(
    settings: Settings = default_settings,
    db_engine: Optional[AsyncEngine] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Vigilant",
        description="HTTP endpoint availability monitoring",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    db_engine = db_engine or database.engine
    store = MonitorStore(database.create_session_factory(db_engine))
    engine = MonitorEngine(
        store,
        prober=Prober(
            timeout=settings.probe_timeout_seconds,
            verify=settings.verify_tls,
            transport=transport,
        ),
        classifier=FailureClassifier(patterns=settings.failure_patterns),
        recorder=HistoryRecorder(
            limit=settings.history_limit,
            heartbeat_ms=settings.heartbeat_seconds * 1000,
        ),
        max_concurrent_checks=settings.max_concurrent_checks,
    )

    app.state.settings = settings
    app.state.db_engine = db_engine
    app.state.store = store
    app.state.engine = engine
    app.state.scheduler = SchedulerService(engine, interval_seconds=settings.sweep_interval_seconds)

    app.include_router(monitors_router)
    app.include_router(reports_router)

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "scheduler": app.state.scheduler.running,
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=default_settings.web_port)
