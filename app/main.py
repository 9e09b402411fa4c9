"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.dependencies import build_session_manager
from app.core.logging import setup_logging
from app.db.database import AsyncSessionLocal, init_db
from app.api import health, webhooks
from app.services.call_session.store import InMemorySessionStore
from app.services.call_session.sweeper import SessionSweeper
from app.services.persistence.calls import CallRecorder

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    await init_db()

    store = InMemorySessionStore()
    sweeper = SessionSweeper(
        store,
        interval_seconds=settings.session_sweep_interval_seconds,
        idle_timeout_seconds=settings.session_idle_timeout_seconds,
        clock=store.clock,
    )
    app.state.session_store = store
    app.state.session_manager = build_session_manager(
        settings, store, on_complete=CallRecorder(AsyncSessionLocal)
    )
    sweeper.start()
    logger.info(f"[STARTUP] Interview agent ready - Augmentation: {settings.use_ai}")

    yield

    # Shutdown
    await sweeper.stop()


app = FastAPI(
    title="Interview Voice Agent",
    description="Spoken interview agent for community problem reporting",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(webhooks.voice.router, prefix="/webhooks", tags=["webhooks"])


@app.get("/")
async def root():
    """Service info."""
    return {
        "message": "Interview Voice Agent API",
        "version": "0.1.0",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
