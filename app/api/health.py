"""Health check endpoint."""
import logging
from fastapi import APIRouter, Request

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(request: Request):
    """Health check with the number of live call sessions."""
    store = getattr(request.app.state, "session_store", None)
    live_sessions = len(store) if store is not None else 0
    logger.debug(f"[HEALTH] Health check requested - Live sessions: {live_sessions}")
    return {"status": "healthy", "live_sessions": live_sessions}
