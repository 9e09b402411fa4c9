"""Call persistence service."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy import select

from app.db.models import Call
from app.services.interview.state import Turn, transcript_payload

logger = logging.getLogger(__name__)


class CallPersistenceService:
    """Service for persisting call data."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_call(self, call_sid: str) -> Call:
        """Create a new call record or return existing one."""
        existing_call = await self.get_call_by_sid(call_sid)
        if existing_call:
            return existing_call

        call = Call(call_sid=call_sid, status="in_progress")
        self.db.add(call)
        await self.db.commit()
        await self.db.refresh(call)
        return call

    async def get_call_by_sid(self, call_sid: str) -> Optional[Call]:
        """Get call by Twilio call SID."""
        result = await self.db.execute(
            select(Call).where(Call.call_sid == call_sid)
        )
        return result.scalar_one_or_none()

    async def update_call_status(
        self, call_sid: str, status: str, ended_at: Optional[datetime] = None
    ) -> Optional[Call]:
        """Update call status."""
        call = await self.get_call_by_sid(call_sid)
        if call:
            call.status = status
            if ended_at:
                call.ended_at = ended_at
            await self.db.commit()
            await self.db.refresh(call)
        return call

    async def update_call_transcript(
        self, call_sid: str, transcript: List[Dict[str, Any]]
    ) -> Optional[Call]:
        """Update call transcript."""
        call = await self.get_call_by_sid(call_sid)
        if call:
            call.transcript = transcript
            await self.db.commit()
            await self.db.refresh(call)
        return call

    async def record_completed_call(self, call_sid: str, history: List[Turn]) -> Call:
        """Store the finished transcript and mark the call completed."""
        call = await self.create_call(call_sid)
        call.transcript = transcript_payload(history)
        call.status = "completed"
        call.ended_at = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(call)
        return call


class CallRecorder:
    """Completion hook that writes finished interviews to the database."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def __call__(self, call_sid: str, history: List[Turn]) -> None:
        async with self.session_factory() as db:
            call = await CallPersistenceService(db).record_completed_call(call_sid, history)
        logger.info(
            f"[CALL RECORDER] Stored transcript - CallSid: {call_sid}, "
            f"Call ID: {call.id}, Turns: {len(history)}"
        )
