"""Session store interface and in-memory implementation."""
import asyncio
import logging
import time
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict, List, Optional

from app.services.call_session.models import CallSession

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Abstract registry of live call sessions."""

    @abstractmethod
    async def get_or_create(self, call_sid: str) -> CallSession:
        """Get the session for a call, creating it on first contact."""
        pass

    @abstractmethod
    async def get(self, call_sid: str) -> Optional[CallSession]:
        """Get an existing session."""
        pass

    @abstractmethod
    async def touch(self, call_sid: str) -> None:
        """Mark a session as active now."""
        pass

    @abstractmethod
    async def delete(self, call_sid: str) -> None:
        """Remove a session."""
        pass

    @abstractmethod
    async def sweep(self, now: float, idle_timeout: float) -> List[str]:
        """Remove sessions idle for longer than idle_timeout. Returns evicted call SIDs."""
        pass

    @abstractmethod
    def exclusive(self, call_sid: str):
        """Async context manager yielding the session with exclusive access to it."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class InMemorySessionStore(SessionStore):
    """Session store backed by a dict, with one asyncio lock per call.

    Sessions held through ``exclusive`` are never evicted by ``sweep``.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._sessions: Dict[str, CallSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._registry_lock = asyncio.Lock()

    async def get_or_create(self, call_sid: str) -> CallSession:
        async with self._registry_lock:
            session = self._sessions.get(call_sid)
            if session is None:
                session = CallSession(call_sid=call_sid, last_activity=self.clock())
                self._sessions[call_sid] = session
                self._locks[call_sid] = asyncio.Lock()
                logger.info(
                    f"[SESSION STORE] Created session - CallSid: {call_sid}, "
                    f"Live sessions: {len(self._sessions)}"
                )
            return session

    async def get(self, call_sid: str) -> Optional[CallSession]:
        return self._sessions.get(call_sid)

    async def touch(self, call_sid: str) -> None:
        session = self._sessions.get(call_sid)
        if session is not None:
            session.touch(self.clock())

    async def delete(self, call_sid: str) -> None:
        async with self._registry_lock:
            self._sessions.pop(call_sid, None)
            self._locks.pop(call_sid, None)
        logger.debug(f"[SESSION STORE] Deleted session - CallSid: {call_sid}")

    async def sweep(self, now: float, idle_timeout: float) -> List[str]:
        evicted = []
        async with self._registry_lock:
            for call_sid, session in list(self._sessions.items()):
                lock = self._locks.get(call_sid)
                if lock is not None and lock.locked():
                    continue
                if now - session.last_activity > idle_timeout:
                    del self._sessions[call_sid]
                    self._locks.pop(call_sid, None)
                    evicted.append(call_sid)

        if evicted:
            logger.info(
                f"[SESSION STORE] Evicted {len(evicted)} idle session(s), "
                f"{len(self._sessions)} remaining"
            )
        return evicted

    @asynccontextmanager
    async def exclusive(self, call_sid: str) -> AsyncIterator[CallSession]:
        while True:
            session = await self.get_or_create(call_sid)
            lock = self._locks.get(call_sid)
            if lock is None:
                continue
            async with lock:
                # The session may have been evicted while this task waited
                if self._sessions.get(call_sid) is not session:
                    continue
                yield session
                return

    def __len__(self) -> int:
        return len(self._sessions)
