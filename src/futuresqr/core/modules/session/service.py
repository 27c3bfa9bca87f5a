import asyncio
import contextlib
from datetime import timedelta
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from futuresqr.core.core import Service
from futuresqr.core.modules.session.models import Session
from futuresqr.core.modules.session.repository import (
    MemorySessionRepository,
    MongoSessionRepository,
    SessionRepository,
)
from futuresqr.errors import CsrfInvalidError, NoSessionError, SessionExpiredError
from futuresqr.utils import now

logger = structlog.get_logger(__name__)

SWEEP_INTERVAL_SECONDS = 60


class SessionService(Service):
    """Session store: creation, lookup, rotation and invalidation."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]] | None) -> None:
        super().__init__(database)
        self._repository: SessionRepository = (
            MemorySessionRepository() if database is None else MongoSessionRepository(database)
        )
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def ttl_seconds(self) -> int:
        return self.core.config.session_ttl_seconds

    async def create_session(self, user_id: UUID | None = None) -> Session:
        """Create a session, anonymous unless ``user_id`` is given."""
        session = Session(user_id=user_id)
        await self._repository.insert(session)
        logger.debug("session_created", authenticated=user_id is not None)
        return session

    async def get_session(self, session_id: str | None) -> Session:
        """Load a live session.

        Raises:
            NoSessionError: If no id was presented or the session does not exist
            SessionExpiredError: If the session outlived its lifetime (it is removed)
        """
        if not session_id:
            raise NoSessionError
        session = await self._repository.get(session_id)
        if session is None:
            raise NoSessionError
        if session.is_expired(self.ttl_seconds):
            await self._repository.delete(session_id)
            logger.debug("session_expired", created_at=session.created_at.isoformat())
            raise SessionExpiredError
        return session

    async def find_session(self, session_id: str | None) -> Session | None:
        """Like ``get_session`` but returns None instead of raising."""
        try:
            return await self.get_session(session_id)
        except (NoSessionError, SessionExpiredError):
            return None

    async def store_csrf_token(self, session: Session, csrf_token: str) -> Session:
        updated = await self._repository.set_csrf_token(session.session_id, csrf_token)
        if updated is None:
            raise NoSessionError
        return updated

    async def rotate(self, session: Session, presented_token: str, user_id: UUID) -> Session:
        """Replace ``session`` by a new session bound to ``user_id``.

        The old session is removed only if ``presented_token`` is still its
        current CSRF token, so concurrent logins on one session rotate once.
        """
        taken = await self._repository.take(session.session_id, presented_token)
        if taken is None:
            # Lost a race: either the session is gone or its token moved on
            if await self._repository.get(session.session_id) is None:
                raise NoSessionError
            raise CsrfInvalidError
        new_session = await self.create_session(user_id)
        logger.info("session_rotated", user_id=str(user_id))
        return new_session

    async def invalidate(self, session_id: str) -> None:
        """Invalidate a session by removing it from the store."""
        await self._repository.delete(session_id)

    async def purge_expired(self) -> int:
        cutoff = now() - timedelta(seconds=self.ttl_seconds)
        return await self._repository.delete_created_before(cutoff)

    async def on_start(self) -> None:
        await self._repository.on_start(self.ttl_seconds)
        self._sweeper = asyncio.create_task(self._sweep())

    async def on_stop(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None

    async def _sweep(self) -> None:
        while True:
            await asyncio.sleep(SWEEP_INTERVAL_SECONDS)
            try:
                removed = await self.purge_expired()
            except Exception:
                logger.exception("session_sweep_failed")
                continue
            if removed:
                logger.debug("sessions_purged", count=removed)
