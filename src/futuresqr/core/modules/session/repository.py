import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from futuresqr.core.modules.session.models import Session


class SessionRepository(ABC):
    """Session storage with per-session atomic operations."""

    async def on_start(self, ttl_seconds: int) -> None:
        """Prepare the store (indexes) on startup."""

    @abstractmethod
    async def get(self, session_id: str) -> Session | None: ...

    @abstractmethod
    async def insert(self, session: Session) -> None: ...

    @abstractmethod
    async def set_csrf_token(self, session_id: str, csrf_token: str) -> Session | None:
        """Replace the CSRF token, returns the updated session or None if it is gone."""

    @abstractmethod
    async def take(self, session_id: str, csrf_token: str) -> Session | None:
        """Delete the session only if its current CSRF token is ``csrf_token``.

        Returns the deleted session. Of two concurrent callers at most one gets it.
        """

    @abstractmethod
    async def delete(self, session_id: str) -> bool: ...

    @abstractmethod
    async def delete_created_before(self, cutoff: datetime) -> int: ...


class MongoSessionRepository(SessionRepository):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("sessions")

    async def on_start(self, ttl_seconds: int) -> None:
        # Unique index for session_id (for every admission lookup)
        await self._collection.create_index([("session_id", 1)], unique=True)
        # TTL index for automatic session cleanup
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=ttl_seconds)

    async def get(self, session_id: str) -> Session | None:
        doc = await self._collection.find_one({"session_id": session_id})
        return None if doc is None else Session.model_validate(doc)

    async def insert(self, session: Session) -> None:
        await self._collection.insert_one(session.to_mongo())

    async def set_csrf_token(self, session_id: str, csrf_token: str) -> Session | None:
        doc = await self._collection.find_one_and_update(
            {"session_id": session_id},
            {"$set": {"csrf_token": csrf_token}},
            return_document=ReturnDocument.AFTER,
        )
        return None if doc is None else Session.model_validate(doc)

    async def take(self, session_id: str, csrf_token: str) -> Session | None:
        doc = await self._collection.find_one_and_delete({"session_id": session_id, "csrf_token": csrf_token})
        return None if doc is None else Session.model_validate(doc)

    async def delete(self, session_id: str) -> bool:
        result = await self._collection.delete_one({"session_id": session_id})
        return result.deleted_count == 1

    async def delete_created_before(self, cutoff: datetime) -> int:
        result = await self._collection.delete_many({"created_at": {"$lt": cutoff}})
        return result.deleted_count


class MemorySessionRepository(SessionRepository):
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    async def get(self, session_id: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return None if session is None else session.model_copy()

    async def insert(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.session_id] = session.model_copy()

    async def set_csrf_token(self, session_id: str, csrf_token: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.csrf_token = csrf_token
            return session.model_copy()

    async def take(self, session_id: str, csrf_token: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.csrf_token != csrf_token:
                return None
            return self._sessions.pop(session_id)

    async def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    async def delete_created_before(self, cutoff: datetime) -> int:
        with self._lock:
            expired = [sid for sid, session in self._sessions.items() if session.created_at < cutoff]
            for sid in expired:
                del self._sessions[sid]
            return len(expired)
