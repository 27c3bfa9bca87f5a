"""Session management models."""

from datetime import datetime, timedelta
from uuid import UUID

from pydantic import Field

from futuresqr.core.db import MongoModel
from futuresqr.utils import new_opaque_token, now


class Session(MongoModel):
    """Server-side session, also the registry slot for its CSRF token.

    Indexed on session_id - unique, created_at (TTL).
    A session without user_id is anonymous.
    """

    session_id: str = Field(default_factory=new_opaque_token)
    user_id: UUID | None = None
    csrf_token: str | None = None
    created_at: datetime = Field(default_factory=now)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def expires_at(self, ttl_seconds: int) -> datetime:
        return self.created_at + timedelta(seconds=ttl_seconds)

    def is_expired(self, ttl_seconds: int, at: datetime | None = None) -> bool:
        return (at or now()) >= self.expires_at(ttl_seconds)
