from functools import cache
from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from futuresqr.core.core import Service
from futuresqr.core.modules.user.models import ADMIN_ROLE, USER_ROLE, User
from futuresqr.core.modules.user.repository import MemoryUserRepository, MongoUserRepository, UserRepository
from futuresqr.core.modules.user.validators import MAX_PASSWORD_BYTES, validate_login_name, validate_password
from futuresqr.core.pagination import PaginationResult, SliceResult
from futuresqr.errors import BadCredentialsError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


@cache
def _dummy_hash(rounds: int) -> bytes:
    # Checked when the login name is unknown so both failure kinds pay for one bcrypt check
    return bcrypt.hashpw(b"futuresqr-unknown-user", bcrypt.gensalt(rounds))


class UserService(Service):
    """User store access and credential verification."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]] | None) -> None:
        super().__init__(database)
        self._repository: UserRepository = (
            MemoryUserRepository() if database is None else MongoUserRepository(database)
        )

    async def get_user(self, user_id: UUID) -> User:
        user = await self._repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def get_user_by_login_name(self, login_name: str) -> User:
        user = await self._repository.find_by_login_name_exact(login_name)
        if user is None:
            raise NotFoundError(f"User '{login_name}' not found")
        return user

    async def find_by_login_name_exact(self, login_name: str) -> User | None:
        return await self._repository.find_by_login_name_exact(login_name)

    async def find_by_login_name_contains(self, text: str, limit: int = 20, offset: int = 0) -> SliceResult[User]:
        return await self._repository.find_by_login_name_contains(text, limit, offset)

    async def find_by_display_name_contains(
        self, text: str, limit: int = 20, offset: int = 0
    ) -> PaginationResult[User]:
        return await self._repository.find_by_display_name_contains(text, limit, offset)

    async def list_users(self, limit: int = 20, offset: int = 0) -> PaginationResult[User]:
        return await self._repository.list_users(limit, offset)

    async def create_user(
        self, login_name: str, password: str, display_name: str | None = None, roles: list[str] | None = None
    ) -> User:
        """Create user with hashed password."""
        validate_login_name(login_name)
        validate_password(password)
        if await self._repository.find_by_login_name_exact(login_name) is not None:
            raise ValidationError(f"User '{login_name}' already exists")

        user = User(
            login_name=login_name,
            display_name=display_name or login_name,
            password_hash=self._hash_password(password),
            roles=roles or [USER_ROLE],
        )
        await self._repository.insert(user)
        logger.info("user_created", login_name=login_name, roles=user.roles)
        return user

    async def delete_user(self, user_id: UUID) -> None:
        if not await self._repository.delete(user_id):
            raise NotFoundError(f"User '{user_id}' not found")
        logger.info("user_deleted", user_id=str(user_id))

    async def verify_credentials(self, login_name: str, password: str) -> User:
        """Return the user owning these credentials.

        Unknown login names and wrong passwords raise the same error after the
        same amount of hashing work. Passwords longer than any stored one can
        be are refused the same way.
        """
        user = await self._repository.find_by_login_name_exact(login_name)
        candidate = password.encode("utf-8")
        if user is None or len(candidate) > MAX_PASSWORD_BYTES:
            bcrypt.checkpw(candidate[:MAX_PASSWORD_BYTES], _dummy_hash(self._rounds))
            raise BadCredentialsError
        if not bcrypt.checkpw(candidate, user.password_hash.encode("utf-8")):
            raise BadCredentialsError
        return user

    async def ensure_admin_user_exists(self) -> None:
        """Create default admin user if not exists."""
        config = self.core.config
        if await self._repository.find_by_login_name_exact(config.admin_login_name) is None:
            await self.create_user(
                config.admin_login_name,
                config.admin_password,
                display_name="Administrator",
                roles=[ADMIN_ROLE, USER_ROLE],
            )

    async def on_start(self) -> None:
        """Initialize indexes and admin user."""
        await self._repository.on_start()
        if self.core.config.bootstrap_admin:
            await self.ensure_admin_user_exists()
        logger.debug("user_service_started")

    @property
    def _rounds(self) -> int:
        return self.core.config.password_hash_rounds

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self._rounds)).decode("utf-8")
