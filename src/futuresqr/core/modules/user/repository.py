import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from futuresqr.core.modules.user.models import User
from futuresqr.core.modules.user.query_builder import USER_SORT, contains, contains_query, login_name_query
from futuresqr.core.pagination import PaginationResult, SliceResult
from futuresqr.errors import ValidationError


class UserRepository(ABC):
    """Named user lookups backed by a concrete store."""

    async def on_start(self) -> None:
        """Prepare the store (indexes) on startup."""

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> User | None: ...

    @abstractmethod
    async def find_by_login_name_exact(self, login_name: str) -> User | None: ...

    @abstractmethod
    async def find_by_login_name_contains(self, text: str, limit: int, offset: int) -> SliceResult[User]: ...

    @abstractmethod
    async def find_by_display_name_contains(self, text: str, limit: int, offset: int) -> PaginationResult[User]: ...

    @abstractmethod
    async def list_users(self, limit: int, offset: int) -> PaginationResult[User]: ...

    @abstractmethod
    async def insert(self, user: User) -> None:
        """Store a new user. Raises ValidationError if the login name is taken."""

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        """Remove a user, returns False if it did not exist."""


class MongoUserRepository(UserRepository):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        await self._collection.create_index([("login_name", 1)], unique=True)

    async def find_by_id(self, user_id: UUID) -> User | None:
        doc = await self._collection.find_one({"_id": user_id})
        return None if doc is None else User.model_validate(doc)

    async def find_by_login_name_exact(self, login_name: str) -> User | None:
        doc = await self._collection.find_one(login_name_query(login_name))
        return None if doc is None else User.model_validate(doc)

    async def find_by_login_name_contains(self, text: str, limit: int, offset: int) -> SliceResult[User]:
        cursor = self._collection.find(contains_query("login_name", text)).sort(USER_SORT).skip(offset).limit(limit + 1)
        users = await User.from_cursor(cursor)
        return SliceResult(items=users[:limit], limit=limit, offset=offset, has_next=len(users) > limit)

    async def find_by_display_name_contains(self, text: str, limit: int, offset: int) -> PaginationResult[User]:
        return await self._page(contains_query("display_name", text), limit, offset)

    async def list_users(self, limit: int, offset: int) -> PaginationResult[User]:
        return await self._page({}, limit, offset)

    async def insert(self, user: User) -> None:
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise ValidationError(f"User '{user.login_name}' already exists") from e

    async def delete(self, user_id: UUID) -> bool:
        result = await self._collection.delete_one({"_id": user_id})
        return result.deleted_count == 1

    async def _page(self, query: dict[str, Any], limit: int, offset: int) -> PaginationResult[User]:
        total = await self._collection.count_documents(query)
        cursor = self._collection.find(query).sort(USER_SORT).skip(offset).limit(limit)
        users = await User.from_cursor(cursor)
        return PaginationResult(items=users, total=total, limit=limit, offset=offset)


class MemoryUserRepository(UserRepository):
    """In-process user store, ordered by login name like the MongoDB one."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self._lock = threading.Lock()

    async def find_by_id(self, user_id: UUID) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    async def find_by_login_name_exact(self, login_name: str) -> User | None:
        matches = self._select(lambda u: u.login_name == login_name)
        return matches[0] if matches else None

    async def find_by_login_name_contains(self, text: str, limit: int, offset: int) -> SliceResult[User]:
        matches = self._select(lambda u: contains(u.login_name, text))
        window = matches[offset : offset + limit + 1]
        return SliceResult(items=window[:limit], limit=limit, offset=offset, has_next=len(window) > limit)

    async def find_by_display_name_contains(self, text: str, limit: int, offset: int) -> PaginationResult[User]:
        matches = self._select(lambda u: contains(u.display_name, text))
        return PaginationResult(items=matches[offset : offset + limit], total=len(matches), limit=limit, offset=offset)

    async def list_users(self, limit: int, offset: int) -> PaginationResult[User]:
        users = self._select(lambda _: True)
        return PaginationResult(items=users[offset : offset + limit], total=len(users), limit=limit, offset=offset)

    async def insert(self, user: User) -> None:
        with self._lock:
            if any(u.login_name == user.login_name for u in self._users.values()):
                raise ValidationError(f"User '{user.login_name}' already exists")
            self._users[user.id] = user

    async def delete(self, user_id: UUID) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def _select(self, predicate: Callable[[User], bool]) -> list[User]:
        with self._lock:
            users = [u for u in self._users.values() if predicate(u)]
        return sorted(users, key=lambda u: u.login_name)
