from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from futuresqr.config import Config
from futuresqr.core.core import Core
from futuresqr.core.modules.admission.models import AuthenticationResult, IssuedToken
from futuresqr.core.modules.user.models import Principal, User, UserView
from futuresqr.core.pagination import PaginationResult, SliceResult
from futuresqr.errors import NotFoundError, ValidationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Admission ===
    async def issue_token(self, session_id: str | None) -> IssuedToken:
        """Issue a CSRF token, creating a session if needed."""
        return await self._core.services.admission.issue_token(session_id)

    async def authenticate(
        self, session_id: str | None, csrf_token: str | None, login_name: str, password: str
    ) -> AuthenticationResult:
        """Authenticate user and rotate the session."""
        return await self._core.services.admission.authenticate(session_id, csrf_token, login_name, password)

    async def admit(self, session_id: str | None, csrf_token: str | None, method: str) -> Principal:
        """Admit a request to a protected resource."""
        return await self._core.services.admission.admit(session_id, csrf_token, method)

    async def logout(self, session_id: str | None, csrf_token: str | None) -> None:
        """Invalidate user session."""
        await self._core.services.admission.logout(session_id, csrf_token)

    # === Users ===
    async def get_current_user(self, principal: Principal) -> UserView:
        user = await self._core.services.user.get_user(principal.user_id)
        return UserView.from_domain(user)

    async def list_users(self, principal: Principal, limit: int, offset: int) -> PaginationResult[UserView]:
        page = await self._core.services.user.list_users(limit, offset)
        return _page_view(page)

    async def find_user_by_login_name(self, principal: Principal, login_name: str) -> UserView:
        user = await self._core.services.user.find_by_login_name_exact(login_name)
        if user is None:
            raise NotFoundError(f"User '{login_name}' not found")
        return UserView.from_domain(user)

    async def find_users_by_login_name(
        self, principal: Principal, text: str, limit: int, offset: int
    ) -> SliceResult[UserView]:
        users = await self._core.services.user.find_by_login_name_contains(text, limit, offset)
        return SliceResult(
            items=[UserView.from_domain(u) for u in users.items],
            limit=users.limit,
            offset=users.offset,
            has_next=users.has_next,
        )

    async def find_users_by_display_name(
        self, principal: Principal, text: str, limit: int, offset: int
    ) -> PaginationResult[UserView]:
        page = await self._core.services.user.find_by_display_name_contains(text, limit, offset)
        return _page_view(page)

    async def create_user(
        self, principal: Principal, login_name: str, password: str, display_name: str | None, roles: list[str] | None
    ) -> UserView:
        """Create a new user (admin only)."""
        self._core.services.admission.ensure_admin(principal)
        user = await self._core.services.user.create_user(login_name, password, display_name, roles)
        return UserView.from_domain(user)

    async def delete_user(self, principal: Principal, login_name: str) -> None:
        """Delete a user (admin only, cannot delete self)."""
        self._core.services.admission.ensure_admin(principal)
        user = await self._core.services.user.get_user_by_login_name(login_name)
        if user.id == principal.user_id:
            raise ValidationError("Cannot delete yourself")
        await self._core.services.user.delete_user(user.id)


def _page_view(page: PaginationResult[User]) -> PaginationResult[UserView]:
    return PaginationResult(
        items=[UserView.from_domain(u) for u in page.items], total=page.total, limit=page.limit, offset=page.offset
    )
