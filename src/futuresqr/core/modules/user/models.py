from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from futuresqr.core.db import MongoModel
from futuresqr.utils import now

ADMIN_ROLE = "ADMIN"
USER_ROLE = "USER"


class User(MongoModel):
    """User domain model with credentials."""

    login_name: str
    display_name: str
    password_hash: str  # bcrypt hash
    roles: list[str] = Field(default_factory=lambda: [USER_ROLE])
    created_at: datetime = Field(default_factory=now)


class Principal(BaseModel):
    """Authenticated identity attached to a session."""

    user_id: UUID
    login_name: str
    display_name: str
    roles: list[str]

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(user_id=user.id, login_name=user.login_name, display_name=user.display_name, roles=list(user.roles))

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles


class UserView(BaseModel):
    """User account information (API representation)."""

    uuid: UUID = Field(..., description="User ID")
    loginname: str = Field(..., description="Login name")
    displayname: str = Field(..., description="Display name")
    roles: list[str] = Field(..., description="Granted roles")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(uuid=user.id, loginname=user.login_name, displayname=user.display_name, roles=user.roles)

    @classmethod
    def from_principal(cls, principal: Principal) -> "UserView":
        return cls(
            uuid=principal.user_id,
            loginname=principal.login_name,
            displayname=principal.display_name,
            roles=principal.roles,
        )
