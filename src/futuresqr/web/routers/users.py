from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from futuresqr.core.modules.user.models import UserView
from futuresqr.core.pagination import PaginationResult, SliceResult
from futuresqr.web.deps import AppDep, PrincipalDep
from futuresqr.web.openapi import ErrorResponse

router = APIRouter(prefix="/restdata/user", tags=["users"])

LimitQuery = Annotated[int, Query(ge=1, le=100, description="Maximum number of users returned")]
OffsetQuery = Annotated[int, Query(ge=0, description="Number of users skipped")]


class CreateUserRequest(BaseModel):
    """Request to create a new user."""

    login_name: str = Field(..., alias="loginname", min_length=1, description="Login name for the new user")
    password: str = Field(..., min_length=1, description="Password for the new user")
    display_name: str | None = Field(None, alias="displayname", description="Display name, defaults to login name")
    roles: list[str] | None = Field(None, description="Granted roles, defaults to USER")

    model_config = {"populate_by_name": True}


@router.get(
    "",
    summary="List users",
    description="Get a page of all users ordered by login name.",
    operation_id="listUsers",
    responses={403: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def list_users(
    app: AppDep, principal: PrincipalDep, limit: LimitQuery = 20, offset: OffsetQuery = 0
) -> PaginationResult[UserView]:
    return await app.list_users(principal, limit, offset)


@router.get(
    "/search/login",
    summary="Find user by login name",
    description="Get the user with exactly this login name.",
    operation_id="findUserByLoginName",
    responses={
        403: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def find_by_login_name(
    app: AppDep, principal: PrincipalDep, login_name: Annotated[str, Query(alias="loginName")]
) -> UserView:
    return await app.find_user_by_login_name(principal, login_name)


@router.get(
    "/search/loginContains",
    summary="Search users by login name",
    description="Get a slice of users whose login name contains the text, case-insensitive.",
    operation_id="findUsersByLoginNameContaining",
    responses={403: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def find_by_login_name_contains(
    app: AppDep,
    principal: PrincipalDep,
    login_name: Annotated[str, Query(alias="loginName")],
    limit: LimitQuery = 20,
    offset: OffsetQuery = 0,
) -> SliceResult[UserView]:
    return await app.find_users_by_login_name(principal, login_name, limit, offset)


@router.get(
    "/search/nameContains",
    summary="Search users by display name",
    description="Get a page of users whose display name contains the text, case-insensitive.",
    operation_id="findUsersByDisplayNameContaining",
    responses={403: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def find_by_display_name_contains(
    app: AppDep,
    principal: PrincipalDep,
    display_name: Annotated[str, Query(alias="displayName")],
    limit: LimitQuery = 20,
    offset: OffsetQuery = 0,
) -> PaginationResult[UserView]:
    return await app.find_users_by_display_name(principal, display_name, limit, offset)


@router.post(
    "",
    summary="Create new user",
    description="Create a new user account. Only accessible by admin users.",
    operation_id="createUser",
    responses={
        201: {"description": "User created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        403: {"model": ErrorResponse, "description": "Not authenticated or admin privileges required"},
    },
    status_code=201,
)
async def create_user(create_data: CreateUserRequest, app: AppDep, principal: PrincipalDep) -> UserView:
    return await app.create_user(
        principal, create_data.login_name, create_data.password, create_data.display_name, create_data.roles
    )


@router.delete(
    "/{login_name}",
    summary="Delete user",
    description="Delete a user account. Only accessible by admin users, who cannot delete themselves.",
    operation_id="deleteUser",
    responses={
        204: {"description": "User deleted successfully"},
        400: {"model": ErrorResponse, "description": "Cannot delete yourself"},
        403: {"model": ErrorResponse, "description": "Not authenticated or admin privileges required"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
    status_code=204,
)
async def delete_user(login_name: str, app: AppDep, principal: PrincipalDep) -> None:
    await app.delete_user(principal, login_name)
