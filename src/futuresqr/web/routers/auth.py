from typing import Annotated

from fastapi import APIRouter, Form, Response

from futuresqr.core.modules.csrf.models import CsrfView
from futuresqr.core.modules.user.models import UserView
from futuresqr.web.cookies import clear_auth_cookies, set_csrf_cookie, set_session_cookie
from futuresqr.web.deps import AppDep, ConfigDep, CsrfTokenDep, PrincipalDep, SessionIdDep
from futuresqr.web.openapi import ErrorResponse

router = APIRouter(prefix="/rest/user", tags=["auth"])


@router.get(
    "/csrf",
    summary="Get CSRF token",
    description="Issue a fresh CSRF token for the current session, creating a session when none is present.",
    operation_id="getCsrfToken",
    responses={200: {"description": "Token issued, session cookie set"}},
)
async def get_csrf_token(app: AppDep, config: ConfigDep, session_id: SessionIdDep, response: Response) -> CsrfView:
    issued = await app.issue_token(session_id)
    set_session_cookie(response, config, issued.session_id)
    return CsrfView.from_domain(issued.csrf_token)


@router.post(
    "/authenticate",
    summary="Authenticate user",
    description=(
        "Authenticate with form fields username and password. Requires the session cookie and the "
        "CSRF token as header or parameter. Rotates both on success."
    ),
    operation_id="authenticate",
    responses={
        200: {"description": "Successfully authenticated"},
        403: {"model": ErrorResponse, "description": "Missing session, invalid CSRF token or invalid credentials"},
    },
)
async def authenticate(
    app: AppDep,
    config: ConfigDep,
    session_id: SessionIdDep,
    csrf_token: CsrfTokenDep,
    response: Response,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> UserView:
    """Authenticate user and rotate session and CSRF token."""
    result = await app.authenticate(session_id, csrf_token, username, password)

    set_session_cookie(response, config, result.session_id)
    set_csrf_cookie(response, config, result.csrf_token.token)
    return UserView.from_principal(result.principal)


@router.post(
    "/logout",
    summary="End session",
    description="Invalidate the current session. Requires the CSRF token.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        403: {"model": ErrorResponse, "description": "Missing session or invalid CSRF token"},
    },
)
async def logout(
    app: AppDep, config: ConfigDep, session_id: SessionIdDep, csrf_token: CsrfTokenDep, response: Response
) -> None:
    await app.logout(session_id, csrf_token)
    clear_auth_cookies(response, config)


@router.get(
    "/current",
    summary="Get current user",
    description="Get the principal of the current session.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user"},
        403: {"model": ErrorResponse, "description": "Missing or expired session"},
    },
)
async def get_current_user(app: AppDep, principal: PrincipalDep) -> UserView:
    return await app.get_current_user(principal)
