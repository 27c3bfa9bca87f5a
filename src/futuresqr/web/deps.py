from typing import Annotated, cast

from fastapi import Depends, Request

from futuresqr.app import App
from futuresqr.config import Config
from futuresqr.core.modules.csrf.models import CONFLICTING_TOKENS
from futuresqr.core.modules.user.models import Principal

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_session_id(request: Request, config: Annotated[Config, Depends(get_config)]) -> str | None:
    """Session id from the session cookie."""
    return request.cookies.get(config.session_cookie_name) or None


async def get_csrf_token(request: Request, config: Annotated[Config, Depends(get_config)]) -> str | None:
    """CSRF token from the header, the query string or a form field.

    Channels carrying different values yield ``CONFLICTING_TOKENS``, which
    the CSRF check rejects once the session has been checked.
    """
    presented = {
        value
        for value in (
            request.headers.get(config.csrf_header_name),
            request.query_params.get(config.csrf_parameter_name),
            await _form_value(request, config.csrf_parameter_name),
        )
        if value
    }
    if len(presented) > 1:
        return CONFLICTING_TOKENS
    return presented.pop() if presented else None


async def _form_value(request: Request, name: str) -> str | None:
    if not request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPES):
        return None
    # Starlette caches the parsed form, so Form() parameters still see it
    form = await request.form()
    value = form.get(name)
    return value if isinstance(value, str) else None


async def admit_request(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    session_id: Annotated[str | None, Depends(get_session_id)],
    csrf_token: Annotated[str | None, Depends(get_csrf_token)],
) -> Principal:
    """Admit the request to a protected route, per its HTTP method."""
    return await app.admit(session_id, csrf_token, request.method)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
SessionIdDep = Annotated[str | None, Depends(get_session_id)]
CsrfTokenDep = Annotated[str | None, Depends(get_csrf_token)]
PrincipalDep = Annotated[Principal, Depends(admit_request)]
