"""Session and CSRF cookies written on responses."""

from starlette.responses import Response

from futuresqr.config import Config


def set_session_cookie(response: Response, config: Config, session_id: str) -> None:
    response.set_cookie(
        key=config.session_cookie_name,
        value=session_id,
        httponly=True,
        samesite="lax",
        secure=config.secure_cookies,
        path="/",
    )


def set_csrf_cookie(response: Response, config: Config, token: str) -> None:
    # Readable by scripts so single-page clients can echo it in the header
    response.set_cookie(
        key=config.csrf_cookie_name,
        value=token,
        httponly=False,
        samesite="lax",
        secure=config.secure_cookies,
        path="/",
    )


def clear_auth_cookies(response: Response, config: Config) -> None:
    response.delete_cookie(config.session_cookie_name, path="/")
    response.delete_cookie(config.csrf_cookie_name, path="/")
