import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from futuresqr.config import Config
from futuresqr.errors import (
    AccessDeniedError,
    AuthenticationError,
    AuthenticationRequiredError,
    BadCredentialsError,
    CsrfMissingError,
    NotFoundError,
    ValidationError,
)
from futuresqr.web.cookies import set_csrf_cookie

logger = structlog.get_logger(__name__)

# Denials where the request carried no challenge at all, answered by the entry-point policy
MISSING_CHALLENGE_ERRORS = (CsrfMissingError, AuthenticationRequiredError)


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    config: Config = request.app.state.config

    if isinstance(exc, AuthenticationError):
        if isinstance(exc, MISSING_CHALLENGE_ERRORS) and config.missing_challenge_policy == "redirect":
            return RedirectResponse(config.login_url, status_code=302)
        response = create_json_error_response(403, str(exc), exc.reason.replace("-", "_"))
        if isinstance(exc, BadCredentialsError) and exc.rotated_token:
            set_csrf_cookie(response, config, exc.rotated_token)
        return response

    if isinstance(exc, AccessDeniedError):
        status_code = 403
        error_type = "access_denied"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", error=str(exc))
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
