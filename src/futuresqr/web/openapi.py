from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from futuresqr.config import Config

# Routes reachable without a session
PUBLIC_ENDPOINTS = {
    ("GET", "/rest/user/csrf"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI, config: Config) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="FutureSQR API",
            version="0.1.0",
            summary="Session and CSRF protected user API",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": config.session_cookie_name,
                "description": "Session identifier, rotated on login",
            },
            "CsrfHeader": {
                "type": "apiKey",
                "in": "header",
                "name": config.csrf_header_name,
                "description": f"CSRF token, alternatively passed as the '{config.csrf_parameter_name}' parameter",
            },
        }

        # Protected routes need the session, state-changing ones the CSRF token too
        openapi_schema["security"] = [{"SessionCookie": [], "CsrfHeader": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []
                elif method.upper() == "GET":
                    operation["security"] = [{"SessionCookie": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid credentials", "type": "bad_credentials"},
                {"message": "Invalid CSRF token", "type": "csrf_invalid"},
                {"message": "No valid session", "type": "no_session"},
            ]
        }
    }
