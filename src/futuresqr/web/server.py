from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from futuresqr.app import App
from futuresqr.config import Config
from futuresqr.errors import UserError
from futuresqr.web.error_handlers import general_exception_handler, user_error_handler
from futuresqr.web.openapi import set_custom_openapi
from futuresqr.web.routers import auth_router, demo_router, users_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="FutureSQR API", lifespan=lifespan)

    # Available before startup so exception handlers can read the cookie and policy settings
    app.state.app = app_instance
    app.state.config = config

    # Cross-origin clients must send credentials for the session cookie to travel
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # Route table: every protected route declares its admission through PrincipalDep
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(demo_router)

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, config)

    return app
