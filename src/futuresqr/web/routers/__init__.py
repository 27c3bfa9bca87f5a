from futuresqr.web.routers.auth import router as auth_router
from futuresqr.web.routers.demo import router as demo_router
from futuresqr.web.routers.users import router as users_router

__all__ = [
    "auth_router",
    "demo_router",
    "users_router",
]
